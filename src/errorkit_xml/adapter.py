"""ErrorXmlAdapter -- XML wire adapter for an :class:`ErrorMapping`.

Each mapping entry becomes one child element of a container element::

    <Error>
      <Name>Required</Name>
      <first_x0020_name>Too long</first_x0020_name>
    </Error>

The container's own start and end tags belong to the caller (see
:mod:`errorkit_xml.serialization`).  ``write_xml()`` emits only the
children; ``read_xml()`` consumes the container from its start event
through its end event.

Reading works on ElementTree pull events, i.e. the iterator returned by
``ET.iterparse(source, events=("start", "end"))`` or
``XMLPullParser.read_events()``.  Writing works on a SAX content handler
such as :class:`xml.sax.saxutils.XMLGenerator`.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from xml.sax.handler import ContentHandler
from xml.sax.xmlreader import AttributesImpl

from errorkit_xml.errors import XMLWriteError
from errorkit_xml.models import ErrorMapping
from errorkit_xml.xmlnames import (
    decode_name,
    encode_local_name,
    find_invalid_xml_char,
    local_name,
)

logger = logging.getLogger("errorkit_xml")


class ErrorXmlAdapter:
    """Serialize an :class:`ErrorMapping` to and from XML child elements.

    Parameters
    ----------
    mapping:
        The mapping to wrap.  Decoded entries are appended to it; use
        :meth:`empty` to start from a fresh mapping.

    Notes
    -----
    A ``None`` value is written as an empty element and therefore reads
    back as ``""``.  Null and empty values cannot be told apart on the wire.
    """

    def __init__(self, mapping: ErrorMapping) -> None:
        if mapping is None:
            raise TypeError("mapping must not be None")
        self._mapping = mapping

    @classmethod
    def empty(cls) -> ErrorXmlAdapter:
        """Return an adapter wrapping a new, empty mapping."""
        return cls(ErrorMapping())

    @property
    def mapping(self) -> ErrorMapping:
        return self._mapping

    def get_schema(self) -> None:
        """No XML schema is published for the error container."""
        return None

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def read_xml(self, events: Iterable[tuple[str, ET.Element]]) -> ErrorMapping:
        """Append one entry per child of the container and return the mapping.

        *events* must be positioned so that the next ``start`` event is
        the container's.  Events other than ``start``/``end`` are skipped.
        Iteration stops right after the container's ``end`` event, so the
        same iterator can continue to be used for sibling content.

        Raises
        ------
        xml.etree.ElementTree.ParseError
            If the input is malformed (propagated from the parser) or the
            events end before the container is closed.
        """
        events = iter(events)
        container = _read_start_element(events)

        pending: list[tuple[str, str]] = []
        depth = 0
        for event, element in events:
            if event == "start":
                depth += 1
            elif event == "end":
                if depth == 0:
                    break
                depth -= 1
                if depth == 0:
                    key = decode_name(local_name(element.tag))
                    pending.append((key, _read_inner_content(element)))
        else:
            raise ET.ParseError(
                f"Unexpected end of input inside <{local_name(container.tag)}>"
            )

        for key, value in pending:
            self._mapping.add(key, value)

        logger.debug(
            "errorkit_xml | read | root=%s | entries=%d",
            local_name(container.tag),
            len(pending),
        )
        return self._mapping

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def write_xml(self, writer: ContentHandler) -> None:
        """Write one child element per entry, in order, to *writer*.

        Values are checked before anything is written; a value containing
        a character that XML 1.0 cannot represent raises
        :class:`~errorkit_xml.errors.XMLWriteError`.  Errors raised by the
        writer or its stream propagate unchanged.
        """
        entries = self._mapping.items()
        for key, value in entries:
            if value is None:
                continue
            position = find_invalid_xml_char(value)
            if position >= 0:
                raise XMLWriteError(key, position, value[position])

        no_attributes = AttributesImpl({})
        for key, value in entries:
            name = encode_local_name(key)
            writer.startElement(name, no_attributes)
            if value is not None:
                writer.characters(value)
            writer.endElement(name)

        logger.debug("errorkit_xml | write | entries=%d", len(entries))

    # ------------------------------------------------------------------
    # Unwrappable
    # ------------------------------------------------------------------

    def unwrap(self, declared_type: type) -> ErrorMapping:
        """Return the wrapped mapping; *declared_type* is not consulted."""
        return self._mapping


def _read_start_element(events) -> ET.Element:
    """Consume events up to and including the container's start event."""
    for event, element in events:
        if event == "start":
            return element
        if event == "end":
            raise ET.ParseError(
                f"Expected a start tag, found the end of <{local_name(element.tag)}>"
            )
    raise ET.ParseError("No element found")


def _read_inner_content(element: ET.Element) -> str:
    """Return the content of *element* as one string.

    Plain text comes back unescaped.  Nested elements, if any, are
    serialized back to markup in place.
    """
    parts = [element.text or ""]
    for child in element:
        parts.append(ET.tostring(child, encoding="unicode"))
    return "".join(parts)
