"""Whole-document helpers around :class:`ErrorXmlAdapter`.

The adapter only handles the container's children.  The functions here
supply what a hosting serializer would: the container's start and end tags,
the optional XML declaration, and a parser positioned on the container.

None of them close the stream they are given.
"""

from __future__ import annotations

import io
import itertools
import xml.etree.ElementTree as ET
from typing import IO, AnyStr
from xml.sax.saxutils import XMLGenerator
from xml.sax.xmlreader import AttributesImpl

from errorkit_xml.adapter import ErrorXmlAdapter
from errorkit_xml.config import ErrorXMLConfig
from errorkit_xml.models import ErrorMapping
from errorkit_xml.xmlnames import is_local_name, local_name

__all__ = ["dump", "dumps", "load", "loads", "load_with_root"]


def dump(
    mapping: ErrorMapping,
    fp: IO[AnyStr],
    config: ErrorXMLConfig | None = None,
) -> None:
    """Write *mapping* as a complete error document to *fp*.

    *fp* may be a text or a binary stream; binary streams receive
    ``config.encoding``.
    """
    config = config or ErrorXMLConfig()
    root = config.root_element_name
    if not is_local_name(root):
        raise ValueError(f"Root element name {root!r} is not a legal XML name")

    generator = XMLGenerator(
        fp,
        encoding=config.encoding,
        short_empty_elements=config.short_empty_elements,
    )
    if config.xml_declaration:
        generator.startDocument()
    generator.startElement(root, AttributesImpl({}))
    ErrorXmlAdapter(mapping).write_xml(generator)
    generator.endElement(root)
    generator.endDocument()


def dumps(mapping: ErrorMapping, config: ErrorXMLConfig | None = None) -> str:
    """Return *mapping* as an XML string.

    >>> dumps(ErrorMapping([("Name", "Required")]))
    '<Error><Name>Required</Name></Error>'
    """
    buffer = io.StringIO()
    dump(mapping, buffer, config)
    return buffer.getvalue()


def load_with_root(fp: IO[AnyStr]) -> tuple[str, ErrorMapping]:
    """Parse an error document from *fp*.

    Returns the container's local name and the decoded mapping.  Parse
    failures raise :class:`xml.etree.ElementTree.ParseError`.
    """
    events = ET.iterparse(fp, events=("start", "end"))
    first = next(events)
    _, container = first
    adapter = ErrorXmlAdapter.empty()
    mapping = adapter.read_xml(itertools.chain([first], events))
    return local_name(container.tag), mapping


def load(fp: IO[AnyStr]) -> ErrorMapping:
    """Parse an error document from *fp* and return its mapping.

    The container's name is not checked.
    """
    _, mapping = load_with_root(fp)
    return mapping


def loads(data: str | bytes) -> ErrorMapping:
    """Parse an error document held in memory."""
    if isinstance(data, bytes):
        return load(io.BytesIO(data))
    return load(io.StringIO(data))
