"""Unit tests for errorkit_xml.adapter -- ErrorXmlAdapter read/write."""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET
from xml.sax.saxutils import XMLGenerator

import pytest

from errorkit_xml.adapter import ErrorXmlAdapter
from errorkit_xml.errors import XMLWriteError
from errorkit_xml.models import ErrorMapping
from errorkit_xml.protocols import Unwrappable, unwrap_value


def _events(xml_text: str):
    return ET.iterparse(io.StringIO(xml_text), events=("start", "end"))


def _write(mapping: ErrorMapping, short_empty_elements: bool = True) -> str:
    buffer = io.StringIO()
    generator = XMLGenerator(buffer, short_empty_elements=short_empty_elements)
    ErrorXmlAdapter(mapping).write_xml(generator)
    return buffer.getvalue()


# ======================================================================
# Construction
# ======================================================================


class TestConstruction:
    """Tests for constructors and trivial accessors."""

    def test_wraps_given_mapping(self, sample_mapping):
        adapter = ErrorXmlAdapter(sample_mapping)
        assert adapter.mapping is sample_mapping

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            ErrorXmlAdapter(None)  # type: ignore[arg-type]

    def test_empty_factory_creates_fresh_mapping(self):
        first = ErrorXmlAdapter.empty()
        second = ErrorXmlAdapter.empty()
        assert len(first.mapping) == 0
        assert first.mapping is not second.mapping

    def test_no_schema(self):
        assert ErrorXmlAdapter.empty().get_schema() is None


# ======================================================================
# read_xml
# ======================================================================


class TestReadXml:
    """Tests for decoding a container element."""

    def test_two_entries(self, sample_error_xml):
        mapping = ErrorXmlAdapter.empty().read_xml(_events(sample_error_xml))
        assert mapping.items() == [("Name", "Required"), ("Age", "Must be a number")]

    def test_self_closing_container(self):
        mapping = ErrorXmlAdapter.empty().read_xml(_events("<Error/>"))
        assert len(mapping) == 0

    def test_empty_container_with_whitespace(self):
        mapping = ErrorXmlAdapter.empty().read_xml(_events("<Error>\n  \n</Error>"))
        assert len(mapping) == 0

    def test_document_order(self):
        xml_text = "<Error><c>3</c><a>1</a><b>2</b></Error>"
        mapping = ErrorXmlAdapter.empty().read_xml(_events(xml_text))
        assert mapping.keys() == ["c", "a", "b"]

    def test_indented_document(self, sample_error_xml_pretty):
        mapping = ErrorXmlAdapter.empty().read_xml(_events(sample_error_xml_pretty))
        assert mapping.items() == [
            ("FieldName", "Error message text"),
            ("AnotherField", "Another message"),
        ]

    def test_names_are_decoded(self):
        xml_text = (
            "<Error><first_x0020_name>x</first_x0020_name>"
            "<_x0031_stField>y</_x0031_stField><_x_>z</_x_></Error>"
        )
        mapping = ErrorXmlAdapter.empty().read_xml(_events(xml_text))
        assert mapping.keys() == ["first name", "1stField", ""]

    def test_self_closing_child_reads_empty_string(self):
        mapping = ErrorXmlAdapter.empty().read_xml(_events("<Error><Name/></Error>"))
        assert mapping.items() == [("Name", "")]

    def test_entities_resolved(self):
        xml_text = "<Error><A>x &amp; &lt;y&gt; \"q\"</A></Error>"
        mapping = ErrorXmlAdapter.empty().read_xml(_events(xml_text))
        assert mapping.items() == [("A", 'x & <y> "q"')]

    def test_nested_markup_kept_as_text(self):
        xml_text = "<Error><A>x<b>y</b>z</A></Error>"
        mapping = ErrorXmlAdapter.empty().read_xml(_events(xml_text))
        assert mapping.items() == [("A", "x<b>y</b>z")]

    def test_namespaced_children_use_local_name(self):
        xml_text = '<Error xmlns="urn:errors"><Name>Required</Name></Error>'
        mapping = ErrorXmlAdapter.empty().read_xml(_events(xml_text))
        assert mapping.items() == [("Name", "Required")]

    def test_appends_to_existing_entries(self):
        mapping = ErrorMapping([("Existing", "kept")])
        ErrorXmlAdapter(mapping).read_xml(_events("<Error><New>added</New></Error>"))
        assert mapping.keys() == ["Existing", "New"]

    def test_stops_after_container(self):
        events = _events("<Envelope><Error><A>1</A></Error><Tail/></Envelope>")
        event, envelope = next(events)
        assert envelope.tag == "Envelope"
        mapping = ErrorXmlAdapter.empty().read_xml(events)
        assert mapping.items() == [("A", "1")]
        event, element = next(events)
        assert (event, element.tag) == ("start", "Tail")


class TestReadXmlMalformed:
    """Malformed input must raise, never yield a partial mapping."""

    def test_mismatched_tags(self):
        adapter = ErrorXmlAdapter.empty()
        with pytest.raises(ET.ParseError):
            adapter.read_xml(_events("<Error><Name>Required</Error>"))
        assert len(adapter.mapping) == 0

    def test_unclosed_child_at_end_of_input(self):
        adapter = ErrorXmlAdapter.empty()
        with pytest.raises(ET.ParseError):
            adapter.read_xml(_events("<Error><Name>Required</Name><Age>x"))
        assert len(adapter.mapping) == 0

    def test_pull_parser_runs_out_of_events(self):
        parser = ET.XMLPullParser(events=("start", "end"))
        parser.feed("<Error><Name>Required</Name><Age>")
        adapter = ErrorXmlAdapter.empty()
        with pytest.raises(ET.ParseError):
            adapter.read_xml(parser.read_events())
        assert len(adapter.mapping) == 0

    def test_no_element(self):
        with pytest.raises(ET.ParseError):
            ErrorXmlAdapter.empty().read_xml(iter([]))

    def test_positioned_on_end_event(self):
        element = ET.Element("Error")
        with pytest.raises(ET.ParseError):
            ErrorXmlAdapter.empty().read_xml(iter([("end", element)]))

    def test_invalid_token(self):
        with pytest.raises(ET.ParseError):
            ErrorXmlAdapter.empty().read_xml(_events("<Error><1bad>x</1bad></Error>"))


# ======================================================================
# write_xml
# ======================================================================


class TestWriteXml:
    """Tests for encoding mapping entries as child elements."""

    def test_children_only(self, sample_mapping):
        assert _write(sample_mapping) == (
            "<Name>Required</Name><Age>Must be a number</Age>"
        )

    def test_empty_mapping_writes_nothing(self):
        assert _write(ErrorMapping()) == ""

    def test_names_encoded(self):
        mapping = ErrorMapping([("first name", "x"), ("field[0]", "y"), ("", "z")])
        assert _write(mapping) == (
            "<first_x0020_name>x</first_x0020_name>"
            "<field_x005B_0_x005D_>y</field_x005B_0_x005D_>"
            "<_x_>z</_x_>"
        )

    def test_value_escaped(self):
        mapping = ErrorMapping([("A", 'a < b & "c"')])
        assert _write(mapping) == '<A>a &lt; b &amp; "c"</A>'

    def test_none_value_writes_empty_element(self):
        mapping = ErrorMapping([("A", None)])
        assert _write(mapping) == "<A/>"
        assert _write(mapping, short_empty_elements=False) == "<A></A>"

    def test_invalid_character_rejected_before_writing(self):
        mapping = ErrorMapping([("A", "ok"), ("B", "bad\x01value")])
        buffer = io.StringIO()
        with pytest.raises(XMLWriteError) as exc_info:
            ErrorXmlAdapter(mapping).write_xml(XMLGenerator(buffer))
        assert exc_info.value.key == "B"
        assert exc_info.value.position == 3
        assert buffer.getvalue() == ""

    def test_closed_stream_propagates(self, sample_mapping):
        buffer = io.StringIO()
        generator = XMLGenerator(buffer)
        buffer.close()
        with pytest.raises(ValueError):
            ErrorXmlAdapter(sample_mapping).write_xml(generator)


# ======================================================================
# Unwrap
# ======================================================================


class TestUnwrap:
    """Tests for the Unwrappable capability."""

    def test_returns_wrapped_mapping(self, sample_mapping):
        adapter = ErrorXmlAdapter(sample_mapping)
        assert adapter.unwrap(ErrorMapping) is sample_mapping

    def test_declared_type_ignored(self, sample_mapping):
        adapter = ErrorXmlAdapter(sample_mapping)
        assert adapter.unwrap(object) is sample_mapping

    def test_is_unwrappable(self):
        assert isinstance(ErrorXmlAdapter.empty(), Unwrappable)

    def test_unwrap_value(self, sample_mapping):
        adapter = ErrorXmlAdapter(sample_mapping)
        assert unwrap_value(adapter, ErrorMapping) is sample_mapping
        assert unwrap_value("plain", str) == "plain"
