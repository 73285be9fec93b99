"""Shared test fixtures for errorkit-xml tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from errorkit_xml.config import ErrorXMLConfig
from errorkit_xml.models import ErrorMapping


@pytest.fixture
def default_config() -> ErrorXMLConfig:
    """Return a default ErrorXMLConfig."""
    return ErrorXMLConfig()


@pytest.fixture
def tmp_xml_file(tmp_path: Path):
    """Factory fixture to write XML string to a temp .xml file and return the path."""

    def _write(xml_content: str, filename: str = "errors.xml") -> str:
        file_path = tmp_path / filename
        file_path.write_text(xml_content, encoding="utf-8")
        return str(file_path)

    return _write


@pytest.fixture
def sample_mapping() -> ErrorMapping:
    """The two-entry mapping used throughout the wire format examples."""
    return ErrorMapping([("Name", "Required"), ("Age", "Must be a number")])


@pytest.fixture
def sample_error_xml() -> str:
    """Serialized form of ``sample_mapping``."""
    return "<Error><Name>Required</Name><Age>Must be a number</Age></Error>"


@pytest.fixture
def sample_error_xml_pretty() -> str:
    """Indented error document as a hosting serializer might produce it."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<Error>
  <FieldName>Error message text</FieldName>
  <AnotherField>Another message</AnotherField>
</Error>"""
