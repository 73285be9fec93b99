"""errorkit-xml -- XML wire adapter for validation error mappings.

Public API re-exports for convenient access.
"""

from errorkit_xml.adapter import ErrorXmlAdapter
from errorkit_xml.config import ErrorXMLConfig
from errorkit_xml.errors import ErrorCode, ErrorDetail, XMLWriteError
from errorkit_xml.models import (
    MODEL_ERROR_KEY,
    ErrorEntry,
    ErrorMapping,
    ReadResult,
    WriteResult,
)
from errorkit_xml.processor import ErrorXMLProcessor
from errorkit_xml.protocols import Unwrappable, unwrap_value
from errorkit_xml.security import ErrorXMLSecurityScanner
from errorkit_xml.serialization import dump, dumps, load, load_with_root, loads
from errorkit_xml.xmlnames import decode_name, encode_local_name, is_local_name

__all__ = [
    "ErrorXmlAdapter",
    "ErrorXMLProcessor",
    "ErrorXMLConfig",
    "ErrorXMLSecurityScanner",
    "ErrorCode",
    "ErrorDetail",
    "XMLWriteError",
    "MODEL_ERROR_KEY",
    "ErrorEntry",
    "ErrorMapping",
    "ReadResult",
    "WriteResult",
    "Unwrappable",
    "unwrap_value",
    "dump",
    "dumps",
    "load",
    "loads",
    "load_with_root",
    "encode_local_name",
    "decode_name",
    "is_local_name",
]
