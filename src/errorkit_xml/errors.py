"""Error codes, structured error model and exceptions for errorkit-xml.

``ErrorCode`` contains all error/warning codes reported by the file-level
processor and the security scanner.  ``ErrorDetail`` is the structured
error model carried in results.

The adapter and the ``dump``/``load`` functions do not translate failures:
malformed input surfaces as :class:`xml.etree.ElementTree.ParseError` and
stream failures as the ``OSError``/``ValueError`` the stream raised.  The
only exception defined here is :class:`XMLWriteError`, raised when a value
cannot be represented in XML 1.0 at all.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for error-document reading and writing.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    # Security
    E_SECURITY_TOO_LARGE = "E_SECURITY_TOO_LARGE"
    E_SECURITY_BAD_EXTENSION = "E_SECURITY_BAD_EXTENSION"
    E_SECURITY_DTD_PROHIBITED = "E_SECURITY_DTD_PROHIBITED"
    E_SECURITY_DEPTH_EXCEEDED = "E_SECURITY_DEPTH_EXCEEDED"

    # Parse
    E_PARSE_EMPTY = "E_PARSE_EMPTY"
    E_PARSE_MALFORMED = "E_PARSE_MALFORMED"
    E_PARSE_CORRUPT = "E_PARSE_CORRUPT"

    # Write
    E_WRITE_INVALID_CHAR = "E_WRITE_INVALID_CHAR"
    E_WRITE_FAILED = "E_WRITE_FAILED"

    # Warnings (non-fatal)
    W_ROOT_NAME_MISMATCH = "W_ROOT_NAME_MISMATCH"
    W_NULL_VALUE_FLATTENED = "W_NULL_VALUE_FLATTENED"


class ErrorDetail(BaseModel):
    """Structured error with code, message, and element location.

    ``code`` is typed as ``str`` so it accepts any ``ErrorCode`` member.
    ``element`` names the XML element (or mapping key) involved, if any.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False
    element: str | None = None


class XMLWriteError(ValueError):
    """A mapping entry cannot be written as well-formed XML 1.0."""

    def __init__(self, key: str, position: int, char: str) -> None:
        self.key = key
        self.position = position
        self.char = char
        super().__init__(
            f"Value for key {key!r} contains character U+{ord(char):04X} "
            f"at position {position}, which is not allowed in XML 1.0"
        )
