"""Pre-flight security scanner for error documents.

Rejects dangerous or oversized XML before it reaches the adapter.  Checks
file extension, size, emptiness, DTD / entity declarations (billion laughs
and XXE prevention), well-formedness and nesting depth, and warns when the
root element is not the configured container name.
"""

from __future__ import annotations

import io
import os
import xml.etree.ElementTree as ET

from errorkit_xml.config import ErrorXMLConfig
from errorkit_xml.errors import ErrorCode, ErrorDetail
from errorkit_xml.xmlnames import local_name


class ErrorXMLSecurityScanner:
    """Run pre-flight security checks on an error document.

    Returns a list of errors/warnings.  Fatal errors (``E_*`` codes) mean
    the document should not be decoded.
    """

    def __init__(self, config: ErrorXMLConfig) -> None:
        self.config = config

    def scan(self, file_path: str) -> list[ErrorDetail]:
        """Run all checks against a file on disk."""
        # --- 1. Extension check ---
        if not file_path.lower().endswith(".xml"):
            return [
                ErrorDetail(
                    code=ErrorCode.E_SECURITY_BAD_EXTENSION,
                    message=f"File does not have .xml extension: {file_path}",
                    stage="security",
                )
            ]

        # --- 2. File existence ---
        if not os.path.isfile(file_path):
            return [
                ErrorDetail(
                    code=ErrorCode.E_PARSE_CORRUPT,
                    message=f"File not found or not readable: {file_path}",
                    stage="security",
                )
            ]

        # --- 3. Size limit, before reading anything ---
        file_size = os.path.getsize(file_path)
        size_error = self._check_size(file_size)
        if size_error is not None:
            return [size_error]

        try:
            with open(file_path, "rb") as fh:
                raw = fh.read()
        except OSError as exc:
            return [
                ErrorDetail(
                    code=ErrorCode.E_PARSE_CORRUPT,
                    message=f"Cannot read file: {exc}",
                    stage="security",
                )
            ]

        return self.scan_bytes(raw)

    def scan_bytes(self, data: bytes) -> list[ErrorDetail]:
        """Run the content checks against an in-memory document."""
        errors: list[ErrorDetail] = []

        # --- 1. Empty payload ---
        if not data.strip():
            errors.append(
                ErrorDetail(
                    code=ErrorCode.E_PARSE_EMPTY,
                    message="Document is empty",
                    stage="security",
                )
            )
            return errors

        # --- 2. Size limit ---
        size_error = self._check_size(len(data))
        if size_error is not None:
            errors.append(size_error)
            return errors

        # --- 3. DTD / entity declarations ---
        if self.config.forbid_dtd:
            raw_upper = data.upper()
            for marker in (b"<!DOCTYPE", b"<!ENTITY"):
                if marker in raw_upper:
                    errors.append(
                        ErrorDetail(
                            code=ErrorCode.E_SECURITY_DTD_PROHIBITED,
                            message=(
                                f"Document contains {marker.decode()} "
                                "(DTD processing is prohibited)"
                            ),
                            stage="security",
                        )
                    )
                    return errors

        # --- 4. Well-formedness and depth, in one streaming pass ---
        depth = 0
        root_tag: str | None = None
        try:
            for event, element in ET.iterparse(
                io.BytesIO(data), events=("start", "end")
            ):
                if event == "end":
                    depth -= 1
                    continue
                depth += 1
                if root_tag is None:
                    root_tag = local_name(element.tag)
                if depth > self.config.max_depth:
                    errors.append(
                        ErrorDetail(
                            code=ErrorCode.E_SECURITY_DEPTH_EXCEEDED,
                            message=(
                                f"XML nesting depth exceeds limit of "
                                f"{self.config.max_depth}"
                            ),
                            stage="security",
                            element=local_name(element.tag),
                        )
                    )
                    return errors
        except ET.ParseError as exc:
            errors.append(
                ErrorDetail(
                    code=ErrorCode.E_PARSE_MALFORMED,
                    message=f"Invalid XML: {exc}",
                    stage="security",
                )
            )
            return errors

        # --- 5. Root name (warning, not fatal) ---
        if root_tag != self.config.root_element_name:
            errors.append(
                ErrorDetail(
                    code=ErrorCode.W_ROOT_NAME_MISMATCH,
                    message=(
                        f"Root element <{root_tag}> is not "
                        f"<{self.config.root_element_name}>"
                    ),
                    stage="security",
                    recoverable=True,
                    element=root_tag,
                )
            )

        return errors

    def _check_size(self, size: int) -> ErrorDetail | None:
        if size == 0:
            return ErrorDetail(
                code=ErrorCode.E_PARSE_EMPTY,
                message="Document is empty (0 bytes)",
                stage="security",
            )
        max_bytes = self.config.max_file_size_mb * 1024 * 1024
        if size > max_bytes:
            return ErrorDetail(
                code=ErrorCode.E_SECURITY_TOO_LARGE,
                message=(
                    f"Document size {size} bytes exceeds limit of "
                    f"{max_bytes} bytes ({self.config.max_file_size_mb} MB)"
                ),
                stage="security",
            )
        return None
