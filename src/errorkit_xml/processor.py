"""ErrorXMLProcessor -- file-level read/write of error documents.

Reading runs:

1. Security scan via :class:`ErrorXMLSecurityScanner`.
2. Decode via :func:`~errorkit_xml.serialization.load_with_root`.
3. Assemble and return :class:`ReadResult`.

Writing serializes into memory first and only touches the target file once
the whole document has been produced.

The processor enforces **fail-closed** semantics: any fatal error returns a
result with error codes and an empty mapping, never a partial one.
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
import time
import xml.etree.ElementTree as ET

from errorkit_xml.config import ErrorXMLConfig
from errorkit_xml.errors import ErrorCode, ErrorDetail, XMLWriteError
from errorkit_xml.models import ErrorMapping, ReadResult, WriteResult
from errorkit_xml.security import ErrorXMLSecurityScanner
from errorkit_xml.serialization import dump, load_with_root

logger = logging.getLogger("errorkit_xml")


class ErrorXMLProcessor:
    """Read and write error documents on disk.

    Parameters
    ----------
    config:
        Wire format and reader quota configuration.  Uses defaults when
        *None*.
    """

    def __init__(self, config: ErrorXMLConfig | None = None) -> None:
        self._config = config or ErrorXMLConfig()
        self._security_scanner = ErrorXMLSecurityScanner(self._config)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(self, file_path: str) -> ReadResult:
        """Scan and decode a single error document."""
        start = time.monotonic()
        filename = os.path.basename(file_path)

        # ==============================================================
        # Step 1: Security Scan
        # ==============================================================
        scan_results = self._security_scanner.scan(file_path)
        fatal_errors = [e for e in scan_results if e.code.startswith("E_")]
        warnings = [e for e in scan_results if not e.code.startswith("E_")]

        if fatal_errors:
            return self._failed_read(
                file_path, fatal_errors, warnings, time.monotonic() - start
            )

        # ==============================================================
        # Step 2: Decode
        # ==============================================================
        try:
            with open(file_path, "rb") as fh:
                root_tag, mapping = load_with_root(fh)
        except ET.ParseError as exc:
            err = ErrorDetail(
                code=ErrorCode.E_PARSE_MALFORMED,
                message=f"Invalid XML: {exc}",
                stage="decode",
            )
            return self._failed_read(
                file_path, [err], warnings, time.monotonic() - start
            )
        except OSError as exc:
            err = ErrorDetail(
                code=ErrorCode.E_PARSE_CORRUPT,
                message=f"Cannot read file: {exc}",
                stage="decode",
            )
            return self._failed_read(
                file_path, [err], warnings, time.monotonic() - start
            )

        # ==============================================================
        # Step 3: Assemble Result
        # ==============================================================
        elapsed = time.monotonic() - start
        logger.info(
            "errorkit_xml | file=%s | root=%s | entries=%d | time=%.3fs",
            filename,
            root_tag,
            len(mapping),
            elapsed,
        )
        return ReadResult(
            file_path=file_path,
            root_tag=root_tag,
            mapping=mapping,
            entry_count=len(mapping),
            warnings=[e.code for e in warnings],
            error_details=warnings,
            processing_time_seconds=elapsed,
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write(self, mapping: ErrorMapping, file_path: str) -> WriteResult:
        """Serialize *mapping* and write it to *file_path*.

        The file is created or replaced only after serialization succeeded.
        """
        start = time.monotonic()
        filename = os.path.basename(file_path)

        warnings: list[ErrorDetail] = [
            ErrorDetail(
                code=ErrorCode.W_NULL_VALUE_FLATTENED,
                message=f"Null value for key {key!r} is written as an empty element",
                stage="encode",
                recoverable=True,
                element=key,
            )
            for key, value in mapping
            if value is None
        ]

        buffer = io.BytesIO()
        try:
            dump(mapping, buffer, self._config)
        except XMLWriteError as exc:
            err = ErrorDetail(
                code=ErrorCode.E_WRITE_INVALID_CHAR,
                message=str(exc),
                stage="encode",
                element=exc.key,
            )
            return self._failed_write(
                file_path, err, warnings, time.monotonic() - start
            )
        except (ValueError, LookupError) as exc:
            err = ErrorDetail(
                code=ErrorCode.E_WRITE_FAILED,
                message=f"Cannot serialize document: {exc}",
                stage="encode",
            )
            return self._failed_write(
                file_path, err, warnings, time.monotonic() - start
            )

        payload = buffer.getvalue()
        try:
            with open(file_path, "wb") as fh:
                fh.write(payload)
        except OSError as exc:
            err = ErrorDetail(
                code=ErrorCode.E_WRITE_FAILED,
                message=f"Cannot write file: {exc}",
                stage="write",
            )
            return self._failed_write(
                file_path, err, warnings, time.monotonic() - start
            )

        elapsed = time.monotonic() - start
        logger.info(
            "errorkit_xml | file=%s | entries=%d | bytes=%d | time=%.3fs",
            filename,
            len(mapping),
            len(payload),
            elapsed,
        )
        return WriteResult(
            file_path=file_path,
            entry_count=len(mapping),
            bytes_written=len(payload),
            warnings=[e.code for e in warnings],
            error_details=warnings,
            processing_time_seconds=elapsed,
        )

    # ------------------------------------------------------------------
    # Async wrappers
    # ------------------------------------------------------------------

    async def aread(self, file_path: str) -> ReadResult:
        """Async wrapper around :meth:`read` via ``asyncio.to_thread()``."""
        return await asyncio.to_thread(self.read, file_path)

    async def awrite(self, mapping: ErrorMapping, file_path: str) -> WriteResult:
        """Async wrapper around :meth:`write` via ``asyncio.to_thread()``."""
        return await asyncio.to_thread(self.write, mapping, file_path)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _failed_read(
        self,
        file_path: str,
        fatal_errors: list[ErrorDetail],
        warnings: list[ErrorDetail],
        elapsed: float,
    ) -> ReadResult:
        logger.error(
            "errorkit_xml | file=%s | code=%s | detail=%s",
            os.path.basename(file_path),
            fatal_errors[0].code,
            fatal_errors[0].message,
        )
        return ReadResult(
            file_path=file_path,
            errors=[e.code for e in fatal_errors],
            warnings=[e.code for e in warnings],
            error_details=fatal_errors + warnings,
            processing_time_seconds=elapsed,
        )

    def _failed_write(
        self,
        file_path: str,
        error: ErrorDetail,
        warnings: list[ErrorDetail],
        elapsed: float,
    ) -> WriteResult:
        logger.error(
            "errorkit_xml | file=%s | code=%s | detail=%s",
            os.path.basename(file_path),
            error.code,
            error.message,
        )
        return WriteResult(
            file_path=file_path,
            errors=[error.code],
            warnings=[e.code for e in warnings],
            error_details=[error] + warnings,
            processing_time_seconds=elapsed,
        )
