"""Pydantic models for the errorkit-xml package.

Contains the wire-facing ``ErrorEntry`` / ``ErrorMapping`` pair and the
``ReadResult`` / ``WriteResult`` models returned by
:class:`~errorkit_xml.processor.ErrorXMLProcessor`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import overload

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from errorkit_xml.errors import ErrorDetail

# Key under which errors that belong to the whole object (rather than a
# single field) are collected.
MODEL_ERROR_KEY = ""


class ErrorEntry(BaseModel):
    """A single key/value pair of an :class:`ErrorMapping`.

    ``value`` holds the already-flattened message text, or ``None`` when
    the collaborator recorded the key without a message.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: str | None = None


class ErrorMapping:
    """Ordered, appendable sequence of :class:`ErrorEntry` items.

    Keys are not required to be unique; the mapping behaves like a list of
    pairs so that XML child order survives a round-trip exactly.
    """

    __slots__ = ("_entries",)

    def __init__(
        self, pairs: Iterable[ErrorEntry | tuple[str, str | None]] | None = None
    ) -> None:
        self._entries: list[ErrorEntry] = []
        for pair in pairs or ():
            if isinstance(pair, ErrorEntry):
                self._entries.append(pair)
            else:
                key, value = pair
                self.add(key, value)

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[ErrorEntry | tuple[str, str | None]]
    ) -> ErrorMapping:
        return cls(pairs)

    @classmethod
    def from_field_errors(
        cls,
        field_errors: Mapping[str, Sequence[str]],
        separator: str = " ",
    ) -> ErrorMapping:
        """Flatten ``{field: [message, ...]}`` into one entry per field.

        Messages for a field are joined with *separator*.  Fields without
        any messages are skipped.  Use :data:`MODEL_ERROR_KEY` as the field
        name for object-level errors.
        """
        mapping = cls()
        for field, messages in field_errors.items():
            if isinstance(messages, str):
                messages = [messages]
            if not messages:
                continue
            mapping.add(field, separator.join(messages))
        return mapping

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, key: str, value: str | None) -> None:
        """Append a ``(key, value)`` entry."""
        self._entries.append(ErrorEntry(key=key, value=value))

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[ErrorEntry]:
        """Copy of the entries in insertion order."""
        return list(self._entries)

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def items(self) -> list[tuple[str, str | None]]:
        return [(entry.key, entry.value) for entry in self._entries]

    def to_dict(self) -> dict[str, str | None]:
        """Return a plain dict; later entries win on duplicate keys."""
        return dict(self.items())

    def __iter__(self) -> Iterator[tuple[str, str | None]]:
        for entry in self._entries:
            yield entry.key, entry.value

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @overload
    def __getitem__(self, index: int) -> ErrorEntry: ...

    @overload
    def __getitem__(self, index: slice) -> list[ErrorEntry]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorMapping):
            return self._entries == other._entries
        if isinstance(other, list):
            if not all(isinstance(item, tuple) and len(item) == 2 for item in other):
                return False
            return self.items() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ErrorMapping({self.items()!r})"


class ReadResult(BaseModel):
    """Result of reading an error document via ``ErrorXMLProcessor.read()``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_path: str
    root_tag: str | None = None
    mapping: ErrorMapping = Field(default_factory=ErrorMapping)
    entry_count: int = 0
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ErrorDetail] = []
    processing_time_seconds: float = 0.0

    @field_serializer("mapping", when_used="json")
    def _serialize_mapping(self, mapping: ErrorMapping) -> list[dict[str, str | None]]:
        return [entry.model_dump() for entry in mapping.entries]


class WriteResult(BaseModel):
    """Result of writing an error document via ``ErrorXMLProcessor.write()``."""

    file_path: str
    entry_count: int = 0
    bytes_written: int = 0
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ErrorDetail] = []
    processing_time_seconds: float = 0.0
