"""Configuration model for errorkit-xml.

Provides ``ErrorXMLConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import codecs
import json
import pathlib

import yaml
from pydantic import BaseModel, field_validator

from errorkit_xml.xmlnames import is_local_name

# XMLGenerator writes characters it cannot encode as bytes, not as
# character references, so only encodings covering all of Unicode are safe.
_UNICODE_ENCODINGS = frozenset(
    {
        "utf-8",
        "utf-8-sig",
        "utf-16",
        "utf-16-le",
        "utf-16-be",
        "utf-32",
        "utf-32-le",
        "utf-32-be",
    }
)


class ErrorXMLConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``ErrorXMLConfig.from_file(path)``.
    """

    # --- Identity ---
    parser_version: str = "errorkit_xml:1.0.0"

    # --- Wire format ---
    root_element_name: str = "Error"
    encoding: str = "utf-8"
    xml_declaration: bool = False
    short_empty_elements: bool = True

    # --- Reader quotas ---
    max_file_size_mb: int = 10
    max_depth: int = 32
    forbid_dtd: bool = True

    @field_validator("root_element_name")
    @classmethod
    def _check_root_element_name(cls, value: str) -> str:
        if not is_local_name(value):
            raise ValueError(f"Root element name {value!r} is not a legal XML name")
        return value

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codec_name = codecs.lookup(value).name
        except LookupError:
            raise ValueError(f"Unknown encoding {value!r}") from None
        if codec_name not in _UNICODE_ENCODINGS:
            raise ValueError(
                f"Encoding {value!r} cannot represent every character; "
                "use a UTF-8, UTF-16 or UTF-32 encoding"
            )
        return value

    @classmethod
    def from_file(cls, path: str) -> ErrorXMLConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
