"""Reversible encoding of arbitrary key strings as XML local names.

Error keys are field names, indexer paths (``items[0].name``), free text or
the empty whole-object key, none of which are guaranteed to be legal XML
element names.  ``encode_local_name()`` replaces every character that may
not appear at its position with ``_xHHHH_`` (or ``_xHHHHHHHH_`` above the
Basic Multilingual Plane); ``decode_name()`` reverses it.

Two extra rules make the mapping total and invertible:

* an underscore followed by ``x`` is always escaped (``_x005F_``), so a
  literal ``_x`` never appears in an encoded name;
* the empty key encodes to the reserved name ``_x_``.
"""

from __future__ import annotations

import re

EMPTY_NAME = "_x_"

# Name characters left unescaped.  expat (behind ElementTree) checks names
# against the XML 1.0 4th edition Letter/Digit tables and rejects anything
# above U+FFFF, so this is a subset of those tables: ASCII, Latin-1,
# Latin Extended-A/B, IPA, Greek, Cyrillic, kana, CJK ideographs and Hangul.
# Everything else is escaped.  ":" is excluded (local names only).
_NAME_START_CHARS = (
    "A-Z_a-z"
    "\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u00ff"
    "\u0100-\u0131\u0134-\u013e\u0141-\u0148\u014a-\u017e"
    "\u0180-\u01c3\u01cd-\u01f0\u01f4-\u01f5\u01fa-\u0217\u0250-\u02a8"
    "\u0386\u0388-\u038a\u038c\u038e-\u03a1\u03a3-\u03ce"
    "\u0401-\u040c\u040e-\u044f\u0451-\u045c\u045e-\u0481"
    "\u3041-\u3094\u30a1-\u30fa\u4e00-\u9fa5\uac00-\ud7a3"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00b7"

_NAME_START_RE = re.compile(f"[{_NAME_START_CHARS}]")
_NAME_CHAR_RE = re.compile(f"[{_NAME_CHARS}]")
_NCNAME_RE = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")
_ESCAPE_RE = re.compile(r"_x([0-9A-Fa-f]{4}|[0-9A-Fa-f]{8})_")

# XML 1.0 Char production.
_INVALID_XML_CHAR_RE = re.compile(
    "[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def encode_local_name(key: str) -> str:
    """Encode *key* as a legal XML local name.

    Every string, including ``""``, has exactly one encoding and the
    result always satisfies :func:`is_local_name`.
    """
    if key == "":
        return EMPTY_NAME

    parts: list[str] = []
    for index, char in enumerate(key):
        if char == "_" and key.startswith("x", index + 1):
            parts.append(_escape(char))
        elif index == 0 and _NAME_START_RE.fullmatch(char):
            parts.append(char)
        elif index > 0 and _NAME_CHAR_RE.fullmatch(char):
            parts.append(char)
        else:
            parts.append(_escape(char))
    return "".join(parts)


def decode_name(name: str) -> str:
    """Reverse :func:`encode_local_name`.

    Escape sequences are matched case-insensitively.  Sequences that do
    not denote a valid code point are left untouched.
    """
    if name == EMPTY_NAME:
        return ""
    if "_x" not in name:
        return name
    return _ESCAPE_RE.sub(_unescape, name)


def is_local_name(name: str) -> bool:
    """Return True if *name* is a legal XML NCName (no prefix)."""
    return _NCNAME_RE.fullmatch(name) is not None


def local_name(tag: str) -> str:
    """Remove a ``{namespace-uri}`` prefix from an ElementTree tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def find_invalid_xml_char(text: str) -> int:
    """Return the index of the first character not allowed in XML 1.0
    character data, or ``-1`` if *text* is clean."""
    match = _INVALID_XML_CHAR_RE.search(text)
    return match.start() if match else -1


def _escape(char: str) -> str:
    code_point = ord(char)
    if code_point > 0xFFFF:
        return f"_x{code_point:08X}_"
    return f"_x{code_point:04X}_"


def _unescape(match: re.Match[str]) -> str:
    code_point = int(match.group(1), 16)
    if code_point > 0x10FFFF:
        return match.group(0)
    return chr(code_point)
