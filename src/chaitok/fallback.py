"""
Fallback ids for characters that are not vocabulary tokens.

A character outside the vocabulary is emitted on its own with id
``N + value``, where ``N`` is the vocabulary size. What ``value`` is depends
on the mode:

- ``codepoint``: the Unicode scalar value, so every character, astral ones
  included, is one fallback id.
- ``utf16``: the UTF-16 code unit. Text is walked one code unit at a time, so
  an astral character becomes its two surrogates. This reproduces the ids of
  the reference web tokenizer, which indexes JavaScript strings.
"""

from enum import Enum
from typing import Final

from .errors import ConfigError, VocabularyError

MAX_CODEPOINT: Final[int] = 0x10FFFF
REPLACEMENT_CHAR: Final[str] = "\ufffd"

_UNIT_MASK: Final[int] = 0xFFFF


class FallbackMode(str, Enum):
    """Named fallback id schemes."""

    CODEPOINT = "codepoint"
    UTF16 = "utf16"

    @classmethod
    def get(cls, name: "str | FallbackMode") -> "FallbackMode":
        """Get fallback mode by name (case-insensitive)."""
        if isinstance(name, FallbackMode):
            return name
        try:
            return cls[name.upper().replace("-", "")]
        except KeyError:
            raise ConfigError(
                "unknown fallback mode",
                invalid_name=name,
                available=[mode.value for mode in cls],
            )


def list_fallback_modes() -> list[str]:
    """Return available fallback mode names."""
    return [mode.value for mode in FallbackMode]


def to_code_units(text: str) -> str:
    """
    Split astral characters into surrogate pairs.

    The result has one ``str`` element per UTF-16 code unit; BMP characters
    are unchanged.
    """
    units = []
    for c in text:
        cp = ord(c)
        if cp > _UNIT_MASK:
            cp -= 0x10000
            units.append(chr(0xD800 + (cp >> 10)))
            units.append(chr(0xDC00 + (cp & 0x3FF)))
        else:
            units.append(c)
    return "".join(units)


def from_code_units(units: str) -> str:
    """Join surrogate pairs back into astral characters; lone surrogates are kept."""
    return units.encode("utf-16-le", "surrogatepass").decode(
        "utf-16-le", "surrogatepass"
    )


def fallback_id(c: str, vocab_size: int) -> int:
    """Return the fallback id of the single character (or code unit) ``c``."""
    return vocab_size + ord(c)


def fallback_char(
    tid: int,
    vocab_size: int,
    mode: FallbackMode = FallbackMode.CODEPOINT,
    errors: str = "replace",
) -> str:
    """
    Return the character a fallback id stands for.

    In ``utf16`` mode the value is reduced to 16 bits first, so every id maps
    to some code unit. In ``codepoint`` mode values above U+10FFFF have no
    character, nor do negative values (an id below N that lost its token to a
    later duplicate): ``errors="replace"`` gives U+FFFD, ``errors="strict"`` raises.

    :raises VocabularyError: For an unrepresentable value under ``errors="strict"``.
    """
    value = tid - vocab_size
    if mode is FallbackMode.UTF16:
        return chr(value & _UNIT_MASK)
    if value < 0 or value > MAX_CODEPOINT:
        if errors == "strict":
            raise VocabularyError(
                "fallback id has no unicode character",
                vocab_size=vocab_size,
                invalid_id=tid,
            )
        return REPLACEMENT_CHAR
    return chr(value)


__all__ = [
    "FallbackMode",
    "list_fallback_modes",
    "to_code_units",
    "from_code_units",
    "fallback_id",
    "fallback_char",
]
