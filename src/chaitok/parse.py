"""Lenient parsing of human-entered id lists."""

import regex as re

from .types import TokenId

# leading integer of an entry, the way a form field reads "12abc" as 12
_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def parse_ids(raw: str, sep: str = ",") -> list[TokenId]:
    """
    Parse a separated list of ids such as ``"0, 2, 4"``.

    Each entry is trimmed and its leading integer is taken. Entries without
    one, and negative values, are dropped without complaint, so the result
    is always a valid decoder input.

    .. code-block:: python

        parse_ids("0, 2,, x, 4abc, -1")  # [0, 2, 4]
    """
    ids: list[TokenId] = []
    for entry in raw.split(sep):
        m = _LEADING_INT.match(entry.strip())
        if m is None:
            continue
        tid = int(m.group())
        if tid >= 0:
            ids.append(tid)
    return ids


def format_ids(ids: list[TokenId], sep: str = ", ") -> str:
    """Render ids in the form ``parse_ids`` reads back."""
    return sep.join(str(tid) for tid in ids)


__all__ = ["parse_ids", "format_ids"]
