"""
Utilities for converting tokens to displayable strings.
"""

import unicodedata


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cs etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_token(tok: str) -> str:
    """
    Render a token for terminal display.

    Control characters (newline, tab, ...) and lone surrogates are replaced
    by their ``\\uXXXX`` escapes.
    """
    return _escape_ctrl_chars(tok)
