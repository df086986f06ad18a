"""Fixed tokenizer constants and environment overrides."""

import os
from typing import Final

# longest token the encoder will try to match at one position
MAX_TOKEN_LEN: Final[int] = 20

VOCAB_SUFFIX: Final[str] = ".vocab"
PREFIX: Final[str] = "ChaiTok"
FORMAT_VERSION: Final[str] = "1"

ENV_VOCAB: Final[str] = "CHAITOK_VOCAB"
ENV_FALLBACK: Final[str] = "CHAITOK_FALLBACK"


def _env_vocab_path() -> str | None:
    """Return the vocabulary file named by the environment, if any."""
    path = os.environ.get(ENV_VOCAB, "").strip()
    return path or None


def _env_fallback() -> str:
    """Return the fallback mode name from the environment (default: codepoint)."""
    return os.environ.get(ENV_FALLBACK, "").strip() or "codepoint"
