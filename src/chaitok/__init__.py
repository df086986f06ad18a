"""ChaiTok: greedy longest-match tokenization over a fixed vocabulary."""

from .errors import ChaiTokError, ConfigError, VocabLoadError, VocabularyError
from .factory import from_vocab_file, get_tokenizer
from .fallback import FallbackMode, list_fallback_modes
from .parallel import ParallelMode, list_parallel_modes
from .parse import format_ids, parse_ids
from .tokenizer import EncodeResult, Tokenizer, decode, encode
from .vocab import (
    DEFAULT_TOKENS,
    Vocabulary,
    build_vocab,
    default_vocab,
    load_vocab,
    save_vocab,
)
from ._config import MAX_TOKEN_LEN

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("chaitok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "EncodeResult",
    "Vocabulary",
    "FallbackMode",
    "ParallelMode",
    "ChaiTokError",
    "ConfigError",
    "VocabularyError",
    "VocabLoadError",
    "DEFAULT_TOKENS",
    "MAX_TOKEN_LEN",
    "build_vocab",
    "default_vocab",
    "load_vocab",
    "save_vocab",
    "encode",
    "decode",
    "parse_ids",
    "format_ids",
    "get_tokenizer",
    "from_vocab_file",
    "list_fallback_modes",
    "list_parallel_modes",
]
