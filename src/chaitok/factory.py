"""Factory functions for creating tokenizers."""

from collections.abc import Iterable
from pathlib import Path

from ._config import MAX_TOKEN_LEN, _env_fallback
from .fallback import FallbackMode, list_fallback_modes
from .tokenizer import Tokenizer
from .vocab import Vocabulary, build_vocab, default_vocab, load_vocab


def get_tokenizer(
    tokens: Iterable[str] | Vocabulary | None = None,
    *,
    fallback: FallbackMode | str | None = None,
    max_token_len: int = MAX_TOKEN_LEN,
) -> Tokenizer:
    """
    Create a tokenizer over the built-in or a custom vocabulary.

    :param tokens: Ordered token list or a built ``Vocabulary``. Defaults to
                   the built-in seed list.
    :param fallback: Fallback id scheme. Defaults to ``$CHAITOK_FALLBACK``,
                     or "codepoint" when unset.
    :param max_token_len: Longest match tried at one position.
    :raises ConfigError: If the fallback mode is unknown or ``max_token_len`` < 1.

    .. code-block:: python

        # built-in vocabulary
        tokenizer = get_tokenizer()

        # custom vocabulary, ids compatible with the web tokenizer
        tokenizer = get_tokenizer(["Hello", "world", " "], fallback="utf16")
    """
    if tokens is None:
        vocab = default_vocab()
    elif isinstance(tokens, Vocabulary):
        vocab = tokens
    else:
        vocab = build_vocab(tokens)

    mode = FallbackMode.get(fallback if fallback is not None else _env_fallback())
    return Tokenizer(vocab, max_token_len=max_token_len, fallback=mode)


def from_vocab_file(
    path: str | Path,
    *,
    fallback: FallbackMode | str | None = None,
    max_token_len: int = MAX_TOKEN_LEN,
) -> Tokenizer:
    """
    Load a vocabulary from disk and wrap it in a tokenizer.

    :param path: Path to the ``.vocab`` file.
    :raises VocabLoadError: If the file is missing or malformed.
    """
    return get_tokenizer(
        load_vocab(path), fallback=fallback, max_token_len=max_token_len
    )


__all__ = ["get_tokenizer", "from_vocab_file", "list_fallback_modes"]
