"""
Greedy longest-match tokenizer over a fixed vocabulary.
"""

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Final

from ._config import MAX_TOKEN_LEN
from ._decorators import measure_time
from .errors import ConfigError, VocabularyError
from .fallback import (
    FallbackMode,
    fallback_char,
    fallback_id,
    from_code_units,
    to_code_units,
)
from .parallel import ParallelMode, ParallelStrategy
from .types import Forward, TokenId, TokenStr
from .vocab import Vocabulary, default_vocab

DECODE_ERRORS: Final[tuple[str, ...]] = ("replace", "strict")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodeResult:
    """Parallel token and id sequences produced by one encode call."""

    tokens: list[TokenStr]
    ids: list[TokenId]

    def __len__(self) -> int:
        return len(self.ids)

    def pairs(self) -> list[tuple[TokenStr, TokenId]]:
        """Return ``(token, id)`` pairs in order."""
        return list(zip(self.tokens, self.ids))


class Tokenizer:
    """
    Encode text into vocabulary tokens and decode ids back into text.

    At each position the longest vocabulary entry of at most
    ``max_token_len`` characters is taken. A character that starts no entry
    is emitted on its own with a fallback id (see ``chaitok.fallback``).

    The vocabulary is never modified, so one instance can be shared across
    threads.
    """

    def __init__(
        self,
        vocab: Vocabulary | None = None,
        *,
        max_token_len: int = MAX_TOKEN_LEN,
        fallback: FallbackMode | str = FallbackMode.CODEPOINT,
    ) -> None:
        """
        :param vocab: Vocabulary to tokenize against (default: the built-in seed list).
        :param max_token_len: Longest match tried at one position.
        :param fallback: Fallback id scheme, "codepoint" or "utf16".
        :raises ConfigError: If ``max_token_len`` is below 1 or ``fallback`` is unknown.
        """
        if max_token_len < 1:
            raise ConfigError(f"max_token_len must be at least 1 (got {max_token_len})")

        self.vocab: Vocabulary = vocab if vocab is not None else default_vocab()
        self.max_token_len = max_token_len
        self.fallback = FallbackMode.get(fallback)
        # keys in the same units the encoder walks
        self._lookup: Forward = self._build_lookup()

        log.debug(
            f"tokenizer ready: {self.vocab.size} tokens, "
            f"max_token_len={self.max_token_len}, fallback={self.fallback.value}"
        )

    def vocab_size(self) -> int:
        """Return the number of distinct tokens in the vocabulary."""
        return self.vocab.size

    def encode(self, text: str) -> EncodeResult:
        """
        Encode text into tokens and ids.

        Never fails: every character is covered either by a vocabulary token
        or by a fallback id. The tokens joined in order give back ``text``
        (in ``utf16`` mode, after surrogate pairs are re-joined).
        """
        utf16 = self.fallback is FallbackMode.UTF16
        units = to_code_units(text) if utf16 else text
        n = self.vocab.size

        tokens: list[TokenStr] = []
        ids: list[TokenId] = []

        i = 0
        while i < len(units):
            match = self._longest_match(units, i)
            if match is None:
                # unknown character: emit it alone
                piece = units[i]
                tid = fallback_id(piece, n)
            else:
                piece, tid = match
            tokens.append(from_code_units(piece) if utf16 else piece)
            ids.append(tid)
            i += len(piece)

        return EncodeResult(tokens=tokens, ids=ids)

    def decode(self, ids: Iterable[TokenId], errors: str = "replace") -> str:
        """
        Decode a sequence of ids back into text.

        Ids in the vocabulary give their token, any other id is read as a
        fallback id. Implausible fallback ids are not rejected; they decode to
        whatever character they denote.

        :param errors: "replace" (default) turns ids with no character into
            U+FFFD, "strict" raises instead.
        :raises VocabularyError: If an id is negative, or has no character under "strict".
        :raises ConfigError: If ``errors`` is not a known policy.
        """
        if errors not in DECODE_ERRORS:
            raise ConfigError(
                "unknown decode error policy",
                invalid_name=errors,
                available=list(DECODE_ERRORS),
            )

        n = self.vocab.size
        parts: list[str] = []
        for tid in ids:
            if tid < 0:
                raise VocabularyError("token id must be non-negative", invalid_id=tid)
            tok = self.vocab.backward.get(tid)
            if tok is None:
                tok = fallback_char(tid, n, self.fallback, errors)
            parts.append(tok)

        text = "".join(parts)
        if self.fallback is FallbackMode.UTF16:
            # surrogate halves from consecutive fallback ids pair up again
            return from_code_units(text)
        return text

    @measure_time
    def encode_batch(
        self,
        texts: list[str],
        num_workers: int | None = None,
        parallel_mode: ParallelMode | ParallelStrategy = ParallelMode.AUTO,
    ) -> list[EncodeResult]:
        """
        Encode multiple texts, optionally across a thread pool.

        :param texts: Text inputs to encode.
        :param num_workers: Worker count for batch-level parallel mode.
        :param parallel_mode: "auto", "batch" or "off".
        :returns: Encode results in input order.
        """
        return self._run_batch(self.encode, texts, num_workers, parallel_mode)

    @measure_time
    def decode_batch(
        self,
        id_batch: list[Sequence[TokenId]],
        num_workers: int | None = None,
        parallel_mode: ParallelMode | ParallelStrategy = ParallelMode.AUTO,
    ) -> list[str]:
        """
        Decode multiple id sequences, optionally across a thread pool.

        :raises VocabularyError: If any sequence holds a negative id.
        """
        return self._run_batch(self.decode, id_batch, num_workers, parallel_mode)

    def _run_batch(
        self,
        fn: Callable,
        items: list,
        num_workers: int | None,
        parallel_mode: ParallelMode | ParallelStrategy,
    ) -> list:
        """Apply ``fn`` to every item according to ``parallel_mode``."""
        if not items:
            return []

        mode = ParallelMode.get(parallel_mode)

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)

        def process_batch() -> list:
            """Run all items concurrently; map keeps input order."""
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(fn, items))

        match mode:
            case ParallelMode.OFF:
                return [fn(item) for item in items]
            case ParallelMode.BATCH:
                return process_batch()
            case ParallelMode.AUTO:
                if len(items) <= 1 or workers == 1:
                    return [fn(item) for item in items]
                return process_batch()

    def _longest_match(self, units: str, start: int) -> tuple[str, TokenId] | None:
        """Return the longest vocabulary entry starting at ``start``, if any."""
        window = min(self.max_token_len, len(units) - start)
        for length in range(window, 0, -1):
            piece = units[start : start + length]
            tid = self._lookup.get(piece)
            if tid is not None:
                return piece, tid
        return None

    def _build_lookup(self) -> Forward:
        """
        Return the forward map keyed by the units the encoder walks.

        In utf16 mode an astral token and its spelled-out surrogate pair share
        one key; the higher id wins, as it would for a repeated token.
        """
        if self.fallback is FallbackMode.UTF16:
            lookup: dict[TokenStr, TokenId] = {}
            for tok, tid in self.vocab.forward.items():
                key = to_code_units(tok)
                if tid > lookup.get(key, -1):
                    lookup[key] = tid
            return lookup
        return self.vocab.forward


def encode(
    text: str, vocab: Vocabulary | None = None
) -> tuple[list[TokenStr], list[TokenId]]:
    """
    Encode ``text`` against ``vocab`` with code point fallback ids.

    .. code-block:: python

        tokens, ids = encode("Hello, world!", build_vocab(["Hello", "world", ",", "!", " "]))
        # tokens == ["Hello", ",", " ", "world", "!"], ids == [0, 2, 4, 1, 3]
    """
    result = Tokenizer(vocab).encode(text)
    return result.tokens, result.ids


def decode(ids: Iterable[TokenId], vocab: Vocabulary | None = None) -> str:
    """Decode ``ids`` against ``vocab`` with code point fallback ids."""
    return Tokenizer(vocab).decode(ids)


__all__ = ["EncodeResult", "Tokenizer", "encode", "decode"]
