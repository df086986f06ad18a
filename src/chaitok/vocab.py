"""
Vocabulary table: the fixed, ordered token list and its two lookup views.
"""

import functools
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Final

from ._config import FORMAT_VERSION, PREFIX, VOCAB_SUFFIX
from .errors import VocabLoadError
from .types import Backward, Forward, TokenId, TokenStr

log = logging.getLogger(__name__)


# seed list of the reference tokenizer: order fixes the ids, keep it byte-for-byte
DEFAULT_TOKENS: Final[tuple[str, ...]] = (
    "Hello",
    "world",
    "the",
    "and",
    "or",
    "but",
    "in",
    "on",
    "at",
    "to",
    "for",
    "of",
    "with",
    "by",
    "Price",
    ":",
    "199",
    ".",
    "99",
    "INR",
    "Chai",
    "Coffee",
    "Let",
    "'s",
    "tokenize",
    "this",
    "text",
    "a",
    "an",
    "is",
    "are",
    "was",
    "were",
    "be",
    "been",
    "have",
    "has",
    "had",
    "do",
    "does",
    "did",
    "will",
    "would",
    "could",
    "should",
    "can",
    "may",
    "might",
    "must",
    "shall",
    "ought",
    " ",
    "\n",
    "\t",
    "!",
    "?",
    ",",
    ";",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    '"',
    "'",
    "-",
    "_",
    "+",
    "=",
    "0",
    "1",
    "2",
    "3",
    "4",
    "5",
    "6",
    "7",
    "8",
    "9",
)


@dataclass(frozen=True)
class Vocabulary:
    """
    Immutable bidirectional token table.

    ``forward`` maps token strings to ids and ``backward`` is its exact
    inverse. ``tokens`` keeps the configured list as given, duplicates
    included, so the table can be written back out unchanged.
    """

    tokens: tuple[TokenStr, ...]
    forward: Forward
    backward: Backward

    @property
    def size(self) -> int:
        """
        Number of distinct tokens; fallback ids start here.

        With duplicates in the token list a surviving id can be ``>= size``,
        so a fallback id may coincide with it and decode to that token.
        """
        return len(self.forward)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, tok: object) -> bool:
        return tok in self.forward

    def id_of(self, tok: TokenStr) -> TokenId | None:
        """Return the id of ``tok`` or ``None`` if it is not a vocabulary token."""
        return self.forward.get(tok)

    def token_of(self, tid: TokenId) -> TokenStr | None:
        """Return the token for ``tid`` or ``None`` if the id is not in the table."""
        return self.backward.get(tid)


def build_vocab(tokens: Iterable[TokenStr]) -> Vocabulary:
    """
    Build a vocabulary assigning id ``i`` to the ``i``-th token.

    A repeated string keeps the id of its last occurrence. Both views are
    complete before the table is returned. Never fails; an empty list gives
    an empty table.
    """
    seq = tuple(tokens)
    forward: dict[TokenStr, TokenId] = {}
    for tid, tok in enumerate(seq):
        # last write wins on duplicates
        forward[tok] = tid
    backward = {tid: tok for tok, tid in forward.items()}

    if len(forward) != len(seq):
        log.debug(
            f"vocabulary has {len(seq) - len(forward)} duplicate entries, later ids kept"
        )
    log.debug(f"built vocabulary with {len(forward)} tokens")

    return Vocabulary(
        tokens=seq,
        forward=MappingProxyType(forward),
        backward=MappingProxyType(backward),
    )


@functools.cache
def default_vocab() -> Vocabulary:
    """Return the shared vocabulary built from ``DEFAULT_TOKENS``."""
    return build_vocab(DEFAULT_TOKENS)


def _escape(tok: TokenStr) -> str:
    """Escape a token so it fits on a single ASCII line."""
    return tok.encode("unicode_escape").decode("ascii")


def _unescape(line: str) -> TokenStr:
    """Inverse of ``_escape``."""
    return line.encode("ascii").decode("unicode_escape")


def save_vocab(vocab: Vocabulary, path: str | Path) -> Path:
    """
    Persist the configured token list to a ``.vocab`` file.

    The token list is written in order with duplicates, so loading the file
    reproduces every id.

    :param vocab: Vocabulary to save.
    :param path: Output path; the ``.vocab`` suffix is applied if missing.
    :returns: The path that was written.
    """
    vocab_path = Path(path).with_suffix(VOCAB_SUFFIX)
    # create directory if does not exist
    vocab_path.parent.mkdir(parents=True, exist_ok=True)

    log.info(f"saving vocabulary to {vocab_path}")

    with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
        # header: format version
        f.write(f"{PREFIX} {FORMAT_VERSION}\n")
        f.write("---\n")
        f.write(f"{len(vocab.tokens)}\n")
        # body: one escaped token per line, id = line index
        for tok in vocab.tokens:
            f.write(f"{_escape(tok)}\n")
        f.write("---\n")

    log.debug(f"saved {len(vocab.tokens)} tokens")
    return vocab_path


def load_vocab(path: str | Path) -> Vocabulary:
    """
    Load a vocabulary from a ``.vocab`` file written by ``save_vocab``.

    :param path: Path to the ``.vocab`` file.
    :raises VocabLoadError: If the file is missing, has the wrong suffix, or is malformed.
    """
    vocab_path = Path(path)

    if not vocab_path.exists():
        raise VocabLoadError("vocab filepath does not exist", path=str(vocab_path))

    if vocab_path.suffix != VOCAB_SUFFIX:
        raise VocabLoadError("expected .vocab file", path=str(vocab_path))

    log.info(f"loading vocabulary from {vocab_path}")

    tokens: list[TokenStr] = []

    with vocab_path.open("r", encoding="utf-8") as f:
        header = f.readline().strip().split(" ")
        if len(header) != 2 or header[0] != PREFIX:
            raise VocabLoadError("missing vocabulary header", path=str(vocab_path))
        if header[1] != FORMAT_VERSION:
            raise VocabLoadError(
                "vocabulary format mismatch",
                path=str(vocab_path),
                format_mismatch=(header[1], FORMAT_VERSION),
            )

        start_marker = f.readline().strip()
        if start_marker != "---":
            raise VocabLoadError(
                f"start sequence marker missing: (expected ---) (got {start_marker})",
                path=str(vocab_path),
            )

        count_line = f.readline().strip()
        try:
            n_tokens = int(count_line)
            if n_tokens < 0:
                raise ValueError()
        except ValueError:
            raise VocabLoadError(
                f"invalid token count: {count_line}", path=str(vocab_path)
            )

        for lineno in range(n_tokens):
            line = f.readline()
            if not line:
                raise VocabLoadError(
                    f"file ended after {lineno} of {n_tokens} tokens",
                    path=str(vocab_path),
                )
            # only the line terminator goes, whitespace tokens must survive
            try:
                tokens.append(_unescape(line.rstrip("\r\n")))
            except UnicodeError as e:
                raise VocabLoadError(
                    f"invalid token escape at entry {lineno}", path=str(vocab_path)
                ) from e

        end_marker = f.readline().strip()
        if end_marker != "---":
            raise VocabLoadError(
                f"end sequence marker missing: (expected ---) (got {end_marker})",
                path=str(vocab_path),
            )

    vocab = build_vocab(tokens)
    log.info(f"vocabulary loaded successfully: {vocab.size} tokens")
    return vocab
