"""Command line interface: encode text, decode ids, inspect the vocabulary."""

import argparse
import logging
import sys

from ._config import _env_vocab_path
from ._sanitise import render_token
from .errors import ChaiTokError
from .factory import from_vocab_file, get_tokenizer
from .fallback import FallbackMode, list_fallback_modes, to_code_units
from .parse import format_ids, parse_ids
from .tokenizer import Tokenizer
from .vocab import save_vocab

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chaitok",
        description="Greedy longest-match tokenizer over a fixed vocabulary.",
    )
    parser.add_argument(
        "--vocab",
        default=None,
        help="path to a .vocab file (default: $CHAITOK_VOCAB or the built-in list)",
    )
    parser.add_argument(
        "--fallback",
        choices=list_fallback_modes(),
        default=None,
        help="fallback id scheme (default: $CHAITOK_FALLBACK or codepoint)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="increase log verbosity"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="encode text into tokens and ids")
    enc.add_argument("text", nargs="?", help="text to encode (default: stdin)")
    enc.add_argument(
        "--ids-only", action="store_true", help="print only the comma-separated ids"
    )

    dec = sub.add_parser("decode", help="decode comma-separated ids into text")
    dec.add_argument("ids", nargs="?", help='ids such as "0, 2, 4" (default: stdin)')

    voc = sub.add_parser("vocab", help="list the vocabulary")
    voc.add_argument("--save", metavar="PATH", help="write the vocabulary to PATH")

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_tokenizer(args: argparse.Namespace) -> Tokenizer:
    path = args.vocab or _env_vocab_path()
    if path:
        return from_vocab_file(path, fallback=args.fallback)
    return get_tokenizer(fallback=args.fallback)


def _cmd_encode(tokenizer: Tokenizer, args: argparse.Namespace) -> None:
    text = args.text if args.text is not None else sys.stdin.read()
    result = tokenizer.encode(text)

    if args.ids_only:
        print(format_ids(result.ids))
        return

    print(f"Token -> ID mapping ({len(result)} tokens):")
    for tok, tid in result.pairs():
        print(f'  "{render_token(tok)}" -> {tid}')
    print(f"Encoded sequence: [{format_ids(result.ids)}]")
    if tokenizer.fallback is FallbackMode.UTF16:
        print(f"{len(to_code_units(text))} code units")
    else:
        print(f"{len(text)} characters")


def _cmd_decode(tokenizer: Tokenizer, args: argparse.Namespace) -> None:
    raw = args.ids if args.ids is not None else sys.stdin.read()
    ids = parse_ids(raw)
    log.debug(f"decoding {len(ids)} ids")
    print(tokenizer.decode(ids))


def _cmd_vocab(tokenizer: Tokenizer, args: argparse.Namespace) -> None:
    vocab = tokenizer.vocab
    if args.save:
        path = save_vocab(vocab, args.save)
        print(f"saved {vocab.size} tokens to {path}")
        return
    for tid, tok in sorted(vocab.backward.items()):
        print(f"[{tid}] {render_token(tok)}")


_COMMANDS = {
    "encode": _cmd_encode,
    "decode": _cmd_decode,
    "vocab": _cmd_vocab,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        tokenizer = _load_tokenizer(args)
        _COMMANDS[args.command](tokenizer, args)
    except ChaiTokError as e:
        print(f"error: {str(e).strip()}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
