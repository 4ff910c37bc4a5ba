"""Command line interface: learn a vocabulary from a file or inspect a saved one."""

import argparse
import logging
import sys
from pathlib import Path

from ._sanitise import render_text
from .errors import PairTokError
from .tokenizer import PairTokenizer, from_pretrained
from .trainer import DEFAULT_CUTOFF, DEFAULT_REPLACEMENTS

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pairtok",
        description="Learn and inspect greedy pair-merging vocabularies.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    learn_p = sub.add_parser("learn", help="Learn a vocabulary from a UTF-8 text file.")
    learn_p.add_argument("corpus", type=Path, help="Path to the training text.")
    learn_p.add_argument(
        "--merges",
        type=int,
        default=1_000,
        help="Maximum number of digram promotions (default: 1,000).",
    )
    learn_p.add_argument(
        "--replacements",
        type=int,
        default=DEFAULT_REPLACEMENTS,
        help=f"Digrams promoted per round (default: {DEFAULT_REPLACEMENTS}).",
    )
    learn_p.add_argument(
        "--cutoff",
        type=int,
        default=DEFAULT_CUTOFF,
        help=f"Exclusive minimum digram count (default: {DEFAULT_CUTOFF}).",
    )
    learn_p.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output path prefix for .model/.vocab files (default: next to the corpus).",
    )
    learn_p.add_argument(
        "--verbose", action="store_true", help="Log every promotion."
    )
    learn_p.add_argument(
        "--progress",
        action="store_true",
        help="Report round, counts and sequence length after every promotion.",
    )

    inspect_p = sub.add_parser("inspect", help="Show the newest tokens of a saved model.")
    inspect_p.add_argument("model", type=str, help="Path to a .model file.")
    inspect_p.add_argument(
        "--top", type=int, default=100, help="Number of tokens to show (default: 100)."
    )
    return parser


def _run_learn(args: argparse.Namespace) -> None:
    text = args.corpus.read_text(encoding="utf-8")

    tokenizer = PairTokenizer()
    encoded = tokenizer.train(
        text,
        args.merges,
        replacements=args.replacements,
        cutoff=args.cutoff,
        verbose=args.verbose,
        show_progress=args.progress,
    )

    prefix = args.output or str(args.corpus.with_suffix(""))
    model_path = tokenizer.save(prefix)

    ratio = len(text) / len(encoded) if encoded else 0.0
    print(f"vocabulary size: {tokenizer.vocab_size():,}")
    print(f"characters: {len(text):,} -> symbols: {len(encoded):,} ({ratio:.2f}x)")
    print(f"model saved to {model_path}")


def _run_inspect(args: argparse.Namespace) -> None:
    tokenizer = from_pretrained(args.model)
    print(f"vocabulary size: {tokenizer.vocab_size():,}")
    for token in tokenizer.top_tokens(args.top):
        print(render_text(token))


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``pairtok`` console script."""
    args = _build_parser().parse_args(argv)

    level = getattr(logging, args.log_level)
    # promotions and progress are logged at INFO
    if getattr(args, "verbose", False) or getattr(args, "progress", False):
        level = min(level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.command == "learn":
            _run_learn(args)
        else:
            _run_inspect(args)
    except (PairTokError, OSError, UnicodeDecodeError) as e:
        log.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
