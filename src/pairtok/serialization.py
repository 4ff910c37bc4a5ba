"""
Saving and loading vocabularies as plain text ``.model`` files.

A model file has a small header followed by one line per symbol in id order:

.. code-block:: text

    PairTok 0.1.0
    type pair
    ---
    4
    ---
    l 97
    l 98
    c 0 1
    c 2 0

Leaves store the character's code point so that whitespace and control
characters survive the line-based format. A companion ``.vocab`` file holds a
human-readable rendering and is never read back.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Final, TextIO

from ._sanitise import render_text
from .errors import ModelLoadError, UnknownSymbolError
from .symbol import Composite, Leaf, Symbol
from .vocabulary import Vocabulary

PREFIX: Final[str] = "PairTok"
try:
    _version = version("pairtok")
except PackageNotFoundError:
    _version = "dev"

VERSION: Final[str] = _version
MODEL_TYPE: Final[str] = "pair"
MODEL_SUFFIX: Final[str] = ".model"
VOCAB_SUFFIX: Final[str] = ".vocab"

log = logging.getLogger(__name__)


def save_model(vocab: Vocabulary, file_prefix: str) -> Path:
    """
    Save a vocabulary to disk.

    Creates two files: a .model file that :func:`load_model` can restore and a
    .vocab file with human-readable symbol expansions.

    :param vocab: Vocabulary to persist.
    :param file_prefix: Path prefix for output files.
    :return: Path of the written .model file.
    """
    log.info(f"saving vocabulary to {file_prefix}")
    model_path = _save_model(vocab, file_prefix)
    _save_vocab(vocab, file_prefix)
    log.info("vocabulary saved successfully")
    return model_path


def _output_path(file_prefix: str, suffix: str) -> Path:
    """Append ``suffix`` to the prefix, keeping any dots already in its name."""
    prefix = Path(file_prefix)
    return prefix.with_name(prefix.name + suffix)


def load_model(model_filename: str) -> Vocabulary:
    """
    Load a vocabulary from a .model file.

    The file is parsed completely before the vocabulary is built, so a
    malformed file never yields a partially restored vocabulary.

    :param model_filename: Path to the .model file.
    :return: The restored vocabulary.
    :raises ModelLoadError: If the file does not exist, extension is not .model,
                            the version or type does not match, or any line is malformed.
    """
    path = Path(model_filename)

    if not path.exists():
        raise ModelLoadError("model filepath does not exist", model_path=str(path))

    if not path.suffix == MODEL_SUFFIX:
        raise ModelLoadError("expected .model file", model_path=str(path))

    log.info(f"loading model from {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            n_symbols, symbols = _read_model(f, path)
    except UnicodeDecodeError as e:
        raise ModelLoadError("model file is not valid UTF-8", model_path=str(path)) from e

    if len(symbols) != n_symbols:
        raise ModelLoadError(
            f"symbol count mismatch: (expected {n_symbols}) (got {len(symbols)})",
            model_path=str(path),
        )

    try:
        vocab = Vocabulary.from_symbols(symbols)
    except (UnknownSymbolError, ValueError) as e:
        raise ModelLoadError("inconsistent symbol table", model_path=str(path)) from e

    log.info(f"model loaded successfully: {len(vocab)} symbols")
    return vocab


def _read_model(f: TextIO, path: Path) -> tuple[int, list[Symbol]]:
    """Parse the header and symbol lines of an open .model file."""
    # verify version match
    header = f.readline().strip().split(" ")
    if len(header) != 2 or header[0] != PREFIX:
        raise ModelLoadError(
            f"expected {PREFIX} header got {' '.join(header)}",
            model_path=str(path),
        )
    if header[1] != VERSION:
        raise ModelLoadError(
            "model version mismatch", version_mismatch=(header[1], VERSION)
        )

    model_type = f.readline().strip()
    if model_type != f"type {MODEL_TYPE}":
        raise ModelLoadError(f"expected type {MODEL_TYPE} got {model_type}")

    start_marker = f.readline().strip()
    if start_marker != "---":
        raise ModelLoadError(
            f"start sequence marker missing: (expected ---) (got {start_marker})"
        )

    raw_count = f.readline().strip()
    try:
        n_symbols = int(raw_count)
        if n_symbols < 0:
            raise ValueError()
    except ValueError:
        raise ModelLoadError(f"invalid symbol count: {raw_count}")

    end_marker = f.readline().strip()
    if end_marker != "---":
        raise ModelLoadError(
            f"end sequence marker missing: (expected ---) (got {end_marker})"
        )

    log.debug(f"loading {n_symbols} symbols")
    symbols = [_parse_symbol(line) for line in f if line.strip()]
    return n_symbols, symbols


def _parse_symbol(line: str) -> Symbol:
    """Parse one ``l <codepoint>`` or ``c <left> <right>`` line."""
    fields = line.split()
    try:
        match fields:
            case ["l", codepoint]:
                return Leaf(chr(int(codepoint)))
            case ["c", left, right]:
                return Composite(int(left), int(right))
    except (ValueError, OverflowError) as e:
        raise ModelLoadError(f"invalid symbol format at line: {line.strip()}") from e
    raise ModelLoadError(f"invalid symbol format at line: {line.strip()}")


def _save_model(vocab: Vocabulary, file_prefix: str) -> Path:
    """Persist the symbol table to a .model file."""
    model_path = _output_path(file_prefix, MODEL_SUFFIX)
    # create directory if does not exist
    model_path.parent.mkdir(parents=True, exist_ok=True)

    log.debug(f"saving {len(vocab)} symbols to {model_path}")

    with model_path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(f"{PREFIX} {VERSION}\n")
        f.write(f"type {MODEL_TYPE}\n")
        f.write("---\n")
        f.write(f"{len(vocab)}\n")
        f.write("---\n")
        for sid in range(len(vocab)):
            sym = vocab.symbols[sid]
            if isinstance(sym, Leaf):
                f.write(f"l {ord(sym.char)}\n")
            else:
                f.write(f"c {sym.left} {sym.right}\n")

    return model_path


def _save_vocab(vocab: Vocabulary, file_prefix: str) -> None:
    """Persist human-readable symbol expansions to a .vocab file."""
    vocab_path = _output_path(file_prefix, VOCAB_SUFFIX)
    vocab_path.parent.mkdir(parents=True, exist_ok=True)

    log.debug(f"saving vocab to {vocab_path}")

    with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
        for sid in range(len(vocab)):
            sym = vocab.symbols[sid]
            text = render_text(vocab.decode_text([sid]))
            # composite: show derivation from its operands
            if isinstance(sym, Composite):
                left, right = (
                    render_text(vocab.decode_text([sym.left])),
                    render_text(vocab.decode_text([sym.right])),
                )
                f.write(f"[{sid}] [{left}][{right}] -> {text}\n")
            else:
                f.write(f"[{sid}] {text}\n")
