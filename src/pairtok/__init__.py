"""PairTok: greedy pair-merging tokenization."""

from ._digrams import count_digrams, merge_digram, top_n_digrams
from ._progress import MergeEvent, disable_progress, enable_progress, log_progress
from .errors import (
    InvalidOperandError,
    ModelLoadError,
    PairTokError,
    TrainingError,
    UnknownSymbolError,
)
from .serialization import load_model, save_model
from .symbol import Composite, Leaf, Symbol
from .tokenizer import PairTokenizer, from_pretrained
from .trainer import LearningResult, learn
from .vocabulary import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pairtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Vocabulary",
    "Symbol",
    "Leaf",
    "Composite",
    "PairTokenizer",
    "LearningResult",
    "MergeEvent",
    "PairTokError",
    "UnknownSymbolError",
    "InvalidOperandError",
    "TrainingError",
    "ModelLoadError",
    "learn",
    "count_digrams",
    "top_n_digrams",
    "merge_digram",
    "save_model",
    "load_model",
    "from_pretrained",
    "enable_progress",
    "disable_progress",
    "log_progress",
]
