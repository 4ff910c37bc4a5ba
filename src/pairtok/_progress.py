"""Progress reporting hooks for the merge loop."""

import logging
import os
from dataclasses import dataclass
from typing import Callable

from .types import Digram, SymbolId

log = logging.getLogger(__name__)

_enabled: bool = True


@dataclass(frozen=True)
class MergeEvent:
    """Snapshot of the learning loop right after one promotion."""

    round_index: int
    merge: int
    merges: int
    digram: Digram
    count: int
    new_id: SymbolId
    vocab_size: int
    sequence_length: int


type MergeObserver = Callable[[MergeEvent], None]


def enable_progress() -> None:
    """Enable progress reporting for all pairtok operations."""
    global _enabled
    _enabled = True


def disable_progress() -> None:
    """Disable progress reporting for all pairtok operations."""
    global _enabled
    _enabled = False


def _is_enabled() -> bool:
    """Check if progress is enabled (respects env var override)."""
    if os.environ.get("PAIRTOK_DISABLE_PROGRESS", "").strip() == "1":
        return False
    return _enabled


def log_progress(event: MergeEvent) -> None:
    """Observer that logs one line per promotion when progress is enabled."""
    if not _is_enabled():
        return
    log.info(
        "round %d merge %d/%d: %s (count %d) -> %d, vocab size %d, sequence length %d",
        event.round_index,
        event.merge,
        event.merges,
        event.digram,
        event.count,
        event.new_id,
        event.vocab_size,
        event.sequence_length,
    )
