"""Merge loop that learns composite symbols from a text corpus."""

from collections import Counter
from dataclasses import dataclass
import logging
from typing import Final, TYPE_CHECKING

from ._digrams import count_digrams, merge_digram, top_n_digrams
from ._progress import MergeEvent
from .errors import InvalidOperandError, TrainingError
from .types import Digram, SymbolId

if TYPE_CHECKING:
    from ._progress import MergeObserver
    from .vocabulary import Vocabulary

# digrams promoted per round
DEFAULT_REPLACEMENTS: Final[int] = 1
# a digram must occur more than this many times to be promoted
DEFAULT_CUTOFF: Final[int] = 1

log = logging.getLogger(__name__)


@dataclass
class LearningResult:
    """Results from one learning run."""

    tokens: list[SymbolId]
    n_merges_completed: int
    n_rounds: int
    stopped_early: bool


def learn(
    vocab: "Vocabulary",
    text: str,
    merges: int,
    replacements: int = DEFAULT_REPLACEMENTS,
    cutoff: int = DEFAULT_CUTOFF,
    observer: "MergeObserver | None" = None,
    verbose: bool = False,
) -> LearningResult:
    """
    Seed ``vocab`` with the characters of ``text`` and promote frequent digrams.

    Each round recounts every digram in the current sequence, selects up to
    ``replacements`` of them occurring more than ``cutoff`` times, and promotes
    them from least to most frequent. A promotion registers the composite
    symbol and rewrites the sequence in one greedy left-to-right pass. Learning
    stops after ``merges`` promotions or when a round finds nothing to promote.

    :param vocab: Vocabulary to populate. It may already contain symbols.
    :param text: Training corpus.
    :param merges: Maximum number of promotions across all rounds.
    :param replacements: Number of digrams selected per round.
    :param cutoff: Exclusive minimum count for a digram to be selected.
    :param observer: Optional callback invoked after every promotion.
    :param verbose: Log each promotion when ``True``.
    :return: Final symbol sequence and loop statistics.
    :raises TrainingError: If any parameter is out of range.
    :raises InvalidOperandError: If a selected digram refers to an unregistered id.
    """
    if merges < 0:
        raise TrainingError("merges must be non-negative", merges=merges)
    if replacements < 1:
        raise TrainingError(
            "replacements must be at least 1", replacements=replacements
        )
    if cutoff < 0:
        raise TrainingError("cutoff must be non-negative", cutoff=cutoff)

    log.info(
        f"learning with {merges} merges, {replacements} replacements "
        f"and a cutoff of {cutoff}"
    )

    tokens = vocab.seed(text)
    # scratch buffers reused across rounds
    scratch: list[SymbolId] = []
    counts: Counter[Digram] = Counter()

    n_merges = 0
    n_rounds = 0
    stopped_early = False

    while n_merges < merges:
        count_digrams(tokens, counts)
        top_digrams = top_n_digrams(counts, replacements, cutoff)
        if not top_digrams:
            stopped_early = True
            break

        n_rounds += 1
        # least frequent first: each rewrite changes what the next one can match
        while top_digrams and n_merges < merges:
            digram, count = top_digrams.pop()
            new_id = vocab.try_compose(*digram)
            if new_id is None:
                raise InvalidOperandError(
                    "digram operand not in vocabulary", digram=digram
                )

            tokens, scratch = merge_digram(tokens, digram, new_id, out=scratch), tokens
            n_merges += 1

            if verbose:
                log.info(
                    "merge %d/%d: %s -> %d",
                    n_merges,
                    merges,
                    digram,
                    new_id,
                )

            if observer is not None:
                observer(
                    MergeEvent(
                        round_index=n_rounds,
                        merge=n_merges,
                        merges=merges,
                        digram=digram,
                        count=count,
                        new_id=new_id,
                        vocab_size=len(vocab),
                        sequence_length=len(tokens),
                    )
                )

    log.debug(
        f"learning finished after {n_merges} merges in {n_rounds} rounds, "
        f"{len(tokens)} symbols remain"
    )

    return LearningResult(
        tokens=tokens,
        n_merges_completed=n_merges,
        n_rounds=n_rounds,
        stopped_early=stopped_early,
    )


__all__ = ["DEFAULT_CUTOFF", "DEFAULT_REPLACEMENTS", "LearningResult", "learn"]
