"""
Digram operations used by the merge loop: counting, ranking and rewriting.
"""

from collections import Counter

from .types import Digram, DigramCount, SymbolId


def count_digrams(
    tokens: list[SymbolId], counts: Counter[Digram] | None = None
) -> Counter[Digram]:
    """
    Count every adjacent pair of ids in the sequence.

    :param tokens: Current symbol sequence.
    :param counts: Optional counter to clear and reuse instead of allocating a new one.
    :return: Mapping of digram to number of occurrences.
    """
    if counts is None:
        counts = Counter()
    else:
        counts.clear()
    counts.update(zip(tokens, tokens[1:]))
    return counts


def top_n_digrams(
    counts: Counter[Digram] | dict[Digram, int], n: int, cutoff: int
) -> list[DigramCount]:
    """
    Return the ``n`` most frequent digrams whose count is strictly greater than ``cutoff``.

    The result is ordered by count descending. Equal counts are ordered by
    ascending digram so that selection is reproducible across runs.
    """
    if n <= 0:
        return []
    eligible = [(digram, count) for digram, count in counts.items() if count > cutoff]
    eligible.sort(key=lambda item: (-item[1], item[0]))
    return eligible[:n]


def merge_digram(
    tokens: list[SymbolId],
    target: Digram,
    new_id: SymbolId,
    out: list[SymbolId] | None = None,
) -> list[SymbolId]:
    """
    Replace occurrences of ``target`` with ``new_id`` in one left-to-right pass.

    Matching is greedy and non-overlapping: after a match the scan resumes two
    positions later, so a run like ``a a a`` merged on ``(a, a)`` leaves the
    last ``a`` unmerged.

    :param tokens: Sequence to rewrite. Left untouched.
    :param target: The digram to replace.
    :param new_id: Id of the composite symbol standing for ``target``.
    :param out: Optional scratch list to clear and fill instead of allocating.
    :return: The rewritten sequence.
    """
    if out is None:
        out = []
    else:
        out.clear()

    left, right = target
    n = len(tokens)
    i = 0
    while i < n:
        if i < n - 1 and tokens[i] == left and tokens[i + 1] == right:
            out.append(new_id)
            i += 2
        else:
            out.append(tokens[i])
            i += 1

    return out
