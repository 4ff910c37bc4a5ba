"""Unit tests for the merge loop."""

import pytest

from pairtok import (
    Composite,
    InvalidOperandError,
    MergeEvent,
    TrainingError,
    Vocabulary,
    learn,
)


# Reference scenario
# ---------------------------------------------------------------------------


def test_learn_reference_text_converges_to_five_symbols():
    """'aaabdaaabac' with 10 merges and default selection ends with 5 symbols."""
    vocab = Vocabulary()
    tokens = vocab.learn("aaabdaaabac", merges=10)
    assert len(tokens) == 5
    assert vocab.decode_text(tokens) == "aaabdaaabac"


def test_learn_reference_text_exact_sequence():
    """The promoted composites and final sequence are reproducible."""
    vocab = Vocabulary()
    result = learn(vocab, "aaabdaaabac", 10)
    # a=0 b=1 d=2 c=3, then aa=4, ab=5, aaab=6
    assert vocab[4] == Composite(0, 0)
    assert vocab[5] == Composite(0, 1)
    assert vocab[6] == Composite(4, 5)
    assert result.tokens == [6, 2, 6, 0, 3]
    assert result.n_merges_completed == 3
    assert result.n_rounds == 3
    assert result.stopped_early


# Termination
# ---------------------------------------------------------------------------


def test_learn_zero_merges_returns_seed_sequence():
    """With no merge budget the output is the per-character sequence."""
    vocab = Vocabulary()
    result = learn(vocab, "hello", 0)
    assert result.tokens == [0, 1, 2, 2, 3]
    assert result.n_merges_completed == 0
    assert not result.stopped_early
    assert len(vocab) == 4


def test_learn_stops_early_when_nothing_exceeds_cutoff():
    """Learning halts before the budget once no digram is eligible."""
    vocab = Vocabulary()
    result = learn(vocab, "abab", 50, cutoff=1)
    # (a, b) occurs twice and is promoted, then (ab, ab) occurs once
    assert result.tokens == [2, 2]
    assert result.n_merges_completed == 1
    assert result.stopped_early
    assert len(vocab) == 3


def test_learn_respects_merge_budget_within_a_round():
    """The budget can stop a round before all selected digrams are promoted."""
    vocab = Vocabulary()
    result = learn(vocab, "ababcbc", 1, replacements=2, cutoff=1)
    assert result.n_merges_completed == 1
    assert len(vocab) == 4
    assert not result.stopped_early


def test_learn_empty_text():
    """Empty input has no digrams."""
    vocab = Vocabulary()
    result = learn(vocab, "", 10)
    assert result.tokens == []
    assert result.stopped_early


# Ordering
# ---------------------------------------------------------------------------


def test_learn_promotes_selected_digrams_from_least_frequent():
    """Within a round the last-ranked digram is promoted first."""
    vocab = Vocabulary()
    # a=0 b=1 c=2; (a, b) and (b, c) both occur twice, (a, b) ranks first
    result = learn(vocab, "ababcbc", 2, replacements=2, cutoff=1)
    assert vocab[3] == Composite(1, 2)
    assert vocab[4] == Composite(0, 1)
    assert result.tokens == [4, 0, 3, 3]


# Round trip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    [
        "the quick brown fox jumps over the lazy dog. the end.",
        "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
        "café naïve 日本語 🎉 café naïve 日本語 🎉",
        "line one\nline two\n\tline three\r\n",
    ],
)
def test_learn_then_decode_roundtrip(text):
    """Decoding the learned sequence reproduces the input."""
    vocab = Vocabulary()
    tokens = vocab.learn(text, merges=500, replacements=4, cutoff=0)
    assert vocab.decode_text(tokens) == text
    assert len(tokens) < len(text)


def test_learn_compresses_to_single_symbol_with_zero_cutoff():
    """With cutoff 0 every remaining digram is eligible."""
    vocab = Vocabulary()
    tokens = vocab.learn("abcdefgh", merges=100, replacements=1, cutoff=0)
    assert len(tokens) == 1
    assert vocab.expand(tokens[0]) == "abcdefgh"


# Observer
# ---------------------------------------------------------------------------


def test_learn_reports_each_promotion_to_observer():
    """The observer receives one event per promotion."""
    events: list[MergeEvent] = []
    vocab = Vocabulary()
    learn(vocab, "aaabdaaabac", 10, observer=events.append)
    assert [e.merge for e in events] == [1, 2, 3]
    assert [e.round_index for e in events] == [1, 2, 3]
    assert events[0].digram == (0, 0)
    assert events[0].count == 4
    assert events[0].new_id == 4
    assert events[0].sequence_length == 9
    assert events[-1].vocab_size == 7
    assert events[-1].sequence_length == 5
    assert all(e.merges == 10 for e in events)


# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "kwargs",
    [
        {"merges": -1},
        {"merges": 5, "replacements": 0},
        {"merges": 5, "cutoff": -1},
    ],
)
def test_learn_rejects_invalid_parameters(kwargs):
    """Out-of-range parameters raise before any symbol is registered."""
    vocab = Vocabulary()
    with pytest.raises(TrainingError):
        learn(vocab, "abcabc", **kwargs)
    assert len(vocab) == 0


def test_learn_raises_when_compose_fails(monkeypatch):
    """A failed composition is an integrity fault."""
    vocab = Vocabulary()
    monkeypatch.setattr(vocab, "try_compose", lambda left, right: None)
    with pytest.raises(InvalidOperandError) as exc_info:
        learn(vocab, "aaaa", 3)
    assert exc_info.value.digram == (0, 0)
