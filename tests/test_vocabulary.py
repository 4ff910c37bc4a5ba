"""Unit tests for the vocabulary registry: ids, dedup, composition and decoding."""

import pytest

from pairtok import Composite, Leaf, UnknownSymbolError, Vocabulary


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def vocab():
    """Return a vocabulary seeded with 'a', 'b', 'c' and the composite 'ab'."""
    v = Vocabulary()
    v.seed("abc")
    v.try_compose(0, 1)
    return v


# Registration
# ---------------------------------------------------------------------------


def test_register_assigns_dense_ids():
    """Distinct symbols get ids 0..size-1 in insertion order."""
    v = Vocabulary()
    ids = [v.register(Leaf(c)) for c in "xyz"]
    ids.append(v.register(Composite(0, 1)))
    ids.append(v.register(Composite(3, 2)))
    assert ids == [0, 1, 2, 3, 4]
    assert len(v) == 5
    assert sorted(v.symbols) == list(range(5))


def test_register_deduplicates_structurally_equal_symbols():
    """Registering an equal symbol again returns the same id and does not grow."""
    v = Vocabulary()
    first = v.register(Leaf("q"))
    comp = v.register(Composite(first, first))
    assert v.register(Leaf("q")) == first
    assert v.register(Composite(first, first)) == comp
    assert len(v) == 2


def test_reverse_mapping_matches_forward_mapping(vocab):
    """ids and symbols are inverse mappings."""
    for sid, sym in vocab.symbols.items():
        assert vocab.ids[sym] == sid


def test_leaf_requires_single_character():
    """A leaf wraps exactly one character."""
    with pytest.raises(ValueError):
        Leaf("ab")
    with pytest.raises(ValueError):
        Leaf("")


# Seeding
# ---------------------------------------------------------------------------


def test_seed_returns_one_id_per_character():
    """Repeated characters reuse their leaf id."""
    v = Vocabulary()
    assert v.seed("hello") == [0, 1, 2, 2, 3]
    assert len(v) == 4
    assert v[2] == Leaf("l")


def test_seed_iterates_code_points():
    """Non-ASCII characters are single leaves."""
    v = Vocabulary()
    tokens = v.seed("日本🎉日")
    assert tokens == [0, 1, 2, 0]
    assert v[2] == Leaf("🎉")


def test_seed_empty_text():
    """Empty text yields an empty sequence and an empty vocabulary."""
    v = Vocabulary()
    assert v.seed("") == []
    assert len(v) == 0


# Composition
# ---------------------------------------------------------------------------


def test_try_compose_registers_composite(vocab):
    """Composing registered operands returns the composite id."""
    new_id = vocab.try_compose(3, 2)
    assert new_id == 4
    assert vocab[4] == Composite(3, 2)


def test_try_compose_reuses_existing_composite(vocab):
    """Composing the same pair twice returns the existing id."""
    assert vocab.try_compose(0, 1) == 3
    assert len(vocab) == 4


def test_try_compose_rejects_unknown_operand(vocab):
    """An unregistered operand yields None and registers nothing."""
    assert vocab.try_compose(0, 99) is None
    assert vocab.try_compose(99, 0) is None
    assert len(vocab) == 4


# Expansion
# ---------------------------------------------------------------------------


def test_expand_one_appends_to_buffer(vocab):
    """Leaves append their char, composites expand left then right."""
    buffer = [">"]
    vocab.expand_one(3, buffer)
    vocab.expand_one(2, buffer)
    assert "".join(buffer) == ">abc"


def test_expand_one_unknown_id_raises(vocab):
    """Expanding an unregistered id is an integrity error."""
    with pytest.raises(UnknownSymbolError) as exc_info:
        vocab.expand_one(42, [])
    assert exc_info.value.symbol_id == 42
    assert exc_info.value.vocab_size == 4


def test_expand_handles_deep_composition_chains():
    """Chains deeper than the recursion limit expand without error."""
    v = Vocabulary()
    prev = v.register(Leaf("a"))
    for _ in range(5_000):
        prev = v.try_compose(prev, 0)
    assert v.expand(prev) == "a" * 5_001
    assert v.decode_text([prev]) == "a" * 5_001


def test_decode_single_is_deprecated_alias(vocab):
    """decode_single still works but warns."""
    buffer: list[str] = []
    with pytest.deprecated_call():
        vocab.decode_single(3, buffer)
    assert buffer == ["a", "b"]


def test_getitem_unknown_id_raises(vocab):
    """Indexing an unregistered id raises UnknownSymbolError."""
    with pytest.raises(UnknownSymbolError):
        vocab[17]
    assert 17 not in vocab
    assert 3 in vocab


# Bulk decoding
# ---------------------------------------------------------------------------


def test_decode_skips_unknown_ids(vocab):
    """Bulk decode drops unknown ids instead of failing."""
    assert vocab.decode_text([3, 99, -1, 2]) == "abc"


def test_decode_appends_to_buffer(vocab):
    """decode extends the caller's buffer."""
    buffer = ["x"]
    vocab.decode([2, 3], buffer)
    assert "".join(buffer) == "xcab"


def test_decode_cache_includes_symbols_added_later(vocab):
    """Symbols registered after the first decode are still decoded."""
    assert vocab.decode_text([3]) == "ab"
    new_id = vocab.try_compose(3, 3)
    assert vocab.decode_text([new_id]) == "abab"


# Restoring
# ---------------------------------------------------------------------------


def test_from_symbols_restores_state(vocab):
    """Rebuilding from symbols in id order reproduces every mapping."""
    restored = Vocabulary.from_symbols(vocab.symbols[i] for i in range(len(vocab)))
    assert restored.symbols == vocab.symbols
    assert restored.ids == vocab.ids
    assert restored.size == vocab.size


def test_from_symbols_rejects_forward_reference():
    """A composite may only refer to symbols listed before it."""
    with pytest.raises(UnknownSymbolError):
        Vocabulary.from_symbols([Leaf("a"), Composite(0, 2), Leaf("b")])


def test_from_symbols_rejects_duplicates():
    """Duplicate symbols would break id density."""
    with pytest.raises(ValueError):
        Vocabulary.from_symbols([Leaf("a"), Leaf("a")])
