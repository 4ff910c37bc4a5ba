"""
Vocabulary registry: a bidirectional mapping between symbols and dense integer ids.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from typing_extensions import deprecated

from .errors import UnknownSymbolError
from .symbol import Composite, Leaf, Symbol
from .types import SymbolId

if TYPE_CHECKING:
    from ._progress import MergeObserver

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Registry of leaf and composite symbols.

    Ids are assigned in insertion order and form the dense range ``[0, size)``.
    Registering a structurally equal symbol twice returns the original id, and
    a composite's operands always have smaller ids than the composite itself.

    Example:
       >>> vocab = Vocabulary()
       >>> tokens = vocab.learn("aaabdaaabac", merges=10)
       >>> vocab.decode_text(tokens)
       'aaabdaaabac'
    """

    def __init__(self) -> None:
        # id -> symbol
        self.symbols: dict[SymbolId, Symbol] = {}
        # symbol -> id
        self.ids: dict[Symbol, SymbolId] = {}
        self.size: int = 0
        # id -> fully expanded text, built lazily by decode()
        self._decoded: dict[SymbolId, str] | None = None
        # vocabulary size when the decode cache was built
        self._decoded_size: int = 0

    @classmethod
    def from_symbols(cls, symbols: Iterable[Symbol]) -> "Vocabulary":
        """
        Rebuild a vocabulary from symbols listed in id order.

        :param symbols: Symbols where the k-th entry gets id k.
        :return: The restored vocabulary.
        :raises UnknownSymbolError: If a composite refers to an id not registered before it.
        :raises ValueError: If the same symbol appears twice.
        """
        vocab = cls()
        for sym in symbols:
            if isinstance(sym, Composite) and (
                sym.left not in vocab.symbols or sym.right not in vocab.symbols
            ):
                raise UnknownSymbolError(
                    "composite operand not registered",
                    symbol_id=max(sym.left, sym.right),
                    vocab_size=vocab.size,
                )
            if sym in vocab.ids:
                raise ValueError(f"duplicate symbol {sym} at id {vocab.size}")
            vocab.register(sym)
        return vocab

    def __len__(self) -> int:
        return self.size

    def __contains__(self, symbol_id: object) -> bool:
        return symbol_id in self.symbols

    def __getitem__(self, symbol_id: SymbolId) -> Symbol:
        try:
            return self.symbols[symbol_id]
        except KeyError:
            raise UnknownSymbolError(
                "symbol id not in vocabulary", symbol_id=symbol_id, vocab_size=self.size
            ) from None

    def register(self, symbol: Symbol) -> SymbolId:
        """Return the id of ``symbol``, assigning the next id if it is new."""
        existing = self.ids.get(symbol)
        if existing is not None:
            return existing

        new_id = self.size
        self.ids[symbol] = new_id
        self.symbols[new_id] = symbol
        self.size += 1
        return new_id

    def try_compose(self, left: SymbolId, right: SymbolId) -> SymbolId | None:
        """
        Register the composite of two existing symbols.

        :return: Id of the composite, or ``None`` if either operand is unregistered.
        """
        if left not in self.symbols or right not in self.symbols:
            return None
        return self.register(Composite(left, right))

    def seed(self, text: str) -> list[SymbolId]:
        """Register every character of ``text`` as a leaf and return the per-character ids."""
        log.debug(f"preinitializing vocabulary with {len(text)} characters")
        return [self.register(Leaf(c)) for c in text]

    def expand_one(self, symbol_id: SymbolId, buffer: list[str]) -> None:
        """
        Append the full text expansion of one symbol to ``buffer``.

        Composites are walked with an explicit stack, so deep composition
        chains do not hit the interpreter recursion limit.

        :raises UnknownSymbolError: If ``symbol_id`` or any id it is composed of is unregistered.
        """
        stack = [symbol_id]
        while stack:
            sid = stack.pop()
            sym = self.symbols.get(sid)
            if sym is None:
                raise UnknownSymbolError(
                    "symbol id not in vocabulary", symbol_id=sid, vocab_size=self.size
                )
            if isinstance(sym, Leaf):
                buffer.append(sym.char)
            else:
                # right is pushed first so left is expanded first
                stack.append(sym.right)
                stack.append(sym.left)

    @deprecated("Use `Vocabulary.expand_one()` instead.")
    def decode_single(self, symbol_id: SymbolId, buffer: list[str]) -> None:
        """Alias of :meth:`expand_one`."""
        self.expand_one(symbol_id, buffer)

    def expand(self, symbol_id: SymbolId) -> str:
        """Return the full text expansion of one symbol."""
        buffer: list[str] = []
        self.expand_one(symbol_id, buffer)
        return "".join(buffer)

    def decode(self, ids: Iterable[SymbolId], buffer: list[str]) -> None:
        """
        Append the expansion of every known id in ``ids`` to ``buffer``.

        Unknown ids are skipped without error. Expansions come from a cache of
        the whole vocabulary, rebuilt whenever symbols were registered since it
        was last built.
        """
        cache = self._decode_cache()
        for sid in ids:
            text = cache.get(sid)
            if text is not None:
                buffer.append(text)

    def decode_text(self, ids: Iterable[SymbolId]) -> str:
        """Decode ``ids`` into a string, skipping unknown ids."""
        buffer: list[str] = []
        self.decode(ids, buffer)
        return "".join(buffer)

    def learn(
        self,
        text: str,
        merges: int,
        replacements: int | None = None,
        cutoff: int | None = None,
        observer: "MergeObserver | None" = None,
    ) -> list[SymbolId]:
        """
        Seed the vocabulary from ``text`` and run the merge loop over it.

        See :func:`pairtok.trainer.learn` for the parameters.

        :return: The final symbol sequence.
        """
        from .trainer import DEFAULT_CUTOFF, DEFAULT_REPLACEMENTS, learn

        result = learn(
            self,
            text,
            merges,
            replacements=DEFAULT_REPLACEMENTS if replacements is None else replacements,
            cutoff=DEFAULT_CUTOFF if cutoff is None else cutoff,
            observer=observer,
        )
        return result.tokens

    def _decode_cache(self) -> dict[SymbolId, str]:
        """Build or return the id -> text cache used for bulk decoding."""
        if self._decoded is None or self._decoded_size != self.size:
            decoded: dict[SymbolId, str] = {}
            # ids ascend and operands precede composites, so each composite
            # is the concatenation of two already cached expansions
            for sid in range(self.size):
                sym = self.symbols[sid]
                if isinstance(sym, Leaf):
                    decoded[sid] = sym.char
                else:
                    decoded[sid] = decoded[sym.left] + decoded[sym.right]
            self._decoded = decoded
            self._decoded_size = self.size
            log.debug(f"built decode cache with {len(decoded)} entries")
        return self._decoded
