"""Symbol model: a vocabulary entry is either a leaf character or a composite of two ids."""

from dataclasses import dataclass

from .types import SymbolId


@dataclass(frozen=True, slots=True)
class Leaf:
    """A single character."""

    char: str

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise ValueError(f"leaf must wrap exactly one character, got {self.char!r}")


@dataclass(frozen=True, slots=True)
class Composite:
    """Concatenation of the expansions of two registered symbols."""

    left: SymbolId
    right: SymbolId


type Symbol = Leaf | Composite
