"""Custom exception hierarchy for pairtok errors."""

from .types import Digram, SymbolId


class PairTokError(Exception):
    """Base exception for all pairtok errors."""


class UnknownSymbolError(PairTokError):
    """Raised when a symbol id is not registered in the vocabulary."""

    def __init__(
        self,
        message: str,
        *,
        symbol_id: SymbolId | None = None,
        vocab_size: int | None = None,
    ) -> None:
        """Initialize with optional symbol id and vocab size that get appended to the message."""
        extra = " "
        if symbol_id is not None:
            extra += f"(symbol id: {symbol_id}) "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        super().__init__(message + extra)
        self.symbol_id = symbol_id
        self.vocab_size = vocab_size


class InvalidOperandError(PairTokError):
    """Raised when a digram cannot be composed because an operand is unregistered."""

    def __init__(self, message: str, *, digram: Digram | None = None) -> None:
        extra = " "
        if digram is not None:
            extra += f"(digram: {digram}) "
        super().__init__(message + extra)
        self.digram = digram


class TrainingError(PairTokError):
    """Raised when learning is misconfigured or used before training."""

    def __init__(
        self,
        message: str,
        *,
        merges: int | None = None,
        replacements: int | None = None,
        cutoff: int | None = None,
    ) -> None:
        extra = " "
        if merges is not None:
            extra += f"(merges: {merges}) "
        if replacements is not None:
            extra += f"(replacements: {replacements}) "
        if cutoff is not None:
            extra += f"(cutoff: {cutoff}) "
        super().__init__(message + extra)
        self.merges = merges
        self.replacements = replacements
        self.cutoff = cutoff


class ModelLoadError(PairTokError):
    """Raised when loading a vocabulary model fails."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        version_mismatch: tuple[str, str] | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if version_mismatch is not None:
            extra += f"(expected: {version_mismatch[1]}) (got {version_mismatch[0]}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.version_mismatch = version_mismatch
