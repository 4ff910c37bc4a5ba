"""
High-level tokenizer that owns a vocabulary and the sequence learned from a corpus.
"""

import logging
from pathlib import Path

from ._decorators import measure_time
from ._progress import log_progress
from .errors import TrainingError
from .serialization import load_model, save_model
from .trainer import DEFAULT_CUTOFF, DEFAULT_REPLACEMENTS, learn
from .types import SymbolId
from .vocabulary import Vocabulary

log = logging.getLogger(__name__)


class PairTokenizer:
    """
    Greedy pair-merging tokenizer.

    Training seeds a fresh vocabulary with the characters of the corpus and
    promotes frequent adjacent pairs into composite symbols. The vocabulary can
    then decode any sequence of its ids and be saved to disk.
    """

    def __init__(self) -> None:
        self.vocab: Vocabulary = Vocabulary()
        # sequence produced by the last call to train()
        self.encoded: list[SymbolId] = []
        self._trained: bool = False

    @measure_time
    def train(
        self,
        text: str | list[str],
        merges: int,
        replacements: int = DEFAULT_REPLACEMENTS,
        cutoff: int = DEFAULT_CUTOFF,
        verbose: bool = False,
        show_progress: bool = False,
    ) -> list[SymbolId]:
        """
        Learn a vocabulary from raw text.

        List inputs are concatenated. Each call starts from an empty vocabulary.

        :param text: Training text as a single string or list of strings.
        :param merges: Maximum number of digram promotions.
        :param replacements: Digrams promoted per round.
        :param cutoff: A digram must occur more than this many times to be promoted.
        :param verbose: Log each promotion when ``True``.
        :param show_progress: Report every promotion through the progress observer when ``True``.
        :return: The corpus encoded with the learned vocabulary.
        :raises TrainingError: If any learning parameter is out of range.
        """
        if isinstance(text, list):
            text = "".join(text)

        vocab = Vocabulary()
        result = learn(
            vocab,
            text,
            merges,
            replacements=replacements,
            cutoff=cutoff,
            observer=log_progress if show_progress else None,
            verbose=verbose,
        )

        if result.stopped_early:
            log.warning(
                f"no more digrams above cutoff {cutoff} after "
                f"{result.n_merges_completed} merges (requested {merges}) stopping early"
            )

        self.vocab = vocab
        self.encoded = result.tokens
        self._trained = True
        return result.tokens

    def decode(self, tokens: list[SymbolId]) -> str:
        """
        Decode a sequence of ids back into text.

        Ids unknown to the vocabulary are skipped.

        :raises TrainingError: If the tokenizer has not been trained or loaded yet.
        """
        self._check_trained("decoding")
        return self.vocab.decode_text(tokens)

    def decode_batch(self, token_batch: list[list[SymbolId]]) -> list[str]:
        """Decode multiple id sequences."""
        self._check_trained("decoding")
        return [self.vocab.decode_text(tokens) for tokens in token_batch]

    def vocab_size(self) -> int:
        """Return the number of symbols in the vocabulary."""
        return len(self.vocab)

    def top_tokens(self, n: int) -> list[str]:
        """
        Return the expansions of the ``n`` newest symbols, newest first.

        Newer composites are built from older ones, so these are the longest
        units the vocabulary has learned.
        """
        self._check_trained("listing tokens")
        newest = range(len(self.vocab) - 1, max(len(self.vocab) - n, 0) - 1, -1)
        return [self.vocab.decode_text([sid]) for sid in newest]

    def save(self, file_prefix: str) -> Path:
        """
        Save the vocabulary to ``<file_prefix>.model`` and ``<file_prefix>.vocab``.

        :return: Path of the written .model file.
        :raises TrainingError: If the tokenizer has not been trained or loaded yet.
        """
        self._check_trained("saving")
        return save_model(self.vocab, file_prefix)

    def load(self, model_filename: str) -> None:
        """
        Replace the vocabulary with one loaded from a .model file.

        :raises ModelLoadError: If the model file cannot be read.
        """
        self.vocab = load_model(model_filename)
        self.encoded = []
        self._trained = True

    def _check_trained(self, action: str) -> None:
        if not self._trained:
            raise TrainingError(
                f"{self.__class__.__name__} must be trained before {action}"
            )


def from_pretrained(model_path: str) -> PairTokenizer:
    """
    Load a tokenizer from a saved .model file.

    .. code-block:: python

        tokenizer = from_pretrained("path/to/corpus.model")
        text = tokenizer.decode([0, 1, 2])
    """
    tokenizer = PairTokenizer()
    tokenizer.load(model_path)
    return tokenizer
