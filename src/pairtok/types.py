"""
Core types for pair-merging tokenization.
"""

type SymbolId = int
type Digram = tuple[SymbolId, SymbolId]
type DigramCount = tuple[Digram, int]
