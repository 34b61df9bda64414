"""
Segmentation engine.

Turns a long document into ordered, named chunks under a character cap,
using structural markers where present and sentence grouping otherwise.
"""

from .segmenter import Segmenter, segment
from .sentences import (
    pack_sentences,
    split_by_sentence_groups,
    split_sentences,
    wrap_words,
)
from .strategies import ChunkingStrategy, FlatStrategy, StructuralStrategy

__all__ = [
    "Segmenter",
    "segment",
    "ChunkingStrategy",
    "StructuralStrategy",
    "FlatStrategy",
    "split_sentences",
    "pack_sentences",
    "split_by_sentence_groups",
    "wrap_words",
]
