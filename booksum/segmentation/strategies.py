"""Chunking strategies.

A strategy turns raw text into an ordered list of named chunks. Size
bounding is not a strategy concern: the segmenter applies the shared
sentence-group fallback to whatever a strategy returns.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import List

from ..models import Chunk
from .sentences import pack_sentences, split_sentences, wrap_words

logger = logging.getLogger(__name__)


class ChunkingStrategy(ABC):
    """Base class for chunking strategies."""

    def __init__(self, max_chunk_size: int, group_size: int = 4):
        """Initialize strategy.

        Args:
            max_chunk_size: Character cap enforced on this strategy's chunks
            group_size: Sentences per group for size-bounded packing
        """
        self.max_chunk_size = max_chunk_size
        self.group_size = group_size

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy identifier (e.g., 'structural', 'flat')"""
        pass

    @abstractmethod
    def split(self, text: str) -> List[Chunk]:
        """Split text into named chunks. Never returns empty chunks."""
        pass


class StructuralStrategy(ChunkingStrategy):
    """Splits text along a structural marker such as a chapter heading.

    Each marker occurrence opens a span running to the next marker or the
    end of the text. Text before the first marker becomes ``Prefix 1.1``;
    text with no marker at all becomes a single ``Section 1.1``. Marker spans
    are named ``<label> <n>.1``.
    """

    def __init__(
        self,
        marker: re.Pattern[str],
        max_chunk_size: int,
        group_size: int = 4,
        label: str = "Chapter",
    ):
        super().__init__(max_chunk_size, group_size)
        self.marker = marker
        self.label = label

    @property
    def name(self) -> str:
        return "structural"

    def has_markers(self, text: str) -> bool:
        return self.marker.search(text) is not None

    def split(self, text: str) -> List[Chunk]:
        matches = list(self.marker.finditer(text))
        if not matches:
            content = text.strip()
            logger.debug("No structural markers found; treating text as one section")
            return [Chunk(name="Section 1.1", content=content)] if content else []

        logger.debug(
            "Structural markers found", extra={"marker_count": len(matches)}
        )
        chunks: List[Chunk] = []

        prefix = text[: matches[0].start()].strip()
        if prefix:
            chunks.append(Chunk(name="Prefix 1.1", content=prefix))

        for number, match in enumerate(matches, start=1):
            end = matches[number].start() if number < len(matches) else len(text)
            content = text[match.start() : end].strip()
            if not content:
                continue
            chunks.append(Chunk(name=f"{self.label} {number}.1", content=content))
            logger.debug(
                "Created chunk",
                extra={"chunk_name": chunks[-1].name, "length": len(content)},
            )

        return chunks


class FlatStrategy(ChunkingStrategy):
    """Ignores structure and packs sentence groups into ``Section <n>`` chunks.

    A sentence longer than the cap is broken at word boundaries, so text
    without any sentence terminator still comes out size-bounded.
    """

    @property
    def name(self) -> str:
        return "flat"

    def split(self, text: str) -> List[Chunk]:
        sentences: List[str] = []
        for sentence in split_sentences(text):
            if len(sentence) > self.max_chunk_size:
                sentences.extend(wrap_words(sentence, self.max_chunk_size))
            else:
                sentences.append(sentence)

        pieces = pack_sentences(sentences, self.max_chunk_size, self.group_size)
        return [
            Chunk(name=f"Section {number}", content=piece)
            for number, piece in enumerate(pieces, start=1)
        ]
