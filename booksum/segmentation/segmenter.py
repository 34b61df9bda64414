"""Document segmentation for summary generation."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..config import SegmentationSettings
from ..models import Chunk
from .sentences import split_by_sentence_groups
from .strategies import ChunkingStrategy, FlatStrategy, StructuralStrategy

logger = logging.getLogger(__name__)


class Segmenter:
    """Splits a document into ordered, named, size-bounded chunks.

    Delegates the first cut to a chunking strategy, then re-splits any chunk
    over that strategy's cap with the sentence-group fallback. Output is
    deterministic for a given text and configuration.
    """

    def __init__(self, settings: Optional[SegmentationSettings] = None):
        """Initialize segmenter.

        Args:
            settings: Segmentation settings; defaults are used when omitted
        """
        self.settings = settings or SegmentationSettings()
        self.structural = StructuralStrategy(
            marker=self.settings.marker_regex(),
            max_chunk_size=self.settings.max_chunk_character_size,
            group_size=self.settings.sentence_group_size,
            label=self.settings.structural_label,
        )
        self.flat = FlatStrategy(
            max_chunk_size=self.settings.flat_chunk_character_size,
            group_size=self.settings.sentence_group_size,
        )

    def strategy_for(self, text: str) -> ChunkingStrategy:
        """Pick the strategy configured for this text."""
        if self.settings.strategy == "flat":
            return self.flat
        if self.settings.strategy == "auto" and not self.structural.has_markers(text):
            return self.flat
        return self.structural

    def segment(self, text: str) -> List[Chunk]:
        """Segment text into chunks.

        Args:
            text: Document text

        Returns:
            Ordered chunks; empty if the text is empty or whitespace
        """
        if not text or not text.strip():
            return []

        strategy = self.strategy_for(text)
        chunks: List[Chunk] = []
        for chunk in strategy.split(text):
            if len(chunk.content) > strategy.max_chunk_size:
                logger.debug(
                    "Chunk too large, splitting",
                    extra={"chunk_name": chunk.name, "length": len(chunk.content)},
                )
                chunks.extend(
                    split_by_sentence_groups(
                        chunk.content,
                        chunk.name,
                        strategy.max_chunk_size,
                        strategy.group_size,
                    )
                )
            else:
                chunks.append(chunk)

        logger.info(
            "Segmented document",
            extra={
                "strategy": strategy.name,
                "chunk_count": len(chunks),
                "text_length": len(text),
            },
        )
        return chunks


def segment(text: str, settings: Optional[SegmentationSettings] = None) -> List[Chunk]:
    """Segment text with the given settings. See ``Segmenter.segment``."""
    return Segmenter(settings).segment(text)
