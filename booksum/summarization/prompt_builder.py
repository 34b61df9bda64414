"""Prompt building for summary generation."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from textwrap import dedent
from typing import Sequence

from ..models import Chunk, ChunkSummary

logger = logging.getLogger(__name__)

CHUNK_SYSTEM_PROMPT = "You are an assistant summarizing text in JSON format."
OVERARCHING_SYSTEM_PROMPT = (
    "You are an assistant generating a final overarching summary in JSON format."
)


@dataclass(frozen=True)
class Prompt:
    """System and user prompt pair for one generation request."""

    system: str
    user: str


class PromptBuilder:
    """Builds prompts for per-chunk and overarching summaries."""

    def __init__(self, max_key_quotes: int = 5):
        self.max_key_quotes = max_key_quotes

    def build_chunk(self, chunk: Chunk) -> Prompt:
        """Build prompt for one chunk.

        Args:
            chunk: Chunk to summarize

        Returns:
            Prompt asking for ``chunkName``, ``summary`` and ``keyQuotes``
        """
        name = json.dumps(chunk.name)
        user = dedent(
            """
            Summarize the following text in JSON format. Provide a comprehensive synopsis and up to {max_quotes} key quotes along with the character names. Respond with the JSON object only. Response format:
            {{
              "chunkName": {name},
              "summary": "Comprehensive synopsis of the section.",
              "keyQuotes": [
                {{ "character": "Character name", "quote": "The character's quote" }},
                {{ "character": "Character name", "quote": "Another quote" }}
              ]
            }}
            """
        ).strip().format(max_quotes=self.max_key_quotes, name=name)

        logger.debug(
            "Built chunk prompt",
            extra={"chunk_name": chunk.name, "content_length": len(chunk.content)},
        )
        return Prompt(system=CHUNK_SYSTEM_PROMPT, user=f"{user}\n\nText: {chunk.content}")

    def build_overarching(self, summaries: Sequence[ChunkSummary]) -> Prompt:
        """Build prompt folding all chunk summaries into one.

        Args:
            summaries: Chunk summaries in document order

        Returns:
            Prompt asking for themes, characters, synopsis and key quotes
        """
        combined = "\n\n".join(s.summary for s in summaries)
        user = dedent(
            """
            Summarize the following sections into a final overarching summary in JSON format. Include key themes, characters, a brief synopsis, and key quotes. Respond with the JSON object only. Response format:
            {
              "themes": ["theme1", "theme2"],
              "characters": [
                { "character": "Character name", "description": "Brief description of the character" }
              ],
              "synopsis": "Brief synopsis",
              "keyQuotes": [
                { "character": "Character name", "quote": "The character's quote" }
              ]
            }
            """
        ).strip()

        logger.debug(
            "Built overarching prompt",
            extra={"section_count": len(summaries), "combined_length": len(combined)},
        )
        return Prompt(system=OVERARCHING_SYSTEM_PROMPT, user=f"{user}\n\nSections: {combined}")
