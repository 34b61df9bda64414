"""Data model shared by segmentation, summarization and storage.

JSON field names are camelCase (``chunkName``, ``keyQuotes``) so stored
artifacts keep the layout downstream readers expect; Python attributes are
snake_case and either spelling is accepted on input.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class Chunk(_Model):
    """Named, contiguous span of the source text."""

    name: str = Field(alias="chunkName", min_length=1)
    content: str = Field(alias="chunkContent", min_length=1)


class KeyQuote(_Model):
    character: str = ""
    quote: str


class CharacterProfile(_Model):
    character: str
    description: str = ""


class ChunkSummary(_Model):
    """Structured summary of a single chunk."""

    chunk_name: str = Field(default="", alias="chunkName")
    summary: str
    key_quotes: List[KeyQuote] = Field(default_factory=list, alias="keyQuotes")

    @field_validator("key_quotes")
    @classmethod
    def cap_key_quotes(cls, v: List[KeyQuote]) -> List[KeyQuote]:
        return v[:5]


class OverarchingSummary(_Model):
    """Document-level synthesis folded from all chunk summaries."""

    themes: List[str] = Field(default_factory=list)
    characters: List[CharacterProfile] = Field(default_factory=list)
    synopsis: str
    key_quotes: List[KeyQuote] = Field(default_factory=list, alias="keyQuotes")

    @field_validator("themes")
    @classmethod
    def dedupe_themes(cls, v: List[str]) -> List[str]:
        seen = set()
        unique = []
        for theme in v:
            theme = theme.strip()
            key = theme.lower()
            if theme and key not in seen:
                seen.add(key)
                unique.append(theme)
        return unique


class FinalResult(_Model):
    """Terminal artifact of a run, handed to the persistence collaborator."""

    id: str
    sections: List[ChunkSummary]
    overarching_summary: OverarchingSummary = Field(alias="overarchingSummary")
