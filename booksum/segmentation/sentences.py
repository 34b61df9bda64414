"""Sentence splitting and greedy sentence-group packing."""
from __future__ import annotations

import logging
import re
from typing import Iterable, List

from ..models import Chunk

logger = logging.getLogger(__name__)

# A sentence is any run of characters closed by one or more terminators
_SENTENCE_RE = re.compile(r"[^.!?]*[.!?]+")


def _normalize(text: str) -> str:
    return " ".join(text.split())


def split_sentences(text: str) -> List[str]:
    """Split text into whitespace-normalized sentences.

    Trailing text without a terminator is kept as a final sentence, so a
    text with no terminator at all comes back as one sentence.
    """
    sentences: List[str] = []
    end = 0
    for match in _SENTENCE_RE.finditer(text):
        sentence = _normalize(match.group())
        if sentence:
            sentences.append(sentence)
        end = match.end()
    tail = _normalize(text[end:])
    if tail:
        sentences.append(tail)
    return sentences


def wrap_words(sentence: str, max_size: int) -> List[str]:
    """Break an over-long sentence at word boundaries.

    A single word longer than ``max_size`` is kept whole.
    """
    pieces: List[str] = []
    current = ""
    for word in sentence.split():
        if current and len(current) + 1 + len(word) > max_size:
            pieces.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        pieces.append(current)
    return pieces


def _group_parts(sentences: List[str], group_size: int, max_size: int) -> Iterable[str]:
    for start in range(0, len(sentences), group_size):
        group = sentences[start : start + group_size]
        joined = " ".join(group)
        if len(joined) <= max_size:
            yield joined
        else:
            # Group alone is over the cap; only a lone sentence may overflow
            yield from group


def pack_sentences(
    sentences: List[str],
    max_size: int,
    group_size: int = 4,
) -> List[str]:
    """Greedily pack sentence groups into pieces of at most ``max_size`` chars.

    Sentences are taken ``group_size`` at a time. When appending the next
    group would push the running piece over the cap, the running piece is
    closed and the group starts a new one.
    """
    pieces: List[str] = []
    current = ""
    for part in _group_parts(sentences, group_size, max_size):
        if current and len(current) + 1 + len(part) > max_size:
            pieces.append(current)
            current = part
        else:
            current = f"{current} {part}" if current else part
    if current:
        pieces.append(current)
    return pieces


def split_by_sentence_groups(
    text: str,
    base_name: str,
    max_chunk_size: int,
    group_size: int = 4,
) -> List[Chunk]:
    """Re-split an oversized chunk into ``<base_name>.<k>`` sub-chunks."""
    pieces = pack_sentences(split_sentences(text), max_chunk_size, group_size)
    chunks = [
        Chunk(name=f"{base_name}.{index}", content=piece)
        for index, piece in enumerate(pieces, start=1)
    ]
    for chunk in chunks:
        logger.debug(
            "Created fallback chunk",
            extra={"chunk_name": chunk.name, "length": len(chunk.content)},
        )
    return chunks
