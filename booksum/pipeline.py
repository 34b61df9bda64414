"""Pipeline stages an orchestrator can call one after another.

Each stage takes the previous stage's output. Persistence is optional: pass
a ``LocalResultStore`` to ``run_pipeline`` to store the result and record
its URL.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import BookSumSettings, get_settings
from .errors import InvalidInput
from .models import Chunk, FinalResult
from .segmentation import Segmenter
from .storage import LocalResultStore
from .summarization import Clock, GenerationClient, SummarizationController

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".txt",)


def load_text(path: Union[str, Path]) -> str:
    """Read a plain-text document.

    Raises:
        InvalidInput: If the file type is unsupported or the text is empty
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise InvalidInput(f"Unsupported file type: {path.name}")

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        raise InvalidInput(f"Document is empty: {path.name}")

    logger.info("Loaded document text", extra={"path": str(path), "length": len(text)})
    return text


def chunk_stage(
    document_id: str,
    text: str,
    settings: Optional[BookSumSettings] = None,
) -> List[Chunk]:
    """Segment a document's text.

    Raises:
        InvalidInput: If the text is empty
    """
    settings = settings or get_settings()
    if not text or not text.strip():
        raise InvalidInput(f"No text to segment for document {document_id}")

    logger.info(
        "Starting segmentation",
        extra={"document_id": document_id, "length": len(text)},
    )
    return Segmenter(settings.segmentation).segment(text)


async def summarize_stage(
    document_id: str,
    chunks: List[Chunk],
    client: GenerationClient,
    settings: Optional[BookSumSettings] = None,
    clock: Optional[Clock] = None,
) -> FinalResult:
    """Summarize chunks and fold them into a FinalResult."""
    settings = settings or get_settings()
    controller = SummarizationController(
        client=client,
        settings=settings.rate_limit,
        clock=clock,
        temperature=settings.generation.temperature,
    )
    return await controller.run(document_id, chunks)


async def run_pipeline(
    document_id: str,
    text: str,
    client: Optional[GenerationClient] = None,
    settings: Optional[BookSumSettings] = None,
    store: Optional[LocalResultStore] = None,
    summarize: bool = True,
    clock: Optional[Clock] = None,
) -> Union[FinalResult, List[Chunk]]:
    """Run segmentation and, optionally, summarization for one document.

    Args:
        document_id: Identifier of the document
        text: Already-fetched document text
        client: Generation client; required when ``summarize`` is true
        settings: Settings; the cached environment settings when omitted
        store: Store for the chunk handoff and the output, whose URL is recorded
        summarize: False to stop after segmentation
        clock: Time source for rate limiting

    Returns:
        FinalResult, or the chunk list when ``summarize`` is false
    """
    settings = settings or get_settings()
    chunks = chunk_stage(document_id, text, settings)

    if not summarize:
        if store is not None:
            store.record_output_url(document_id, store.save_chunk_output(document_id, chunks))
        return chunks

    if client is None:
        raise ValueError("A generation client is required to summarize")

    if store is not None:
        # Summarization reads the chunk handoff file, not the in-memory list
        chunks = store.load_chunks(store.save_chunks(document_id, chunks))

    result = await summarize_stage(document_id, chunks, client, settings, clock)
    if store is not None:
        store.record_output_url(document_id, store.save_final_result(result))
    return result
