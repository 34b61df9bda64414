"""SummarizationController - rate-limited summary generation for a chunked document."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import RateLimitSettings
from ..errors import InvalidInput
from ..models import Chunk, ChunkSummary, FinalResult, OverarchingSummary
from .clock import Clock, SystemClock
from .prompt_builder import Prompt, PromptBuilder
from .providers import GenerationClient
from .rate_limiter import TokenBudget, estimate_tokens
from .response_parser import ResponseParser

logger = logging.getLogger(__name__)


class SummarizationController:
    """Drives chunks through the generation service under a token budget.

    Requests are issued strictly one at a time, in chunk order. Each call to
    ``summarize_all`` owns a fresh token budget, so nothing is shared between
    runs. Errors from the client or the parser abort the run; nothing is
    retried here.
    """

    def __init__(
        self,
        client: GenerationClient,
        settings: Optional[RateLimitSettings] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        response_parser: Optional[ResponseParser] = None,
        clock: Optional[Clock] = None,
        temperature: float = 0.5,
    ):
        """Initialize controller.

        Args:
            client: Text-generation client
            settings: Token budget and pacing settings
            prompt_builder: Builds prompts for generation
            response_parser: Parses generation responses
            clock: Time source for throttling and the settling delay
            temperature: Sampling temperature for every request
        """
        self.client = client
        self.settings = settings or RateLimitSettings()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.response_parser = response_parser or ResponseParser()
        self.clock = clock or SystemClock()
        self.temperature = temperature

    def new_budget(self) -> TokenBudget:
        return TokenBudget(
            max_tokens=self.settings.max_tokens_per_minute,
            window_seconds=self.settings.throttle_window_seconds,
            clock=self.clock,
        )

    async def _request(self, prompt: Prompt) -> str:
        return await self.client.generate(
            prompt.system,
            prompt.user,
            self.settings.max_tokens_per_request,
            self.temperature,
        )

    async def summarize_chunk(self, chunk: Chunk) -> ChunkSummary:
        """Summarize a single chunk (no rate limiting)."""
        logger.info("Sending summary request", extra={"chunk_name": chunk.name})
        raw = await self._request(self.prompt_builder.build_chunk(chunk))
        parsed = self.response_parser.parse(raw, ChunkSummary, label=chunk.name)
        # The service's echo of the chunk name is not trusted
        return parsed.model_copy(update={"chunk_name": chunk.name})

    async def summarize_all(self, chunks: Sequence[Chunk]) -> List[ChunkSummary]:
        """Summarize every chunk in order under the token budget.

        Args:
            chunks: Chunks in document order

        Returns:
            One summary per chunk, in the same order
        """
        budget = self.new_budget()
        summaries: List[ChunkSummary] = []
        total = len(chunks)

        logger.info("Summarizing chunks with rate limiting", extra={"chunk_count": total})

        for index, chunk in enumerate(chunks, start=1):
            estimated = estimate_tokens(chunk.content)
            logger.info(
                "Processing chunk",
                extra={
                    "chunk_name": chunk.name,
                    "position": f"{index}/{total}",
                    "estimated_tokens": estimated,
                },
            )

            await budget.acquire(estimated)
            summaries.append(await self.summarize_chunk(chunk))
            budget.consume(estimated)

            logger.info(
                "Completed chunk summary",
                extra={
                    "chunk_name": chunk.name,
                    "position": f"{index}/{total}",
                    "tokens_consumed": budget.window.tokens_consumed,
                },
            )

        return summaries

    async def aggregate(self, summaries: Sequence[ChunkSummary]) -> OverarchingSummary:
        """Fold chunk summaries into one overarching summary.

        Raises:
            InvalidInput: If there are no summaries to fold
        """
        if not summaries:
            raise InvalidInput("Cannot build an overarching summary from zero sections")

        logger.info(
            "Sending request for overarching summary",
            extra={"section_count": len(summaries)},
        )
        raw = await self._request(self.prompt_builder.build_overarching(summaries))
        return self.response_parser.parse(
            raw, OverarchingSummary, label="Overarching summary"
        )

    async def run(self, document_id: str, chunks: Sequence[Chunk]) -> FinalResult:
        """Summarize all chunks, settle, then aggregate into a FinalResult.

        Args:
            document_id: Identifier of the source document
            chunks: Chunks in document order

        Returns:
            Complete result; no partial result is ever returned

        Raises:
            InvalidInput: If there are no chunks
        """
        if not chunks:
            raise InvalidInput(f"No chunks to summarize for document {document_id}")

        logger.info(
            "Starting summarization run",
            extra={"document_id": document_id, "chunk_count": len(chunks)},
        )
        sections = await self.summarize_all(chunks)

        delay = self.settings.settling_delay_seconds
        if delay > 0:
            logger.info(
                "Settling before overarching summary",
                extra={"document_id": document_id, "delay_seconds": delay},
            )
            await self.clock.sleep(delay)

        overarching = await self.aggregate(sections)
        logger.info(
            "Completed summarization run",
            extra={"document_id": document_id, "section_count": len(sections)},
        )
        return FinalResult(
            id=document_id,
            sections=sections,
            overarching_summary=overarching,
        )
