"""Token-budget rate limiting for sequential generation requests."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)

TOKENS_PER_WORD = 1.33


def estimate_tokens(text: str) -> int:
    """Estimate token cost of text from its word count.

    Approximation, not a tokenizer: ``ceil(words * 1.33)``.

    Args:
        text: Text to estimate

    Returns:
        Estimated token count
    """
    return math.ceil(len(text.split()) * TOKENS_PER_WORD)


class BudgetState(str, Enum):
    ACCUMULATING = "accumulating"
    THROTTLED = "throttled"


@dataclass(frozen=True)
class TokenBudgetWindow:
    """Tokens consumed since ``window_start`` (monotonic seconds)."""

    window_start: float
    tokens_consumed: int = 0

    def elapsed(self, now: float) -> float:
        return now - self.window_start

    def consume(self, tokens: int) -> "TokenBudgetWindow":
        if tokens < 0:
            raise ValueError("tokens must be non-negative")
        return replace(self, tokens_consumed=self.tokens_consumed + tokens)

    def reset(self, now: float) -> "TokenBudgetWindow":
        return TokenBudgetWindow(window_start=now)


class TokenBudget:
    """Keeps estimated token use under a per-window limit.

    Owned by a single run; requests go through it one at a time. Before each
    request ``acquire`` suspends until the request fits the current window,
    and after the request ``consume`` charges it. The window only starts over
    once a request fails to fit.
    """

    def __init__(
        self,
        max_tokens: int,
        window_seconds: float,
        clock: Optional[Clock] = None,
    ):
        """Initialize budget.

        Args:
            max_tokens: Token ceiling per window
            window_seconds: Window length in seconds
            clock: Time source; the system clock when omitted
        """
        self.max_tokens = max_tokens
        self.window_seconds = window_seconds
        self.clock = clock or SystemClock()
        self.window = TokenBudgetWindow(window_start=self.clock.now())
        self.state = BudgetState.ACCUMULATING

    def fits(self, tokens: int) -> bool:
        return self.window.tokens_consumed + tokens <= self.max_tokens

    async def acquire(self, tokens: int) -> float:
        """Wait until a request costing ``tokens`` may be issued.

        A request that does not fit waits out the rest of the current window,
        even when the window is still empty, and then starts a fresh one.

        Returns:
            Seconds spent waiting
        """
        if self.fits(tokens):
            return 0.0

        now = self.clock.now()
        self.state = BudgetState.THROTTLED
        remaining = self.window_seconds - self.window.elapsed(now)
        logger.info(
            "Token budget exhausted; waiting for next window",
            extra={
                "tokens_consumed": self.window.tokens_consumed,
                "requested_tokens": tokens,
                "wait_seconds": round(max(remaining, 0.0), 3),
            },
        )
        waited = 0.0
        if remaining > 0:
            await self.clock.sleep(remaining)
            waited = remaining

        self.window = self.window.reset(self.clock.now())
        self.state = BudgetState.ACCUMULATING
        return waited

    def consume(self, tokens: int) -> None:
        """Charge an issued request against the current window."""
        self.window = self.window.consume(tokens)
        logger.debug(
            "Charged token budget",
            extra={
                "tokens": tokens,
                "tokens_consumed": self.window.tokens_consumed,
            },
        )
