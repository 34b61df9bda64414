"""
Fake generation client for testing.

ScriptedGenerationClient returns queued responses instead of calling a
service, and records every call for assertions.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional, Union

from booksum.summarization import GenerationClient

from tests.fakes.clock import FakeClock


@dataclass
class GenerationCall:
    """Record of a generate() call for test assertions."""
    system_prompt: str
    user_prompt: str
    max_completion_tokens: int
    temperature: float
    at: Optional[float] = None


Responder = Callable[[str, str], str]


def chunk_response(name: str, summary: str = "A summary.", quotes: int = 1) -> str:
    """JSON body a well-behaved service returns for a chunk prompt."""
    return json.dumps(
        {
            "chunkName": name,
            "summary": summary,
            "keyQuotes": [
                {"character": f"Character {i}", "quote": f"Quote {i}"}
                for i in range(1, quotes + 1)
            ],
        }
    )


def overarching_response(synopsis: str = "The whole story.") -> str:
    """JSON body a well-behaved service returns for the overarching prompt."""
    return json.dumps(
        {
            "themes": ["loss", "hope"],
            "characters": [{"character": "Ann", "description": "The narrator"}],
            "synopsis": synopsis,
            "keyQuotes": [{"character": "Ann", "quote": "Onward."}],
        }
    )


def default_responder(system_prompt: str, user_prompt: str) -> str:
    """Answer chunk prompts with a chunk summary, anything else with an overarching one."""
    if "overarching" in system_prompt:
        return overarching_response()
    return chunk_response("echo", summary=f"Summary of prompt {len(user_prompt)}")


class ScriptedGenerationClient(GenerationClient):
    """
    Fake generation client.

    Responses come from a queue when one is given (strings are returned,
    exceptions are raised), otherwise from ``responder``. When a clock is
    given, each call records the virtual time it was issued at and then
    advances the clock by ``latency`` seconds.
    """

    def __init__(
        self,
        responses: Optional[list[Union[str, Exception]]] = None,
        responder: Responder = default_responder,
        clock: Optional[FakeClock] = None,
        latency: float = 0.0,
    ):
        self._responses = list(responses) if responses is not None else None
        self._responder = responder
        self._clock = clock
        self._latency = latency
        self.calls: list[GenerationCall] = []

    @property
    def name(self) -> str:
        return "scripted"

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_completion_tokens: int,
        temperature: float,
    ) -> str:
        at = self._clock.now() if self._clock else None
        self.calls.append(
            GenerationCall(system_prompt, user_prompt, max_completion_tokens, temperature, at)
        )
        if self._clock and self._latency:
            self._clock.advance(self._latency)

        if self._responses is not None:
            if not self._responses:
                raise AssertionError("ScriptedGenerationClient ran out of responses")
            response = self._responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return self._responder(system_prompt, user_prompt)
