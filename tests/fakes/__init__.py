"""
Fake implementations for testing.

Fakes are simplified working implementations of core interfaces, used
instead of mocks so tests stay fast and deterministic:

- FakeClock: virtual monotonic time; sleeps return immediately
- ScriptedGenerationClient: queued or computed responses, records calls
"""

from tests.fakes.clock import FakeClock
from tests.fakes.generation import (
    GenerationCall,
    ScriptedGenerationClient,
    chunk_response,
    overarching_response,
)

__all__ = [
    "FakeClock",
    "GenerationCall",
    "ScriptedGenerationClient",
    "chunk_response",
    "overarching_response",
]
