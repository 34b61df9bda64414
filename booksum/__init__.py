"""
booksum - segment long documents and summarize them under a token budget.

Provides the segmentation engine, the rate-limited summarization
controller, configuration, and a local result store.
"""

from .config import BookSumSettings, configure_logging, get_settings
from .errors import (
    BookSumError,
    ConfigurationError,
    GenerationServiceError,
    InvalidInput,
    MalformedGenerationResponse,
)
from .models import (
    CharacterProfile,
    Chunk,
    ChunkSummary,
    FinalResult,
    KeyQuote,
    OverarchingSummary,
)
from .segmentation import Segmenter, segment
from .summarization import SummarizationController

__all__ = [
    "BookSumSettings",
    "configure_logging",
    "get_settings",
    "BookSumError",
    "ConfigurationError",
    "GenerationServiceError",
    "InvalidInput",
    "MalformedGenerationResponse",
    "CharacterProfile",
    "Chunk",
    "ChunkSummary",
    "FinalResult",
    "KeyQuote",
    "OverarchingSummary",
    "Segmenter",
    "segment",
    "SummarizationController",
]
