"""Error taxonomy for booksum. Each error maps to a stable code the orchestrator can act on."""
from __future__ import annotations

from typing import Optional


class BookSumError(Exception):
    """Base for all booksum errors. code is stable; details must not leak secrets."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "UNKNOWN",
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or ""


class InvalidInput(BookSumError):
    """Empty or unsupported input text."""

    def __init__(self, message: str = "Invalid input", **kwargs: object) -> None:
        super().__init__(message, code="INVALID_INPUT", **kwargs)


class ConfigurationError(BookSumError):
    """Missing or unusable configuration value."""

    def __init__(self, message: str = "Configuration error", **kwargs: object) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR", **kwargs)


class GenerationServiceError(BookSumError):
    """Upstream text-generation call failed (transport error or non-2xx status)."""

    def __init__(
        self,
        message: str = "Generation service error",
        *,
        status_code: Optional[int] = None,
        **kwargs: object,
    ) -> None:
        super().__init__(message, code="GENERATION_FAILED", **kwargs)
        self.status_code = status_code


class MalformedGenerationResponse(BookSumError):
    """Upstream returned content that does not parse as the expected JSON object."""

    def __init__(
        self,
        message: str = "Generation response was not valid JSON",
        *,
        label: Optional[str] = None,
        **kwargs: object,
    ) -> None:
        super().__init__(message, code="MALFORMED_RESPONSE", **kwargs)
        self.label = label
