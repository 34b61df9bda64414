"""Text-generation client abstraction for summary generation."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..config import GenerationSettings
from ..errors import ConfigurationError, GenerationServiceError

logger = logging.getLogger(__name__)


class GenerationClient(ABC):
    """Abstract base class for text-generation services.

    A client performs one call (prompts in, text out). The controller owns
    chunk ordering, rate limiting and response parsing.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Client name for identification."""
        pass

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_completion_tokens: int,
        temperature: float,
    ) -> str:
        """Generate a completion.

        Args:
            system_prompt: Instructions for the model
            user_prompt: Request content
            max_completion_tokens: Completion token ceiling
            temperature: Sampling temperature

        Returns:
            Response text

        Raises:
            GenerationServiceError: If the call fails
        """
        pass


def _error_detail(response: httpx.Response) -> str:
    """Pull the most useful error text out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if error:
            return str(error)
    return str(payload)[:500]


class OpenAICompatibleClient(GenerationClient):
    """Client for OpenAI-compatible ``/v1/chat/completions`` APIs."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-2024-08-06",
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize client.

        Args:
            base_url: API base URL
            api_key: Optional API key
            model: Model name
            timeout: Request timeout in seconds
            http_client: Shared client to use instead of one per request
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: GenerationSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "OpenAICompatibleClient":
        if not settings.is_configured():
            raise ConfigurationError(
                "Generation API key is not configured (set OPENAI_API_KEY)"
            )
        return cls(
            base_url=settings.api_base,
            api_key=settings.api_key.get_secret_value(),
            model=settings.model,
            timeout=settings.timeout_seconds,
            http_client=http_client,
        )

    @property
    def name(self) -> str:
        return "openai-compatible"

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        max_completion_tokens: int,
        temperature: float,
    ) -> str:
        """Generate using the chat completions API."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_completion_tokens,
            "temperature": temperature,
        }

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, headers, payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, headers, payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error(
                "Generation request rejected",
                extra={"status_code": e.response.status_code, "detail": detail},
            )
            raise GenerationServiceError(
                f"Generation service returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                details=detail,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Generation request failed: {e}")
            raise GenerationServiceError(
                f"Generation request failed: {e}",
                details=type(e).__name__,
            ) from e

        return self._extract_content(response)

    async def _post(
        self,
        client: httpx.AsyncClient,
        headers: Dict[str, str],
        payload: Dict[str, Any],
    ) -> httpx.Response:
        return await client.post(
            f"{self.base_url}/v1/chat/completions",
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )

    def _extract_content(self, response: httpx.Response) -> str:
        try:
            result = response.json()
            content = result["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationServiceError(
                "Unexpected completion payload",
                status_code=response.status_code,
                details=response.text[:500],
            ) from e

        if not content:
            raise GenerationServiceError(
                "Generation service returned an empty completion",
                status_code=response.status_code,
            )
        return content.strip()
