"""Response parsing for summary generation."""
from __future__ import annotations

import logging
import re
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import MalformedGenerationResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")


def strip_code_fences(text: str) -> str:
    """Remove code-block markers such as ```json and ``` from text."""
    return _FENCE_RE.sub("", text).strip()


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in text, if any.

    Braces inside JSON strings are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_str = False
        esc = False
        for j in range(start, len(text)):
            ch = text[j]
            if in_str:
                if esc:
                    esc = False
                elif ch == "\\":
                    esc = True
                elif ch == '"':
                    in_str = False
            elif ch == '"':
                in_str = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : j + 1]
        start = text.find("{", start + 1)
    return None


class ResponseParser:
    """Parses generation responses into structured models.

    Accepts a JSON object either bare or wrapped in code fences, optionally
    surrounded by stray prose. Anything else is rejected with
    ``MalformedGenerationResponse``; there is no fallback to an empty result.
    """

    def parse(self, raw: str, model: Type[ModelT], *, label: str = "Response") -> ModelT:
        """Parse raw response text into ``model``.

        Args:
            raw: Raw text from the generation service
            model: Pydantic model the JSON object must validate against
            label: Description for logging and errors (e.g., "Chapter 1.1")

        Returns:
            Validated model instance

        Raises:
            MalformedGenerationResponse: If no valid object can be parsed
        """
        logger.debug("Model output received", extra={"label": label, "output": raw})
        cleaned = strip_code_fences(raw or "")
        if not cleaned:
            raise MalformedGenerationResponse(
                f"{label}: generation response was empty", label=label
            )

        try:
            return model.model_validate_json(cleaned)
        except ValidationError as first_error:
            candidate = find_json_object(cleaned)
            if candidate is not None and candidate != cleaned:
                try:
                    return model.model_validate_json(candidate)
                except ValidationError as e:
                    first_error = e

            logger.warning(
                "Failed to parse generation response",
                extra={"label": label, "excerpt": cleaned[:200]},
            )
            raise MalformedGenerationResponse(
                f"{label}: generation response was not a valid {model.__name__} object",
                label=label,
                details=f"{first_error.error_count()} validation error(s); "
                f"excerpt: {cleaned[:200]!r}",
            ) from first_error
