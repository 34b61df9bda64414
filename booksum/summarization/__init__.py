"""
Rate-limited summarization.

Provides the generation client abstraction, prompt building, response
parsing, token budgeting, and the controller that ties them together.
"""

from .clock import Clock, SystemClock
from .controller import SummarizationController
from .prompt_builder import Prompt, PromptBuilder
from .providers import GenerationClient, OpenAICompatibleClient
from .rate_limiter import BudgetState, TokenBudget, TokenBudgetWindow, estimate_tokens
from .response_parser import ResponseParser, find_json_object, strip_code_fences

__all__ = [
    "Clock",
    "SystemClock",
    "SummarizationController",
    "Prompt",
    "PromptBuilder",
    "GenerationClient",
    "OpenAICompatibleClient",
    "BudgetState",
    "TokenBudget",
    "TokenBudgetWindow",
    "estimate_tokens",
    "ResponseParser",
    "find_json_object",
    "strip_code_fences",
]
