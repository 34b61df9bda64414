"""
Result storage for booksum.

Durable persistence belongs to the orchestrator; this package provides a
local filesystem store for development and self-hosted runs.
"""

from .local_result_store import LocalResultStore, sanitize_filename

__all__ = [
    "LocalResultStore",
    "sanitize_filename",
]
