"""Credit Review Dashboard - Completion service clients"""
from .client import (
    CompletionClient,
    CompletionRequest,
    OpenAICompletionClient,
    build_completion_client,
    close_completion_client,
    is_quota_error,
)

__all__ = [
    "CompletionClient",
    "CompletionRequest",
    "OpenAICompletionClient",
    "build_completion_client",
    "close_completion_client",
    "is_quota_error",
]
