"""
Credit Review Dashboard - Completion Client

The compliance scan talks to a text-completion service through the
CompletionClient protocol. OpenAICompletionClient is the production
implementation; any object with a compatible async complete() can be
injected instead.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import APIStatusError, AsyncOpenAI

from ...config import ScanSettings
from ..errors import UpstreamQuotaExceeded

logger = logging.getLogger(__name__)

QUOTA_ERROR_CODE = "insufficient_quota"


@dataclass(frozen=True)
class CompletionRequest:
    model: str
    system_prompt: str
    user_content: str
    max_tokens: int
    temperature: float


class CompletionClient(Protocol):
    async def complete(self, request: CompletionRequest) -> Optional[str]:
        """Return the completion text, or None when the service returned nothing."""
        ...


def is_quota_error(exc: Exception) -> bool:
    """True if a provider error means the account quota is exhausted."""
    if getattr(exc, "code", None) == QUOTA_ERROR_CODE:
        return True
    return QUOTA_ERROR_CODE in str(exc)


class OpenAICompletionClient:
    """Thin wrapper around AsyncOpenAI chat completions."""

    def __init__(self, api_key: str, base_url: Optional[str] = None):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    async def complete(self, request: CompletionRequest) -> Optional[str]:
        try:
            completion = await self._client.chat.completions.create(
                model=request.model,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.user_content},
                ],
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
        except APIStatusError as e:
            if is_quota_error(e):
                raise UpstreamQuotaExceeded(str(e)) from e
            raise

        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def aclose(self) -> None:
        """Release the underlying HTTP connection pool."""
        await self._client.close()


async def close_completion_client(client: Optional[CompletionClient]) -> None:
    """Close a client that owns network resources; plain stubs are left alone."""
    aclose = getattr(client, "aclose", None)
    if aclose is not None:
        await aclose()


def build_completion_client(settings: ScanSettings) -> Optional[CompletionClient]:
    """Return a client for the configured provider, or None in offline mode."""
    if not settings.has_credential:
        logger.info("No OpenAI API key configured; compliance scan runs in static mode")
        return None
    return OpenAICompletionClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
    )
