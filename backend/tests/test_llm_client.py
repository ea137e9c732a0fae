"""
Tests for the OpenAI-backed completion client.

The AsyncOpenAI transport is replaced with AsyncMock; no network calls.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from credit_review.services.errors import UpstreamQuotaExceeded
from credit_review.services.llm import (
    CompletionRequest,
    OpenAICompletionClient,
    build_completion_client,
    close_completion_client,
    is_quota_error,
)


REQUEST = CompletionRequest(
    model="gpt-3.5-turbo-1106",
    system_prompt="You are an expert credit compliance analyst.",
    user_content="Analyze this account for compliance violations: {}",
    max_tokens=1000,
    temperature=0.3,
)


def _client_returning(create: AsyncMock) -> OpenAICompletionClient:
    client = OpenAICompletionClient(api_key="sk-test")
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client


def _completion(*contents):
    return SimpleNamespace(choices=[
        SimpleNamespace(message=SimpleNamespace(content=content)) for content in contents
    ])


def _status_error(cls, status_code, code):
    response = httpx.Response(
        status_code,
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
    )
    return cls("provider error", response=response, body={"code": code, "message": "provider error"})


class TestQuotaDetection:

    def test_code_attribute(self):
        error = RuntimeError("quota")
        error.code = "insufficient_quota"
        assert is_quota_error(error)

    def test_message_text(self):
        assert is_quota_error(RuntimeError("Error code: 429 - insufficient_quota"))

    def test_other_errors(self):
        assert not is_quota_error(RuntimeError("rate limited"))


class TestOpenAICompletionClient:

    def test_returns_first_choice(self):
        create = AsyncMock(return_value=_completion("- FCRA Violation: x", "ignored"))
        text = asyncio.run(_client_returning(create).complete(REQUEST))
        assert text == "- FCRA Violation: x"

    def test_sends_system_and_user_messages(self):
        create = AsyncMock(return_value=_completion("ok"))
        asyncio.run(_client_returning(create).complete(REQUEST))

        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "gpt-3.5-turbo-1106"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.3
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
        assert kwargs["messages"][1]["content"] == REQUEST.user_content

    def test_no_choices(self):
        create = AsyncMock(return_value=_completion())
        assert asyncio.run(_client_returning(create).complete(REQUEST)) is None

    def test_quota_error_mapped(self):
        create = AsyncMock(side_effect=_status_error(openai.RateLimitError, 429, "insufficient_quota"))
        with pytest.raises(UpstreamQuotaExceeded):
            asyncio.run(_client_returning(create).complete(REQUEST))

    def test_other_status_errors_propagate(self):
        create = AsyncMock(side_effect=_status_error(openai.RateLimitError, 429, "rate_limit_exceeded"))
        with pytest.raises(openai.RateLimitError):
            asyncio.run(_client_returning(create).complete(REQUEST))

    def test_aclose_releases_transport(self):
        client = OpenAICompletionClient(api_key="sk-test")
        asyncio.run(client.aclose())
        assert client._client.is_closed()


class TestCloseCompletionClient:

    def test_closes_openai_client(self):
        client = OpenAICompletionClient(api_key="sk-test")
        asyncio.run(close_completion_client(client))
        assert client._client.is_closed()

    def test_ignores_clients_without_aclose(self):
        asyncio.run(close_completion_client(None))
        asyncio.run(close_completion_client(SimpleNamespace(complete=AsyncMock())))


class TestBuildCompletionClient:

    def test_offline_without_key(self, offline_settings):
        assert build_completion_client(offline_settings) is None

    def test_openai_client_with_key(self, settings):
        assert isinstance(build_completion_client(settings), OpenAICompletionClient)
