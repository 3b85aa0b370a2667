"""Tests for the completions client."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import openai
import pytest

from barkeep.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
)
from barkeep.dm.client import CompletionClient


URL = "http://localhost:1234/v1/chat/completions"


def _request() -> httpx.Request:
    return httpx.Request("POST", URL)


def _status_error(status: int) -> openai.APIStatusError:
    response = httpx.Response(status, request=_request())
    if status == 429:
        return openai.RateLimitError("rate limited", response=response, body=None)
    return openai.APIStatusError(f"status {status}", response=response, body=None)


class TestComplete:
    """Tests for successful requests."""

    def test_plain_reply(self, completion_client: CompletionClient, fake_api: Any, completion: Any) -> None:
        """Test content comes back and the request is well formed."""
        fake_api.queue(completion(content="The door creaks open."))

        reply = asyncio.run(completion_client.complete([{"role": "user", "content": "I push the door"}]))

        assert reply.content == "The door creaks open."
        assert reply.wants_tools is False
        request = fake_api.requests[0]
        assert request["model"] == "test-model"
        assert "tools" not in request

    def test_tools_declared(
        self,
        completion_client: CompletionClient,
        fake_api: Any,
        completion: Any,
        tool_call: Any,
    ) -> None:
        """Test tool schemas and tool-call replies."""
        fake_api.queue(completion(content=None, tool_calls=[tool_call()], finish_reason="tool_calls"))
        schema = {"type": "function", "function": {"name": "get_character_sheet", "parameters": {}}}

        reply = asyncio.run(completion_client.complete([], tools=[schema], max_tokens=100))

        assert reply.wants_tools is True
        assert reply.content == ""
        assert fake_api.requests[0]["tool_choice"] == "auto"
        assert fake_api.requests[0]["max_tokens"] == 100


class TestErrors:
    """Tests for failure translation."""

    def test_status_error(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test a non-2xx status becomes AIResponseError."""
        fake_api.queue(_status_error(500))

        with pytest.raises(AIResponseError) as exc_info:
            asyncio.run(completion_client.complete([]))

        assert exc_info.value.details["status_code"] == 500

    def test_rate_limit(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test a 429 becomes AIRateLimitError once retries run out."""
        fake_api.queue(_status_error(429))

        with pytest.raises(AIRateLimitError):
            asyncio.run(completion_client.complete([]))

    def test_connection_error(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test a transport failure becomes AIConnectionError."""
        fake_api.queue(openai.APIConnectionError(request=_request()))

        with pytest.raises(AIConnectionError):
            asyncio.run(completion_client.complete([]))

    def test_unexpected_error_wrapped(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test any other failure is still an AIControlError."""
        fake_api.queue(ValueError("bad json body"))

        with pytest.raises(AIControlError) as exc_info:
            asyncio.run(completion_client.complete([]))

        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("body", ["no_choices", "no_message", "no_content"])
    def test_unusable_body(
        self,
        body: str,
        completion_client: CompletionClient,
        fake_api: Any,
        completion: Any,
    ) -> None:
        """Test replies without a usable first choice."""
        reply = completion(content=None)
        if body == "no_choices":
            reply.choices = []
        elif body == "no_message":
            reply.choices[0].message = None
        fake_api.queue(reply)

        with pytest.raises(AIResponseError):
            asyncio.run(completion_client.complete([]))


class TestRetries:
    """Tests for transport retries."""

    def test_connection_retried(self, fake_api: Any, completion: Any) -> None:
        """Test a dropped connection is retried once and then succeeds."""
        client = CompletionClient(URL, model="m", max_retries=1, sdk_client=fake_api)
        fake_api.queue(openai.APIConnectionError(request=_request()), completion(content="ok"))

        reply = asyncio.run(client.complete([]))

        assert reply.content == "ok"
        assert len(fake_api.requests) == 2

    def test_status_error_not_retried(self, fake_api: Any) -> None:
        """Test a 500 fails without a second attempt."""
        client = CompletionClient(URL, model="m", max_retries=3, sdk_client=fake_api)
        fake_api.queue(_status_error(500))

        with pytest.raises(AIResponseError):
            asyncio.run(client.complete([]))

        assert len(fake_api.requests) == 1


class TestConfigure:
    """Tests for endpoint changes."""

    def test_owned_client_rebuilt_on_url_change(self) -> None:
        """Test that a URL or key edit drops the built SDK client."""
        client = CompletionClient(URL, api_key="", model="m")
        first = client._get_client()

        client.configure(URL, "", "m")
        assert client._get_client() is first

        client.configure("http://localhost:8080/v1/chat/completions", "key", "m")
        second = client._get_client()

        assert second is not first
        assert str(second.base_url).startswith("http://localhost:8080/v1")

    def test_injected_client_kept(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test an injected client survives endpoint edits."""
        completion_client.configure("http://elsewhere/v1/chat/completions", "k", "other-model")

        assert completion_client._get_client() is fake_api
        assert completion_client.model == "other-model"


class TestClose:
    """Tests for releasing SDK connections."""

    def test_replaced_client_closed_after_request(self, fake_api: Any, completion: Any) -> None:
        """Test an endpoint edit closes the old SDK client once it is idle."""
        client = CompletionClient(URL, model="m", max_retries=0)
        client._client = fake_api
        replacement = type(fake_api)([completion(content="ok")])

        client.configure("http://localhost:8080/v1/chat/completions", "key", "m")
        client._client = replacement
        assert fake_api.closed is False

        asyncio.run(client.complete([]))

        assert fake_api.closed is True
        assert replacement.closed is False

    def test_aclose_closes_owned_clients(self, fake_api: Any) -> None:
        """Test aclose closes both the current and a replaced client."""
        client = CompletionClient(URL, model="m", max_retries=0)
        client._client = fake_api
        client.configure("http://localhost:8080/v1/chat/completions", "", "m")
        current = type(fake_api)()
        client._client = current

        asyncio.run(client.aclose())

        assert fake_api.closed is True
        assert current.closed is True
        assert client._client is None

    def test_injected_client_left_open(self, completion_client: CompletionClient, fake_api: Any) -> None:
        """Test an injected SDK client is not closed."""
        asyncio.run(completion_client.aclose())

        assert fake_api.closed is False
