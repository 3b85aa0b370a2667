"""Client for the OpenAI-compatible chat-completions endpoint.

Wraps the openai SDK. The endpoint is configured by its full URL
(``https://api.openai.com/v1/chat/completions``,
``http://localhost:1234/v1/chat/completions``...) and a bearer token.
SDK exceptions are translated into the AIControlError family; rate limits
and connection failures are retried with exponential backoff first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from barkeep.core.config import derive_base_url, get_settings
from barkeep.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
)
from barkeep.core.logging import get_logger
from barkeep.dm.tools import ToolCall, parse_tool_calls


logger = get_logger(__name__)

# Local servers accept any token, but the SDK refuses an empty one
_PLACEHOLDER_KEY = "not-needed"


@dataclass
class CompletionReply:
    """The first choice of a chat completion.

    Attributes:
        content: Assistant text ('' when the model only called tools).
        tool_calls: Tool calls requested by the model.
        finish_reason: Why generation stopped, if reported.
    """

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: str | None = None

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)


class CompletionClient:
    """Async chat-completions client.

    Attributes:
        api_url: Full completions URL.
        model: Model identifier.
        max_retries: Retries on rate limiting and connection errors.
        timeout_seconds: Transport timeout handed to the SDK.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        model: str = "",
        *,
        max_retries: int | None = None,
        timeout_seconds: float | None = None,
        sdk_client: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Full chat-completions URL.
            api_key: Bearer token; may be blank.
            model: Model identifier.
            max_retries: Retry count, defaults to settings.
            timeout_seconds: Transport timeout, defaults to settings.
            sdk_client: Pre-built ``AsyncOpenAI``-compatible client. When
                given, it is used as-is and never rebuilt.
        """
        settings = get_settings()
        self.api_url = api_url
        self.model = model or settings.ai.model
        self.max_retries = settings.ai.max_retries if max_retries is None else max_retries
        self.timeout_seconds = timeout_seconds or settings.ai.timeout_seconds
        self._api_key = api_key
        self._client: Any = sdk_client
        self._owns_client = sdk_client is None
        # Replaced SDK clients, closed once no request is using them
        self._stale: list[Any] = []
        self._in_flight = 0

    def configure(self, api_url: str, api_key: str, model: str) -> None:
        """Follow endpoint edits made in the settings panel.

        A built SDK client is replaced when the URL or key changes. The old
        one is closed after the last request using it finishes.
        """
        if (api_url, api_key) != (self.api_url, self._api_key) and self._owns_client:
            if self._client is not None:
                self._stale.append(self._client)
            self._client = None
        self.api_url = api_url
        self._api_key = api_key
        self.model = model or self.model

    def _get_client(self) -> Any:
        """Get or create the SDK client for the configured endpoint."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as exc:
                raise AIControlError(
                    "openai package not installed",
                    provider=self.api_url,
                ) from exc

            self._client = AsyncOpenAI(
                api_key=self._api_key or _PLACEHOLDER_KEY,
                base_url=derive_base_url(self.api_url),
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionReply:
        """Send one chat-completions request.

        Args:
            messages: Role/content messages, oldest first.
            tools: OpenAI tool schemas to declare.
            tool_choice: 'auto', 'none' or 'required'; only sent with tools.
            temperature: Sampling temperature.
            max_tokens: Token cap.

        Returns:
            The first choice.

        Raises:
            AIRateLimitError: Rate limited after all retries.
            AIConnectionError: Endpoint unreachable after all retries.
            AIResponseError: Non-2xx status or unusable body.
            AIControlError: Any other failure.
        """
        from openai import APIConnectionError, APIStatusError, RateLimitError

        request: dict[str, Any] = {"model": self.model, "messages": messages}
        if tools:
            request["tools"] = tools
            request["tool_choice"] = tool_choice or "auto"
        if temperature is not None:
            request["temperature"] = temperature
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        logger.debug(
            "Requesting completion",
            model=self.model,
            messages=len(messages),
            tools=len(tools or []),
        )

        self._in_flight += 1
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((RateLimitError, APIConnectionError)),
                stop=stop_after_attempt(self.max_retries + 1),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                reraise=True,
            ):
                with attempt:
                    response = await self._get_client().chat.completions.create(**request)

        except RateLimitError as exc:
            raise AIRateLimitError(
                f"Rate limit exceeded after {self.max_retries} retries",
                model=self.model,
                provider=self.api_url,
            ) from exc

        except APIConnectionError as exc:
            raise AIConnectionError(
                f"Failed to connect to completion endpoint: {exc}",
                model=self.model,
                provider=self.api_url,
            ) from exc

        except APIStatusError as exc:
            raise AIResponseError(
                f"Completion endpoint returned an error: {exc}",
                model=self.model,
                provider=self.api_url,
                details={"status_code": exc.status_code},
            ) from exc

        except AIControlError:
            raise

        except Exception as exc:
            raise AIControlError(
                f"Completion request failed: {exc}",
                model=self.model,
                provider=self.api_url,
            ) from exc

        finally:
            self._in_flight -= 1
            if not self._in_flight:
                await self._close_stale()

        return self._parse_reply(response)

    async def _close_stale(self) -> None:
        while self._stale:
            stale = self._stale.pop()
            await stale.close()
            logger.debug("Closed replaced completion client")

    async def aclose(self) -> None:
        """Close SDK clients this object built.

        An injected ``sdk_client`` is left open for its owner to close.
        """
        await self._close_stale()
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    def _parse_reply(self, response: Any) -> CompletionReply:
        """Extract the first choice, rejecting bodies without one."""
        choices = getattr(response, "choices", None)
        if not choices:
            raise AIResponseError(
                "Completion reply has no choices",
                model=self.model,
                provider=self.api_url,
            )

        choice = choices[0]
        message = getattr(choice, "message", None)
        if message is None:
            raise AIResponseError(
                "Completion reply has no message",
                model=self.model,
                provider=self.api_url,
            )

        tool_calls = parse_tool_calls(message)
        content = getattr(message, "content", None)
        if content is None and not tool_calls:
            raise AIResponseError(
                "Completion reply has neither content nor tool calls",
                model=self.model,
                provider=self.api_url,
            )

        return CompletionReply(
            content=content or "",
            tool_calls=tool_calls,
            finish_reason=getattr(choice, "finish_reason", None),
        )


__all__ = ["CompletionClient", "CompletionReply"]
