"""Chat session: one player, one game master model.

The session owns the request/response flow around an AppState:

    - submit() appends the user message, asks the model (resolving at most
      one round of character-sheet tool calls) and appends exactly one
      assistant message: the reply, or a fixed error message.
    - After a successful turn the campaign summary is refreshed by an
      independent background task. Primary turns and summary refreshes are
      not ordered against each other; whichever refresh finishes last owns
      the summary.
    - regenerate(), delete_message() and clear_messages() edit the history.

Example:
    >>> session = ChatSession(AppState())
    >>> reply = await session.submit("I push open the tavern door.")
    >>> await session.wait_for_summaries()
"""

from __future__ import annotations

import asyncio
from typing import Any

from barkeep.core.config import Settings, get_settings
from barkeep.core.exceptions import (
    AIControlError,
    ChatBusyError,
    ChatError,
    RegenerationInProgressError,
)
from barkeep.core.logging import get_logger, turn_context
from barkeep.dm.client import CompletionClient
from barkeep.dm.context import (
    apply_summary_reply,
    build_chat_messages,
    build_summary_messages,
)
from barkeep.dm.prompts import CHAT_ERROR_MESSAGE
from barkeep.dm.tools import ChatTool, create_character_sheet_tool, execute_tool_call
from barkeep.models.app_state import AppState
from barkeep.models.chat import ChatMessage
from barkeep.models.enums import MessageRole


logger = get_logger(__name__)


class ChatSession:
    """Drives chat turns and summary upkeep for one AppState.

    Attributes:
        state: The application state; mutated in place.
        client: Completions client, re-pointed at the state's endpoint
            before every request.
        settings: Application settings.
        pending_summaries: Summary refreshes still running.
    """

    def __init__(
        self,
        state: AppState,
        client: CompletionClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.state = state
        self.settings = settings or get_settings()
        self.client = client or CompletionClient(
            state.api_url,
            state.api_key,
            state.model,
            max_retries=self.settings.ai.max_retries,
            timeout_seconds=self.settings.ai.timeout_seconds,
        )
        self.pending_summaries: set[asyncio.Task[bool]] = set()

        self._busy = False
        self._regenerating: str | None = None
        self._character_tool = create_character_sheet_tool(lambda: self.state.character)

        logger.debug("Chat session created", messages=len(state.chat_messages))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        """True while a submitted turn awaits its reply."""
        return self._busy

    @property
    def regenerating_id(self) -> str | None:
        """Id of the message being regenerated, if any."""
        return self._regenerating

    @property
    def tools(self) -> list[ChatTool]:
        """Tools declared on the first request of a turn."""
        return [self._character_tool] if self.state.enable_character_tool else []

    # -------------------------------------------------------------------------
    # Chat Turns
    # -------------------------------------------------------------------------

    async def submit(self, text: str) -> ChatMessage | None:
        """Send one player message.

        Args:
            text: The player's input.

        Returns:
            The appended assistant message, or None for blank input.

        Raises:
            ChatBusyError: If a previous turn is still outstanding.
        """
        if self._busy:
            raise ChatBusyError("A message is already being processed")
        if not text.strip():
            return None

        history = list(self.state.chat_messages)
        self.state.chat_messages.append(ChatMessage(role=MessageRole.USER, content=text))
        self._busy = True

        succeeded = False
        try:
            try:
                content = await self._complete_turn(
                    build_chat_messages(self.state, text, history=history)
                )
                succeeded = True
            except AIControlError as exc:
                logger.error("Chat request failed", error=exc.message, model=self.state.model)
                content = CHAT_ERROR_MESSAGE

            reply = ChatMessage(role=MessageRole.ASSISTANT, content=content)
            self.state.chat_messages.append(reply)
        finally:
            self._busy = False

        if succeeded and self.settings.context.auto_summarize:
            self.schedule_summary()

        return reply

    async def regenerate(self, message_id: str) -> ChatMessage:
        """Re-ask the model for an assistant message.

        The request is rebuilt from the history preceding the message. On
        success the message gets the new content and a new id; on failure
        it is left untouched and the error propagates.

        Args:
            message_id: Id of an assistant message.

        Returns:
            The replacement message.

        Raises:
            RegenerationInProgressError: If another regeneration is running.
            MessageNotFoundError: If the message no longer exists.
            ChatError: If the message is not a regenerable assistant turn.
            AIControlError: If the request fails.
        """
        if self._regenerating is not None:
            raise RegenerationInProgressError(
                "Another message is being regenerated",
                message_id=self._regenerating,
            )

        index = self.state.find_message(message_id)
        target = self.state.chat_messages[index]
        if target.role != MessageRole.ASSISTANT:
            raise ChatError("Only assistant messages can be regenerated", details={"message_id": message_id})

        preceding = self.state.chat_messages[:index]
        user_index = next(
            (i for i in range(len(preceding) - 1, -1, -1) if preceding[i].role == MessageRole.USER),
            None,
        )
        if user_index is None:
            raise ChatError("No player message precedes this reply", details={"message_id": message_id})

        messages = build_chat_messages(
            self.state,
            preceding[user_index].content,
            history=preceding[:user_index],
        )

        self._regenerating = message_id
        try:
            content = await self._complete_turn(messages)
        except AIControlError as exc:
            logger.error("Regeneration failed", error=exc.message, message_id=message_id)
            raise
        finally:
            self._regenerating = None

        # The history may have been edited while waiting
        index = self.state.find_message(message_id)
        replacement = ChatMessage(role=MessageRole.ASSISTANT, content=content)
        self.state.chat_messages[index] = replacement

        logger.info("Message regenerated", old_id=message_id, new_id=replacement.id)
        return replacement

    def delete_message(self, message_id: str) -> ChatMessage:
        """Remove one message from the history.

        Raises:
            MessageNotFoundError: If no message has that id.
        """
        index = self.state.find_message(message_id)
        removed = self.state.chat_messages.pop(index)
        logger.debug("Message deleted", message_id=message_id, role=removed.role.value)
        return removed

    def clear_messages(self) -> None:
        """Drop the whole chat history. The campaign summary is kept."""
        count = len(self.state.chat_messages)
        self.state.chat_messages.clear()
        logger.info("Chat history cleared", removed=count)

    async def _complete_turn(self, messages: list[dict[str, Any]]) -> str:
        """Ask the model, serving character-sheet tool calls once."""
        with turn_context(self.state.character.name, self.state.model, history=len(messages)):
            return await self._request_with_tools(messages)

    async def _request_with_tools(self, messages: list[dict[str, Any]]) -> str:
        self.client.configure(self.state.api_url, self.state.api_key, self.state.model)

        tools = self.tools
        reply = await self.client.complete(
            messages,
            tools=[t.to_openai_schema() for t in tools] or None,
            temperature=self.settings.ai.temperature,
            max_tokens=self.settings.ai.max_tokens,
        )
        if not reply.wants_tools or not tools:
            return reply.content

        followup = list(messages)
        followup.append({
            "role": "assistant",
            "content": reply.content or None,
            "tool_calls": [call.to_api() for call in reply.tool_calls],
        })
        for call in reply.tool_calls:
            result = execute_tool_call(tools, call)
            followup.append({
                "role": "tool",
                "tool_call_id": call.call_id,
                "content": result.result,
            })

        # Tools are not declared again, so this reply is final
        final = await self.client.complete(
            followup,
            temperature=self.settings.ai.temperature,
            max_tokens=self.settings.ai.max_tokens,
        )
        if final.wants_tools:
            logger.warning("Model requested tools again; using reply as final")
        return final.content

    # -------------------------------------------------------------------------
    # Campaign Summary
    # -------------------------------------------------------------------------

    def schedule_summary(self) -> asyncio.Task[bool]:
        """Start a background summary refresh on the running loop."""
        task = asyncio.create_task(self.refresh_summary())
        self.pending_summaries.add(task)
        task.add_done_callback(self.pending_summaries.discard)
        return task

    async def wait_for_summaries(self) -> None:
        """Wait until every scheduled summary refresh has finished."""
        while self.pending_summaries:
            await asyncio.gather(*list(self.pending_summaries))

    async def aclose(self) -> None:
        """Let scheduled summaries finish, then close the client's connections."""
        await self.wait_for_summaries()
        await self.client.aclose()

    async def refresh_summary(self) -> bool:
        """Regenerate the campaign summary from recent turns.

        Failures are logged and leave the summary as it was. Sections the
        model leaves out keep their previous text.

        Returns:
            True if the summary was replaced.
        """
        if not self.state.chat_messages:
            return False

        messages = build_summary_messages(
            self.state.chat_messages,
            self.state.campaign_summary,
            window=self.settings.context.summary_window,
        )

        self.client.configure(self.state.api_url, self.state.api_key, self.state.model)
        try:
            reply = await self.client.complete(
                messages,
                max_tokens=self.settings.ai.summary_max_tokens,
            )
        except AIControlError as exc:
            logger.warning("Summary refresh failed", error=exc.message, model=self.state.model)
            return False

        updated = apply_summary_reply(self.state.campaign_summary, reply.content)
        if updated is None:
            return False

        self.state.campaign_summary = updated
        logger.info("Campaign summary updated", last_updated=updated.last_updated)
        return True


__all__ = ["ChatSession"]
