"""The explicit application-state object.

One AppState holds everything a session needs: the character document,
the chat history, the endpoint settings, the system prompt and the
campaign summary. It is passed down to the chat session and persisted
wholesale at an explicit load/save boundary (see ``barkeep.storage``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from barkeep.core.constants import (
    DEFAULT_API_URL,
    DEFAULT_MAX_PREVIOUS_MESSAGES,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    MAX_PREVIOUS_MESSAGES_LIMIT,
    MIN_PREVIOUS_MESSAGES,
)
from barkeep.core.exceptions import MessageNotFoundError
from barkeep.models.character import CharacterData, SheetModel
from barkeep.models.chat import CampaignSummary, ChatMessage


if TYPE_CHECKING:
    from barkeep.core.config import Settings


class AppState(SheetModel):
    """Application state, one writer at a time.

    Attributes:
        character: The character document.
        chat_messages: Ordered chat history.
        api_url: Chat-completions URL.
        api_key: Bearer token ('' for servers that need none).
        model: Model name.
        system_prompt: Base game-master prompt.
        campaign_summary: Rolling summary; the summarization task replaces it.
        max_previous_messages: Literal prior turns sent per request.
        enable_character_tool: Declare the character-sheet tool to the model.
    """

    character: CharacterData = Field(default_factory=CharacterData)
    chat_messages: list[ChatMessage] = Field(default_factory=list)
    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    campaign_summary: CampaignSummary = Field(default_factory=CampaignSummary)
    max_previous_messages: int = Field(
        default=DEFAULT_MAX_PREVIOUS_MESSAGES,
        ge=MIN_PREVIOUS_MESSAGES,
        le=MAX_PREVIOUS_MESSAGES_LIMIT,
    )
    enable_character_tool: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> AppState:
        """Seed a fresh state from configuration defaults."""
        api_key = settings.ai.api_key.get_secret_value() if settings.ai.api_key else ""
        return cls(
            api_url=settings.ai.api_url,
            api_key=api_key,
            model=settings.ai.model,
            max_previous_messages=settings.context.max_previous_messages,
            enable_character_tool=settings.context.enable_character_tool,
        )

    def find_message(self, message_id: str) -> int:
        """Index of a message in the history.

        Raises:
            MessageNotFoundError: If no message has that id.
        """
        for i, message in enumerate(self.chat_messages):
            if message.id == message_id:
                return i
        raise MessageNotFoundError("No chat message with that id", message_id=message_id)


__all__ = ["AppState"]
