"""Chat history and campaign summary models."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import Field

from barkeep.models.character import SheetModel
from barkeep.models.enums import MessageRole


def new_message_id() -> str:
    """Fresh message identity; also used when a message is regenerated."""
    return uuid4().hex


class ChatMessage(SheetModel):
    """One chat turn.

    Attributes:
        id: Message identity. Replaced when the message is regenerated.
        role: Author.
        content: Message text.
    """

    id: str = Field(default_factory=new_message_id)
    role: MessageRole
    content: str = ""

    def to_api(self) -> dict[str, str]:
        """Role/content pair for the completions request."""
        return {"role": self.role.value, "content": self.content}


# Summary fields in the order they are shown and requested
SUMMARY_FIELDS: tuple[str, ...] = (
    "conversation_summary",
    "plot_points",
    "npcs",
    "locations",
    "quests",
)

SUMMARY_LABELS: dict[str, str] = {
    "conversation_summary": "Conversation Summary",
    "plot_points": "Plot Points",
    "npcs": "NPCs",
    "locations": "Locations",
    "quests": "Quests",
}


class CampaignSummary(SheetModel):
    """Rolling natural-language compression of the chat history.

    Replaced wholesale by each successful summarization; user edits write
    the same fields.
    """

    conversation_summary: str = ""
    plot_points: str = ""
    npcs: str = ""
    locations: str = ""
    quests: str = ""
    last_updated: str | None = None

    @property
    def has_content(self) -> bool:
        return any(getattr(self, name).strip() for name in SUMMARY_FIELDS)

    def sections(self) -> list[tuple[str, str]]:
        """Non-empty (label, text) pairs in display order."""
        return [
            (SUMMARY_LABELS[name], getattr(self, name).strip())
            for name in SUMMARY_FIELDS
            if getattr(self, name).strip()
        ]

    def to_context_text(self) -> str:
        """Render the non-empty sections for a prompt."""
        return "\n\n".join(f"{label}:\n{text}" for label, text in self.sections())

    def edited(self, **fields: str) -> CampaignSummary:
        """Copy with user-edited fields; unknown names are ignored."""
        updates = {k: v for k, v in fields.items() if k in SUMMARY_FIELDS}
        return self.model_copy(update=updates)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 timestamp for ``last_updated``."""
    return (now or datetime.now(timezone.utc)).isoformat()


__all__ = [
    "ChatMessage",
    "CampaignSummary",
    "SUMMARY_FIELDS",
    "SUMMARY_LABELS",
    "new_message_id",
    "utc_timestamp",
]
