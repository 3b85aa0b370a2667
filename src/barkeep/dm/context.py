"""Context assembly and campaign-summary maintenance.

Each chat request is bounded: the system prompt (with the rolling campaign
summary folded in), the last N literal turns and the new user input. The
rest of the history survives only through the summary, which a separate
request regenerates after every successful turn.

Summary replies are parsed leniently. Headers are matched
case-insensitively, each section ends at the next known header, and a
section the model left out keeps its previous value.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Sequence

from barkeep.core.constants import DEFAULT_SUMMARY_WINDOW
from barkeep.core.logging import get_logger
from barkeep.dm.prompts import (
    CONTEXT_HEADING,
    CONTEXT_PREAMBLE,
    EMPTY_LOG,
    SUMMARY_HEADERS,
    SUMMARY_SYSTEM_PROMPT,
    SUMMARY_USER_TEMPLATE,
    TOOL_INSTRUCTIONS,
)
from barkeep.models.app_state import AppState
from barkeep.models.chat import CampaignSummary, ChatMessage, utc_timestamp
from barkeep.models.enums import MessageRole


logger = get_logger(__name__)

# A header starts a line (markdown '#'/'**' allowed) and ends with a colon
# or the end of that line
_HEADER_PATTERN = re.compile(
    r"^[ \t#*]*("
    + "|".join(re.escape(name) for name, _ in SUMMARY_HEADERS)
    + r")[ \t*]*(?::|$)[ \t*]*",
    re.IGNORECASE | re.MULTILINE,
)
_FIELD_BY_HEADER = {name.upper(): field for name, field in SUMMARY_HEADERS}

_HISTORY_ROLES = (MessageRole.USER, MessageRole.ASSISTANT)


# =============================================================================
# Chat Requests
# =============================================================================


def build_system_content(
    system_prompt: str,
    summary: CampaignSummary,
    include_tool_instructions: bool = False,
) -> str:
    """Compose the system message.

    Args:
        system_prompt: Base game-master prompt.
        summary: Current campaign summary; omitted when empty.
        include_tool_instructions: Append the character-sheet tool block.

    Returns:
        The system message text.
    """
    parts = [system_prompt.strip()]

    if summary.has_content:
        parts.append(f"{CONTEXT_HEADING}\n\n{CONTEXT_PREAMBLE}\n\n{summary.to_context_text()}")

    if include_tool_instructions:
        parts.append(TOOL_INSTRUCTIONS)

    return "\n\n".join(part for part in parts if part)


def recent_history(messages: Sequence[ChatMessage], limit: int) -> list[ChatMessage]:
    """The last ``limit`` user/assistant turns, oldest first."""
    if limit <= 0:
        return []
    turns = [m for m in messages if m.role in _HISTORY_ROLES]
    return turns[-limit:]


def build_chat_messages(
    state: AppState,
    user_input: str,
    history: Sequence[ChatMessage] | None = None,
) -> list[dict[str, Any]]:
    """Assemble one chat request.

    Args:
        state: Application state supplying prompt, summary and window size.
        user_input: The new user message.
        history: Prior messages to window over. Defaults to the full chat
            history; pass the messages before the new input when it has
            already been appended.

    Returns:
        System message, the last ``max_previous_messages`` prior turns and
        the user message, as role/content dicts.
    """
    prior = state.chat_messages if history is None else history
    system = build_system_content(
        state.system_prompt,
        state.campaign_summary,
        include_tool_instructions=state.enable_character_tool,
    )

    messages: list[dict[str, Any]] = [{"role": "system", "content": system}]
    messages.extend(m.to_api() for m in recent_history(prior, state.max_previous_messages))
    messages.append({"role": "user", "content": user_input})
    return messages


# =============================================================================
# Summarization
# =============================================================================


def format_transcript(messages: Sequence[ChatMessage]) -> str:
    """Render turns as ``Player:`` / ``DM:`` lines."""
    lines = []
    for message in messages:
        speaker = "Player" if message.role == MessageRole.USER else "DM"
        lines.append(f"{speaker}: {message.content.strip()}")
    return "\n\n".join(lines)


def build_summary_messages(
    history: Sequence[ChatMessage],
    summary: CampaignSummary,
    window: int = DEFAULT_SUMMARY_WINDOW,
) -> list[dict[str, Any]]:
    """Assemble the summarization request.

    Args:
        history: Full chat history.
        summary: The summary being replaced.
        window: Number of recent turns to send.

    Returns:
        System and user messages asking for the five headed sections.
    """
    previous_log = "\n\n".join(
        f"{name}:\n{getattr(summary, field).strip() or '-'}"
        for name, field in SUMMARY_HEADERS
    ) if summary.has_content else EMPTY_LOG

    user = SUMMARY_USER_TEMPLATE.format(
        previous_log=previous_log,
        conversation=format_transcript(recent_history(history, window)),
    )
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


def parse_summary_reply(text: str) -> dict[str, str]:
    """Split a summary reply into fields.

    Args:
        text: The model's reply.

    Returns:
        Field name to trimmed section text, only for headers present. When a
        header appears twice the later section wins.
    """
    matches = list(_HEADER_PATTERN.finditer(text or ""))
    sections: dict[str, str] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        field = _FIELD_BY_HEADER[match.group(1).upper()]
        sections[field] = text[match.end():end].strip()
    return sections


def apply_summary_reply(
    summary: CampaignSummary,
    text: str,
    now: datetime | None = None,
) -> CampaignSummary | None:
    """Merge a summary reply over the current summary.

    Args:
        summary: Current summary.
        text: The model's reply.
        now: Timestamp for ``last_updated``; defaults to the current time.

    Returns:
        The updated summary, or None if the reply had none of the headers.
    """
    sections = parse_summary_reply(text)
    if not sections:
        logger.warning("Summary reply had no recognizable sections", length=len(text or ""))
        return None

    missing = [field for _, field in SUMMARY_HEADERS if field not in sections]
    if missing:
        logger.debug("Summary reply missing sections", missing=missing)

    return summary.model_copy(update={**sections, "last_updated": utc_timestamp(now)})


__all__ = [
    "build_system_content",
    "recent_history",
    "build_chat_messages",
    "format_transcript",
    "build_summary_messages",
    "parse_summary_reply",
    "apply_summary_reply",
]
