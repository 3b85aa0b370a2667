"""Prompt text for chat turns and summarization."""

from __future__ import annotations


# =============================================================================
# Chat Turn
# =============================================================================


CONTEXT_HEADING = "## CAMPAIGN CONTEXT"
"""Delimits the stored summary inside the system message."""

CONTEXT_PREAMBLE = (
    "The following is a summary of the campaign so far. "
    "Treat it as established fact and stay consistent with it."
)

TOOL_INSTRUCTIONS = """## CHARACTER SHEET

You can call the `get_character_sheet` tool to read the player's current character sheet (abilities, skills, HP, spells, spell slots, inventory and equipment). Call it whenever you need exact numbers instead of guessing or asking the player."""

CHAT_ERROR_MESSAGE = (
    "Sorry, there was an error processing your request. "
    "Please check your API settings and try again."
)
"""Synthetic assistant message shown when a chat request fails."""


# =============================================================================
# Summarization
# =============================================================================


# Reply headers, in order, mapped to CampaignSummary fields
SUMMARY_HEADERS: tuple[tuple[str, str], ...] = (
    ("CONVERSATION SUMMARY", "conversation_summary"),
    ("PLOT POINTS", "plot_points"),
    ("NPCS", "npcs"),
    ("LOCATIONS", "locations"),
    ("QUESTS", "quests"),
)

SUMMARY_SYSTEM_PROMPT = """You maintain the campaign log for a solo Dungeons & Dragons game.
Update the log using the recent conversation. Keep what is still true from the previous log, add what is new, and drop what is resolved or contradicted.
Be concise and factual. Use short bullet points for everything except the conversation summary, which is 2-4 sentences of prose."""

SUMMARY_USER_TEMPLATE = """PREVIOUS LOG:
{previous_log}

RECENT CONVERSATION:
{conversation}

Reply with exactly these five sections, each header on its own line followed by its content:

CONVERSATION SUMMARY:
PLOT POINTS:
NPCS:
LOCATIONS:
QUESTS:"""

EMPTY_LOG = "(nothing recorded yet)"


__all__ = [
    "CONTEXT_HEADING",
    "CONTEXT_PREAMBLE",
    "TOOL_INSTRUCTIONS",
    "CHAT_ERROR_MESSAGE",
    "SUMMARY_HEADERS",
    "SUMMARY_SYSTEM_PROMPT",
    "SUMMARY_USER_TEMPLATE",
    "EMPTY_LOG",
]
