"""AI game master for Barkeep.

Submodules:
    prompts: Prompt text for chat turns and summarization.
    context: Bounded request assembly and summary-reply parsing.
    formatting: Plain-text character sheet for the model.
    tools: The character-sheet tool.
    client: OpenAI-compatible completions client.
    session: Chat turns, regeneration and background summaries.
    extraction: Label-regex scraping of items, traits and feats.

Example:
    >>> from barkeep.dm import ChatSession
    >>> from barkeep.models import AppState
    >>>
    >>> session = ChatSession(AppState())
    >>> reply = await session.submit("I ask the barkeep about the missing caravan")
    >>> print(reply.content)
"""

from __future__ import annotations

from barkeep.dm.client import CompletionClient, CompletionReply
from barkeep.dm.context import (
    apply_summary_reply,
    build_chat_messages,
    build_summary_messages,
    build_system_content,
    parse_summary_reply,
)
from barkeep.dm.extraction import (
    ExtractedFeat,
    ExtractedItem,
    ExtractedTrait,
    assistant_messages,
    extract_feat,
    extract_item,
    extract_trait,
)
from barkeep.dm.formatting import format_character_sheet
from barkeep.dm.prompts import CHAT_ERROR_MESSAGE
from barkeep.dm.session import ChatSession
from barkeep.dm.tools import (
    CHARACTER_SHEET_TOOL,
    ChatTool,
    ToolCall,
    ToolResult,
    create_character_sheet_tool,
)


__all__ = [
    # Session
    "ChatSession",
    "CHAT_ERROR_MESSAGE",
    # Client
    "CompletionClient",
    "CompletionReply",
    # Context
    "build_system_content",
    "build_chat_messages",
    "build_summary_messages",
    "parse_summary_reply",
    "apply_summary_reply",
    # Tools
    "CHARACTER_SHEET_TOOL",
    "ChatTool",
    "ToolCall",
    "ToolResult",
    "create_character_sheet_tool",
    "format_character_sheet",
    # Extraction
    "ExtractedItem",
    "ExtractedTrait",
    "ExtractedFeat",
    "assistant_messages",
    "extract_item",
    "extract_trait",
    "extract_feat",
]
