"""Tools the game master model may call.

Tools are defined by Python and called by the LLM. The LLM names the tool,
Python executes it against the current state and the text result goes
back into the conversation.

Only one tool exists: ``get_character_sheet``, a zero-argument lookup of
the player's sheet.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import BaseModel, Field

from barkeep.core.logging import get_logger
from barkeep.dm.formatting import format_character_sheet
from barkeep.models.character import CharacterData


logger = get_logger(__name__)

CHARACTER_SHEET_TOOL = "get_character_sheet"


# =============================================================================
# Tool Base Classes
# =============================================================================


class ToolResult(BaseModel):
    """Result of a tool execution."""

    tool_name: str
    success: bool
    result: str
    call_id: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


@dataclass
class ToolCall:
    """A tool call requested by the model.

    Attributes:
        tool_name: Function name.
        arguments: Decoded JSON arguments.
        call_id: Id echoed back in the tool message.
        raw_arguments: Arguments string as sent by the model.
    """

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: str = ""
    raw_arguments: str = "{}"

    def to_api(self) -> dict[str, Any]:
        """The call as it appears in an assistant message."""
        return {
            "id": self.call_id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": self.raw_arguments},
        }


class ChatTool:
    """A tool the model can invoke."""

    def __init__(
        self,
        name: str,
        description: str,
        parameters: dict[str, Any],
        handler: Callable[..., ToolResult],
    ) -> None:
        self.name = name
        self.description = description
        self.parameters = parameters
        self.handler = handler

    def to_openai_schema(self) -> dict[str, Any]:
        """Convert to OpenAI function schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with given arguments."""
        try:
            return self.handler(**kwargs)
        except Exception as exc:
            logger.exception("Tool failed", tool=self.name)
            return ToolResult(
                tool_name=self.name,
                success=False,
                result=f"Error: {exc}",
            )


# =============================================================================
# Character Sheet Tool
# =============================================================================


def create_character_sheet_tool(get_character: Callable[[], CharacterData]) -> ChatTool:
    """Build the character-sheet tool.

    Args:
        get_character: Returns the document at call time, so the model sees
            edits made after the session was created.

    Returns:
        The tool.
    """

    def handle_get_character_sheet(**_: Any) -> ToolResult:
        text = format_character_sheet(get_character())
        return ToolResult(tool_name=CHARACTER_SHEET_TOOL, success=True, result=text)

    return ChatTool(
        name=CHARACTER_SHEET_TOOL,
        description=(
            "Get the player's current character sheet: ability scores, skills, "
            "HP and AC, spells, remaining spell slots, inventory, equipment, "
            "proficiencies, traits, feats and background."
        ),
        parameters={"type": "object", "properties": {}, "required": []},
        handler=handle_get_character_sheet,
    )


def parse_tool_calls(message: Any) -> list[ToolCall]:
    """Read tool calls off a completion message.

    Args:
        message: ``choices[0].message`` of a chat completion.

    Returns:
        The requested calls; malformed argument JSON decodes to ``{}``.
    """
    calls: list[ToolCall] = []
    for tc in getattr(message, "tool_calls", None) or []:
        raw = tc.function.arguments or "{}"
        try:
            arguments = json.loads(raw)
        except json.JSONDecodeError:
            arguments = {}
        if not isinstance(arguments, dict):
            arguments = {}
        calls.append(ToolCall(
            tool_name=tc.function.name,
            arguments=arguments,
            call_id=tc.id,
            raw_arguments=raw,
        ))
    return calls


def execute_tool_call(tools: list[ChatTool], call: ToolCall) -> ToolResult:
    """Run a requested call against the registered tools."""
    for chat_tool in tools:
        if chat_tool.name == call.tool_name:
            logger.info("Executing tool", tool=call.tool_name)
            result = chat_tool.execute(**call.arguments)
            return result.model_copy(update={"call_id": call.call_id})

    return ToolResult(
        tool_name=call.tool_name,
        success=False,
        result=f"Unknown tool: {call.tool_name}",
        call_id=call.call_id,
    )


__all__ = [
    "CHARACTER_SHEET_TOOL",
    "ToolResult",
    "ToolCall",
    "ChatTool",
    "create_character_sheet_tool",
    "parse_tool_calls",
    "execute_tool_call",
]
