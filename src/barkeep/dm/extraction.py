"""Best-effort scraping of sheet entries out of chat messages.

When the player picks an assistant message in an "add item/trait/feat"
dialog, these helpers pre-fill the form by looking for labelled fields
(``Item: Longsword``, ``Rarity: rare``...). The patterns are loose on
purpose and a miss simply leaves the field blank; nothing here raises.
Every result is a suggestion the player edits before saving.
"""

from __future__ import annotations

import re
from typing import Literal, Sequence

from pydantic import BaseModel

from barkeep.core.constants import DESCRIPTION_FALLBACK_LENGTH
from barkeep.core.logging import get_logger
from barkeep.models.chat import ChatMessage
from barkeep.models.enums import ItemRarity, MessageRole


logger = get_logger(__name__)


# =============================================================================
# Patterns
# =============================================================================


def _label(*labels: str, capture: str = r"([^,.\n]+)") -> list[re.Pattern[str]]:
    return [re.compile(rf"{label}:?\s*{capture}", re.IGNORECASE) for label in labels]


ITEM_NAME_PATTERNS = _label("item", "name", "weapon", "armor")
TRAIT_NAME_PATTERNS = _label("trait", "name", "feature")
FEAT_NAME_PATTERNS = _label("feat", "name", "ability")
SOURCE_PATTERNS = _label("source", "from")
DESCRIPTION_PATTERNS = _label("description", "desc", capture=r"([^.]+\.)")
QUANTITY_PATTERNS = [
    *_label("quantity", "amount", capture=r"(\d+)"),
    re.compile(r"(\d+)\s*items?", re.IGNORECASE),
]
EQUIPPED_PATTERNS = _label("equipped", "wearing", capture=r"(yes|true)")
RARITY_PATTERN = re.compile(
    r"rarity:?\s*(common|uncommon|rare|very rare|legendary|artifact)",
    re.IGNORECASE,
)


# =============================================================================
# Results
# =============================================================================


class ExtractedItem(BaseModel):
    """Pre-filled inventory or equipment form."""

    name: str = ""
    description: str = ""
    quantity: int = 1
    equipped: bool = False
    rarity: ItemRarity = ItemRarity.COMMON


class ExtractedTrait(BaseModel):
    """Pre-filled trait form."""

    name: str = ""
    description: str = ""
    source: str = ""


class ExtractedFeat(BaseModel):
    """Pre-filled feat form."""

    name: str = ""
    description: str = ""


# =============================================================================
# Helpers
# =============================================================================


def _first_match(patterns: Sequence[re.Pattern[str]], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def extract_description(content: str) -> str:
    """Labelled description, else the opening of the message."""
    found = _first_match(DESCRIPTION_PATTERNS, content)
    if found:
        return found
    if len(content) > DESCRIPTION_FALLBACK_LENGTH:
        return content[:DESCRIPTION_FALLBACK_LENGTH] + "..."
    return content


def assistant_messages(messages: Sequence[ChatMessage]) -> list[ChatMessage]:
    """Messages offered for extraction: the assistant's, in order."""
    return [m for m in messages if m.role == MessageRole.ASSISTANT]


# =============================================================================
# Extractors
# =============================================================================


def extract_item(
    content: str,
    kind: Literal["inventory", "equipment"] = "inventory",
) -> ExtractedItem:
    """Scrape an item from message text.

    Args:
        content: Message text.
        kind: 'inventory' reads a quantity, 'equipment' an equipped flag.

    Returns:
        The suggested fields; unmatched ones keep their defaults.
    """
    text = content or ""
    item = ExtractedItem(
        name=_first_match(ITEM_NAME_PATTERNS, text) or "",
        description=extract_description(text),
    )

    if kind == "inventory":
        quantity = _first_match(QUANTITY_PATTERNS, text)
        if quantity:
            item.quantity = int(quantity)
    else:
        item.equipped = _first_match(EQUIPPED_PATTERNS, text) is not None

    rarity = RARITY_PATTERN.search(text)
    if rarity:
        item.rarity = ItemRarity(rarity.group(1).lower())

    logger.debug("Extracted item", kind=kind, name=item.name, rarity=item.rarity.value)
    return item


def extract_trait(content: str) -> ExtractedTrait:
    """Scrape a trait (name, description, source) from message text."""
    text = content or ""
    return ExtractedTrait(
        name=_first_match(TRAIT_NAME_PATTERNS, text) or "",
        description=extract_description(text),
        source=_first_match(SOURCE_PATTERNS, text) or "",
    )


def extract_feat(content: str) -> ExtractedFeat:
    """Scrape a feat (name, description) from message text."""
    text = content or ""
    return ExtractedFeat(
        name=_first_match(FEAT_NAME_PATTERNS, text) or "",
        description=extract_description(text),
    )


__all__ = [
    "ExtractedItem",
    "ExtractedTrait",
    "ExtractedFeat",
    "assistant_messages",
    "extract_description",
    "extract_item",
    "extract_trait",
    "extract_feat",
]
