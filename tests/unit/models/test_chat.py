"""Tests for chat messages, the campaign summary and AppState."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from barkeep.core.config import get_settings
from barkeep.core.exceptions import MessageNotFoundError
from barkeep.models import (
    AppState,
    CampaignSummary,
    ChatMessage,
    MessageRole,
    utc_timestamp,
)


class TestChatMessage:
    """Tests for ChatMessage."""

    def test_ids_are_unique(self) -> None:
        """Test that each message gets its own id."""
        first = ChatMessage(role=MessageRole.USER, content="hi")
        second = ChatMessage(role=MessageRole.USER, content="hi")

        assert first.id != second.id

    def test_to_api(self) -> None:
        """Test the request shape."""
        message = ChatMessage(role=MessageRole.ASSISTANT, content="Welcome, traveler.")

        assert message.to_api() == {"role": "assistant", "content": "Welcome, traveler."}

    def test_loads_role_text(self) -> None:
        """Test loading a persisted message."""
        message = ChatMessage.model_validate({"id": "1700000000000", "role": "system", "content": "x"})

        assert message.role == MessageRole.SYSTEM
        assert message.id == "1700000000000"


class TestCampaignSummary:
    """Tests for CampaignSummary."""

    def test_empty_summary(self) -> None:
        """Test a blank summary has no content."""
        summary = CampaignSummary()

        assert summary.has_content is False
        assert summary.to_context_text() == ""

    def test_sections_skip_blank_fields(self) -> None:
        """Test that only filled sections are rendered."""
        summary = CampaignSummary(plot_points="- The caravan vanished", quests="  ")

        assert summary.sections() == [("Plot Points", "- The caravan vanished")]
        assert summary.to_context_text() == "Plot Points:\n- The caravan vanished"

    def test_camel_case_round_trip(self) -> None:
        """Test persisted key names."""
        summary = CampaignSummary.model_validate(
            {"conversationSummary": "We met.", "plotPoints": "", "lastUpdated": "2024-01-01T00:00:00+00:00"}
        )

        assert summary.conversation_summary == "We met."
        assert summary.to_document()["lastUpdated"] == "2024-01-01T00:00:00+00:00"

    def test_edited_ignores_unknown_fields(self) -> None:
        """Test user edits only touch summary fields."""
        summary = CampaignSummary(npcs="- Old Tom")
        edited = summary.edited(npcs="- Old Tom, barkeep", last_updated="never")

        assert edited.npcs == "- Old Tom, barkeep"
        assert edited.last_updated is None
        assert summary.npcs == "- Old Tom"

    def test_utc_timestamp(self) -> None:
        """Test the timestamp format."""
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

        assert utc_timestamp(now) == "2024-05-01T12:00:00+00:00"


class TestAppState:
    """Tests for AppState."""

    def test_from_settings(self, mock_env_vars: dict[str, str]) -> None:
        """Test seeding state from configuration."""
        state = AppState.from_settings(get_settings())

        assert state.api_url == "http://localhost:1234/v1/chat/completions"
        assert state.api_key == "test-key"
        assert state.model == "llama-3-8b-instruct"
        assert state.max_previous_messages == 6

    def test_window_bounds(self) -> None:
        """Test the literal window must stay within 1-20."""
        with pytest.raises(ValueError):
            AppState(max_previous_messages=0)

    def test_find_message(self) -> None:
        """Test lookup by id."""
        message = ChatMessage(role=MessageRole.USER, content="hello")
        state = AppState(chat_messages=[message])

        assert state.find_message(message.id) == 0
        with pytest.raises(MessageNotFoundError):
            state.find_message("missing")
