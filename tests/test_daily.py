"""Tests for daily note detection."""

from coalesce.core.settings import Settings
from coalesce.core.daily import daily_note_skip, is_daily_note


def test_is_daily_note():
    """Test the file name pattern and folder restriction."""
    assert is_daily_note("2024-01-02.md")
    assert is_daily_note("journal/2024-01-02.md")
    assert is_daily_note("daily/2024-01-02.md", "daily")
    assert is_daily_note("daily/2024-01-02.md", "/daily/")
    assert not is_daily_note("other/2024-01-02.md", "daily")
    assert not is_daily_note("2024-1-2.md")
    assert not is_daily_note("2024-01-02 notes.md")


def test_daily_note_skip_follows_settings():
    """Test that the predicate reads the live settings."""
    settings = Settings()
    should_skip = daily_note_skip(settings)

    assert should_skip("2024-01-02.md")
    assert not should_skip("Project.md")

    settings.show_in_daily_notes = True
    assert not should_skip("2024-01-02.md")
