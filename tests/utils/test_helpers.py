# tests/utils/test_helpers.py
"""Tests for blogcms/utils/helpers.py module."""

import re
from datetime import UTC
from time import perf_counter
from unittest.mock import MagicMock

from blogcms.utils.helpers import host, slugify, time_taken, today_str, utc_now


class TestTodayStr:
    """Tests for today_str function."""

    def test_format_matches_expected_pattern(self) -> None:
        """Test that the date format matches YYYY-MM-DD HH:MM:SS."""
        result = today_str()
        pattern = r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"
        assert re.match(pattern, result), f"Date format mismatch: {result}"


class TestUtcNow:
    def test_is_timezone_aware(self) -> None:
        assert utc_now().tzinfo is UTC


class TestTimeTaken:
    """Tests for time_taken function."""

    def test_returns_formatted_string(self) -> None:
        result = time_taken(perf_counter() - 61.5)
        assert result.startswith("1m ")
        assert result.endswith("s")


class TestHost:
    def test_returns_client_host(self) -> None:
        request = MagicMock()
        request.client.host = "203.0.113.7"
        assert host(request) == "203.0.113.7"

    def test_unknown_without_client(self) -> None:
        request = MagicMock()
        request.client = None
        assert host(request) == "unknown"


class TestSlugify:
    def test_lowercases_and_hyphenates(self) -> None:
        assert slugify("City Guides") == "city-guides"

    def test_collapses_whitespace_runs(self) -> None:
        assert slugify("Hidden   Gems\tBali") == "hidden-gems-bali"
