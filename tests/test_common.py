"""Tests for common utilities."""

import json
import logging

import pytest
from datetime import timedelta

from shortlinks.common.validators import is_valid_url, is_valid_short_code, is_valid_validity
from shortlinks.common.url_builder import build_short_url
from shortlinks.common.clock import format_time_remaining, new_token, utc_now
from shortlinks.common.logging_config import JSONFormatter


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://a.b")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value")
        assert valid

        valid, _ = is_valid_url("ftp://files.example.com/archive.zip")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid
        assert "scheme" in error

        valid, error = is_valid_url("https://")
        assert not valid
        assert "host" in error

        valid, _ = is_valid_url("mailto:someone@example.com")
        assert not valid

    def test_malformed_urls_fail_closed(self):
        """Parsing errors are reported, never raised."""
        valid, error = is_valid_url("http://[::1")
        assert not valid
        assert error.startswith("Invalid URL format")

        valid, _ = is_valid_url("http://example.com:99999")
        assert not valid

        valid, _ = is_valid_url("https://exa mple.com")
        assert not valid

        valid, _ = is_valid_url(None)
        assert not valid

        valid, _ = is_valid_url(42)
        assert not valid

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        valid, _ = is_valid_short_code("promo1")
        assert valid

        valid, _ = is_valid_short_code("A")
        assert valid

        valid, _ = is_valid_short_code("a" * 20)
        assert valid

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        valid, error = is_valid_short_code("a" * 21)
        assert not valid
        assert "at most 20" in error

        valid, error = is_valid_short_code("test-code")
        assert not valid
        assert "alphanumeric" in error

        valid, _ = is_valid_short_code("abc 123")
        assert not valid

        valid, _ = is_valid_short_code("abc123\n")
        assert not valid

        valid, _ = is_valid_short_code("café")
        assert not valid

        valid, error = is_valid_short_code("")
        assert not valid
        assert "required" in error

        valid, error = is_valid_short_code(5)
        assert not valid
        assert "alphanumeric" in error

    def test_reasons_are_distinct(self):
        """Each failure kind has its own message."""
        reasons = {
            is_valid_short_code("a" * 21)[1],
            is_valid_short_code("a-b")[1],
            is_valid_short_code("")[1],
            is_valid_validity(0)[1],
            is_valid_url("not-a-url")[1],
        }
        assert len(reasons) == 5

    @pytest.mark.parametrize("value", [1, 30, 10_000_000])
    def test_valid_validity(self, value):
        valid, _ = is_valid_validity(value)
        assert valid

    @pytest.mark.parametrize("value", [0, -5, 1.5, "30", None, True])
    def test_invalid_validity(self, value):
        valid, error = is_valid_validity(value)
        assert not valid
        assert error == "Validity period must be a positive integer"


class TestURLBuilder:
    """Test URL building utilities."""

    def test_build_short_url_no_prefix(self):
        """Test short URL building without prefix."""
        url = build_short_url(
            short_code="abc123",
            base_url="http://localhost:3000/",
            path_prefix=""
        )

        assert url == "http://localhost:3000/abc123"

    def test_build_short_url_with_prefix(self):
        """Test short URL building with prefix."""
        url = build_short_url(
            short_code="abc123",
            base_url="https://example.com",
            path_prefix="/s/"
        )

        assert url == "https://example.com/s/abc123"


class TestClock:
    """Test time helpers."""

    def test_format_time_remaining(self):
        assert format_time_remaining(timedelta(minutes=12, seconds=30)) == "12m remaining"
        assert format_time_remaining(timedelta(hours=3, minutes=5)) == "3h 5m remaining"
        assert format_time_remaining(timedelta(days=1, hours=2)) == "1d 2h remaining"
        assert format_time_remaining(timedelta(0)) == "0m remaining"
        assert format_time_remaining(timedelta(seconds=-1)) == "Expired"

    def test_new_token_is_time_prefixed(self):
        now = utc_now()
        token = new_token(now)
        millis, suffix = token.split("-")

        assert millis == str(int(now.timestamp() * 1000))
        assert len(suffix) == 8
        assert new_token(now) != token


class TestJSONFormatter:
    """Test structured log output."""

    def make_record(self, message, **extra):
        record = logging.LogRecord("shortlinks", logging.INFO, __file__, 1, message, None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_quotes_are_escaped(self):
        line = JSONFormatter().format(self.make_record('bad "quoted" value'))

        entry = json.loads(line)
        assert entry["message"] == 'bad "quoted" value'
        assert entry["level"] == "INFO"
        assert entry["logger"] == "shortlinks"
        assert "context" not in entry

    def test_context_included(self):
        line = JSONFormatter().format(self.make_record("Recording click", context={"shortCode": "promo1"}))
        assert json.loads(line)["context"] == {"shortCode": "promo1"}
