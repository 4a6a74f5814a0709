"""Tests for short code generation."""

import pytest
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.validators import is_valid_short_code


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random()
        assert len(code) == 6
        assert is_valid_short_code(code)[0]

    def test_generate_random_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random(length=10)
        assert len(code) == 10
        assert is_valid_short_code(code)[0]

    def test_alphabet_is_base62(self):
        assert len(ShortCodeGenerator.BASE62_CHARS) == 62
        assert set(ShortCodeGenerator.BASE62_CHARS) == set(
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
        )

    def test_codes_vary(self):
        """Unseeded draws should not repeat across a small sample."""
        generator = ShortCodeGenerator(default_length=8)
        codes = {generator.generate_random() for _ in range(50)}
        assert len(codes) > 1

    def test_invalid_default_length(self):
        with pytest.raises(ValueError):
            ShortCodeGenerator(default_length=0)
