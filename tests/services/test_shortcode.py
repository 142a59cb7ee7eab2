"""Tests for shortcode generation."""

import string

import pytest

from shortlink.services.shortcode import ShortcodeGenerator, generate_shortcode

HEX_DIGITS = set(string.digits + "abcdef")


def test_default_shortcode_is_eight_hex_chars():
    generator = ShortcodeGenerator()

    code = generator.generate()

    assert generator.length == 8
    assert len(code) == 8
    assert set(code) <= HEX_DIGITS


def test_custom_size():
    generator = ShortcodeGenerator(num_bytes=6)

    assert generator.length == 12
    assert len(generator.generate()) == 12


def test_codes_are_not_repeated():
    generator = ShortcodeGenerator()

    codes = {generator.generate() for _ in range(500)}

    # 500 draws from 2**32 values; a repeat here means the source is broken
    assert len(codes) == 500


def test_module_level_helper():
    code = generate_shortcode()

    assert len(code) == 8
    assert set(code) <= HEX_DIGITS


@pytest.mark.parametrize("num_bytes", [0, -2])
def test_non_positive_size_rejected(num_bytes):
    with pytest.raises(ValueError):
        ShortcodeGenerator(num_bytes=num_bytes)
