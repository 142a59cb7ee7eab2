"""Shortcode generation."""

import secrets
from typing import Optional

from shortlink.core.config import settings


class ShortcodeGenerator:
    """Generate random lowercase hexadecimal shortcodes.

    Each code is ``num_bytes`` bytes from the OS CSPRNG rendered as hex,
    so the default 4 bytes give 8 characters.
    """

    def __init__(self, num_bytes: Optional[int] = None):
        if num_bytes is None:
            num_bytes = settings.SHORTCODE_BYTES
        if num_bytes <= 0:
            raise ValueError("num_bytes must be a positive integer")
        self.num_bytes = num_bytes

    @property
    def length(self) -> int:
        return self.num_bytes * 2

    def generate(self) -> str:
        return secrets.token_hex(self.num_bytes)


def generate_shortcode() -> str:
    """Generate a shortcode with the configured size."""
    return ShortcodeGenerator().generate()
