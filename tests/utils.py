"""Test utilities for URL shortener tests."""

import random
import string
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy import func, select

from shortlink.core.clock import utcnow
from shortlink.models.click import ClickEvent
from shortlink.models.url import ShortURL

EPOCH = datetime(2024, 1, 1, 12, 0, 0)


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = EPOCH):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequenceGenerator:
    """Shortcode generator replaying a fixed sequence of candidates."""

    length = 8

    def __init__(self, codes: Iterable[str]):
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


async def create_test_url(
    db,
    shortcode: Optional[str] = None,
    original_url: Optional[str] = None,
    created_at: Optional[datetime] = None,
    expiry: Optional[datetime] = None,
    click_count: int = 0
) -> ShortURL:
    """Create and commit a test ShortURL in the database."""
    created_at = created_at or utcnow()
    url = ShortURL(
        shortcode=shortcode or random_string(8),
        original_url=original_url or random_url(),
        created_at=created_at,
        expiry=expiry or created_at + timedelta(minutes=30),
        click_count=click_count,
    )
    db.add(url)
    await db.commit()
    return url


async def stored_click_count(db, shortcode: str) -> Optional[int]:
    """Read click_count straight from the table."""
    result = await db.execute(select(ShortURL.click_count).where(ShortURL.shortcode == shortcode))
    return result.scalar_one_or_none()


async def stored_click_events(db, shortcode: str) -> int:
    """Count click rows straight from the table."""
    result = await db.execute(
        select(func.count()).select_from(ClickEvent).where(ClickEvent.shortcode == shortcode)
    )
    return result.scalar_one()
