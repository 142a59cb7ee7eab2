"""Tests for the statistics service."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from shortlink.models.click import ClickEvent
from shortlink.repositories.base import RepositoryError
from shortlink.services.exceptions import ShortURLNotFoundError, StorageFailureError
from tests.utils import EPOCH, create_test_url


@pytest.mark.service
class TestStatsService:
    """Tests for StatsService."""

    @pytest.mark.asyncio
    async def test_stats_for_new_url(self, test_db, shortener_service, stats_service):
        await shortener_service.create_short_url(
            test_db, "https://target.example", custom_shortcode="fresh"
        )

        stats = await stats_service.get_stats(test_db, "fresh")

        assert stats == {
            "shortcode": "fresh",
            "original_url": "https://target.example",
            "created_at": EPOCH,
            "expiry": EPOCH + timedelta(minutes=30),
            "click_count": 0,
            "clicks": [],
        }

    @pytest.mark.asyncio
    async def test_clicks_most_recent_first(
        self, test_db, shortener_service, redirect_service, stats_service, clock
    ):
        await shortener_service.create_short_url(test_db, "https://target.example", custom_shortcode="busy")

        for referrer in ["https://a.example", "https://b.example", None]:
            clock.advance(minutes=1)
            await redirect_service.record_click(test_db, "busy", referrer=referrer)

        stats = await stats_service.get_stats(test_db, "busy")

        assert stats["click_count"] == 3
        assert [c["referrer"] for c in stats["clicks"]] == [
            "direct", "https://b.example", "https://a.example",
        ]
        assert [c["timestamp"] for c in stats["clicks"]] == [
            EPOCH + timedelta(minutes=3),
            EPOCH + timedelta(minutes=2),
            EPOCH + timedelta(minutes=1),
        ]
        assert all(c["location"] == "Testville, TS" for c in stats["clicks"])

    @pytest.mark.asyncio
    async def test_click_count_is_stored_aggregate(self, test_db, stats_service):
        await create_test_url(test_db, shortcode="agg", click_count=5)
        test_db.add(ClickEvent(shortcode="agg", clicked_at=EPOCH, location="London, UK"))
        await test_db.commit()

        stats = await stats_service.get_stats(test_db, "agg")

        assert stats["click_count"] == 5
        assert len(stats["clicks"]) == 1

    @pytest.mark.asyncio
    async def test_blank_referrer_reported_as_direct(self, test_db, stats_service):
        await create_test_url(test_db, shortcode="blank", click_count=1)
        test_db.add(ClickEvent(shortcode="blank", clicked_at=EPOCH, referrer="", location="Tokyo, JP"))
        await test_db.commit()

        stats = await stats_service.get_stats(test_db, "blank")

        assert stats["clicks"][0]["referrer"] == "direct"

    @pytest.mark.asyncio
    async def test_expired_url_has_stats(self, test_db, stats_service):
        await create_test_url(test_db, shortcode="expired", created_at=EPOCH, expiry=EPOCH)

        stats = await stats_service.get_stats(test_db, "expired")

        assert stats["expiry"] == EPOCH

    @pytest.mark.asyncio
    async def test_stats_unknown(self, test_db, stats_service):
        with pytest.raises(ShortURLNotFoundError):
            await stats_service.get_stats(test_db, "missing")

    @pytest.mark.asyncio
    async def test_stats_storage_failure(self, test_db, stats_service, url_repository):
        failing = AsyncMock(side_effect=RepositoryError("connection lost"))
        with patch.object(url_repository, "get_url_with_clicks", failing):
            with pytest.raises(StorageFailureError):
                await stats_service.get_stats(test_db, "any")
