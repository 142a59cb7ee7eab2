"""Tests for the click repository."""

from datetime import timedelta

import pytest

from shortlink.models.click import ClickEventCreate
from tests.utils import EPOCH, create_test_url


@pytest.mark.repository
class TestClickRepository:
    """Tests for ClickRepository."""

    @pytest.mark.asyncio
    async def test_create_click_event(self, test_db, click_repository):
        await create_test_url(test_db, shortcode="clicked")

        click = await click_repository.create_click_event(test_db, ClickEventCreate(
            shortcode="clicked",
            clicked_at=EPOCH,
            referrer="https://news.example",
            ip_address="203.0.113.7",
            user_agent="pytest",
            location="London, UK",
        ))
        await test_db.commit()

        assert click.id is not None
        assert click.referrer == "https://news.example"
        assert click.ip_address == "203.0.113.7"
        assert click.user_agent == "pytest"

    @pytest.mark.asyncio
    async def test_referrer_defaults_to_direct(self, test_db, click_repository):
        click = await click_repository.create_click_event(test_db, {
            "shortcode": "anything",
            "location": "Tokyo, JP",
            "referrer": None,
        })
        await test_db.commit()

        assert click.referrer == "direct"
        assert click.clicked_at is not None

    @pytest.mark.asyncio
    async def test_get_clicks_most_recent_first(self, test_db, click_repository):
        for minutes, location in [(0, "first"), (10, "third"), (5, "second")]:
            await click_repository.create_click_event(test_db, {
                "shortcode": "ordered",
                "clicked_at": EPOCH + timedelta(minutes=minutes),
                "location": location,
            })
        await test_db.commit()

        clicks = await click_repository.get_clicks_for_shortcode(test_db, "ordered")

        assert [click.location for click in clicks] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_same_timestamp_orders_by_insertion(self, test_db, click_repository):
        for location in ["older", "newer"]:
            await click_repository.create_click_event(test_db, {
                "shortcode": "tie",
                "clicked_at": EPOCH,
                "location": location,
            })
        await test_db.commit()

        clicks = await click_repository.get_clicks_for_shortcode(test_db, "tie")

        assert [click.location for click in clicks] == ["newer", "older"]

    @pytest.mark.asyncio
    async def test_get_clicks_with_limit(self, test_db, click_repository):
        for minutes in range(5):
            await click_repository.create_click_event(test_db, {
                "shortcode": "limited",
                "clicked_at": EPOCH + timedelta(minutes=minutes),
                "location": f"loc{minutes}",
            })
        await test_db.commit()

        clicks = await click_repository.get_clicks_for_shortcode(test_db, "limited", limit=2)

        assert [click.location for click in clicks] == ["loc4", "loc3"]

    @pytest.mark.asyncio
    async def test_count_clicks(self, test_db, click_repository):
        for _ in range(3):
            await click_repository.create_click_event(test_db, {"shortcode": "counted", "location": "x"})
        await click_repository.create_click_event(test_db, {"shortcode": "elsewhere", "location": "x"})
        await test_db.commit()

        assert await click_repository.count_clicks(test_db, "counted") == 3
        assert await click_repository.count_clicks(test_db, "nothing") == 0
