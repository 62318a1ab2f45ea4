"""Tests for the league message feed."""

import asyncio

import pytest

from iffl_companion.models.user import NotAuthenticatedError
from iffl_companion.services.messages import MessageFeed


class TestMessageFeed:
    @pytest.mark.asyncio
    async def test_post_and_recent_newest_first(self, store, user):
        feed = MessageFeed(store, limit=2)
        await feed.post(user, "Jared", "first")
        await asyncio.sleep(0.001)
        await feed.post(user, "Jared", "second")
        await asyncio.sleep(0.001)
        await feed.post(user, "Jared", "third")

        recent = await feed.recent()

        assert [m.text for m in recent] == ["third", "second"]
        assert all(m.message_id for m in recent)

    @pytest.mark.asyncio
    async def test_post_requires_user_and_text(self, store, user):
        feed = MessageFeed(store)
        with pytest.raises(NotAuthenticatedError):
            await feed.post(None, "Jared", "hello")
        with pytest.raises(ValueError):
            await feed.post(user, "Jared", "   ")
        assert await feed.recent() == []

    @pytest.mark.asyncio
    async def test_stream_yields_on_change(self, store, user):
        feed = MessageFeed(store, limit=5)
        stream = feed.stream()

        initial = await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert initial == []

        await feed.post(user, "Jared", "trade talk?")
        update = await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert [m.text for m in update] == ["trade talk?"]
        await stream.aclose()
