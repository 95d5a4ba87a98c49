"""Tests for SubscriberSession."""

import pytest

from logrelay.models import Level
from logrelay.relay import Closed, Registered, SubscriberSession, Unregistered


class TestSubscriberSessionStates:
    """Tests for the connection state machine."""

    @pytest.mark.asyncio
    async def test_starts_unregistered(self, relay):
        """Test a fresh session is unregistered and receives nothing."""
        session = SubscriberSession(relay)
        await relay.ingest("k", Level.INFO, ["x"])

        assert session.state == Unregistered()
        assert session.subscriber.pending == 0

    @pytest.mark.asyncio
    async def test_register_transitions(self, relay, drain):
        """Test register moves to Registered(key) and replays."""
        session = SubscriberSession(relay)

        await session.handle_text('{"action": "register", "key": "k"}')

        assert session.state == Registered("k")
        assert drain(session.subscriber)[0]["type"] == "registered"

    @pytest.mark.asyncio
    async def test_register_retargets(self, relay):
        """Test a second register switches the key."""
        session = SubscriberSession(relay)
        await session.handle({"action": "register", "key": "a"})
        await session.handle({"action": "register", "key": "b"})

        assert session.state == Registered("b")
        assert relay.count_for("a") == 0
        assert relay.count_for("b") == 1

    @pytest.mark.asyncio
    async def test_clear_notifies_requester(self, relay, drain):
        """Test clear reaches the requesting subscriber as well."""
        session = SubscriberSession(relay)
        await session.handle({"action": "register", "key": "k"})
        drain(session.subscriber)

        await session.handle({"action": "clear", "key": "k"})

        assert drain(session.subscriber) == [{"type": "cleared"}]
        assert session.state == Registered("k")

    @pytest.mark.asyncio
    async def test_close(self, relay):
        """Test close leaves the registry and is idempotent."""
        session = SubscriberSession(relay)
        await session.handle({"action": "register", "key": "k"})

        session.close()
        session.close()

        assert session.state == Closed()
        assert relay.count_for("k") == 0
        assert session.subscriber.closed

    @pytest.mark.asyncio
    async def test_messages_after_close_ignored(self, relay):
        """Test a closed session doesn't re-register."""
        session = SubscriberSession(relay)
        session.close()

        await session.handle({"action": "register", "key": "k"})

        assert session.state == Closed()
        assert relay.count_for("k") == 0


class TestSubscriberSessionErrors:
    """Tests for rejected messages."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw, error",
        [
            ("not json", "Invalid message format"),
            ('["register"]', "Invalid message format"),
            ('{"action": "shout", "key": "k"}', "Unknown action: shout"),
            ('{"action": "register"}', "Key is required"),
            ('{"action": "clear", "key": ""}', "Key is required"),
        ],
    )
    async def test_rejected_message(self, relay, drain, raw, error):
        """Test bad messages get an error reply and leave state unchanged."""
        session = SubscriberSession(relay)

        await session.handle_text(raw)

        assert drain(session.subscriber) == [{"type": "error", "error": error}]
        assert session.state == Unregistered()

    @pytest.mark.asyncio
    async def test_bytes_frames(self, relay, drain):
        """Test UTF-8 bytes are handled like text, invalid bytes are rejected."""
        session = SubscriberSession(relay)

        await session.handle_text(b"\xff")
        await session.handle_text(b'{"action": "register", "key": "k"}')

        error, registered = drain(session.subscriber)
        assert error == {"type": "error", "error": "Invalid message format"}
        assert registered["type"] == "registered"
        assert session.state == Registered("k")

    @pytest.mark.asyncio
    async def test_error_keeps_registration(self, relay, drain):
        """Test a bad message doesn't drop an existing registration."""
        session = SubscriberSession(relay)
        await session.handle({"action": "register", "key": "k"})
        drain(session.subscriber)

        await session.handle({"action": "nope"})
        await relay.ingest("k", Level.INFO, ["still here"])

        error, log = drain(session.subscriber)
        assert error["type"] == "error"
        assert log["formatted"] == "still here"
        assert session.state == Registered("k")
