"""Tests for SubscriberRegistry and Subscriber."""

import asyncio

import pytest

from logrelay.errors import DeliveryFailure
from logrelay.registry import Subscriber, next_connection_id


class TestSubscriber:
    """Tests for the connection handle."""

    def test_ids_are_unique(self):
        """Test each handle gets a fresh connection id."""
        first, second = Subscriber(), Subscriber()
        assert first.id != second.id
        assert next_connection_id() > second.id

    def test_deliver_queues_message(self, drain):
        """Test deliver puts the message on the outbound queue."""
        sub = Subscriber()
        sub.deliver({"type": "cleared"})
        assert sub.pending == 1
        assert drain(sub) == [{"type": "cleared"}]

    def test_deliver_to_full_queue_fails(self):
        """Test saturated queue raises DeliveryFailure."""
        sub = Subscriber(queue_size=1)
        sub.deliver({"n": 1})

        with pytest.raises(DeliveryFailure) as exc_info:
            sub.deliver({"n": 2})

        assert exc_info.value.connection_id == sub.id

    def test_deliver_after_close_fails(self):
        """Test closed handle raises DeliveryFailure."""
        sub = Subscriber()
        sub.close()
        sub.close()  # idempotent

        with pytest.raises(DeliveryFailure):
            sub.deliver({"type": "cleared"})

    @pytest.mark.asyncio
    async def test_next_message_returns_queued(self):
        """Test next_message yields messages in order."""
        sub = Subscriber()
        sub.deliver({"n": 1})
        sub.deliver({"n": 2})

        assert await sub.next_message() == {"n": 1}
        assert await sub.next_message() == {"n": 2}

    @pytest.mark.asyncio
    async def test_next_message_waits_for_delivery(self):
        """Test next_message wakes up on a later deliver."""
        sub = Subscriber()
        waiter = asyncio.create_task(sub.next_message())
        await asyncio.sleep(0)

        sub.deliver({"n": 1})

        assert await asyncio.wait_for(waiter, timeout=1) == {"n": 1}

    @pytest.mark.asyncio
    async def test_next_message_returns_none_on_close(self):
        """Test close wakes a waiting next_message with None."""
        sub = Subscriber()
        waiter = asyncio.create_task(sub.next_message())
        await asyncio.sleep(0)

        sub.close()

        assert await asyncio.wait_for(waiter, timeout=1) is None


class TestSubscriberRegistryAdd:
    """Tests for add/remove bookkeeping."""

    def test_add_and_count(self, registry):
        """Test count_for reflects registered subscribers."""
        registry.add("k", Subscriber())
        registry.add("k", Subscriber())

        assert registry.count_for("k") == 2
        assert registry.count_for("other") == 0

    def test_add_twice_same_key(self, registry):
        """Test re-adding to the same key doesn't duplicate."""
        sub = Subscriber()
        registry.add("k", sub)
        registry.add("k", sub)

        assert registry.count_for("k") == 1

    def test_add_moves_to_new_key(self, registry):
        """Test a subscriber belongs to at most one key."""
        sub = Subscriber()
        registry.add("a", sub)
        registry.add("b", sub)

        assert registry.count_for("a") == 0
        assert registry.count_for("b") == 1
        assert registry.key_of(sub) == "b"
        assert registry.keys() == {"b"}

    def test_remove_last_drops_key(self, registry):
        """Test no empty key sets are retained."""
        sub = Subscriber()
        registry.add("k", sub)

        registry.remove(sub)

        assert registry.count_for("k") == 0
        assert registry.keys() == set()
        assert len(registry) == 0

    def test_remove_decrements_by_one(self, registry):
        """Test removing one of two subscribers leaves the other."""
        first, second = Subscriber(), Subscriber()
        registry.add("k", first)
        registry.add("k", second)

        registry.remove(first)

        assert registry.count_for("k") == 1
        assert registry.subscribers() == [second]

    def test_remove_unassociated_is_noop(self, registry):
        """Test removing an unknown subscriber doesn't raise."""
        registry.remove(Subscriber())
        assert len(registry) == 0


class TestSubscriberRegistryBroadcast:
    """Tests for broadcast."""

    def test_broadcast_reaches_all(self, registry, drain):
        """Test every subscriber of the key gets the message."""
        subs = [Subscriber() for _ in range(3)]
        for sub in subs:
            registry.add("k", sub)

        delivered = registry.broadcast("k", {"type": "cleared"})

        assert delivered == 3
        for sub in subs:
            assert drain(sub) == [{"type": "cleared"}]

    def test_broadcast_without_subscribers(self, registry):
        """Test broadcast to an empty key is a no-op."""
        assert registry.broadcast("nobody", {"type": "cleared"}) == 0
        assert registry.keys() == set()

    def test_broadcast_is_scoped_to_key(self, registry, drain):
        """Test subscribers of other keys get nothing."""
        sub_a, sub_b = Subscriber(), Subscriber()
        registry.add("a", sub_a)
        registry.add("b", sub_b)

        registry.broadcast("b", {"type": "cleared"})

        assert drain(sub_a) == []
        assert drain(sub_b) == [{"type": "cleared"}]

    def test_failed_subscriber_dropped(self, registry, drain):
        """Test a saturated subscriber is removed, the rest still delivered."""
        slow = Subscriber(queue_size=1)
        healthy = Subscriber()
        registry.add("k", slow)
        registry.add("k", healthy)
        slow.deliver({"filler": True})

        delivered = registry.broadcast("k", {"type": "cleared"})

        assert delivered == 1
        assert slow.closed
        assert registry.key_of(slow) is None
        assert registry.count_for("k") == 1
        assert drain(healthy) == [{"type": "cleared"}]

    def test_closed_subscriber_dropped(self, registry):
        """Test a closed connection is treated as an implicit disconnect."""
        sub = Subscriber()
        registry.add("k", sub)
        sub.close()

        assert registry.broadcast("k", {"type": "cleared"}) == 0
        assert registry.count_for("k") == 0
