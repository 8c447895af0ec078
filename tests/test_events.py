import pytest
from runwatch.events import DomainEvent, EventDispatcher, event


@event
class PingEvent(DomainEvent):
    """Test event for unit tests."""

    message: str


@event
class CountEvent(DomainEvent):
    value: int


class TestEventDispatcher:
    """Test suite for EventDispatcher."""

    def test_init(self):
        dispatcher = EventDispatcher()
        assert dispatcher._handlers == {}

    @pytest.mark.asyncio
    async def test_sync_and_async_handlers_in_order(self):
        dispatcher = EventDispatcher()
        calls = []

        def first(e: PingEvent):
            calls.append(("first", e))

        async def second(e: PingEvent):
            calls.append(("second", e))

        dispatcher.subscribe(PingEvent, first)
        dispatcher.subscribe(PingEvent, second)

        ping = PingEvent(message="hello")
        await dispatcher.publish(ping)

        assert calls == [("first", ping), ("second", ping)]

    @pytest.mark.asyncio
    async def test_handler_exception_doesnt_stop_dispatch(self, caplog):
        dispatcher = EventDispatcher()
        calls = []

        def failing_handler(e: PingEvent):
            raise ValueError("Handler failed")

        async def successful_handler(e: PingEvent):
            calls.append(e)

        dispatcher.subscribe(PingEvent, failing_handler)
        dispatcher.subscribe(PingEvent, successful_handler)

        await dispatcher.publish(PingEvent(message="test"))

        assert len(calls) == 1
        assert "failing_handler" in caplog.text

    @pytest.mark.asyncio
    async def test_only_matching_type_dispatched(self):
        dispatcher = EventDispatcher()
        pings, counts = [], []
        dispatcher.subscribe(PingEvent, pings.append)
        dispatcher.subscribe(CountEvent, counts.append)

        await dispatcher.publish(CountEvent(value=3))

        assert pings == []
        assert counts[0].value == 3

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.subscribe(PingEvent, calls.append)
        dispatcher.unsubscribe(PingEvent, calls.append)
        # unknown handler is ignored
        dispatcher.unsubscribe(PingEvent, print)

        await dispatcher.publish(PingEvent(message="x"))
        assert calls == []

    @pytest.mark.asyncio
    async def test_handler_may_unsubscribe_itself(self):
        dispatcher = EventDispatcher()
        calls = []

        def once(e: PingEvent):
            calls.append("once")
            dispatcher.unsubscribe(PingEvent, once)

        def always(e: PingEvent):
            calls.append("always")

        dispatcher.subscribe(PingEvent, once)
        dispatcher.subscribe(PingEvent, always)

        await dispatcher.publish(PingEvent(message="1"))
        await dispatcher.publish(PingEvent(message="2"))

        assert calls == ["once", "always", "always"]


class TestDomainEvent:

    def test_events_are_frozen(self):
        ping = PingEvent(message="x")
        with pytest.raises(AttributeError):
            ping.message = "y"

    def test_timestamp_is_utc(self):
        ping = PingEvent(message="x")
        assert ping.timestamp.tzinfo is not None
        assert ping.timestamp.utcoffset().total_seconds() == 0
