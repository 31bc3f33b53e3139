"""Tests for typed notification channels."""

import logging

from gitwatcher.core.events import EventChannel


class TestEventChannel:
    """Tests for EventChannel."""

    def test_publish_reaches_subscribers_in_order(self) -> None:
        """Handlers receive the payload in subscription order."""
        channel: EventChannel[str] = EventChannel("change")
        received: list[tuple[str, str]] = []
        channel.subscribe(lambda payload: received.append(("first", payload)))
        channel.subscribe(lambda payload: received.append(("second", payload)))

        channel.publish("status")

        assert received == [("first", "status"), ("second", "status")]

    def test_unsubscribe_stops_delivery(self) -> None:
        channel: EventChannel[int] = EventChannel("change")
        received: list[int] = []
        unsubscribe = channel.subscribe(received.append)

        channel.publish(1)
        unsubscribe()
        channel.publish(2)

        assert received == [1]
        assert len(channel) == 0

    def test_unsubscribe_twice_is_harmless(self) -> None:
        channel: EventChannel[int] = EventChannel("change")
        unsubscribe = channel.subscribe(lambda payload: None)

        unsubscribe()
        unsubscribe()

        assert len(channel) == 0

    def test_failing_handler_does_not_block_others(self, caplog) -> None:
        """A handler exception is logged and later handlers still run."""
        channel: EventChannel[str] = EventChannel("merge")
        received: list[str] = []

        def broken(payload: str) -> None:
            raise RuntimeError("handler bug")

        channel.subscribe(broken)
        channel.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="gitwatcher.core.events"):
            channel.publish("notice")

        assert received == ["notice"]
        assert "Handler for 'merge' event failed" in caplog.text

    def test_publish_without_subscribers(self) -> None:
        channel: EventChannel[str] = EventChannel("error")
        channel.publish("ignored")

    def test_clear_removes_all_handlers(self) -> None:
        channel: EventChannel[str] = EventChannel("change")
        channel.subscribe(lambda payload: None)
        channel.subscribe(lambda payload: None)

        channel.clear()

        assert len(channel) == 0
