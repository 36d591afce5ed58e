"""
Visibility Bus Tests
--------------------
Tests for open/close/toggle signalling.

Tests cover:
- Listener order
- Failure isolation
- Subscription management
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import ErrorCategory, ErrorHandler, ListenerError
from core.visibility_bus import (
    PaletteEvent, VisibilityBus, get_visibility_bus, reset_visibility_bus
)


class TestEmission:
    """Listeners run synchronously, in registration order."""

    def test_open_invokes_listener(self, bus, calls):
        bus.on("open", calls.action("shown"))
        bus.open()
        assert calls.calls == ["shown"]

    def test_registration_order(self, bus, calls):
        bus.on("toggle", calls.action("first"))
        bus.on("toggle", calls.action("second"))
        bus.on("toggle", calls.action("third"))

        bus.toggle()

        assert calls.calls == ["first", "second", "third"]

    def test_events_are_independent(self, bus, calls):
        bus.on(PaletteEvent.OPEN, calls.action("open"))
        bus.on(PaletteEvent.CLOSE, calls.action("close"))

        bus.close()

        assert calls.calls == ["close"]

    def test_emit_without_listeners(self, bus):
        assert bus.emit("close") == []


class TestFailureIsolation:
    """One listener's failure never reaches the others or the emitter."""

    def test_throwing_first_listener(self, bus, calls):
        def broken():
            raise RuntimeError("listener exploded")

        bus.on("open", broken)
        bus.on("open", calls.action("second"))

        failures = bus.open()

        assert calls.calls == ["second"]
        assert len(failures) == 1
        assert isinstance(failures[0], ListenerError)
        assert failures[0].event == "open"
        assert isinstance(failures[0].original, RuntimeError)
        assert failures[0].__cause__ is failures[0].original

    def test_failures_reach_error_handler(self, calls):
        handler = ErrorHandler()
        bus = VisibilityBus(error_handler=handler)

        def broken():
            raise ValueError("bad")

        bus.on("toggle", broken)
        bus.toggle()
        bus.toggle()

        assert handler.get_error_stats() == {"LISTENER_ERROR": 2}
        record = handler.history[0]
        assert record.category is ErrorCategory.LISTENER_ERROR
        assert record.details["event"] == "toggle"
        assert "ValueError" in record.stack_trace

    def test_failure_is_logged(self, bus, caplog):
        def broken():
            raise RuntimeError("logged failure")

        bus.on("close", broken)
        with caplog.at_level("ERROR", logger="palette.errors"):
            bus.close()

        assert "logged failure" in caplog.text


class TestSubscriptions:
    """on/off management."""

    def test_off_removes_listener(self, bus, calls):
        listener = calls.action("x")
        bus.on("open", listener)
        bus.off("open", listener)

        bus.open()

        assert calls.calls == []
        assert bus.listener_count("open") == 0

    def test_off_unknown_listener_is_noop(self, bus):
        bus.off("open", lambda: None)

    def test_duplicate_registration_runs_once(self, bus, calls):
        listener = calls.action("x")
        bus.on("open", listener)
        bus.on("open", listener)

        bus.open()

        assert calls.calls == ["x"]
        assert bus.listener_count("open") == 1

    def test_unsubscribe_during_emission(self, bus, calls):
        second = calls.action("second")

        def first():
            calls.calls.append("first")
            bus.off("open", second)

        bus.on("open", first)
        bus.on("open", second)

        bus.open()
        assert calls.calls == ["first", "second"]

        bus.open()
        assert calls.calls == ["first", "second", "first"]

    def test_non_callable_rejected(self, bus):
        with pytest.raises(TypeError):
            bus.on("open", "not callable")

    def test_unknown_event_rejected(self, bus):
        with pytest.raises(ValueError):
            bus.on("hover", lambda: None)

    def test_clear(self, bus, calls):
        bus.on("open", calls.action("a"))
        bus.on("close", calls.action("b"))
        bus.clear()

        assert bus.listener_count("open") == 0
        assert bus.listener_count("close") == 0


class TestGlobalBus:
    """Process-wide accessor."""

    def test_singleton(self):
        assert get_visibility_bus() is get_visibility_bus()

    def test_reset(self):
        first = get_visibility_bus()
        reset_visibility_bus()
        assert get_visibility_bus() is not first


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
