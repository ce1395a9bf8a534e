"""Unit tests for the event system.

Tests cover:
- FormEvent creation and enum normalization
- Serialization (to_dict, to_jsonl) and deserialization (from_dict)
- EventEmitter subscriptions, dispatch order and listener isolation
"""

import json
import logging
from datetime import datetime, timezone

import pytest

from formbinder.events import EventEmitter, FormEvent
from formbinder.types import EventType, SubmissionState


def make_event(event_type=EventType.SUBMISSION_STARTED, payload=None) -> FormEvent:
    return FormEvent(
        event_id="evt_001",
        type=event_type,
        ts=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        state=SubmissionState.PROCESSING,
        payload=payload,
    )


class TestFormEvent:
    """Test FormEvent creation and serialization."""

    def test_string_enums_normalized(self):
        event = FormEvent(
            event_id="evt_002",
            type="submission.failed",
            ts=datetime.now(timezone.utc),
            state="idle",
        )
        assert event.type == EventType.SUBMISSION_FAILED
        assert event.state == SubmissionState.IDLE

    def test_event_is_immutable(self):
        event = make_event()
        with pytest.raises(Exception):  # FrozenInstanceError
            event.event_id = "other"

    def test_to_dict(self):
        event = make_event(payload={"method": "post", "url": "/save"})
        assert event.to_dict() == {
            "eventId": "evt_001",
            "type": "submission.started",
            "ts": "2024-05-01T12:30:00+00:00",
            "state": "processing",
            "payload": {"method": "post", "url": "/save"},
        }

    def test_to_dict_without_payload(self):
        assert "payload" not in make_event().to_dict()

    def test_to_jsonl_is_single_line(self):
        line = make_event(payload={"a": 1}).to_jsonl()
        assert "\n" not in line
        assert json.loads(line)["payload"] == {"a": 1}

    def test_from_dict_handles_z_timezone(self):
        data = make_event().to_dict()
        data["ts"] = "2024-05-01T12:30:00Z"
        event = FormEvent.from_dict(data)
        assert event.ts == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_roundtrip(self):
        event = make_event(payload={"errors": {"a": "x"}})
        assert FormEvent.from_dict(event.to_dict()) == event


class TestEventEmitter:
    """Test subscriptions and dispatch."""

    def test_type_specific_listener(self):
        emitter = EventEmitter()
        received = []
        emitter.on(EventType.SUBMISSION_STARTED, received.append)

        emitter.emit(make_event(EventType.SUBMISSION_STARTED))
        emitter.emit(make_event(EventType.SUBMISSION_FAILED))

        assert [e.type for e in received] == [EventType.SUBMISSION_STARTED]

    def test_specific_listeners_run_before_wildcards(self):
        emitter = EventEmitter()
        order = []
        emitter.on_any(lambda e: order.append("any"))
        emitter.on(EventType.SUBMISSION_STARTED, lambda e: order.append("specific"))

        emitter.emit(make_event())

        assert order == ["specific", "any"]

    def test_unsubscribe(self):
        emitter = EventEmitter()
        received = []
        emitter.on(EventType.SUBMISSION_STARTED, received.append)
        emitter.on_any(received.append)
        emitter.off(EventType.SUBMISSION_STARTED, received.append)
        emitter.off_any(received.append)

        emitter.emit(make_event())

        assert received == []

    def test_unsubscribe_unknown_listener_ignored(self):
        emitter = EventEmitter()
        emitter.off(EventType.SUBMISSION_STARTED, print)
        emitter.off_any(print)
        assert emitter.listener_count() == 0

    def test_listener_exceptions_are_isolated_and_logged(self, caplog):
        emitter = EventEmitter()
        received = []

        def broken(event):
            raise RuntimeError("listener bug")

        emitter.on(EventType.SUBMISSION_STARTED, broken)
        emitter.on_any(received.append)

        with caplog.at_level(logging.ERROR, logger="formbinder.events"):
            emitter.emit(make_event())

        assert len(received) == 1
        assert "listener bug" in caplog.text

    def test_listener_count_and_clear(self):
        emitter = EventEmitter()
        emitter.on(EventType.SUBMISSION_STARTED, print)
        emitter.on(EventType.SUBMISSION_FAILED, print)
        emitter.on_any(print)

        assert emitter.listener_count(EventType.SUBMISSION_STARTED) == 1
        assert emitter.listener_count() == 3

        emitter.clear()
        assert emitter.listener_count() == 0
