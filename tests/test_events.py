"""Tests for session events and the event log"""

import pytest
from pydantic import ValidationError

from pine.events import DirectoryChangeEvent, EventLog


def change(to: str, position: int = 0, frm: str | None = None) -> DirectoryChangeEvent:
    return DirectoryChangeEvent(from_directory=frm, to_directory=to, transcript_position=position)


class TestDirectoryChangeEvent:
    """Tests for DirectoryChangeEvent"""

    def test_defaults(self):
        event = change("/tmp")
        assert event.kind == "directory_change"
        assert event.from_directory is None
        assert event.id
        assert event.id != change("/tmp").id

    def test_immutable(self):
        event = change("/tmp")
        with pytest.raises(ValidationError):
            event.to_directory = "/usr"

    def test_rejects_relative_target(self):
        with pytest.raises(ValidationError):
            change("tmp")

    def test_rejects_unstandardized_target(self):
        with pytest.raises(ValidationError):
            change("/usr/../tmp")
        with pytest.raises(ValidationError):
            change("/tmp/")

    def test_rejects_negative_position(self):
        with pytest.raises(ValidationError):
            change("/tmp", position=-1)

    def test_does_not_require_existence(self):
        """Logs loaded from disk may name directories that are gone now"""
        assert change("/no/such/dir").to_directory == "/no/such/dir"


class TestEventLog:
    """Tests for EventLog"""

    def test_starts_empty(self):
        log = EventLog()
        assert len(log) == 0
        assert list(log) == []

    def test_append_preserves_order(self):
        log = EventLog()
        first, second = change("/a", 0), change("/b", 2)
        log.append(first)
        log.append(second)
        assert list(log) == [first, second]
        assert log[0] == first

    def test_append_rejects_out_of_order_position(self):
        log = EventLog()
        log.append(change("/a", 3))
        with pytest.raises(ValueError):
            log.append(change("/b", 1))
        assert len(log) == 1

    def test_same_position_allowed(self):
        log = EventLog()
        log.append(change("/a", 2))
        log.append(change("/b", 2))
        assert len(log) == 2

    def test_events_up_to(self):
        log = EventLog()
        for to, position in [("/a", 0), ("/b", 2), ("/c", 5)]:
            log.append(change(to, position))

        assert [e.to_directory for e in log.events_up_to(2)] == ["/a", "/b"]
        assert [e.to_directory for e in log.events_up_to(1)] == ["/a"]
        assert [e.to_directory for e in log.events_up_to(None)] == ["/a", "/b", "/c"]
        assert [e.to_directory for e in log.directory_changes(5)] == ["/a", "/b", "/c"]

    def test_json_round_trip(self):
        log = EventLog()
        log.append(change("/a", 0, frm="/start"))
        restored = EventLog.model_validate_json(log.model_dump_json())
        assert list(restored) == list(log)
