"""Tests for the operator event ring buffer."""
from moodmate.event_log import EventLog


def test_newest_first_and_bounded():
    log = EventLog(maxlen=3)
    for i in range(5):
        log.add("tick", {"i": i})

    assert len(log) == 3
    assert [e["payload"]["i"] for e in log.recent()] == [4, 3, 2]


def test_limit_is_clamped():
    log = EventLog(maxlen=3)
    log.add("a", {})
    log.add("b", {})

    assert [e["kind"] for e in log.recent(1)] == ["b"]
    assert log.recent(0) == []
    assert len(log.recent(100)) == 2
