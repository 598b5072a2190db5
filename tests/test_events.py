from pathlib import Path

from navforge.runtime.events import LOG_STORAGE_KEY, PerfEvent, PerformanceLogger
from navforge.runtime.storage import MemoryKeyValueStore, SqliteKeyValueStore
from navforge.state import NavigatorMode


def _event(index: int, note: str | None = None) -> PerfEvent:
    return PerfEvent(
        timestamp=1_700_000_000_000 + index,
        task_id="task-1",
        step=index,
        actor="navigator",
        modality=NavigatorMode.DOM,
        action="navigator.proposal-select",
        outcome="success",
        origin="director",
        session_id="task-1",
        note=note,
    )


def test_ring_buffer_drops_oldest_first():
    recorder = PerformanceLogger(max_events=3)
    for index in range(5):
        recorder.add_event(_event(index))
    assert [event.step for event in recorder.get_events()] == [2, 3, 4]


def test_events_persist_across_instances(tmp_path: Path):
    db_path = tmp_path / "navforge.db"
    first = PerformanceLogger(SqliteKeyValueStore(db_path))
    first.add_event(_event(1))
    first.add_event(_event(2))
    second = PerformanceLogger(SqliteKeyValueStore(db_path))
    events = second.get_events()
    assert [event.step for event in events] == [1, 2]
    assert events[0].modality == NavigatorMode.DOM


def test_lazy_load_truncates_to_most_recent():
    store = MemoryKeyValueStore()
    store.set(LOG_STORAGE_KEY, [_event(index).model_dump(mode="json") for index in range(10)])
    recorder = PerformanceLogger(store, max_events=4)
    assert [event.step for event in recorder.get_events()] == [6, 7, 8, 9]


def test_invalid_persisted_entries_are_skipped():
    store = MemoryKeyValueStore()
    store.set(LOG_STORAGE_KEY, [{"bogus": True}, _event(1).model_dump(mode="json")])
    recorder = PerformanceLogger(store)
    assert [event.step for event in recorder.get_events()] == [1]


def test_clear_empties_store():
    store = MemoryKeyValueStore()
    recorder = PerformanceLogger(store)
    recorder.add_event(_event(1))
    recorder.clear()
    assert recorder.get_events() == []
    assert store.get(LOG_STORAGE_KEY) == []


def test_notes_are_redacted():
    recorder = PerformanceLogger()
    recorder.add_event(_event(1, note="retry with Bearer abc.def-123 and sk-abcdef123456"))
    note = recorder.get_events()[0].note
    assert "abc.def-123" not in note
    assert "sk-abcdef123456" not in note
    assert "[REDACTED]" in note


def test_returned_events_are_a_copy():
    recorder = PerformanceLogger()
    recorder.add_event(_event(1))
    events = recorder.get_events()
    events.clear()
    assert len(recorder.get_events()) == 1
