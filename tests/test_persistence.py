from cloudwordle.config.game_settings import ACTIVE_GAME_KEY, GAME_STATE_KEY
from cloudwordle.services.persistence import PersistenceBridge
from cloudwordle.services.session import Session
from cloudwordle.services.storage import JsonFileStorage, MemoryStorage


def started_session():
    session = Session("CRANE")
    for letter in "SLATE":
        session.add_letter(letter)
    session.begin_submit()
    session.accept_submission()
    session.advance()
    session.add_letter("C")
    return session


class BrokenStorage(MemoryStorage):
    def set(self, key, value):
        raise OSError("disk full")


def test_snapshot_then_restore(storage):
    bridge = PersistenceBridge(storage, clock=lambda: 1700000000.0)
    session = started_session()

    assert bridge.snapshot(session) is True
    assert storage.get(ACTIVE_GAME_KEY) is True
    assert storage.get(GAME_STATE_KEY)["timestamp"] == 1700000000.0

    restored = bridge.restore()
    assert restored.attempt_index == 1
    assert restored.cursor_index == 1
    assert restored.board() == session.board()


def test_untouched_session_is_not_snapshotted(storage):
    bridge = PersistenceBridge(storage)
    assert bridge.snapshot(Session("CRANE")) is False
    assert storage.keys() == []


def test_terminal_session_is_not_snapshotted(storage):
    bridge = PersistenceBridge(storage)
    session = Session("CRANE")
    for letter in "CRANE":
        session.add_letter(letter)
    session.begin_submit()
    session.accept_submission()
    session.advance()
    assert bridge.snapshot(session) is False


def test_restore_without_snapshot(storage):
    assert PersistenceBridge(storage).restore() is None


def test_marker_without_snapshot_is_cleared(storage):
    storage.set(ACTIVE_GAME_KEY, True)
    assert PersistenceBridge(storage).restore() is None
    assert storage.get(ACTIVE_GAME_KEY) is None


def test_snapshot_without_marker_is_cleared(storage):
    storage.set(GAME_STATE_KEY, started_session().to_snapshot())
    assert PersistenceBridge(storage).restore() is None
    assert storage.keys() == []


def test_corrupt_snapshot_is_discarded(storage):
    data = started_session().to_snapshot()
    data["attempt_index"] = "two"
    storage.set(GAME_STATE_KEY, data)
    storage.set(ACTIVE_GAME_KEY, True)

    assert PersistenceBridge(storage).restore() is None
    assert storage.get(GAME_STATE_KEY) is None
    assert storage.get(ACTIVE_GAME_KEY) is None


def test_storage_failure_is_not_fatal():
    bridge = PersistenceBridge(BrokenStorage())
    assert bridge.snapshot(started_session()) is False


def test_clear_removes_both_keys(storage):
    bridge = PersistenceBridge(storage)
    bridge.snapshot(started_session())
    bridge.clear()
    assert storage.keys() == []


def test_json_file_storage_survives_reopen(tmp_path):
    path = tmp_path / "players" / "abc.json"
    bridge = PersistenceBridge(JsonFileStorage(path))
    bridge.snapshot(started_session())

    restored = PersistenceBridge(JsonFileStorage(path)).restore()
    assert restored is not None
    assert restored.current_letters == "C"


def test_json_file_storage_treats_garbage_as_empty(tmp_path):
    path = tmp_path / "abc.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)
    assert storage.get(GAME_STATE_KEY) is None
    storage.set("wordle_stats", {"games_played": 1})
    assert storage.get("wordle_stats") == {"games_played": 1}
