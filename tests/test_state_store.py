from __future__ import annotations

import pytest

from pi5_provisioner.state_store import FileCursorStore, MemoryCursorStore, StateError


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    if request.param == "file":
        return FileCursorStore(str(tmp_path / "state" / ".pi5_setup_stage"))
    return MemoryCursorStore()


def test_absent_cursor_loads_as_zero(store):
    assert store.load() == 0


def test_save_then_load(store):
    store.save(7)
    assert store.load() == 7


def test_save_of_loaded_value_is_idempotent(store):
    store.save(4)
    store.save(store.load())
    assert store.load() == 4


def test_clear_resets_to_fresh_start(store):
    store.save(11)
    store.clear()
    assert store.load() == 0
    # clearing twice is harmless
    store.clear()


def test_negative_cursor_rejected(store):
    with pytest.raises(StateError):
        store.save(-1)


def test_file_holds_decimal_text(tmp_path):
    path = tmp_path / "cursor"
    FileCursorStore(str(path)).save(3)
    assert path.read_text(encoding="utf-8").strip() == "3"


def test_save_leaves_no_temp_files(tmp_path):
    store = FileCursorStore(str(tmp_path / "cursor"))
    store.save(1)
    store.save(2)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["cursor"]


def test_save_of_loaded_value_keeps_file_content(tmp_path):
    path = tmp_path / "cursor"
    store = FileCursorStore(str(path))
    store.save(5)
    before = path.read_text(encoding="utf-8")
    store.save(store.load())
    assert path.read_text(encoding="utf-8") == before


@pytest.mark.parametrize("content", ["", "abc", "-2", "1.5"])
def test_corrupt_file_is_fatal(tmp_path, content):
    path = tmp_path / "cursor"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StateError):
        FileCursorStore(str(path)).load()


def test_file_tolerates_trailing_newline(tmp_path):
    path = tmp_path / "cursor"
    path.write_text("6\n", encoding="utf-8")
    assert FileCursorStore(str(path)).load() == 6
