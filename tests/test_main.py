from __future__ import annotations

import logging

import pytest

from pi5_provisioner import main as main_mod
from pi5_provisioner.pipeline import Continuation, RunState
from pi5_provisioner.state_store import FileCursorStore


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch, tmp_path):
    monkeypatch.setattr(main_mod, "configure_logging", lambda log_path: str(tmp_path / "setup.log"))


def test_dry_run_never_writes_cursor(tmp_path):
    state = tmp_path / ".pi5_setup_stage"
    report = main_mod.run(state_path=str(state), config_path=None, dry_run=True, input_fn=lambda _: "3")
    assert report.state is RunState.ADVANCED
    assert report.continuation is Continuation.REBOOT
    assert not state.exists()


def test_dry_run_reads_existing_cursor(tmp_path):
    state = tmp_path / ".pi5_setup_stage"
    FileCursorStore(str(state)).save(3)
    report = main_mod.run(state_path=str(state), config_path=None, dry_run=True, input_fn=lambda _: "")
    assert report.cursor_before == 3
    assert report.stage.index == 3
    assert FileCursorStore(str(state)).load() == 3


def test_refuses_to_run_as_root(monkeypatch, tmp_path):
    monkeypatch.setattr(main_mod, "is_root", lambda: True)
    assert main_mod.main(["--state", str(tmp_path / "s")]) == 1


def test_invalid_selection_exits_nonzero(monkeypatch, tmp_path):
    monkeypatch.setattr(main_mod, "is_root", lambda: False)
    monkeypatch.setattr("builtins.input", lambda _prompt: "42")
    state = tmp_path / "s"
    assert main_mod.main(["--state", str(state), "--dry-run"]) == 1
    assert not state.exists()


def test_unexpected_error_exits_nonzero(monkeypatch, tmp_path):
    monkeypatch.setattr(main_mod, "is_root", lambda: False)
    state = tmp_path / "s"
    state.write_text("garbage", encoding="utf-8")
    assert main_mod.main(["--state", str(state), "--config", str(tmp_path / "none.yaml")]) == 1
    assert state.read_text(encoding="utf-8") == "garbage"


@pytest.fixture
def live_run(monkeypatch, tmp_path, runner):
    """main() with a scripted runner, operator picking stage 3 (a reboot stage)."""

    state = tmp_path / ".pi5_setup_stage"
    cursor_at_sync = []
    failures = {}

    def scripted(argv, **kwargs):
        argv = list(argv)
        if argv == ["sync"]:
            cursor_at_sync.append(FileCursorStore(str(state)).load())
        if tuple(argv) in failures:
            raise failures[tuple(argv)]
        return runner(argv, **kwargs)

    monkeypatch.setattr(main_mod, "make_runner", lambda dry_run=False: scripted)
    monkeypatch.setattr(main_mod, "is_root", lambda: False)
    monkeypatch.setattr(main_mod.time, "sleep", lambda _s: None)
    monkeypatch.setattr("builtins.input", lambda _prompt: "3")

    def invoke():
        return main_mod.main(["--state", str(state), "--config", str(tmp_path / "none.yaml")])

    invoke.state = state
    invoke.cursor_at_sync = cursor_at_sync
    invoke.failures = failures
    return invoke


def test_reboot_stage_syncs_then_reboots_after_saving_cursor(live_run, runner):
    assert live_run() == 0
    assert runner.argvs[-2:] == [["sync"], ["sudo", "reboot"]]
    assert runner.ran("sudo", "raspi-config", "nonint", "do_boot_order", "B1")
    assert live_run.cursor_at_sync == [4]
    assert FileCursorStore(str(live_run.state)).load() == 4


def test_failed_reboot_command_still_counts_as_advanced(live_run, runner, caplog):
    caplog.set_level(logging.INFO)
    runner.on("sudo", "reboot", returncode=1)
    assert live_run() == 0
    assert "reboot manually with: sudo reboot" in caplog.text
    assert "not advanced" not in caplog.text
    assert FileCursorStore(str(live_run.state)).load() == 4


@pytest.mark.parametrize(
    "argv, error",
    [
        (("sync",), KeyboardInterrupt()),
        (("sudo", "reboot"), FileNotFoundError("sudo")),
    ],
)
def test_interrupted_reboot_reports_advanced_cursor(live_run, caplog, argv, error):
    caplog.set_level(logging.INFO)
    live_run.failures[argv] = error
    assert live_run() == 0
    assert "already advanced" in caplog.text
    assert "not advanced" not in caplog.text
    assert FileCursorStore(str(live_run.state)).load() == 4
