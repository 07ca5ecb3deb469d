"""Tests covering the bootstrap helpers and the console script."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from locpopup import app
from locpopup.host.replay import ReplayStep, ScriptedSession
from locpopup.services.settings import Settings
from tests.helpers import record


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOCPOPUP_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(app, "setup_logging", lambda debug=False, **_: None)


def _steps() -> list[ReplayStep]:
    loclist = [record(lnum=3, col=4, type="E", text="bad"), record(lnum=8, col=1, type="W", text="meh")]
    return [
        ReplayStep(cursor=(3, 0), loclist=loclist),
        ReplayStep(cursor=(3, 7), loclist=loclist),
        ReplayStep(cursor=(5, 0), loclist=loclist),
        ReplayStep(buffer_kind="terminal", loclist=loclist),
        ReplayStep(cursor=(8, 2), loclist=loclist),
        ReplayStep(mode="i", cursor=(8, 2), loclist=loclist),
        ReplayStep(fail="getloclist"),
    ]


def test_build_runtime_headless_renders_popup_and_status() -> None:
    session = ScriptedSession()
    runtime = app.build_runtime(session, Settings(), enable_qt=False)
    session.load(ReplayStep(cursor=(3, 4), loclist=[record(lnum=3, col=4, text="bad")]))

    runtime.subscriber.subscribe()
    runtime.subscriber.handle_notification("LocPopup", ["update"])

    assert session.subscriptions == ["LocPopup"]
    assert runtime.popup.visible is True
    assert runtime.popup.label_text == "Error"
    assert runtime.status.text == "E 1  W 0"
    assert runtime.notifier is None


def test_build_runtime_with_qt_routes_redraws_through_signals() -> None:
    qt_widgets = pytest.importorskip("PySide6.QtWidgets")
    if qt_widgets.QApplication.instance() is None:  # pragma: no cover - depends on PySide6
        qt_widgets.QApplication([])
    session = ScriptedSession()
    runtime = app.build_runtime(session, Settings())
    session.load(ReplayStep(cursor=(3, 4), loclist=[record(lnum=3, col=4, type="W", text="meh")]))

    runtime.controller.update()

    assert runtime.notifier is not None
    assert runtime.popup.widget.isVisible() is True
    assert runtime.popup.label_text == "Warning"
    assert runtime.status.text == "E 0  W 1"


def test_replay_transcript_reports_transitions() -> None:
    stream = io.StringIO()

    outcomes = app.replay_transcript(_steps(), Settings(), stream=stream)

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert len(outcomes) == len(lines) == 7
    assert [line["visible"] for line in lines] == [True, True, False, False, True, False, False]
    assert [line["redraw"] for line in lines] == [True, False, True, False, True, True, False]
    assert lines[0]["category"] == "E"
    assert lines[0]["errors"] == 1 and lines[0]["warnings"] == 1
    assert lines[3]["skipped"].startswith("guarded")
    assert lines[4]["text"] == "meh"
    assert lines[6]["skipped"].startswith("host failure")


def test_replay_transcript_with_popup_disabled_runs_no_passes() -> None:
    stream = io.StringIO()

    outcomes = app.replay_transcript(_steps(), Settings(enabled=False), stream=stream)

    assert outcomes == []
    assert stream.getvalue() == ""


def test_replay_transcript_honours_custom_notification_method() -> None:
    stream = io.StringIO()

    outcomes = app.replay_transcript(_steps(), Settings(notification_method="Other"), stream=stream)

    assert len(outcomes) == 7


def test_runtime_run_serves_notifications_from_the_session_loop() -> None:
    session = ScriptedSession()
    runtime = app.build_runtime(session, Settings(), enable_qt=False)
    loclist = [record(lnum=3, col=4, type="W", text="meh")]
    session.notify("LocPopup", "update", step=ReplayStep(cursor=(3, 4), loclist=loclist))
    session.notify("Other", "update")
    session.notify("LocPopup", "update", step=ReplayStep(cursor=(9, 0), loclist=loclist))

    assert runtime.run() is True

    assert session.subscriptions == ["LocPopup"]
    assert session.notification_callbacks == [runtime.subscriber.handle_notification]
    assert runtime.status.text == "E 0  W 1"
    assert runtime.popup.visible is False
    assert runtime.popup.label_text == "Warning"


def test_runtime_run_leaves_loop_alone_when_disabled() -> None:
    session = ScriptedSession()
    runtime = app.build_runtime(session, Settings(enabled=False), enable_qt=False)
    session.notify("LocPopup", "update", step=ReplayStep(cursor=(3, 4), loclist=[record(lnum=3, col=4)]))

    assert runtime.run() is False

    assert session.notification_callbacks == []
    assert runtime.popup.visible is False


def test_main_configures_debug_logging_from_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[bool] = []
    monkeypatch.setattr(app, "setup_logging", lambda debug=False, **_: calls.append(debug))
    monkeypatch.delenv("LOCPOPUP_DEBUG", raising=False)
    monkeypatch.delenv("LOCPOPUP_DEBUG_LOGGING", raising=False)

    code = app.main(
        ["--settings-path", str(tmp_path / "s.json"), "--set", "debug_logging=on", "--dump-settings"]
    )

    assert code == 0
    assert calls == [True]
    capsys.readouterr()


def test_main_replays_transcript_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    transcript = tmp_path / "session.json"
    transcript.write_text(
        json.dumps({"steps": [{"cursor": [3, 4], "loclist": [record(lnum=3, col=4, text="bad")]}]}),
        encoding="utf-8",
    )

    code = app.main(["--settings-path", str(tmp_path / "settings.json"), "--replay", str(transcript)])

    assert code == 0
    line = json.loads(capsys.readouterr().out.strip())
    assert line["visible"] is True
    assert line["text"] == "bad"


def test_main_rejects_unreadable_transcript(tmp_path: Path) -> None:
    code = app.main(["--settings-path", str(tmp_path / "s.json"), "--replay", str(tmp_path / "missing.json")])

    assert code == 2


def test_main_dump_settings_includes_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = app.main(
        [
            "--settings-path",
            str(tmp_path / "settings.json"),
            "--set",
            "enabled=off",
            "--set",
            "location_window=2",
            "--dump-settings",
        ]
    )

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["enabled"] is False
    assert payload["settings"]["location_window"] == 2
    assert payload["meta"]["cli_overrides"] == ["enabled", "location_window"]


def test_main_rejects_bad_overrides(tmp_path: Path) -> None:
    code = app.main(["--settings-path", str(tmp_path / "s.json"), "--set", "nope=1"])

    assert code == 2


def test_main_without_action_prints_usage(tmp_path: Path) -> None:
    assert app.main(["--settings-path", str(tmp_path / "s.json")]) == 2


def test_coerce_cli_overrides_parses_types() -> None:
    overrides = app._coerce_cli_overrides(  # noqa: SLF001
        ["enabled=yes", "location_window=5", "notification_method=Pop", 'metadata={"k": 1}']
    )

    assert overrides == {
        "enabled": True,
        "location_window": 5,
        "notification_method": "Pop",
        "metadata": {"k": 1},
    }


@pytest.mark.parametrize("item", ["enabled", "=1", "enabled=maybe", "metadata=[1]"])
def test_coerce_cli_overrides_rejects_invalid_items(item: str) -> None:
    with pytest.raises(ValueError):
        app._coerce_cli_overrides([item])  # noqa: SLF001
