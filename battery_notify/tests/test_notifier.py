from subprocess import CalledProcessError, CompletedProcess

import pytest

from battery_notify.modules import notifier
from battery_notify.modules.detector import NotificationEvent
from battery_notify.modules.notifier import NotificationSink
from battery_notify.types import NotifyKind


@pytest.fixture
def calls(monkeypatch):
    recorded = {"run": [], "popen": []}

    def fake_run(cmd, **kwargs):
        recorded["run"].append(cmd)
        return CompletedProcess(cmd, 0)

    def fake_popen(cmd, **kwargs):
        recorded["popen"].append((cmd, kwargs))

    monkeypatch.setattr(notifier, "run", fake_run)
    monkeypatch.setattr(notifier, "Popen", fake_popen)
    monkeypatch.setattr(notifier, "does_command_exists", lambda cmd: cmd == "mpg123")
    return recorded


def event(sound_path: str = "") -> NotificationEvent:
    return NotificationEvent(NotifyKind.BATTERY_LOW, "Low battery: 15%", "Connect the charger", sound_path)


def test_notify_and_play(calls, tmp_path) -> None:
    sound = tmp_path / "low.mp3"
    sound.write_bytes(b"ID3")
    sink = NotificationSink("mpg123 -q")

    sink.notify(event(str(sound)))

    assert calls["run"] == [["notify-send", "Low battery: 15%", "Connect the charger"]]
    cmd, kwargs = calls["popen"][0]
    assert cmd == ["mpg123", "-q", str(sound)]
    assert kwargs["start_new_session"] is True


def test_missing_sound_file_is_skipped(calls, tmp_path) -> None:
    NotificationSink("mpg123").notify(event(str(tmp_path / "missing.mp3")))

    assert len(calls["run"]) == 1
    assert calls["popen"] == []


def test_blank_sound_path_is_skipped(calls) -> None:
    NotificationSink("mpg123").notify(event(""))

    assert calls["popen"] == []


@pytest.mark.parametrize("player_cmd", ["", "paplay", "mpg123 'unterminated"])
def test_unusable_player_disables_sound(calls, tmp_path, player_cmd) -> None:
    sound = tmp_path / "low.mp3"
    sound.write_bytes(b"ID3")
    sink = NotificationSink(player_cmd)

    sink.notify(event(str(sound)))

    assert sink.sound_enabled is False
    assert calls["popen"] == []


@pytest.mark.parametrize("error", [FileNotFoundError("notify-send"), CalledProcessError(1, ["notify-send"])])
def test_notification_failure_is_swallowed(monkeypatch, error) -> None:
    def fake_run(cmd, **kwargs):
        raise error

    monkeypatch.setattr(notifier, "run", fake_run)

    assert NotificationSink("").send_notification("title", "body") is False


def test_playback_failure_is_swallowed(calls, monkeypatch, tmp_path) -> None:
    sound = tmp_path / "low.mp3"
    sound.write_bytes(b"ID3")

    def broken_popen(cmd, **kwargs):
        raise PermissionError(cmd[0])

    sink = NotificationSink("mpg123")
    monkeypatch.setattr(notifier, "Popen", broken_popen)

    assert sink.play_sound(str(sound)) is False
