import os

import pytest

from battery_notify.errors import AlreadyRunningError
from battery_notify.modules import lock
from battery_notify.modules.lock import PidFile


def test_acquire_and_release(tmp_path) -> None:
    path = tmp_path / "run" / "battery-notify.pid"
    pid_file = PidFile(str(path), pid=4242)

    with pid_file:
        assert path.read_text() == "4242"

    assert not path.exists()


def test_live_instance_blocks(tmp_path, monkeypatch) -> None:
    path = tmp_path / "battery-notify.pid"
    path.write_text("1234")
    monkeypatch.setattr(lock.psutil, "pid_exists", lambda pid: pid == 1234)

    with pytest.raises(AlreadyRunningError) as info:
        PidFile(str(path), pid=4242).acquire()

    assert info.value.pid == 1234
    assert path.read_text() == "1234"


@pytest.mark.parametrize("content", ["1234", "", "not-a-pid"])
def test_stale_file_is_replaced(tmp_path, monkeypatch, content) -> None:
    path = tmp_path / "battery-notify.pid"
    path.write_text(content)
    monkeypatch.setattr(lock.psutil, "pid_exists", lambda pid: False)

    pid_file = PidFile(str(path), pid=4242)
    pid_file.acquire()

    assert path.read_text() == "4242"
    pid_file.release()
    assert not path.exists()


def test_release_keeps_file_owned_by_another_process(tmp_path) -> None:
    path = tmp_path / "battery-notify.pid"
    pid_file = PidFile(str(path), pid=4242)
    pid_file.acquire()
    path.write_text("5151")

    pid_file.release()

    assert path.read_text() == "5151"


def test_release_without_acquire_is_noop(tmp_path) -> None:
    path = tmp_path / "battery-notify.pid"
    path.write_text("5151")

    PidFile(str(path)).release()

    assert path.exists()


def test_default_pid_is_current_process(tmp_path) -> None:
    assert PidFile(str(tmp_path / "x.pid")).pid == os.getpid()
