from subprocess import CalledProcessError, CompletedProcess, TimeoutExpired

import pytest

from battery_notify.globals import DEFAULT_AC_PATH, DEFAULT_BAT_PATH
from battery_notify.modules import upower
from battery_notify.modules.upower import DeviceIdentity, parse_percentage, read_percentage, resolve_devices

UPOWER_INFO = """\
  native-path:          BAT0
  vendor:               SMP
  model:                5B10W13930
  power supply:         yes
  updated:              Sun 19 Oct 2026 10:13:01 CEST (5 seconds ago)
  battery
    present:             yes
    state:               discharging
    energy:              40.12 Wh
    percentage:          66.9%
    capacity:            88.1%
"""


def test_resolve_keeps_configured_paths(monkeypatch) -> None:
    def fail():
        raise AssertionError("devices must not be enumerated")

    monkeypatch.setattr(upower, "list_devices", fail)

    assert resolve_devices("/custom/ac", "/custom/bat") == DeviceIdentity(ac="/custom/ac", battery="/custom/bat")


def test_resolve_detects_devices(monkeypatch) -> None:
    monkeypatch.setattr(
        upower,
        "list_devices",
        lambda: [
            "/org/freedesktop/UPower/devices/line_power_ACAD",
            "/org/freedesktop/UPower/devices/battery_BAT0",
            "/org/freedesktop/UPower/devices/mouse_hidpp_battery_0",
            "/org/freedesktop/UPower/devices/DisplayDevice",
        ],
    )

    devices = resolve_devices()

    # last match wins
    assert devices.ac == "/org/freedesktop/UPower/devices/line_power_ACAD"
    assert devices.battery == "/org/freedesktop/UPower/devices/DisplayDevice"


def test_resolve_fills_only_missing_path(monkeypatch) -> None:
    monkeypatch.setattr(upower, "list_devices", lambda: ["/org/freedesktop/UPower/devices/battery_BAT0"])

    devices = resolve_devices(ac_path="/custom/ac")

    assert devices == DeviceIdentity(ac="/custom/ac", battery="/org/freedesktop/UPower/devices/battery_BAT0")


def test_resolve_falls_back_to_defaults_on_failure(monkeypatch) -> None:
    def missing():
        raise FileNotFoundError("upower")

    monkeypatch.setattr(upower, "list_devices", missing)

    assert resolve_devices() == DeviceIdentity(ac=DEFAULT_AC_PATH, battery=DEFAULT_BAT_PATH)


def test_resolve_falls_back_when_nothing_matches(monkeypatch) -> None:
    monkeypatch.setattr(upower, "list_devices", lambda: ["/org/freedesktop/UPower/devices/mouse_0"])

    assert resolve_devices() == DeviceIdentity(ac=DEFAULT_AC_PATH, battery=DEFAULT_BAT_PATH)


def test_list_devices(monkeypatch) -> None:
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return CompletedProcess(cmd, 0, stdout="/org/freedesktop/UPower/devices/battery_BAT0\n\n/org/freedesktop/UPower/devices/DisplayDevice\n")

    monkeypatch.setattr(upower, "run", fake_run)

    assert upower.list_devices() == ["/org/freedesktop/UPower/devices/battery_BAT0", "/org/freedesktop/UPower/devices/DisplayDevice"]
    assert calls == [["upower", "-e"]]


@pytest.mark.parametrize(
    "info, percent",
    [
        (UPOWER_INFO, 66),
        ("    percentage:          99.99%\n", 99),
        ("    percentage:          100%\n", 100),
        ("    percentage:          0%\n", 0),
        ("    percentage:          unknown\n", None),
        ("    percentage:          250%\n", None),
        ("    percentage:          87% (should be ignored)\n", 87),
        ("    percentage:          42.7 %\n", 42),
        ("    state:               charging\n", None),
        ("", None),
    ],
)
def test_parse_percentage(info, percent) -> None:
    assert parse_percentage(info) == percent


def test_read_percentage(monkeypatch) -> None:
    def fake_run(cmd, **kwargs):
        assert cmd == ["upower", "-i", "/org/freedesktop/UPower/devices/battery_BAT0"]
        return CompletedProcess(cmd, 0, stdout=UPOWER_INFO)

    monkeypatch.setattr(upower, "run", fake_run)

    assert read_percentage("/org/freedesktop/UPower/devices/battery_BAT0") == 66


@pytest.mark.parametrize(
    "error",
    [
        CalledProcessError(1, ["upower"]),
        TimeoutExpired(["upower"], 5),
        FileNotFoundError("upower"),
    ],
)
def test_read_percentage_failures(monkeypatch, error) -> None:
    def fake_run(cmd, **kwargs):
        raise error

    monkeypatch.setattr(upower, "run", fake_run)

    assert read_percentage("/org/freedesktop/UPower/devices/battery_BAT0") is None
