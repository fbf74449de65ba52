from dataclasses import dataclass
import logging
import re
from subprocess import CalledProcessError, SubprocessError, run
from typing import List, Optional

from battery_notify.globals import (
    AC_MARKERS,
    BAT_MARKERS,
    DEFAULT_AC_PATH,
    DEFAULT_BAT_PATH,
    UPOWER_TIMEOUT,
)

# leading number of the value, "87% (should be ignored)" -> "87"
PERCENT_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d*)?)")


@dataclass(frozen=True)
class DeviceIdentity:
    ac: str
    battery: str


def _upower(*args: str) -> str:
    return run(
        ["upower", *args],
        capture_output=True,
        text=True,
        check=True,
        timeout=UPOWER_TIMEOUT,
    ).stdout


def list_devices() -> List[str]:
    """Object paths of all power devices known to UPower (`upower -e`)."""
    return [line.strip() for line in _upower("-e").splitlines() if line.strip()]


def resolve_devices(ac_path: str = "", bat_path: str = "") -> DeviceIdentity:
    """
    Returns the AC source and battery device to track.

    Configured paths are kept as they are. Missing ones are looked up among the
    devices UPower enumerates, by substring match on the object path, and
    otherwise fall back to the usual default paths. Enumeration problems are
    logged, never raised.

    :param ac_path: Configured AC source path, empty to detect
    :param bat_path: Configured battery path, empty to detect
    """
    if ac_path and bat_path:
        return DeviceIdentity(ac=ac_path, battery=bat_path)

    try:
        devices = list_devices()
    except (OSError, SubprocessError) as e:
        logging.warning("unable to enumerate power devices: %s", e)
        devices = []

    detected_ac, detected_bat = "", ""
    for dev in devices:
        if any(marker in dev for marker in AC_MARKERS): detected_ac = dev
        if any(marker in dev for marker in BAT_MARKERS): detected_bat = dev

    return DeviceIdentity(
        ac=ac_path or detected_ac or DEFAULT_AC_PATH,
        battery=bat_path or detected_bat or DEFAULT_BAT_PATH,
    )


def parse_percentage(info: str) -> Optional[int]:
    """Extracts the truncated `percentage:` field from `upower -i` output."""
    for line in info.splitlines():
        key, sep, value = line.partition(":")
        if not sep or key.strip() != "percentage": continue
        match = PERCENT_RE.match(value)
        if match is None: return None
        percent = int(float(match.group("value")))
        return percent if 0 <= percent <= 100 else None
    return None


def read_percentage(device: str) -> Optional[int]:
    """
    Current charge of device as an integer percentage.

    :return: The percentage truncated towards zero, or None when it is unavailable
    """
    try:
        info = _upower("-i", device)
    except CalledProcessError as e:
        logging.warning("upower -i %s exited with code %s", device, e.returncode)
        return None
    except (OSError, SubprocessError) as e:
        logging.warning("unable to query %s: %s", device, e)
        return None

    percent = parse_percentage(info)
    if percent is None: logging.debug("no usable percentage for %s", device)
    return percent
