from configparser import ConfigParser, Error as ConfigParserError
from dataclasses import dataclass, field
import os
from typing import Dict, Optional

from battery_notify.errors import ConfigError
from battery_notify.globals import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_PLAYER_CMD,
    LOG_TARGETS,
    SOUND_DIR,
    UPOWER_DBUS_SERVICE,
)
from battery_notify.types import NotifyKind

SECTION = "battery-notify"

SOUND_KEYS = {
    NotifyKind.AC_CONNECTED: "sound_ac_connected",
    NotifyKind.AC_DISCONNECTED: "sound_ac_disconnected",
    NotifyKind.BATTERY_LOW: "sound_low",
    NotifyKind.BATTERY_CRITICAL: "sound_critical",
    NotifyKind.BATTERY_HIGH: "sound_high",
}

DEFAULT_SOUNDS = {kind: os.path.join(SOUND_DIR, kind.value + ".mp3") for kind in NotifyKind}


def find_config_file(args_config_file: Optional[str]) -> str:
    """
    Find the config file to use.

    Look for a config file in the following priorization order:
    1. Command line argument
    2. CONFIG_PATH environment variable
    3. User config file

    The returned path does not have to exist, a missing file means defaults.

    :param args_config_file: Path to the config file provided as a command line argument
    :return: The path to the config file to use
    """
    if args_config_file: return args_config_file                   # (1) Command line argument was specified
    return os.getenv("CONFIG_PATH") or DEFAULT_CONFIG_FILE          # (2) Environment, (3) user config file


@dataclass(frozen=True)
class Thresholds:
    low: int = 20
    critical: int = 10
    high: int = 80
    min_delta: int = 1

    def validate(self) -> "Thresholds":
        for name in ("low", "critical", "high", "min_delta"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigError(f"{name} must be between 0 and 100, got {value}")
        if not self.critical < self.low < self.high:
            raise ConfigError(
                f"thresholds must satisfy critical < low < high, got "
                f"critical={self.critical} low={self.low} high={self.high}"
            )
        return self


@dataclass(frozen=True)
class Settings:
    thresholds: Thresholds = field(default_factory=Thresholds)
    sounds: Dict[NotifyKind, str] = field(default_factory=lambda: dict(DEFAULT_SOUNDS))
    player_cmd: str = DEFAULT_PLAYER_CMD
    log_to: str = "stdout"
    ac_path: str = ""
    bat_path: str = ""
    upower_service: str = UPOWER_DBUS_SERVICE
    path: Optional[str] = None


def _clean_value(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return os.path.expanduser(os.path.expandvars(value))


def _read_shell_config(text: str) -> Dict[str, str]:
    # shell style KEY=value file, read under a synthetic section
    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("export "): stripped = stripped[len("export "):]
        lines.append(stripped)

    parser = ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#",),
        inline_comment_prefixes=("#",),
        interpolation=None,
        strict=False,
    )
    try: parser.read_string(f"[{SECTION}]\n" + "\n".join(lines))
    except ConfigParserError as e: raise ConfigError(f"unable to parse config file: {e}") from e
    return {key: _clean_value(value) for key, value in parser[SECTION].items()}


def _int_option(options: Dict[str, str], key: str, default: int) -> int:
    value = options.get(key, "")
    if value == "": return default
    try: return int(value)
    except ValueError: raise ConfigError(f"{key.upper()} must be an integer, got {value!r}")


def parse_config(text: str, path: Optional[str] = None) -> Settings:
    """
    Build validated settings from the contents of a config file.

    :param text: Contents of the config file
    :param path: Where the contents were read from, kept for logging
    :raises ConfigError: on syntax errors, non-integer or misordered thresholds
        and unknown log targets
    """
    options = _read_shell_config(text)
    defaults = Thresholds()
    thresholds = Thresholds(
        low=_int_option(options, "threshold_low", defaults.low),
        critical=_int_option(options, "threshold_critical", defaults.critical),
        high=_int_option(options, "threshold_high", defaults.high),
        min_delta=_int_option(options, "min_delta", defaults.min_delta),
    ).validate()

    log_to = options.get("log_to") or "stdout"
    if log_to not in LOG_TARGETS:
        raise ConfigError(f"LOG_TO must be one of {', '.join(LOG_TARGETS)}, got {log_to!r}")

    # a key present but left blank disables that sound
    sounds = {kind: options.get(key, DEFAULT_SOUNDS[kind]) for kind, key in SOUND_KEYS.items()}

    return Settings(
        thresholds=thresholds,
        sounds=sounds,
        player_cmd=options.get("player_cmd", DEFAULT_PLAYER_CMD),
        log_to=log_to,
        ac_path=options.get("ac_path", ""),
        bat_path=options.get("bat_path", ""),
        upower_service=options.get("upower_dbus_service") or UPOWER_DBUS_SERVICE,
        path=path,
    )


def load_settings(path: str) -> Settings:
    """Read settings from path, falling back to defaults when the file does not exist."""
    if not os.path.isfile(path):
        return Settings()
    try:
        with open(path, encoding="utf-8") as f: text = f.read()
    except OSError as e: raise ConfigError(f"unable to read config file {path}: {e}") from e
    return parse_config(text, path)
