from os import getenv, getuid, path

PROG_NAME = "battery-notify"
VERSION = "1.0"

HOME = path.expanduser("~")
SOUND_DIR = path.join(HOME, ".local/share/sounds/battery")
USER_CONFIG_DIR = getenv("XDG_CONFIG_HOME", default=path.join(HOME, ".config"))
DEFAULT_CONFIG_FILE = path.join(USER_CONFIG_DIR, PROG_NAME + ".conf")
RUNTIME_DIR = getenv("XDG_RUNTIME_DIR", default=f"/run/user/{getuid()}")
PID_FILE = path.join(RUNTIME_DIR, PROG_NAME + ".pid")

UPOWER_DBUS_SERVICE = "org.freedesktop.UPower"
DEFAULT_AC_PATH = "/org/freedesktop/UPower/devices/line_power_AC"
DEFAULT_BAT_PATH = "/org/freedesktop/UPower/devices/battery_BAT1"
AC_MARKERS = ("line_power",)
BAT_MARKERS = ("battery", "DisplayDevice")

REQUIRED_COMMANDS = ("gdbus", "upower", "notify-send")
DEFAULT_PLAYER_CMD = "mpg123"
LOG_TARGETS = ("stdout", "syslog")

# seconds allowed for a single `upower` query
UPOWER_TIMEOUT = 5

EMOJI_CHARGER = "󰂄"
EMOJI_BATTERY_LOW = "󰁻"
EMOJI_BATTERY_CRITICAL = "󰂃"
EMOJI_BATTERY_OK = "󱟢"
