from enum import Enum


class Zone(Enum):
    CRITICAL = "critical"
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class NotifyKind(Enum):
    AC_CONNECTED = "ac_connected"
    AC_DISCONNECTED = "ac_disconnected"
    BATTERY_CRITICAL = "critical"
    BATTERY_LOW = "low"
    BATTERY_HIGH = "high"
