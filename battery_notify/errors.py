class BatteryNotifyError(Exception):
    """Base class for errors that stop battery-notify at startup."""


class ConfigError(BatteryNotifyError):
    pass


class MissingDependencyError(BatteryNotifyError):
    def __init__(self, command: str) -> None:
        super().__init__(f"Missing dependency: {command}. Aborting.")
        self.command = command


class AlreadyRunningError(BatteryNotifyError):
    def __init__(self, pid: int) -> None:
        super().__init__(f"Another instance is running (PID {pid}). Exiting.")
        self.pid = pid
