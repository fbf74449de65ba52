import logging
from logging.handlers import SysLogHandler
from shutil import which
import sys

from battery_notify.errors import MissingDependencyError
from battery_notify.globals import PROG_NAME, REQUIRED_COMMANDS

SYSLOG_SOCKET = "/dev/log"


class ConditionalFormatter(logging.Formatter):
    """
    A custom formatter that applies different format strings based on record level.
    Adds the level name, file name and line number only for WARNING and above.
    """

    def __init__(self) -> None:
        self.default_fmt = "[%(asctime)s] %(message)s"
        self.error_fmt = "[%(asctime)s] [%(levelname)s] [%(filename)s:%(lineno)d] %(message)s"

        super().__init__(fmt=self.default_fmt, datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record) -> str:
        original_fmt: str = self._style._fmt

        if record.levelno >= logging.WARNING:
            self._style._fmt = self.error_fmt
        else:
            self._style._fmt = self.default_fmt

        result: str = super().format(record)

        self._style._fmt = original_fmt

        return result


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConditionalFormatter())
    return handler


def setup_logger(log_to: str = "stdout", debug: bool = False) -> None:
    """Setup logging global, either to stdout or to the system logger
    """
    fallback_reason = None
    if log_to == "syslog":
        try:
            handler: logging.Handler = SysLogHandler(address=SYSLOG_SOCKET)
            handler.ident = PROG_NAME + ": "
            handler.setFormatter(logging.Formatter("%(message)s"))
        except OSError as e:
            fallback_reason = e
            handler = _stdout_handler()
    else:
        handler = _stdout_handler()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
    if fallback_reason is not None:
        logging.warning("syslog unavailable (%s), logging to stdout", fallback_reason)


# used to check if binary exists on the system
def does_command_exists(cmd: str) -> bool: return which(cmd) is not None


def check_dependencies(commands=REQUIRED_COMMANDS) -> None:
    for cmd in commands:
        if not does_command_exists(cmd): raise MissingDependencyError(cmd)
