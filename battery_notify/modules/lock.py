import logging
import os
from typing import Optional

import psutil

from battery_notify.errors import AlreadyRunningError
from battery_notify.globals import PID_FILE


class PidFile:
    """
    Single instance lock backed by a PID file in the user runtime directory.

    A file naming a live process blocks acquisition, a stale one is replaced.
    """

    def __init__(self, path: str = PID_FILE, pid: Optional[int] = None) -> None:
        self.path = path
        self.pid = pid if pid is not None else os.getpid()
        self.acquired = False

    def read(self) -> Optional[int]:
        try:
            with open(self.path, encoding="utf-8") as f: return int(f.read().strip())
        except (OSError, ValueError):
            return None

    def acquire(self) -> None:
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        if os.path.exists(self.path):
            old_pid = self.read()
            if old_pid is not None and old_pid != self.pid and psutil.pid_exists(old_pid):
                raise AlreadyRunningError(old_pid)
            logging.info("Stale PID file found, replacing.")

        with open(self.path, "w", encoding="utf-8") as f: f.write(str(self.pid))
        self.acquired = True

    def release(self) -> None:
        if not self.acquired: return
        self.acquired = False
        # another instance may have replaced a file it considered stale
        if self.read() != self.pid: return
        try: os.remove(self.path)
        except FileNotFoundError: pass
        except OSError as e: logging.warning("unable to remove %s: %s", self.path, e)

    def __enter__(self) -> "PidFile":
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
