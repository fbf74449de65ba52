import logging
import signal
import sys

from battery_notify.config.config import Settings
from battery_notify.globals import PROG_NAME
from battery_notify.modules.detector import TransitionDetector
from battery_notify.modules.lock import PidFile
from battery_notify.modules.monitor import PowerEventSource
from battery_notify.modules.notifier import NotificationSink
from battery_notify.modules.upower import read_percentage, resolve_devices
from battery_notify.tools import check_dependencies


def _exit_on_signal(signum, frame) -> None:
    logging.info("Received %s, stopping", signal.Signals(signum).name)
    sys.exit(0)


def install_signal_handlers() -> None:
    # SystemExit unwinds through the finally blocks, releasing the PID file
    for sig in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, _exit_on_signal)


def run_daemon(settings: Settings, pid_file: PidFile) -> int:
    """
    Runs battery-notify until the event monitor exits or a signal arrives.

    :raises AlreadyRunningError: when another instance holds the PID file
    :raises MissingDependencyError: when a required command is not installed
    :return: The process exit code
    """
    with pid_file:
        check_dependencies()
        sink = NotificationSink(settings.player_cmd)

        logging.info("Starting %s", PROG_NAME)
        devices = resolve_devices(settings.ac_path, settings.bat_path)
        detector = TransitionDetector(devices, settings.thresholds, read_percentage, sink.notify, settings.sounds)
        logging.info("UPower listener started. AC=%s, BAT=%s", devices.ac, devices.battery)

        with PowerEventSource(settings.upower_service) as source:
            for event in source.events():
                detector.process(event)

        logging.error("event monitor exited with code %s", source.returncode)
        return 1
