import logging
import os
import shlex
from subprocess import DEVNULL, Popen, SubprocessError, run
from typing import List

from battery_notify.modules.detector import NotificationEvent
from battery_notify.tools import does_command_exists

NOTIFY_TIMEOUT = 5


class NotificationSink:
    """
    Best effort desktop notifications with optional sound.

    The audio player is probed once here. When it cannot be found, sounds stay
    disabled for the rest of the run.
    """

    def __init__(self, player_cmd: str = "") -> None:
        self.player: List[str] = self._probe_player(player_cmd)

    @staticmethod
    def _probe_player(player_cmd: str) -> List[str]:
        try: argv = shlex.split(player_cmd)
        except ValueError as e:
            logging.info("Note: invalid audio player command %r (%s); sounds disabled.", player_cmd, e)
            return []
        if not argv: return []
        if not does_command_exists(argv[0]):
            logging.info("Note: audio player '%s' not found; sounds disabled.", argv[0])
            return []
        return argv

    @property
    def sound_enabled(self) -> bool:
        return bool(self.player)

    def notify(self, event: NotificationEvent) -> None:
        self.send_notification(event.title, event.body)
        if event.sound_path: self.play_sound(event.sound_path)

    def send_notification(self, title: str, body: str) -> bool:
        try:
            run(["notify-send", title, body], check=True, stdout=DEVNULL, stderr=DEVNULL, timeout=NOTIFY_TIMEOUT)
        except (OSError, SubprocessError) as e:
            logging.warning("notify-send failed: %s", e)
            return False
        return True

    def play_sound(self, sound_path: str) -> bool:
        if not self.sound_enabled or not os.path.isfile(sound_path): return False
        # detached on purpose, playback is never waited for
        try:
            Popen([*self.player, sound_path], stdout=DEVNULL, stderr=DEVNULL, stdin=DEVNULL, start_new_session=True)
        except OSError as e:
            logging.warning("unable to play %s: %s", sound_path, e)
            return False
        return True
