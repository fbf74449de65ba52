from dataclasses import dataclass, field
import logging
import re
from subprocess import DEVNULL, PIPE, Popen, TimeoutExpired
from typing import Dict, Iterator, List, Optional

from battery_notify.globals import UPOWER_DBUS_SERVICE

# "/org/freedesktop/UPower/devices/line_power_AC: org.freedesktop.DBus.Properties.PropertiesChanged (...)"
LINE_RE = re.compile(r"^(?P<path>/\S*?):\s+(?P<member>\S+)\s*(?P<args>.*)$")
PROPERTY_RE = re.compile(r"'(?P<name>[^']+)':\s*<(?P<value>[^>]*)>")
TYPED_VALUE_RE = re.compile(r"^(?:byte|u?int(?:16|32|64)|double|objectpath|signature)\s+(?P<value>.+)$")


@dataclass(frozen=True)
class PowerEvent:
    device_id: str
    member: str
    properties: Dict[str, object] = field(default_factory=dict)


def decode_value(text: str) -> object:
    """Converts a GVariant text value as printed by gdbus into a Python value."""
    text = text.strip()
    typed = TYPED_VALUE_RE.match(text)
    if typed: text = typed.group("value").strip()

    if text == "true": return True
    if text == "false": return False
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"": return text[1:-1]
    try: return int(text)
    except ValueError: pass
    try: return float(text)
    except ValueError: return text


def parse_line(line: str) -> Optional[PowerEvent]:
    """
    Parses one line of `gdbus monitor` output.

    :return: The event, or None for banner lines and anything that is not a signal
        emitted by an object
    """
    match = LINE_RE.match(line.strip())
    if match is None: return None
    properties = {m.group("name"): decode_value(m.group("value")) for m in PROPERTY_RE.finditer(match.group("args"))}
    return PowerEvent(device_id=match.group("path"), member=match.group("member"), properties=properties)


class PowerEventSource:
    """
    Line feed of UPower signals, read from a `gdbus monitor` child process.

    Iterating blocks until the next line arrives and stops when the child exits.
    """

    def __init__(self, service: str = UPOWER_DBUS_SERVICE) -> None:
        self.service = service
        self._process: Optional[Popen] = None

    @property
    def command(self) -> List[str]:
        return ["gdbus", "monitor", "-y", "-d", self.service]

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode if self._process else None

    def __iter__(self) -> Iterator[str]:
        # undecodable bytes become U+FFFD
        self._process = Popen(
            self.command, stdout=PIPE, stderr=DEVNULL, text=True, encoding="utf-8", errors="replace", bufsize=1
        )
        logging.debug("started %s (PID %d)", " ".join(self.command), self._process.pid)
        for line in self._process.stdout:
            yield line.rstrip("\n")
        self._process.wait()

    def events(self) -> Iterator[PowerEvent]:
        for line in self:
            logging.debug("monitor: %s", line)
            event = parse_line(line)
            if event is not None: yield event

    def close(self) -> None:
        if self._process is None or self._process.poll() is not None: return
        self._process.terminate()
        try: self._process.wait(timeout=2)
        except TimeoutExpired: self._process.kill()

    def __enter__(self) -> "PowerEventSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
