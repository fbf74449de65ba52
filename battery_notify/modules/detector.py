from dataclasses import dataclass
import logging
from typing import Callable, Dict, Optional

from battery_notify.config.config import Thresholds
from battery_notify.globals import (
    EMOJI_BATTERY_CRITICAL,
    EMOJI_BATTERY_LOW,
    EMOJI_BATTERY_OK,
    EMOJI_CHARGER,
)
from battery_notify.modules.monitor import PowerEvent
from battery_notify.modules.upower import DeviceIdentity
from battery_notify.types import NotifyKind, Zone

UNKNOWN_PERCENT = -1


@dataclass(frozen=True)
class NotificationEvent:
    kind: NotifyKind
    title: str
    body: str
    sound_path: str = ""


@dataclass
class PowerState:
    ac_online: Optional[bool] = None
    battery_percent: int = UNKNOWN_PERCENT


def classify_zone(percent: int, thresholds: Thresholds) -> Zone:
    """
    Classifies a battery percentage, first match wins.

    :param percent: Battery charge in percent
    :param thresholds: Configured thresholds, critical < low < high
    :return: The zone the percentage falls in
    """
    if percent < thresholds.critical: return Zone.CRITICAL
    if percent < thresholds.low: return Zone.LOW
    if percent > thresholds.high: return Zone.HIGH
    return Zone.NORMAL


def entered_zone(percent: int, last_percent: int, thresholds: Thresholds) -> Optional[Zone]:
    """
    Decides whether moving from last_percent to percent enters a zone worth a notification.

    Edges are taken against the previous raw percentage and the threshold of the zone
    being entered, not against the previous zone. Charging from critical into low
    therefore stays silent, while dropping back below a threshold fires every time.

    :param percent: Current battery percentage
    :param last_percent: Previous percentage, UNKNOWN_PERCENT when there is none
    :param thresholds: Configured thresholds
    :return: The entered zone, or None when nothing should be notified
    """
    unknown = last_percent == UNKNOWN_PERCENT
    zone = classify_zone(percent, thresholds)

    if zone == Zone.CRITICAL:
        if unknown or last_percent >= thresholds.critical: return zone
    elif zone == Zone.LOW:
        if unknown or last_percent >= thresholds.low: return zone
    elif zone == Zone.HIGH:
        if unknown or last_percent <= thresholds.high: return zone
    return None


class TransitionDetector:
    """
    Turns the UPower event stream into notifications.

    Holds the remembered AC and battery state and is fed one event at a time from a
    single consumer loop. Every decision is edge-triggered: repeated reports of the
    same AC state are ignored, and a battery notification is only raised when the
    percentage crosses into the critical, low or high zone. Battery changes smaller
    than the configured minimum delta are tracked but never evaluated.

    No method raises. Failures to read the percentage or to notify are logged and
    the event is dropped.
    """

    def __init__(
        self,
        devices: DeviceIdentity,
        thresholds: Thresholds,
        read_percentage: Callable[[str], Optional[int]],
        notify: Callable[[NotificationEvent], None],
        sounds: Optional[Dict[NotifyKind, str]] = None,
    ) -> None:
        self.devices = devices
        self.thresholds = thresholds
        self.read_percentage = read_percentage
        self.notify = notify
        self.sounds: Dict[NotifyKind, str] = sounds or {}
        self.state = PowerState()

    def process(self, event: PowerEvent) -> Optional[NotificationEvent]:
        if event.device_id == self.devices.ac:
            online = event.properties.get("Online")
            if isinstance(online, bool): return self.handle_ac(online)
        elif event.device_id == self.devices.battery:
            try:
                percent = self.read_percentage(self.devices.battery)
            except Exception as e:
                logging.warning("failed to read battery percentage: %s", e)
                percent = None
            return self.handle_battery(percent)
        return None

    def handle_ac(self, online: bool) -> Optional[NotificationEvent]:
        if online == self.state.ac_online:
            # No change in state, no action needed
            return None

        self.state.ac_online = online
        if online:
            event = self._event(NotifyKind.AC_CONNECTED, f"{EMOJI_CHARGER} Charger connected", "AC adapter connected")
        else:
            event = self._event(NotifyKind.AC_DISCONNECTED, f"{EMOJI_CHARGER} Charger disconnected", "AC adapter disconnected")
        return self._emit(event)

    def handle_battery(self, percent: Optional[int]) -> Optional[NotificationEvent]:
        if percent is None:
            logging.debug("battery percentage unavailable, event skipped")
            return None

        last = self.state.battery_percent
        if last != UNKNOWN_PERCENT and abs(last - percent) < self.thresholds.min_delta:
            # ignore tiny fluctuations, but compare the next sample against this one
            self.state.battery_percent = percent
            return None

        zone = entered_zone(percent, last, self.thresholds)
        self.state.battery_percent = percent
        if zone is None: return None
        return self._emit(self._battery_event(zone, percent))

    def _battery_event(self, zone: Zone, percent: int) -> NotificationEvent:
        if zone == Zone.CRITICAL:
            return self._event(
                NotifyKind.BATTERY_CRITICAL,
                f"{EMOJI_BATTERY_CRITICAL} Battery critical: {percent}%",
                "System may suspend or shut down soon",
            )
        if zone == Zone.LOW:
            return self._event(NotifyKind.BATTERY_LOW, f"{EMOJI_BATTERY_LOW} Low battery: {percent}%", "Connect the charger")
        return self._event(NotifyKind.BATTERY_HIGH, f"{EMOJI_BATTERY_OK} Battery high: {percent}%", "You can disconnect the charger")

    def _event(self, kind: NotifyKind, title: str, body: str) -> NotificationEvent:
        return NotificationEvent(kind=kind, title=title, body=body, sound_path=self.sounds.get(kind, ""))

    def _emit(self, event: NotificationEvent) -> NotificationEvent:
        logging.info("%s: %s", event.title, event.body)
        try:
            self.notify(event)
        except Exception as e:
            logging.error("notification sink failed for %s: %s", event.kind.value, e)
        return event
