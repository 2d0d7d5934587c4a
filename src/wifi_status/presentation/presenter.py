"""Presentation adapter turning monitor snapshots into a status-bar view.

The presenter only reads monitor state. User intents (toggle power, open
the menu, pick a network) are forwarded to the monitor, which stays the
single writer.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from wifi_status.wireless.errors import NetworkNotFound
from wifi_status.wireless.models import (
    ActionResult,
    MonitorSnapshot,
    WirelessState,
    signal_level_for_rssi,
)
from wifi_status.wireless.monitor import WirelessMonitor

logger = logging.getLogger(__name__)

# freedesktop icon names, indexed by signal level
SIGNAL_ICONS = (
    "network-wireless-signal-none",
    "network-wireless-signal-weak",
    "network-wireless-signal-ok",
    "network-wireless-signal-excellent",
)
ICON_OFFLINE = "network-wireless-offline"
ICON_DISCONNECTED = "network-wireless-disconnected"

ViewListener = Callable[["StatusView"], None]


@dataclass(frozen=True)
class MenuItem:
    """A network entry in the status-bar menu."""

    ssid: str
    rssi: int
    band: str
    signal_level: int
    active: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ssid": self.ssid,
            "rssi": self.rssi,
            "band": self.band,
            "signal_level": self.signal_level,
            "active": self.active,
        }


@dataclass(frozen=True)
class StatusView:  # pylint: disable=too-many-instance-attributes
    """Everything the status bar needs to draw the icon and menu."""

    icon: str
    label: str
    tooltip: str
    connected: bool
    signal_level: int
    ssid: str
    power_on: bool
    power_label: str
    menu: Tuple[MenuItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "icon": self.icon,
            "label": self.label,
            "tooltip": self.tooltip,
            "connected": self.connected,
            "signal_level": self.signal_level,
            "ssid": self.ssid,
            "power_on": self.power_on,
            "power_label": self.power_label,
            "menu": [item.to_dict() for item in self.menu],
        }


def icon_name(state: WirelessState) -> str:
    """Pick the status icon for a wireless state."""
    if not state.power_on:
        return ICON_OFFLINE
    if not state.connected:
        return ICON_DISCONNECTED
    return SIGNAL_ICONS[max(0, min(state.signal_level, len(SIGNAL_ICONS) - 1))]


def build_view(snapshot: MonitorSnapshot) -> StatusView:
    """Render a monitor snapshot into a StatusView.

    Args:
        snapshot: State and networks from the monitor

    Returns:
        View model for the status bar
    """
    state = snapshot.state

    if not state.power_on:
        label = "Wi-Fi Off"
        tooltip = "Wi-Fi is turned off"
    elif state.connected:
        label = state.ssid
        tooltip = f"Connected to {state.ssid} ({state.signal_level}/3 bars)"
    else:
        label = "Not Connected"
        tooltip = "Wi-Fi is on but not connected"

    menu = tuple(
        MenuItem(
            ssid=network.ssid,
            rssi=network.rssi,
            band=network.band.value,
            signal_level=signal_level_for_rssi(network.rssi),
            active=state.connected and network.ssid == state.ssid,
        )
        for network in snapshot.networks
    )

    return StatusView(
        icon=icon_name(state),
        label=label,
        tooltip=tooltip,
        connected=state.connected,
        signal_level=state.signal_level,
        ssid=state.ssid,
        power_on=state.power_on,
        power_label="Turn Wi-Fi Off" if state.power_on else "Turn Wi-Fi On",
        menu=menu,
    )


class StatusBarPresenter:
    """Keeps a StatusView in sync with a WirelessMonitor and relays intents."""

    def __init__(self, monitor: WirelessMonitor) -> None:
        """Initialize the presenter and subscribe to the monitor.

        Args:
            monitor: Monitor to observe and send intents to
        """
        self._monitor = monitor
        self._lock = threading.Lock()
        self._listeners: List[ViewListener] = []
        snapshot = monitor.get_snapshot()
        self._version = snapshot.version
        self._view = build_view(snapshot)
        self._unsubscribe: Optional[Callable[[], None]] = monitor.subscribe(self._on_snapshot)

    @property
    def view(self) -> StatusView:
        """The most recently rendered view."""
        with self._lock:
            return self._view

    def add_listener(self, listener: ViewListener) -> Callable[[], None]:
        """Register a callback invoked with every new view.

        Args:
            listener: Receives the new StatusView

        Returns:
            Function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def close(self) -> None:
        """Stop observing the monitor."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # Intents

    def request_toggle(self) -> ActionResult:
        """Toggle Wi-Fi power."""
        return self._monitor.toggle_power()

    def request_scan(self) -> ActionResult:
        """Refresh the list of visible networks."""
        return self._monitor.scan_networks()

    def open_menu(self) -> ActionResult:
        """Handle the menu being opened: networks are rescanned."""
        logger.debug("Menu opened, scanning for networks")
        return self.request_scan()

    def request_connect(self, ssid: str, credential: Optional[str] = None) -> ActionResult:
        """Join a network from the current list.

        Args:
            ssid: SSID picked in the menu
            credential: Passphrase, or None for open networks

        Returns:
            ActionResult; NetworkNotFound if ``ssid`` is not in the list
        """
        for network in self._monitor.get_networks():
            if network.ssid == ssid:
                return self._monitor.connect(network, credential)

        logger.warning("Cannot connect to %s: not in the network list", ssid)
        return ActionResult.failure(NetworkNotFound(f"Network not found: {ssid}"))

    def _on_snapshot(self, snapshot: MonitorSnapshot) -> None:
        view = build_view(snapshot)
        with self._lock:
            # Commits on other threads can arrive out of order
            if snapshot.version < self._version:
                logger.debug("Dropping stale snapshot v%d", snapshot.version)
                return
            self._version = snapshot.version
            if view == self._view:
                return
            self._view = view
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(view)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Error in view listener: %s", e)
