"""In-memory interface adapter implementation for testing.

This module provides a simulated wireless interface that behaves like real
hardware without requiring a wireless card or NetworkManager.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

from wifi_status.wireless.adapter import InterfaceAdapter
from wifi_status.wireless.errors import (
    AssociationFailed,
    NoInterfaceAvailable,
    PowerChangeFailed,
    ScanFailed,
)
from wifi_status.wireless.models import InterfaceState, NetworkEntry

logger = logging.getLogger(__name__)


class InMemoryInterfaceAdapter(InterfaceAdapter):  # pylint: disable=too-many-instance-attributes
    """In-memory adapter for testing without wireless hardware.

    Keeps one simulated radio per interface name. Networks visible to scans
    are set with :meth:`set_visible_networks`; failures can be injected with
    the ``fail_next_*`` helpers.
    """

    def __init__(
        self,
        interfaces: Optional[List[str]] = None,
        *,
        power_on: bool = True,
        read_delay: float = 0.0,
        apply_power_changes: bool = True,
    ) -> None:
        """Initialize the in-memory adapter.

        Args:
            interfaces: Interface names to simulate (default: ["wlan0"])
            power_on: Initial radio power for every interface
            read_delay: Simulated blocking time of interface_state (seconds)
            apply_power_changes: If False, set_power succeeds but the radio
                keeps its old state (hardware that ignores the request)
        """
        names = ["wlan0"] if interfaces is None else list(interfaces)
        self._interfaces: List[str] = names
        self._power: Dict[str, bool] = {name: power_on for name in names}
        self._associated: Dict[str, Optional[NetworkEntry]] = {name: None for name in names}
        self._visible: List[NetworkEntry] = []
        self._passphrases: Dict[str, str] = {}
        self._read_delay = read_delay
        self._apply_power_changes = apply_power_changes
        self._scan_error: Optional[str] = None
        self._power_error: Optional[str] = None
        self._associate_error: Optional[str] = None
        self._lock = threading.RLock()

        self.read_count = 0
        self.scan_count = 0
        self.set_power_calls: List[bool] = []

    # Adapter contract

    def list_interfaces(self) -> List[str]:
        """List simulated interfaces."""
        with self._lock:
            return list(self._interfaces)

    def interface_state(self, interface: str) -> InterfaceState:
        """Read the simulated interface state."""
        if self._read_delay > 0:
            time.sleep(self._read_delay)

        with self._lock:
            self._require(interface)
            self.read_count += 1
            power_on = self._power[interface]
            network = self._associated[interface] if power_on else None

            if network is None:
                return InterfaceState(power_on=power_on, associated=False)
            return InterfaceState(
                power_on=power_on, associated=True, ssid=network.ssid, rssi=network.rssi
            )

    def scan(self, interface: str) -> List[NetworkEntry]:
        """Return the visible networks, or fail if a failure was injected."""
        with self._lock:
            if interface not in self._interfaces:
                raise ScanFailed(f"Interface not found: {interface}")
            if self._scan_error is not None:
                message, self._scan_error = self._scan_error, None
                raise ScanFailed(message)
            if not self._power[interface]:
                raise ScanFailed(f"Interface {interface} is powered off")

            self.scan_count += 1
            logger.debug("Simulated scan on %s: %d results", interface, len(self._visible))
            return list(self._visible)

    def set_power(self, interface: str, power_on: bool) -> None:
        """Change the simulated radio power."""
        with self._lock:
            if interface not in self._interfaces:
                raise PowerChangeFailed(f"Interface not found: {interface}")
            if self._power_error is not None:
                message, self._power_error = self._power_error, None
                raise PowerChangeFailed(message)

            self.set_power_calls.append(power_on)
            if self._apply_power_changes:
                self._power[interface] = power_on
                if not power_on:
                    self._associated[interface] = None
            logger.info("Simulated power %s on %s", "on" if power_on else "off", interface)

    def associate(
        self, interface: str, network: NetworkEntry, credential: Optional[str] = None
    ) -> None:
        """Join a simulated network."""
        with self._lock:
            if interface not in self._interfaces:
                raise AssociationFailed(f"Interface not found: {interface}")
            if self._associate_error is not None:
                message, self._associate_error = self._associate_error, None
                raise AssociationFailed(message)
            if not self._power[interface]:
                raise AssociationFailed(f"Interface {interface} is powered off")

            visible = [n for n in self._visible if n.ssid == network.ssid]
            if not visible:
                raise AssociationFailed(f"Network not in range: {network.ssid}")

            expected = self._passphrases.get(network.ssid)
            if expected is not None and credential != expected:
                raise AssociationFailed(f"Authentication failed for {network.ssid}")

            self._associated[interface] = max(visible, key=lambda n: n.rssi)
            logger.info("Simulated association with %s on %s", network.ssid, interface)

    # Simulation helpers

    def set_interfaces(self, interfaces: List[str]) -> None:
        """Replace the set of simulated interfaces (e.g. hot-unplug)."""
        with self._lock:
            self._interfaces = list(interfaces)
            for name in interfaces:
                self._power.setdefault(name, True)
                self._associated.setdefault(name, None)

    def set_visible_networks(self, networks: List[NetworkEntry]) -> None:
        """Set the raw results returned by subsequent scans."""
        with self._lock:
            self._visible = list(networks)

    def set_passphrase(self, ssid: str, passphrase: str) -> None:
        """Require a passphrase to join ``ssid``."""
        with self._lock:
            self._passphrases[ssid] = passphrase

    def simulate_association(self, interface: str, ssid: str, rssi: int) -> None:
        """Put an interface on a network without going through associate()."""
        with self._lock:
            self._require(interface)
            self._associated[interface] = NetworkEntry(ssid=ssid, rssi=rssi)

    def simulate_disassociation(self, interface: str) -> None:
        """Drop the current association of an interface."""
        with self._lock:
            self._require(interface)
            self._associated[interface] = None

    def simulate_power(self, interface: str, power_on: bool) -> None:
        """Flip the radio power from outside (e.g. a hardware switch)."""
        with self._lock:
            self._require(interface)
            self._power[interface] = power_on
            if not power_on:
                self._associated[interface] = None

    def fail_next_scan(self, message: str = "Scan rejected") -> None:
        """Make the next scan raise ScanFailed."""
        with self._lock:
            self._scan_error = message

    def fail_next_power_change(self, message: str = "Power change rejected") -> None:
        """Make the next set_power raise PowerChangeFailed."""
        with self._lock:
            self._power_error = message

    def fail_next_association(self, message: str = "Association rejected") -> None:
        """Make the next associate raise AssociationFailed."""
        with self._lock:
            self._associate_error = message

    def _require(self, interface: str) -> None:
        if interface not in self._interfaces:
            raise NoInterfaceAvailable(f"Interface not found: {interface}")
