"""Abstract interface adapter for querying and controlling wireless hardware.

This module provides an abstract base class for interface adapters, allowing
for different implementations (NetworkManager, in-memory, etc.). All calls
are synchronous and may block; failures are reported by raising one of the
errors in :mod:`wifi_status.wireless.errors`.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from wifi_status.wireless.models import InterfaceState, NetworkEntry


class InterfaceAdapter(ABC):
    """Abstract base class for wireless interface adapters."""

    @abstractmethod
    def list_interfaces(self) -> List[str]:
        """List wireless interface names, in the order the OS reports them.

        Returns:
            Interface names (may be empty)
        """

    @abstractmethod
    def interface_state(self, interface: str) -> InterfaceState:
        """Read the current state of an interface.

        Args:
            interface: Interface name

        Returns:
            Current power, association, SSID and RSSI

        Raises:
            NoInterfaceAvailable: If the interface has disappeared
        """

    @abstractmethod
    def scan(self, interface: str) -> List[NetworkEntry]:
        """Scan for visible networks.

        Args:
            interface: Interface name

        Returns:
            Raw scan results (may contain duplicate SSIDs)

        Raises:
            ScanFailed: If the scan is rejected or fails
        """

    @abstractmethod
    def set_power(self, interface: str, power_on: bool) -> None:
        """Turn the interface radio on or off.

        Args:
            interface: Interface name
            power_on: Desired power state

        Raises:
            PowerChangeFailed: If the power state cannot be changed
        """

    @abstractmethod
    def associate(
        self, interface: str, network: NetworkEntry, credential: Optional[str] = None
    ) -> None:
        """Join a network.

        Args:
            interface: Interface name
            network: Network to join
            credential: Passphrase, or None for open networks

        Raises:
            AssociationFailed: If the network cannot be joined
        """
