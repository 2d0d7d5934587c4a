"""Interface adapter backed by NetworkManager (nmcli)."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from typing import List, Optional

from wifi_status.wireless.adapter import InterfaceAdapter
from wifi_status.wireless.errors import (
    AssociationFailed,
    NoInterfaceAvailable,
    PowerChangeFailed,
    ScanFailed,
    WirelessError,
)
from wifi_status.wireless.models import InterfaceState, NetworkEntry, band_for_frequency

logger = logging.getLogger(__name__)

NMCLI = "nmcli"


def split_terse_line(line: str) -> List[str]:
    """Split an nmcli terse-mode line on unescaped colons.

    nmcli -t escapes literal colons in values as ``\\:``.
    """
    parts = re.split(r"(?<!\\):", line)
    return [p.replace("\\:", ":").replace("\\\\", "\\") for p in parts]


def percent_to_dbm(percent: int) -> int:
    """Convert an nmcli signal percentage (0-100) to approximate dBm.

    NetworkManager derives the percentage as roughly ``2 * (dBm + 100)``;
    this is the inverse, clamped to the 0-100 range.
    """
    percent = max(0, min(100, percent))
    return (percent // 2) - 100


def _parse_int(value: str, default: int = 0) -> int:
    match = re.match(r"\s*(-?\d+)", value)
    return int(match.group(1)) if match else default


class NmcliInterfaceAdapter(InterfaceAdapter):
    """Queries and controls Wi-Fi devices using NetworkManager (nmcli).

    NetworkManager has a single Wi-Fi radio switch, so :meth:`set_power`
    affects every wireless device, not only ``interface``.
    """

    def __init__(self, command_timeout: float = 10.0, connect_timeout: float = 30.0) -> None:
        """Initialize the nmcli adapter.

        Args:
            command_timeout: Seconds before a query or scan command is abandoned
            connect_timeout: Seconds before an association attempt is abandoned
        """
        self._command_timeout = command_timeout
        self._connect_timeout = connect_timeout

    @staticmethod
    def is_available() -> bool:
        """Check whether nmcli is installed.

        Returns:
            True if the nmcli executable is on PATH
        """
        return shutil.which(NMCLI) is not None

    def _run(self, args: List[str], timeout: Optional[float] = None) -> str:
        result = subprocess.run(
            [NMCLI, *args],
            check=True,
            capture_output=True,
            text=True,
            timeout=timeout if timeout is not None else self._command_timeout,
        )
        return result.stdout

    @staticmethod
    def _error_text(e: Exception) -> str:
        # Never echo the command line: it may carry a passphrase
        if isinstance(e, subprocess.CalledProcessError):
            if e.stderr:
                return str(e.stderr).strip()
            return f"nmcli exited with status {e.returncode}"
        if isinstance(e, subprocess.TimeoutExpired):
            return f"nmcli timed out after {e.timeout}s"
        return str(e)

    def list_interfaces(self) -> List[str]:
        """List Wi-Fi devices known to NetworkManager.

        Returns:
            Device names in nmcli order; empty if nmcli cannot be queried
        """
        try:
            output = self._run(["-t", "-f", "DEVICE,TYPE", "device", "status"])
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.warning("Failed to list wireless devices: %s", self._error_text(e))
            return []

        interfaces = []
        for line in output.strip().split("\n"):
            if not line:
                continue
            parts = split_terse_line(line)
            if len(parts) >= 2 and parts[1] == "wifi":
                interfaces.append(parts[0])
        return interfaces

    def interface_state(self, interface: str) -> InterfaceState:
        """Read radio power and the active network of ``interface``."""
        try:
            radio = self._run(["radio", "wifi"]).strip()
            power_on = radio == "enabled"
            if not power_on:
                return InterfaceState(power_on=False, associated=False)

            output = self._run(
                [
                    "-t",
                    "-f",
                    "IN-USE,SSID,SIGNAL",
                    "device",
                    "wifi",
                    "list",
                    "ifname",
                    interface,
                    "--rescan",
                    "no",
                ]
            )
        except subprocess.CalledProcessError as e:
            raise NoInterfaceAvailable(
                f"Failed to read {interface}: {self._error_text(e)}"
            ) from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise WirelessError(f"Failed to read {interface}: {self._error_text(e)}") from e

        for line in output.strip().split("\n"):
            parts = split_terse_line(line)
            if len(parts) < 3 or parts[0].strip() != "*":
                continue
            ssid = parts[1].strip()
            if not ssid or ssid == "--":
                break
            return InterfaceState(
                power_on=True,
                associated=True,
                ssid=ssid,
                rssi=percent_to_dbm(_parse_int(parts[2])),
            )

        return InterfaceState(power_on=True, associated=False)

    def scan(self, interface: str) -> List[NetworkEntry]:
        """Rescan and list networks visible to ``interface``."""
        try:
            subprocess.run(
                [NMCLI, "device", "wifi", "rescan", "ifname", interface],
                check=False,  # Rescan is rate limited; cached results are still useful
                capture_output=True,
                timeout=self._command_timeout,
            )
            output = self._run(
                [
                    "-t",
                    "-f",
                    "SSID,SIGNAL,FREQ",
                    "device",
                    "wifi",
                    "list",
                    "ifname",
                    interface,
                    "--rescan",
                    "no",
                ]
            )
        except subprocess.TimeoutExpired as e:
            logger.error("WiFi scan timeout: %s", self._error_text(e))
            raise ScanFailed("WiFi scan timed out") from e
        except subprocess.CalledProcessError as e:
            logger.error("WiFi scan failed: %s", self._error_text(e))
            raise ScanFailed(f"WiFi scan failed: {self._error_text(e)}") from e
        except OSError as e:
            raise ScanFailed(f"WiFi scan error: {e}") from e

        networks = []
        for line in output.strip().split("\n"):
            if not line:
                continue
            parts = split_terse_line(line)
            if len(parts) < 3:
                continue

            ssid = parts[0].strip()
            # Skip hidden networks
            if not ssid or ssid == "--":
                continue

            networks.append(
                NetworkEntry(
                    ssid=ssid,
                    rssi=percent_to_dbm(_parse_int(parts[1])),
                    band=band_for_frequency(_parse_int(parts[2])),
                )
            )

        logger.debug("nmcli reported %d networks on %s", len(networks), interface)
        return networks

    def set_power(self, interface: str, power_on: bool) -> None:
        """Switch the NetworkManager Wi-Fi radio on or off."""
        state = "on" if power_on else "off"
        try:
            self._run(["radio", "wifi", state])
            logger.info("Wi-Fi radio switched %s (requested for %s)", state, interface)
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.error("Failed to switch Wi-Fi radio %s: %s", state, self._error_text(e))
            raise PowerChangeFailed(
                f"Failed to switch Wi-Fi {state}: {self._error_text(e)}"
            ) from e

    def associate(
        self, interface: str, network: NetworkEntry, credential: Optional[str] = None
    ) -> None:
        """Join ``network`` on ``interface``."""
        cmd = ["device", "wifi", "connect", network.ssid]
        if credential:
            cmd.extend(["password", credential])
        cmd.extend(["ifname", interface])

        try:
            logger.info("Connecting to WiFi network: %s", network.ssid)
            self._run(cmd, timeout=self._connect_timeout)
            logger.info("Successfully connected to %s", network.ssid)
        except subprocess.TimeoutExpired as e:
            logger.error("Connection timeout for %s: %s", network.ssid, self._error_text(e))
            raise AssociationFailed(f"Connection to {network.ssid} timed out") from e
        except subprocess.CalledProcessError as e:
            error_msg = self._error_text(e)
            logger.error("Failed to connect to %s: %s", network.ssid, error_msg)
            raise AssociationFailed(f"Connection failed: {error_msg}") from e
        except OSError as e:
            raise AssociationFailed(f"Connection error: {e}") from e
