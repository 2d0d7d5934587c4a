"""Data model for wireless status: state, networks and signal mapping."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from wifi_status.wireless.errors import WirelessError

# Lower bound (dBm, inclusive) for each signal level, strongest first
SIGNAL_THRESHOLDS: Tuple[Tuple[int, int], ...] = ((-50, 3), (-60, 2), (-70, 1))


class Band(str, Enum):
    """Frequency band a network operates on."""

    BAND_2_4GHZ = "2.4GHz"
    BAND_5GHZ = "5GHz"
    OTHER = "other"


class AuthorizationStatus(str, Enum):
    """Whether the user has allowed SSID-bearing fields to be read."""

    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    GRANTED = "granted"


class InterfaceCondition(Enum):
    """Position of the selected interface in the poll-driven state machine."""

    UNKNOWN = "unknown"
    NO_INTERFACE = "no_interface"
    POWERED_OFF = "powered_off"
    POWERED_ON_UNASSOCIATED = "powered_on_unassociated"
    ASSOCIATED = "associated"


@dataclass(frozen=True)
class WirelessState:
    """Normalized connection state shown by the status bar."""

    connected: bool = False
    signal_level: int = 0  # 0-3 bars
    ssid: str = ""
    power_on: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "connected": self.connected,
            "signal_level": self.signal_level,
            "ssid": self.ssid,
            "power_on": self.power_on,
        }


@dataclass(frozen=True)
class NetworkEntry:
    """A visible network. The SSID is the identity key."""

    ssid: str
    rssi: int  # dBm
    band: Band = Band.OTHER

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ssid": self.ssid,
            "rssi": self.rssi,
            "band": self.band.value,
        }


@dataclass(frozen=True)
class InterfaceState:
    """Raw reading of a single interface, as reported by an adapter."""

    power_on: bool
    associated: bool
    ssid: Optional[str] = None
    rssi: int = 0


@dataclass(frozen=True)
class MonitorSnapshot:
    """Consistent view of the monitor delivered to subscribers.

    ``version`` increases with every change, so a subscriber that receives
    snapshots from several threads can drop one older than what it has
    already seen. It does not take part in equality.
    """

    state: WirelessState = field(default_factory=WirelessState)
    networks: Tuple[NetworkEntry, ...] = ()
    version: int = field(default=0, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "state": self.state.to_dict(),
            "networks": [n.to_dict() for n in self.networks],
        }


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a user-initiated action (scan, power toggle, connect)."""

    ok: bool
    error: Optional[WirelessError] = None

    @classmethod
    def success(cls) -> "ActionResult":
        """Build a successful result."""
        return cls(ok=True)

    @classmethod
    def failure(cls, error: WirelessError) -> "ActionResult":
        """Build a failed result carrying the adapter error."""
        return cls(ok=False, error=error)

    @property
    def message(self) -> str:
        """Human readable error message, empty on success."""
        return str(self.error) if self.error is not None else ""


def signal_level_for_rssi(rssi: int) -> int:
    """Map an RSSI reading to signal bars.

    Bands are closed-open and checked strongest first:
    [-50, inf) -> 3, [-60, -50) -> 2, [-70, -60) -> 1, below -70 -> 0.

    Args:
        rssi: Signal strength in dBm

    Returns:
        Signal level between 0 and 3
    """
    for lower_bound, level in SIGNAL_THRESHOLDS:
        if rssi >= lower_bound:
            return level
    return 0


def band_for_frequency(frequency_mhz: int) -> Band:
    """Classify a channel center frequency into a band.

    Args:
        frequency_mhz: Frequency in MHz (e.g. 2437, 5180)

    Returns:
        Band for the frequency
    """
    if 2400 <= frequency_mhz <= 2500:
        return Band.BAND_2_4GHZ
    if 4900 <= frequency_mhz <= 5900:
        return Band.BAND_5GHZ
    return Band.OTHER


def normalize_networks(entries: Iterable[NetworkEntry]) -> Tuple[NetworkEntry, ...]:
    """Deduplicate scan results by SSID and rank them by signal.

    Hidden networks (empty SSID) are dropped. For each SSID the entry with
    the strongest RSSI is kept. Ties on RSSI are ordered by SSID.

    Args:
        entries: Raw scan results

    Returns:
        Tuple of unique entries sorted by RSSI, strongest first
    """
    strongest: Dict[str, NetworkEntry] = {}
    for entry in entries:
        if not entry.ssid:
            continue
        current = strongest.get(entry.ssid)
        if current is None or entry.rssi > current.rssi:
            strongest[entry.ssid] = entry

    return tuple(sorted(strongest.values(), key=lambda n: (-n.rssi, n.ssid)))


def disconnected(state: WirelessState, power_on: Optional[bool] = None) -> WirelessState:
    """Return a copy of ``state`` with the connection cleared.

    Args:
        state: State to derive from
        power_on: New power flag, or None to keep the current one

    Returns:
        Disconnected state with no SSID and zero signal
    """
    return replace(
        state,
        connected=False,
        signal_level=0,
        ssid="",
        power_on=state.power_on if power_on is None else power_on,
    )
