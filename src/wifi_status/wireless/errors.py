"""Error types raised by interface adapters and reported by the monitor."""


class WirelessError(Exception):
    """Base class for wireless subsystem failures."""


class NoInterfaceAvailable(WirelessError):
    """Raised when no wireless interface is present."""


class ScanFailed(WirelessError):
    """Raised when a network scan is rejected or fails."""


class AssociationFailed(WirelessError):
    """Raised when joining a network fails."""


class PowerChangeFailed(WirelessError):
    """Raised when the interface power state cannot be changed."""


class PermissionDenied(WirelessError):
    """Raised when SSID-bearing fields are withheld by the authorization gate.

    This is a soft failure: the monitor hides the SSID instead of failing
    the poll.
    """


class NetworkNotFound(WirelessError):
    """Raised when an SSID is not present in the current network list."""
