"""Wireless interface adapters, data model and status monitor."""

from wifi_status.wireless.adapter import InterfaceAdapter
from wifi_status.wireless.errors import (
    AssociationFailed,
    NetworkNotFound,
    NoInterfaceAvailable,
    PermissionDenied,
    PowerChangeFailed,
    ScanFailed,
    WirelessError,
)
from wifi_status.wireless.in_memory_adapter import InMemoryInterfaceAdapter
from wifi_status.wireless.models import (
    ActionResult,
    AuthorizationStatus,
    Band,
    InterfaceCondition,
    InterfaceState,
    MonitorSnapshot,
    NetworkEntry,
    WirelessState,
    normalize_networks,
    signal_level_for_rssi,
)
from wifi_status.wireless.monitor import MonitorSettings, WirelessMonitor
from wifi_status.wireless.nmcli_adapter import NmcliInterfaceAdapter

__all__ = [
    "ActionResult",
    "AssociationFailed",
    "AuthorizationStatus",
    "Band",
    "InMemoryInterfaceAdapter",
    "InterfaceAdapter",
    "InterfaceCondition",
    "InterfaceState",
    "MonitorSettings",
    "MonitorSnapshot",
    "NetworkEntry",
    "NetworkNotFound",
    "NmcliInterfaceAdapter",
    "NoInterfaceAvailable",
    "PermissionDenied",
    "PowerChangeFailed",
    "ScanFailed",
    "WirelessError",
    "WirelessMonitor",
    "WirelessState",
    "normalize_networks",
    "signal_level_for_rssi",
]
