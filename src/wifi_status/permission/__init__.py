"""SSID authorization: providers and the permission gate."""

from wifi_status.permission.gate import PermissionGate
from wifi_status.permission.provider import (
    AuthorizationProvider,
    InMemoryAuthorizationProvider,
    StaticAuthorizationProvider,
)

__all__ = [
    "AuthorizationProvider",
    "InMemoryAuthorizationProvider",
    "PermissionGate",
    "StaticAuthorizationProvider",
]
