"""Permission gate that requests SSID authorization once and reacts to changes."""

import logging
import threading
from typing import Callable, Optional

from wifi_status.permission.provider import AuthorizationProvider
from wifi_status.wireless.models import AuthorizationStatus

logger = logging.getLogger(__name__)


class PermissionGate:
    """Tracks the authorization that decides whether SSIDs are shown.

    On construction the gate subscribes to the provider and, only if the
    status is NOT_DETERMINED, requests authorization. Every later decision is
    passed to ``on_status_changed`` so the owner can re-poll immediately.
    The status only moves forward: once granted or denied it never returns
    to NOT_DETERMINED.
    """

    def __init__(
        self,
        provider: AuthorizationProvider,
        on_status_changed: Optional[Callable[[AuthorizationStatus], None]] = None,
    ) -> None:
        """Initialize the gate and request authorization if undecided.

        Args:
            provider: Authorization collaborator
            on_status_changed: Callback invoked with each new status
        """
        self._provider = provider
        self._on_status_changed = on_status_changed
        self._lock = threading.Lock()

        self._status = provider.current_status()
        self._unsubscribe: Optional[Callable[[], None]] = provider.subscribe(self._on_change)
        logger.info("Location authorization status: %s", self._status.value)

        if self._status == AuthorizationStatus.NOT_DETERMINED:
            logger.info("Requesting location authorization")
            provider.request_authorization()

    @property
    def status(self) -> AuthorizationStatus:
        """Current authorization status."""
        with self._lock:
            return self._status

    def is_granted(self) -> bool:
        """Check whether SSIDs may be shown."""
        return self.status == AuthorizationStatus.GRANTED

    def set_callback(
        self, on_status_changed: Optional[Callable[[AuthorizationStatus], None]]
    ) -> None:
        """Replace the status-change callback.

        Args:
            on_status_changed: Callback invoked with each new status
        """
        with self._lock:
            self._on_status_changed = on_status_changed

    def close(self) -> None:
        """Stop listening for authorization changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, status: AuthorizationStatus) -> None:
        with self._lock:
            if status == AuthorizationStatus.NOT_DETERMINED:
                logger.debug("Ignoring transition back to not_determined")
                return
            if status == self._status:
                return
            old_status = self._status
            self._status = status
            callback = self._on_status_changed

        logger.info("Location authorization changed: %s -> %s", old_status.value, status.value)

        # Call callback outside of lock
        if callback is not None:
            callback(status)
