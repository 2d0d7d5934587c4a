"""Authorization providers deciding whether network names may be read.

An AuthorizationProvider reports the current status, accepts a
fire-and-forget authorization request and notifies subscribers when the
status changes.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from wifi_status.wireless.models import AuthorizationStatus

logger = logging.getLogger(__name__)

StatusCallback = Callable[[AuthorizationStatus], None]


class AuthorizationProvider(ABC):
    """Abstract base class for authorization providers."""

    def __init__(self) -> None:
        """Initialize subscriber bookkeeping."""
        self._callbacks: List[StatusCallback] = []
        self._callback_lock = threading.Lock()

    @abstractmethod
    def current_status(self) -> AuthorizationStatus:
        """Get the current authorization status."""

    @abstractmethod
    def request_authorization(self) -> None:
        """Ask for authorization. The outcome arrives as a status notification."""

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """Register for status-change notifications.

        Args:
            callback: Receives the new status

        Returns:
            Function that removes the subscription
        """
        with self._callback_lock:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            with self._callback_lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unsubscribe

    def _notify(self, status: AuthorizationStatus) -> None:
        """Deliver a status change to every subscriber (for use by subclasses)."""
        with self._callback_lock:
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback(status)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Error in authorization callback: %s", e)


class StaticAuthorizationProvider(AuthorizationProvider):
    """Provider with a fixed status.

    NetworkManager does not gate network names behind a location permission,
    so on Linux the status comes from configuration: ``granted`` shows SSIDs,
    ``denied`` hides them.
    """

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.GRANTED) -> None:
        """Initialize with a fixed status.

        Args:
            status: Status reported forever
        """
        super().__init__()
        self._status = status

    def current_status(self) -> AuthorizationStatus:
        """Get the configured status."""
        return self._status

    def request_authorization(self) -> None:
        """Nothing to ask: the status is fixed."""
        logger.debug("Static authorization is %s; request ignored", self._status.value)


class InMemoryAuthorizationProvider(AuthorizationProvider):
    """In-memory provider for testing and mock mode.

    Status changes happen through :meth:`simulate_decision`, or automatically
    when a request is made if ``decision_on_request`` is set.
    """

    def __init__(
        self,
        status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED,
        *,
        decision_on_request: Optional[AuthorizationStatus] = None,
        decision_delay: float = 0.0,
    ) -> None:
        """Initialize the in-memory provider.

        Args:
            status: Initial status
            decision_on_request: Status the simulated user picks when asked
            decision_delay: Seconds before that decision is delivered
        """
        super().__init__()
        self._status = status
        self._decision_on_request = decision_on_request
        self._decision_delay = decision_delay
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self.request_count = 0

    def current_status(self) -> AuthorizationStatus:
        """Get the simulated status."""
        with self._lock:
            return self._status

    def request_authorization(self) -> None:
        """Record the request and, if configured, deliver the simulated decision."""
        with self._lock:
            self.request_count += 1
            decision = self._decision_on_request

        logger.info("Authorization requested")
        if decision is None:
            return

        if self._decision_delay > 0:
            with self._lock:
                self._timer = threading.Timer(
                    self._decision_delay, self.simulate_decision, args=(decision,)
                )
                self._timer.daemon = True
                self._timer.start()
        else:
            self.simulate_decision(decision)

    def simulate_decision(self, status: AuthorizationStatus) -> None:
        """Change the status as the OS would and notify subscribers."""
        with self._lock:
            if status == self._status:
                return
            self._status = status
            self._timer = None

        logger.info("Authorization changed to: %s", status.value)
        self._notify(status)
