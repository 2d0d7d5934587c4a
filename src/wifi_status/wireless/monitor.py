"""Wireless status monitor.

This module provides the WirelessMonitor class, which periodically samples
the first wireless interface through an InterfaceAdapter, derives a
normalized WirelessState, keeps a ranked list of visible networks and runs
user-initiated power and association actions. Subscribers are notified
synchronously after every state replacement, outside every lock.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from wifi_status.wireless.adapter import InterfaceAdapter
from wifi_status.wireless.errors import NoInterfaceAvailable, PermissionDenied, WirelessError
from wifi_status.wireless.models import (
    ActionResult,
    AuthorizationStatus,
    InterfaceCondition,
    InterfaceState,
    MonitorSnapshot,
    NetworkEntry,
    WirelessState,
    disconnected,
    normalize_networks,
    signal_level_for_rssi,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[MonitorSnapshot], None]


@dataclass(frozen=True)
class MonitorSettings:
    """Timing settings for the monitor, in seconds."""

    poll_interval: float = 2.0
    reconcile_delay: float = 0.5
    stop_timeout: float = 2.0


class WirelessMonitor:  # pylint: disable=too-many-instance-attributes
    """Polls wireless interface state and coordinates power/association actions.

    All writes to the state and the network list go through a single lock,
    so readers always see a complete snapshot. Only one poll runs at a time;
    a poll requested while another is in flight is skipped.
    """

    def __init__(
        self,
        adapter: InterfaceAdapter,
        settings: Optional[MonitorSettings] = None,
        authorization_status: Optional[Callable[[], AuthorizationStatus]] = None,
    ) -> None:
        """Initialize the wireless monitor.

        Args:
            adapter: Interface adapter used for every hardware query
            settings: Poll interval and reconcile delay
            authorization_status: Returns the current SSID authorization;
                SSIDs are hidden unless it returns GRANTED. None means SSIDs
                are always visible.
        """
        self._adapter = adapter
        self._settings = settings or MonitorSettings()
        self._authorization_status = authorization_status

        self._state = WirelessState()
        self._networks: Tuple[NetworkEntry, ...] = ()
        self._condition = InterfaceCondition.UNKNOWN
        self._interface: Optional[str] = None
        self._version = 0

        self._state_lock = threading.RLock()
        self._poll_guard = threading.Lock()
        self._lifecycle_lock = threading.Lock()

        self._subscribers: List[Subscriber] = []
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._reconcile_timer: Optional[threading.Timer] = None

        logger.debug(
            "WirelessMonitor initialized (poll_interval=%.1fs, reconcile_delay=%.1fs)",
            self._settings.poll_interval,
            self._settings.reconcile_delay,
        )

    # Lifecycle

    def start(self) -> None:
        """Poll once, then keep polling on a background thread."""
        with self._lifecycle_lock:
            if self._running:
                logger.warning("WirelessMonitor already running")
                return

            self._running = True
            # Fresh event per run: a loop left over from a timed-out stop keeps its own
            stop_event = threading.Event()
            self._stop_event = stop_event

        self.poll()

        with self._lifecycle_lock:
            if not self._running:
                return  # stopped during the first poll
            self._thread = threading.Thread(
                target=self._poll_loop, args=(stop_event,), daemon=True, name="WirelessMonitor"
            )
            self._thread.start()

        logger.info("WirelessMonitor started")

    def stop(self) -> None:
        """Stop polling and cancel any pending reconcile poll."""
        with self._lifecycle_lock:
            was_running = self._running
            self._running = False
            self._stop_event.set()
            thread, self._thread = self._thread, None

        self._cancel_reconcile()

        # Wait for thread to finish (outside lock)
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._settings.stop_timeout)
            if thread.is_alive():
                logger.warning("Poll thread still busy after %.1fs", self._settings.stop_timeout)

        if was_running:
            logger.info("WirelessMonitor stopped")

    def is_running(self) -> bool:
        """Check whether periodic polling is active."""
        return self._running

    def _poll_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(timeout=self._settings.poll_interval):
            self.poll()

    # Observation

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback invoked with a snapshot after every change.

        Args:
            callback: Receives the new MonitorSnapshot

        Returns:
            Function that removes the subscription
        """
        with self._state_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._state_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def get_state(self) -> WirelessState:
        """Get the current wireless state."""
        with self._state_lock:
            return self._state

    def get_networks(self) -> Tuple[NetworkEntry, ...]:
        """Get the networks found by the last successful scan, strongest first."""
        with self._state_lock:
            return self._networks

    def get_snapshot(self) -> MonitorSnapshot:
        """Get state and networks as one consistent snapshot."""
        with self._state_lock:
            return MonitorSnapshot(
                state=self._state, networks=self._networks, version=self._version
            )

    def get_condition(self) -> InterfaceCondition:
        """Get the interface condition derived by the last poll."""
        with self._state_lock:
            return self._condition

    # Polling

    def poll(self) -> bool:
        """Sample the wireless interface once and update the state.

        Never raises: adapter failures degrade the state to disconnected.

        Returns:
            True if the poll ran, False if skipped because one was in flight
        """
        if not self._poll_guard.acquire(blocking=False):  # pylint: disable=consider-using-with
            logger.debug("Poll already in flight, skipping")
            return False

        try:
            self._poll_once()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unexpected error during poll: %s", e)
            self._commit(disconnected)
        finally:
            self._poll_guard.release()
        return True

    def _poll_once(self) -> None:
        try:
            interfaces = self._adapter.list_interfaces()
        except WirelessError as e:
            logger.warning("Failed to list interfaces: %s", e)
            interfaces = []

        logger.debug("Available interfaces: %s", interfaces)

        if not interfaces:
            logger.debug("No interface available")
            with self._state_lock:
                self._interface = None
            # Keep the last SSID: a vanished interface is not a disassociation
            self._commit(
                lambda s: replace(s, connected=False, signal_level=0),
                condition=InterfaceCondition.NO_INTERFACE,
            )
            return

        interface = interfaces[0]
        with self._state_lock:
            self._interface = interface

        try:
            reading = self._adapter.interface_state(interface)
        except WirelessError as e:
            logger.warning("Failed to read %s: %s", interface, e)
            self._commit(disconnected, condition=InterfaceCondition.UNKNOWN)
            return

        logger.debug(
            "%s: power=%s associated=%s ssid=%r rssi=%d",
            interface,
            reading.power_on,
            reading.associated,
            reading.ssid,
            reading.rssi,
        )
        self._apply_reading(reading)

    def _apply_reading(self, reading: InterfaceState) -> None:
        ssid = reading.ssid if reading.power_on else None
        if ssid:
            try:
                self._require_ssid_permission()
            except PermissionDenied as e:
                logger.debug("SSID hidden: %s", e)
                ssid = None

        if not reading.power_on:
            condition = InterfaceCondition.POWERED_OFF
        elif ssid:
            condition = InterfaceCondition.ASSOCIATED
        else:
            condition = InterfaceCondition.POWERED_ON_UNASSOCIATED

        if ssid:
            new_state = WirelessState(
                connected=True,
                signal_level=signal_level_for_rssi(reading.rssi),
                ssid=ssid,
                power_on=reading.power_on,
            )
        else:
            new_state = WirelessState(power_on=reading.power_on)

        self._commit(lambda _old: new_state, condition=condition)

    def _require_ssid_permission(self) -> None:
        if self._authorization_status is None:
            return
        status = self._authorization_status()
        if status != AuthorizationStatus.GRANTED:
            raise PermissionDenied(f"Not authorized to read network names ({status.value})")

    # Actions

    def scan_networks(self) -> ActionResult:
        """Scan for networks and replace the network list on success.

        Returns:
            ActionResult; on failure the previous list is kept
        """
        try:
            interface = self._selected_interface()
            raw = self._adapter.scan(interface)
        except WirelessError as e:
            logger.warning("Network scan failed: %s", e)
            return ActionResult.failure(e)

        networks = normalize_networks(raw)
        self._commit(networks=networks)
        logger.info("Scan found %d networks (%d raw results)", len(networks), len(raw))
        return ActionResult.success()

    def toggle_power(self) -> ActionResult:
        """Flip the radio power.

        On success the new power state is shown immediately and a single
        reconcile poll is scheduled to read back what the hardware did.

        Returns:
            ActionResult; on failure the state is unchanged
        """
        target = not self.get_state().power_on

        try:
            interface = self._selected_interface()
            self._adapter.set_power(interface, target)
        except WirelessError as e:
            logger.warning("Failed to turn Wi-Fi %s: %s", "on" if target else "off", e)
            return ActionResult.failure(e)

        logger.info("Wi-Fi power set to %s", "on" if target else "off")
        if target:
            self._commit(lambda s: replace(s, power_on=True))
        else:
            # A powered-off radio is never associated
            self._commit(lambda s: disconnected(s, power_on=False))
        self._schedule_reconcile()
        return ActionResult.success()

    def connect(self, network: NetworkEntry, credential: Optional[str] = None) -> ActionResult:
        """Ask the adapter to join ``network``. Failures are not retried.

        Args:
            network: Network to join
            credential: Passphrase, or None for open networks

        Returns:
            ActionResult carrying the adapter error on failure
        """
        try:
            interface = self._selected_interface()
            self._adapter.associate(interface, network, credential)
        except WirelessError as e:
            logger.warning("Failed to connect to %s: %s", network.ssid, e)
            return ActionResult.failure(e)

        logger.info("Association with %s requested", network.ssid)
        return ActionResult.success()

    def _selected_interface(self) -> str:
        with self._state_lock:
            if self._interface is not None:
                return self._interface

        interfaces = self._adapter.list_interfaces()
        if not interfaces:
            raise NoInterfaceAvailable("No wireless interface available")
        return interfaces[0]

    def _schedule_reconcile(self) -> None:
        with self._lifecycle_lock:
            if self._reconcile_timer is not None:
                self._reconcile_timer.cancel()
            timer = threading.Timer(self._settings.reconcile_delay, self._reconcile)
            timer.daemon = True
            self._reconcile_timer = timer
            timer.start()

    def _cancel_reconcile(self) -> None:
        with self._lifecycle_lock:
            if self._reconcile_timer is not None:
                self._reconcile_timer.cancel()
                self._reconcile_timer = None

    def _reconcile(self) -> None:
        with self._lifecycle_lock:
            self._reconcile_timer = None
        logger.debug("Reconciling power state with hardware")
        self.poll()

    # State replacement

    def _commit(
        self,
        updater: Optional[Callable[[WirelessState], WirelessState]] = None,
        *,
        networks: Optional[Tuple[NetworkEntry, ...]] = None,
        condition: Optional[InterfaceCondition] = None,
    ) -> None:
        """Atomically replace state and/or networks, then notify subscribers.

        Subscribers are called after the lock is released. Commits on other
        threads may deliver concurrently; snapshot versions give their order.
        """
        with self._state_lock:
            old_state, old_networks = self._state, self._networks
            old_condition = self._condition

            if updater is not None:
                self._state = updater(self._state)
            if networks is not None:
                self._networks = networks
            if condition is not None:
                self._condition = condition

            changed = self._state != old_state or self._networks != old_networks
            if changed:
                self._version += 1
            new = MonitorSnapshot(
                state=self._state, networks=self._networks, version=self._version
            )
            subscribers = list(self._subscribers)

        if condition is not None and condition != old_condition:
            logger.info(
                "Interface condition changed: %s -> %s", old_condition.value, condition.value
            )

        if not changed:
            return

        if new.state != old_state:
            logger.debug("Wireless state changed: %s", new.state)

        for callback in subscribers:
            try:
                callback(new)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error("Error in monitor subscriber: %s", e)
