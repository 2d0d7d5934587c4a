"""Shared pytest fixtures for all tests."""

from typing import Iterator, List

import pytest

from wifi_status.wireless.in_memory_adapter import InMemoryInterfaceAdapter
from wifi_status.wireless.models import Band, MonitorSnapshot, NetworkEntry
from wifi_status.wireless.monitor import MonitorSettings, WirelessMonitor

# Short timings so timer behavior can be observed with brief sleeps
FAST_SETTINGS = MonitorSettings(poll_interval=0.05, reconcile_delay=0.05)


@pytest.fixture
def sample_networks() -> List[NetworkEntry]:
    """Raw scan results with a duplicate SSID."""
    return [
        NetworkEntry(ssid="HomeNetwork", rssi=-45, band=Band.BAND_5GHZ),
        NetworkEntry(ssid="HomeNetwork", rssi=-58, band=Band.BAND_2_4GHZ),
        NetworkEntry(ssid="CoffeeShop", rssi=-63, band=Band.BAND_2_4GHZ),
        NetworkEntry(ssid="Neighbor", rssi=-77, band=Band.BAND_2_4GHZ),
    ]


@pytest.fixture
def adapter(sample_networks: List[NetworkEntry]) -> InMemoryInterfaceAdapter:
    """Provide a powered-on simulated wlan0 with networks in range."""
    in_memory = InMemoryInterfaceAdapter()
    in_memory.set_visible_networks(sample_networks)
    return in_memory


@pytest.fixture
def monitor(adapter: InMemoryInterfaceAdapter) -> Iterator[WirelessMonitor]:
    """Provide a monitor with fast timings, stopped after the test."""
    wireless_monitor = WirelessMonitor(adapter, FAST_SETTINGS)
    yield wireless_monitor
    wireless_monitor.stop()


@pytest.fixture
def snapshots(monitor: WirelessMonitor) -> List[MonitorSnapshot]:
    """Collect every snapshot the monitor publishes."""
    received: List[MonitorSnapshot] = []
    monitor.subscribe(received.append)
    return received
