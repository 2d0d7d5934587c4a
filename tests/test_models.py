"""Tests for the wireless data model and pure helpers."""

import pytest

from wifi_status.wireless.errors import ScanFailed
from wifi_status.wireless.models import (
    ActionResult,
    Band,
    MonitorSnapshot,
    NetworkEntry,
    WirelessState,
    band_for_frequency,
    disconnected,
    normalize_networks,
    signal_level_for_rssi,
)


# Tests - Signal Mapping


@pytest.mark.parametrize(
    "rssi,expected",
    [
        (-30, 3),
        (-50, 3),
        (-51, 2),
        (-52, 2),
        (-60, 2),
        (-61, 1),
        (-70, 1),
        (-71, 0),
        (-100, 0),
    ],
)
def test_signal_level_bands(rssi: int, expected: int) -> None:
    """Test each band edge maps to the right number of bars."""
    assert signal_level_for_rssi(rssi) == expected


def test_signal_level_is_monotonic() -> None:
    """Test a stronger signal never maps to fewer bars."""
    levels = [signal_level_for_rssi(rssi) for rssi in range(-120, 1)]
    assert levels == sorted(levels)
    assert set(levels) == {0, 1, 2, 3}


# Tests - Network Normalization


def test_normalize_collapses_duplicates_to_strongest() -> None:
    """Test duplicate SSIDs keep only the strongest entry."""
    raw = [
        NetworkEntry(ssid="A", rssi=-40),
        NetworkEntry(ssid="A", rssi=-65),
        NetworkEntry(ssid="B", rssi=-55),
    ]

    assert normalize_networks(raw) == (
        NetworkEntry(ssid="A", rssi=-40),
        NetworkEntry(ssid="B", rssi=-55),
    )


def test_normalize_keeps_strongest_regardless_of_order() -> None:
    """Test the strongest duplicate wins even when it comes last."""
    raw = [
        NetworkEntry(ssid="A", rssi=-80, band=Band.BAND_2_4GHZ),
        NetworkEntry(ssid="A", rssi=-42, band=Band.BAND_5GHZ),
    ]

    result = normalize_networks(raw)

    assert result == (NetworkEntry(ssid="A", rssi=-42, band=Band.BAND_5GHZ),)


def test_normalize_sorts_descending_and_drops_hidden() -> None:
    """Test output is sorted by RSSI and hidden networks are removed."""
    raw = [
        NetworkEntry(ssid="weak", rssi=-85),
        NetworkEntry(ssid="", rssi=-20),
        NetworkEntry(ssid="strong", rssi=-35),
        NetworkEntry(ssid="mid", rssi=-60),
    ]

    result = normalize_networks(raw)

    assert [n.ssid for n in result] == ["strong", "mid", "weak"]
    assert len({n.ssid for n in result}) == len(result)


def test_normalize_empty() -> None:
    """Test an empty scan normalizes to an empty tuple."""
    assert normalize_networks([]) == ()


# Tests - Bands


@pytest.mark.parametrize(
    "frequency,band",
    [
        (2412, Band.BAND_2_4GHZ),
        (2484, Band.BAND_2_4GHZ),
        (5180, Band.BAND_5GHZ),
        (5825, Band.BAND_5GHZ),
        (5955, Band.OTHER),
        (0, Band.OTHER),
    ],
)
def test_band_for_frequency(frequency: int, band: Band) -> None:
    """Test frequencies are classified into bands."""
    assert band_for_frequency(frequency) == band


# Tests - State Helpers


def test_default_state_is_disconnected() -> None:
    """Test the initial state shows nothing."""
    state = WirelessState()

    assert state.connected is False
    assert state.signal_level == 0
    assert state.ssid == ""
    assert state.power_on is False


def test_disconnected_clears_connection_fields() -> None:
    """Test disconnected() resets ssid and signal but keeps power."""
    state = WirelessState(connected=True, signal_level=3, ssid="Home", power_on=True)

    assert disconnected(state) == WirelessState(power_on=True)
    assert disconnected(state, power_on=False) == WirelessState(power_on=False)


def test_action_result() -> None:
    """Test success and failure results."""
    error = ScanFailed("busy")

    assert ActionResult.success().ok
    assert ActionResult.success().message == ""
    failed = ActionResult.failure(error)
    assert not failed.ok
    assert failed.error is error
    assert failed.message == "busy"


def test_snapshot_to_dict() -> None:
    """Test snapshot serialization."""
    snapshot = MonitorSnapshot(
        state=WirelessState(connected=True, signal_level=2, ssid="Home", power_on=True),
        networks=(NetworkEntry(ssid="Home", rssi=-55, band=Band.BAND_5GHZ),),
    )

    assert snapshot.to_dict() == {
        "state": {"connected": True, "signal_level": 2, "ssid": "Home", "power_on": True},
        "networks": [{"ssid": "Home", "rssi": -55, "band": "5GHz"}],
    }
