"""Tests for the NetworkManager-backed interface adapter.

subprocess.run is patched, so these tests do not need nmcli installed.
"""

import subprocess
from typing import Dict, List
from unittest.mock import MagicMock, patch

import pytest

from wifi_status.wireless.errors import (
    AssociationFailed,
    NoInterfaceAvailable,
    PowerChangeFailed,
    ScanFailed,
)
from wifi_status.wireless.models import Band, InterfaceState, NetworkEntry
from wifi_status.wireless.nmcli_adapter import (
    NmcliInterfaceAdapter,
    percent_to_dbm,
    split_terse_line,
)

RUN = "wifi_status.wireless.nmcli_adapter.subprocess.run"


def fake_nmcli(outputs: Dict[str, str]) -> MagicMock:
    """Build a subprocess.run replacement answering by nmcli subcommand.

    Keys are matched against the space-joined argument list; the first key
    contained in the command wins.
    """

    def run(cmd: List[str], **_kwargs: object) -> MagicMock:
        joined = " ".join(cmd)
        for key, stdout in outputs.items():
            if key in joined:
                return MagicMock(stdout=stdout, returncode=0)
        return MagicMock(stdout="", returncode=0)

    return MagicMock(side_effect=run)


# Tests - Parsing Helpers


def test_split_terse_line_plain() -> None:
    """Test splitting a simple terse line."""
    assert split_terse_line("wlan0:wifi") == ["wlan0", "wifi"]


def test_split_terse_line_escaped_colon() -> None:
    """Test escaped colons stay inside the value."""
    assert split_terse_line("Cafe\\:1:80:2437 MHz") == ["Cafe:1", "80", "2437 MHz"]


@pytest.mark.parametrize(
    "percent,dbm",
    [(100, -50), (80, -60), (50, -75), (0, -100), (150, -50), (-5, -100)],
)
def test_percent_to_dbm(percent: int, dbm: int) -> None:
    """Test signal percentage conversion and clamping."""
    assert percent_to_dbm(percent) == dbm


# Tests - Queries


def test_list_interfaces_filters_wifi() -> None:
    """Test only wifi devices are returned."""
    output = "eth0:ethernet\nwlan0:wifi\nlo:loopback\nwlp3s0:wifi\n"
    with patch(RUN, fake_nmcli({"device status": output})):
        assert NmcliInterfaceAdapter().list_interfaces() == ["wlan0", "wlp3s0"]


def test_list_interfaces_when_nmcli_missing() -> None:
    """Test a missing nmcli means no interfaces."""
    with patch(RUN, side_effect=FileNotFoundError("nmcli")):
        assert NmcliInterfaceAdapter().list_interfaces() == []


def test_interface_state_associated() -> None:
    """Test the in-use network is reported with its signal."""
    outputs = {
        "radio wifi": "enabled\n",
        "IN-USE,SSID,SIGNAL": " :Neighbor:40\n*:Home\\:Net:80\n",
    }
    with patch(RUN, fake_nmcli(outputs)):
        state = NmcliInterfaceAdapter().interface_state("wlan0")

    assert state == InterfaceState(power_on=True, associated=True, ssid="Home:Net", rssi=-60)


def test_interface_state_unassociated() -> None:
    """Test a powered radio without an in-use network."""
    outputs = {"radio wifi": "enabled\n", "IN-USE,SSID,SIGNAL": " :Neighbor:40\n"}
    with patch(RUN, fake_nmcli(outputs)):
        state = NmcliInterfaceAdapter().interface_state("wlan0")

    assert state == InterfaceState(power_on=True, associated=False)


def test_interface_state_radio_off() -> None:
    """Test a disabled radio skips the network query."""
    run = fake_nmcli({"radio wifi": "disabled\n"})
    with patch(RUN, run):
        state = NmcliInterfaceAdapter().interface_state("wlan0")

    assert state == InterfaceState(power_on=False, associated=False)
    assert run.call_count == 1


def test_interface_state_device_error() -> None:
    """Test an nmcli error on read maps to NoInterfaceAvailable."""
    error = subprocess.CalledProcessError(10, ["nmcli"], stderr="Error: Device 'wlan0' not found.")
    with patch(RUN, side_effect=error):
        with pytest.raises(NoInterfaceAvailable, match="not found"):
            NmcliInterfaceAdapter().interface_state("wlan0")


# Tests - Actions


def test_scan_parses_networks() -> None:
    """Test scan output is turned into entries with bands."""
    output = (
        "Home:90:5180 MHz\nHome:60:2412 MHz\n--:70:2437 MHz\n"
        ":55:2462 MHz\nCafe\\:1:80:2437 MHz\n"
    )
    run = fake_nmcli({"SSID,SIGNAL,FREQ": output})
    with patch(RUN, run):
        networks = NmcliInterfaceAdapter().scan("wlan0")

    assert networks == [
        NetworkEntry(ssid="Home", rssi=-55, band=Band.BAND_5GHZ),
        NetworkEntry(ssid="Home", rssi=-70, band=Band.BAND_2_4GHZ),
        NetworkEntry(ssid="Cafe:1", rssi=-60, band=Band.BAND_2_4GHZ),
    ]
    rescan_cmd = run.call_args_list[0][0][0]
    assert rescan_cmd == ["nmcli", "device", "wifi", "rescan", "ifname", "wlan0"]


def test_scan_timeout() -> None:
    """Test a timed out scan raises ScanFailed."""
    with patch(RUN, side_effect=subprocess.TimeoutExpired(["nmcli"], 10)):
        with pytest.raises(ScanFailed, match="timed out"):
            NmcliInterfaceAdapter().scan("wlan0")


def test_set_power_commands() -> None:
    """Test the radio switch command for both directions."""
    run = fake_nmcli({})
    with patch(RUN, run):
        adapter = NmcliInterfaceAdapter()
        adapter.set_power("wlan0", False)
        adapter.set_power("wlan0", True)

    assert run.call_args_list[0][0][0] == ["nmcli", "radio", "wifi", "off"]
    assert run.call_args_list[1][0][0] == ["nmcli", "radio", "wifi", "on"]


def test_set_power_failure() -> None:
    """Test a rejected radio switch raises PowerChangeFailed."""
    error = subprocess.CalledProcessError(1, ["nmcli"], stderr="Not authorized")
    with patch(RUN, side_effect=error):
        with pytest.raises(PowerChangeFailed, match="Not authorized"):
            NmcliInterfaceAdapter().set_power("wlan0", True)


def test_associate_command_and_timeout() -> None:
    """Test the connect command and that it uses the connect timeout."""
    run = fake_nmcli({})
    with patch(RUN, run):
        NmcliInterfaceAdapter(connect_timeout=45.0).associate(
            "wlan0", NetworkEntry(ssid="Home", rssi=-50), "secret123"
        )

    args, kwargs = run.call_args
    assert args[0] == [
        "nmcli", "device", "wifi", "connect", "Home", "password", "secret123", "ifname", "wlan0"
    ]
    assert kwargs["timeout"] == 45.0


def test_associate_open_network() -> None:
    """Test no password argument is passed for open networks."""
    run = fake_nmcli({})
    with patch(RUN, run):
        NmcliInterfaceAdapter().associate("wlan0", NetworkEntry(ssid="Cafe", rssi=-60))

    assert "password" not in run.call_args[0][0]


def test_associate_failure_hides_passphrase() -> None:
    """Test association errors never include the passphrase."""
    cmd = ["nmcli", "device", "wifi", "connect", "Home", "password", "secret123"]
    for error in (
        subprocess.CalledProcessError(4, cmd),
        subprocess.TimeoutExpired(cmd, 30),
    ):
        with patch(RUN, side_effect=error):
            with pytest.raises(AssociationFailed) as exc_info:
                NmcliInterfaceAdapter().associate(
                    "wlan0", NetworkEntry(ssid="Home", rssi=-50), "secret123"
                )
        assert "secret123" not in str(exc_info.value)


def test_is_available() -> None:
    """Test nmcli detection uses PATH lookup."""
    with patch("wifi_status.wireless.nmcli_adapter.shutil.which", return_value=None):
        assert NmcliInterfaceAdapter.is_available() is False
    with patch("wifi_status.wireless.nmcli_adapter.shutil.which", return_value="/usr/bin/nmcli"):
        assert NmcliInterfaceAdapter.is_available() is True
