"""Tests for the web API and WebSocket endpoint."""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from wifi_status.config import ConfigManager
from wifi_status.presentation import StatusBarPresenter
from wifi_status.web.app import create_app
from wifi_status.wireless.in_memory_adapter import InMemoryInterfaceAdapter
from wifi_status.wireless.monitor import WirelessMonitor


@pytest.fixture
def presenter(
    adapter: InMemoryInterfaceAdapter, monitor: WirelessMonitor
) -> Iterator[StatusBarPresenter]:
    """Create a presenter over a monitor associated with HomeNetwork."""
    adapter.simulate_association("wlan0", "HomeNetwork", -45)
    status_presenter = StatusBarPresenter(monitor)
    monitor.poll()
    yield status_presenter
    status_presenter.close()


@pytest.fixture
def test_client(presenter: StatusBarPresenter) -> Iterator[TestClient]:
    """Create a test client for the FastAPI app."""
    app = create_app(presenter=presenter, config_manager=ConfigManager())
    with TestClient(app) as client:
        yield client


class TestStatusEndpoints:
    """Tests for read-only endpoints."""

    def test_get_status(self, test_client: TestClient) -> None:
        """Test the current view is returned."""
        response = test_client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["debug"] is False
        assert data["view"]["label"] == "HomeNetwork"
        assert data["view"]["signal_level"] == 3
        assert data["view"]["icon"] == "network-wireless-signal-excellent"

    def test_get_networks_before_scan(self, test_client: TestClient) -> None:
        """Test the list is empty until a scan has run."""
        response = test_client.get("/api/networks")

        assert response.status_code == 200
        assert response.json() == {"networks": []}


class TestActionEndpoints:
    """Tests for user intents."""

    def test_open_menu_scans(self, test_client: TestClient) -> None:
        """Test opening the menu populates the network list."""
        response = test_client.post("/api/menu/open")

        assert response.status_code == 200
        assert response.json()["success"] is True
        networks = test_client.get("/api/networks").json()["networks"]
        assert [n["ssid"] for n in networks] == ["HomeNetwork", "CoffeeShop", "Neighbor"]
        assert networks[0]["active"] is True

    def test_open_menu_scan_failure(
        self, test_client: TestClient, adapter: InMemoryInterfaceAdapter
    ) -> None:
        """Test a failed scan is reported as a bad gateway."""
        adapter.fail_next_scan("device busy")

        response = test_client.post("/api/menu/open")

        assert response.status_code == 502
        assert response.json()["detail"] == "device busy"

    def test_toggle_power(self, test_client: TestClient) -> None:
        """Test toggling returns the optimistic view."""
        response = test_client.post("/api/power/toggle")

        assert response.status_code == 200
        status = response.json()["status"]
        assert status["power_on"] is False
        assert status["label"] == "Wi-Fi Off"

    def test_toggle_power_failure(
        self, test_client: TestClient, adapter: InMemoryInterfaceAdapter
    ) -> None:
        """Test a rejected power change."""
        adapter.fail_next_power_change("rfkill blocked")

        response = test_client.post("/api/power/toggle")

        assert response.status_code == 502
        assert "rfkill" in response.json()["detail"]

    def test_connect(self, test_client: TestClient, monitor: WirelessMonitor) -> None:
        """Test joining a listed network."""
        test_client.post("/api/menu/open")

        response = test_client.post("/api/connect", json={"ssid": "CoffeeShop"})
        monitor.poll()

        assert response.status_code == 200
        assert test_client.get("/api/status").json()["view"]["ssid"] == "CoffeeShop"

    def test_connect_unknown_network(self, test_client: TestClient) -> None:
        """Test connecting to an SSID that isn't listed."""
        response = test_client.post("/api/connect", json={"ssid": "Nowhere"})

        assert response.status_code == 404
        assert "Nowhere" in response.json()["detail"]

    def test_connect_wrong_passphrase(
        self, test_client: TestClient, adapter: InMemoryInterfaceAdapter
    ) -> None:
        """Test an association failure is reported as a bad gateway."""
        adapter.set_passphrase("CoffeeShop", "latte")
        test_client.post("/api/menu/open")

        response = test_client.post(
            "/api/connect", json={"ssid": "CoffeeShop", "credential": "mocha"}
        )

        assert response.status_code == 502
        assert "Authentication failed" in response.json()["detail"]

    @pytest.mark.parametrize(
        "body",
        [{}, {"ssid": ""}, {"ssid": "x" * 33}, {"ssid": "Home", "credential": "p" * 129}],
    )
    def test_connect_validation(self, test_client: TestClient, body: dict) -> None:
        """Test invalid request bodies are rejected."""
        response = test_client.post("/api/connect", json=body)

        assert response.status_code == 422


class TestWebSocketEndpoint:
    """Tests for the /ws status stream."""

    def test_initial_status(self, test_client: TestClient) -> None:
        """Test a new client first receives the current view."""
        with test_client.websocket_connect("/ws") as websocket:
            message = websocket.receive_json()

        assert message["type"] == "status_changed"
        assert message["data"]["view"]["label"] == "HomeNetwork"

    def test_status_change_is_pushed(self, test_client: TestClient) -> None:
        """Test a view change after an action is broadcast."""
        with test_client.websocket_connect("/ws") as websocket:
            websocket.receive_json()

            test_client.post("/api/power/toggle")
            message = websocket.receive_json()

        assert message["type"] == "status_changed"
        assert message["data"]["view"]["power_on"] is False
