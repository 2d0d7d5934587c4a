"""Main entry point for the Wi-Fi status monitor."""

import argparse
import json
import logging
import signal
import sys
import time
from dataclasses import dataclass
from typing import List, NoReturn, Optional

from wifi_status import __version__
from wifi_status.config import ConfigError, ConfigManager
from wifi_status.permission import (
    AuthorizationProvider,
    InMemoryAuthorizationProvider,
    PermissionGate,
    StaticAuthorizationProvider,
)
from wifi_status.presentation import StatusBarPresenter
from wifi_status.wireless import (
    AuthorizationStatus,
    Band,
    InMemoryInterfaceAdapter,
    InterfaceAdapter,
    NetworkEntry,
    NmcliInterfaceAdapter,
    WirelessMonitor,
)

logger = logging.getLogger(__name__)

SAMPLE_NETWORKS = [
    NetworkEntry(ssid="HomeNetwork", rssi=-45, band=Band.BAND_5GHZ),
    NetworkEntry(ssid="HomeNetwork", rssi=-58, band=Band.BAND_2_4GHZ),
    NetworkEntry(ssid="CoffeeShop", rssi=-63, band=Band.BAND_2_4GHZ),
    NetworkEntry(ssid="Neighbor", rssi=-77, band=Band.BAND_2_4GHZ),
]


@dataclass
class Components:
    """Container for the wired-up application components."""

    monitor: WirelessMonitor
    gate: PermissionGate
    presenter: StatusBarPresenter


def setup_logging(debug: bool = False) -> None:
    """Configure logging for the application.

    Args:
        debug: If True, set log level to DEBUG, otherwise INFO
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed command-line arguments
    """
    parser = argparse.ArgumentParser(
        description="Wi-Fi Status - wireless state, network list and power control for status bars"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use a simulated wireless interface instead of NetworkManager",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll and scan once, print the status as JSON and exit",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: built-in settings)",
    )
    return parser.parse_args(argv)


def _load_config(config_path: Optional[str]) -> ConfigManager:
    """Load and validate configuration.

    Args:
        config_path: Path to configuration file, or None for defaults

    Returns:
        Initialized ConfigManager

    Raises:
        SystemExit: If configuration is invalid
    """
    try:
        return ConfigManager(user_config_path=config_path)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)


def _init_adapter(config: ConfigManager, mock_mode: bool) -> InterfaceAdapter:
    """Create the interface adapter.

    Args:
        config: Configuration manager
        mock_mode: If True, use the in-memory adapter

    Returns:
        Interface adapter to poll
    """
    adapter_config = config.get_adapter_config()

    if mock_mode or adapter_config["backend"] == "memory":
        logger.info("  - Using InMemoryInterfaceAdapter (mock mode)")
        adapter = InMemoryInterfaceAdapter()
        adapter.set_visible_networks(SAMPLE_NETWORKS)
        adapter.simulate_association("wlan0", "HomeNetwork", -45)
        return adapter

    if not NmcliInterfaceAdapter.is_available():
        # Polls will find no interface and show a disconnected status
        logger.warning("  - nmcli not found; wireless status will show as disconnected")

    logger.info("  - Using NmcliInterfaceAdapter (NetworkManager)")
    return NmcliInterfaceAdapter(
        command_timeout=adapter_config["command_timeout"],
        connect_timeout=adapter_config["connect_timeout"],
    )


def _init_authorization(config: ConfigManager, mock_mode: bool) -> AuthorizationProvider:
    """Create the SSID authorization provider.

    Args:
        config: Configuration manager
        mock_mode: If True, simulate a user granting access when asked

    Returns:
        Authorization provider
    """
    status = config.get_authorization_status()
    if mock_mode:
        return InMemoryAuthorizationProvider(
            status, decision_on_request=AuthorizationStatus.GRANTED
        )
    return StaticAuthorizationProvider(status)


def build_components(
    adapter: InterfaceAdapter, provider: AuthorizationProvider, config: ConfigManager
) -> Components:
    """Wire the monitor, permission gate and presenter together.

    Args:
        adapter: Interface adapter for the monitor
        provider: Authorization provider for the gate
        config: Configuration manager

    Returns:
        Components ready to start
    """
    gate = PermissionGate(provider)
    monitor = WirelessMonitor(
        adapter,
        config.get_monitor_settings(),
        authorization_status=lambda: gate.status,
    )
    # Authorization changes re-poll at once so SSID visibility follows the decision
    gate.set_callback(lambda _status: monitor.poll())
    presenter = StatusBarPresenter(monitor)
    return Components(monitor=monitor, gate=gate, presenter=presenter)


def _start_web_server(components: Components, config: ConfigManager) -> None:
    """Start the web interface in a background thread.

    Args:
        components: Wired application components
        config: Configuration manager
    """
    # pylint: disable=import-outside-toplevel
    from threading import Thread

    import uvicorn

    from wifi_status.web.app import create_app

    web_app = create_app(presenter=components.presenter, config_manager=config)

    # Start FastAPI in daemon thread
    def run_web_server() -> None:
        uvicorn.run(
            web_app,
            host=config.get("web.host", "127.0.0.1"),
            port=config.get("web.port", 7475),
            log_level="warning",  # Reduce uvicorn logging noise
        )

    web_thread = Thread(target=run_web_server, daemon=True, name="WebServer")
    web_thread.start()

    logger.info(
        "  - Web interface started at http://%s:%d",
        config.get("web.host", "127.0.0.1"),
        config.get("web.port", 7475),
    )


def run_once(components: Components) -> int:
    """Poll and scan once, then print the view as JSON.

    Args:
        components: Wired application components

    Returns:
        Process exit code
    """
    components.monitor.poll()
    result = components.presenter.request_scan()
    if not result.ok:
        logger.warning("Scan failed: %s", result.message)

    print(json.dumps(components.presenter.view.to_dict(), indent=2))
    return 0


def _shutdown(components: Components) -> None:
    """Perform graceful shutdown.

    Args:
        components: Components to stop
    """
    logger.info("Stopping WirelessMonitor...")
    components.presenter.close()
    components.gate.close()
    components.monitor.stop()


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main application entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)

    config = _load_config(args.config)
    if config.is_debug() and not args.debug:
        setup_logging(True)

    logger.info("Wi-Fi Status v%s", __version__)
    if args.mock:
        logger.info("Running in MOCK mode (no wireless hardware required)")

    logger.info("Initializing components...")
    adapter = _init_adapter(config, args.mock)
    provider = _init_authorization(config, args.mock)
    components = build_components(adapter, provider, config)

    if args.once:
        code = run_once(components)
        _shutdown(components)
        sys.exit(code)

    # Set up signal handlers for graceful shutdown
    shutdown_requested = False

    def signal_handler(signum: int, _frame: object) -> None:
        nonlocal shutdown_requested
        if shutdown_requested:
            logger.warning("Force quit!")
            sys.exit(1)
        logger.info("Shutdown requested (signal %d)...", signum)
        shutdown_requested = True

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if config.get("web.enabled", False):
        logger.info("Starting web interface...")
        try:
            _start_web_server(components, config)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to start web interface: %s", e)
            logger.warning("Continuing without web interface...")

    components.monitor.start()
    logger.info("Monitoring wireless status. Press Ctrl+C to stop")

    # Main event loop
    try:
        while not shutdown_requested:
            time.sleep(0.1)
    except KeyboardInterrupt:
        logger.info("Shutting down...")

    _shutdown(components)

    logger.info("Goodbye!")
    sys.exit(0)


if __name__ == "__main__":
    main()
