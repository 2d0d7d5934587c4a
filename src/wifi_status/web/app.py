"""FastAPI application exposing the status-bar view and user intents."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from wifi_status import __version__
from wifi_status.config import ConfigManager
from wifi_status.presentation.presenter import StatusBarPresenter, StatusView
from wifi_status.web.models import ActionResponse, ConnectRequest
from wifi_status.web.websocket import (
    ActionFailedEvent,
    ConnectionManager,
    StatusChangedEvent,
)
from wifi_status.wireless.errors import NetworkNotFound
from wifi_status.wireless.models import ActionResult

logger = logging.getLogger(__name__)


def create_app(  # pylint: disable=too-many-statements
    presenter: StatusBarPresenter,
    config_manager: ConfigManager,
    connection_manager: Optional[ConnectionManager] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        presenter: Presenter whose view is served and whose intents are exposed
        config_manager: ConfigManager instance
        connection_manager: WebSocket manager (a new one is created if None)

    Returns:
        Configured FastAPI application
    """
    manager = connection_manager or ConnectionManager()

    def on_view(view: StatusView) -> None:
        manager.broadcast_threadsafe(StatusChangedEvent(view=view.to_dict()))

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        manager.attach_loop(asyncio.get_running_loop())
        remove_listener = presenter.add_listener(on_view)
        try:
            yield
        finally:
            remove_listener()
            manager.attach_loop(None)

    app = FastAPI(
        title="Wi-Fi Status",
        description="Wireless status and controls for the status bar",
        version=__version__,
        lifespan=lifespan,
    )

    # Store references for API handlers
    app.state.presenter = presenter
    app.state.config_manager = config_manager
    app.state.connection_manager = manager

    def _check(action: str, result: ActionResult) -> Dict[str, Any]:
        if result.ok:
            return ActionResponse(status=presenter.view.to_dict()).model_dump()

        manager.broadcast_threadsafe(ActionFailedEvent(action=action, error=result.message))
        if isinstance(result.error, NetworkNotFound):
            raise HTTPException(status_code=404, detail=result.message)
        raise HTTPException(status_code=502, detail=result.message)

    @app.get("/api/status")
    async def get_status() -> Dict[str, Any]:
        """Get the current status-bar view."""
        view: StatusView = app.state.presenter.view
        return {
            "view": view.to_dict(),
            "debug": app.state.config_manager.is_debug(),
        }

    @app.get("/api/networks")
    async def get_networks() -> Dict[str, List[Dict[str, Any]]]:
        """Get the networks found by the last scan, strongest first."""
        view: StatusView = app.state.presenter.view
        return {"networks": [item.to_dict() for item in view.menu]}

    # Action handlers are sync so the blocking adapter calls run in the threadpool

    @app.post("/api/menu/open")
    def open_menu() -> Dict[str, Any]:
        """Menu opened: rescan networks."""
        return _check("scan", app.state.presenter.open_menu())

    @app.post("/api/power/toggle")
    def toggle_power() -> Dict[str, Any]:
        """Toggle Wi-Fi power."""
        return _check("toggle_power", app.state.presenter.request_toggle())

    @app.post("/api/connect")
    def connect(request: ConnectRequest) -> Dict[str, Any]:
        """Join a network from the current list."""
        result = app.state.presenter.request_connect(request.ssid, request.credential)
        return _check("connect", result)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """Stream status changes to a client, starting with the current view."""
        await manager.connect(websocket)
        await manager.send_event(StatusChangedEvent(view=presenter.view.to_dict()), websocket)
        try:
            while True:
                # Clients only listen; incoming messages are ignored
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            await manager.disconnect(websocket)

    logger.info("FastAPI application created")
    return app
