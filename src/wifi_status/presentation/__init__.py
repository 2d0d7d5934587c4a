"""Status-bar presentation of the wireless monitor."""

from wifi_status.presentation.presenter import (
    MenuItem,
    StatusBarPresenter,
    StatusView,
    build_view,
    icon_name,
)

__all__ = ["MenuItem", "StatusBarPresenter", "StatusView", "build_view", "icon_name"]
