"""Main page layout — single-page NiceGUI application.

Provides the ``@ui.page('/')`` route with:
* Dark theme
* Base text size from ``config.window.text_size``
* One full-width container the :class:`NiceGUIHost` renders the app into
"""

from __future__ import annotations

import logging
from typing import Callable

from nicegui import context, ui

from debloater.core.models.config import DebloaterConfig
from debloater.ui.host import NiceGUIHost
from debloater.ui.tree import Node

_log = logging.getLogger(__name__)


def page_style(config: DebloaterConfig) -> str:
    """CSS applied to ``<body>``."""
    return (
        "background: #1e1e1e; color: #e0e0e0; margin: 0; padding: 0; "
        f"font-size: {config.window.text_size}px;"
    )


class DebloaterLayout:
    """Builds the main page and binds its container to the host.

    Args:
        host: The host that renders display trees.
        current_tree: Returns the tree of the current state (for new clients).
        config: Application configuration.
    """

    def __init__(
        self,
        host: NiceGUIHost,
        current_tree: Callable[[], Node],
        config: DebloaterConfig,
    ) -> None:
        self._host = host
        self._current_tree = current_tree
        self._config = config

    def setup_page(self) -> None:
        """Register the ``@ui.page('/')`` route."""

        @ui.page("/")
        def index():
            self.build_page()

    def build_page(self) -> None:
        """Construct the page and bind its app container."""
        ui.dark_mode().enable()
        ui.query("body").style(page_style(self._config))

        with ui.column().classes("w-full").style("gap: 0; padding: 0;") as container:
            pass  # Content rendered by NiceGUIHost

        self._host.bind_container(container, self._current_tree())
        context.client.on_disconnect(lambda: self._host.unbind_container(container))
        _log.debug("Main page built")
