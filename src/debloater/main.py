"""Debloater — application entry point (NiceGUI composition root).

Wires together: Config → Device → CatalogLoader → Runtime → UI.
NiceGUI owns the event loop; ``app.on_startup`` / ``app.on_shutdown``
handle lifecycle.  In native mode closing the window ends the process.
"""

from __future__ import annotations

import logging

from nicegui import app, ui

from debloater.catalog.loader import CatalogLoader
from debloater.config.config_manager import load_config
from debloater.core.runtime import Runtime
from debloater.device.factory import create_device
from debloater.log_config.logger import setup_logging
from debloater.ui.host import NiceGUIHost
from debloater.ui.layout import DebloaterLayout

_log = logging.getLogger(__name__)


def main() -> None:
    """Synchronous entry point — bootstraps and starts NiceGUI."""

    setup_logging()

    # 1. Load configuration, then re-apply logging with its settings
    config = load_config()
    setup_logging(config.system.log_level, config.system.log_dir)
    _log.info("Starting debloater")

    # 2. Collaborators (mock device in dev mode or without adb)
    device = create_device(config)
    catalog_loader = CatalogLoader(config.system.catalog_path)

    # 3. Controller loop
    def on_fatal(exc: BaseException) -> None:
        _log.critical("Shutting down after controller failure: %s", exc)
        app.shutdown()

    runtime = Runtime(device, catalog_loader, on_fatal=on_fatal)

    # 4. UI host + page
    host = NiceGUIHost(dispatch=runtime.dispatch)
    runtime.subscribe(host.show)
    layout = DebloaterLayout(host=host, current_tree=lambda: runtime.tree, config=config)

    from debloater.device.mock.mock_device import MockDevice

    if isinstance(device, MockDevice):
        from debloater.ui.dev_panel import DevPanel

        dev_panel = DevPanel(device=device, dispatch=runtime.dispatch)

        @ui.page("/")
        def _index_with_dev():
            layout.build_page()
            dev_panel.build()

    else:
        layout.setup_page()

    # 5. Lifecycle hooks
    async def on_startup() -> None:
        _log.info("NiceGUI startup — starting controller")
        await runtime.start()

    async def on_shutdown() -> None:
        _log.info("NiceGUI shutdown — stopping controller")
        await runtime.stop()

    app.on_startup(on_startup)
    app.on_shutdown(on_shutdown)

    # 6. Window
    window = config.window
    if window.native:
        app.native.window_args["resizable"] = window.resizable

    ui.run(
        title=window.title,
        port=config.system.webui_port,
        native=window.native,
        window_size=(window.width, window.height) if window.native else None,
        frameless=not window.decorations,
        dark=True,
        reload=False,
        show=not window.native,
    )


if __name__ == "__main__":
    main()
