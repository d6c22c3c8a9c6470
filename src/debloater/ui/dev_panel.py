"""Dev panel — phone simulation controls for development without a device.

Rendered below the app when the device is a :class:`MockDevice`.  Buttons
change the simulated phone and then request a refresh, so the full
command → event → update flow is exercised exactly as with a real phone.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from nicegui import ui

from debloater.core.models.device import InstalledPackage, PackageState
from debloater.core.models.event import Event, RequestRefresh
from debloater.device.mock.mock_device import MockDevice

_log = logging.getLogger(__name__)

# Second simulated phone, with OEM and carrier bloat.
_GALAXY_PACKAGES = (
    InstalledPackage(id="com.samsung.android.bixby.agent"),
    InstalledPackage(id="com.vzw.hss.myverizon"),
    InstalledPackage(id="com.facebook.appmanager", state=PackageState.DISABLED),
    InstalledPackage(id="com.google.android.gms"),
    InstalledPackage(id="com.android.vending"),
)


class DevPanel:
    """Mock-device controls.

    Args:
        device: The mock device to drive.
        dispatch: Coroutine function that enqueues an event on the runtime.
    """

    def __init__(
        self,
        device: MockDevice,
        dispatch: Callable[[Event], Awaitable[None]],
    ) -> None:
        self._device = device
        self._dispatch = dispatch
        self._status_label: ui.label | None = None

    def build(self) -> None:
        """Render the panel inline below the app container."""
        with ui.row().classes("w-full items-center").style(
            "padding: 6px 10px; gap: 8px; background: #262626; border-top: 1px solid #444444;"
        ):
            ui.label("DEV").style("color: #888888; font-size: 12px; font-weight: bold;")
            ui.button("Pixel 6", on_click=self._connect_pixel).props("dense flat")
            ui.button("Galaxy S21", on_click=self._connect_galaxy).props("dense flat")
            ui.button("Unplug", on_click=self._disconnect).props("dense flat")
            ui.button("Offline", on_click=self._fail).props("dense flat color=negative")
            ui.button("Slow adb", on_click=self._toggle_hold).props("dense flat")
            ui.space()
            self._status_label = ui.label(self.status_text()).style("color: #888888;")

    def status_text(self) -> str:
        return "mock device: connected" if self._device.connected else "mock device: unplugged"

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _connect_pixel(self) -> None:
        sample = MockDevice.sample()
        self._device.simulate_connect("google Pixel 6", sample.list_packages())
        await self._refresh()

    async def _connect_galaxy(self) -> None:
        self._device.simulate_connect("samsung SM-G991B", _GALAXY_PACKAGES)
        await self._refresh()

    async def _disconnect(self) -> None:
        self._device.simulate_disconnect()
        await self._refresh()

    async def _fail(self) -> None:
        self._device.simulate_failure("device offline")
        await self._refresh()

    async def _toggle_hold(self) -> None:
        if self._device.held:
            self._device.release()
        else:
            self._device.hold()
        _log.info("Dev panel: adb listing %s", "held" if self._device.held else "released")

    async def _refresh(self) -> None:
        self._update_status()
        await self._dispatch(RequestRefresh())

    def _update_status(self) -> None:
        if self._status_label is None:
            return
        try:
            self._status_label.text = self.status_text()
        except RuntimeError:
            # Client already deleted.
            pass
