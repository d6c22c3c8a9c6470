"""Unit tests for the DevPanel handlers (no NiceGUI client needed)."""

from __future__ import annotations

import pytest

from debloater.core.models.device import NO_DEVICE_LABEL
from debloater.core.models.event import RequestRefresh
from debloater.device.mock.mock_device import MockDevice
from debloater.ui.dev_panel import DevPanel


@pytest.fixture
def dispatched() -> list:
    return []


@pytest.fixture
def panel(dispatched) -> DevPanel:
    async def dispatch(event) -> None:
        dispatched.append(event)

    return DevPanel(MockDevice(), dispatch)


class TestDevPanel:
    def test_status_text(self, panel):
        assert panel.status_text() == "mock device: unplugged"

    async def test_connect_pixel(self, panel, dispatched):
        await panel._connect_pixel()
        assert panel._device.get_device_label() == "google Pixel 6"
        assert len(panel._device.list_packages()) == 7
        assert dispatched == [RequestRefresh()]
        assert panel.status_text() == "mock device: connected"

    async def test_connect_galaxy(self, panel, dispatched):
        await panel._connect_galaxy()
        assert panel._device.get_device_label() == "samsung SM-G991B"
        assert "com.vzw.hss.myverizon" in {p.id for p in panel._device.list_packages()}
        assert dispatched == [RequestRefresh()]

    async def test_disconnect_and_fail(self, panel, dispatched):
        await panel._connect_pixel()
        await panel._fail()
        assert panel._device.get_device_label() == NO_DEVICE_LABEL
        await panel._disconnect()
        assert not panel._device.connected
        assert dispatched == [RequestRefresh()] * 3

    async def test_toggle_hold(self, panel, dispatched):
        await panel._toggle_hold()
        assert panel._device.held
        await panel._toggle_hold()
        assert not panel._device.held
        assert dispatched == []
