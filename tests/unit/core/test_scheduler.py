"""Tests for CommandScheduler: command execution and failure handling."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest

from debloater.core.commands import (
    Command,
    FetchPackageDetails,
    LoadPackages,
    QueryDeviceAndCatalog,
)
from debloater.core.errors import ControllerError
from debloater.core.interfaces.device import CatalogLoaderInterface
from debloater.core.models.catalog import Catalog
from debloater.core.models.device import NO_DEVICE_LABEL
from debloater.core.models.event import (
    Event,
    ListScreenEvent,
    PackageDetailsLoaded,
    PackagesLoaded,
    StartupLoadCompleted,
)
from debloater.core.scheduler import CommandScheduler
from debloater.device.mock.mock_device import MockDevice


class _BrokenLoader(CatalogLoaderInterface):
    def load_catalog(self) -> Catalog:
        raise OSError("disk gone")


class _LabelRaises(MockDevice):
    def get_device_label(self) -> str:
        raise RuntimeError("usb reset")


class _GarbledDevice(MockDevice):
    """Returns values that do not fit the result event models."""

    def list_packages(self):
        return ["not-a-package-model"]

    def get_package_details(self, package_id):
        return "not-details"


class _GarbledLoader(CatalogLoaderInterface):
    def load_catalog(self):
        return "not-a-catalog"


async def _ignore(_event: Event) -> None:
    pass


@dataclass(frozen=True)
class _Bogus(Command):
    pass


@pytest.fixture
def delivered() -> list[Event]:
    return []


@pytest.fixture
def scheduler(device, catalog_loader, delivered) -> CommandScheduler:
    async def deliver(event: Event) -> None:
        delivered.append(event)

    return CommandScheduler(device, catalog_loader, deliver)


class TestExecute:
    def test_query_device_and_catalog(self, scheduler):
        event = scheduler.execute(QueryDeviceAndCatalog())
        assert isinstance(event, StartupLoadCompleted)
        assert event.device_label == "Pixel 6"
        assert event.catalog.ok
        assert len(event.catalog) == 3

    def test_load_packages_with_given_catalog(self, scheduler, device, catalog):
        event = scheduler.execute(LoadPackages(generation=3, catalog=catalog))
        assert isinstance(event, ListScreenEvent)
        inner = event.inner
        assert isinstance(inner, PackagesLoaded)
        assert inner.generation == 3
        assert inner.device_label is None
        assert inner.catalog is catalog
        assert [p.id for p in inner.packages] == [
            "com.android.bips",
            "com.android.systemui",
            "com.google.android.youtube",
        ]
        assert inner.error is None
        assert "get_device_label" not in device.calls

    def test_refresh_requeries_device_and_catalog(self, scheduler, device):
        device.simulate_connect("Pixel 7")
        event = scheduler.execute(LoadPackages(generation=2, refresh_device=True))
        inner = event.inner
        assert inner.device_label == "Pixel 7"
        assert len(inner.catalog) == 3

    def test_disconnected_device_is_data(self, scheduler, device):
        device.simulate_disconnect()
        inner = scheduler.execute(LoadPackages(generation=1, refresh_device=True)).inner
        assert inner.device_label == NO_DEVICE_LABEL
        assert inner.packages == ()
        assert inner.error == "no devices/emulators found"

    def test_broken_catalog_loader_becomes_empty_catalog(self, device):
        async def deliver(_event: Event) -> None:
            pass

        scheduler = CommandScheduler(device, _BrokenLoader(), deliver)
        event = scheduler.execute(QueryDeviceAndCatalog())
        assert len(event.catalog) == 0
        assert event.catalog.error == "disk gone"

    def test_label_query_exception_falls_back(self, catalog_loader):
        async def deliver(_event: Event) -> None:
            pass

        scheduler = CommandScheduler(_LabelRaises(label="x"), catalog_loader, deliver)
        event = scheduler.execute(QueryDeviceAndCatalog())
        assert event.device_label == NO_DEVICE_LABEL

    def test_package_details(self, scheduler):
        inner = scheduler.execute(
            FetchPackageDetails(generation=1, package_id="com.android.bips")
        ).inner
        assert isinstance(inner, PackageDetailsLoaded)
        assert inner.details.id == "com.android.bips"
        assert inner.error is None

    def test_package_details_failure(self, scheduler):
        inner = scheduler.execute(FetchPackageDetails(generation=1, package_id="com.nope")).inner
        assert inner.details is None
        assert inner.error == "Unable to find package: com.nope"

    def test_unknown_command_raises(self, scheduler):
        with pytest.raises(ControllerError):
            scheduler.execute(_Bogus())

    def test_startup_carries_generation(self, scheduler):
        assert scheduler.execute(QueryDeviceAndCatalog(generation=2)).generation == 2


class TestUnexpectedFailures:
    def test_listing_failure_becomes_error_result(self, catalog_loader, catalog):
        scheduler = CommandScheduler(_GarbledDevice(label="x"), catalog_loader, _ignore)
        inner = scheduler.execute(LoadPackages(generation=4, catalog=catalog)).inner
        assert isinstance(inner, PackagesLoaded)
        assert inner.generation == 4
        assert inner.catalog is catalog
        assert inner.packages == ()
        assert "not-a-package-model" in inner.error

    def test_details_failure_becomes_error_result(self, catalog_loader):
        scheduler = CommandScheduler(_GarbledDevice(label="x"), catalog_loader, _ignore)
        inner = scheduler.execute(
            FetchPackageDetails(generation=1, package_id="com.android.bips")
        ).inner
        assert isinstance(inner, PackageDetailsLoaded)
        assert inner.package_id == "com.android.bips"
        assert inner.details is None
        assert inner.error

    def test_startup_failure_becomes_empty_result(self, device):
        scheduler = CommandScheduler(device, _GarbledLoader(), _ignore)
        event = scheduler.execute(QueryDeviceAndCatalog(generation=0))
        assert isinstance(event, StartupLoadCompleted)
        assert event.generation == 0
        assert event.device_label == NO_DEVICE_LABEL
        assert len(event.catalog) == 0
        assert event.catalog.error

    async def test_scheduled_failure_still_delivers(self, catalog_loader, catalog):
        delivered: list[Event] = []

        async def deliver(event: Event) -> None:
            delivered.append(event)

        scheduler = CommandScheduler(_GarbledDevice(label="x"), catalog_loader, deliver)
        await scheduler.schedule(LoadPackages(generation=1, catalog=catalog))
        assert len(delivered) == 1
        assert delivered[0].inner.error



class TestSchedule:
    async def test_schedule_none_is_noop(self, scheduler):
        assert scheduler.schedule(None) is None
        assert scheduler.pending == 0

    async def test_schedule_delivers_one_event(self, scheduler, delivered):
        task = scheduler.schedule(QueryDeviceAndCatalog())
        assert task.get_name() == "command-QueryDeviceAndCatalog"
        await task
        assert len(delivered) == 1
        assert isinstance(delivered[0], StartupLoadCompleted)
        assert scheduler.pending == 0

    async def test_drain_waits_for_all(self, scheduler, delivered, catalog):
        scheduler.schedule(LoadPackages(generation=1, catalog=catalog))
        scheduler.schedule(FetchPackageDetails(generation=1, package_id="com.android.bips"))
        await scheduler.drain()
        assert len(delivered) == 2

    async def test_shutdown_cancels_in_flight(self, scheduler, delivered, device, catalog):
        device.hold()
        scheduler.schedule(LoadPackages(generation=1, catalog=catalog))
        await asyncio.sleep(0.05)
        assert scheduler.pending == 1

        await scheduler.shutdown()
        device.release()

        assert scheduler.pending == 0
        assert delivered == []
