"""Command scheduler — runs commands off the control loop.

Each scheduled :class:`Command` runs in the loop's default thread-pool
executor (device queries and catalog parsing block on I/O).  When the work
finishes, exactly one event is handed to ``deliver`` on the event loop.

Key behaviours:
* Device and catalog failures become data in the result event, and so does
  any other exception raised while running a command; a command never ends
  without delivering.
* Two commands are not ordered relative to each other; each delivers once.
* ``shutdown()`` cancels whatever is still in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from debloater.core.commands import (
    Command,
    FetchPackageDetails,
    LoadPackages,
    QueryDeviceAndCatalog,
)
from debloater.core.errors import ControllerError, DeviceError
from debloater.core.interfaces.device import CatalogLoaderInterface, DeviceInterface
from debloater.core.models.catalog import Catalog
from debloater.core.models.device import NO_DEVICE_LABEL, InstalledPackage
from debloater.core.models.event import (
    Event,
    ListScreenEvent,
    PackageDetailsLoaded,
    PackagesLoaded,
    StartupLoadCompleted,
)
from debloater.log_config.logger import ContextualLogger

_log = logging.getLogger(__name__)

Deliver = Callable[[Event], Awaitable[None]]


class CommandScheduler:
    """Executes commands against the device and catalog collaborators.

    Args:
        device: The phone (adb or mock).
        catalog_loader: Source of the debloat catalog.
        deliver: Coroutine function that enqueues a result event.
    """

    def __init__(
        self,
        device: DeviceInterface,
        catalog_loader: CatalogLoaderInterface,
        deliver: Deliver,
    ) -> None:
        self._device = device
        self._catalog_loader = catalog_loader
        self._deliver = deliver
        self._tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pending(self) -> int:
        """Number of commands still in flight."""
        return len(self._tasks)

    def schedule(self, command: Command | None) -> asyncio.Task[None] | None:
        """Start *command* on a worker thread.  Must be called on the event loop."""
        if command is None:
            return None
        task = asyncio.get_running_loop().create_task(
            self._run(command), name=f"command-{command.name}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every in-flight command has delivered its event."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight commands (their worker threads finish unobserved)."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()

    def execute(self, command: Command) -> Event:
        """Run *command* synchronously and return its single result event.

        Blocking; called on a worker thread by :meth:`schedule`.  Any failure
        other than an unknown command is turned into the command's result
        event with the error text.
        """
        log = ContextualLogger(
            _log, command=command.name, generation=getattr(command, "generation", "-")
        )
        log.debug("Running")
        try:
            return self._execute(command, log)
        except ControllerError:
            raise
        except Exception as exc:
            log.exception("Command failed")
            return self._failure_event(command, str(exc))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _execute(self, command: Command, log: ContextualLogger) -> Event:
        if isinstance(command, QueryDeviceAndCatalog):
            return StartupLoadCompleted(
                generation=command.generation,
                device_label=self._query_label(log),
                catalog=self._load_catalog(log),
            )

        if isinstance(command, LoadPackages):
            label = self._query_label(log) if command.refresh_device else None
            catalog = command.catalog if command.catalog is not None else self._load_catalog(log)
            packages, error = self._list_packages(log)
            return ListScreenEvent(
                inner=PackagesLoaded(
                    generation=command.generation,
                    device_label=label,
                    catalog=catalog,
                    packages=tuple(packages),
                    error=error,
                )
            )

        if isinstance(command, FetchPackageDetails):
            log = log.bind(package=command.package_id)
            details, error = None, None
            try:
                details = self._device.get_package_details(command.package_id)
            except DeviceError as exc:
                log.warning("Package details unavailable: %s", exc)
                error = str(exc)
            except Exception as exc:
                log.exception("Package details query raised")
                error = str(exc)
            return ListScreenEvent(
                inner=PackageDetailsLoaded(
                    generation=command.generation,
                    package_id=command.package_id,
                    details=details,
                    error=error,
                )
            )

        raise ControllerError(f"Unknown command: {command!r}")

    @staticmethod
    def _failure_event(command: Command, error: str) -> Event:
        if isinstance(command, QueryDeviceAndCatalog):
            return StartupLoadCompleted(
                generation=command.generation,
                device_label=NO_DEVICE_LABEL,
                catalog=Catalog.empty(error),
            )
        if isinstance(command, LoadPackages):
            return ListScreenEvent(
                inner=PackagesLoaded(
                    generation=command.generation,
                    catalog=command.catalog if command.catalog is not None else Catalog.empty(),
                    error=error,
                )
            )
        if isinstance(command, FetchPackageDetails):
            return ListScreenEvent(
                inner=PackageDetailsLoaded(
                    generation=command.generation,
                    package_id=command.package_id,
                    error=error,
                )
            )
        raise ControllerError(f"Unknown command: {command!r}")

    async def _run(self, command: Command) -> None:
        loop = asyncio.get_running_loop()
        event = await loop.run_in_executor(None, self.execute, command)
        await self._deliver(event)

    def _query_label(self, log: ContextualLogger) -> str:
        try:
            return self._device.get_device_label()
        except Exception:
            log.exception("Device label query failed")
            return NO_DEVICE_LABEL

    def _load_catalog(self, log: ContextualLogger) -> Catalog:
        try:
            return self._catalog_loader.load_catalog()
        except Exception as exc:
            log.exception("Catalog loader raised")
            return Catalog.empty(str(exc))

    def _list_packages(self, log: ContextualLogger) -> tuple[list[InstalledPackage], str | None]:
        try:
            return self._device.list_packages(), None
        except DeviceError as exc:
            log.warning("Cannot list packages: %s", exc)
            return [], str(exc)
        except Exception as exc:
            log.exception("Package listing raised")
            return [], str(exc)
