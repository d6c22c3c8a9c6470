"""Command descriptions returned by the update step.

A command only *describes* asynchronous work.  :class:`CommandScheduler`
executes it off the control loop and feeds exactly one resulting event back.
"""

from __future__ import annotations

from dataclasses import dataclass

from debloater.core.models.catalog import Catalog


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class QueryDeviceAndCatalog(Command):
    """Startup load: device label + catalog → ``StartupLoadCompleted``.

    Args:
        generation: Load generation at the time the startup load was issued.
    """

    generation: int = 0



@dataclass(frozen=True)
class LoadPackages(Command):
    """List device packages and join them with the catalog.

    Args:
        generation: Load generation the result belongs to.
        catalog: Already-loaded catalog; loaded again when ``None``.
        refresh_device: Re-query the device label as part of the load.
    """

    generation: int
    catalog: Catalog | None = None
    refresh_device: bool = False


@dataclass(frozen=True)
class FetchPackageDetails(Command):
    """Read ``dumpsys`` details for one package."""

    generation: int
    package_id: str
