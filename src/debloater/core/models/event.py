"""Pydantic models for every event the controller can receive.

The set is closed: the top-level variants below, plus the List- and
Settings-screen events they forward.  The About screen is display-only and
has no events.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from debloater.core.models.catalog import Catalog, UadList
from debloater.core.models.device import InstalledPackage, PackageDetails, PackageState
from debloater.core.models.state import SettingsState, SortKey


class Event(BaseModel):
    """Base class for top-level controller events."""

    model_config = ConfigDict(frozen=True)


class ListEvent(BaseModel):
    """Base class for List-screen events."""

    model_config = ConfigDict(frozen=True)


class SettingsEvent(BaseModel):
    """Base class for Settings-screen events."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# List screen events
# ---------------------------------------------------------------------------

class LoadResult(ListEvent):
    """A List event produced by a command; tagged with the load generation."""

    generation: int


class PackagesLoaded(LoadResult):
    """Device packages and catalog, ready to be joined into rows."""

    device_label: str | None = Field(
        default=None, description="Fresh device label when the command re-queried the device"
    )
    catalog: Catalog = Field(default_factory=Catalog.empty)
    packages: tuple[InstalledPackage, ...] = ()
    error: str | None = Field(default=None, description="Device-side listing error")


class PackageDetailsLoaded(LoadResult):
    package_id: str
    details: PackageDetails | None = None
    error: str | None = None


class LoadSettings(ListEvent):
    """Current Settings values, pushed to the list on navigation."""

    settings: SettingsState


class SearchChanged(ListEvent):
    text: str = ""


class ListFilterSelected(ListEvent):
    value: UadList | None = None


class StateFilterSelected(ListEvent):
    value: PackageState | None = None


class PackageSelected(ListEvent):
    package_id: str


# ---------------------------------------------------------------------------
# Settings screen events
# ---------------------------------------------------------------------------

class ExpertModeToggled(SettingsEvent):
    enabled: bool


class ShowUninstalledToggled(SettingsEvent):
    enabled: bool


class SortKeySelected(SettingsEvent):
    sort_key: SortKey


# ---------------------------------------------------------------------------
# Top-level events
# ---------------------------------------------------------------------------

class NavigateToAbout(Event):
    pass


class NavigateToSettings(Event):
    pass


class NavigateToList(Event):
    pass


class RequestRefresh(Event):
    """Re-query the device and reload the package catalog."""


class StartupLoadCompleted(Event):
    """Result of the one-off load issued at process start."""

    generation: int = Field(default=0, description="Load generation the startup load was issued for")
    device_label: str
    catalog: Catalog = Field(default_factory=Catalog.empty)


class ListScreenEvent(Event):
    inner: ListEvent


class SettingsScreenEvent(Event):
    inner: SettingsEvent
