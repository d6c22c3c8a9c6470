"""Application and per-screen state models and enumerations.

All state values are frozen; the controller and the screens return updated
copies (``model_copy(update=...)``) instead of mutating in place.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from debloater.core.models.catalog import Catalog, PackageMeta, Removal, UadList
from debloater.core.models.device import (
    NO_DEVICE_LABEL,
    InstalledPackage,
    PackageDetails,
    PackageState,
)


class ScreenId(str, Enum):
    """Top-level screens.  Exactly one is active at a time."""

    LIST = "list"
    ABOUT = "about"
    SETTINGS = "settings"


class SortKey(str, Enum):
    """Ordering of the package list."""

    NAME = "name"
    REMOVAL = "removal"


class ListPhase(str, Enum):
    """What the list screen body currently shows."""

    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Settings screen
# ---------------------------------------------------------------------------

class SettingsState(_Frozen):
    """User preferences applied live to the package list."""

    expert_mode: bool = Field(default=False, description="Show packages marked unsafe")
    show_uninstalled: bool = Field(default=True, description="Show already-removed packages")
    sort_key: SortKey = Field(default=SortKey.NAME)


# ---------------------------------------------------------------------------
# About screen
# ---------------------------------------------------------------------------

class AboutState(_Frozen):
    """Static information shown on the About screen."""

    app_name: str = "Universal Android Debloater"
    version: str = "0.3.0"
    project_url: str = "https://github.com/0x192/universal-android-debloater"
    description: str = (
        "Removes bloatware from non-rooted Android phones over adb. "
        "Packages are listed together with a description and a removal "
        "recommendation taken from the debloat database."
    )


# ---------------------------------------------------------------------------
# List screen
# ---------------------------------------------------------------------------

class PackageRow(_Frozen):
    """An installed package joined with its catalog entry."""

    id: str
    state: PackageState
    meta: PackageMeta

    @classmethod
    def join(cls, package: InstalledPackage, catalog: Catalog) -> PackageRow:
        meta = catalog.get(package.id) or PackageMeta(id=package.id)
        return cls(id=package.id, state=package.state, meta=meta)

    @property
    def removal(self) -> Removal:
        return self.meta.removal

    @property
    def list(self) -> UadList:
        return self.meta.list


class ListState(_Frozen):
    """Working state of the package list.

    ``generation`` is the load generation this state was created for; commands
    issued from this state carry it so late results can be recognised.
    """

    generation: int = 0
    phase: ListPhase = ListPhase.LOADING
    rows: tuple[PackageRow, ...] = ()
    catalog_size: int = 0
    catalog_error: str | None = None
    device_error: str | None = None
    search: str = ""
    list_filter: UadList | None = None
    state_filter: PackageState | None = None
    selected: str | None = None
    details: PackageDetails | None = None
    details_error: str | None = None
    settings: SettingsState = Field(default_factory=SettingsState)


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class AppState(_Frozen):
    """Top-level aggregate owned by the controller.

    All three screen states are always allocated so switching screens never
    loses in-progress edits.
    """

    active_screen: ScreenId = ScreenId.LIST
    list_state: ListState = Field(default_factory=ListState)
    about_state: AboutState = Field(default_factory=AboutState)
    settings_state: SettingsState = Field(default_factory=SettingsState)
    device_label: str = NO_DEVICE_LABEL
    load_generation: int = 0
