"""Pydantic models for configuration, catalog, device data, state and events."""
from debloater.core.models.catalog import Catalog, PackageMeta, Removal, UadList
from debloater.core.models.config import DebloaterConfig, DeviceConfig, SystemConfig, WindowConfig
from debloater.core.models.device import NO_DEVICE_LABEL, InstalledPackage, PackageDetails, PackageState
from debloater.core.models.event import Event, ListEvent, ListScreenEvent, SettingsEvent, SettingsScreenEvent
from debloater.core.models.state import AppState, ListState, ScreenId, SettingsState

__all__ = [
    "AppState",
    "Catalog",
    "DebloaterConfig",
    "DeviceConfig",
    "Event",
    "InstalledPackage",
    "ListEvent",
    "ListScreenEvent",
    "ListState",
    "NO_DEVICE_LABEL",
    "PackageDetails",
    "PackageMeta",
    "PackageState",
    "Removal",
    "ScreenId",
    "SettingsEvent",
    "SettingsScreenEvent",
    "SettingsState",
    "SystemConfig",
    "UadList",
    "WindowConfig",
]
