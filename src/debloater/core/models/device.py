"""Device-side package models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Shown in the navigation bar until a phone has been detected.
NO_DEVICE_LABEL = "No phone connected"


class PackageState(str, Enum):
    """Install state of a package for the current Android user."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    UNINSTALLED = "uninstalled"


class InstalledPackage(BaseModel):
    """A package as reported by ``pm list packages``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    state: PackageState = Field(default=PackageState.ENABLED)


class PackageDetails(BaseModel):
    """Extra information parsed from ``dumpsys package <id>``."""

    model_config = ConfigDict(frozen=True)

    id: str
    version_name: str | None = None
    version_code: str | None = None
    first_install_time: str | None = None
    code_path: str | None = None
