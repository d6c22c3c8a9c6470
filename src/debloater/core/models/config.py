"""Configuration Pydantic models: DebloaterConfig, WindowConfig, DeviceConfig, SystemConfig."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WindowConfig(BaseModel):
    """Native window geometry and base text scale."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(default="UadGui", description="Window title")
    width: int = Field(default=1050, gt=0, description="Initial window width in px")
    height: int = Field(default=800, gt=0, description="Initial window height in px")
    resizable: bool = Field(default=True, description="Allow the user to resize the window")
    decorations: bool = Field(default=True, description="Show the OS title bar and borders")
    text_size: int = Field(default=17, gt=0, description="Base text size in px")
    native: bool = Field(
        default=True,
        description="Open a native window (pywebview) instead of a browser tab",
    )


class DeviceConfig(BaseModel):
    """How the connected phone is reached."""

    model_config = ConfigDict(extra="forbid")

    adb_path: str = Field(default="adb", description="adb executable (name on PATH or absolute path)")
    command_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Timeout for a single adb invocation"
    )
    user_id: int | None = Field(
        default=None, description="Android user to list packages for (None = adb default)"
    )


class SystemConfig(BaseModel):
    """Non-device runtime settings."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    catalog_path: str | None = Field(
        default=None,
        description="Debloat package database (JSON). None = bundled uad_lists.json",
    )
    webui_port: int = Field(default=8080, description="NiceGUI listen port")
    dev_mode: bool = Field(
        default=False, description="Use the mock device and show the dev panel"
    )


class DebloaterConfig(BaseModel):
    """Top-level configuration loaded from ``debloater_config.json``."""

    model_config = ConfigDict(extra="forbid")

    window: WindowConfig = Field(default_factory=WindowConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
