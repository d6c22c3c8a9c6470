"""Phone access: factory + backends (adb, mock)."""

from debloater.device.factory import create_device

__all__ = ["create_device"]
