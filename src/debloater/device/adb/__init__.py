"""adb device backend."""

from debloater.device.adb.adb_device import AdbDevice

__all__ = ["AdbDevice"]
