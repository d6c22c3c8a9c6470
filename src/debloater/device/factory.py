"""Device factory — picks the adb backend or the in-memory mock.

Selects adb when the executable is available, Mock in dev mode or when adb is
missing (CI, machines without platform-tools).
"""

from __future__ import annotations

import logging
import shutil

from debloater.core.interfaces.device import DeviceInterface
from debloater.core.models.config import DebloaterConfig

_log = logging.getLogger(__name__)


def _adb_available(adb_path: str) -> bool:
    """Return ``True`` if *adb_path* resolves to an executable."""
    return shutil.which(adb_path) is not None


def create_device(config: DebloaterConfig) -> DeviceInterface:
    """Return the appropriate :class:`DeviceInterface` for this machine.

    * ``dev_mode`` or no adb executable → ``MockDevice.sample()``
    * otherwise → ``AdbDevice``
    """
    adb_path = config.device.adb_path
    if config.system.dev_mode or not _adb_available(adb_path):
        from debloater.device.mock.mock_device import MockDevice

        _log.info(
            "Using MockDevice (dev_mode=%s, adb_available=%s)",
            config.system.dev_mode,
            _adb_available(adb_path),
        )
        return MockDevice.sample()

    from debloater.device.adb.adb_device import AdbDevice

    _log.info("Using AdbDevice (%s)", adb_path)
    return AdbDevice(config.device)
