"""adb-backed device implementation.

Every call shells out to ``adb`` with a timeout.  Failures are raised as
:class:`~debloater.core.errors.DeviceError`, except in
:meth:`AdbDevice.get_device_label`, which reports the not-connected label
instead so that a missing phone never aborts a load.
"""

from __future__ import annotations

import logging
import re
import subprocess

from debloater.core.errors import DeviceError
from debloater.core.interfaces.device import DeviceInterface
from debloater.core.models.config import DeviceConfig
from debloater.core.models.device import (
    NO_DEVICE_LABEL,
    InstalledPackage,
    PackageDetails,
    PackageState,
)

_log = logging.getLogger(__name__)

_PACKAGE_PREFIX = "package:"

# ``dumpsys package <id>`` fields, first occurrence wins.
_DETAIL_PATTERNS: dict[str, re.Pattern[str]] = {
    "version_name": re.compile(r"versionName=(\S+)"),
    "version_code": re.compile(r"versionCode=(\d+)"),
    "first_install_time": re.compile(r"firstInstallTime=(.+)"),
    "code_path": re.compile(r"codePath=(\S+)"),
}


class AdbDevice(DeviceInterface):
    """Talks to the single phone visible to ``adb``.

    Args:
        config: Device section of the configuration (adb path, timeout, user).
    """

    def __init__(self, config: DeviceConfig) -> None:
        self._adb = config.adb_path
        self._timeout = config.command_timeout_seconds
        self._user_id = config.user_id

    # ------------------------------------------------------------------
    # DeviceInterface implementation
    # ------------------------------------------------------------------

    def get_device_label(self) -> str:
        try:
            brand = self._shell("getprop", "ro.product.brand").strip()
            model = self._shell("getprop", "ro.product.model").strip()
        except DeviceError as exc:
            _log.warning("Device query failed: %s", exc)
            return NO_DEVICE_LABEL
        label = f"{brand} {model}".strip()
        return label or NO_DEVICE_LABEL

    def list_packages(self) -> list[InstalledPackage]:
        every = _parse_package_list(self._pm_list("-u"))
        installed = set(_parse_package_list(self._pm_list()))
        disabled = set(_parse_package_list(self._pm_list("-d")))

        packages = []
        for package_id in every:
            if package_id not in installed:
                state = PackageState.UNINSTALLED
            elif package_id in disabled:
                state = PackageState.DISABLED
            else:
                state = PackageState.ENABLED
            packages.append(InstalledPackage(id=package_id, state=state))
        _log.debug(
            "adb reported %d packages (%d installed, %d disabled)",
            len(packages),
            len(installed),
            len(disabled),
        )
        return packages

    def get_package_details(self, package_id: str) -> PackageDetails:
        output = self._shell("dumpsys", "package", package_id)
        found: dict[str, str] = {}
        for field, pattern in _DETAIL_PATTERNS.items():
            match = pattern.search(output)
            if match:
                found[field] = match.group(1).strip()
        return PackageDetails(id=package_id, **found)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _pm_list(self, *flags: str) -> str:
        args = ["pm", "list", "packages", *flags]
        if self._user_id is not None:
            args += ["--user", str(self._user_id)]
        return self._shell(*args)

    def _shell(self, *args: str) -> str:
        return self._run("shell", *args)

    def _run(self, *args: str) -> str:
        cmd = [self._adb, *args]
        try:
            proc = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise DeviceError(f"adb executable not found: {self._adb}") from exc
        except subprocess.TimeoutExpired as exc:
            raise DeviceError(f"adb timed out after {self._timeout:.0f}s: {' '.join(args)}") from exc

        if proc.returncode != 0:
            message = (proc.stderr or proc.stdout).strip() or f"exit code {proc.returncode}"
            raise DeviceError(message)
        return proc.stdout


def _parse_package_list(output: str) -> list[str]:
    """Turn ``pm list packages`` output into package ids (order preserved)."""
    ids = []
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(_PACKAGE_PREFIX):
            ids.append(line[len(_PACKAGE_PREFIX):])
    return ids
