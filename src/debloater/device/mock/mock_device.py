"""In-memory phone for development and testing.

Implements :class:`~debloater.core.interfaces.device.DeviceInterface` with
``simulate_*()`` helpers for the dev panel and tests.  Methods are called from
command worker threads, so state is guarded by a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from debloater.core.errors import DeviceError
from debloater.core.interfaces.device import DeviceInterface
from debloater.core.models.device import (
    NO_DEVICE_LABEL,
    InstalledPackage,
    PackageDetails,
    PackageState,
)

_log = logging.getLogger(__name__)

# Packages present on the simulated phone; most have a bundled catalog entry.
_SAMPLE_PACKAGES: tuple[tuple[str, PackageState], ...] = (
    ("com.android.bips", PackageState.ENABLED),
    ("com.android.chrome", PackageState.ENABLED),
    ("com.android.systemui", PackageState.ENABLED),
    ("com.facebook.appmanager", PackageState.DISABLED),
    ("com.google.android.apps.wellbeing", PackageState.ENABLED),
    ("com.google.android.youtube", PackageState.UNINSTALLED),
    ("com.example.sideloaded", PackageState.ENABLED),
)


class MockDevice(DeviceInterface):
    """Simulated phone.

    Attributes:
        calls: Ordered list of method names invoked (for assertions).
    """

    def __init__(
        self,
        label: str | None = None,
        packages: Iterable[InstalledPackage] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._label = label
        self._packages = list(packages)
        self._failure: str | None = None
        # Cleared by hold(); listing blocks until release().
        self._gate = threading.Event()
        self._gate.set()
        self.calls: list[str] = []

    @classmethod
    def sample(cls) -> MockDevice:
        """A connected Pixel with a handful of packages."""
        return cls(
            label="google Pixel 6",
            packages=[InstalledPackage(id=i, state=s) for i, s in _SAMPLE_PACKAGES],
        )

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._label is not None

    # ------------------------------------------------------------------
    # DeviceInterface implementation
    # ------------------------------------------------------------------

    def get_device_label(self) -> str:
        with self._lock:
            self.calls.append("get_device_label")
            if self._label is None or self._failure:
                return NO_DEVICE_LABEL
            return self._label

    def list_packages(self) -> list[InstalledPackage]:
        self._gate.wait()
        with self._lock:
            self.calls.append("list_packages")
            self._check_reachable()
            return list(self._packages)

    def get_package_details(self, package_id: str) -> PackageDetails:
        with self._lock:
            self.calls.append("get_package_details")
            self._check_reachable()
            if not any(p.id == package_id for p in self._packages):
                raise DeviceError(f"Unable to find package: {package_id}")
            return PackageDetails(
                id=package_id,
                version_name="1.0",
                version_code="1",
                code_path=f"/system/app/{package_id}",
            )

    # ------------------------------------------------------------------
    # Simulation helpers
    # ------------------------------------------------------------------

    def simulate_connect(
        self,
        label: str,
        packages: Iterable[InstalledPackage] | None = None,
    ) -> None:
        """Plug in a phone called *label* (optionally replacing its packages)."""
        with self._lock:
            self._label = label
            if packages is not None:
                self._packages = list(packages)
            self._failure = None
        _log.info("MockDevice: connected %s", label)

    def simulate_disconnect(self) -> None:
        with self._lock:
            self._label = None
        _log.info("MockDevice: disconnected")

    def simulate_failure(self, message: str | None = "device offline") -> None:
        """Make every query fail with *message* (``None`` clears the failure)."""
        with self._lock:
            self._failure = message

    def hold(self) -> None:
        """Block :meth:`list_packages` until :meth:`release` is called."""
        self._gate.clear()

    def release(self) -> None:
        self._gate.set()

    @property
    def held(self) -> bool:
        return not self._gate.is_set()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_reachable(self) -> None:
        if self._failure:
            raise DeviceError(self._failure)
        if self._label is None:
            raise DeviceError("no devices/emulators found")
