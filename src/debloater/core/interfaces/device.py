"""Collaborator interfaces (ABCs) for the phone and the debloat catalog.

The adb and mock device backends both implement :class:`DeviceInterface`,
ensuring parity between a real phone and development / test environments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from debloater.core.models.catalog import Catalog
from debloater.core.models.device import InstalledPackage, PackageDetails


class DeviceInterface(ABC):
    """The connected Android phone.

    Every method blocks on I/O and is only ever called from a command running
    on a worker thread, never from the update step.
    """

    @abstractmethod
    def get_device_label(self) -> str:
        """Return ``"<brand> <model>"``, or ``NO_DEVICE_LABEL`` when unreachable."""

    @abstractmethod
    def list_packages(self) -> list[InstalledPackage]:
        """Return every package known for the current user, with its state.

        Raises:
            DeviceError: If the device cannot be queried.
        """

    @abstractmethod
    def get_package_details(self, package_id: str) -> PackageDetails:
        """Return version / install information for *package_id*.

        Raises:
            DeviceError: If the device cannot be queried.
        """


class CatalogLoaderInterface(ABC):
    """Source of the debloat package database."""

    @abstractmethod
    def load_catalog(self) -> Catalog:
        """Return the catalog, or ``Catalog.empty(error)``.  Never raises."""
