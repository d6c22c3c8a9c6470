"""Collaborator interfaces."""

from debloater.core.interfaces.device import CatalogLoaderInterface, DeviceInterface

__all__ = [
    "CatalogLoaderInterface",
    "DeviceInterface",
]
