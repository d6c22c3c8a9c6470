"""Debloat package database loading."""

from debloater.catalog.loader import DEFAULT_CATALOG_PATH, CatalogLoader

__all__ = ["CatalogLoader", "DEFAULT_CATALOG_PATH"]
