"""Shared pytest fixtures for debloater tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from debloater.catalog.loader import CatalogLoader
from debloater.core.models.catalog import Catalog
from debloater.core.models.config import DebloaterConfig
from debloater.core.runtime import Runtime
from debloater.device.mock.mock_device import MockDevice
from tests.helpers.catalog import CATALOG_ENTRIES, make_catalog, make_packages


@pytest.fixture(scope="session")
def config() -> DebloaterConfig:
    """Session-scoped default config (no file I/O)."""
    return DebloaterConfig()


@pytest.fixture
def catalog() -> Catalog:
    return make_catalog()


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "uad_lists.json"
    path.write_text(json.dumps(CATALOG_ENTRIES), encoding="utf-8")
    return path


@pytest.fixture
def catalog_loader(catalog_file: Path) -> CatalogLoader:
    return CatalogLoader(catalog_file)


@pytest.fixture
def device() -> MockDevice:
    """A connected "Pixel 6" with the three catalog packages installed."""
    return MockDevice(label="Pixel 6", packages=make_packages())


@pytest.fixture
async def runtime(device: MockDevice, catalog_loader: CatalogLoader):
    """Provide a started Runtime that is stopped after the test."""
    rt = Runtime(device, catalog_loader)
    await rt.start()
    yield rt
    device.release()
    await rt.stop()
