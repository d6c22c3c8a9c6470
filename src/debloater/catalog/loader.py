"""Catalog loader — parses the debloat package database into a :class:`Catalog`.

The database is a JSON array of entries::

    {"id": "com.android.bips", "list": "Aosp", "description": "...",
     "dependencies": [], "neededBy": [], "labels": [], "removal": "Recommended"}

Invalid entries are skipped with a warning; an unreadable file yields
``Catalog.empty(error)`` so the List screen can show an empty state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from debloater.core.interfaces.device import CatalogLoaderInterface
from debloater.core.models.catalog import Catalog, PackageMeta

_log = logging.getLogger(__name__)

# Bundled database, next to this module.
DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "uad_lists.json"


class CatalogLoader(CatalogLoaderInterface):
    """Loads the catalog from *path* on every call.

    Args:
        path: JSON database file.  ``None`` uses the bundled ``uad_lists.json``.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_CATALOG_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load_catalog(self) -> Catalog:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            _log.error("Cannot read debloat catalog %s: %s", self._path, exc)
            return Catalog.empty(f"cannot read {self._path.name}: {exc.strerror or exc}")
        except json.JSONDecodeError as exc:
            _log.error("Invalid JSON in debloat catalog %s: %s", self._path, exc)
            return Catalog.empty(f"invalid JSON in {self._path.name} (line {exc.lineno})")
        except UnicodeDecodeError as exc:
            _log.error("Debloat catalog %s is not UTF-8: %s", self._path, exc)
            return Catalog.empty(f"{self._path.name} is not valid UTF-8 (byte {exc.start})")

        if not isinstance(raw, list):
            _log.error("Debloat catalog %s is not a JSON array", self._path)
            return Catalog.empty(f"{self._path.name} is not a list of packages")

        packages: dict[str, PackageMeta] = {}
        skipped = 0
        for index, entry in enumerate(raw):
            try:
                meta = PackageMeta.model_validate(entry)
            except ValidationError as exc:
                skipped += 1
                _log.warning("Skipping invalid catalog entry #%d: %s", index, exc.errors()[0]["msg"])
                continue
            if meta.id in packages:
                _log.debug("Duplicate catalog entry for %s — keeping the first", meta.id)
                continue
            packages[meta.id] = meta

        _log.info(
            "Debloat catalog loaded from %s: %d packages (%d skipped)",
            self._path,
            len(packages),
            skipped,
        )
        return Catalog(packages=packages)
