"""Debloat catalog models: package metadata and the loaded catalog value."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UadList(str, Enum):
    """Source list a package entry belongs to."""

    AOSP = "aosp"
    CARRIER = "carrier"
    GOOGLE = "google"
    MISC = "misc"
    OEM = "oem"
    PENDING = "pending"
    UNLISTED = "unlisted"


class Removal(str, Enum):
    """How safe it is to remove a package, least to most dangerous."""

    RECOMMENDED = "recommended"
    ADVANCED = "advanced"
    EXPERT = "expert"
    UNSAFE = "unsafe"
    UNLISTED = "unlisted"


# Sort rank used by the list screen when ordering by removal level.
REMOVAL_RANK: dict[Removal, int] = {level: rank for rank, level in enumerate(Removal)}


class PackageMeta(BaseModel):
    """One entry of the debloat package database."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    list: UadList = Field(default=UadList.UNLISTED)
    description: str = Field(default="")
    dependencies: tuple[str, ...] = Field(default=())
    needed_by: tuple[str, ...] = Field(default=(), alias="neededBy")
    labels: tuple[str, ...] = Field(default=())
    removal: Removal = Field(default=Removal.UNLISTED)

    @field_validator("list", "removal", mode="before")
    @classmethod
    def _lower(cls, value: object) -> object:
        # The database spells enum members "Aosp", "Recommended", ...
        return value.lower() if isinstance(value, str) else value


class Catalog(BaseModel):
    """Package id → metadata lookup, or an empty marker carrying the load error."""

    model_config = ConfigDict(frozen=True)

    packages: dict[str, PackageMeta] = Field(default_factory=dict)
    error: str | None = Field(default=None)

    @classmethod
    def empty(cls, error: str | None = None) -> Catalog:
        return cls(packages={}, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self, package_id: str) -> PackageMeta | None:
        return self.packages.get(package_id)

    def __len__(self) -> int:
        return len(self.packages)
