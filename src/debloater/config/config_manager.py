"""Config manager: read ``debloater_config.json``, apply ``DEBLOATER_*`` env
overrides, validate into a :class:`DebloaterConfig`.

Nothing is written back; preferences changed in the Settings screen only
last for the session.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from debloater.core.models.config import DebloaterConfig

_log = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "debloater_config.json"

CONFIG_FILE_ENV = "DEBLOATER_CONFIG_FILE"

# env var -> (section, field, type)
_ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "DEBLOATER_LOG_LEVEL": ("system", "log_level", str),
    "DEBLOATER_DEV_MODE": ("system", "dev_mode", bool),
    "DEBLOATER_CATALOG_PATH": ("system", "catalog_path", str),
    "DEBLOATER_WEBUI_PORT": ("system", "webui_port", int),
    "DEBLOATER_ADB_PATH": ("device", "adb_path", str),
    "DEBLOATER_NATIVE": ("window", "native", bool),
}

_TRUE = ("1", "true", "yes", "on")


def load_config(config_path: Path | str | None = None) -> DebloaterConfig:
    """Load and validate the configuration.

    Args:
        config_path: Explicit file.  Defaults to ``$DEBLOATER_CONFIG_FILE``,
            then the ``debloater_config.json`` shipped with this package.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If the file contains unknown or invalid keys.
    """
    path = _resolve_config_path(config_path)
    raw: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    applied = apply_env_overrides(raw, os.environ)
    config = DebloaterConfig.model_validate(raw)
    _log.info(
        "Config loaded from %s%s",
        path,
        f" (env overrides: {', '.join(applied)})" if applied else "",
    )
    return config


def apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> list[str]:
    """Write env overrides into *raw* in place; return the variables used."""
    applied = []
    for env_key, (section, field, typ) in _ENV_OVERRIDES.items():
        value = environ.get(env_key)
        if value is None:
            continue
        raw.setdefault(section, {})[field] = _coerce(value, typ)
        applied.append(env_key)
    return applied


def _coerce(value: str, target_type: type) -> object:
    if target_type is bool:
        return value.strip().lower() in _TRUE
    return target_type(value)


def _resolve_config_path(config_path: Path | str | None) -> Path:
    if config_path is None:
        config_path = os.environ.get(CONFIG_FILE_ENV) or _DEFAULT_CONFIG_PATH
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path} "
            f"(create debloater_config.json or point {CONFIG_FILE_ENV} at one)"
        )
    return path
