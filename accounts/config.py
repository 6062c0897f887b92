"""Configuration for how account records are written at the JSON boundary."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

from .serialization import FIELD_STYLES

logger = logging.getLogger("accounts.config")

CONFIG_ENV_VAR = "ACCOUNTS_CONFIG"


@dataclass(frozen=True)
class SerializationConfig:
    """Defaults applied when account records are encoded."""

    field_style: str = "snake"
    include_absent: bool = True
    indent: Optional[int] = 2

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "SerializationConfig":
        """Create a :class:`SerializationConfig` from raw dictionary data."""
        unknown = set(data.keys()) - {"field_style", "include_absent", "indent"}
        if unknown:
            raise ValueError(f"Unknown serialization settings: {', '.join(sorted(unknown))}")

        field_style = str(data.get("field_style", "snake"))
        if field_style not in FIELD_STYLES:
            raise ValueError(
                f"Invalid field_style '{field_style}'; expected one of: {', '.join(FIELD_STYLES)}"
            )

        raw_indent = data.get("indent", 2)
        if raw_indent is None:
            indent = None
        elif isinstance(raw_indent, bool) or not isinstance(raw_indent, int) or raw_indent < 0:
            raise ValueError("indent must be a non-negative integer or null")
        else:
            indent = raw_indent

        include_absent = data.get("include_absent", True)
        if not isinstance(include_absent, bool):
            raise ValueError("include_absent must be true or false")

        return SerializationConfig(
            field_style=field_style,
            include_absent=include_absent,
            indent=indent,
        )


def load_serialization_config(config_path: Path) -> SerializationConfig:
    """Load serialization settings from a YAML file."""
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")

    section = raw.get("serialization") or {}
    if not isinstance(section, dict):
        raise ValueError("The 'serialization' key must hold a mapping")

    config = SerializationConfig.from_dict(section)
    logger.debug("Loaded serialization settings from %s: %s", config_path, config)
    return config


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "accounts.yaml").resolve(strict=False)
    return candidate


def load_config_from_env() -> SerializationConfig:
    """Load settings named by ``ACCOUNTS_CONFIG``, falling back to the defaults.

    An explicitly configured path must exist; the default location is optional.
    """
    env_value = os.getenv(CONFIG_ENV_VAR)
    config_path = resolve_config_path(env_value)
    if not env_value and not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return SerializationConfig()
    return load_serialization_config(config_path)


__all__ = [
    "CONFIG_ENV_VAR",
    "SerializationConfig",
    "load_config_from_env",
    "load_serialization_config",
    "resolve_config_path",
]
