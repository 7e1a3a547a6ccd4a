"""Configuration loading: packaged YAML defaults plus environment overrides."""

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "config.yaml"

#: Environment variable -> (section, key) in the YAML document.
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "SCANLOOKUP_BASE_URL": ("lookup", "base_url"),
    "SCANLOOKUP_API_KEY": ("lookup", "api_key"),
    "SCANLOOKUP_TIMEOUT": ("lookup", "timeout"),
    "SCANLOOKUP_LOG_LEVEL": (None, "log_level"),
}


class LookupSettings(BaseModel):
    base_url: str = "https://api.upcitemdb.com/prod/trial"
    api_key: str | None = None
    timeout: float = 10.0


class DecoderSettings(BaseModel):
    symbologies: list[str] = ["qr", "ean13", "ean8", "code128"]


class Settings(BaseModel):
    """Validated application settings."""

    lookup: LookupSettings = LookupSettings()
    decoder: DecoderSettings = DecoderSettings()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def load_settings(path: Path | None = None, environ: dict[str, str] | None = None) -> Settings:
    """Load settings from *path* (or ``$SCANLOOKUP_CONFIG``) and apply env overrides.

    Args:
        path:    YAML file to read.  Defaults to ``$SCANLOOKUP_CONFIG`` or the
                 packaged ``data/config.yaml``.
        environ: Mapping used for overrides; defaults to ``os.environ``.

    Returns:
        A validated :class:`Settings` instance.
    """
    env = os.environ if environ is None else environ
    if path is None:
        path = Path(env["SCANLOOKUP_CONFIG"]) if env.get("SCANLOOKUP_CONFIG") else DEFAULT_CONFIG_PATH

    data = _read_yaml(path)
    # An empty section in YAML (``lookup:``) loads as None.
    for section in ("lookup", "decoder"):
        if section in data and data[section] is None:
            data[section] = {}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        if section:
            target = data.get(section) or {}
            data[section] = target
        else:
            target = data
        target[key] = value
        logger.debug("Config %s overridden from %s", key, var)

    return Settings.model_validate(data)
