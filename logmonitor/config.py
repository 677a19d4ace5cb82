"""Configuration module — frozen dataclass from defaults, YAML file and env vars."""

import os
import logging
from dataclasses import dataclass, fields
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://aromatic-duck-387.convex.site/api/v1/logs"

CONFIG_PATH_ENV = "LOGMONITOR_CONFIG"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    endpoint: str = DEFAULT_ENDPOINT
    batch_size: int = 20
    flush_interval: float = 15.0
    request_timeout: float = 10.0
    debug: Optional[bool] = None
    bundle_id: Optional[str] = None
    distribution: Optional[str] = None


# field name -> (env var, parser)
_ENV_FIELDS = {
    "endpoint": ("LOGMONITOR_ENDPOINT", str),
    "batch_size": ("LOGMONITOR_BATCH_SIZE", int),
    "flush_interval": ("LOGMONITOR_FLUSH_INTERVAL", float),
    "request_timeout": ("LOGMONITOR_REQUEST_TIMEOUT", float),
    "debug": ("LOGMONITOR_DEBUG", _parse_bool),
    "bundle_id": ("LOGMONITOR_BUNDLE_ID", str),
    "distribution": ("LOGMONITOR_DISTRIBUTION", str),
}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def load_config(path: str | None = None, env: dict | None = None) -> Config:
    """Build Config from defaults <- YAML file <- env vars (highest priority).

    Pass *env* for testability; when None, os.environ is used.
    """
    if env is None:
        env = os.environ
    if path is None:
        path = env.get(CONFIG_PATH_ENV)

    known = {f.name for f in fields(Config)}
    kwargs: dict = {}
    for key, value in load_yaml_config(path).items():
        key = key.replace("-", "_")
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        kwargs[key] = value

    for name, (var, parse) in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw != "":
            kwargs[name] = parse(raw)

    return Config(**kwargs)
