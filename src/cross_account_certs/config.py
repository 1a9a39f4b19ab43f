"""Handler settings, read from a YAML file or the Lambda environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional


DEFAULT_CONFIG_PATH = "config.yaml"

# CloudFront distributions always live in this alias hosted zone.
CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"


@dataclass
class HandlerSettings:
    issuance_timeout_seconds: int = 50
    issuance_poll_interval_seconds: int = 5
    validation_options_timeout_seconds: int = 60
    validation_options_poll_interval_seconds: int = 5
    validation_record_ttl: int = 300
    role_session_name: str = "LambdaRoute53Session"
    cloudfront_hosted_zone_id: str = CLOUDFRONT_HOSTED_ZONE_ID
    remaining_time_margin_seconds: int = 10
    response_timeout_seconds: int = 10
    log_level: str = "INFO"


def _load_yaml_if_exists(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    import yaml

    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for item in fields(HandlerSettings):
        value = env.get(item.name.upper())
        if value not in (None, ""):
            values[item.name] = value
    return values


def load_settings(env: Optional[Mapping[str, str]] = None) -> HandlerSettings:
    """
    Build settings from the file named by CONFIG_PATH, falling back to
    upper-cased environment variables (ISSUANCE_TIMEOUT_SECONDS, ...).
    Unknown keys are ignored; anything missing keeps its default.
    """

    env = env if env is not None else os.environ
    config_path = env.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    raw = _load_yaml_if_exists(config_path) or _from_env(env)

    settings = HandlerSettings()
    for item in fields(HandlerSettings):
        if item.name not in raw:
            continue
        default = getattr(settings, item.name)
        value = raw[item.name]
        setattr(settings, item.name, int(value) if isinstance(default, int) else str(value))
    return settings
