"""Application settings loaded from YAML with environment overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Dict, Mapping

import yaml

ENV_PREFIX = "COMMITTEE_ACCESS_"


@dataclass
class Settings:
    """Runtime configuration shared by the CLI and the web application."""

    secret_key: str = "change-me"
    fixtures_path: str | None = None
    policy_path: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.strip().upper()


def _load_file(path: str | None) -> Dict:
    if not path or not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


def load_settings(path: str | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``path`` and ``COMMITTEE_ACCESS_*`` variables.

    Environment variables win over values from the file. The settings file
    itself can be selected with ``COMMITTEE_ACCESS_CONFIG`` when ``path`` is
    not given.
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get(ENV_PREFIX + "CONFIG")
    data = _load_file(path)

    known = {f.name for f in fields(Settings)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

    for name in known:
        value = environ.get(ENV_PREFIX + name.upper())
        if value:
            data[name] = value
    return Settings(**data)
