"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from wegli.api.client import WegliClient
from wegli.common.constants import ENV_API_TOKEN, ENV_API_URL
from wegli.common.errors import ConfigError
from wegli.common.fs import read_yaml
from wegli.common.http import RetryConfig, TimeoutConfig
from wegli.common.schema import validate_client_config


@dataclass(frozen=True)
class ExportSettings:
    directory: Path
    public: bool
    unzip: bool
    overwrite: bool


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    api_token: str
    retry: RetryConfig
    timeout: TimeoutConfig | None
    export: ExportSettings

    def build_client(self) -> WegliClient:
        return WegliClient(self.base_url, self.api_token, retry=self.retry, timeout=self.timeout)


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_file(path: Path) -> Any:
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = _read_config_file(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config_file(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def _apply_env(cfg: dict, environ: Mapping[str, str]) -> dict:
    env_overlay: dict[str, dict[str, str]] = {"api": {}}
    if environ.get(ENV_API_URL):
        env_overlay["api"]["base_url"] = environ[ENV_API_URL]
    if environ.get(ENV_API_TOKEN):
        env_overlay["api"]["token"] = environ[ENV_API_TOKEN]
    return _deep_merge(cfg, env_overlay)


def load_client_config(
    path: Path,
    *,
    overlay_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    allow_unknown: bool = False,
) -> ClientConfig:
    raw = _load_yaml_with_overlay(path, overlay_path)
    if isinstance(raw, dict):
        raw = _apply_env(raw, os.environ if environ is None else environ)
    cfg = validate_client_config(raw, allow_unknown=allow_unknown)

    request = cfg["request"]
    timeout = None
    if request["connect_timeout"] is not None or request["read_timeout"] is not None:
        timeout = TimeoutConfig(connect=request["connect_timeout"], read=request["read_timeout"])

    return ClientConfig(
        base_url=cfg["api"]["base_url"],
        api_token=cfg["api"]["token"] or "",
        retry=RetryConfig(
            max_attempts=request["max_attempts"],
            initial_wait=float(request["initial_wait"]),
            multiplier=float(request["multiplier"]),
            max_wait=float(request["max_wait"]),
        ),
        timeout=timeout,
        export=ExportSettings(
            directory=Path(cfg["export"]["directory"]),
            public=cfg["export"]["public"],
            unzip=cfg["export"]["unzip"],
            overwrite=cfg["export"]["overwrite"],
        ),
    )
