"""Minimal strict schema for the YAML client config."""

from __future__ import annotations

from wegli.common.errors import ConfigError

TOP_LEVEL_KEYS = {"api", "request", "export"}
API_KEYS = {"base_url", "token"}
REQUEST_KEYS = {"max_attempts", "initial_wait", "multiplier", "max_wait", "connect_timeout", "read_timeout"}
EXPORT_KEYS = {"directory", "public", "unzip", "overwrite"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_number(value: object, ctx: str, *, nullable: bool = False, minimum: float = 0) -> None:
    if value is None and nullable:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    if value < minimum:
        raise ConfigError(f"{ctx} must be >= {minimum}")


def validate_client_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "client config")
    _assert_required_keys(cfg, TOP_LEVEL_KEYS, "client config")
    _assert_no_unknown_keys(cfg, TOP_LEVEL_KEYS, "client config", allow_unknown)

    sections = (("api", API_KEYS), ("request", REQUEST_KEYS), ("export", EXPORT_KEYS))
    for name, keys in sections:
        section = _assert_mapping(cfg[name], name)
        _assert_required_keys(section, keys, name)
        _assert_no_unknown_keys(section, keys, name, allow_unknown)

    if not isinstance(cfg["api"]["base_url"], str) or not cfg["api"]["base_url"]:
        raise ConfigError("api.base_url must be a non-empty string")
    if cfg["api"]["token"] is not None and not isinstance(cfg["api"]["token"], str):
        raise ConfigError("api.token must be a string")

    request = cfg["request"]
    if isinstance(request["max_attempts"], bool) or not isinstance(request["max_attempts"], int):
        raise ConfigError("request.max_attempts must be an integer")
    _assert_number(request["max_attempts"], "request.max_attempts", minimum=1)
    for key in ("initial_wait", "multiplier", "max_wait"):
        _assert_number(request[key], f"request.{key}")
    for key in ("connect_timeout", "read_timeout"):
        _assert_number(request[key], f"request.{key}", nullable=True)

    for key in ("public", "unzip", "overwrite"):
        if not isinstance(cfg["export"][key], bool):
            raise ConfigError(f"export.{key} must be a boolean")

    return cfg
