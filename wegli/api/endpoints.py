"""Supported API operations and their path templates."""

from __future__ import annotations

import string
from enum import Enum
from urllib.parse import quote


class Endpoint(Enum):
    CHARGES = "charges"
    CHARGE = "charges/{tbnr}"
    DISTRICTS = "districts"
    DISTRICT = "districts/{zip}"
    NOTICES = "notices"
    NOTICE = "notices/{token}"
    USER_EXPORTS = "exports"
    PUBLIC_EXPORTS = "exports/public"

    @property
    def template(self) -> str:
        return self.value

    @property
    def parameters(self) -> tuple[str, ...]:
        return tuple(name for _, name, _, _ in string.Formatter().parse(self.value) if name)

    def path(self, **params: str) -> str:
        expected = set(self.parameters)
        missing = expected - set(params)
        unexpected = set(params) - expected
        if missing or unexpected:
            raise ValueError(
                f"{self.name} takes parameters {sorted(expected)}, got {sorted(params)}"
            )
        for name, value in params.items():
            if not str(value):
                raise ValueError(f"{self.name}: parameter '{name}' must not be empty")
        return self.value.format(**{name: quote(str(value), safe="") for name, value in params.items()})


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
