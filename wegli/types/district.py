"""Districts as served by ``/districts``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from wegli.common.time_utils import format_rfc3339
from wegli.types import fields


@dataclass(frozen=True)
class District:
    name: str
    zip: str
    email: str
    prefixes: tuple[str, ...]
    latitude: float
    longitude: float
    aliases: tuple[str, ...] | None
    # True when the email address belongs to a single person
    personal_email: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "District":
        return cls(
            name=fields.req_str(payload, "name"),
            zip=fields.req_str(payload, "zip"),
            email=fields.req_str(payload, "email"),
            prefixes=fields.req_str_list(payload, "prefixes"),
            latitude=fields.req_float(payload, "latitude"),
            longitude=fields.req_float(payload, "longitude"),
            aliases=fields.opt_str_list(payload, "aliases"),
            personal_email=fields.req_bool(payload, "personal_email"),
            created_at=fields.req_datetime(payload, "created_at"),
            updated_at=fields.req_datetime(payload, "updated_at"),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "zip": self.zip,
            "email": self.email,
            "prefixes": list(self.prefixes),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "aliases": list(self.aliases) if self.aliases is not None else None,
            "personal_email": self.personal_email,
            "created_at": format_rfc3339(self.created_at),
            "updated_at": format_rfc3339(self.updated_at),
        }
