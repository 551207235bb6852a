"""Notices of the authenticated user as served by ``/notices``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from wegli.common.errors import ConversionError
from wegli.common.time_utils import format_rfc3339
from wegli.types import fields
from wegli.types.charge import Charge


class NoticeStatus(str, Enum):
    OPEN = "open"
    DISABLED = "disabled"
    ANALYZING = "analyzing"
    # Sent to the contact address of the responsible district
    SHARED = "shared"

    @classmethod
    def parse(cls, value: str) -> "NoticeStatus":
        try:
            return cls(value)
        except ValueError as exc:
            raise ConversionError(f"'{value}' is not a valid notice status") from exc


@dataclass(frozen=True)
class NoticePhoto:
    filename: str
    url: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "NoticePhoto":
        return cls(filename=fields.req_str(payload, "filename"), url=fields.req_str(payload, "url"))

    def to_json(self) -> dict[str, str]:
        return {"filename": self.filename, "url": self.url}


@dataclass(frozen=True)
class Notice:
    """A reported parking violation.

    ``start_date``/``end_date`` bound the observation of the offence,
    ``sent_at`` is when the notice was mailed to the district. The boolean
    flags describe the vehicle at the time of the offence; ``expired_tuv``
    refers to the roadworthiness certificate and ``expired_eco`` to the
    emissions certificate.
    """

    token: str
    status: NoticeStatus
    street: str
    city: str
    zip: str
    latitude: float
    longitude: float
    registration: str
    color: str
    brand: str
    charge: Charge
    tbnr: str
    start_date: datetime
    end_date: datetime
    note: str | None
    photos: tuple[NoticePhoto, ...]
    created_at: datetime
    updated_at: datetime
    sent_at: datetime
    vehicle_empty: bool
    hazard_lights: bool
    expired_tuv: bool
    expired_eco: bool
    over_2_8_tons: bool

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Notice":
        return cls(
            token=fields.req_str(payload, "token"),
            status=NoticeStatus.parse(fields.req_str(payload, "status")),
            street=fields.req_str(payload, "street"),
            city=fields.req_str(payload, "city"),
            zip=fields.req_str(payload, "zip"),
            latitude=fields.req_float(payload, "latitude"),
            longitude=fields.req_float(payload, "longitude"),
            registration=fields.req_str(payload, "registration"),
            color=fields.req_str(payload, "color"),
            brand=fields.req_str(payload, "brand"),
            charge=Charge.from_json(fields.req_mapping(payload, "charge")),
            tbnr=fields.req_str(payload, "tbnr"),
            start_date=fields.req_datetime(payload, "start_date"),
            end_date=fields.req_datetime(payload, "end_date"),
            note=fields.opt_str(payload, "note"),
            photos=tuple(NoticePhoto.from_json(item) for item in fields.req_list(payload, "photos")),
            created_at=fields.req_datetime(payload, "created_at"),
            updated_at=fields.req_datetime(payload, "updated_at"),
            sent_at=fields.req_datetime(payload, "sent_at"),
            vehicle_empty=fields.req_bool(payload, "vehicle_empty"),
            hazard_lights=fields.req_bool(payload, "hazard_lights"),
            expired_tuv=fields.req_bool(payload, "expired_tuv"),
            expired_eco=fields.req_bool(payload, "expired_eco"),
            over_2_8_tons=fields.req_bool(payload, "over_2_8_tons"),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "status": self.status.value,
            "street": self.street,
            "city": self.city,
            "zip": self.zip,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "registration": self.registration,
            "color": self.color,
            "brand": self.brand,
            "charge": self.charge.to_json(),
            "tbnr": self.tbnr,
            "start_date": format_rfc3339(self.start_date),
            "end_date": format_rfc3339(self.end_date),
            "note": self.note,
            "photos": [photo.to_json() for photo in self.photos],
            "created_at": format_rfc3339(self.created_at),
            "updated_at": format_rfc3339(self.updated_at),
            "sent_at": format_rfc3339(self.sent_at),
            "vehicle_empty": self.vehicle_empty,
            "hazard_lights": self.hazard_lights,
            "expired_tuv": self.expired_tuv,
            "expired_eco": self.expired_eco,
            "over_2_8_tons": self.over_2_8_tons,
        }
