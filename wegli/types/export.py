"""Export metadata and the rows of the notices CSV export."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping
from urllib.parse import urlparse

from wegli.common.constants import DEFAULT_ARCHIVE_NAME
from wegli.common.errors import ConversionError, DateParseError
from wegli.common.time_utils import format_export_timestamp, format_rfc3339, parse_export_timestamp
from wegli.types import fields

EXPORT_NOTICE_COLUMNS = (
    "start_date",
    "end_date",
    "tbnr",
    "street",
    "city",
    "zip",
    "latitude",
    "longitude",
)


class ExportType(str, Enum):
    NOTICES = "notices"

    @classmethod
    def parse(cls, value: str) -> "ExportType":
        try:
            return cls(value)
        except ValueError as exc:
            raise ConversionError(f"'{value}' is not a valid export type") from exc


@dataclass(frozen=True)
class ExportDownload:
    filename: str
    url: str

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "ExportDownload":
        return cls(filename=fields.req_str(payload, "filename"), url=fields.req_str(payload, "url"))

    def to_json(self) -> dict[str, str]:
        return {"filename": self.filename, "url": self.url}

    @property
    def archive_name(self) -> str:
        """Local file name for the archive: the filename, else the last URL segment."""
        name = self.filename.strip().replace("\\", "/").split("/")[-1]
        if name and name not in (".", ".."):
            return name
        segment = urlparse(self.url).path.rstrip("/").split("/")[-1]
        if segment and segment not in (".", ".."):
            return segment
        return DEFAULT_ARCHIVE_NAME


@dataclass(frozen=True)
class Export:
    export_type: ExportType
    file_extension: str
    created_at: datetime
    download: ExportDownload

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Export":
        return cls(
            export_type=ExportType.parse(fields.req_str(payload, "export_type")),
            file_extension=fields.req_str(payload, "file_extension"),
            created_at=fields.req_datetime(payload, "created_at"),
            download=ExportDownload.from_json(fields.req_mapping(payload, "download")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "export_type": self.export_type.value,
            "file_extension": self.file_extension,
            "created_at": format_rfc3339(self.created_at),
            "download": self.download.to_json(),
        }


def _parse_coordinate(row: Mapping[str, Any], key: str) -> float | None:
    value = row[key]
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Column '{key}' is not a number: {value!r}") from exc


def _format_coordinate(value: float | None) -> str:
    return "" if value is None else repr(value)


@dataclass(frozen=True)
class ExportNoticeCsv:
    """One row of the notices export, timestamps still in their raw form."""

    start_date: str
    end_date: str
    tbnr: str
    street: str
    city: str
    zip: str
    latitude: float | None
    longitude: float | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ExportNoticeCsv":
        missing = [column for column in EXPORT_NOTICE_COLUMNS if column not in row]
        if missing:
            raise ConversionError(f"Export row is missing columns: {', '.join(missing)}")
        return cls(
            start_date=row["start_date"] or "",
            end_date=row["end_date"] or "",
            tbnr=row["tbnr"] or "",
            street=row["street"] or "",
            city=row["city"] or "",
            zip=row["zip"] or "",
            latitude=_parse_coordinate(row, "latitude"),
            longitude=_parse_coordinate(row, "longitude"),
        )

    def to_row(self) -> dict[str, str]:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "tbnr": self.tbnr,
            "street": self.street,
            "city": self.city,
            "zip": self.zip,
            "latitude": _format_coordinate(self.latitude),
            "longitude": _format_coordinate(self.longitude),
        }


def _export_timestamp(field: str, value: str) -> datetime:
    try:
        return parse_export_timestamp(value)
    except ValueError as exc:
        raise DateParseError(field, value) from exc


@dataclass(frozen=True)
class ExportNotice:
    """One row of the notices export with timezone-aware timestamps."""

    start_date: datetime
    end_date: datetime
    tbnr: str
    street: str
    city: str
    zip: str
    latitude: float | None
    longitude: float | None

    @classmethod
    def from_csv(cls, raw: ExportNoticeCsv) -> "ExportNotice":
        return cls(
            start_date=_export_timestamp("start_date", raw.start_date),
            end_date=_export_timestamp("end_date", raw.end_date),
            tbnr=raw.tbnr,
            street=raw.street,
            city=raw.city,
            zip=raw.zip,
            latitude=raw.latitude,
            longitude=raw.longitude,
        )

    def to_csv(self) -> ExportNoticeCsv:
        return ExportNoticeCsv(
            start_date=format_export_timestamp(self.start_date),
            end_date=format_export_timestamp(self.end_date),
            tbnr=self.tbnr,
            street=self.street,
            city=self.city,
            zip=self.zip,
            latitude=self.latitude,
            longitude=self.longitude,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "start_date": format_rfc3339(self.start_date),
            "end_date": format_rfc3339(self.end_date),
            "tbnr": self.tbnr,
            "street": self.street,
            "city": self.city,
            "zip": self.zip,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
