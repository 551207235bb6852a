"""Charges ("Tatbestände") as served by ``/charges``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from wegli.common.time_utils import format_rfc3339
from wegli.types import fields


def _format_decimal(value: float) -> str:
    return repr(float(value))


@dataclass(frozen=True)
class Charge:
    """A charge with its fine and legal references.

    ``tbnr`` is the "Tatbestandsnummer", the unique identifier of the offence.
    The API sends ``fine`` and ``max_fine`` as stringified floats in euros.
    """

    tbnr: str
    description: str
    fine: float
    bkat: str
    penalty: str | None
    fap: str | None
    points: int | None
    valid_from: datetime | None
    valid_to: datetime | None
    implementation: int | None
    classification: int
    variant_table_id: int | None
    rule_id: int
    table_id: int | None
    required_refinements: str
    number_required_refinements: int
    max_fine: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Charge":
        return cls(
            tbnr=fields.req_str(payload, "tbnr"),
            description=fields.req_str(payload, "description"),
            fine=fields.req_decimal_str(payload, "fine"),
            bkat=fields.req_str(payload, "bkat"),
            penalty=fields.opt_str(payload, "penalty"),
            fap=fields.opt_str(payload, "fap"),
            points=fields.opt_int(payload, "points"),
            valid_from=fields.opt_datetime(payload, "valid_from"),
            valid_to=fields.opt_datetime(payload, "valid_to"),
            implementation=fields.opt_int(payload, "implementation"),
            classification=fields.req_int(payload, "classification"),
            variant_table_id=fields.opt_int(payload, "variant_table_id"),
            rule_id=fields.req_int(payload, "rule_id"),
            table_id=fields.opt_int(payload, "table_id"),
            required_refinements=fields.req_str(payload, "required_refinements"),
            number_required_refinements=fields.req_int(payload, "number_required_refinements"),
            max_fine=fields.req_decimal_str(payload, "max_fine"),
            created_at=fields.req_datetime(payload, "created_at"),
            updated_at=fields.req_datetime(payload, "updated_at"),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "tbnr": self.tbnr,
            "description": self.description,
            "fine": _format_decimal(self.fine),
            "bkat": self.bkat,
            "penalty": self.penalty,
            "fap": self.fap,
            "points": self.points,
            "valid_from": format_rfc3339(self.valid_from) if self.valid_from else None,
            "valid_to": format_rfc3339(self.valid_to) if self.valid_to else None,
            "implementation": self.implementation,
            "classification": self.classification,
            "variant_table_id": self.variant_table_id,
            "rule_id": self.rule_id,
            "table_id": self.table_id,
            "required_refinements": self.required_refinements,
            "number_required_refinements": self.number_required_refinements,
            "max_fine": _format_decimal(self.max_fine),
            "created_at": format_rfc3339(self.created_at),
            "updated_at": format_rfc3339(self.updated_at),
        }
