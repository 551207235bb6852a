"""Single-pass readers for the notices CSV export."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator

from wegli.common.errors import ConversionError, IoError
from wegli.types.export import EXPORT_NOTICE_COLUMNS, ExportNotice, ExportNoticeCsv


def read_export_rows(path: Path) -> Iterator[ExportNoticeCsv]:
    """Yield the raw rows of an export CSV, one at a time."""
    try:
        with Path(path).open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            header = reader.fieldnames or []
            missing = [column for column in EXPORT_NOTICE_COLUMNS if column not in header]
            if missing:
                raise ConversionError(f"{path} is missing export columns: {', '.join(missing)}")
            for row in reader:
                yield ExportNoticeCsv.from_row(row)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise IoError(f"Could not read export {path}: {exc}") from exc


def read_export_notices(path: Path) -> Iterator[ExportNotice]:
    for raw in read_export_rows(path):
        yield ExportNotice.from_csv(raw)
