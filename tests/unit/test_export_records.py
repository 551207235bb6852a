from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest

from wegli.common.errors import ConversionError, DateParseError
from wegli.export.records import read_export_notices, read_export_rows
from wegli.types.export import ExportNotice, ExportNoticeCsv

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "export" / "notices.csv"

RAW = ExportNoticeCsv(
    start_date="2023-10-25 09:23:00.000 +0100",
    end_date="2023-10-25 09:41:00.000 +0100",
    tbnr="112454",
    street="Hauptstraße 1",
    city="Hamburg",
    zip="20095",
    latitude=53.5503,
    longitude=10.0006,
)


def test_export_notice_converts_timestamps_and_copies_fields():
    notice = ExportNotice.from_csv(RAW)
    assert notice.start_date == datetime(2023, 10, 25, 8, 23, tzinfo=timezone.utc)
    assert notice.end_date == datetime(2023, 10, 25, 8, 41, tzinfo=timezone.utc)
    assert (notice.tbnr, notice.street, notice.city, notice.zip) == ("112454", "Hauptstraße 1", "Hamburg", "20095")
    assert (notice.latitude, notice.longitude) == (53.5503, 10.0006)


def test_export_notice_conversion_is_idempotent():
    assert ExportNotice.from_csv(RAW) == ExportNotice.from_csv(RAW)


def test_export_notice_round_trips_to_raw_row():
    assert ExportNotice.from_csv(RAW).to_csv() == RAW


def test_older_timestamp_layout_converts_and_writes_current_layout():
    older = replace(RAW, start_date="2023-10-25 09:23:00 .000+0100", end_date="2023-10-25 09:41:00 .000+0100")
    notice = ExportNotice.from_csv(older)

    assert notice == ExportNotice.from_csv(RAW)
    assert notice.to_csv().start_date == "2023-10-25 09:23:00.000 +0100"
    assert notice.to_csv().end_date == "2023-10-25 09:41:00.000 +0100"


@pytest.mark.parametrize("field", ["start_date", "end_date"])
def test_malformed_timestamp_names_the_field(field):
    row = RAW.to_row()
    row[field] = "not-a-date"
    with pytest.raises(DateParseError) as excinfo:
        ExportNotice.from_csv(ExportNoticeCsv.from_row(row))
    assert excinfo.value.field == field
    assert excinfo.value.value == "not-a-date"


def test_from_row_handles_blank_and_bad_coordinates():
    row = RAW.to_row()
    row["latitude"] = ""
    row["longitude"] = " "
    raw = ExportNoticeCsv.from_row(row)
    assert raw.latitude is None and raw.longitude is None

    row["latitude"] = "north"
    with pytest.raises(ConversionError):
        ExportNoticeCsv.from_row(row)


def test_from_row_requires_all_columns():
    row = RAW.to_row()
    del row["tbnr"]
    with pytest.raises(ConversionError, match="tbnr"):
        ExportNoticeCsv.from_row(row)


def test_read_export_rows_from_fixture():
    rows = list(read_export_rows(FIXTURE))
    assert len(rows) == 2
    assert rows[0].latitude == 53.5503
    assert rows[1].latitude is None


def test_read_export_notices_is_lazy_and_converts():
    notices = read_export_notices(FIXTURE)
    first = next(notices)
    assert first.zip == "20095"
    assert first.start_date == datetime(2023, 10, 25, 8, 23, tzinfo=timezone.utc)
    second = next(notices)
    assert second.start_date.microsecond == 250000
    with pytest.raises(StopIteration):
        next(notices)


def test_read_export_rows_checks_header(tmp_path: Path):
    path = tmp_path / "broken.csv"
    path.write_text("start_date,end_date\n2023-01-01 00:00:00 +0100,2023-01-01 00:00:00 +0100\n", encoding="utf-8")
    with pytest.raises(ConversionError, match="tbnr"):
        list(read_export_rows(path))


def test_read_export_notices_fails_on_bad_row(tmp_path: Path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "start_date,end_date,tbnr,street,city,zip,latitude,longitude\n"
        "not-a-date,2023-01-01 00:00:00 +0100,1,a,b,20095,,\n",
        encoding="utf-8",
    )
    with pytest.raises(DateParseError, match="start_date"):
        list(read_export_notices(path))
