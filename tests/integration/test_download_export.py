from __future__ import annotations

import csv
import io
import json
import zipfile
from pathlib import Path

import pytest

from wegli.api.client import WegliClient
from wegli.common.errors import IoError, NotFoundError
from wegli.export.records import read_export_notices
from wegli.types.export import EXPORT_NOTICE_COLUMNS

BASE_URL = "https://api.example.test/api"
FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"
EXPORTS = json.loads((FIXTURES / "api" / "exports.json").read_text(encoding="utf-8"))
LATEST_URL = "https://storage.example.test/blobs/notices-47.zip"


def _zip_bytes(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


ARCHIVE = _zip_bytes({"notices-47.csv": (FIXTURES / "export" / "notices.csv").read_bytes()})


class FakeResponse:
    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.body = body
        self.headers: dict[str, str] = {}

    def json(self):
        return json.loads(self.body)

    def iter_content(self, chunk_size: int = 0):
        size = chunk_size or len(self.body) or 1
        for start in range(0, len(self.body), size):
            yield self.body[start : start + size]

    def close(self):
        return None


class FakeSession:
    def __init__(self, exports=EXPORTS, archive: bytes = ARCHIVE):
        self.routes = {
            f"{BASE_URL}/exports/public": json.dumps(exports).encode("utf-8"),
            f"{BASE_URL}/exports": json.dumps(exports[:1]).encode("utf-8"),
            LATEST_URL: archive,
            "https://storage.example.test/blobs/notices-46.zip": archive,
        }
        self.urls: list[str] = []

    def request(self, **kwargs):
        self.urls.append(kwargs["url"])
        body = self.routes.get(kwargs["url"])
        if body is None:
            return FakeResponse(404, b"{}")
        return FakeResponse(200, body)

    def close(self):
        return None


def _client(session: FakeSession) -> WegliClient:
    return WegliClient(BASE_URL, "any_api_key", session=session)


@pytest.mark.integration
def test_download_returns_latest_archive(tmp_path: Path):
    session = FakeSession()

    path = _client(session).download_latest_export(tmp_path, False, False)

    assert path == tmp_path / "notices-47.zip"
    assert path.read_bytes() == ARCHIVE
    assert session.urls == [f"{BASE_URL}/exports/public", LATEST_URL]


@pytest.mark.integration
def test_existing_archive_without_overwrite_raises_file_exists(tmp_path: Path):
    (tmp_path / "notices-47.zip").write_bytes(b"old")
    session = FakeSession()

    with pytest.raises(FileExistsError):
        _client(session).download_latest_export(tmp_path, False, False)

    assert LATEST_URL not in session.urls
    assert (tmp_path / "notices-47.zip").read_bytes() == b"old"


@pytest.mark.integration
def test_overwrite_and_unzip_on_fresh_directory_returns_csv(tmp_path: Path):
    target = tmp_path / "weg_li"

    path = _client(FakeSession()).download_latest_export(target, True, True)

    assert path.suffix == ".csv"
    assert path == target / "notices-47.csv"
    with path.open("r", encoding="utf-8", newline="") as f:
        assert tuple(next(csv.reader(f))) == EXPORT_NOTICE_COLUMNS
    assert (target / "notices-47.zip").exists()
    assert len(list(read_export_notices(path))) == 2


@pytest.mark.integration
def test_overwrite_replaces_existing_archive_and_csv(tmp_path: Path):
    (tmp_path / "notices-47.zip").write_bytes(b"old")
    (tmp_path / "notices-47.csv").write_text("old", encoding="utf-8")

    path = _client(FakeSession()).download_latest_export(tmp_path, overwrite=True, unzip=True)

    assert (tmp_path / "notices-47.zip").read_bytes() == ARCHIVE
    assert path.read_text(encoding="utf-8").startswith("start_date,")


@pytest.mark.integration
def test_existing_csv_without_overwrite_raises_file_exists(tmp_path: Path):
    (tmp_path / "notices-47.csv").write_text("old", encoding="utf-8")

    with pytest.raises(FileExistsError):
        _client(FakeSession()).download_latest_export(tmp_path, overwrite=False, unzip=True)

    assert (tmp_path / "notices-47.csv").read_text(encoding="utf-8") == "old"
    assert not (tmp_path / "notices-47.zip").exists()
    assert not (tmp_path / "notices-47.zip.part").exists()

    (tmp_path / "notices-47.csv").unlink()
    path = _client(FakeSession()).download_latest_export(tmp_path, overwrite=False, unzip=True)
    assert path == tmp_path / "notices-47.csv"


@pytest.mark.integration
def test_user_export_uses_authenticated_listing(tmp_path: Path):
    session = FakeSession()

    path = _client(session).download_latest_export(tmp_path, public=False)

    assert session.urls[0] == f"{BASE_URL}/exports"
    assert path.name == "notices-46.zip"


@pytest.mark.integration
def test_no_exports_raises_not_found(tmp_path: Path):
    with pytest.raises(NotFoundError):
        _client(FakeSession(exports=[])).download_latest_export(tmp_path)


@pytest.mark.integration
def test_corrupt_archive_raises_io_error(tmp_path: Path):
    with pytest.raises(IoError):
        _client(FakeSession(archive=b"not a zip")).download_latest_export(tmp_path, unzip=True)


@pytest.mark.integration
def test_archive_without_csv_raises_io_error(tmp_path: Path):
    archive = _zip_bytes({"README.txt": b"nothing here"})
    with pytest.raises(IoError, match="No CSV"):
        _client(FakeSession(archive=archive)).download_latest_export(tmp_path, unzip=True)


@pytest.mark.integration
def test_archive_members_stay_inside_target(tmp_path: Path):
    archive = _zip_bytes({"../escape.csv": (FIXTURES / "export" / "notices.csv").read_bytes()})
    target = tmp_path / "inner"

    path = _client(FakeSession(archive=archive)).download_latest_export(target, unzip=True)

    assert path == target / "escape.csv"
    assert not (tmp_path / "escape.csv").exists()
