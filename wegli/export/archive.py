"""Retrieval of the latest notices export archive."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from wegli.common.errors import ExportExistsError, IoError, NotFoundError
from wegli.common.fs import ensure_dir
from wegli.common.logging import log_event
from wegli.types.export import Export

if TYPE_CHECKING:
    from wegli.api.client import WegliClient

logger = logging.getLogger(__name__)


def latest_export(exports: list[Export]) -> Export:
    if not exports:
        raise NotFoundError("No export found")
    return max(exports, key=lambda export: export.created_at)


def _csv_members(archive: zipfile.ZipFile) -> list[zipfile.ZipInfo]:
    return [info for info in archive.infolist() if not info.is_dir() and info.filename.lower().endswith(".csv")]


def _member_target(target_dir: Path, info: zipfile.ZipInfo) -> Path:
    parts = [part for part in PurePosixPath(info.filename.replace("\\", "/")).parts if part not in ("", ".", "..", "/")]
    if not parts:
        raise IoError(f"Archive member has no usable name: {info.filename!r}")
    return target_dir.joinpath(*parts)


def unzip_archive(archive_path: Path, target_dir: Path, *, overwrite: bool = False) -> list[Path]:
    """Extract every member of ``archive_path`` into ``target_dir``.

    Member paths are confined to ``target_dir``. Existing files raise
    ``ExportExistsError`` unless ``overwrite`` is set. Files are written via a
    ``.part`` sibling so a failed extraction leaves no truncated file behind.
    """
    extracted: list[Path] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = [info for info in archive.infolist() if not info.is_dir()]
            targets = [(info, _member_target(target_dir, info)) for info in members]
            if not overwrite:
                for _info, target in targets:
                    if target.exists():
                        raise ExportExistsError(f"{target} already exists")
            for info, target in targets:
                ensure_dir(target.parent)
                partial = target.with_name(target.name + ".part")
                try:
                    with archive.open(info) as source, partial.open("wb") as sink:
                        shutil.copyfileobj(source, sink)
                    os.replace(partial, target)
                finally:
                    partial.unlink(missing_ok=True)
                extracted.append(target)
    except zipfile.BadZipFile as exc:
        raise IoError(f"{archive_path} is not a valid zip archive") from exc
    except ExportExistsError:
        raise
    except OSError as exc:
        raise IoError(f"Could not extract {archive_path}: {exc}") from exc
    return extracted


def first_csv_member(archive_path: Path, target_dir: Path) -> Path:
    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = _csv_members(archive)
    except zipfile.BadZipFile as exc:
        raise IoError(f"{archive_path} is not a valid zip archive") from exc
    except OSError as exc:
        raise IoError(f"Could not read {archive_path}: {exc}") from exc
    if not members:
        raise IoError(f"No CSV file found in {archive_path}")
    return _member_target(target_dir, members[0])


def download_latest_export(
    client: "WegliClient",
    target_dir: Path,
    *,
    overwrite: bool = False,
    unzip: bool = False,
    public: bool = True,
) -> Path:
    export = latest_export(client.get_exports(public=public))
    try:
        ensure_dir(target_dir)
    except OSError as exc:
        raise IoError(f"Could not create {target_dir}: {exc}") from exc

    archive_path = target_dir / export.download.archive_name
    if archive_path.exists() and not overwrite:
        raise ExportExistsError(f"{archive_path} already exists")

    client.http.download(export.download.url, archive_path)
    log_event(logger, f"downloaded export {archive_path.name}", event="EXPORT_DOWNLOAD", status="ok")
    if not unzip:
        return archive_path

    csv_path = first_csv_member(archive_path, target_dir)
    try:
        unzip_archive(archive_path, target_dir, overwrite=overwrite)
    except ExportExistsError:
        # A refused extraction leaves the target directory as it was.
        archive_path.unlink(missing_ok=True)
        raise
    log_event(logger, f"extracted {csv_path.name}", event="EXPORT_UNZIP", status="ok")
    return csv_path
