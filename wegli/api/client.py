"""Typed client for the weg.li API."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Any, Callable, TypeVar

import requests

from wegli.api.endpoints import Endpoint, build_url
from wegli.common.constants import DEFAULT_BASE_URL
from wegli.common.errors import ConversionError, DecodeError
from wegli.common.http import HttpClient, RetryConfig, TimeoutConfig
from wegli.export import archive as export_archive
from wegli.types.charge import Charge
from wegli.types.district import District
from wegli.types.export import Export
from wegli.types.notice import Notice

T = TypeVar("T")


def _decode_one(payload: Any, decoder: Callable[[Any], T], endpoint: Endpoint) -> T:
    try:
        return decoder(payload)
    except ConversionError as exc:
        raise DecodeError(f"Unexpected {endpoint.name} payload: {exc}") from exc


def _decode_list(payload: Any, decoder: Callable[[Any], T], endpoint: Endpoint) -> list[T]:
    if not isinstance(payload, list):
        raise DecodeError(f"Unexpected {endpoint.name} payload: expected a JSON array")
    return [_decode_one(item, decoder, endpoint) for item in payload]


class WegliClient:
    """Client for the weg.li API.

    Every method performs one authenticated GET (more only when ``retry``
    allows additional attempts) and returns typed records. Failures raise
    ``RequestError``, ``NotFoundError`` or ``DecodeError``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_token: str = "",
        *,
        retry: RetryConfig | None = None,
        timeout: TimeoutConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.api_token = api_token
        self.http = HttpClient(api_token, timeout=timeout, retry=retry, session=session)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "WegliClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def url(self, endpoint: Endpoint, **params: str) -> str:
        return build_url(self.base_url, endpoint.path(**params))

    def _get(self, endpoint: Endpoint, **params: str) -> Any:
        return self.http.get_json(self.url(endpoint, **params))

    def get_notice(self, token: str) -> Notice:
        """Get a single notice of the authenticated user by its token."""
        return _decode_one(self._get(Endpoint.NOTICE, token=token), Notice.from_json, Endpoint.NOTICE)

    def get_notices(self) -> list[Notice]:
        """Get all notices of the authenticated user."""
        return _decode_list(self._get(Endpoint.NOTICES), Notice.from_json, Endpoint.NOTICES)

    def get_charge(self, tbnr: str) -> Charge:
        return _decode_one(self._get(Endpoint.CHARGE, tbnr=tbnr), Charge.from_json, Endpoint.CHARGE)

    def get_charges(self) -> list[Charge]:
        return _decode_list(self._get(Endpoint.CHARGES), Charge.from_json, Endpoint.CHARGES)

    def get_district(self, zip: str) -> District:
        return _decode_one(self._get(Endpoint.DISTRICT, zip=zip), District.from_json, Endpoint.DISTRICT)

    def get_districts(self) -> list[District]:
        return _decode_list(self._get(Endpoint.DISTRICTS), District.from_json, Endpoint.DISTRICTS)

    def get_user_exports(self) -> list[Export]:
        """Get metadata of the exports of the authenticated user."""
        return _decode_list(self._get(Endpoint.USER_EXPORTS), Export.from_json, Endpoint.USER_EXPORTS)

    def get_public_exports(self) -> list[Export]:
        return _decode_list(self._get(Endpoint.PUBLIC_EXPORTS), Export.from_json, Endpoint.PUBLIC_EXPORTS)

    def get_exports(self, *, public: bool = True) -> list[Export]:
        return self.get_public_exports() if public else self.get_user_exports()

    def download_latest_export(
        self,
        target_dir: str | Path,
        overwrite: bool = False,
        unzip: bool = False,
        *,
        public: bool = True,
    ) -> Path:
        """Download the newest notices export archive into ``target_dir``.

        Returns the archive path, or the path of the extracted CSV file when
        ``unzip`` is set. An existing archive or CSV raises
        ``ExportExistsError`` unless ``overwrite`` is set. If only the CSV
        collides, the archive fetched by this call is removed again. The
        archive is kept after a successful extraction. ``public`` selects the public export over the
        authenticated user's own.
        """
        return export_archive.download_latest_export(
            self,
            Path(target_dir),
            overwrite=overwrite,
            unzip=unzip,
            public=public,
        )
