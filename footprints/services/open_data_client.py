"""Client for the NYC Open Data building footprints endpoint.

The endpoint is a Socrata resource. Rows come back as a JSON array of objects
whose values are all strings. Paging uses SoQL ``$limit``/``$offset`` with a
stable ``$order=:id`` so pages do not overlap.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

import requests

from footprints.services.building_record import SOURCE_FIELDS

logger = logging.getLogger(__name__)


class OpenDataError(RuntimeError):
    """The open data endpoint could not be read or returned an unusable payload."""


class OpenDataClient:
    def __init__(
        self,
        url: str,
        *,
        app_token: Optional[str] = None,
        timeout: float = 30.0,
        page_size: int = 1000,
        max_records: int = 1000,
        user_agent: str = "FootprintsAPI/1.0",
        session: Optional[requests.Session] = None,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.url = url
        self.timeout = timeout
        self.page_size = page_size
        self.max_records = max(0, max_records)
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })
        if app_token:
            self.session.headers["X-App-Token"] = app_token

    @classmethod
    def from_config(cls, config) -> "OpenDataClient":
        return cls(
            config["OPEN_DATA_URL"],
            app_token=config.get("OPEN_DATA_APP_TOKEN"),
            timeout=config.get("OPEN_DATA_TIMEOUT_SECONDS", 30.0),
            page_size=config.get("OPEN_DATA_PAGE_SIZE", 1000),
            max_records=config.get("OPEN_DATA_MAX_RECORDS", 1000),
            user_agent=config.get("OPEN_DATA_USER_AGENT", "FootprintsAPI/1.0"),
        )

    def fetch_buildings(self) -> List[Dict[str, Any]]:
        """Download every source row up to ``max_records`` (0 means no cap)."""
        rows: List[Dict[str, Any]] = []
        for page in self._pages():
            rows.extend(page)
        logger.info("Fetched %s building rows from %s", len(rows), self.url)
        return rows

    def _pages(self) -> Iterator[List[Dict[str, Any]]]:
        offset = 0
        while True:
            limit = self.page_size
            if self.max_records:
                remaining = self.max_records - offset
                if remaining <= 0:
                    return
                limit = min(limit, remaining)

            page = self._get_page(limit=limit, offset=offset)
            if page:
                yield page
            offset += len(page)
            logger.debug("Downloaded %s rows so far", offset)
            if len(page) < limit:
                return

    def _get_page(self, *, limit: int, offset: int) -> List[Dict[str, Any]]:
        params = {
            "$select": ",".join(SOURCE_FIELDS),
            "$order": ":id",
            "$limit": limit,
            "$offset": offset,
        }
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise OpenDataError(f"Request to {self.url} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise OpenDataError(f"Response from {self.url} is not valid JSON") from exc

        if not isinstance(data, list):
            raise OpenDataError(
                f"Expected a JSON array from {self.url}, got {type(data).__name__}"
            )
        if any(not isinstance(row, dict) for row in data):
            raise OpenDataError(f"Response from {self.url} contains non-object rows")
        return data
