from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from flask import Flask, current_app

from footprints.extensions import cache
from footprints.models import DatasetLoad
from footprints.services import building_queries
from footprints.services.bootstrap_service import BootstrapResult, BootstrapService
from footprints.services.building_record import FieldTyping
from footprints.services.building_repository import BuildingRepository, build_repository
from footprints.services.cache_invalidation import (
    building_stats_cache_key,
    invalidate_building_aggregates,
    year_groups_cache_key,
)
from footprints.services.open_data_client import OpenDataClient
from footprints.utils.api_responses import BuildingNotFound, InvalidQueryParameter
from footprints.utils.parsing import clean_text

logger = logging.getLogger(__name__)

_EXTENSION_KEY = "building_service"


class BuildingService:
    """Read-side operations rendered with the configured field typing."""

    def __init__(self, repository: BuildingRepository):
        self.repository = repository
        self.typing = repository.typing

    def _payloads(self, records) -> List[Dict[str, Any]]:
        return [record.to_payload(self.typing) for record in records]

    def list_buildings(self) -> List[Dict[str, Any]]:
        return self._payloads(self.repository.all())

    def get_building(self, raw_id: Optional[str]) -> Dict[str, Any]:
        building_id = clean_text(raw_id)
        if building_id is None:
            raise InvalidQueryParameter("id", "Query parameter 'id' is required")
        record = self.repository.get(building_id)
        if record is None:
            raise BuildingNotFound(building_id)
        return record.to_payload(self.typing)

    def buildings_by_year(self, raw_year: Optional[str]) -> List[Dict[str, Any]]:
        year_key = building_queries.parse_year_param(raw_year, self.typing)
        return self._payloads(self.repository.by_year(year_key))

    def buildings_at_most_height(self, raw_height: Optional[str]) -> List[Dict[str, Any]]:
        max_height = building_queries.parse_height_param(raw_height)
        records = building_queries.filter_at_most_height(self.repository.all(), max_height)
        return self._payloads(records)

    def year_groups(self) -> List[Dict[str, Any]]:
        key = year_groups_cache_key(self.typing.value, DatasetLoad.load_version())
        cached = cache.get(key)
        if cached is not None:
            return cached
        groups = building_queries.group_by_year(self.repository.all(), self.typing)
        payload = [group.to_payload() for group in groups]
        cache.set(key, payload)
        return payload

    def stats(self) -> Dict[str, Any]:
        key = building_stats_cache_key(self.typing.value, DatasetLoad.load_version())
        cached = cache.get(key)
        if cached is not None:
            return cached
        payload = building_queries.summarize(self.repository.all()).to_payload()
        cache.set(key, payload)
        return payload

    def invalidate(self) -> None:
        self.repository.invalidate()
        invalidate_building_aggregates(DatasetLoad.load_version())


def init_building_service(app: Flask) -> BuildingService:
    repository = build_repository(
        app.config.get("BUILDING_QUERY_STRATEGY", "store"),
        FieldTyping.coerce(app.config.get("BUILDING_FIELD_TYPING", "string")),
    )
    service = BuildingService(repository)
    app.extensions[_EXTENSION_KEY] = service
    logger.info(
        "Building reads use the %s strategy with %s field typing",
        repository.strategy,
        service.typing.value,
    )
    return service


def get_building_service() -> BuildingService:
    return current_app.extensions[_EXTENSION_KEY]


def build_bootstrap_service() -> BootstrapService:
    client = OpenDataClient.from_config(current_app.config)
    return BootstrapService(client, on_loaded=get_building_service().invalidate)


def run_bootstrap(force: bool = False) -> BootstrapResult:
    """Run the gated bootstrap load inside the active app context."""
    result = build_bootstrap_service().run(force=force)
    logger.info("Bootstrap finished: %s", result.to_dict())
    return result
