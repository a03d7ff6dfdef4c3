"""Query strategies for reading the building collection.

Synopsis:
``StoreBuildingRepository`` asks the database on every call.
``MemoryBuildingRepository`` reads the whole collection once and answers from
that snapshot until the dataset load version changes or ``invalidate()`` is
called.

Glossary:
- Snapshot: Records plus a first-seen BIN index, held per process and tagged
  with the load version it was read under.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

from footprints.models import Building, DatasetLoad
from footprints.services import building_queries
from footprints.services.building_record import BuildingRecord, FieldTyping

logger = logging.getLogger(__name__)


class BuildingRepository(ABC):
    strategy = "abstract"

    def __init__(self, typing: FieldTyping):
        self.typing = FieldTyping.coerce(typing)

    @abstractmethod
    def all(self) -> List[BuildingRecord]:
        """All records in load order."""

    @abstractmethod
    def get(self, building_id: str) -> Optional[BuildingRecord]:
        """First record carrying the given BIN."""

    @abstractmethod
    def by_year(self, year_key: Any) -> List[BuildingRecord]:
        """Records whose year matches ``year_key`` under this repository's typing."""

    def invalidate(self) -> None:
        """Drop anything held between calls."""


class StoreBuildingRepository(BuildingRepository):
    strategy = "store"

    def _query(self):
        return Building.query.order_by(Building.id.asc())

    def all(self) -> List[BuildingRecord]:
        return [BuildingRecord.from_model(row) for row in self._query().all()]

    def get(self, building_id: str) -> Optional[BuildingRecord]:
        row = self._query().filter(Building.bin == building_id).first()
        return BuildingRecord.from_model(row) if row is not None else None

    def by_year(self, year_key: Any) -> List[BuildingRecord]:
        if self.typing is FieldTyping.NUMERIC:
            # Stored text may be "1925" or "1925.0"; match on the parsed value.
            return building_queries.filter_by_year(self.all(), year_key, self.typing)
        rows = self._query().filter(Building.construct_yr == year_key).all()
        return [BuildingRecord.from_model(row) for row in rows]


class MemoryBuildingRepository(BuildingRepository):
    strategy = "memory"

    def __init__(self, typing: FieldTyping):
        super().__init__(typing)
        self._lock = Lock()
        self._snapshot: Optional[Tuple[str, Tuple[BuildingRecord, ...], Dict[str, BuildingRecord]]] = None

    def _load(self) -> Tuple[Tuple[BuildingRecord, ...], Dict[str, BuildingRecord]]:
        version = DatasetLoad.load_version()
        snapshot = self._snapshot
        if snapshot is not None and snapshot[0] == version:
            return snapshot[1], snapshot[2]
        with self._lock:
            if self._snapshot is None or self._snapshot[0] != version:
                if self._snapshot is not None:
                    logger.info("Dataset load version changed to %s; reloading snapshot", version)
                rows = Building.query.order_by(Building.id.asc()).all()
                records = tuple(BuildingRecord.from_model(row) for row in rows)
                index: Dict[str, BuildingRecord] = {}
                for record in records:
                    index.setdefault(record.bin, record)
                self._snapshot = (version, records, index)
                logger.info("Loaded %s buildings into the in-memory snapshot", len(records))
            _, records, index = self._snapshot
            return records, index

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def all(self) -> List[BuildingRecord]:
        records, _ = self._load()
        return list(records)

    def get(self, building_id: str) -> Optional[BuildingRecord]:
        _, index = self._load()
        return index.get(building_id)

    def by_year(self, year_key: Any) -> List[BuildingRecord]:
        records, _ = self._load()
        return building_queries.filter_by_year(records, year_key, self.typing)

    def invalidate(self) -> None:
        with self._lock:
            if self._snapshot is not None:
                logger.info("Dropping in-memory building snapshot")
            self._snapshot = None


_REPOSITORIES = {
    StoreBuildingRepository.strategy: StoreBuildingRepository,
    MemoryBuildingRepository.strategy: MemoryBuildingRepository,
}


def build_repository(strategy: str, typing: FieldTyping | str) -> BuildingRepository:
    try:
        repository_cls = _REPOSITORIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown building query strategy {strategy!r}") from None
    return repository_cls(FieldTyping.coerce(typing))
