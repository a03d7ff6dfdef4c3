"""One-time extract-load of building records into the collection.

Synopsis:
Fetches building rows from the open data endpoint and inserts them, together
with a ``DatasetLoad`` marker, in a single transaction. The load is skipped
whenever the collection already has rows or a marker, so repeated starts are
no-ops. The marker's unique dataset key settles races between workers: the
loser's insert fails on that key and its transaction is rolled back.

Glossary:
- Bootstrap load: The gated one-time import described above.
- Forced reload: Operator-only path that clears the collection first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from footprints.extensions import db
from footprints.models import Building, DatasetLoad
from footprints.models.dataset_load import DATASET_KEY
from footprints.services.building_record import BuildingRecord
from footprints.services.open_data_client import OpenDataClient, OpenDataError

logger = logging.getLogger(__name__)


class BootstrapError(RuntimeError):
    """The bootstrap load could not complete."""


@dataclass
class BootstrapResult:
    loaded: bool
    reason: str
    record_count: int = 0
    skipped_count: int = 0

    def to_dict(self) -> dict:
        return {
            "loaded": self.loaded,
            "reason": self.reason,
            "record_count": self.record_count,
            "skipped_count": self.skipped_count,
        }


class BootstrapService:
    def __init__(
        self,
        client: OpenDataClient,
        *,
        dataset: str = DATASET_KEY,
        on_loaded: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.dataset = dataset
        self.on_loaded = on_loaded

    def is_loaded(self) -> bool:
        if DatasetLoad.query.filter_by(dataset=self.dataset).first() is not None:
            return True
        return db.session.query(Building.id).limit(1).first() is not None

    def run(self, force: bool = False) -> BootstrapResult:
        if not force and self.is_loaded():
            logger.info("Building collection already populated; skipping bootstrap load")
            return BootstrapResult(loaded=False, reason="already_loaded", record_count=Building.query.count())

        try:
            rows = self.client.fetch_buildings()
        except OpenDataError as exc:
            logger.error("Bootstrap extract failed: %s", exc)
            raise BootstrapError(str(exc)) from exc

        records, skipped = self._flatten(rows)
        if not records:
            logger.warning("Open data source returned no usable building rows; collection left empty")
            return BootstrapResult(loaded=False, reason="empty_source", skipped_count=skipped)

        try:
            if force:
                self._clear()
            db.session.add(DatasetLoad(
                dataset=self.dataset,
                source_url=self.client.url,
                record_count=len(records),
                skipped_count=skipped,
            ))
            db.session.execute(insert(Building), [record.to_model_kwargs() for record in records])
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info("Another worker completed the bootstrap load first; skipping")
            return BootstrapResult(loaded=False, reason="already_loaded", record_count=Building.query.count())
        except Exception:
            db.session.rollback()
            logger.exception("Bootstrap load failed while writing the collection")
            raise

        logger.info("Inserted %s buildings (%s rows skipped)", len(records), skipped)
        if self.on_loaded is not None:
            self.on_loaded()
        return BootstrapResult(loaded=True, reason="loaded", record_count=len(records), skipped_count=skipped)

    def _clear(self) -> None:
        deleted = Building.query.delete(synchronize_session=False)
        DatasetLoad.query.filter_by(dataset=self.dataset).delete(synchronize_session=False)
        logger.warning("Forced reload: removed %s existing buildings", deleted)

    @staticmethod
    def _flatten(rows) -> tuple[List[BuildingRecord], int]:
        records: List[BuildingRecord] = []
        skipped = 0
        for row in rows:
            record = BuildingRecord.from_source(row)
            if record is None:
                skipped += 1
                continue
            records.append(record)
        if skipped:
            logger.warning("Skipped %s source rows without a building identifier", skipped)
        return records, skipped
