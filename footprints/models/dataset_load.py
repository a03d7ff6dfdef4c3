"""Bootstrap load marker.

A row here means the named dataset has been extracted and loaded. The unique
dataset key is what keeps two workers from both loading the collection.
Readers compare ``load_version`` against what they cached so a load made by
another process (the CLI, another worker) is picked up on the next request.
"""

from __future__ import annotations

from datetime import datetime

from ..extensions import db

DATASET_KEY = "nyc-building-footprints"
NO_LOAD_VERSION = "none"


class DatasetLoad(db.Model):
    __tablename__ = "dataset_load"

    id = db.Column(db.Integer, primary_key=True)
    dataset = db.Column(db.String(64), unique=True, nullable=False)
    source_url = db.Column(db.String(512), nullable=False)
    record_count = db.Column(db.Integer, nullable=False, default=0)
    skipped_count = db.Column(db.Integer, nullable=False, default=0)
    loaded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @classmethod
    def load_version(cls, dataset: str = DATASET_KEY) -> str:
        """Token that changes whenever the dataset is loaded or reloaded."""
        row = (
            db.session.query(cls.id, cls.loaded_at, cls.record_count)
            .filter(cls.dataset == dataset)
            .first()
        )
        if row is None:
            return NO_LOAD_VERSION
        loaded_at = row.loaded_at.isoformat() if row.loaded_at else ""
        return f"{row.id}:{loaded_at}:{row.record_count}"

    def to_dict(self) -> dict:
        return {
            "dataset": self.dataset,
            "source_url": self.source_url,
            "record_count": self.record_count,
            "skipped_count": self.skipped_count,
            "loaded_at": self.loaded_at.isoformat() if self.loaded_at else None,
        }

    def __repr__(self) -> str:
        return f"<DatasetLoad {self.dataset} records={self.record_count}>"
