"""Building footprint persistence model.

Synopsis:
Stores one flattened building-footprint row per record exactly as the open
data source published it. Every attribute is kept as source text so the
string and numeric API typings can both be derived from the same row.

Glossary:
- BIN: Building Identification Number, the public identifier of a building.
- Load order: Primary-key order, which matches the order rows were extracted.
"""

from __future__ import annotations

from ..extensions import db


# --- Building model ---
# Purpose: Persist one building-footprint record from the bootstrap load.
# Inputs: Verbatim source values for BIN, year, roof height, area and type code.
# Outputs: Row in the "building" collection table.
class Building(db.Model):
    __tablename__ = "building"

    id = db.Column(db.Integer, primary_key=True)
    bin = db.Column(db.String(32), nullable=False, index=True)
    construct_yr = db.Column(db.String(16), nullable=True, index=True)
    height_roof = db.Column(db.String(32), nullable=True)
    shape_area = db.Column(db.String(64), nullable=True)
    feat_code = db.Column(db.String(16), nullable=True)

    def __repr__(self) -> str:
        return f"<Building {self.bin}>"
