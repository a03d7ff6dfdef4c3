"""Building record type shared by the loader, repositories and queries.

Synopsis:
A ``BuildingRecord`` is the in-process form of one building row. It keeps the
source text untouched and derives numeric views on demand, so the same record
can be served with either field typing.

Glossary:
- Source fields: The JSON keys published by the open data endpoint.
- Field typing: ``string`` emits source text; ``numeric`` emits parsed numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from footprints.utils.parsing import clean_text, parse_float, parse_year

# Source JSON key -> record attribute.
SOURCE_FIELDS = {
    "bin": "bin",
    "cnstrct_yr": "construct_yr",
    "heightroof": "height_roof",
    "shape_area": "shape_area",
    "feat_code": "feat_code",
}


class FieldTyping(str, Enum):
    STRING = "string"
    NUMERIC = "numeric"

    @classmethod
    def coerce(cls, value: "FieldTyping | str") -> "FieldTyping":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class BuildingRecord:
    bin: str
    construct_yr: Optional[str] = None
    height_roof: Optional[str] = None
    shape_area: Optional[str] = None
    feat_code: Optional[str] = None

    @classmethod
    def from_source(cls, row: Mapping[str, Any]) -> Optional["BuildingRecord"]:
        """Flatten one source row. Rows without a BIN cannot be addressed and yield None."""
        values = {attr: clean_text(row.get(key)) for key, attr in SOURCE_FIELDS.items()}
        if not values["bin"]:
            return None
        return cls(**values)

    @classmethod
    def from_model(cls, building) -> "BuildingRecord":
        return cls(
            bin=building.bin,
            construct_yr=building.construct_yr,
            height_roof=building.height_roof,
            shape_area=building.shape_area,
            feat_code=building.feat_code,
        )

    def to_model_kwargs(self) -> Dict[str, Optional[str]]:
        return {attr: getattr(self, attr) for attr in SOURCE_FIELDS.values()}

    @property
    def year(self) -> Optional[int]:
        return parse_year(self.construct_yr)

    @property
    def height(self) -> Optional[float]:
        return parse_float(self.height_roof)

    @property
    def area(self) -> Optional[float]:
        return parse_float(self.shape_area)

    def year_key(self, typing: FieldTyping) -> Any:
        """Value used to match and group by construction year under a typing."""
        if typing is FieldTyping.NUMERIC:
            return self.year
        return self.construct_yr

    def to_payload(self, typing: FieldTyping) -> Dict[str, Any]:
        if typing is FieldTyping.NUMERIC:
            return {
                "bin": self.bin,
                "cnstrct_yr": self.year,
                "heightroof": self.height,
                "shape_area": self.area,
                "feat_code": self.feat_code,
            }
        return {key: getattr(self, attr) for key, attr in SOURCE_FIELDS.items()}
