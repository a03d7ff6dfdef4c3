"""Read-side filter, sort, group and reduce operations over building records.

Every function takes a fresh iterable of records and builds its result from
scratch; nothing is retained between calls. All scans are linear.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from footprints.services.building_record import BuildingRecord, FieldTyping
from footprints.utils.api_responses import InvalidQueryParameter
from footprints.utils.parsing import clean_text, parse_float, parse_year

logger = logging.getLogger(__name__)


@dataclass
class YearGroup:
    construct_yr: Any
    buildings: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.buildings)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "construct_yr": self.construct_yr,
            "count": self.count,
            "buildings": list(self.buildings),
        }


@dataclass
class BuildingStats:
    total_area: float
    avg_height: Optional[float]
    building_count: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "totalArea": self.total_area,
            "avgHeight": self.avg_height,
            "buildingCount": self.building_count,
        }


def parse_year_param(raw: Optional[str], typing: FieldTyping) -> Any:
    """Validate the ``year`` query parameter into the key used for matching."""
    text = clean_text(raw)
    if text is None:
        raise InvalidQueryParameter("year", "Query parameter 'year' is required")
    if typing is FieldTyping.NUMERIC:
        year = parse_year(text)
        if year is None:
            raise InvalidQueryParameter("year", f"Query parameter 'year' must be an integer, got {text!r}")
        return year
    return text


def parse_height_param(raw: Optional[str]) -> float:
    text = clean_text(raw)
    if text is None:
        raise InvalidQueryParameter("height", "Query parameter 'height' is required")
    height = parse_float(text)
    if height is None:
        raise InvalidQueryParameter("height", f"Query parameter 'height' must be a number, got {text!r}")
    return height


def filter_by_year(records: Iterable[BuildingRecord], year_key: Any, typing: FieldTyping) -> List[BuildingRecord]:
    return [record for record in records if record.year_key(typing) == year_key]


def filter_at_most_height(records: Iterable[BuildingRecord], max_height: float) -> List[BuildingRecord]:
    """Records no taller than ``max_height``, tallest first.

    Records without a usable height are left out. Ties keep load order.
    """
    matches = []
    for record in records:
        height = record.height
        if height is not None and height <= max_height:
            matches.append((height, record))
    matches.sort(key=lambda pair: pair[0], reverse=True)
    return [record for _, record in matches]


def _group_sort_key(group: YearGroup):
    value = group.construct_yr
    if value is None:
        return (2, 0, "")
    year = parse_year(value)
    if year is None:
        # Unparseable text years sort after real years, by text.
        return (1, 0, str(value))
    return (0, year, str(value))


def group_by_year(records: Iterable[BuildingRecord], typing: FieldTyping) -> List[YearGroup]:
    groups: Dict[Any, YearGroup] = {}
    for record in records:
        key = record.year_key(typing)
        group = groups.get(key)
        if group is None:
            group = groups[key] = YearGroup(construct_yr=key)
        group.buildings.append(record.bin)
    return sorted(groups.values(), key=_group_sort_key)


def summarize(records: Iterable[BuildingRecord]) -> BuildingStats:
    """Total area, average roof height and count over every record.

    Missing or unparseable areas and heights count as zero, so the average
    divides by the full building count. It is None only for an empty collection.
    """
    total_area = 0.0
    height_sum = 0.0
    missing_heights = 0
    count = 0
    for record in records:
        count += 1
        area = record.area
        if area is not None:
            total_area += area
        height = record.height
        if height is None:
            missing_heights += 1
        else:
            height_sum += height
    avg_height = height_sum / count if count else None
    if missing_heights:
        logger.debug("%s of %s buildings have no usable height; counted as zero", missing_heights, count)
    return BuildingStats(total_area=total_area, avg_height=avg_height, building_count=count)
