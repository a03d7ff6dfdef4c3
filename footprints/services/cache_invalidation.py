from __future__ import annotations

from flask import has_app_context

from footprints.extensions import cache

__all__ = [
    "year_groups_cache_key",
    "building_stats_cache_key",
    "invalidate_building_aggregates",
]

# Keys carry the dataset load version, so a load made in another process
# moves readers onto fresh keys even though it never deletes theirs.
_YEAR_GROUPS_KEY = "aggregates:year_groups:v2:{typing}:{version}"
_STATS_KEY = "aggregates:stats:v2:{typing}:{version}"
_TYPINGS = ("string", "numeric")


def year_groups_cache_key(typing: str, version: str) -> str:
    return _YEAR_GROUPS_KEY.format(typing=typing, version=version)


def building_stats_cache_key(typing: str, version: str) -> str:
    return _STATS_KEY.format(typing=typing, version=version)


def _safe_delete(key: str) -> None:
    if not key or not has_app_context():
        return
    try:
        cache.delete(key)
    except Exception:
        # Cache invalidation should never raise downstream.
        pass


def invalidate_building_aggregates(version: str) -> None:
    for typing in _TYPINGS:
        _safe_delete(year_groups_cache_key(typing, version))
        _safe_delete(building_stats_cache_key(typing, version))
