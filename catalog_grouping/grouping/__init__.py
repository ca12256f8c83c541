"""
Fuzzy series grouping: title normalization, edit-distance scoring and clustering.

Everything in this package is pure (no I/O beyond reading the bundled suffix list).
"""

from __future__ import annotations

from catalog_grouping.grouping.distance import levenshtein_distance, similarity
from catalog_grouping.grouping.series import (
    STRATEGY_BASE_TITLE,
    STRATEGY_THRESHOLD,
    GroupingConfig,
    group_entries,
    is_same_series,
    within_threshold,
)
from catalog_grouping.grouping.titles import extract_base_title, load_continuation_suffixes, normalize_title

__all__ = [
    "STRATEGY_BASE_TITLE",
    "STRATEGY_THRESHOLD",
    "GroupingConfig",
    "extract_base_title",
    "group_entries",
    "is_same_series",
    "levenshtein_distance",
    "load_continuation_suffixes",
    "normalize_title",
    "similarity",
    "within_threshold",
]
