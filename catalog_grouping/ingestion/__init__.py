"""
Ingestion helpers for building catalog entries and persisting JSON dumps.
"""

from catalog_grouping.ingestion.catalog_entries import (
    GroupingStats,
    build_catalog_entry,
    collect_catalog_entries,
    load_catalog_entries,
    summarize_groups,
    write_json,
)

__all__ = [
    "GroupingStats",
    "build_catalog_entry",
    "collect_catalog_entries",
    "load_catalog_entries",
    "summarize_groups",
    "write_json",
]
