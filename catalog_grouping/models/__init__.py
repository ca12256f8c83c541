"""
Domain models shared across the grouping engine, ingestion and scripts.
"""

from catalog_grouping.models.catalog import CatalogEntry, CatalogItem, SeriesGroup

__all__ = [
    "CatalogEntry",
    "CatalogItem",
    "SeriesGroup",
]
