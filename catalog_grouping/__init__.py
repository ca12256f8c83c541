"""
Catalog series grouping library code.

This package holds the pure grouping engine (`catalog_grouping.grouping`) and the
collaborators around it (Jikan client, ingestion helpers, JSON dumps).

CLI entrypoints live in `scripts/` and import from `catalog_grouping` rather than
the other way around.
"""
