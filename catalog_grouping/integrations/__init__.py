"""
External system integrations (Jikan, etc.).

New external catalog clients should live under this namespace so they remain
decoupled from the grouping engine and from pipeline scripts (`scripts/`).
"""
