"""
Jikan (MyAnimeList) integration client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_grouping.integrations.jikan.client import (
        JikanClientError,
        fetch_anime_characters,
        fetch_top_anime,
    )

__all__ = [
    "JikanClientError",
    "fetch_anime_characters",
    "fetch_top_anime",
]


def __getattr__(name: str):
    if name in __all__:
        from catalog_grouping.integrations.jikan import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
