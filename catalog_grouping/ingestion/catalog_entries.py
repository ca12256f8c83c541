from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import requests

from catalog_grouping.integrations.jikan.client import JikanClientError, fetch_anime_characters, fetch_top_anime
from catalog_grouping.models.catalog import CatalogEntry, CatalogItem, SeriesGroup

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass(frozen=True)
class GroupingStats:
    original_entries: int
    groups: int
    total_items: int
    unique_items: int

    def to_dict(self) -> dict[str, int]:
        return {
            "original_entries": self.original_entries,
            "groups": self.groups,
            "total_items": self.total_items,
            "unique_items": self.unique_items,
        }


def _image_url(character: Mapping[str, Any]) -> str | None:
    images = character.get("images")
    if not isinstance(images, Mapping):
        return None
    jpg = images.get("jpg")
    if not isinstance(jpg, Mapping):
        return None
    url = jpg.get("image_url")
    return url if isinstance(url, str) and url else None


def build_catalog_item(payload: Mapping[str, Any]) -> CatalogItem:
    """
    Map one `/anime/{id}/characters` row (`{"character": {...}, "role": ...}`) to a `CatalogItem`.
    """

    character = payload.get("character")
    if not isinstance(character, Mapping):
        raise ValueError("Jikan character row is missing `character`.")
    role = payload.get("role")
    return CatalogItem(
        id=character["mal_id"],
        name=str(character.get("name") or ""),
        role=role if isinstance(role, str) and role else None,
        image=_image_url(character),
    )


def build_catalog_entry(anime: Mapping[str, Any], characters: Iterable[Mapping[str, Any]]) -> CatalogEntry:
    return CatalogEntry(
        id=anime["mal_id"],
        title=str(anime.get("title") or ""),
        items=tuple(build_catalog_item(c) for c in characters),
    )


def _log_progress(index: int, total: int, title: str) -> None:
    logger.info("[%s/%s] Fetching characters for: %s", index, total, title)


def collect_catalog_entries(
    total: int = 200,
    *,
    per_page: int = 25,
    delay_seconds: float = 1.0,
    session: requests.Session | None = None,
    base_url: str | None = None,
    progress: ProgressCallback | None = None,
) -> list[CatalogEntry]:
    """
    Fetch the top-anime listing and the character list for each title.

    A failing character lookup is logged and that title is skipped; a listing failure propagates.
    """

    session = session or requests.Session()
    progress = progress or _log_progress

    anime_list = fetch_top_anime(
        total,
        per_page=per_page,
        delay_seconds=delay_seconds,
        session=session,
        base_url=base_url,
    )
    logger.info("Fetched %s anime from the top listing", len(anime_list))

    entries: list[CatalogEntry] = []
    for index, anime in enumerate(anime_list, start=1):
        title = str(anime.get("title") or "")
        progress(index, len(anime_list), title)
        try:
            characters = fetch_anime_characters(anime["mal_id"], session=session, base_url=base_url)
            entries.append(build_catalog_entry(anime, characters))
        except (JikanClientError, KeyError, ValueError) as exc:
            logger.warning("Skipping %r: %s", title, exc)
        time.sleep(delay_seconds)

    return entries


def load_catalog_entries(path: str | Path) -> list[CatalogEntry]:
    raw = Path(path).read_text(encoding="utf-8")
    loaded = json.loads(raw)
    if not isinstance(loaded, list):
        raise ValueError(f"{path} must hold a JSON list of catalog entries.")
    return [CatalogEntry.from_mapping(row) for row in loaded]


def write_json(path: str | Path, payload: Any) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return out


def summarize_groups(entries: Iterable[CatalogEntry], groups: Iterable[SeriesGroup]) -> GroupingStats:
    entry_list = list(entries)
    group_list = list(groups)
    return GroupingStats(
        original_entries=len(entry_list),
        groups=len(group_list),
        total_items=sum(len(e.items) for e in entry_list),
        unique_items=sum(len(g.items) for g in group_list),
    )
