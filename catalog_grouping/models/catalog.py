from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _nonempty_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class CatalogItem:
    """
    Sub-entity attached to a catalog entry (a character, for anime).

    `id` is shared across entries of the same series, which is what lets grouped
    output dedupe characters across seasons.
    """

    id: int | str
    name: str
    role: str | None = None
    image: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CatalogItem":
        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            role=_nonempty_str(data.get("role")),
            image=_nonempty_str(data.get("image")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "image": self.image,
        }


@dataclass(frozen=True)
class CatalogEntry:
    """
    One catalog record as fetched (title + ordered item list).

    `from_mapping` accepts both the neutral layout (`id`, `title`, `items`) and the
    raw dump layout (`anime_id`, `anime_title`, `characters`).
    """

    id: int | str
    title: str
    items: tuple[CatalogItem, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CatalogEntry":
        entry_id = data["id"] if "id" in data else data["anime_id"]
        title = data["title"] if "title" in data else data["anime_title"]
        if not isinstance(title, str):
            raise TypeError(f"Catalog entry {entry_id!r} has a non-string title: {title!r}")

        raw_items = data.get("items")
        if raw_items is None:
            raw_items = data.get("characters") or []
        items = tuple(
            item if isinstance(item, CatalogItem) else CatalogItem.from_mapping(item) for item in raw_items
        )
        return cls(id=entry_id, title=title, items=items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "anime_id": self.id,
            "anime_title": self.title,
            "characters": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class SeriesGroup:
    canonical_title: str
    member_ids: tuple[int | str, ...]
    member_titles: tuple[str, ...]
    items: tuple[CatalogItem, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.member_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonical_title": self.canonical_title,
            "member_ids": list(self.member_ids),
            "member_titles": list(self.member_titles),
            "items": [item.to_dict() for item in self.items],
        }
