from __future__ import annotations

import json
from pathlib import Path

import pytest

from catalog_grouping.grouping.series import group_entries
from catalog_grouping.ingestion import catalog_entries as mod
from catalog_grouping.integrations.jikan.client import JikanClientError
from catalog_grouping.models.catalog import CatalogEntry, CatalogItem

REPO_ROOT = Path(__file__).resolve().parents[2]
FIXTURES = REPO_ROOT / "tests" / "fixtures" / "jikan"


def test_build_catalog_entry_from_jikan_payloads() -> None:
    payload = json.loads((FIXTURES / "anime_characters_sample.json").read_text(encoding="utf-8"))

    entry = mod.build_catalog_entry({"mal_id": 16498, "title": "Shingeki no Kyojin"}, payload["data"])

    assert entry.id == 16498
    assert entry.title == "Shingeki no Kyojin"
    assert [item.id for item in entry.items] == [40881, 40882, 46494]
    mikasa = entry.items[0]
    assert mikasa.name == "Ackerman, Mikasa"
    assert mikasa.role == "Main"
    assert mikasa.image == "https://cdn.myanimelist.net/images/characters/9/215563.jpg"
    assert entry.items[2].role == "Supporting"
    assert entry.items[2].image is None


def test_collect_catalog_entries_skips_failed_lookups(monkeypatch: pytest.MonkeyPatch) -> None:
    anime = [
        {"mal_id": 1, "title": "Cowboy Bebop"},
        {"mal_id": 2, "title": "Broken Anime"},
        {"mal_id": 3, "title": "Trigun"},
    ]
    characters = {
        1: [{"character": {"mal_id": 1, "name": "Spiegel, Spike", "images": {}}, "role": "Main"}],
        3: [{"character": {"mal_id": 162, "name": "Vash", "images": {}}, "role": "Main"}],
    }

    def _fake_characters(mal_id, **kwargs):
        if mal_id not in characters:
            raise JikanClientError("Jikan request failed with HTTP 500.", status_code=500)
        return characters[mal_id]

    top_calls: list[dict] = []

    def _fake_top(total, **kwargs):
        top_calls.append({"total": total, **kwargs})
        return anime

    sleeps: list[float] = []
    monkeypatch.setattr(mod, "fetch_top_anime", _fake_top)
    monkeypatch.setattr(mod, "fetch_anime_characters", _fake_characters)
    monkeypatch.setattr(mod.time, "sleep", lambda seconds: sleeps.append(seconds))

    seen: list[tuple[int, int, str]] = []
    entries = mod.collect_catalog_entries(
        3,
        per_page=25,
        delay_seconds=0.5,
        session=object(),
        progress=lambda i, n, title: seen.append((i, n, title)),
    )

    assert [e.id for e in entries] == [1, 3]
    assert entries[1].items[0].name == "Vash"
    assert top_calls[0]["total"] == 3
    assert top_calls[0]["delay_seconds"] == 0.5
    assert seen == [(1, 3, "Cowboy Bebop"), (2, 3, "Broken Anime"), (3, 3, "Trigun")]
    assert sleeps == [0.5, 0.5, 0.5]


def test_collect_catalog_entries_propagates_listing_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _failing_top(total, **kwargs):
        raise JikanClientError("Jikan request failed with HTTP 503.", status_code=503)

    monkeypatch.setattr(mod, "fetch_top_anime", _failing_top)

    with pytest.raises(JikanClientError):
        mod.collect_catalog_entries(25, session=object())


def test_raw_dump_is_readable_by_load_catalog_entries(tmp_path: Path) -> None:
    entries = [
        CatalogEntry(id=1, title="Cowboy Bebop", items=(CatalogItem(id=1, name="Spike", role="Main"),)),
        CatalogEntry(id=5, title="Cowboy Bebop: Tengoku no Tobira"),
    ]

    path = mod.write_json(tmp_path / "out" / "characters_raw.json", [e.to_dict() for e in entries])

    assert path.is_file()
    assert json.loads(path.read_text(encoding="utf-8"))[0]["anime_title"] == "Cowboy Bebop"
    assert mod.load_catalog_entries(path) == entries


def test_load_catalog_entries_rejects_non_list(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"data": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        mod.load_catalog_entries(path)


def test_summarize_groups_counts_unique_items() -> None:
    entries = mod.load_catalog_entries(FIXTURES / "raw_dump_sample.json")
    groups = group_entries(entries)

    stats = mod.summarize_groups(entries, groups)

    assert stats.to_dict() == {
        "original_entries": 5,
        "groups": 3,
        "total_items": 8,
        "unique_items": 6,
    }
