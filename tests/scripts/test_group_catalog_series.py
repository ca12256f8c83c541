from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

import scripts.group_catalog_series as mod

REPO_ROOT = Path(__file__).resolve().parents[2]
RAW_DUMP = REPO_ROOT / "tests" / "fixtures" / "jikan" / "raw_dump_sample.json"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mod, "load_env", lambda **kwargs: None)
    for name in (
        "SERIES_GROUPING_STRATEGY",
        "SERIES_GROUPING_THRESHOLD",
        "SERIES_CONTINUATION_SUFFIXES_FILE",
        "JIKAN_REQUEST_DELAY_MS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_group_existing_raw_dump_writes_grouped_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    raw = tmp_path / "characters_raw.json"
    shutil.copyfile(RAW_DUMP, raw)
    out = tmp_path / "characters_grouped.json"

    assert mod.main(["--input", str(raw), "--output", str(out)]) == 0

    grouped = json.loads(out.read_text(encoding="utf-8"))
    assert [g["canonical_title"] for g in grouped] == ["Shingeki no Kyojin", "Naruto", "Bleach"]
    assert grouped[0]["member_ids"] == [16498, 25777]
    assert grouped[1]["member_titles"] == ["Naruto", "Naruto: Shippuuden"]
    eren = [c for c in grouped[0]["items"] if c["id"] == 40882]
    assert len(eren) == 1
    assert eren[0]["image"] == "https://cdn.example.test/eren-s1.jpg"

    printed = capsys.readouterr().out
    assert "Group 1: Shingeki no Kyojin" in printed
    assert "Group 3" not in printed
    assert "Original entries: 5" in printed
    assert "Unique characters: 6" in printed


def test_dry_run_does_not_write(tmp_path: Path) -> None:
    out = tmp_path / "characters_grouped.json"

    mod.main(["--input", str(RAW_DUMP), "--output", str(out), "--dry-run"])

    assert not out.exists()


def test_threshold_strategy_from_cli(tmp_path: Path) -> None:
    out = tmp_path / "grouped.json"

    mod.main(["--input", str(RAW_DUMP), "--output", str(out), "--strategy", "threshold", "--threshold", "0.5"])

    grouped = json.loads(out.read_text(encoding="utf-8"))
    # "naruto" vs "naruto shippuuden" is too far apart for the threshold strategy.
    assert [g["member_ids"] for g in grouped] == [[16498, 25777], [20], [269], [1735]]


def test_invalid_threshold_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        mod.main(["--input", str(RAW_DUMP), "--output", str(tmp_path / "x.json"), "--threshold", "2"])


def test_fetch_mode_writes_raw_and_grouped_dumps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from catalog_grouping.ingestion.catalog_entries import load_catalog_entries

    entries = load_catalog_entries(RAW_DUMP)
    calls: list[dict] = []

    def _fake_collect(total, **kwargs):
        calls.append({"total": total, **kwargs})
        return entries

    monkeypatch.setattr(mod, "collect_catalog_entries", _fake_collect)
    monkeypatch.setenv("JIKAN_REQUEST_DELAY_MS", "250")
    raw = tmp_path / "raw.json"
    out = tmp_path / "grouped.json"

    mod.main(["--total", "5", "--raw-output", str(raw), "--output", str(out)])

    assert calls == [{"total": 5, "per_page": 25, "delay_seconds": 0.25}]
    assert json.loads(raw.read_text(encoding="utf-8")) == json.loads(RAW_DUMP.read_text(encoding="utf-8"))
    assert len(json.loads(out.read_text(encoding="utf-8"))) == 3
