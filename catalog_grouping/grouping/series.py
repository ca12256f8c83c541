from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from catalog_grouping.grouping.distance import similarity
from catalog_grouping.grouping.titles import extract_base_title, load_continuation_suffixes, normalize_title
from catalog_grouping.models.catalog import CatalogEntry, CatalogItem, SeriesGroup
from catalog_grouping.utils.env import env_float, env_str

STRATEGY_BASE_TITLE = "base_title"
STRATEGY_THRESHOLD = "threshold"
STRATEGIES = (STRATEGY_BASE_TITLE, STRATEGY_THRESHOLD)

DEFAULT_THRESHOLD = 0.5
BASE_MIN_LENGTH = 3
BASE_SIMILARITY_CUTOFF = 0.2

SeriesMatcher = Callable[[str, str], bool]


def is_same_series(title1: str, title2: str, *, suffixes: Iterable[str] | None = None) -> bool:
    """
    Base-title strategy: compare the most reduced forms, then fall back to containment.

    Short bases (< 3 chars) only match exactly. Bases with similarity < 0.2 match. Otherwise the
    titles match when a base longer than 3 chars is contained in both light-normalized titles
    (e.g. "gintama" in "gintama enchousen").
    """

    suffix_list = None if suffixes is None else tuple(suffixes)
    base1 = extract_base_title(title1, suffix_list)
    base2 = extract_base_title(title2, suffix_list)

    if len(base1) < BASE_MIN_LENGTH or len(base2) < BASE_MIN_LENGTH:
        return base1 == base2

    if similarity(base1, base2) < BASE_SIMILARITY_CUTOFF:
        return True

    norm1 = normalize_title(title1)
    norm2 = normalize_title(title2)
    for base in (base1, base2):
        if len(base) > BASE_MIN_LENGTH and base in norm1 and base in norm2:
            return True
    return False


def within_threshold(title1: str, title2: str, *, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """
    Threshold strategy: light-normalize both titles and compare their similarity score directly.
    """

    return similarity(normalize_title(title1), normalize_title(title2)) <= threshold


@dataclass(frozen=True)
class GroupingConfig:
    strategy: str = STRATEGY_BASE_TITLE
    threshold: float = DEFAULT_THRESHOLD
    continuation_suffixes: tuple[str, ...] = field(default_factory=load_continuation_suffixes)

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown grouping strategy {self.strategy!r}; expected one of {', '.join(STRATEGIES)}.")
        if not 0.0 <= float(self.threshold) <= 1.0:
            raise ValueError(f"Grouping threshold must be within [0, 1], got {self.threshold!r}.")

    @classmethod
    def from_env(
        cls,
        *,
        strategy: str | None = None,
        threshold: float | None = None,
        suffixes_file: str | Path | None = None,
    ) -> "GroupingConfig":
        """
        Build a config from explicit values, falling back to `SERIES_GROUPING_*` env vars.
        """

        resolved_strategy = strategy or env_str("SERIES_GROUPING_STRATEGY", STRATEGY_BASE_TITLE)
        if threshold is None:
            threshold = env_float("SERIES_GROUPING_THRESHOLD", DEFAULT_THRESHOLD)
        resolved_file = suffixes_file or env_str("SERIES_CONTINUATION_SUFFIXES_FILE")
        return cls(
            strategy=str(resolved_strategy),
            threshold=float(threshold),
            continuation_suffixes=load_continuation_suffixes(resolved_file),
        )

    def matcher(self) -> SeriesMatcher:
        if self.strategy == STRATEGY_THRESHOLD:
            threshold = float(self.threshold)
            return lambda a, b: within_threshold(a, b, threshold=threshold)
        suffixes = self.continuation_suffixes
        return lambda a, b: is_same_series(a, b, suffixes=suffixes)


def _as_entry(value: CatalogEntry | Mapping[str, Any]) -> CatalogEntry:
    if isinstance(value, CatalogEntry):
        return value
    return CatalogEntry.from_mapping(value)


def group_entries(
    entries: Iterable[CatalogEntry | Mapping[str, Any]],
    config: GroupingConfig | None = None,
) -> list[SeriesGroup]:
    """
    Partition catalog entries into series groups.

    Greedy and seed-anchored: each unassigned entry opens a group, and every later unassigned
    entry is compared against that seed's title only (never against titles added to the group
    afterwards, so matching is not transitive). Items are merged by id, first seen wins.

    This is O(n^2) pairwise comparisons; fine for catalogs in the hundreds, not for very large
    inputs.
    """

    entry_list = [_as_entry(e) for e in entries]
    matches = (config or GroupingConfig()).matcher()

    groups: list[SeriesGroup] = []
    processed: set[int] = set()

    for i, seed in enumerate(entry_list):
        if i in processed:
            continue
        processed.add(i)

        member_ids = [seed.id]
        member_titles = [seed.title]
        items: dict[Any, CatalogItem] = {}
        for item in seed.items:
            items.setdefault(item.id, item)

        for j in range(i + 1, len(entry_list)):
            if j in processed:
                continue
            candidate = entry_list[j]
            if not matches(seed.title, candidate.title):
                continue
            member_ids.append(candidate.id)
            member_titles.append(candidate.title)
            for item in candidate.items:
                items.setdefault(item.id, item)
            processed.add(j)

        groups.append(
            SeriesGroup(
                canonical_title=seed.title,
                member_ids=tuple(member_ids),
                member_titles=tuple(member_titles),
                items=tuple(items.values()),
            )
        )

    return groups
