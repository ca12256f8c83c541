#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys

from catalog_grouping.grouping.series import STRATEGIES, STRATEGY_THRESHOLD, GroupingConfig, group_entries
from catalog_grouping.ingestion.catalog_entries import (
    collect_catalog_entries,
    load_catalog_entries,
    summarize_groups,
    write_json,
)
from catalog_grouping.utils.env import env_int, load_env


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="group_catalog_series.py",
        description="Fetch top anime and their characters from Jikan, then group titles of the same series.",
    )
    parser.add_argument("--total", type=int, default=200, help="Number of top anime to fetch (default: 200).")
    parser.add_argument("--per-page", type=int, default=25, help="Page size for /top/anime (max 25).")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Fixed delay in ms between Jikan requests (default: JIKAN_REQUEST_DELAY_MS or 1000).",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Group an existing raw dump instead of fetching from Jikan.",
    )
    parser.add_argument(
        "--raw-output",
        type=str,
        default="characters_raw.json",
        help="Where to write the fetched raw dump (default: characters_raw.json).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="characters_grouped.json",
        help="Where to write the grouped dump (default: characters_grouped.json).",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Series matching strategy (default: SERIES_GROUPING_STRATEGY or base_title).",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity threshold for the threshold strategy (default: SERIES_GROUPING_THRESHOLD or 0.5).",
    )
    parser.add_argument(
        "--suffixes-file",
        type=str,
        default=None,
        help="JSON/YAML continuation-suffix list overriding the bundled one.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print groups and stats without writing files.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def run_from_cli(args: argparse.Namespace) -> None:
    load_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = GroupingConfig.from_env(
            strategy=args.strategy,
            threshold=args.threshold,
            suffixes_file=args.suffixes_file,
        )
    except (ValueError, OSError) as exc:
        raise SystemExit(f"Invalid grouping configuration: {exc}") from exc

    if args.input:
        entries = load_catalog_entries(args.input)
        print(f"Loaded {len(entries)} entries from {args.input}.")
    else:
        delay_ms = args.delay_ms if args.delay_ms is not None else env_int("JIKAN_REQUEST_DELAY_MS", 1000)
        entries = collect_catalog_entries(
            max(0, int(args.total)),
            per_page=int(args.per_page),
            delay_seconds=max(0, delay_ms) / 1000.0,
        )
        print(f"Fetched {len(entries)} entries from Jikan.")
        if args.dry_run:
            print("Dry run: skipping raw dump.", file=sys.stderr)
        else:
            path = write_json(args.raw_output, [e.to_dict() for e in entries])
            print(f"Raw data written to {path}")

    if config.strategy == STRATEGY_THRESHOLD:
        print(f"Grouping with strategy={config.strategy} threshold={config.threshold}")
    else:
        print(f"Grouping with strategy={config.strategy}")
    groups = group_entries(entries, config)

    print("\n=== DETECTED GROUPS ===")
    for idx, group in enumerate(groups, start=1):
        if group.size < 2:
            continue
        print(f"\nGroup {idx}: {group.canonical_title}")
        for title in group.member_titles:
            print(f"  - {title}")
        print(f"  -> {len(group.items)} unique characters")

    if args.dry_run:
        print("\nDry run: skipping grouped dump.", file=sys.stderr)
    else:
        path = write_json(args.output, [g.to_dict() for g in groups])
        print(f"\nGrouped data written to {path}")

    stats = summarize_groups(entries, groups)
    print("\n=== STATS ===")
    print(f"Original entries: {stats.original_entries}")
    print(f"Groups created: {stats.groups}")
    print(f"Total characters: {stats.total_items}")
    print(f"Unique characters: {stats.unique_items}")


def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    run_from_cli(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(list(sys.argv[1:])))
