from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable, Sequence

DEFAULT_SUFFIXES_PATH = Path(__file__).with_name("continuation_suffixes.json")

# Light normalization
_LIGHT_SEPARATORS_RE = re.compile(r"[:\-–—()\[\]]")
_LIGHT_MARKER_RE = re.compile(
    r"\b(?:season|part|cour|movie|film|ova|ona|oad|specials?|final|gekijouban|theatrical)(?:\s*\d+)?\b"
)
_ORDINAL_NUMBER_RE = re.compile(r"\b\d+(?:st|nd|rd|th)?\b")
_WHITESPACE_RE = re.compile(r"\s+")

# Base-title extraction
_SUBTITLE_RE = re.compile(r"\s*:(?:\s.*)?$|\s+[-–—]+\s.*$")
_BASE_PUNCT_RE = re.compile(r"[!?()\[\]]")
_BASE_SEPARATORS_RE = re.compile(r"[:\-–—]")
_SEASON_RE = re.compile(r"\b(?:(?:the\s+)?final\s+season|season\s*(?:\d+|[ivx]+)|s\d+)\b")
_PART_RE = re.compile(r"\b(?:part|cour)\s*\d+\b")
_ORDINAL_MARKER_RE = re.compile(r"\b\d+(?:st|nd|rd|th)\b(?:\s*(?:season|part|cour)\b)?")
_MEDIA_TYPE_RE = re.compile(r"\b(?:movie|film|ova|ona|special|tv|gekijouban)(?:\s*\d+)?\b")
_STANDALONE_DIGITS_RE = re.compile(r"\b\d+\b")
_TRAILING_QUOTES_RE = re.compile(r"['’′`]+$")
_PHRASE_SPLIT_RE = re.compile(r"[\s\-–—]+")

_SUFFIX_PATTERN_CACHE: dict[tuple[str, ...], re.Pattern[str] | None] = {}
_DEFAULT_SUFFIXES: tuple[str, ...] | None = None


def _collapse(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def normalize_title(title: str) -> str:
    """
    Light normalization: lowercase, separators to spaces, release markers and numbers removed.

    Subtitle wording is kept, e.g. "Attack on Titan: The Final Season" -> "attack on titan the".
    """

    normalized = title.lower()
    normalized = _LIGHT_SEPARATORS_RE.sub(" ", normalized)
    normalized = _LIGHT_MARKER_RE.sub(" ", normalized)
    normalized = _ORDINAL_NUMBER_RE.sub(" ", normalized)
    return _collapse(normalized)


def _coerce_suffixes(values: Iterable[Any]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        phrase = _collapse(value.lower())
        if not phrase or phrase in seen:
            continue
        seen.add(phrase)
        out.append(phrase)
    return tuple(out)


def load_continuation_suffixes(path: str | Path | None = None) -> tuple[str, ...]:
    """
    Load the continuation-suffix allow-list.

    Without `path` this reads the bundled `continuation_suffixes.json`. A custom file may be
    JSON or YAML and hold either a list of phrases or an object with a
    `continuation_suffixes` list.
    """

    global _DEFAULT_SUFFIXES

    if path is None and _DEFAULT_SUFFIXES is not None:
        return _DEFAULT_SUFFIXES

    source = Path(path) if path is not None else DEFAULT_SUFFIXES_PATH
    raw = source.read_text(encoding="utf-8")
    if source.suffix.lower() in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise RuntimeError("YAML suffix files require `pyyaml` to be installed.") from exc
        loaded = yaml.safe_load(raw)
    else:
        loaded = json.loads(raw)

    if isinstance(loaded, dict):
        loaded = loaded.get("continuation_suffixes")
    if not isinstance(loaded, list):
        raise ValueError(f"{source} must hold a list of suffix phrases.")

    suffixes = _coerce_suffixes(loaded)
    if path is None:
        _DEFAULT_SUFFIXES = suffixes
    return suffixes


def _suffix_pattern(suffixes: tuple[str, ...]) -> re.Pattern[str] | None:
    if suffixes in _SUFFIX_PATTERN_CACHE:
        return _SUFFIX_PATTERN_CACHE[suffixes]

    alternatives = []
    # Longest phrases first so "final chapter" wins over "final".
    for phrase in sorted(suffixes, key=len, reverse=True):
        words = [w for w in _PHRASE_SPLIT_RE.split(phrase) if w]
        if words:
            alternatives.append(r"\s+".join(re.escape(w) for w in words))

    pattern = re.compile(r"(?<=\S)\s+(?:" + "|".join(alternatives) + r")$") if alternatives else None
    _SUFFIX_PATTERN_CACHE[suffixes] = pattern
    return pattern


def _reduce_base_once(title: str, suffix_re: re.Pattern[str] | None) -> str:
    base = title.lower()
    base = _SUBTITLE_RE.sub("", base)
    base = _BASE_PUNCT_RE.sub(" ", base)
    base = _BASE_SEPARATORS_RE.sub(" ", base)
    base = _SEASON_RE.sub(" ", base)
    base = _PART_RE.sub(" ", base)
    base = _ORDINAL_MARKER_RE.sub(" ", base)
    base = _MEDIA_TYPE_RE.sub(" ", base)
    base = _STANDALONE_DIGITS_RE.sub(" ", base)
    base = _TRAILING_QUOTES_RE.sub("", _collapse(base))
    if suffix_re is not None:
        base = suffix_re.sub("", base)
    return _collapse(base)


def extract_base_title(title: str, suffixes: Sequence[str] | None = None) -> str:
    """
    Aggressive reduction to the root series name.

    Drops the subtitle (after ": " or a spaced dash), season/part/ordinal/media markers,
    standalone numbers, `!?()[]`, trailing apostrophes and any allow-listed continuation
    suffix ending the title. The reduction is repeated until the string stops changing.
    """

    phrases = load_continuation_suffixes() if suffixes is None else _coerce_suffixes(suffixes)
    suffix_re = _suffix_pattern(phrases)

    base = title
    while True:
        reduced = _reduce_base_once(base, suffix_re)
        if reduced == base:
            return reduced
        base = reduced
