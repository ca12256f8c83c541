from __future__ import annotations


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic edit distance (single-character insertions, deletions, substitutions).

    Case-sensitive and applied to the strings exactly as given. Uses the full
    dynamic-programming recurrence but only keeps two rows, iterating over the
    shorter string on the inner loop.
    """

    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Normalized dissimilarity score in [0, 1]: 0.0 is identical, 1.0 is completely different.

    Two empty strings score 1.0, not 0.0.
    """

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return levenshtein_distance(a, b) / longest
