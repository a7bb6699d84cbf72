"""
"Did you mean ...?" support for unknown command names.
"""
import functools

THRESHOLD = 3


@functools.cache
def distance(source, target, /):
    """
    Levenshtein edit distance between two strings (insert, delete, substitute cost 1).
    """
    if len(source) < len(target):
        source, target = target, source
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for row, char in enumerate(source, 1):
        current = [row]
        for column, other in enumerate(target, 1):
            current.append(min(
                previous[column] + 1,
                current[column - 1] + 1,
                previous[column - 1] + (char != other),
            ))
        previous = current
    return previous[-1]


def suggest(name, candidates, /, threshold=THRESHOLD):
    """
    Return the candidates within `threshold` edits of `name`, closest first.

    Ties keep the iteration order of `candidates`; duplicates are reported once.
    """
    if not isinstance(name, str):
        raise TypeError("suggest() first argument must be a string")
    scored = []
    seen = set()
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        if (score := distance(name, candidate)) <= threshold:
            scored.append((score, candidate))
    scored.sort(key=lambda item: item[0])
    return [candidate for _, candidate in scored]


__all__ = (
    "distance",
    "suggest",
)
