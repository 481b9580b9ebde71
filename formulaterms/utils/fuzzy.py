from typing import Iterable, List


def levenshtein(a: str, b: str) -> int:
    """
    The Levenshtein (edit) distance between two strings.
    """
    if len(a) < len(b):
        return levenshtein(b, a)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a):
        current = [i + 1]
        for j, cb in enumerate(b):
            current.append(
                min(
                    previous[j + 1] + 1,
                    current[j] + 1,
                    previous[j] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def fuzzy_match(
    name: str, candidates: Iterable[str], max_distance: int = 8, limit: int = 3
) -> List[str]:
    """
    Return the candidates closest to `name`, nearest first.

    Distances are computed case-insensitively, and candidates at the same
    distance are ordered by name. Every candidate within `max_distance` is
    considered, but at most `limit` of them are returned.

    Args:
        name: The name that could not be found.
        candidates: The names that are available.
        max_distance: The largest edit distance for which suggestions are
            still offered.
        limit: The maximum number of suggestions.
    """
    distances = sorted(
        (levenshtein(name.upper(), str(candidate).upper()), str(candidate))
        for candidate in candidates
    )
    return [
        candidate for distance, candidate in distances if distance <= max_distance
    ][:limit]


def format_suggestions(name: str, candidates: Iterable[str]) -> str:
    """
    Build the message used when `name` is not among `candidates`.
    """
    suggestions = fuzzy_match(name, candidates)
    message = f"There isn't a variable called '{name}' in your data"
    if suggestions:
        message += "; the nearest names appear to be: " + ", ".join(suggestions)
    return message
