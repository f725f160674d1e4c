# No fuzzy matching: case-insensitive substring containment only
from typing import Iterable, List


class InvalidQuery(ValueError):
    """The pantry list is empty once blank entries are dropped."""


def normalize_term(s: str) -> str:
    if not s:
        return ""
    return s.strip().lower()


def split_ingredient_param(raw: str | None) -> List[str]:
    """Split a comma-separated ``ingredients`` query parameter.

    Entries are returned as given; normalization happens later.
    """
    if not raw:
        return []
    return raw.split(",")


def normalize_pantry_terms(terms: Iterable[str]) -> List[str]:
    """Trim and lower-case each term, dropping blanks.

    Order is kept and duplicates are harmless, since an ingredient counts
    once however many terms it contains. Raises InvalidQuery if nothing is
    left.
    """
    normalized = [normalize_term(t) for t in terms if t is not None]
    normalized = [t for t in normalized if t]
    if not normalized:
        raise InvalidQuery("Ingredients parameter is required")
    return normalized


def is_ingredient_match(recipe_ing: str, terms: Iterable[str]) -> bool:
    """Return True if the recipe ingredient name contains any pantry term.

    ``terms`` must already be normalized.
    """
    name = (recipe_ing or "").lower()
    if not name:
        return False
    return any(t in name for t in terms)
