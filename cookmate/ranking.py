"""Rank recipes by how many of their ingredients match a pantry list.

Candidates can be ORM rows or any object with an ``ingredients`` sequence
whose items have a ``name``. Nothing here touches the database or mutates
the candidates; ``match_count`` only exists on the returned view.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

from .normalize import InvalidQuery, is_ingredient_match, normalize_pantry_terms

__all__ = ["InvalidQuery", "RankedRecipe", "count_matches", "rank"]


@dataclass(frozen=True)
class RankedRecipe:
    recipe: Any
    match_count: int


def count_matches(ingredients: Iterable[Any], terms: Sequence[str]) -> int:
    """Count ingredients whose name contains at least one of ``terms``.

    An ingredient contributes once, however many terms it contains.
    """
    return sum(1 for ing in ingredients if is_ingredient_match(ing.name, terms))


def rank(
    pantry_terms: Iterable[str],
    candidates: Iterable[Any],
    min_matches: int = 0,
) -> List[RankedRecipe]:
    """Order ``candidates`` by descending match count.

    Ties keep their input order. Recipes with no matching ingredient are
    kept unless ``min_matches`` is raised above zero.

    Raises:
        InvalidQuery: if ``pantry_terms`` is empty or only blanks.
    """
    terms = normalize_pantry_terms(pantry_terms)
    ranked = [
        RankedRecipe(recipe=c, match_count=count_matches(c.ingredients, terms))
        for c in candidates
    ]
    if min_matches > 0:
        ranked = [r for r in ranked if r.match_count >= min_matches]
    # list.sort is stable
    ranked.sort(key=lambda r: r.match_count, reverse=True)
    return ranked
