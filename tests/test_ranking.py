import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure project root is on sys.path so `cookmate` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

from cookmate.normalize import (  # noqa: E402
    InvalidQuery,
    is_ingredient_match,
    normalize_pantry_terms,
    split_ingredient_param,
)
from cookmate.ranking import count_matches, rank  # noqa: E402


def ing(name, quantity="1"):
    return SimpleNamespace(name=name, quantity=quantity)


def recipe(rid, *names):
    return SimpleNamespace(id=rid, ingredients=[ing(n) for n in names])


def ids(ranked):
    return [r.recipe.id for r in ranked]


def test_tomato_cheese_scenario():
    a = SimpleNamespace(id="A", ingredients=[ing("Tomatoes", "2"),
                                             ing("Basil", "1 bunch")])
    b = SimpleNamespace(id="B", ingredients=[ing("Mozzarella Cheese", "200g"),
                                             ing("Tomato", "1")])
    ranked = rank(["Tomato", "cheese"], [a, b])
    assert ids(ranked) == ["B", "A"]
    assert [r.match_count for r in ranked] == [2, 1]
    # quantities are carried through untouched
    assert ranked[0].recipe.ingredients[0].quantity == "200g"


def test_zero_match_recipe_is_kept():
    ranked = rank(["xyz"], [recipe(1, "Flour", "Milk")])
    assert len(ranked) == 1
    assert ranked[0].match_count == 0


@pytest.mark.parametrize("terms", [[], [" ", ""], ["\t", "  \n"]])
def test_blank_terms_raise_invalid_query(terms):
    with pytest.raises(InvalidQuery):
        rank(terms, [recipe(1, "Flour")])


def test_invalid_query_even_without_candidates():
    with pytest.raises(InvalidQuery):
        rank([""], [])


def test_empty_candidates_give_empty_result():
    assert rank(["egg"], []) == []


def test_ties_keep_input_order():
    c = recipe("C", "Egg", "Flour")
    d = recipe("D", "Milk", "Eggplant")
    ranked = rank(["egg"], [c, d])
    assert ids(ranked) == ["C", "D"]
    assert [r.match_count for r in ranked] == [1, 1]


def test_stable_among_many_ties():
    candidates = [recipe(i, "Onion") if i % 2 else recipe(i, "Garlic", "Onion")
                  for i in range(6)]
    ranked = rank(["garlic", "onion"], candidates)
    assert ids(ranked) == [0, 2, 4, 1, 3, 5]


def test_rank_is_idempotent():
    candidates = [recipe(1, "Salt"), recipe(2, "Salted butter", "Sea salt"),
                  recipe(3, "Pepper")]
    first = rank(["SALT"], candidates)
    second = rank(["SALT"], candidates)
    assert first == second


def test_rank_does_not_mutate_candidates():
    r = recipe(1, "Tomato")
    rank(["tomato"], [r])
    assert not hasattr(r, "match_count")
    assert [i.name for i in r.ingredients] == ["Tomato"]


def test_adding_matching_ingredient_never_lowers_rank():
    a = recipe("A", "Rice")
    b = recipe("B", "Rice", "Beans")
    before = rank(["rice", "beans"], [a, b])
    assert ids(before) == ["B", "A"]
    a.ingredients.append(ing("Black beans"))
    a.ingredients.append(ing("Brown rice"))
    after = rank(["rice", "beans"], [a, b])
    assert ids(after) == ["A", "B"]
    assert after[0].match_count == 3


def test_ingredient_counted_once_for_several_terms():
    r = recipe(1, "Tomato and cheese sauce")
    assert rank(["tomato", "cheese", "sauce"], [r])[0].match_count == 1


def test_terms_are_trimmed_and_lowercased():
    r = recipe(1, "Red Onion")
    assert rank(["  ONION  "], [r])[0].match_count == 1


def test_substring_not_token_match():
    assert count_matches([ing("Pineapple")], ["apple"]) == 1
    assert count_matches([ing("Apple")], ["apples"]) == 0


def test_min_matches_filters_zero_match_recipes():
    candidates = [recipe(1, "Flour"), recipe(2, "Egg")]
    ranked = rank(["egg"], candidates, min_matches=1)
    assert ids(ranked) == [2]


def test_split_ingredient_param():
    assert split_ingredient_param("egg, flour ,milk") == ["egg", " flour ",
                                                          "milk"]
    assert split_ingredient_param("") == []
    assert split_ingredient_param(None) == []


def test_normalize_pantry_terms_drops_blanks():
    assert normalize_pantry_terms([" Egg", "", "  ", "MILK "]) == ["egg",
                                                                   "milk"]


def test_is_ingredient_match_ignores_empty_names():
    assert is_ingredient_match("", ["egg"]) is False
    assert is_ingredient_match("Duck Egg", ["egg"]) is True
