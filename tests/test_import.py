# flake8: noqa
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path so `cookmate` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

from cookmate import crud, models
from cookmate.db import install_sqlite_lower
from cookmate.recipes import load_recipes, validate_recipes
from scripts.import_data import import_recipes

DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "recipes.json"


def make_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    install_sqlite_lower(engine)
    models.Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def test_load_missing_file(tmp_path):
    assert load_recipes(tmp_path / "nope.json") == []


def test_validate_skips_malformed_entries():
    raw = [
        {"title": "Good", "description": "ok", "cooking_time": 5,
         "category": "Misc", "author": "dana",
         "ingredients": [{"name": "Egg", "quantity": "1"}]},
        {"title": "No name", "description": "bad", "cooking_time": 5,
         "category": "Misc",
         "ingredients": [{"name": " ", "quantity": "1"}]},
        {"title": "No ingredients", "description": "bad", "cooking_time": 5,
         "category": "Misc", "ingredients": []},
    ]
    valid = validate_recipes(raw)
    assert [(a, r.title) for a, r in valid] == [("dana", "Good")]


def test_import_bundled_seed_data():
    db = make_session()
    try:
        expected = len(load_recipes(DATA_FILE))
        assert import_recipes(db, DATA_FILE) == expected
        # second run skips titles already present
        assert import_recipes(db, DATA_FILE) == 0

        ranked = crud.search_by_ingredients(db, ["Tomato", "cheese"],
                                            prefilter=True, min_matches=0)
        assert ranked[0].recipe.title == "Caprese Salad"
        assert ranked[0].match_count == 2
        assert ranked[1].recipe.title == "Tomato Egg Stir-Fry"
        assert ranked[1].match_count == 1
    finally:
        db.close()


def test_import_custom_file(tmp_path):
    p = tmp_path / "seed.json"
    p.write_text(json.dumps([
        {"title": "Toast", "description": "Bread, toasted.",
         "cooking_time": 3, "category": "Breakfast",
         "ingredients": [{"name": "Bread", "quantity": "2 slices"}]},
    ]), encoding="utf-8")
    db = make_session()
    try:
        assert import_recipes(db, p) == 1
        recipe = db.query(models.Recipe).one()
        assert recipe.author.username == "cookmate"
        assert recipe.ingredients[0].quantity == "2 slices"
    finally:
        db.close()
