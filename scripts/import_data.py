import logging
from pathlib import Path

from cookmate import crud, models
from cookmate.db import SessionLocal, init_db
from cookmate.logging_config import setup_logging
from cookmate.recipes import load_recipes, validate_recipes

logger = logging.getLogger("import_data")


def import_recipes(db, path):
    """Insert seed recipes whose title is not already stored.

    Returns the number of recipes added.
    """
    added = 0
    for author, recipe in validate_recipes(load_recipes(path)):
        exists = (
            db.query(models.Recipe)
            .filter(models.Recipe.title == recipe.title)
            .first()
        )
        if exists:
            continue
        user = crud.get_or_create_user(db, author)
        crud.create_recipe(db, recipe, user)
        added += 1
    return added


def main():
    setup_logging()
    init_db()
    p = Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'
    if not p.exists():
        logger.error('data/recipes.json not found')
        return
    db = SessionLocal()
    try:
        added = import_recipes(db, p)
    finally:
        db.close()
    logger.info('Imported %d recipes', added)


if __name__ == '__main__':
    main()
