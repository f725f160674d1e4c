import json
import logging
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from . import models, schemas
from .config import settings
from .normalize import normalize_pantry_terms
from .ranking import RankedRecipe, rank

logger = logging.getLogger(__name__)


def _recipe_query(db: Session):
    return db.query(models.Recipe).options(
        selectinload(models.Recipe.ingredients),
        selectinload(models.Recipe.likes),
        selectinload(models.Recipe.author),
    )


def _ingredient_rows(ingredients: Iterable[schemas.Ingredient]):
    return [
        models.RecipeIngredient(position=pos, name=i.name, quantity=i.quantity)
        for pos, i in enumerate(ingredients)
    ]


def _apply(db_recipe: models.Recipe, recipe: schemas.RecipeCreate):
    db_recipe.title = recipe.title
    db_recipe.description = recipe.description
    db_recipe.ingredients = _ingredient_rows(recipe.ingredients)
    db_recipe.steps = json.dumps([s.model_dump() for s in recipe.steps])
    db_recipe.cooking_time = recipe.cooking_time
    db_recipe.difficulty = recipe.difficulty
    db_recipe.category = recipe.category
    db_recipe.tags = json.dumps(recipe.tags)


def get_or_create_user(db: Session, username: str):
    user = (
        db.query(models.User).filter(models.User.username == username).first()
    )
    if user:
        return user
    user = models.User(username=username)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", username)
    return user


def get_recipe(db: Session, recipe_id: int):
    return _recipe_query(db).filter(models.Recipe.id == recipe_id).first()


def list_recipes(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    q: str | None = None,
    category: str | None = None,
) -> Tuple[List[models.Recipe], int]:
    """Return one page of recipes, newest first, and the total count.

    ``q`` matches title, description or category case-insensitively;
    ``category`` must match exactly.
    """
    query = db.query(models.Recipe)
    if q and q.strip():
        term = q.strip()
        query = query.filter(
            or_(
                models.Recipe.title.icontains(term, autoescape=True),
                models.Recipe.description.icontains(term, autoescape=True),
                models.Recipe.category.icontains(term, autoescape=True),
            )
        )
    if category:
        query = query.filter(models.Recipe.category == category)
    total = query.count()
    items = (
        query.options(
            selectinload(models.Recipe.ingredients),
            selectinload(models.Recipe.likes),
            selectinload(models.Recipe.author),
        )
        .order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def get_user_recipes(db: Session, user: models.User):
    return (
        _recipe_query(db)
        .filter(models.Recipe.author_id == user.id)
        .order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
        .all()
    )


def create_recipe(db: Session, recipe: schemas.RecipeCreate,
                  author: models.User):
    db_recipe = models.Recipe(author=author)
    _apply(db_recipe, recipe)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    logger.info("Created recipe %s by %s", db_recipe.id, author.username)
    return db_recipe


def update_recipe(db: Session, recipe_id: int, recipe: schemas.RecipeCreate):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return None
    _apply(db_recipe, recipe)
    # onupdate only fires when a recipe column changed, not its ingredients
    db_recipe.updated_at = models.utcnow()
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    logger.info("Updated recipe %s", recipe_id)
    return db_recipe


def delete_recipe(db: Session, recipe_id: int):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return False
    db.delete(db_recipe)
    db.commit()
    logger.info("Deleted recipe %s", recipe_id)
    return True


def toggle_like(db: Session, db_recipe: models.Recipe,
                user: models.User) -> Tuple[bool, int]:
    """Like the recipe, or remove the like if ``user`` already gave one."""
    if user in db_recipe.likes:
        db_recipe.likes.remove(user)
        liked = False
    else:
        db_recipe.likes.append(user)
        liked = True
    db.commit()
    db.refresh(db_recipe)
    logger.info("User %s %s recipe %s", user.username,
                "liked" if liked else "unliked", db_recipe.id)
    return liked, len(db_recipe.likes)


def candidate_recipes(db: Session, terms: Sequence[str],
                      prefilter: bool = True,
                      max_terms: int | None = None) -> List[models.Recipe]:
    """Fetch the recipes worth ranking against normalized ``terms``.

    With ``prefilter`` only recipes having an ingredient whose name contains
    one of the terms are returned; otherwise every recipe is. Terms are
    literal text, LIKE wildcards included. Rows come back in insertion order.

    More than ``max_terms`` distinct terms falls back to the full scan, since
    each term adds one level to the SQL expression tree.
    """
    if max_terms is None:
        max_terms = settings.search.max_prefilter_terms
    unique_terms = list(dict.fromkeys(terms))
    if prefilter and len(unique_terms) > max_terms:
        logger.info("Ingredient search with %d terms, scanning all recipes",
                    len(unique_terms))
        prefilter = False
    query = _recipe_query(db)
    if prefilter:
        query = query.filter(
            models.Recipe.ingredients.any(
                or_(*[
                    models.RecipeIngredient.name.icontains(t, autoescape=True)
                    for t in unique_terms
                ])
            )
        )
    return query.order_by(models.Recipe.id).all()


def search_by_ingredients(
    db: Session,
    raw_terms: Iterable[str],
    prefilter: bool | None = None,
    min_matches: int | None = None,
) -> List[RankedRecipe]:
    """Rank stored recipes against a pantry list.

    Raises InvalidQuery before querying the store when no usable term is
    given.
    """
    if prefilter is None:
        prefilter = settings.search.prefilter
    if min_matches is None:
        min_matches = settings.search.min_matches
    terms = normalize_pantry_terms(raw_terms)
    candidates = candidate_recipes(db, terms, prefilter=prefilter)
    ranked = rank(terms, candidates, min_matches=min_matches)
    logger.info("Ingredient search %s: %d candidate(s), %d result(s)",
                terms, len(candidates), len(ranked))
    return ranked
