import json
import logging
from pathlib import Path

from pydantic import ValidationError

from . import schemas

logger = logging.getLogger(__name__)


def load_recipes(path):
    """Load recipes from a JSON file and return a list of dicts.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: list of recipe dictionaries.
    """
    p = Path(path)
    if not p.exists():
        return []
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_recipes(raw):
    """Split raw seed entries into ``(author, RecipeCreate)`` pairs.

    Entries that fail validation, such as an ingredient without a name, are
    logged and skipped so they never reach the store or the ranker.
    """
    valid = []
    for idx, entry in enumerate(raw):
        try:
            recipe = schemas.RecipeCreate.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping seed entry %d (%s): %s", idx,
                           entry.get("title") if isinstance(entry, dict)
                           else None, e.errors()[0]["msg"])
            continue
        author = entry.get("author") or "cookmate"
        valid.append((author, recipe))
    return valid
