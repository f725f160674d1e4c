import logging

from .config import settings


def setup_logging(level: str | None = None):
    """Configure the root logger from settings.

    Safe to call more than once; later calls only adjust the level.
    """
    level_name = (level or settings.logging.level).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level_name, format=settings.logging.format)
    root.setLevel(level_name)
    # SQL echo goes through its own logger
    if settings.db.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
