import uvicorn

from .config import settings
from .logging_config import setup_logging


def main():
    setup_logging()
    uvicorn.run(
        "cookmate.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
