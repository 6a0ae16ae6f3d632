import logging
import sys

import uvicorn

from stk_relay.config import configure_logging, get_settings

logger = logging.getLogger("stk_relay")


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    if not settings.DATABASE_URL:
        logger.critical("CRITICAL: Missing store configuration!")
        logger.critical("Please set DATABASE_URL (and DATABASE_PASSWORD if needed) in your .env file")
        sys.exit(1)

    logger.info("Server running on port %s", settings.PORT)
    logger.info("Visit http://localhost:%s to view the application", settings.PORT)
    uvicorn.run("stk_relay.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
