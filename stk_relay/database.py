import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import declarative_base, sessionmaker

from stk_relay.config import Settings
from stk_relay.errors import ConfigurationError

logger = logging.getLogger(__name__)

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def build_url(settings: Settings) -> URL:
    """
    Parse DATABASE_URL and attach DATABASE_PASSWORD when the backend takes one.

    Raises:
        ConfigurationError: if DATABASE_URL is missing or cannot be parsed
    """
    if not settings.DATABASE_URL:
        raise ConfigurationError(
            "Missing store configuration: set DATABASE_URL (and DATABASE_PASSWORD if needed) in .env"
        )
    try:
        url = make_url(settings.DATABASE_URL)
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid DATABASE_URL: {e}") from e

    if settings.DATABASE_PASSWORD:
        if url.get_backend_name() == "sqlite":
            logger.warning("DATABASE_PASSWORD ignored for sqlite store")
        else:
            url = url.set(password=settings.DATABASE_PASSWORD)
    return url


def build_engine(settings: Settings) -> Engine:
    """
    Create the store engine from settings.

    Raises:
        ConfigurationError: if the store URL is missing, unparseable or rejected by its dialect
    """
    url = build_url(settings)
    try:
        if url.get_backend_name() == "sqlite":
            return create_engine(url, connect_args={"check_same_thread": False})
        return create_engine(url, pool_pre_ping=True)
    except (ArgumentError, ImportError) as e:
        raise ConfigurationError(
            f"Unusable DATABASE_URL {url.render_as_string(hide_password=True)}: {e}"
        ) from e


def init_db(settings: Settings) -> Engine:
    """Build the engine, bind the session factory and create missing tables."""
    engine = build_engine(settings)
    SessionLocal.configure(bind=engine)

    # Register models on Base.metadata before create_all
    from stk_relay import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Store initialized (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
