import logging
import time
from datetime import datetime, timezone

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base

from tasknest.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def utcnow() -> datetime:
    # Dates stockées en UTC naïf (compatible SQLite et Postgres)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_db():
    """Dépendance sessionDB"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(retries: int = None, delay: float = None):
    """Se connecte à la base (avec plusieurs tentatives) puis crée les tables."""
    retries = retries or settings.DB_CONNECT_RETRIES
    delay = settings.DB_RETRY_DELAY if delay is None else delay

    # Import des modèles pour remplir Base.metadata
    from tasknest.models import user, task, team  # noqa: F401

    for attempt in range(1, retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
            logger.info("Database connected")
            return
        except OperationalError as e:
            logger.error(f"Database connection attempt {attempt} failed: {e}")
            if attempt == retries:
                logger.error("Failed to connect to the database after multiple attempts")
                raise
            logger.info(f"Retrying in {delay} seconds...")
            time.sleep(delay)
