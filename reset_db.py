import logging

from sqlalchemy.engine import Engine

from daily_forge.core.database import Base, engine

logger = logging.getLogger(__name__)


def reset_database(bind: Engine = engine) -> None:
    """Drops every daily_forge table and recreates it empty."""
    logger.warning("Dropping all tables...")
    Base.metadata.drop_all(bind=bind)

    logger.info("Recreating tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Tables recreated successfully.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database()
