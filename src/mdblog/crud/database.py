"""Engine construction and schema initialization"""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

import mdblog.crud.models  # noqa: F401  registers tables on SQLModel.metadata


logger = logging.getLogger(__name__)


def make_engine(db_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    SQLModel.metadata.create_all(engine)
    logger.debug("Schema verified at %s", engine.url)


def reset_db(engine: Engine) -> None:
    """Drop every table, then recreate the schema."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    logger.info("Schema reset at %s", engine.url)
