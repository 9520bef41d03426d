"""Unit tests for crud/database.py"""

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from mdblog.core.utils.text import sha256
from mdblog.crud.database import init_db, make_engine, reset_db
from mdblog.crud.models import DocKind, Document


SQLITE_MEM = "sqlite://"
EXPECTED_TABLES = {"documents", "document_versions", "terms", "document_terms"}


def test_make_engine_returns_engine():
    assert isinstance(make_engine(SQLITE_MEM), Engine)


def test_init_db_creates_tables():
    """init_db creates every table on the engine."""
    engine = make_engine(SQLITE_MEM)
    init_db(engine)
    assert EXPECTED_TABLES.issubset(set(inspect(engine).get_table_names()))


def test_init_db_is_idempotent(tmp_path):
    """Re-running init_db keeps existing rows."""
    engine = make_engine(f"sqlite:///{tmp_path}/blog.db")
    init_db(engine)
    with Session(engine) as s:
        s.add(Document(kind=DocKind.page, slug="about", canonical="about", path="about.md",
                       title="About", markdown="x", hash=sha256("x")))
        s.commit()
    init_db(engine)
    with Session(engine) as s:
        assert s.exec(select(Document)).one().slug == "about"


def test_reset_db_clears_rows(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path}/blog.db")
    init_db(engine)
    with Session(engine) as s:
        s.add(Document(kind=DocKind.page, slug="about", canonical="about", path="about.md",
                       title="About", markdown="x", hash=sha256("x")))
        s.commit()
    reset_db(engine)
    with Session(engine) as s:
        assert s.exec(select(Document)).first() is None
    assert EXPECTED_TABLES.issubset(set(inspect(engine).get_table_names()))
