"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdblog.core.utils.text import sha256
from mdblog.crud.models import DocKind, Document


BODY = "Hello\n\nWorld\n"


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="doc")
def doc_fixture(session):
    """A minimal post persisted to the session."""
    d = Document(
        kind=DocKind.post, slug="hello", canonical="hello", path="_posts/2023-01-05-hello.md",
        title="Hello", markdown=BODY, hash=sha256(BODY),
        frontmatter={"title": "Hello", "date": "2023-01-05 10:00:00 +0800"},
    )
    session.add(d)
    session.flush()
    return d


@pytest.fixture(name="staged")
def staged_fixture():
    """Build a StagedDoc-shaped dict for commit_doc."""
    def _staged(
        path: str = "_posts/2023-01-05-hello.md",
        slug: str = "hello",
        markdown: str = BODY,
        **kwargs,
        ) -> dict:
        data = {
            "kind": "post",
            "slug": slug,
            "canonical": slug,
            "path": path,
            "title": "Hello",
            "author": None,
            "published_at": None,
            "page_order": None,
            "hidden": False,
            "draft": False,
            "categories": [],
            "tags": [],
            "frontmatter": {"title": "Hello", "date": "2023-01-05 10:00:00 +0800"},
            "markdown": markdown,
            "hash": sha256(markdown),
            "images": [],
            "code_languages": [],
            "word_count": len(markdown.split()),
        }
        data.update(kwargs)
        return data
    return _staged
