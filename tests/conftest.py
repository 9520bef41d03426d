"""Root test configuration: corpus helpers and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdblog.db", "test.db"]
_CLEANUP_DIRS = [".mdblog"]


def post_text(
    title: str = "Hello",
    date: str = "2023-01-05 10:00:00 +0800",
    extra: str = "",
    body: str = "Body text.\n",
    ) -> str:
    """Markdown source of a post with the given frontmatter values."""
    return f"---\ntitle: {title}\ndate: {date}\n{extra}---\n\n{body}"


def page_text(title: str = "About", extra: str = "", body: str = "About me.\n") -> str:
    return f"---\ntitle: {title}\n{extra}---\n\n{body}"


@pytest.fixture(name="post_md")
def post_md_fixture():
    return post_text


@pytest.fixture(name="page_md")
def page_md_fixture():
    return page_text


@pytest.fixture(name="corpus")
def corpus_fixture(tmp_path):
    """Return a writer add(rel_path, text) -> Path for files under a tmp corpus root."""
    root = tmp_path / "site"
    root.mkdir()

    def add(rel_path: str, text: str) -> Path:
        p = root / rel_path
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    add.root = root
    return add


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer MDBLOG_* variables out of the tests."""
    for name in ("MDBLOG_DB_URL", "MDBLOG_STRICT", "MDBLOG_CHECK_IMAGES", "MDBLOG_STAGING_DIR",
                 "MDBLOG_OUTPUT_DIR", "MDBLOG_MAX_VERSIONS", "MDBLOG_PARSER_CONFIG", "MDBLOG_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and staging directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
