"""Unit tests for core/parse.py"""

import pytest

from mdblog.core.errors import FrontmatterError
from mdblog.core.models import ParsedDoc
from mdblog.core.parse import detect_kind, discover_files, parse_dir, parse_file, strip_frontmatter
from mdblog.core.utils.text import sha256
from mdblog.crud.models import DocKind


def test_strip_frontmatter_with_yaml():
    """strip_frontmatter extracts YAML header and returns body."""
    fm, body = strip_frontmatter("---\ntitle: Hello\n---\n# Body\n")
    assert fm == {"title": "Hello"}
    assert body == "# Body\n"


def test_strip_frontmatter_no_frontmatter():
    """No header block gives None (not {}) and the full text."""
    text = "# No frontmatter\n"
    fm, body = strip_frontmatter(text)
    assert fm is None
    assert body == text


def test_strip_frontmatter_empty_block():
    """An empty header block is an empty mapping."""
    fm, body = strip_frontmatter("---\n---\nBody\n")
    assert fm == {}
    assert body == "Body\n"


def test_strip_frontmatter_keeps_body_rules():
    """A '---' thematic break in the body is not mistaken for the closing delimiter."""
    fm, body = strip_frontmatter("---\ntitle: T\n---\nabove\n\n---\n\nbelow\n")
    assert fm == {"title": "T"}
    assert "---" in body and "below" in body


def test_strip_frontmatter_bom():
    """A UTF-8 byte order mark before the header is ignored."""
    fm, _ = strip_frontmatter("\ufeff---\ntitle: T\n---\n")
    assert fm == {"title": "T"}


@pytest.mark.parametrize("header", ["title: [unclosed", "- a\n- list"])
def test_strip_frontmatter_invalid(header):
    """Unparsable YAML or a non-mapping raises ValueError."""
    with pytest.raises(ValueError, match="Invalid YAML frontmatter"):
        strip_frontmatter(f"---\n{header}\n---\nBody\n")


@pytest.mark.parametrize("rel_path,kind,draft", [
    ("about.md", DocKind.page, False),
    ("pages/about.md", DocKind.page, False),
    ("_posts/neural-nets.md", DocKind.post, False),
    ("_posts/2023/2023-01-05-neural-nets.md", DocKind.post, False),
    ("2023-01-05-neural-nets.md", DocKind.post, False),
    ("_drafts/neural-nets.md", DocKind.post, True),
])
def test_detect_kind(rel_path, kind, draft):
    """Posts live under _posts/_drafts or carry a date prefix; _drafts marks drafts."""
    assert detect_kind(rel_path) == (kind, draft)


def test_discover_files_single(tmp_path):
    """discover_files returns a list with one file when given a file path."""
    f = tmp_path / "doc.md"
    f.write_text("# Hello")
    assert discover_files(f) == [f]


def test_discover_files_non_md_skipped(tmp_path):
    """discover_files ignores non-.md/.mdx files."""
    (tmp_path / "notes.txt").write_text("text")
    assert discover_files(tmp_path) == []


def test_discover_files_dir_sorted(tmp_path):
    """discover_files finds .md and .mdx files recursively, sorted."""
    (tmp_path / "b.md").write_text("b")
    sub = tmp_path / "_posts"
    sub.mkdir()
    (sub / "a.mdx").write_text("a")
    files = discover_files(tmp_path)
    assert files == sorted(files)
    assert len(files) == 2


def test_parse_file_post(parse_text, post_md):
    """A dated post gets kind, slug without date prefix, and file-name date."""
    doc = parse_text("_posts/2023-01-05-Neural-Nets.md", post_md())
    assert isinstance(doc, ParsedDoc)
    assert doc.kind == DocKind.post
    assert doc.slug == "neural-nets"
    assert doc.canonical == "neural-nets"
    assert doc.filename_date.isoformat() == "2023-01-05"
    assert doc.rel_path == "_posts/2023-01-05-Neural-Nets.md"
    assert doc.frontmatter["title"] == "Hello"
    assert "---" not in doc.markdown


def test_parse_file_draft_copy(parse_text, post_md):
    """Draft copies keep their own slug but share the canonical slug."""
    doc = parse_text("_drafts/neural-nets-v2.md", post_md())
    assert doc.draft is True
    assert doc.slug == "neural-nets-v2"
    assert doc.canonical == "neural-nets"
    assert doc.filename_date is None


def test_parse_file_page(parse_text, page_md):
    doc = parse_text("about.md", page_md())
    assert doc.kind == DocKind.page
    assert doc.slug == "about"
    assert doc.filename_date is None


def test_slug_from_frontmatter(parse_text):
    """parse_file uses frontmatter slug field when present."""
    doc = parse_text("anything.md", "---\ntitle: T\nslug: Custom Slug\n---\n# Body\n")
    assert doc.slug == "custom-slug"
    assert doc.canonical == "anything"


def test_parse_file_no_frontmatter(parse_text):
    doc = parse_text("plain.md", "# Hello\n\nWorld.\n")
    assert doc.frontmatter is None
    assert doc.markdown == "# Hello\n\nWorld.\n"


def test_parse_file_tokens(parse_text):
    """The body is tokenized with markdown-it."""
    doc = parse_text("page.md", "---\ntitle: T\n---\n# Heading\n")
    assert any(t.type == "heading_open" for t in doc.tokens)


def test_parse_file_invalid_frontmatter(parse_text):
    """Unreadable YAML raises FrontmatterError carrying the relative path."""
    with pytest.raises(FrontmatterError) as exc:
        parse_text("_posts/bad.md", "---\nis this: [a key\n---\n# Body\n")
    assert exc.value.path == "_posts/bad.md"
    assert isinstance(exc.value, ValueError)


def test_parse_file_keeps_raw(parse_text):
    """raw_markdown is the full file so its hash covers the frontmatter."""
    raw = "---\ntitle: T\n---\n# Body\n"
    doc = parse_text("doc.md", raw)
    assert doc.raw_markdown == raw
    assert sha256(doc.raw_markdown) == sha256(raw)


def test_parse_dir_relative_paths(corpus, post_md, page_md):
    """parse_dir computes paths relative to the given directory."""
    corpus("about.md", page_md())
    corpus("_posts/2023-01-05-hello.md", post_md())
    docs = parse_dir(corpus.root)
    assert [d.rel_path for d in docs] == ["_posts/2023-01-05-hello.md", "about.md"]
