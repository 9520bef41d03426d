"""File discovery, frontmatter extraction, document kind detection, and markdown-it tokenization"""

import re
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import yaml
from markdown_it import MarkdownIt

from mdblog.core.dates import filename_date, strip_date_prefix
from mdblog.core.errors import FrontmatterError
from mdblog.core.models import ParsedDoc
from mdblog.core.utils.text import canonical_slug, slugify
from mdblog.crud.models import DocKind


FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?', re.DOTALL | re.MULTILINE)
MD_EXTENSIONS = {'.md', '.mdx'}
POST_DIRS = {'_posts', '_drafts'}
DRAFT_DIR = '_drafts'


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> tuple[Optional[dict[str, Any]], str]:
    """Return (frontmatter, body) with the YAML header removed.

    frontmatter is None when the text has no header block, and {} for an
    empty one. Raises ValueError when the header is not a YAML mapping.
    """
    text = text.lstrip('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if not m:
        return None, text
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if fm is None:
        fm = {}
    if not isinstance(fm, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def detect_kind(path: str) -> tuple[DocKind, bool]:
    """Return (kind, draft) for a document path.

    Files under _posts/_drafts or named 'YYYY-MM-DD-*' are posts; everything else is a page.
    """
    p = PurePosixPath(path)
    parents = set(p.parts[:-1])
    if parents & POST_DIRS or filename_date(p.name):
        return DocKind.post, DRAFT_DIR in parents
    return DocKind.page, False


def file_slug(name: str) -> str:
    """Slug from a file name, without extension or 'YYYY-MM-DD-' prefix."""
    stem = PurePosixPath(name).stem
    return slugify(strip_date_prefix(stem)) or slugify(stem)


def doc_slug(name: str, frontmatter: Optional[dict[str, Any]]) -> str:
    """The frontmatter 'slug' override when usable, else the file-name slug."""
    override = (frontmatter or {}).get('slug')
    if isinstance(override, str) and slugify(override):
        return slugify(override)
    return file_slug(name)


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def corpus_root(path: Path) -> Path:
    """Directory that relative document paths are computed against."""
    return path if path.is_dir() else path.parent


def parse_file(path: Path, root: Path = None, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with token stream.

    Raises FrontmatterError when the YAML header is unreadable.
    """
    root = root or path.parent
    rel_path = path.relative_to(root).as_posix()
    raw = path.read_text(encoding='utf-8')
    try:
        frontmatter, body = strip_frontmatter(raw)
    except ValueError as e:
        raise FrontmatterError(rel_path, str(e)) from e

    # full path: a file linted on its own keeps its _posts/_drafts parent
    kind, draft = detect_kind(path.absolute().as_posix())

    return ParsedDoc(
        path=path,
        rel_path=rel_path,
        kind=kind,
        slug=doc_slug(path.name, frontmatter),
        canonical=canonical_slug(file_slug(path.name)),
        filename_date=filename_date(path.name) if kind == DocKind.post else None,
        draft=draft,
        raw_markdown=raw,
        markdown=body,
        frontmatter=frontmatter,
        tokens=make_parser(parser_config).parse(body),
    )


def parse_dir(path: Path, parser_config: str = 'gfm-like') -> list[ParsedDoc]:
    """Parse all .md/.mdx files under path (file or directory)."""
    root = corpus_root(path)
    return [parse_file(p, root, parser_config) for p in discover_files(path)]
