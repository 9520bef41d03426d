"""Convert a validated ParsedDoc into a StagedDoc: normalized frontmatter plus body facts"""

import re
from datetime import date, datetime
from typing import Any, Iterator
from urllib.parse import unquote

from mdblog.core.dates import format_post_date
from mdblog.core.models import PAGE_KEYS, POST_KEYS, PageMeta, ParsedDoc, PostMeta, Record, StagedDoc
from mdblog.core.utils.text import count_words, sha256
from mdblog.crud.models import DocKind


IMG_SRC_RE = re.compile(r'<img\b[^>]*?\bsrc\s*=\s*["\']([^"\']+)["\']', re.IGNORECASE)
EXTERNAL_RE = re.compile(r'^(?:[a-z][a-z0-9+.-]*:|//|#)', re.IGNORECASE)


def _walk(tokens: list) -> Iterator:
    """Yield every token, descending into inline children."""
    for tok in tokens:
        yield tok
        if tok.children:
            yield from _walk(tok.children)


def _local_path(src: str) -> str | None:
    """Return the filesystem part of a local image reference, or None for URLs and data URIs."""
    src = src.strip()
    if not src or EXTERNAL_RE.match(src):
        return None
    return unquote(src.split('#', 1)[0].split('?', 1)[0]) or None


def image_refs(tokens: list) -> list[str]:
    """Distinct local image references from markdown images and inline/block <img> tags."""
    refs: list[str] = []
    for tok in _walk(tokens):
        if tok.type == 'image':
            candidates = [tok.attrGet('src') or '']
        elif tok.type in ('html_block', 'html_inline'):
            candidates = IMG_SRC_RE.findall(tok.content)
        else:
            continue
        for src in candidates:
            local = _local_path(src)
            if local and local not in refs:
                refs.append(local)
    return refs


def code_languages(tokens: list) -> list[str]:
    """Distinct fenced-code info strings (first word) in order of appearance."""
    langs: list[str] = []
    for tok in tokens:
        if tok.type != 'fence':
            continue
        info = tok.info.strip().split()
        if info and info[0] not in langs:
            langs.append(info[0])
    return langs


def word_count(tokens: list) -> int:
    """Words in inline content (headings, paragraphs, list items, table cells); code fences excluded."""
    return sum(count_words(tok.content) for tok in tokens if tok.type == 'inline')


def json_safe(value: Any) -> Any:
    """Recursively convert YAML-decoded dates to ISO strings so the value survives JSON."""
    if isinstance(value, datetime):
        return value.isoformat(sep=' ')
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value


def normalize_frontmatter(kind: DocKind, record: Record, raw: dict[str, Any]) -> dict[str, Any]:
    """Re-emit frontmatter in canonical key order using validated values.

    Only keys present in the source are written; unrecognized keys follow in
    their original order, untouched apart from date conversion.
    """
    keys = POST_KEYS if kind == DocKind.post else PAGE_KEYS
    values = record.model_dump()
    if isinstance(record, PostMeta):
        values['date'] = format_post_date(record.date)

    out = {k: values[k] for k in keys if k in raw}
    for k, v in raw.items():
        if k not in keys:
            out[str(k)] = json_safe(v)
    return out


def extract_doc(parsed: ParsedDoc, record: Record) -> StagedDoc:
    """Build the staging record for a document that passed validation."""
    staged = dict(
        kind=parsed.kind,
        slug=parsed.slug,
        canonical=parsed.canonical,
        path=parsed.rel_path,
        title=record.title,
        draft=parsed.draft,
        frontmatter=normalize_frontmatter(parsed.kind, record, parsed.frontmatter or {}),
        markdown=parsed.markdown,
        hash=sha256(parsed.raw_markdown),
        images=image_refs(parsed.tokens),
        code_languages=code_languages(parsed.tokens),
        word_count=word_count(parsed.tokens),
    )
    if isinstance(record, PostMeta):
        staged.update(
            author=record.author,
            published_at=record.date,
            hidden=record.hidden,
            categories=record.categories,
            tags=record.tags,
        )
    elif isinstance(record, PageMeta):
        staged.update(page_order=record.order)
    return StagedDoc(**staged)
