"""Taxonomy catalog: visible posts, pages, categories, tags and the yearly archive"""

from datetime import datetime

from mdblog.core.dates import parse_post_date
from mdblog.crud.models import DocKind, Document, TermKind


def is_listed(doc: Document) -> bool:
    """True for posts that appear in listings (not hidden, not drafts)."""
    return doc.kind == DocKind.post and not doc.hidden and not doc.draft


def _post_year(doc: Document) -> int:
    """Year of the post in its own UTC offset, falling back to the stored UTC timestamp."""
    date_str = (doc.frontmatter or {}).get('date')
    if date_str:
        return parse_post_date(date_str).year
    return doc.published_at.year


def _post_entry(doc: Document, terms: dict[str, list[str]]) -> dict:
    return {
        "slug": doc.slug,
        "title": doc.title,
        "author": doc.author,
        "date": (doc.frontmatter or {}).get('date'),
        "categories": terms.get(TermKind.category.value, []),
        "tags": terms.get(TermKind.tag.value, []),
        "path": doc.path,
    }


def _page_entry(doc: Document) -> dict:
    fm = doc.frontmatter or {}
    return {"slug": doc.slug, "title": doc.title, "icon": fm.get('icon'), "order": doc.page_order, "path": doc.path}


def _index(posts: list[Document], terms_by_doc: dict, kind: TermKind) -> dict[str, list[str]]:
    """term -> post slugs in listing order; keys sorted case-insensitively."""
    index: dict[str, list[str]] = {}
    for doc in posts:
        for name in terms_by_doc.get(doc.id, {}).get(kind.value, []):
            index.setdefault(name, []).append(doc.slug)
    return {name: index[name] for name in sorted(index, key=lambda n: (n.lower(), n))}


def build_catalog(docs: list[Document], terms_by_doc: dict) -> dict:
    """Build the catalog dict from stored documents.

    terms_by_doc maps document id -> {'category': [...], 'tag': [...]}.
    Hidden posts and drafts are left out of every listing.
    """
    posts = sorted(
        (d for d in docs if is_listed(d)),
        key=lambda d: (d.published_at or datetime.min, d.slug),
        reverse=True,
    )
    pages = sorted(
        (d for d in docs if d.kind == DocKind.page),
        key=lambda d: (d.page_order is None, d.page_order or 0, d.title.lower()),
    )

    archive: dict[str, list[str]] = {}
    for doc in posts:
        archive.setdefault(str(_post_year(doc)), []).append(doc.slug)

    return {
        "posts": [_post_entry(d, terms_by_doc.get(d.id, {})) for d in posts],
        "pages": [_page_entry(d) for d in pages],
        "categories": _index(posts, terms_by_doc, TermKind.category),
        "tags": _index(posts, terms_by_doc, TermKind.tag),
        "archive": dict(sorted(archive.items(), key=lambda kv: kv[0], reverse=True)),
    }
