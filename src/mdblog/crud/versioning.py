"""Document revision history: save, prune, list, diff, and revert"""

import json
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdblog.core.dates import parse_post_date, to_utc_naive
from mdblog.core.extract import code_languages, image_refs, word_count
from mdblog.core.models import term_list
from mdblog.core.parse import doc_slug, make_parser
from mdblog.core.utils.diff import unified_diff
from mdblog.crud.models import DocKind, Document, DocumentVersion
from mdblog.crud.terms import replace_terms


logger = logging.getLogger(__name__)


def get_version(session: Session, document_id: UUID, version_num: int) -> DocumentVersion:
    """Return one stored version. Raises ValueError if it does not exist."""
    v = session.exec(
        select(DocumentVersion)
        .where(DocumentVersion.document_id == document_id)
        .where(DocumentVersion.version_num == version_num)
    ).one_or_none()
    if v is None:
        raise ValueError(f"Version {version_num} not found for document {document_id}")
    return v


def list_versions(session: Session, document_id: UUID) -> list[DocumentVersion]:
    """Return all versions for a document ordered by version_num ascending."""
    return list(
        session.exec(
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_num.asc())
        ).all()
    )


def diff_versions(
    session: Session,
    doc: Document,
    from_num: int,
    to_num: Optional[int] = None,
    context: int = 3,
    ) -> list[str]:
    """Unified diff lines between two stored versions, or a version and the current body when to_num is None.

    Raises ValueError if a requested version is missing.
    """
    old = get_version(session, doc.id, from_num)
    if to_num is None:
        new_text, to_label = doc.markdown, "current"
    else:
        new_text, to_label = get_version(session, doc.id, to_num).markdown, f"v{to_num}"
    return unified_diff(old.markdown, new_text, f"v{from_num}", to_label, context)


def prune_versions(session: Session, document_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, document_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()
    logger.debug("Pruned %d version(s) of document %s", excess, document_id)
    return excess


def save_version(session: Session, doc: Document, max_versions: int = 10) -> DocumentVersion:
    """Snapshot current Document state as a new immutable version.

    version_num is MAX(version_num)+1 for this document; pruning follows when max_versions > 0.
    """
    latest = session.exec(
        select(func.max(DocumentVersion.version_num))
        .where(DocumentVersion.document_id == doc.id)
    ).one()

    version = DocumentVersion(
        document_id=doc.id,
        version_num=(latest or 0) + 1,
        markdown=doc.markdown,
        hash=doc.hash,
        frontmatter=json.dumps(doc.frontmatter) if doc.frontmatter is not None else None,
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, doc.id, max_versions)

    return version


def _restore_frontmatter(session: Session, doc: Document, fm: dict) -> None:
    """Re-derive the frontmatter-backed columns and term links from a restored frontmatter."""
    doc.title = fm.get('title', doc.title)
    doc.slug = doc_slug(doc.path, fm)
    if doc.kind == DocKind.post:
        doc.author = fm.get('author')
        doc.hidden = bool(fm.get('hidden', False))
        if fm.get('date'):
            doc.published_at = to_utc_naive(parse_post_date(fm['date']))
        replace_terms(session, doc.id, term_list(fm.get('categories')), term_list(fm.get('tags')))
    else:
        doc.page_order = fm.get('order')


def revert_to_version(
    session: Session,
    doc: Document,
    version_num: int,
    max_versions: int = 10,
    parser_config: str = 'gfm-like',
    ) -> Document:
    """Promote a prior version's content as a new revision of the Document.

    The current state is snapshotted first so it stays in history. Columns
    taken from frontmatter (title, slug, author, date, hidden flag, page
    order, categories and tags) are re-read from the restored frontmatter;
    images, code languages and word count are re-derived from the restored
    body. The revert counts as a commit. Flushes but does not commit the
    transaction. Raises ValueError if version_num is not found.
    """
    target = get_version(session, doc.id, version_num)
    markdown, hash_ = target.markdown, target.hash
    fm = json.loads(target.frontmatter) if target.frontmatter else None
    # pruning below may delete the target row
    save_version(session, doc, max_versions=max_versions)

    doc.markdown = markdown
    doc.hash = hash_
    doc.frontmatter = fm
    if fm:
        _restore_frontmatter(session, doc, fm)

    tokens = make_parser(parser_config).parse(markdown)
    doc.images = image_refs(tokens)
    doc.code_languages = code_languages(tokens)
    doc.word_count = word_count(tokens)

    doc.updated_at = doc.committed_at = datetime.now()
    session.add(doc)
    session.flush()
    logger.info("Reverted %s to version %d", doc.path, version_num)
    return doc
