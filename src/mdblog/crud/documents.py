"""Document persistence: upsert by path, taxonomy links, and lookups"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdblog.core.dates import to_utc_naive
from mdblog.crud.models import DocKind, Document, DocumentTerm, Term, TermKind
from mdblog.crud.terms import replace_terms
from mdblog.crud.versioning import save_version


logger = logging.getLogger(__name__)


def get_by_path(session: Session, path: str) -> Document | None:
    """Return the Document with the given corpus-relative path, or None if not found."""
    return session.exec(select(Document).where(Document.path == path)).one_or_none()


def get_by_slug(session: Session, slug: str) -> Document | None:
    """Return the first Document with the given slug (posts before pages, then by path), or None."""
    return session.exec(
        select(Document).where(Document.slug == slug).order_by(Document.kind.desc(), Document.path)
    ).first()


def get_all_documents(session: Session) -> list[Document]:
    """Return all documents ordered by path."""
    return list(session.exec(select(Document).order_by(Document.path)).all())


def get_last_committed(session: Session) -> list[Document]:
    """Return documents from the most recent commit batch (MAX committed_at)."""
    max_ts = session.exec(select(func.max(Document.committed_at))).one()
    if max_ts is None:
        return []
    return list(session.exec(
        select(Document).where(Document.committed_at == max_ts).order_by(Document.path)
    ).all())


def get_terms(session: Session, document_id: UUID) -> dict[str, list[str]]:
    """Return {'category': [...], 'tag': [...]} for a document, each in front-matter order."""
    rows = session.exec(
        select(Term.kind, Term.name)
        .join(DocumentTerm, DocumentTerm.term_id == Term.id)
        .where(DocumentTerm.document_id == document_id)
        .order_by(DocumentTerm.position)
    ).all()
    terms: dict[str, list[str]] = {k.value: [] for k in TermKind}
    for kind, name in rows:
        terms[TermKind(kind).value].append(name)
    return terms


def get_by_term(session: Session, kind: TermKind, name: str) -> list[Document]:
    """Return documents linked to the given category or tag, newest first."""
    return list(session.exec(
        select(Document)
        .join(DocumentTerm, DocumentTerm.document_id == Document.id)
        .join(Term, Term.id == DocumentTerm.term_id)
        .where(Term.kind == kind, Term.name == name)
        .order_by(Document.published_at.desc(), Document.path)
    ).all())


def list_terms(session: Session, kind: TermKind | None = None) -> list[tuple[TermKind, str, int]]:
    """Return (kind, name, count) for terms used by visible posts (not hidden, not drafts)."""
    stmt = (
        select(Term.kind, Term.name, func.count(DocumentTerm.document_id))
        .join(DocumentTerm, DocumentTerm.term_id == Term.id)
        .join(Document, Document.id == DocumentTerm.document_id)
        .where(Document.hidden == False, Document.draft == False)  # noqa: E712
        .group_by(Term.kind, Term.name)
        .order_by(Term.kind, func.lower(Term.name))
    )
    if kind is not None:
        stmt = stmt.where(Term.kind == kind)
    return [(TermKind(k), name, count) for k, name, count in session.exec(stmt).all()]


def _apply(doc: Document, data: dict) -> None:
    doc.kind = DocKind(data['kind'])
    doc.slug = data['slug']
    doc.canonical = data['canonical']
    doc.path = data['path']
    doc.title = data['title']
    doc.author = data.get('author')
    doc.published_at = to_utc_naive(data.get('published_at'))
    doc.page_order = data.get('page_order')
    doc.hidden = data.get('hidden', False)
    doc.draft = data.get('draft', False)
    doc.frontmatter = data.get('frontmatter') or None
    doc.markdown = data['markdown']
    doc.hash = data['hash']
    doc.images = list(data.get('images') or [])
    doc.code_languages = list(data.get('code_languages') or [])
    doc.word_count = data.get('word_count', 0)


def commit_doc(
    session: Session,
    data: dict,
    max_versions: int = 10,
    committed_at: datetime | None = None,
    ) -> tuple[Document, str]:
    """Upsert a staged document dict (StagedDoc.model_dump()) by path.

    Returns (doc, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; the caller controls the transaction.
    committed_at is set on created/updated docs only.
    """
    doc = get_by_path(session, data['path'])

    if doc:
        if doc.hash == data['hash']:
            return doc, 'unchanged'
        save_version(session, doc, max_versions)
        _apply(doc, data)
        doc.updated_at = datetime.now()
        doc.committed_at = committed_at
        session.add(doc)
        session.flush()
        replace_terms(session, doc.id, data.get('categories', []), data.get('tags', []))
        logger.info("Updated %s", doc.path)
        return doc, 'updated'

    doc = Document(
        kind=DocKind(data['kind']), slug=data['slug'], canonical=data['canonical'],
        path=data['path'], title=data['title'], markdown=data['markdown'], hash=data['hash'],
    )
    _apply(doc, data)
    doc.committed_at = committed_at
    session.add(doc)
    session.flush()
    replace_terms(session, doc.id, data.get('categories', []), data.get('tags', []))
    logger.info("Created %s", doc.path)
    return doc, 'created'
