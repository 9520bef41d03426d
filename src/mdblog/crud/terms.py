"""Category and tag links of a document"""

from uuid import UUID

from sqlmodel import Session, select

from mdblog.crud.models import DocumentTerm, Term, TermKind


def get_or_create_term(session: Session, kind: TermKind, name: str) -> Term:
    term = session.exec(select(Term).where(Term.kind == kind, Term.name == name)).one_or_none()
    if term is None:
        term = Term(kind=kind, name=name)
        session.add(term)
        session.flush()
    return term


def replace_terms(session: Session, doc_id: UUID, categories: list[str], tags: list[str]) -> None:
    """Delete a document's term links and insert the given categories and tags in order."""
    for row in session.exec(select(DocumentTerm).where(DocumentTerm.document_id == doc_id)).all():
        session.delete(row)
    session.flush()

    position = 0
    for kind, names in ((TermKind.category, categories), (TermKind.tag, tags)):
        for name in names:
            term = get_or_create_term(session, kind, name)
            session.add(DocumentTerm(document_id=doc_id, term_id=term.id, position=position))
            position += 1
    session.flush()
