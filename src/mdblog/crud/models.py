"""Database table definitions for blog documents, revisions, and taxonomy terms"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class DocKind(str, Enum):
    """A dated post or a standalone page"""
    page = "page"
    post = "post"


class TermKind(str, Enum):
    """Taxonomy vocabularies shared across posts"""
    category = "category"
    tag = "tag"


class Document(SQLModel, table=True):
    """A page or post as last committed from the corpus"""
    __tablename__ = "documents"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    kind: DocKind = Field(..., nullable=False)
    slug: str = Field(..., index=True, nullable=False)
    canonical: str = Field(..., index=True, nullable=False, description="Slug shared by draft copies of one post")
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    author: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    published_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=False), nullable=True, index=True),
        description="Post date normalized to naive UTC; None for pages",
    )
    page_order: Optional[int] = Field(default=None, description="Navigation order for pages")
    hidden: bool = Field(default=False, nullable=False)
    draft: bool = Field(default=False, nullable=False)
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    code_languages: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    word_count: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))


class DocumentVersion(SQLModel, table=True):
    """Immutable snapshot of a Document at a prior state."""
    __tablename__ = "document_versions"
    __table_args__ = (UniqueConstraint("document_id", "version_num", name="uq_docver_doc_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    document_id: UUID = Field(..., foreign_key="documents.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-document version number")
    markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    frontmatter: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Term(SQLModel, table=True):
    """A category or tag name"""
    __tablename__ = "terms"
    __table_args__ = (UniqueConstraint("kind", "name", name="uq_term_kind_name"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    kind: TermKind = Field(..., nullable=False)
    name: str = Field(..., sa_column=Column(Text, nullable=False))


class DocumentTerm(SQLModel, table=True):
    """Ordered link between a document and one of its categories or tags"""
    __tablename__ = "document_terms"
    document_id: UUID = Field(foreign_key="documents.id", primary_key=True)
    term_id: UUID = Field(foreign_key="terms.id", primary_key=True)
    position: int = Field(..., nullable=False, description="Position of the term in the front-matter list")
