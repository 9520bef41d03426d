"""Front-matter schemas and intermediate models for the lint, extract and commit steps"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, StrictBool, StrictInt, StringConstraints, field_validator

from mdblog.core.dates import parse_post_date
from mdblog.crud.models import DocKind


Title = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]
OptionalText = Optional[Annotated[str, StringConstraints(strict=True, strip_whitespace=True)]]

PAGE_KEYS = ("title", "icon", "order", "slug")
POST_KEYS = ("title", "author", "date", "categories", "tags", "hidden", "slug")
TERM_KEYS = ("categories", "tags")


def term_list(value: Any) -> list[str]:
    """Coerce a categories/tags value to an ordered, de-duplicated list of names.

    A scalar becomes a one-item list; numbers are stringified. Raises
    ValueError for nested structures or empty names.
    """
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    names: list[str] = []
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise ValueError(f"expected a name, got {type(item).__name__}")
        name = str(item).strip()
        if not name:
            raise ValueError("empty name")
        if name not in names:
            names.append(name)
    return names


class PageMeta(BaseModel):
    """Front matter of a standalone page (e.g. About)."""
    model_config = {"frozen": True, "extra": "ignore"}

    title: Title
    icon: OptionalText = None
    order: Optional[StrictInt] = None
    slug: OptionalText = None


class PostMeta(BaseModel):
    """Front matter of a dated post."""
    model_config = {"frozen": True, "extra": "ignore"}

    title: Title
    author: OptionalText = None
    date: datetime
    categories: list[str] = []
    tags: list[str] = []
    hidden: StrictBool = False
    slug: OptionalText = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> datetime:
        return parse_post_date(value)

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _parse_terms(cls, value: Any) -> list[str]:
        return term_list(value)


Record = Union[PageMeta, PostMeta]


class Severity(str, Enum):
    error = "error"
    warning = "warning"


class Issue(BaseModel):
    """One finding about a document or the corpus."""
    path: str
    code: str
    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.severity.value} [{self.code}] {self.message}"


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:          Path              # location on disk
    rel_path:      str               # posix path relative to the corpus root
    kind:          DocKind
    slug:          str
    canonical:     str               # shared by draft copies of one post
    filename_date: Optional[date]
    draft:         bool
    raw_markdown:  str               # full file content (includes frontmatter)
    markdown:      str               # body only (frontmatter stripped)
    frontmatter:   Optional[dict[str, Any]]   # None when the file has no header
    tokens:        list = field(default_factory=list)


@dataclass
class CheckedDoc:
    """A parsed document with its validated record (None when validation failed)."""
    parsed: ParsedDoc
    record: Optional[Record] = None


@dataclass
class LintReport:
    docs:   list[CheckedDoc] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    def failed(self, strict: bool = False) -> bool:
        return bool(self.errors or (strict and self.warnings))


class StagedDoc(BaseModel):
    """Public staging contract: written by extract, read by commit."""
    kind: DocKind
    slug: str
    canonical: str
    path: str
    title: str
    author: Optional[str] = None
    published_at: Optional[datetime] = None    # timezone-aware for posts
    page_order: Optional[int] = None
    hidden: bool = False
    draft: bool = False
    categories: list[str] = []
    tags: list[str] = []
    frontmatter: dict[str, Any] = {}           # normalized, JSON-safe
    markdown: str                              # body without frontmatter
    hash: str                                  # sha256 of the raw file
    images: list[str] = []
    code_languages: list[str] = []
    word_count: int = 0
