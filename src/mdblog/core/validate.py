"""Per-document frontmatter validation into Issues"""

from typing import Optional

from pydantic import ValidationError

from mdblog.core.models import (
    PAGE_KEYS, POST_KEYS, TERM_KEYS, Issue, PageMeta, ParsedDoc, PostMeta, Record, Severity,
)
from mdblog.crud.models import DocKind


MISSING_TYPES = {"missing", "string_too_short"}


def _issue(parsed: ParsedDoc, code: str, message: str, severity: Severity = Severity.error) -> Issue:
    return Issue(path=parsed.rel_path, code=code, severity=severity, message=message)


def _error_message(err: dict) -> str:
    """Prefer the original ValueError text over pydantic's 'Value error, ...' wrapper."""
    cause = (err.get("ctx") or {}).get("error")
    return str(cause) if cause is not None else err["msg"]


def _validation_issues(parsed: ParsedDoc, exc: ValidationError) -> list[Issue]:
    issues = []
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"]) or "frontmatter"
        if err["type"] in MISSING_TYPES:
            issues.append(_issue(parsed, "missing-key", f"'{key}' is required"))
        else:
            issues.append(_issue(parsed, "invalid-value", f"'{key}': {_error_message(err)}"))
    return issues


def _duplicate_terms(parsed: ParsedDoc) -> list[Issue]:
    issues = []
    for key in TERM_KEYS:
        value = parsed.frontmatter.get(key)
        if not isinstance(value, list):
            continue
        seen = set()
        for item in value:
            name = str(item).strip()
            if name in seen:
                issues.append(_issue(parsed, "duplicate-term", f"'{key}' lists '{name}' more than once", Severity.warning))
            seen.add(name)
    return issues


def validate_doc(parsed: ParsedDoc) -> tuple[Optional[Record], list[Issue]]:
    """Validate a document's frontmatter against the schema for its kind.

    Returns (record, issues). record is None when any error-level issue was found.
    """
    if parsed.frontmatter is None:
        return None, [_issue(parsed, "missing-frontmatter", "document has no '---' frontmatter block")]

    is_post = parsed.kind == DocKind.post
    allowed = POST_KEYS if is_post else PAGE_KEYS
    issues = [
        _issue(parsed, "unknown-key", f"'{key}' is not a recognized {parsed.kind.value} key", Severity.warning)
        for key in parsed.frontmatter if key not in allowed
    ]
    if is_post:
        issues.extend(_duplicate_terms(parsed))

    model = PostMeta if is_post else PageMeta
    try:
        record = model.model_validate(parsed.frontmatter)
    except ValidationError as e:
        issues.extend(_validation_issues(parsed, e))
        return None, issues

    if is_post and parsed.filename_date and record.date.date() != parsed.filename_date:
        issues.append(_issue(
            parsed, "date-mismatch",
            f"date {record.date.date().isoformat()} differs from file name date {parsed.filename_date.isoformat()}",
            Severity.warning,
        ))
    return record, issues
