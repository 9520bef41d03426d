"""Corpus-wide checks: date ordering, draft consistency, duplicate posts, missing images"""

from collections import defaultdict
from itertools import groupby
from pathlib import Path

from mdblog.core.dates import format_post_date
from mdblog.core.extract import image_refs
from mdblog.core.models import CheckedDoc, Issue, PostMeta, Severity


def _posts(docs: list[CheckedDoc]) -> list[CheckedDoc]:
    """Posts that passed validation, in path order."""
    return sorted(
        (d for d in docs if isinstance(d.record, PostMeta)),
        key=lambda d: d.parsed.rel_path,
    )


def check_date_order(docs: list[CheckedDoc]) -> list[Issue]:
    """Post dates must be non-decreasing with respect to file-name dates.

    A post may not be dated before any post whose file-name date is strictly
    earlier. Posts sharing a file-name day are not ordered among themselves.
    """
    dated = sorted(
        (d for d in _posts(docs) if d.parsed.filename_date),
        key=lambda d: (d.parsed.filename_date, d.parsed.rel_path),
    )
    issues = []
    latest: CheckedDoc | None = None

    for _, group in groupby(dated, key=lambda d: d.parsed.filename_date):
        group = list(group)
        if latest is not None:
            for d in group:
                if d.record.date < latest.record.date:
                    issues.append(Issue(
                        path=d.parsed.rel_path, code="date-order", severity=Severity.error,
                        message=(
                            f"date {format_post_date(d.record.date)} is earlier than "
                            f"{latest.parsed.rel_path} ({format_post_date(latest.record.date)})"
                        ),
                    ))
        for d in group:
            if latest is None or d.record.date > latest.record.date:
                latest = d
    return issues


def check_drafts(docs: list[CheckedDoc]) -> list[Issue]:
    """Draft copies must agree on (title, date); unrelated posts must not share one."""
    issues = []
    by_canonical: dict[str, list[CheckedDoc]] = defaultdict(list)
    by_pair: dict[tuple, list[CheckedDoc]] = defaultdict(list)
    for d in _posts(docs):
        by_canonical[d.parsed.canonical].append(d)
        by_pair[(d.record.title, d.record.date)].append(d)

    for copies in by_canonical.values():
        first = copies[0]
        for other in copies[1:]:
            differs = [
                name for name, a, b in (
                    ("title", first.record.title, other.record.title),
                    ("date", first.record.date, other.record.date),
                ) if a != b
            ]
            if differs:
                issues.append(Issue(
                    path=other.parsed.rel_path, code="draft-inconsistent", severity=Severity.error,
                    message=f"{' and '.join(differs)} differ from draft copy {first.parsed.rel_path}",
                ))

    for (title, _), same in by_pair.items():
        seen: dict[str, CheckedDoc] = {}
        for d in same:
            if seen and d.parsed.canonical not in seen:
                original = next(iter(seen.values()))
                issues.append(Issue(
                    path=d.parsed.rel_path, code="duplicate-post", severity=Severity.error,
                    message=f"'{title}' has the same title and date as {original.parsed.rel_path}",
                ))
            seen.setdefault(d.parsed.canonical, d)
    return issues


def check_images(docs: list[CheckedDoc], root: Path) -> list[Issue]:
    """Local image references must exist: relative to the document, or to root when they start with '/'."""
    issues = []
    for d in docs:
        for ref in image_refs(d.parsed.tokens):
            target = root / ref.lstrip('/') if ref.startswith('/') else d.parsed.path.parent / ref
            if not target.exists():
                issues.append(Issue(
                    path=d.parsed.rel_path, code="missing-image", severity=Severity.warning,
                    message=f"image '{ref}' not found",
                ))
    return issues


def check_corpus(docs: list[CheckedDoc], root: Path, images: bool = True) -> list[Issue]:
    issues = check_date_order(docs) + check_drafts(docs)
    if images:
        issues.extend(check_images(docs, root))
    return issues
