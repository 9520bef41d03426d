"""Pipeline step functions: lint, extract, commit, and export orchestration"""

import logging
from datetime import datetime
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from mdblog.core.checks import check_corpus
from mdblog.core.errors import FrontmatterError
from mdblog.core.export import write_catalog, write_doc
from mdblog.core.extract import extract_doc
from mdblog.core.models import CheckedDoc, Issue, LintReport, Severity, StagedDoc
from mdblog.core.parse import corpus_root, discover_files, parse_file
from mdblog.core.validate import validate_doc
from mdblog.crud.documents import commit_doc
from mdblog.crud.models import Document


logger = logging.getLogger(__name__)


def staging_name(rel_path: str) -> str:
    """Staging file for a corpus-relative path: the same tree with '.json' appended to the file name."""
    return f"{rel_path}.json"


def clear_staging(staging_dir: Path) -> int:
    """Delete staged JSON left by an earlier extract. Returns count deleted."""
    if not staging_dir.exists():
        return 0
    stale = list(staging_dir.rglob('*.json'))
    for f in stale:
        f.unlink()
    return len(stale)


def run_lint(path: str, parser_config: str = 'gfm-like', check_images: bool = True) -> LintReport:
    """Parse and validate every document under path, then run the corpus checks.

    Unreadable frontmatter is reported as an issue; any other per-file
    failure raises RuntimeError naming the file.
    """
    target = Path(path)
    if not target.exists():
        raise RuntimeError(f"Path not found: {path}")
    root = corpus_root(target)

    report = LintReport()
    for p in discover_files(target):
        try:
            parsed = parse_file(p, root, parser_config)
        except FrontmatterError as e:
            report.issues.append(Issue(path=e.path, code="invalid-frontmatter", severity=Severity.error, message=e.reason))
            continue
        except Exception as e:
            raise RuntimeError(f"Failed to parse {p}: {e}") from e
        record, issues = validate_doc(parsed)
        report.issues.extend(issues)
        report.docs.append(CheckedDoc(parsed=parsed, record=record))

    report.issues.extend(check_corpus(report.docs, root, images=check_images))
    logger.info(
        "Linted %d document(s): %d error(s), %d warning(s)",
        len(report.docs), len(report.errors), len(report.warnings),
    )
    return report


def run_extract(
    path: str,
    parser_config: str,
    staging_dir: Path,
    check_images: bool = True,
    strict: bool = False,
    ) -> list[tuple[str, Path]]:
    """Lint path, then write StagedDoc JSON to staging_dir. Returns (source_path, staging_file) pairs.

    Raises RuntimeError when the corpus fails linting (warnings count under strict).
    """
    report = run_lint(path, parser_config, check_images)
    if report.failed(strict):
        raise RuntimeError(
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s) in {path}; "
            f"run 'mdblog lint {path}' for details"
        )

    if removed := clear_staging(staging_dir):
        logger.debug("Removed %d stale staging file(s) from %s", removed, staging_dir)
    staging_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for checked in report.docs:
        parsed = checked.parsed
        try:
            staged = extract_doc(parsed, checked.record)
            out_file = staging_dir / staging_name(parsed.rel_path)
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(staged.model_dump_json(indent=2), encoding='utf-8')
            results.append((parsed.rel_path, out_file))
        except Exception as e:
            raise RuntimeError(f"Failed to extract {parsed.path}: {e}") from e
    logger.info("Staged %d document(s) in %s", len(results), staging_dir)
    return results


def run_commit(
    engine: Engine,
    max_versions: int,
    staging_dir: Path,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Read staged StagedDoc JSON and commit to the database.

    Returns (counts, changes) where changes is a list of (status, path) for
    created/updated docs. Returns ({}, []) when staging_dir is empty.
    """
    files = sorted(staging_dir.rglob('*.json')) if staging_dir.exists() else []
    if not files:
        return {}, []

    committed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for f in files:
            staged = StagedDoc.model_validate_json(f.read_text(encoding='utf-8'))
            doc, status = commit_doc(session, staged.model_dump(), max_versions, committed_at)
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.path))
        session.commit()
    logger.info("Committed %d staged document(s): %s", len(files), counts)
    return counts, changes


def run_export(
    session: Session,
    docs: list[Document],
    output_dir: Path,
    ) -> tuple[list[tuple[str, Path]], Path]:
    """Write docs and the catalog to output_dir using an open session.

    Returns ((path, md_path) pairs, catalog_path). The catalog always covers every stored document.
    """
    results = []
    for doc in docs:
        md_path, _ = write_doc(doc, output_dir)
        results.append((doc.path, md_path))
    catalog_path = write_catalog(session, output_dir)
    logger.info("Exported %d document(s) and %s", len(results), catalog_path)
    return results, catalog_path
