"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdblog.config import Settings, load_config
from mdblog.core.pipeline import run_commit, run_export, run_extract, run_lint
from mdblog.core.utils.diff import diff_summary
from mdblog.crud.database import init_db, make_engine, reset_db
from mdblog.crud.documents import get_all_documents, get_by_slug, get_last_committed, list_terms
from mdblog.crud.models import TermKind
from mdblog.crud.versioning import diff_versions, list_versions


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _echo_extract(results: list, staging_dir: Path) -> None:
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Extracted {len(results)} document(s) to {staging_dir}/")


def _echo_commit(counts: dict, changes: list) -> None:
    """Print per-doc commit status and a summary line."""
    for status, path in changes:
        typer.echo(f"  {status}: {path}")
    typer.echo(
        f"Commit complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def _echo_export(results: list, catalog_path: Path, output_dir: Path) -> None:
    for path, md_path in results:
        typer.echo(f"  {path} -> {md_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")
    typer.echo(f"Catalog written to {catalog_path}")


def lint_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to check")],
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Fail on warnings too")] = None,
    images: Annotated[Optional[bool], typer.Option("--images/--no-images", help="Check local image references")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Validate frontmatter and corpus-wide invariants."""
    settings = _settings(overrides={"strict": strict, "check_images": images, "parser_config": parser})
    try:
        report = run_lint(path, settings.parser_config, settings.check_images)
    except RuntimeError as e:
        _fail(str(e))

    for issue in sorted(report.issues, key=lambda i: (i.path, i.severity.value, i.code)):
        typer.echo(str(issue))
    typer.echo(
        f"Checked {len(report.docs)} document(s): "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if report.failed(settings.strict):
        raise typer.Exit(1)


def extract_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to extract from")],
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Refuse to stage on warnings too")] = None,
    images: Annotated[Optional[bool], typer.Option("--images/--no-images", help="Check local image references")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Lint, then stage normalized frontmatter and body facts as JSON."""
    settings = _settings(overrides={
        "staging_dir": staging, "strict": strict, "check_images": images, "parser_config": parser,
    })
    staging_dir = Path(settings.staging_dir)
    try:
        results = run_extract(path, settings.parser_config, staging_dir, settings.check_images, settings.strict)
    except RuntimeError as e:
        _fail(str(e))
    _echo_extract(results, staging_dir)


def commit_cmd(
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    versions: Annotated[Optional[int], typer.Option("--max-versions", help="Max stored revisions per doc")] = None,
    ):
    """Upsert staged documents to the database, keeping revision history."""
    settings = _settings(overrides={"staging_dir": staging, "max_versions": versions})
    engine = _engine(settings)
    try:
        counts, changes = run_commit(engine, settings.max_versions, Path(settings.staging_dir))
    except Exception as e:
        _fail("Commit failed", e)
    if not counts:
        typer.echo("Nothing staged. Run 'mdblog extract <path>' first.")
        raise typer.Exit(1)
    _echo_commit(counts, changes)


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    all_docs: Annotated[bool, typer.Option("--all", help="Export all documents in the database")] = False,
    ):
    """Write normalized Markdown + sidecar JSON and the catalog to the output dir."""
    settings = _settings(overrides={"output_dir": out})
    engine = _engine(settings)
    output_dir = Path(settings.output_dir)

    try:
        with Session(engine) as session:
            docs = get_all_documents(session) if all_docs else get_last_committed(session)
            if not docs:
                typer.echo(f"No documents found for scope: {'all' if all_docs else 'last commit'}.")
                raise typer.Exit(1)
            results, catalog_path = run_export(session, docs, output_dir)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("Export failed", e)
    _echo_export(results, catalog_path, output_dir)


def build_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to process")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    versions: Annotated[Optional[int], typer.Option("--max-versions", help="Max stored revisions per doc")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Refuse to stage on warnings too")] = None,
    images: Annotated[Optional[bool], typer.Option("--images/--no-images", help="Check local image references")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Run the full pipeline: lint -> extract -> commit -> export."""
    settings = _settings(overrides={
        "output_dir": out, "staging_dir": staging, "max_versions": versions, "strict": strict,
        "check_images": images, "parser_config": parser,
    })
    engine = _engine(settings)
    staging_dir = Path(settings.staging_dir)

    # --- extract ---
    try:
        extracted = run_extract(path, settings.parser_config, staging_dir, settings.check_images, settings.strict)
    except RuntimeError as e:
        _fail(str(e))
    if not extracted:
        _fail(f"No .md/.mdx documents found in {path}")
    _echo_extract(extracted, staging_dir)

    # --- commit ---
    try:
        counts, changes = run_commit(engine, settings.max_versions, staging_dir)
    except Exception as e:
        _fail("Commit failed", e)
    _echo_commit(counts, changes)

    # --- export ---
    output_dir = Path(settings.output_dir)
    try:
        with Session(engine) as session:
            results, catalog_path = run_export(session, get_all_documents(session), output_dir)
    except Exception as e:
        _fail("Export failed", e)
    _echo_export(results, catalog_path, output_dir)


def terms_cmd(
    kind: Annotated[Optional[TermKind], typer.Option("--kind", help="Only categories or only tags")] = None,
    ):
    """List categories and tags of visible posts with their post counts."""
    settings = _settings()
    engine = _engine(settings)
    with Session(engine) as session:
        rows = list_terms(session, kind)
    if not rows:
        typer.echo("No terms found in database.")
        raise typer.Exit(1)
    for term_kind, name, count in rows:
        typer.echo(f"{term_kind.value}\t{name}\t{count}")


def history_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of the document")],
    ):
    """Show stored revisions of a document with line-change stats against the next revision."""
    settings = _settings()
    engine = _engine(settings)
    with Session(engine) as session:
        doc = get_by_slug(session, slug)
        if doc is None:
            _fail(f"No document with slug '{slug}'")
        versions = list_versions(session, doc.id)
        typer.echo(f"{doc.path} ({len(versions)} stored revision(s))")
        texts = [v.markdown for v in versions] + [doc.markdown]
        for v, newer in zip(versions, texts[1:]):
            stats = diff_summary(v.markdown, newer)
            typer.echo(
                f"  v{v.version_num}  {v.created_at:%Y-%m-%d %H:%M:%S}  {v.hash[:12]}  "
                f"+{stats['added']} -{stats['deleted']}"
            )
        typer.echo(f"  current  {doc.updated_at:%Y-%m-%d %H:%M:%S}  {doc.hash[:12]}")


def diff_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of the document")],
    from_num: Annotated[int, typer.Argument(help="Older revision number")],
    to_num: Annotated[Optional[int], typer.Argument(help="Newer revision number; omit for the current body")] = None,
    context: Annotated[int, typer.Option("--context", "-U", help="Lines of context")] = 3,
    ):
    """Print a unified diff between two revisions of a document."""
    settings = _settings()
    engine = _engine(settings)
    with Session(engine) as session:
        doc = get_by_slug(session, slug)
        if doc is None:
            _fail(f"No document with slug '{slug}'")
        try:
            lines = diff_versions(session, doc, from_num, to_num, context)
        except ValueError as e:
            _fail(str(e))
    if not lines:
        typer.echo("No differences.")
        return
    typer.echo("".join(lines), nl=False)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")
