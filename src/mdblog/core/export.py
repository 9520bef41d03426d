"""Export: normalized Markdown, sidecar JSON, and catalog.json"""

import json
from pathlib import Path

import yaml
from sqlmodel import Session

from mdblog.core.catalog import build_catalog
from mdblog.crud.documents import get_all_documents, get_terms
from mdblog.crud.models import Document


CATALOG_FILE = "catalog.json"


def build_markdown(doc: Document) -> str:
    """Return the body with its normalized YAML frontmatter block (plus slug) prepended."""
    fm = dict(doc.frontmatter or {})
    fm['slug'] = doc.slug
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{doc.markdown.lstrip()}"


def build_sidecar(doc: Document) -> dict:
    """Sidecar JSON dict: identity, committed_at, frontmatter, and body facts."""
    return {
        "slug": doc.slug,
        "path": doc.path,
        "kind": doc.kind.value,
        "committed_at": doc.committed_at.isoformat() if doc.committed_at else None,
        "frontmatter": doc.frontmatter or {},
        "images": list(doc.images or []),
        "code_languages": list(doc.code_languages or []),
        "word_count": doc.word_count,
    }


def write_doc(doc: Document, output_dir: Path) -> tuple[Path, Path]:
    """Write normalized Markdown + sidecar JSON for a single document.

    Output mirrors the source path: output_dir / doc.path, with the sidecar
    next to it as '<file name>.json' (about.md -> about.md.json). Returns (md_path, json_path).
    """
    md_path = output_dir / doc.path
    md_path.parent.mkdir(parents=True, exist_ok=True)
    json_path = md_path.with_name(f"{md_path.name}.json")

    md_path.write_text(build_markdown(doc), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(doc), indent=2, ensure_ascii=False), encoding='utf-8')
    return md_path, json_path


def write_catalog(session: Session, output_dir: Path) -> Path:
    """Write catalog.json for every stored document. Returns its path."""
    docs = get_all_documents(session)
    terms_by_doc = {d.id: get_terms(session, d.id) for d in docs}
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / CATALOG_FILE
    path.write_text(json.dumps(build_catalog(docs, terms_by_doc), indent=2, ensure_ascii=False), encoding='utf-8')
    return path
