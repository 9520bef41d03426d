"""Text helpers: content hashing, slugs, and draft-iteration markers"""

import hashlib
import re


DRAFT_SUFFIX_RE = re.compile(r'-(?:v\d+|draft\d*|copy\d*|old|bak|wip)$')


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content (64 chars, matches String(64) column)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def canonical_slug(slug: str) -> str:
    """Strip trailing draft markers ('-v2', '-draft', '-copy', ...) so draft copies share one key."""
    while True:
        stripped = DRAFT_SUFFIX_RE.sub('', slug)
        if stripped == slug or not stripped:
            return slug
        slug = stripped


def count_words(text: str) -> int:
    return len(text.split())
