"""URL slug generation."""

from __future__ import annotations

import re

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def slugify(name: str) -> str:
    """Lower-case ``name`` and reduce it to ``[a-z0-9-]`` with single hyphens.

    Idempotent: ``slugify(slugify(x)) == slugify(x)``. Two different names can
    produce the same slug; callers that need uniqueness must check for it.
    """
    slug = _DISALLOWED_RE.sub("", name.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")
