"""Split PORTFOLIO.md documents into a YAML header and a markdown body."""

from __future__ import annotations

import re
from typing import Any

import yaml

from portfolio_sync.models.errors import FrontmatterParseError

_FRONTMATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def split_document(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its parsed header and its body.

    A document without a leading ``---`` block has an empty header and the
    whole text as body.

    Args:
        text: Full document text.

    Returns:
        Tuple of (header mapping, body text).

    Raises:
        FrontmatterParseError: If the header is not valid YAML or not a mapping.
    """
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterParseError(f"Invalid YAML frontmatter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterParseError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )

    return data, text[match.end() :]


def render_document(header: dict[str, Any], body: str = "") -> str:
    """Render a header mapping and body back into document text."""
    header_text = yaml.safe_dump(header, sort_keys=False, allow_unicode=True)
    body_stripped = body.lstrip("\n")
    return f"---\n{header_text}---\n\n{body_stripped}"
