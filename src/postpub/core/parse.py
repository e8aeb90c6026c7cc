"""Post file loading: YAML frontmatter metadata followed by the HTML body"""

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from postpub.core.models import ImageDescriptor, PostContent


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
POST_KEYS = ('title', 'meta_title', 'meta_description', 'keyword', 'template_type', 'tags', 'author')


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body); a post without frontmatter is an error."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        raise ValueError("Missing YAML frontmatter (expected a leading '---' block)")
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def parse_post(text: str) -> tuple[PostContent, ImageDescriptor]:
    """Parse post text into (PostContent, ImageDescriptor)."""
    fm, body = _strip_frontmatter(text)
    if not str(fm.get('title') or '').strip():
        raise ValueError("Frontmatter is missing 'title'")

    fields = {k: fm[k] for k in POST_KEYS if fm.get(k) is not None}
    if isinstance(fields.get('tags'), str):
        fields['tags'] = [t.strip() for t in fields['tags'].split(',') if t.strip()]
    try:
        post = PostContent(html=body.strip(), **fields)
        image = ImageDescriptor(url=fm.get('image_url') or None, alt_text=fm.get('image_alt') or "")
    except ValidationError as e:
        raise ValueError(f"Invalid post metadata: {e}") from e
    return post, image


def load_post(path: Path) -> tuple[PostContent, ImageDescriptor]:
    """Read and parse a post file."""
    return parse_post(Path(path).read_text(encoding='utf-8'))
