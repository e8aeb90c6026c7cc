"""CMS export: Lexical JSON rendering, post payload, and output files"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from postpub.core.models import (
    BoldText, Heading, ImageDescriptor, Link, ListBlock, Paragraph, PostContent, Quote, Text,
)
from postpub.core.seo import SeoReport


logger = logging.getLogger(__name__)

POST_STATUSES = ("draft", "scheduled", "published")
BOLD_FORMAT = 1


def _lexical_inline(node) -> dict:
    if isinstance(node, BoldText):
        return {"type": "text", "text": node.value, "format": BOLD_FORMAT}
    if isinstance(node, Link):
        return {"type": "link", "url": node.url, "children": [{"type": "text", "text": node.text}]}
    if isinstance(node, Text):
        return {"type": "text", "text": node.value}
    raise TypeError(f"Unsupported inline node: {type(node).__name__}")


def _lexical_paragraph(children: list) -> dict:
    return {"type": "paragraph", "children": [_lexical_inline(n) for n in children]}


def _lexical_block(node) -> dict:
    if isinstance(node, Heading):
        return {"type": "heading", "tag": f"h{node.level}", "children": [_lexical_inline(n) for n in node.children]}
    if isinstance(node, Paragraph):
        return _lexical_paragraph(node.children)
    if isinstance(node, ListBlock):
        return {
            "type": "list",
            "listType": "number" if node.ordered else "bullet",
            "children": [{"type": "listitem", "children": [_lexical_paragraph(item)]} for item in node.items],
        }
    if isinstance(node, Quote):
        return {"type": "quote", "children": [_lexical_paragraph(node.children)]}
    raise TypeError(f"Unsupported block node: {type(node).__name__}")


def to_lexical(nodes: list) -> dict:
    """Render document nodes as a Lexical editor state."""
    return {
        "root": {
            "type": "root",
            "children": [_lexical_block(n) for n in nodes],
            "direction": "ltr",
            "format": "",
            "indent": 0,
            "version": 1,
        }
    }


def build_post_payload(
    post: PostContent,
    nodes: list,
    image: Optional[ImageDescriptor] = None,
    status: str = "draft",
    publish_at: Optional[datetime] = None,
    ) -> dict:
    """Build the CMS create-post payload.

    scheduled posts need publish_at; published posts default it to now.
    Raises ValueError for an unknown status or a scheduled post without a date.
    """
    if status not in POST_STATUSES:
        raise ValueError(f"Unknown post status {status!r}, expected one of {', '.join(POST_STATUSES)}")
    if status == "scheduled" and publish_at is None:
        raise ValueError("Scheduled posts require a publish date")
    if status == "published" and publish_at is None:
        publish_at = datetime.now(timezone.utc)

    payload = {
        "title": post.title,
        "lexical": json.dumps(to_lexical(nodes)),
        "status": status,
        "meta_title": post.meta_title,
        "meta_description": post.meta_description,
        "og_title": post.meta_title,
        "og_description": post.meta_description,
        "tags": list(post.tags),
    }
    if image is not None and image.url:
        payload["feature_image"] = image.url
        payload["feature_image_alt"] = image.alt_text
    if publish_at is not None:
        payload["published_at"] = publish_at.isoformat()
    return payload


def write_outputs(
    slug: str,
    payload: dict,
    report: SeoReport,
    schema: list[dict],
    output_dir: Path,
    ) -> tuple[Path, Path, Path]:
    """Write <slug>.post.json, <slug>.seo.json and <slug>.schema.json. Returns the three paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    post_path = output_dir / f"{slug}.post.json"
    seo_path = output_dir / f"{slug}.seo.json"
    schema_path = output_dir / f"{slug}.schema.json"

    post_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')
    seo_path.write_text(report.model_dump_json(indent=2), encoding='utf-8')
    schema_path.write_text(json.dumps(schema, indent=2, ensure_ascii=False), encoding='utf-8')
    logger.info("Wrote %s outputs to %s", slug, output_dir)
    return post_path, seo_path, schema_path
