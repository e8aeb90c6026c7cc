"""Data models for post content, validation results, and the converted document tree"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TemplateType(str, Enum):
    """Content templates the generator writes against"""
    strategic_framework = "Strategic Framework"
    case_study = "Case Study Analysis"
    vision_outlook = "Vision & Outlook"
    point_of_view = "Point of View (POV)"
    how_to = "How-To / Playbook"
    expert_qa = "Expert Q&A"


class PostContent(BaseModel):
    """A generated post: HTML body plus SEO metadata. Immutable once produced."""
    model_config = ConfigDict(frozen=True)

    title: str
    html: str
    meta_title: str = ""
    meta_description: str = ""
    keyword: str = ""
    template_type: str = TemplateType.strategic_framework.value
    tags: list[str] = []
    author: Optional[str] = None


class ImageDescriptor(BaseModel):
    """Featured image; url=None means the post has no hero image."""
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    alt_text: str = ""


class ContentMetrics(BaseModel):
    word_count:             int = Field(default=0, ge=0)
    paragraph_count:        int = Field(default=0, ge=0)
    heading_count:          int = Field(default=0, ge=0)
    link_count:             int = Field(default=0, ge=0)
    first_person_count:     int = Field(default=0, ge=0)
    regional_mention_count: int = Field(default=0, ge=0)


class CheckResult(BaseModel):
    """Messages produced by a single validation check."""
    errors: list[str] = []
    warnings: list[str] = []

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def warn(self, msg: str) -> None:
        self.warnings.append(msg)


class ValidationResult(BaseModel):
    """Gate verdict: valid is True exactly when no errors were recorded."""
    valid: bool
    errors: list[str] = []
    warnings: list[str] = []
    metrics: ContentMetrics = ContentMetrics()

    @model_validator(mode="after")
    def _valid_matches_errors(self) -> "ValidationResult":
        if self.valid != (not self.errors):
            raise ValueError("valid must be True exactly when errors is empty")
        return self


# --- document tree ---

class Text(BaseModel):
    type: Literal["text"] = "text"
    value: str


class BoldText(BaseModel):
    type: Literal["bold"] = "bold"
    value: str


class Link(BaseModel):
    type: Literal["link"] = "link"
    url: str
    text: str


InlineNode = Annotated[Union[Text, BoldText, Link], Field(discriminator="type")]


class Heading(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    children: list[InlineNode]


class Paragraph(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    children: list[InlineNode]


class ListBlock(BaseModel):
    type: Literal["list"] = "list"
    ordered: bool = False
    items: list[list[InlineNode]]


class Quote(BaseModel):
    type: Literal["quote"] = "quote"
    children: list[InlineNode]


DocumentNode = Annotated[Union[Heading, Paragraph, ListBlock, Quote], Field(discriminator="type")]


def inline_text(node) -> str:
    """Return the visible text of an inline node."""
    return node.text if isinstance(node, Link) else node.value


def block_text(block) -> str:
    """Return the concatenated visible text of a block node."""
    if isinstance(block, ListBlock):
        return "\n".join("".join(inline_text(n) for n in item) for item in block.items)
    return "".join(inline_text(n) for n in block.children)
