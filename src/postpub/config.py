"""Application configuration: settings schema and config.yaml loader"""

import os
import typing
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "POSTPUB_"


class Settings(BaseModel):
    app_name:      str = "postpub"
    db_url:        str = "sqlite:///postpub.db"
    output_dir:    str = Field(default="dist",     description="Directory for post payload, SEO report and schema JSON")
    log_level:     str = Field(default="INFO",     pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt preset used to repair markdown answers")
    repair_spacing: bool = Field(default=True,     description="Insert missing spaces around <strong>/<a> before converting")

    # network probes
    request_timeout:    float = Field(default=5.0, gt=0, description="Per-request HEAD timeout in seconds")
    user_agent:         str   = "postpub-linkcheck/1.0"
    check_links_online: bool  = Field(default=True, description="HEAD-probe sampled body links")
    link_sample_size:   int   = Field(default=5, ge=0, description="Max body links probed per post")

    # title
    title_max_chars: int = Field(default=60, ge=1)
    title_min_chars: int = Field(default=40, ge=0)
    generic_title_terms: list[str] = ["guide", "tips", "things", "ways", "everything", "basics", "ideas"]

    # body structure
    min_words:           int = Field(default=800,  ge=0)
    max_words:           int = Field(default=1800, ge=1)
    min_paragraphs:      int = Field(default=6,    ge=0)
    max_sentence_words:  int = Field(default=25,   ge=1)
    long_sentence_limit: int = Field(default=5,    ge=0, description="Long sentences tolerated before warning")
    min_h2:              int = Field(default=4,    ge=0)
    max_h2:              int = Field(default=8,    ge=1)
    generic_headings: list[str] = ["Introduction", "Conclusion", "Overview", "Background", "Summary"]
    faq_templates:    list[str] = Field(default=["How-To / Playbook"], description="Templates that require an FAQ H2")

    # voice
    banned_phrases: list[str] = [
        "this article", "this post", "this piece", "this blog",
        "we at ignition", "ignition studio", "contact us", "our services",
    ]
    citation_exempt_phrases: list[str] = ["this article"]
    passive_voice_limit: int = Field(default=15, ge=0)
    min_first_person:    int = Field(default=0,  ge=0, description="Required first-person markers; 0 disables")

    # regional context
    regions: list[str] = ["Singapore", "APAC", "Southeast Asia", "Asia-Pacific"]
    require_regional: bool = True
    recent_year_span: int = Field(default=2, ge=0, description="Years back still counted as recent")

    # SEO metadata
    meta_title_max:       int   = Field(default=60,  ge=1)
    meta_title_min:       int   = Field(default=40,  ge=0)
    meta_description_min: int   = Field(default=150, ge=0)
    meta_description_max: int   = Field(default=160, ge=1)
    keyword_density_min:  float = Field(default=0.5, ge=0)
    keyword_density_max:  float = Field(default=3.0, gt=0)

    # image + links
    alt_text_min: int = Field(default=10,  ge=0)
    alt_text_max: int = Field(default=125, ge=1)
    min_links:    int = Field(default=3,   ge=0)

    # conclusion
    strict_conclusion:         bool = Field(default=True, description="Bold markup in the conclusion is an error")
    conclusion_heading_window: int  = Field(default=500, ge=0, description="Chars before the last paragraph scanned for headings")
    conclusion_min_words:      int  = Field(default=20,  ge=0)
    conclusion_max_words:      int  = Field(default=100, ge=1)

    # history + publishing
    max_history: int = Field(default=200, ge=1, description="Titles kept in topic history")
    site_url:    str = "https://ignitionstudio.co"
    org_name:    str = "Ignition Studio"


def _is_list_field(name: str) -> bool:
    return typing.get_origin(Settings.model_fields[name].annotation) is list


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            # list fields are comma-separated in the environment
            data[name] = [v.strip() for v in val.split(",") if v.strip()] if _is_list_field(name) else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
