"""CLI command implementations"""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from postpub.config import Settings, load_config
from postpub.core.export import to_lexical
from postpub.core.models import ValidationResult
from postpub.core.pipeline import PostRejected, run_build, run_convert, run_validate
from postpub.core.seo import build_report
from postpub.crud.database import init_db, make_engine
from postpub.crud.history import SQLTopicHistory


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


def _offline(offline: bool) -> Optional[bool]:
    return False if offline else None


def _echo_validation(result: ValidationResult) -> None:
    """Print verdict, messages, and metrics."""
    verdict = "PASS" if result.valid else "FAIL"
    typer.echo(f"{verdict}: {len(result.errors)} error(s), {len(result.warnings)} warning(s)")
    if result.errors:
        typer.echo("Errors:")
        for msg in result.errors:
            typer.echo(f"  - {msg}")
    if result.warnings:
        typer.echo("Warnings:")
        for msg in result.warnings:
            typer.echo(f"  - {msg}")
    m = result.metrics
    typer.echo(
        f"Metrics: {m.word_count} words, {m.paragraph_count} paragraphs, {m.heading_count} headings, "
        f"{m.link_count} links, {m.first_person_count} first-person, {m.regional_mention_count} regional"
    )


def validate_cmd(
    path: Annotated[str, typer.Argument(help="Post file (YAML frontmatter + HTML body)")],
    offline: Annotated[bool, typer.Option("--offline", help="Skip image and link HEAD probes")] = False,
    ):
    """Run the pre-publication quality gate; exits 1 when the post is rejected."""
    settings = _settings(overrides={"check_links_online": _offline(offline)})
    try:
        _, _, result = run_validate(path, settings, online=not offline)
    except (OSError, ValueError) as e:
        _fail(f"Could not load {path}", e)
    _echo_validation(result)
    if not result.valid:
        raise typer.Exit(1)


def convert_cmd(
    path: Annotated[str, typer.Argument(help="Post file (YAML frontmatter + HTML body)")],
    lexical: Annotated[bool, typer.Option("--lexical", help="Print Lexical editor JSON instead of the node tree")] = False,
    ):
    """Convert the post body to document nodes and print them as JSON."""
    settings = _settings()
    try:
        nodes = run_convert(path, settings)
    except (OSError, ValueError) as e:
        _fail(f"Could not load {path}", e)
    data = to_lexical(nodes) if lexical else [n.model_dump() for n in nodes]
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def report_cmd(
    path: Annotated[str, typer.Argument(help="Post file (YAML frontmatter + HTML body)")],
    offline: Annotated[bool, typer.Option("--offline", help="Skip image and link HEAD probes")] = False,
    ):
    """Print the SEO score, grade, and top recommendations."""
    settings = _settings(overrides={"check_links_online": _offline(offline)})
    try:
        post, image, result = run_validate(path, settings, online=not offline)
    except (OSError, ValueError) as e:
        _fail(f"Could not load {path}", e)
    report = build_report(post, result, image)
    typer.echo(f"SEO score: {report.score}/100 (grade {report.grade})")
    components = [
        ("Meta title", report.meta_title.score),
        ("Meta description", report.meta_description.score),
        ("Keyword usage", report.keyword_usage.score),
        ("Headings", report.headings.score),
        ("Readability", report.readability.score),
        ("Links", report.links.score),
        ("Image", report.image.score),
    ]
    for name, score in components:
        typer.echo(f"  {name:<17}{score}/100")
    for rec in report.recommendations[:5]:
        typer.echo(f"  [{rec.priority}] {rec.category}: {rec.issue} -> {rec.fix}")


def build_cmd(
    path: Annotated[str, typer.Argument(help="Post file (YAML frontmatter + HTML body)")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    status: Annotated[str, typer.Option("--status", help="draft, scheduled or published")] = "draft",
    publish_at: Annotated[Optional[str], typer.Option("--publish-at", help="ISO-8601 publish time")] = None,
    offline: Annotated[bool, typer.Option("--offline", help="Skip image and link HEAD probes")] = False,
    ):
    """Validate, convert, and write post/SEO/schema JSON; records the title in topic history."""
    settings = _settings(overrides={"output_dir": out, "check_links_online": _offline(offline)})
    when = None
    if publish_at:
        try:
            when = datetime.fromisoformat(publish_at)
        except ValueError as e:
            _fail(f"Invalid --publish-at value: {publish_at}", e)

    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        with Session(engine) as session:
            store = SQLTopicHistory(session, settings.max_history)
            result = run_build(path, settings, store=store, status=status, publish_at=when, online=not offline)
    except PostRejected as e:
        _echo_validation(e.validation)
        _fail(str(e))
    except (OSError, ValueError) as e:
        _fail(f"Build failed for {path}", e)

    for p in result.paths:
        typer.echo(f"  {result.slug} -> {p}")
    typer.echo(f"Built {result.slug} ({status}), SEO {result.report.score}/100 ({result.report.grade})")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the topic-history schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine, reset=reset)
    if reset:
        typer.echo("Existing data cleared.")
    typer.echo(f"Database initialized at: {settings.db_url}")


def history_list_cmd(
    limit: Annotated[int, typer.Option("--limit", help="Max titles to show; 0 = all")] = 20,
    ):
    """List recently used titles, newest first."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        records = SQLTopicHistory(session, settings.max_history).recent(limit or None)
    if not records:
        typer.echo("No titles in topic history.")
        return
    for r in records:
        typer.echo(f"{r.created_at:%Y-%m-%d %H:%M}  {r.title}" + (f"  [{r.keyword}]" if r.keyword else ""))


def history_check_cmd(
    title: Annotated[str, typer.Argument(help="Candidate title")],
    ):
    """Check a candidate title against topic history; exits 1 when already used."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        used = SQLTopicHistory(session, settings.max_history).is_used(title)
    typer.echo("used" if used else "available")
    if used:
        raise typer.Exit(1)
