#!/usr/bin/env python3
"""
Command-line interface for drafting, comparing and archiving cover letters.

Commands:
    generate - Draft letters for a job with two providers, pick and edit one, archive it
    similar  - Show archived letters most similar to a job description
    store    - Archive an already-final letter for a job description
    init     - Check the store connection and create the letters collection

Usage:
    python scripts/cover_letter.py generate
    python scripts/cover_letter.py generate --source file --file job.md
    python scripts/cover_letter.py similar --source paste --limit 5
    python scripts/cover_letter.py store --job-file job.md --letter-file letter.md
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from lettersmith.app import build_services
from lettersmith.contexts.drafting.drafts import Draft, generate_drafts
from lettersmith.contexts.intake.text_acquisition import EditorAcquirer, get_acquirer
from lettersmith.exceptions import LettersmithError
from lettersmith.utils.config import load_settings
from lettersmith.utils.logger import setup_logger
from lettersmith.utils.text_processing import (
    DiffSegment,
    count_changed_words,
    truncate_display,
    word_diff,
)

app = typer.Typer(
    add_completion=False,
    help="Draft, compare and archive cover letters",
    invoke_without_command=True,
)

SOURCES = ("prompt", "paste", "file", "editor")
PREVIEW_CHARS = 300


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# =============================================================================
# HELPERS
# =============================================================================


def _start_session(command: str, config: Optional[Path]):
    """Load settings and route logs to <logging.dir>/<command>_<timestamp>/."""
    settings = load_settings(config)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = setup_logger(
        context_name=command,
        log_dir=Path(settings.logging.dir) / f"{command}_{timestamp}",
        extra_provenance={
            "Embedding": f"{settings.embedding.provider}/{settings.embedding.model}",
            "Store backend": settings.store.backend,
        },
    )
    typer.secho(f"Log: {log_file}", fg=typer.colors.BRIGHT_BLACK)
    return settings


def _acquire(source: str, file_path: Optional[Path], label: str) -> str:
    if source not in SOURCES:
        typer.secho(
            f"Unknown source '{source}'. Use one of: {', '.join(SOURCES)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    text = get_acquirer(source, file_path=file_path).acquire_text(label)
    if not text.strip():
        typer.secho(f"{label} cannot be empty", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return text


def print_header(title: str):
    """Print a section header with underline."""
    typer.secho(f"\n {title}", bold=True, fg=typer.colors.CYAN)
    typer.echo(" " + "─" * len(title))


def print_draft(draft: Draft):
    typer.secho(
        f"\nDraft ({draft.label}) - {draft.provider_name}", bold=True, fg=typer.colors.GREEN
    )
    typer.echo(draft.content)


def print_diff(segments: List[DiffSegment]):
    """Write a word diff: additions green, removals red, unchanged text dimmed."""
    for segment in segments:
        if segment.added:
            typer.secho(segment.value, fg=typer.colors.GREEN, nl=False)
        elif segment.removed:
            typer.secho(segment.value, fg=typer.colors.RED, strikethrough=True, nl=False)
        else:
            typer.secho(segment.value, fg=typer.colors.BRIGHT_BLACK, nl=False)
    typer.echo()


def _fail(error: Exception):
    typer.secho(f"\n✗ {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


# =============================================================================
# COMMANDS
# =============================================================================


@app.command()
def generate(
    source: Annotated[
        str,
        typer.Option("--source", "-s", help="Job description source: prompt, paste, file, editor"),
    ] = "prompt",
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Job description file (with --source file)"),
    ] = None,
    profile: Annotated[
        Optional[Path],
        typer.Option("--profile", "-p", help="Profile file (default: settings profile.path)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML settings file"),
    ] = None,
    skip_store: Annotated[
        bool,
        typer.Option("--skip-store", help="Do not archive the final letter"),
    ] = False,
):
    """Generate two drafts, choose and edit one, then archive it."""
    settings = _start_session("generate", config)

    try:
        services = build_services(settings)
        user_profile = services.load_profile(profile)
        typer.secho(f"✓ Profile loaded: {user_profile.name}", fg=typer.colors.GREEN)

        job_description = _acquire(source, file, "Job description")

        similar = services.archive.find_similar(
            job_description, limit=services.similar_letters_limit
        )
        if similar:
            typer.secho(f"✓ Found {len(similar)} similar cover letters", fg=typer.colors.GREEN)
        else:
            typer.echo("No similar cover letters found")

        prompt = services.prompt_builder.build(user_profile, job_description, similar)

        typer.echo("\nGenerating cover letter drafts...")
        drafts = generate_drafts(prompt, services.providers)
    except (LettersmithError, FileNotFoundError, ValueError) as e:
        _fail(e)

    print_header("Drafts")
    for draft in drafts:
        print_draft(draft)

    labels = [draft.label for draft in drafts]
    choice = typer.prompt(f"\nWhich draft do you prefer? ({'/'.join(labels)})", default=labels[0])
    choice = choice.strip().upper()
    if choice not in labels:
        typer.secho(f"Unknown draft '{choice}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    selected = next(draft.content for draft in drafts if draft.label == choice)

    editor = EditorAcquirer(initial_text=selected)
    final_letter = editor.acquire_text("Final cover letter") or selected

    print_header("Changes Made")
    segments = word_diff(selected, final_letter)
    print_diff(segments)
    typer.echo(f"{count_changed_words(segments)} word(s) changed")

    if skip_store:
        typer.echo("Skipping archive (--skip-store)")
        return

    try:
        object_id = services.archive.store(job_description, final_letter)
    except LettersmithError as e:
        _fail(e)
    typer.secho(f"\n✓ Cover letter saved ({object_id})", fg=typer.colors.GREEN)


@app.command()
def similar(
    source: Annotated[
        str,
        typer.Option("--source", "-s", help="Job description source: prompt, paste, file, editor"),
    ] = "prompt",
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Job description file (with --source file)"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Number of letters (default: settings)"),
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", help="Print whole letters instead of previews"),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML settings file"),
    ] = None,
):
    """Show archived letters most similar to a job description."""
    settings = _start_session("similar", config)

    try:
        services = build_services(settings, with_providers=False)
        job_description = _acquire(source, file, "Job description")
        letters = services.archive.find_similar(
            job_description, limit=limit or services.similar_letters_limit
        )
    except (LettersmithError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not letters:
        typer.echo("No similar cover letters found")
        return

    for rank, letter in enumerate(letters, start=1):
        print_header(f"#{rank}")
        text = letter.submitted_cover_letter or ""
        typer.echo(text if full else truncate_display(text, PREVIEW_CHARS))


@app.command()
def store(
    job_file: Annotated[
        Path,
        typer.Option("--job-file", "-j", help="Job description file"),
    ],
    letter_file: Annotated[
        Path,
        typer.Option("--letter-file", "-l", help="Final cover letter file"),
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML settings file"),
    ] = None,
):
    """Archive an already-final cover letter."""
    settings = _start_session("store", config)

    try:
        services = build_services(settings, with_providers=False)
        job_description = _acquire("file", job_file, "Job description")
        letter = _acquire("file", letter_file, "Cover letter")
        object_id = services.archive.store(job_description, letter)
    except (LettersmithError, FileNotFoundError, ValueError) as e:
        _fail(e)

    typer.secho(f"✓ Cover letter saved ({object_id})", fg=typer.colors.GREEN)


@app.command()
def init(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML settings file"),
    ] = None,
):
    """Check the store connection and create the letters collection."""
    settings = _start_session("init", config)

    try:
        services = build_services(settings, with_providers=False)
    except (LettersmithError, ValueError) as e:
        _fail(e)

    typer.secho(
        f"✓ Store reachable, collection '{services.archive.collection.name}' ready",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
