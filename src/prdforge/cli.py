"""CLI entrypoints for PRDForge."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from prdforge.bootstrap import create_session
from prdforge.config import load_settings
from prdforge.errors import VersionNotFoundError
from prdforge.logging import configure_logging, get_logger
from prdforge.models.feature import TemplateId
from prdforge.preferences import FONTS, THEMES
from prdforge.session import PrdSession

app = typer.Typer(add_completion=False, help="Generate PRDs from feature lists and manage their versions")
logger = get_logger(__name__)


def _session() -> PrdSession:
    settings = load_settings()
    configure_logging(settings.log_level)
    return create_session(settings)


def _parse_feature(raw: str) -> tuple[str, str]:
    name, sep, description = raw.partition(":")
    return name.strip(), description.strip() if sep else ""


def _read_features_file(path: Path) -> list[tuple[str, str]]:
    """Read features from JSON (`[{"name", "description"}]`) or `name: description` lines."""

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        items = json.loads(text)
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise typer.BadParameter("Features JSON must be an array of objects.")
        return [(str(i.get("name", "")), str(i.get("description", ""))) for i in items]
    return [_parse_feature(line) for line in text.splitlines() if line.strip()]


def _select(ws: PrdSession, version_id: int | None) -> None:
    if version_id is None:
        return
    if ws.load_version(version_id) is None:
        typer.echo(f"Version {version_id} not found", err=True)
        raise typer.Exit(code=1)


@app.command()
def generate(
    feature: list[str] = typer.Option(
        [],
        "--feature",
        "-f",
        help='Feature as "Name: description". Repeatable.',
    ),
    features_file: Path | None = typer.Option(
        None,
        "--features-file",
        help="JSON array of {name, description} or a text file with one 'Name: description' per line.",
    ),
    template: TemplateId = typer.Option(TemplateId.AGILE, "--template", "-t", help="PRD methodology"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the generated HTML here"),
) -> None:
    """Generate a PRD and save it as a new version."""

    ws = _session()
    pairs = [_parse_feature(f) for f in feature]
    if features_file is not None:
        pairs.extend(_read_features_file(features_file))
    if pairs:
        ws.set_features([])
        for name, description in pairs:
            ws.add_feature(name, description)
    ws.template = template

    outcome = ws.generate()
    if outcome.error is not None:
        typer.echo(f"[{outcome.error.kind.value}] {outcome.error.message}", err=True)
        raise typer.Exit(code=1)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(outcome.content or "", encoding="utf-8")
        typer.echo(str(output))
    else:
        typer.echo(outcome.content or "")
    message = ws.notifier.current()
    if message:
        typer.echo(message, err=True)


@app.command()
def history() -> None:
    """List saved versions, newest first."""

    ws = _session()
    versions = ws.history()
    if not versions:
        typer.echo("No saved versions.")
        return
    for v in versions:
        typer.echo(f"{v.id}\t{v.timestamp}")


@app.command()
def show(version_id: int = typer.Argument(..., help="Version id")) -> None:
    """Print a version's content and the features that produced it."""

    ws = _session()
    try:
        version = ws.get_version(version_id)
    except VersionNotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"# Version {version.id} ({version.timestamp})")
    for f in version.features:
        typer.echo(f"- {f.name}: {f.description}" if f.description else f"- {f.name}")
    typer.echo("")
    typer.echo(version.content)


@app.command()
def save(
    version_id: int | None = typer.Option(None, "--from", help="Start from this version instead of the latest"),
) -> None:
    """Save the current draft (the latest version by default) as a new version."""

    ws = _session()
    _select(ws, version_id)
    version = ws.save_draft()
    typer.echo(ws.notifier.current() or "")
    if version is None:
        raise typer.Exit(code=1)


@app.command("clear-history")
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every saved version. Irreversible."""

    if not yes:
        typer.confirm("Delete the entire version history?", abort=True)
    ws = _session()
    cleared = ws.clear_history()
    typer.echo(ws.notifier.current() or "", err=not cleared)
    if not cleared:
        raise typer.Exit(code=1)


@app.command()
def search(
    term: str = typer.Argument(..., help="Literal, case-insensitive search term"),
    version_id: int | None = typer.Option(None, "--version", "-v", help="Search this version instead of the latest"),
) -> None:
    """Print the draft with matches wrapped in <mark class="search-highlight">."""

    ws = _session()
    _select(ws, version_id)
    rendered = ws.search(term)
    typer.echo(rendered.html)
    typer.echo(f"{rendered.matches} match(es)", err=True)


@app.command()
def export(
    fmt: str = typer.Argument("markdown", help="markdown or pdf"),
    version_id: int | None = typer.Option(None, "--version", "-v", help="Export this version instead of the latest"),
    theme: str = typer.Option("theme-dark", "--theme", help=f"PDF theme: {', '.join(THEMES)}"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file (defaults to the product-named file)"),
) -> None:
    """Export the draft to Markdown or PDF."""

    ws = _session()
    _select(ws, version_id)
    if not ws.draft:
        typer.echo("Nothing to export: the draft is empty.", err=True)
        raise typer.Exit(code=1)

    if fmt == "markdown":
        exported = ws.export_markdown()
    elif fmt == "pdf":
        try:
            ws.set_theme(theme)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        exported = ws.export_pdf()
    else:
        raise typer.BadParameter("Format must be 'markdown' or 'pdf'.")

    if exported is None:
        typer.echo(ws.notifier.current() or "Export failed", err=True)
        raise typer.Exit(code=1)

    filename, payload = exported
    path = output or Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(payload, bytes):
        path.write_bytes(payload)
    else:
        path.write_text(payload, encoding="utf-8")
    typer.echo(str(path))


@app.command()
def font(name: str | None = typer.Argument(None, help=f"One of: {', '.join(FONTS)}")) -> None:
    """Show or set the persisted font preference."""

    ws = _session()
    if name is not None:
        try:
            ws.set_font(name)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
    typer.echo(ws.font)


if __name__ == "__main__":
    app()
