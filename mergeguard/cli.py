"""
Command-line interface for mergeguard.

Provides commands for:
- Scanning text for placeholders
- Listing the placeholder catalog of a template
- Protecting and restoring placeholders around an external translation
- Validating a translation against its original
- Rendering text and previewing templates with test values
- Running the protect/translate/restore/validate pipeline

Usage:
    mergeguard scan --text "Hi *|FNAME|*"
    mergeguard catalog --input template.json
    mergeguard protect --input body.txt --map-out map.json
    mergeguard restore --input translated.txt --map map.json
    mergeguard validate --original-file body.txt --translated-file restored.txt
    mergeguard preview --input template.json --vars vars.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mergeguard import __version__
from mergeguard.catalog import build_catalog
from mergeguard.config import DATE_FORMAT, LOG_FORMAT
from mergeguard.masking import ProtectionMap, protect_placeholders, restore_placeholders
from mergeguard.models import Template, ValidationResult
from mergeguard.pipeline import PipelineConfig, TranslationPipeline
from mergeguard.render import render as render_text, render_template
from mergeguard.scanner import scan as scan_text
from mergeguard.validation import validate_placeholders

app = typer.Typer(
    name="mergeguard",
    help="mergeguard: placeholder-safe translation and preview of email templates",
    add_completion=False,
)
console = Console()
logger = logging.getLogger("mergeguard.cli")


def version_callback(value: bool):
    if value:
        console.print(f"mergeguard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging",
    ),
):
    """mergeguard: merge-tag detection, protection and validation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )


# ============================================================================
# Input Helpers
# ============================================================================

def _read_text(text: Optional[str], path: Optional[Path], what: str = "text") -> str:
    if text is not None:
        return text
    if path is None:
        console.print(f"[red]Error:[/] Provide either the {what} or a file to read it from", style="bold")
        raise typer.Exit(1)
    if not path.exists():
        console.print(f"[red]Error:[/] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _load_json(path: Optional[Path], what: str) -> dict:
    if path is None:
        return {}
    if not path.exists():
        console.print(f"[red]Error:[/] {what} file not found: {path}")
        raise typer.Exit(1)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/] Invalid JSON in {path}: {e}")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print(f"[red]Error:[/] {what} file must contain a JSON object: {path}")
        raise typer.Exit(1)
    return data


def _print_json(data) -> None:
    # Plain echo keeps machine-readable output free of wrapping and styling
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _echo(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _print_validation(validation: ValidationResult) -> None:
    if validation.is_valid:
        console.print("[green]✓ All placeholders preserved[/]")
        return
    title = "failed" if validation.has_critical_issues else "warnings"
    colour = "red" if validation.has_critical_issues else "yellow"
    console.print(f"[{colour}]Placeholder validation {title}[/]")
    for warning in validation.warnings:
        console.print(f"  • {escape(warning)}")


# ============================================================================
# Commands
# ============================================================================

@app.command()
def scan(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to scan"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File to scan"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List every placeholder occurrence in a text."""
    occurrences = scan_text(_read_text(text, input_file))

    if as_json:
        _print_json([occ.to_dict() for occ in occurrences])
        return

    table = Table(title=f"Placeholders ({len(occurrences)})")
    table.add_column("Raw", style="cyan")
    table.add_column("Name")
    table.add_column("Format", style="magenta")
    table.add_column("Span", justify="right")
    for occ in occurrences:
        table.add_row(occ.raw, occ.name, occ.format.value, f"{occ.start}-{occ.end}")
    console.print(table)


@app.command()
def catalog(
    input_file: Path = typer.Option(..., "--input", "-i", help="Template JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """Show the distinct placeholders used by a template."""
    template = Template.from_dict(_load_json(input_file, "Template"))
    entries = build_catalog(template)

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return

    table = Table(title=f"Template placeholders ({len(entries)})")
    table.add_column("Name", style="cyan")
    table.add_column("Format", style="magenta")
    table.add_column("Used in")
    table.add_column("Description", style="dim")
    for entry in entries:
        used_in = ", ".join(f"{loc.field} ×{loc.count}" for loc in entry.locations)
        table.add_row(entry.name, entry.format.value, used_in, entry.description or "")
    console.print(table)


@app.command()
def protect(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to protect"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File to protect"),
    map_out: Optional[Path] = typer.Option(None, "--map-out", "-m", help="Where to write the token map (JSON)"),
    as_json: bool = typer.Option(False, "--json", help="Print protected text and map as JSON"),
):
    """Replace placeholders with protection tokens."""
    result = protect_placeholders(_read_text(text, input_file))

    if map_out:
        map_out.write_text(json.dumps(result.token_map.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Wrote %d token(s) to %s", len(result.token_map), map_out)

    if as_json:
        _print_json({"protected_text": result.protected_text, "token_map": result.token_map.to_dict()})
        return

    _echo(result.protected_text)


@app.command()
def restore(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Translated text with tokens"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File with tokens"),
    map_file: Path = typer.Option(..., "--map", "-m", help="Token map written by 'protect'"),
):
    """Put placeholders back in place of protection tokens."""
    token_map = ProtectionMap.from_dict(_load_json(map_file, "Token map"))
    restored = restore_placeholders(_read_text(text, input_file), token_map)
    _echo(restored)


@app.command()
def validate(
    original: Optional[str] = typer.Option(None, "--original", help="Original text"),
    original_file: Optional[Path] = typer.Option(None, "--original-file", help="File with the original text"),
    translated: Optional[str] = typer.Option(None, "--translated", help="Translated text"),
    translated_file: Optional[Path] = typer.Option(None, "--translated-file", help="File with the translated text"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Compare the placeholders of a translation with its original."""
    validation = validate_placeholders(
        _read_text(original, original_file, "original text"),
        _read_text(translated, translated_file, "translated text"),
    )

    if as_json:
        _print_json(validation.to_dict())
    else:
        _print_validation(validation)

    if validation.has_critical_issues:
        raise typer.Exit(1)


@app.command()
def render(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Template text"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File with the template text"),
    vars_file: Optional[Path] = typer.Option(None, "--vars", help="Merge variables (JSON object)"),
    globals_file: Optional[Path] = typer.Option(None, "--globals", help="Global variables (JSON object)"),
):
    """Fill placeholders in a text with test values."""
    rendered = render_text(
        _read_text(text, input_file),
        _load_json(vars_file, "Merge variables"),
        _load_json(globals_file, "Global variables"),
    )
    _echo(rendered)


@app.command()
def preview(
    input_file: Path = typer.Option(..., "--input", "-i", help="Template JSON file"),
    vars_file: Optional[Path] = typer.Option(None, "--vars", help="Merge variables (JSON object)"),
    globals_file: Optional[Path] = typer.Option(None, "--globals", help="Global variables (JSON object)"),
    as_json: bool = typer.Option(False, "--json", help="Print the preview as JSON"),
):
    """Render subject, sender and bodies of a template with test values."""
    template = Template.from_dict(_load_json(input_file, "Template"))
    rendered = render_template(
        template,
        _load_json(vars_file, "Merge variables"),
        _load_json(globals_file, "Global variables"),
    )

    if as_json:
        _print_json(rendered.to_dict())
        return

    console.print(f"[bold]From:[/] {escape(rendered.from_name)} <{escape(rendered.from_email)}>")
    console.print(f"[bold]Subject:[/] {escape(rendered.subject)}")
    console.print("\n[dim]Text:[/]")
    _echo(rendered.text_content)
    console.print("\n[dim]HTML:[/]")
    _echo(rendered.html_content)


@app.command()
def translate(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to translate"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File to translate"),
    mode: str = typer.Option("echo", "--mode", help="Dummy translator mode (echo, upper, prefix, reverse, drift)"),
    source_lang: str = typer.Option("en", "--source", "-s", help="Source language code"),
    target_lang: str = typer.Option("fr", "--target", "-l", help="Target language code"),
    no_protect: bool = typer.Option(False, "--no-protect", help="Send placeholders to the translator as-is"),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),
):
    """Dry-run the protect/translate/restore/validate pipeline."""
    config = PipelineConfig(
        source_lang=source_lang,
        target_lang=target_lang,
        translator_backend="dummy",
        translator_kwargs={"mode": mode},
        protect_placeholders=not no_protect,
    )
    try:
        pipeline = TranslationPipeline(config)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    outcome = pipeline.translate_text(_read_text(text, input_file))

    if as_json:
        _print_json(outcome.to_dict())
        return

    console.print("[dim]Protected:[/]")
    _echo(outcome.protected_text)
    console.print("[dim]Result:[/]")
    _echo(outcome.translated_text)
    if outcome.error:
        console.print(f"[red]Translator error:[/] {escape(outcome.error)}")
    _print_validation(outcome.validation)


@app.command()
def demo():
    """Run a quick demo of protection, validation and rendering."""
    console.print("[bold]mergeguard demo[/]\n")

    sample = (
        "Hello *|FNAME|* ,\n"
        "*|IF:VIP|*Thanks for being a VIP member!*|END:IF|*\n"
        "Track your order at {{order_url}}.\n"
        "*|GLOBAL:SIGNATURE|*"
    )
    console.print("[dim]Source text:[/]")
    _echo(sample)

    result = protect_placeholders(sample)
    console.print("\n[dim]Protected text:[/]")
    _echo(result.protected_text)

    # Simulate a translator that drifts spacing around one token
    drifted = result.protected_text.replace("__PH_0__ ", "__PH_0__   ")
    restored = restore_placeholders(drifted, result.token_map)
    console.print("\n[dim]Restored after spacing drift:[/]")
    _echo(restored)
    _print_validation(validate_placeholders(sample, restored))

    rendered = render_text(
        sample,
        {"FNAME": "Ana", "VIP": "1", "order_url": "https://example.com/o/42"},
        {"SIGNATURE": "The Team"},
    )
    console.print("\n[bold green]Rendered preview:[/]")
    _echo(rendered)
