"""CLI application for DepHint."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from core.annotate import AnnotationReport, annotate_manifest
from core.detect import identify
from core.document import FileDocument
from core.errors import DepHintError
from core.models import Classification, Ecosystem, PresentationPreferences
from core.parse import parse_manifest
from core.replace import ReplaceSession, replace_all

console = Console()
err_console = Console(stderr=True)

STYLES = {
    Classification.COMPATIBLE: "green",
    Classification.INCOMPATIBLE: "red",
    Classification.ERROR: "yellow",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_json(path: str | None, what: str) -> dict | None:
    """Read a JSON object from `path`."""
    if path is None:
        return None
    path_obj = Path(path)
    if not path_obj.exists():
        raise DepHintError(f"{what} file {path} not found")
    try:
        data = json.loads(path_obj.read_text())
    except json.JSONDecodeError as e:
        raise DepHintError(f"{what} file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DepHintError(f"{what} file {path} must contain a JSON object")
    return data


def load_preferences(path: str | None) -> PresentationPreferences:
    data = load_json(path, "Preferences")
    if data is None:
        return PresentationPreferences()
    try:
        return PresentationPreferences.model_validate(data)
    except ValidationError as e:
        raise DepHintError(f"Invalid preferences in {path}: {e}") from e


def format_text_output(report: AnnotationReport) -> list[str]:
    """One rich-markup line per dependency."""
    lines = []
    for annotation in report.annotations:
        item = annotation.item
        style = STYLES[annotation.classification]
        text = annotation.decoration.render_text.replace("\t", "  ")
        lines.append(
            f"{escape(item.name):<30} {escape(item.value or ''):<16} "
            f"[{style}]{escape(text)}[/{style}]"
        )
    return lines


def format_json_output(report: AnnotationReport) -> str:
    """Format JSON output."""
    dependencies = []
    for annotation in report.annotations:
        dependencies.append({
            "name": annotation.item.name,
            "constraint": annotation.item.value,
            "line": annotation.item.line,
            "classification": annotation.classification.value,
            "latest": annotation.decoration.latest,
            "current": annotation.decoration.current,
            "text": annotation.decoration.render_text,
        })

    return json.dumps(
        {
            "ecosystem": report.manifest.ecosystem.value,
            "outdated": report.outdated,
            "errors": report.errors,
            "dependencies": dependencies,
        },
        indent=2,
        ensure_ascii=False,
    )


app = typer.Typer(
    name="dephint",
    help="DepHint - Check dependency manifests against known versions",
    add_completion=False,
)


@app.command()
def check(
    file_path: str = typer.Argument(help="Path to manifest file: Cargo.toml, go.mod, package.json, requirements.txt, pyproject.toml (use '-' for stdin)"),
    versions_path: str = typer.Option(..., "--versions", help="JSON file mapping dependency names to known versions, newest first"),
    vulns_path: str | None = typer.Option(None, "--vulns", help="JSON file mapping dependency names to {version: [advisory IDs]}"),
    prefs_path: str | None = typer.Option(None, "--prefs", help="JSON file with presentation preferences"),
    engine: str | None = typer.Option(None, "--engine", help="Force specific ecosystem"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    fix: bool = typer.Option(False, "--fix", help="Replace every outdated constraint with the latest version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log replace and save activity"),
) -> None:
    """DepHint - Show version-compatibility hints for a dependency manifest."""
    configure_logging(verbose)

    try:
        # Read input
        document = None
        if file_path == "-":
            if fix:
                console.print("Error: --fix needs a manifest file, not stdin", style="red")
                raise typer.Exit(1)
            content = sys.stdin.read()
            filename = None
        else:
            path_obj = Path(file_path)
            if not path_obj.exists():
                console.print(f"Error: File {file_path} not found", style="red")
                raise typer.Exit(1)
            document = FileDocument(path_obj)
            content = document.text
            filename = path_obj.name

        # Detect ecosystem
        if engine:
            try:
                ecosystem = Ecosystem(engine.lower())
            except ValueError:
                console.print(f"Error: Unknown ecosystem: {engine}", style="red")
                raise typer.Exit(1)
        else:
            ecosystem = identify(content, filename)

        if ecosystem is Ecosystem.UNKNOWN:
            console.print("Error: Unsupported ecosystem: unknown", style="red")
            raise typer.Exit(1)

        manifest = parse_manifest(content, ecosystem, filename)
        if not manifest.items:
            console.print("No dependencies found to check")
            raise typer.Exit(0)

        versions = load_json(versions_path, "Versions")
        vulnerabilities = load_json(vulns_path, "Vulnerabilities")
        preferences = load_preferences(prefs_path)

        session = ReplaceSession()
        report = annotate_manifest(
            manifest,
            versions,
            preferences,
            vulnerabilities=vulnerabilities,
            session=session,
            document=document,
        )

        if format_type == "json":
            console.print_json(format_json_output(report))
        else:
            for line in format_text_output(report):
                console.print(line)

        if fix and report.outdated:
            applied = asyncio.run(replace_all(document, session))
            console.print(f"Updated {applied} dependencies in {file_path}")
            raise typer.Exit(0)

        if report.outdated:
            raise typer.Exit(2)  # Outdated dependencies exit code

    except typer.Exit:
        # Re-raise typer exits (like Exit(2) for outdated dependencies)
        raise
    except Exception as e:
        console.print(f"Error: {escape(str(e))}", style="red")
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
