"""Typer CLI entrypoint for LiteCoder suggestions and security reports."""
from __future__ import annotations

import asyncio
import json
import random
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.table import Table

from packages.config.settings import Settings, load_settings
from packages.engine.core import SuggestionEngine
from packages.exporters.html_report import render_report_html
from packages.exporters.jsonl import suggestion_record, write_jsonl
from packages.exporters.sarif import to_sarif
from packages.language_packs.registry import default_registry
from packages.schema.models import Position, SecurityReport, Suggestion

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)

TOOL_NAME = "litecoder"
TOOL_VERSION = "0.1.0"

_FILE_EXTENSIONS = {
    "python": {".py", ".pyw"},
    "javascript": {".js", ".mjs", ".cjs", ".jsx"},
    "typescript": {".ts", ".tsx"},
    "html": {".html", ".htm"},
    "css": {".css"},
    "php": {".php"},
    "json": {".json"},
    "lua": {".lua"},
}

SUPPORTED_LANGUAGES = list(_FILE_EXTENSIONS)
_VALID_SUGGEST_FORMATS = {"table", "json"}
_VALID_REPORT_FORMATS = {"sarif", "json", "table", "html"}


def _detect_language(path: Path, language: str) -> str:
    if language != "auto":
        if language not in SUPPORTED_LANGUAGES:
            raise typer.BadParameter(
                f"Unsupported language '{language}'. Choose from {sorted(SUPPORTED_LANGUAGES)}"
            )
        return language
    suffix = path.suffix.lower()
    for name, extensions in _FILE_EXTENSIONS.items():
        if suffix in extensions:
            return name
    raise typer.BadParameter(
        f"Cannot infer language from '{path.name}'. Pass --language explicitly."
    )


def _normalize_formats(values: Sequence[str], valid: set, default: str) -> List[str]:
    if not values:
        return [default]
    normalized = []
    for value in values:
        fmt = value.lower()
        if fmt not in valid:
            raise typer.BadParameter(
                f"Unsupported format '{value}'. Choose from {sorted(valid)}"
            )
        if fmt not in normalized:
            normalized.append(fmt)
    return normalized


def _read_document(path: Path) -> str:
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_settings_or_exit(config: Optional[Path]) -> Settings:
    try:
        return load_settings(config)
    except ValueError as exc:
        err_console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=2) from exc


@app.command()
def suggest(
    file: Path = typer.Option(..., "--file", help="Source file to complete in"),
    line: int = typer.Option(..., "--line", min=0, help="0-based cursor line"),
    column: int = typer.Option(..., "--column", min=0, help="0-based cursor column"),
    language: str = typer.Option("auto", "--language", help="auto or a language id"),
    format: str = typer.Option("table", "--format", help="table or json"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Pin template confidence jitter"),
    out: Optional[Path] = typer.Option(None, "--out", help="Also write suggestions as JSONL"),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file"),
) -> None:
    """Rank completions for the cursor position in FILE."""

    fmt = _normalize_formats([format], _VALID_SUGGEST_FORMATS, "table")[0]
    document = _read_document(file)
    lang = _detect_language(file, language)
    settings = _load_settings_or_exit(config)
    lang_settings = settings.for_language(lang)

    if not settings.enable_transparent_mode or not lang_settings.enabled:
        err_console.print(f"[yellow]Suggestions are disabled for {lang}[/]")
        raise typer.Exit(code=0)

    lines = document.split("\n")
    if line >= len(lines):
        raise typer.BadParameter(f"Line {line} is past the end of {file} ({len(lines)} lines)")
    prefix = lines[line][:column]

    engine = SuggestionEngine(rng=random.Random(seed) if seed is not None else None)
    suggestions = asyncio.run(
        engine.generate_suggestions(document, Position(line=line, column=column), lang, prefix)
    )
    suggestions = suggestions[: lang_settings.max_suggestions]

    if out is not None:
        write_jsonl(out, suggestions, lang)

    if fmt == "json":
        for rank, suggestion in enumerate(suggestions, start=1):
            typer.echo(json.dumps(suggestion_record(rank, suggestion, lang), ensure_ascii=False))
        return

    console.log(f"Suggestions: file={file} language={lang} prefix={prefix!r} count={len(suggestions)}")
    _print_suggestions(suggestions)
    if suggestions and settings.enable_status_bar:
        console.print(f"[bold]Accept:[/] {suggestions[0].text!r}")


@app.command()
def report(
    file: Path = typer.Option(..., "--file", help="Source file to scan"),
    language: str = typer.Option("auto", "--language", help="auto or a language id"),
    format: List[str] = typer.Option(
        ["table"], "--format", help="Repeatable option: sarif, json, table, html"
    ),
    out: Path = typer.Option(Path("artifacts/litecoder.sarif"), "--out", help="Output path for SARIF"),
    fail_on_vulnerability: bool = typer.Option(
        True,
        "--fail-on-vulnerability/--no-fail-on-vulnerability",
        help="Exit 1 when any vulnerability is reported",
    ),
) -> None:
    """Scan FILE for injection patterns and export the report."""

    formats = _normalize_formats(format, _VALID_REPORT_FORMATS, "table")
    document = _read_document(file)
    lang = _detect_language(file, language)
    console.log(f"Starting security scan: file={file} language={lang} formats={formats}")

    engine = SuggestionEngine()
    try:
        security_report = asyncio.run(engine.generate_security_report(document, lang))
    except Exception as exc:
        console.print(f"[red]Security scan failed: {exc}[/]")
        raise typer.Exit(code=2) from exc

    vulnerabilities = security_report.count("vulnerability")
    console.log(
        f"Scan complete: score={security_report.overall_score:.2f}"
        f" issues={len(security_report.issues)} vulnerabilities={vulnerabilities}"
    )

    _export_report(security_report, formats=formats, out=out, source=file)

    if vulnerabilities and fail_on_vulnerability:
        console.print(f"[red]{vulnerabilities} vulnerability finding(s) detected[/]")
        raise typer.Exit(code=1)

    console.print("[green]No blocking findings identified[/]")
    raise typer.Exit(code=0)


@app.command()
def languages() -> None:
    """List the registered language packs."""

    packs = default_registry()
    table = Table(title="Language packs")
    table.add_column("Language")
    table.add_column("Keywords", justify="right")
    table.add_column("Triggers")
    for name in packs.languages():
        pack = packs.get(name)
        if pack is None:
            continue
        table.add_row(name, str(len(pack.keywords)), ", ".join(repr(t) for t in pack.completions))
    console.print(table)

    unpacked = [name for name in SUPPORTED_LANGUAGES if name not in packs]
    if unpacked:
        console.print(f"Recognized without a pack: {', '.join(unpacked)}")


@app.command()
def settings(
    language: Optional[str] = typer.Argument(None, help="Show settings for one language"),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file"),
) -> None:
    """Show effective settings, globally or for LANGUAGE."""

    current = _load_settings_or_exit(config)
    if language is not None:
        if language not in SUPPORTED_LANGUAGES:
            raise typer.BadParameter(
                f"Unsupported language '{language}'. Choose from {sorted(SUPPORTED_LANGUAGES)}"
            )
        payload = current.for_language(language).model_dump()
        typer.echo(f"Current settings for {language}: {json.dumps(payload, indent=2)}")
        return

    table = Table(title="LiteCoder settings")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("enable_transparent_mode", str(current.enable_transparent_mode))
    table.add_row("suggestion_delay", f"{current.suggestion_delay} ms")
    table.add_row("enable_status_bar", str(current.enable_status_bar))
    for name, lang_settings in sorted(current.language_settings.items()):
        table.add_row(f"language_settings.{name}", json.dumps(lang_settings.model_dump()))
    console.print(table)


def _print_suggestions(suggestions: List[Suggestion]) -> None:
    table = Table(title="LiteCoder suggestions")
    table.add_column("#", justify="right")
    table.add_column("Text")
    table.add_column("Confidence", justify="right")
    table.add_column("Security", justify="right")
    table.add_column("Model")
    for index, suggestion in enumerate(suggestions, start=1):
        table.add_row(
            str(index),
            repr(suggestion.text),
            f"{round(suggestion.confidence * 100)}%",
            f"{round(suggestion.security_score * 100)}%",
            suggestion.model.value,
        )
    console.print(table)


def _export_report(
    security_report: SecurityReport,
    *,
    formats: Sequence[str],
    out: Path,
    source: Path,
) -> dict[str, Path]:
    fmt_set = set(formats)
    outputs: dict[str, Path] = {}

    if "sarif" in fmt_set:
        sarif_obj = to_sarif(
            security_report,
            artifact_uri=source.as_posix(),
            tool_name=TOOL_NAME,
            tool_version=TOOL_VERSION,
        )
        out.parent.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8") as handle:
            json.dump(sarif_obj, handle, indent=2)
            handle.write("\n")
        outputs["sarif"] = out

    if "json" in fmt_set:
        json_path = out if out.suffix == ".json" and fmt_set == {"json"} else out.with_suffix(".json")
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(security_report.model_dump_json(indent=2) + "\n", encoding="utf-8")
        outputs["json"] = json_path

    if "html" in fmt_set:
        html_path = out if out.suffix == ".html" and fmt_set == {"html"} else out.with_suffix(".html")
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(render_report_html(security_report), encoding="utf-8")
        outputs["html"] = html_path

    if "table" in fmt_set:
        table = Table(title=f"Security report ({round(security_report.overall_score * 100)}%)")
        table.add_column("Line", justify="right")
        table.add_column("Severity")
        table.add_column("Issue")
        for issue in security_report.issues:
            table.add_row(str(issue.line), issue.severity, issue.title)
        console.print(table)

    return outputs


if __name__ == "__main__":  # pragma: no cover - manual execution
    app()
