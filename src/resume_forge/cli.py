"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from resume_forge.clients.llm_client import LLMClient
from resume_forge.config import AppConfig, load_config
from resume_forge.errors import FieldValidationError, ResumeError
from resume_forge.export.pdf_emitter import document_filename, iter_emit
from resume_forge.export.readback import pdf_page_texts
from resume_forge.export.styles import TEMPLATE_STYLES
from resume_forge.models.resume import Resume
from resume_forge.pipeline.builder import build
from resume_forge.pipeline.generator import ResumeGenerator
from resume_forge.pipeline.orchestrator import ResumePipeline
from resume_forge.rendering.blocks import plain_text
from resume_forge.rendering.engine import render

app = typer.Typer(
    name="resume-forge",
    help="Generate, validate and render resumes as PDF.",
    no_args_is_help=True,
)
console = Console()

LOCAL_OWNER = "local"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _make_pipeline(config: AppConfig) -> ResumePipeline:
    llm = LLMClient(timeout=config.llm.timeout, max_attempts=config.llm.max_attempts)
    generator = ResumeGenerator(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    return ResumePipeline(
        generator,
        render_options=config.render.emitter_options(),
        chunk_size=config.render.chunk_size,
    )


def _fail(exc: ResumeError) -> NoReturn:
    if isinstance(exc, FieldValidationError):
        table = Table(title=type(exc).__name__, show_lines=False)
        table.add_column("Field", style="bold")
        table.add_column("Problem")
        for err in exc.errors:
            table.add_row(err.field or "<root>", err.message)
        console.print(table)
    else:
        console.print(f"[red]{exc.public_message}[/red]")
    raise typer.Exit(1)


def _load_resume(file: Path, template: str | None, owner: str) -> Resume:
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Not valid JSON: {file} ({e})[/red]")
        raise typer.Exit(1)
    try:
        return build(data, owner=owner, template=template)
    except ResumeError as e:
        _fail(e)


def _write_pdf(config: AppConfig, resume: Resume, output: Path | None) -> Path:
    if output is None:
        output = Path("./output") / document_filename(resume).replace(" ", "_")
    output.parent.mkdir(parents=True, exist_ok=True)
    try:
        chunks = iter_emit(
            render(resume),
            resume.template,
            chunk_size=config.render.chunk_size,
            **config.render.emitter_options(),
        )
        with output.open("wb") as f:
            for chunk in chunks:
                f.write(chunk)
    except ResumeError as e:
        output.unlink(missing_ok=True)
        _fail(e)
    return output


@app.command()
def generate(
    prompt: str = typer.Argument(help="Free-text description of your background"),
    template: str = typer.Option(None, "--template", "-t", help="modern, classic, creative or minimal"),
    owner: str = typer.Option(LOCAL_OWNER, "--owner", help="Owner reference stored on the resume"),
    output: Path = typer.Option(None, "--output", "-o", help="PDF output path"),
    save_json: Path = typer.Option(None, "--json", help="Also save the validated resume as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate a resume from a prompt and render it to PDF."""
    _setup_logging(verbose)
    config = load_config()
    pipeline = _make_pipeline(config)
    payload = {"prompt": prompt, "template": template or config.default_template}

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Generating resume...", total=None)

        def on_phase(phase: str, detail: str) -> None:
            progress.update(task, description=detail)

        try:
            result = asyncio.run(pipeline.generate(payload, owner, on_phase=on_phase))
        except ResumeError as e:
            progress.stop()
            _fail(e)

    if output is None:
        output = Path("./output") / result.filename.replace(" ", "_")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.document)
    console.print(f"\n[green]PDF saved: {output}[/green]")

    if save_json:
        save_json.parent.mkdir(parents=True, exist_ok=True)
        save_json.write_text(
            json.dumps(result.resume.to_record(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        console.print(f"[green]JSON saved: {save_json}[/green]")

    resume = result.resume
    console.print(
        Panel(
            f"[bold]{resume.personal_info.full_name}[/bold] | template: {resume.template}\n"
            f"Experience: {len(resume.experience)} | Education: {len(resume.education)} | "
            f"Projects: {len(resume.projects)} | Certifications: {len(resume.certifications)}\n"
            f"Pages: {result.page_count} | Took: {result.elapsed_seconds:.1f}s",
            title="Resume",
        )
    )


@app.command("render")
def render_file(
    file: Path = typer.Argument(help="Resume JSON file"),
    template: str = typer.Option(None, "--template", "-t", help="Override the file's template"),
    output: Path = typer.Option(None, "--output", "-o", help="PDF output path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Validate a resume JSON file and render it to PDF."""
    _setup_logging(verbose)
    config = load_config()
    resume = _load_resume(file, template, LOCAL_OWNER)
    path = _write_pdf(config, resume, output)
    console.print(f"[green]PDF saved: {path}[/green]")


@app.command()
def validate(
    file: Path = typer.Argument(help="Resume JSON file"),
) -> None:
    """Check a resume JSON file and list every invalid field."""
    _setup_logging(False)
    resume = _load_resume(file, None, LOCAL_OWNER)
    console.print(
        f"[green]Valid:[/green] {resume.personal_info.full_name} (template: {resume.template})"
    )


@app.command()
def preview(
    file: Path = typer.Argument(help="Resume JSON file"),
) -> None:
    """Print the resume layout as plain text."""
    _setup_logging(False)
    resume = _load_resume(file, None, LOCAL_OWNER)
    try:
        blocks = render(resume)
    except ResumeError as e:
        _fail(e)
    console.print(plain_text(blocks), markup=False, highlight=False)


@app.command()
def text(
    file: Path = typer.Argument(help="PDF file written by resume-forge"),
) -> None:
    """Print the text of a rendered PDF, page by page."""
    _setup_logging(False)
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        pages = pdf_page_texts(file.read_bytes())
    except RuntimeError as e:
        console.print(f"[red]Not a readable PDF: {file} ({e})[/red]")
        raise typer.Exit(1)
    for number, page in enumerate(pages, 1):
        console.rule(f"Page {number} of {len(pages)}")
        console.print(page.rstrip(), markup=False, highlight=False)


@app.command()
def templates() -> None:
    """List the available templates."""
    for name, style in TEMPLATE_STYLES.items():
        console.print(
            f"  [bold]{name}[/bold]: {style.font_family}, name {style.name_size:g}pt, "
            f"body {style.body_size:g}pt"
        )


if __name__ == "__main__":
    app()
