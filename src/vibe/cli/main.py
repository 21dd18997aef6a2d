"""CLI principal (Typer).

Comandos:
- `gen`: mismo prompt a todos los proveedores en paralelo + merge.
- `show`: vuelca los archivos de un directorio (Markdown o texto plano).
- `code`: pide cambios de código a OpenRouter con el directorio como contexto.
- `gemini`: prepara el contexto para pegarlo en Gemini web.
- `doctor` / `version`: diagnóstico.

Por qué stdout/stderr separados:
- Las respuestas van a stdout (se pueden redirigir a un archivo).
- Errores, progreso y logs van a stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from vibe import __version__
from vibe.adapters.clipboard import (
    GEMINI_URL,
    ClipboardError,
    copy_to_clipboard,
    is_running_via_ssh,
    open_in_browser,
    osc52_sequence,
)
from vibe.adapters.code_assistant import CodeAssistant, build_messages
from vibe.adapters.http_client import build_async_client
from vibe.cli.doctor import doctor
from vibe.cli.ui_components import (
    build_results_table,
    merged_markdown,
    print_provider_error,
    render_markdown,
    response_markdown,
)
from vibe.core.config import AppSettings
from vibe.core.domain.errors import ContextError, PromptFileError, ProviderError
from vibe.core.domain.models import GenReport, MergeRequest, ProviderFailure, ProviderResult
from vibe.core.services.aggregator import GenConfig, GenHooks, generate, read_prompt_file
from vibe.core.services.context_builder import (
    FileFilter,
    format_code_context,
    format_gemini_context,
    format_markdown_entry,
    format_plain_entry,
    gather_context,
    resolve_directory,
)
from vibe.logger import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="vibe: fan out a prompt to several LLMs, merge the answers, and work with code context.",
)
app.command(name="doctor")(doctor)

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    level = "DEBUG" if verbose else AppSettings().log_level
    configure_logging(level)


def _warn(message: str) -> None:
    _err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _fail(message: str) -> typer.Exit:
    _err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    return typer.Exit(code=1)


def _load_directory(directory: str) -> Path:
    try:
        return resolve_directory(directory)
    except ContextError as exc:
        raise _fail(str(exc)) from exc


@app.command()
def gen(
    prompt_file: Path = typer.Argument(..., help="File containing the prompt to send."),
    raw: bool = typer.Option(False, "--raw", "-r", help="Print raw Markdown instead of rendering it."),
    no_merge: bool = typer.Option(False, "--no-merge", help="Skip the merge step."),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any provider or the merge fails."),
    summary: bool = typer.Option(False, "--summary", "-s", help="Print a per-provider summary table."),
) -> None:
    """Send PROMPT_FILE to every provider concurrently and merge the answers."""

    try:
        prompt = read_prompt_file(prompt_file)
    except PromptFileError as exc:
        logger.debug("prompt file error: %s", exc)
        _err_console.print(f"[bold red]Error:[/bold red] failed to read prompt file {escape(str(prompt_file))}")
        raise typer.Exit(code=1) from exc

    settings = AppSettings()
    config = GenConfig.from_settings(settings, raw=raw, merge_enabled=not no_merge)

    def on_result(result: ProviderResult) -> None:
        if result.ok:
            render_markdown(_console, response_markdown(result.provider, result.text or ""), raw=config.raw)
            _console.out("")
        else:
            print_provider_error(_err_console, result)

    def on_merge_start(request: MergeRequest) -> None:
        _err_console.print("\n=== Merging Responses ===")
        logger.debug("merging %d response(s) with %s", len(request.sources), request.model)

    def on_merged(text: str) -> None:
        render_markdown(_console, merged_markdown(text), raw=config.raw)

    def on_merge_failed(failure: ProviderFailure) -> None:
        _err_console.print(f"[bold red]Error merging responses:[/bold red] {escape(failure.message)}")

    def on_nothing_to_merge() -> None:
        _err_console.print("No successful responses to merge.")

    hooks = GenHooks(
        result=on_result,
        merge_start=on_merge_start,
        merged=on_merged,
        merge_failed=on_merge_failed,
        nothing_to_merge=on_nothing_to_merge,
    )

    async def _run() -> GenReport:
        async with build_async_client(settings) as client:
            return await generate(prompt, config, client=client, hooks=hooks)

    report = asyncio.run(_run())

    _err_console.print(f"{len(report.successes)}/{len(report.results)} providers succeeded")
    if summary:
        _err_console.print(build_results_table(report))

    if not report.exit_ok(strict=strict):
        raise typer.Exit(code=1)


@app.command()
def show(
    directory: str = typer.Argument(".", help="Directory to print."),
    unfiltered: bool = typer.Option(False, "--unfiltered", "-u", help="Include every file (hidden dirs still skipped)."),
    output_plain: bool = typer.Option(False, "--output-plain", "-o", help="Plain text instead of rendered Markdown."),
) -> None:
    """Print every file below DIRECTORY with its absolute path."""

    root = _load_directory(directory)
    policy = FileFilter.UNFILTERED if unfiltered else FileFilter.DEFAULT
    bundle = gather_context(root, policy=policy, warn=_warn)

    for entry in bundle.files:
        if output_plain:
            _console.out(format_plain_entry(entry), highlight=False)
        else:
            render_markdown(_console, format_markdown_entry(entry))
    if not bundle.files:
        _err_console.print(f"No files found in {escape(str(root))}")


@app.command()
def code(
    prompt: str = typer.Argument(..., help="What you want the model to do with the code."),
    directory: str = typer.Argument(".", help="Project directory used as context."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="OpenRouter model id."),
    no_stream: bool = typer.Option(False, "--no-stream", help="Wait for the full response instead of streaming."),
) -> None:
    """Ask an LLM (via OpenRouter) to work on the code in DIRECTORY."""

    settings = AppSettings()
    model_name = model or settings.code_model
    if not (settings.openrouter_api_key or "").strip():
        raise _fail("API key not found. Please set the OPENROUTER_API_KEY environment variable")

    root = _load_directory(directory)
    _err_console.print(f"Gathering context from: {escape(str(root))}")
    bundle = gather_context(root, policy=FileFilter.SOURCE, max_file_bytes=settings.max_file_bytes, warn=_warn)
    if not bundle.files:
        _warn("No relevant files found in the directory. Proceeding without file context.")
    messages = build_messages(context=format_code_context(bundle), prompt=prompt)

    _err_console.print(f"Sending request to OpenRouter (model: {escape(model_name)})...")

    async def _run() -> None:
        async with build_async_client(settings, timeout_seconds=settings.code_timeout_seconds) as client:
            assistant = CodeAssistant(api_key=settings.openrouter_api_key, model=model_name, client=client)
            _console.out("\n--- LLM Response ---")
            if no_stream:
                content = await assistant.complete(messages)
                if content is None:
                    _warn("Received an empty response from the API.")
                else:
                    _console.out(content, highlight=False)
            else:
                async for delta in assistant.stream(messages, warn=_warn):
                    _console.out(delta, end="", highlight=False)
                _console.out("")
            _console.out("--------------------")

    try:
        asyncio.run(_run())
    except ProviderError as exc:
        raise _fail(str(exc)) from exc


@app.command()
def gemini(
    directory: str = typer.Argument(".", help="Directory to collect."),
) -> None:
    """Copy DIRECTORY's files to the clipboard and open Gemini in the browser."""

    root = _load_directory(directory)
    bundle = gather_context(root, policy=FileFilter.DEFAULT, warn=_warn)
    context = format_gemini_context(bundle)

    if is_running_via_ssh():
        _err_console.print("SSH session detected. Sending context to your local clipboard via OSC 52.")
        sys.stdout.write(osc52_sequence(context))
        sys.stdout.flush()
        _err_console.print(
            f"If your terminal does not support OSC 52, copy the text below and open {GEMINI_URL} manually."
        )
        _console.out(context, highlight=False)
        return

    try:
        copy_to_clipboard(context)
    except ClipboardError as exc:
        raise _fail(f"failed to copy to clipboard: {exc}") from exc
    _err_console.print(f"Copied {len(bundle.files)} file(s) from {escape(str(root))} to the clipboard.")

    if not open_in_browser(GEMINI_URL):
        _warn(f"could not open a browser. Visit {GEMINI_URL} and paste the context.")


@app.command()
def version() -> None:
    """Print the installed version."""

    _console.print(f"vibe {__version__}")


def run() -> None:
    app()
