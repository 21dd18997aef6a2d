"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Un único camino de render para respuestas individuales y la fusionada.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from vibe.core.domain.models import GenReport, ProviderResult

logger = logging.getLogger(__name__)


def response_markdown(provider: str, text: str) -> str:
    return f"### {provider} Response\n\n```\n{text}\n```"


def merged_markdown(text: str) -> str:
    return f"## Merged Response\n\n```\n{text}\n```"


def render_markdown(console: Console, markdown: str, *, raw: bool = False, code_theme: str = "monokai") -> None:
    """Imprime Markdown con estilo, o crudo si `raw` o si el render falla."""

    if raw:
        console.out(markdown, highlight=False)
        return
    try:
        console.print(Markdown(markdown, code_theme=code_theme))
    except Exception as exc:  # noqa: BLE001
        logger.debug("markdown render failed, falling back to raw text: %s", exc)
        console.out(markdown, highlight=False)


def print_provider_error(console: Console, result: ProviderResult) -> None:
    if result.error is None:
        return
    console.print(f"[bold red]{escape(result.provider)} error:[/bold red] {escape(result.error.message)}")


def build_results_table(report: GenReport) -> Table:
    """Tabla resumen `proveedor / estado / detalle` (orden de llegada)."""

    total = len(report.results)
    table = Table(title=f"{len(report.successes)}/{total} providers succeeded")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Status", style="white", no_wrap=True)
    table.add_column("Details", style="dim")
    for result in report.results:
        if result.error is None:
            table.add_row(result.provider, "[green]OK[/green]", f"{len(result.text or '')} chars")
        else:
            table.add_row(result.provider, "[red]FAIL[/red]", escape(result.error.kind.value))
    if report.merged is not None:
        table.add_row("merge", "[green]OK[/green]", f"{len(report.merged)} chars")
    elif report.merge_error is not None:
        table.add_row("merge", "[red]FAIL[/red]", escape(report.merge_error.message))
    return table
