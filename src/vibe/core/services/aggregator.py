"""Agregación de resultados de `gen` y paso de merge.

Flujo:
1. Fan-out a todos los proveedores (`fanout.fan_out`), resultados en orden
   de llegada.
2. Cada resultado se entrega al hook de UI en cuanto llega.
3. Con todos recibidos: si hubo éxitos, un único request secuencial de
   merge; si no, el merge se omite (nunca se intenta con cero entradas).

Los fallos individuales y el fallo del merge se reportan, no abortan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Sequence

import httpx

from vibe.adapters.merger import OpenAIMerger
from vibe.adapters.providers import build_default_providers
from vibe.core.config import AppSettings
from vibe.core.domain.errors import MergeError, PromptFileError
from vibe.core.domain.models import ErrorKind, GenReport, MergeRequest, ProviderFailure, ProviderResult
from vibe.core.interfaces.provider import ProviderAdapter
from vibe.core.services.fanout import fan_out

logger = logging.getLogger(__name__)

MERGE_PREAMBLE = (
    "Below are responses from different AI models to the same prompt. "
    "Please analyze these responses and provide either:\n"
    "1. The best single response if one clearly stands out, or\n"
    "2. A merged response that combines the unique insights and important points from all responses.\n\n"
)

Merger = Callable[[MergeRequest], Awaitable[str]]


@dataclass
class GenConfig:
    """Configuración explícita de una invocación de `gen`."""

    providers: Sequence[ProviderAdapter]
    merge_model: str = "chatgpt-4o-latest"
    merge_api_key: str | None = None
    raw: bool = False
    merge_enabled: bool = True

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        raw: bool = False,
        merge_enabled: bool = True,
    ) -> "GenConfig":
        return cls(
            providers=build_default_providers(settings),
            merge_model=settings.merge_model,
            merge_api_key=settings.openai_api_key,
            raw=raw,
            merge_enabled=merge_enabled,
        )


@dataclass
class GenHooks:
    """Callbacks opcionales para la capa de UI."""

    result: Callable[[ProviderResult], None] | None = None
    merge_start: Callable[[MergeRequest], None] | None = None
    merged: Callable[[str], None] | None = None
    merge_failed: Callable[[ProviderFailure], None] | None = None
    nothing_to_merge: Callable[[], None] | None = None


def read_prompt_file(path: Path) -> str:
    """Único error fatal de `gen`: el archivo de prompt no se puede leer."""

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise PromptFileError(f"failed to read prompt file: {exc}") from exc
    return data.decode("utf-8", errors="replace")


def build_merge_prompt(successes: Sequence[ProviderResult]) -> str:
    parts = [MERGE_PREAMBLE]
    for result in successes:
        parts.append(f"=== {result.provider} Response ===\n{result.text}\n\n")
    return "".join(parts)


def build_merge_request(successes: Sequence[ProviderResult], *, model: str) -> MergeRequest | None:
    """`None` si no hay éxitos: el merge no se intenta con cero entradas."""

    ok = [r for r in successes if r.ok]
    if not ok:
        return None
    return MergeRequest(model=model, prompt=build_merge_prompt(ok), sources=ok)


async def generate(
    prompt: str,
    config: GenConfig,
    *,
    client: httpx.AsyncClient,
    merger: Merger | None = None,
    hooks: GenHooks | None = None,
) -> GenReport:
    hooks = hooks or GenHooks()

    results: list[ProviderResult] = []
    async for result in fan_out(prompt, config.providers, client):
        results.append(result)
        if hooks.result:
            hooks.result(result)

    successes = [r for r in results if r.ok]
    logger.info("%d/%d providers succeeded", len(successes), len(results))

    if not config.merge_enabled:
        return GenReport(results=results, merge_skipped=True)

    request = build_merge_request(successes, model=config.merge_model)
    if request is None:
        if hooks.nothing_to_merge:
            hooks.nothing_to_merge()
        return GenReport(results=results, merge_skipped=True)

    if hooks.merge_start:
        hooks.merge_start(request)

    merger = merger or OpenAIMerger(
        api_key=config.merge_api_key,
        http_client=client,
        timeout_seconds=client.timeout.read or 20 * 60.0,
    )
    try:
        merged = await merger(request)
    except MergeError as exc:
        failure = exc.to_failure()
    except Exception as exc:  # noqa: BLE001
        logger.exception("merge raised unexpectedly")
        failure = ProviderFailure(
            kind=ErrorKind.MERGE,
            message=f"failed to merge responses: {type(exc).__name__}: {exc}",
        )
    else:
        if hooks.merged:
            hooks.merged(merged)
        return GenReport(results=results, merged=merged)

    logger.info("merge failed: %s", failure.message)
    if hooks.merge_failed:
        hooks.merge_failed(failure)
    return GenReport(results=results, merge_error=failure)
