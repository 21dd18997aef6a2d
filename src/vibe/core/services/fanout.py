"""Fan-out / fan-in de proveedores.

Una tarea asyncio por proveedor; cada una deja exactamente un resultado en
una cola compartida. Una tarea coordinadora espera a todas y encola un
centinela, así el consumidor termina sin bloquearse y procesa los resultados
en orden de llegada (no de despacho).
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Sequence, cast

import httpx

from vibe.core.domain.models import ProviderResult
from vibe.core.interfaces.provider import ProviderAdapter
from vibe.core.services.requester import call_provider

_DONE = object()


async def fan_out(
    prompt: str,
    providers: Sequence[ProviderAdapter],
    client: httpx.AsyncClient,
) -> AsyncIterator[ProviderResult]:
    """Despacha `prompt` a todos los `providers` y produce resultados según llegan."""

    queue: asyncio.Queue[object] = asyncio.Queue()

    async def worker(adapter: ProviderAdapter) -> None:
        result = await call_provider(adapter, prompt, client)
        await queue.put(result)

    async def coordinator(tasks: list[asyncio.Task[None]]) -> None:
        await asyncio.gather(*tasks, return_exceptions=True)
        await queue.put(_DONE)

    tasks = [asyncio.create_task(worker(p), name=f"provider:{p.name}") for p in providers]
    closer = asyncio.create_task(coordinator(tasks), name="fan-out-coordinator")

    try:
        while True:
            item = await queue.get()
            if item is _DONE:
                break
            yield cast(ProviderResult, item)
    finally:
        # Solo relevante si el consumidor abandona el iterador antes del final.
        for task in (*tasks, closer):
            if not task.done():
                task.cancel()

