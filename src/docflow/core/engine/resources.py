# src/docflow/core/engine/resources.py
"""
Recurso compartilhado de longa duração para processadores.

Backends caros (ex.: um runtime de conversão de formatos) não devem viver
como estado implícito de módulo. `LazyResource` modela esse backend como
um recurso explicitamente possuído:

    - inicialização preguiçosa (a factory roda no primeiro `acquire`)
    - acquirers concorrentes compartilham uma única inicialização
    - `close()` executa o teardown uma vez; um `acquire` posterior reinicializa

O Engine não conhece esses recursos: eles pertencem aos processadores,
que podem ser reutilizados entre nodes e runs.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar


T = TypeVar("T")


class LazyResource(Generic[T]):
    def __init__(
        self,
        factory: Callable[[], Awaitable[T]],
        teardown: Optional[Callable[[T], Awaitable[None]]] = None,
    ) -> None:
        self._factory = factory
        self._teardown = teardown
        self._value: Optional[T] = None
        self._ready = False
        self._lock: Optional[asyncio.Lock] = None
        self.initializations = 0

    @property
    def is_initialized(self) -> bool:
        return self._ready

    async def acquire(self) -> T:
        if self._ready:
            return self._value  # type: ignore[return-value]
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if not self._ready:
                self._value = await self._factory()
                self._ready = True
                self.initializations += 1
        return self._value  # type: ignore[return-value]

    async def close(self) -> None:
        if not self._ready:
            return
        value = self._value
        self._value = None
        self._ready = False
        if self._teardown is not None:
            await self._teardown(value)  # type: ignore[arg-type]

    async def __aenter__(self) -> T:
        return await self.acquire()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
