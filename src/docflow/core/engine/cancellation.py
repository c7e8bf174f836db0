# src/docflow/core/engine/cancellation.py
"""
Token de cancelamento cooperativo.

O Engine consulta o token em cada fronteira de node; processadores que
suportam abortar podem consultá-lo (ou aguardá-lo) durante o trabalho.
Nenhuma chamada em andamento é interrompida pelo Engine.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from docflow.core.exceptions import CANCELLED_BY_USER_MESSAGE, RunCancelledError


class CancellationToken:
    """Pedido de parada, válido para uma única run."""

    def __init__(self) -> None:
        self._requested = False
        self._event: Optional[asyncio.Event] = None

    @property
    def is_requested(self) -> bool:
        return self._requested

    def request(self) -> None:
        self._requested = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        if self._event is None:
            self._event = asyncio.Event()
            if self._requested:
                self._event.set()
        await self._event.wait()

    def raise_if_requested(self, node_id: Optional[str] = None) -> None:
        if self._requested:
            raise RunCancelledError(message=CANCELLED_BY_USER_MESSAGE, node_id=node_id)
