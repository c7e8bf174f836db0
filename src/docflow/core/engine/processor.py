# src/docflow/core/engine/processor.py
"""
Contrato canônico de processador do docflow.

Um processador é o colaborador externo que executa o trabalho de um node
(conversão de formato, divisão, renderização...). O Engine não conhece
seus detalhes internos: exige apenas o contrato assíncrono abaixo.

Responsabilidades de um processador:
    - receber as entradas do node (sequência ordenada de InputItem)
    - resolver para um `ProcessResult` (ou um mapa equivalente)
    - ou levantar uma exceção, opcionalmente com `node_id` e `code`

Princípios fundamentais:
    - Processadores não conhecem o Engine nem o planner
    - O token de cancelamento é repassado; respeitá-lo é opcional
    - Um mesmo processador pode ser reutilizado em vários nodes e runs
      (estado interno de longa duração deve ser modelado com `LazyResource`)
    - Conformidade é garantida por duck typing (@runtime_checkable)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Sequence, runtime_checkable

from docflow.core.exceptions import EngineConfigurationError
from docflow.core.graph.model import Node

from .cancellation import CancellationToken
from .items import InputItem, ProcessResult


@runtime_checkable
class Processor(Protocol):
    """
    Contrato mínimo de um processador.

    Atributos opcionais:
        - key: chave estável usada em grafos serializados
    """

    async def invoke(
        self,
        inputs: Sequence[InputItem],
        *,
        cancel_token: CancellationToken,
    ) -> ProcessResult:
        """Processa as entradas de um node e resolve para ProcessResult."""
        ...


ProcessorFn = Callable[[Sequence[InputItem]], Awaitable[Any]]


@dataclass
class FunctionProcessor:
    """Adapta uma corrotina `fn(inputs)` ao contrato de processador."""

    fn: ProcessorFn
    key: Optional[str] = None
    pass_token: bool = False

    async def invoke(self, inputs: Sequence[InputItem], *, cancel_token: CancellationToken) -> Any:
        if self.pass_token:
            return await self.fn(inputs, cancel_token=cancel_token)  # type: ignore[call-arg]
        return await self.fn(inputs)


@dataclass
class ProcessorRegistry:
    """Mapa chave → processador, usado para resolver referências de nodes."""

    _processors: Dict[str, Processor] = field(default_factory=dict, init=False, repr=False)

    def register(self, key: str, processor: Processor) -> None:
        if not isinstance(key, str) or not key.strip():
            raise ValueError("processor key must be a non-empty string")
        if key in self._processors:
            raise ValueError(f"Duplicate processor key: {key}")
        self._processors[key] = processor

    def __contains__(self, key: object) -> bool:
        return key in self._processors

    def get(self, key: str) -> Processor:
        return self._processors[key]

    def resolve(self, node: Node) -> Processor:
        """Resolve a referência de processador de um node.

        Raises:
            EngineConfigurationError: referência ausente, chave desconhecida
                ou objeto sem `invoke`.
        """
        ref = node.processor
        if isinstance(ref, str):
            if ref not in self._processors:
                raise EngineConfigurationError(
                    message=f"Unknown processor '{ref}' for node '{node.id}'",
                    details={"node_id": node.id, "processor": ref},
                    node_id=node.id,
                    hint="Registre o processador no ProcessorRegistry antes da run.",
                )
            return self._processors[ref]
        if ref is None or not callable(getattr(ref, "invoke", None)):
            raise EngineConfigurationError(
                message=f"Node '{node.id}' has no usable processor",
                details={"node_id": node.id, "received": type(ref).__name__},
                node_id=node.id,
            )
        return ref
