# src/docflow/core/engine/__init__.py
"""
Engine do docflow.

Este pacote contém a implementação responsável por **planejar** e
**executar** workflows de processamento de documentos.

Componentes principais:
    - planner      → ordenação topológica determinística (desempate por declaração)
    - state        → estados da run e snapshots imutáveis
    - items        → InputItem, NamedOutput e ProcessResult
    - outputs      → OutputDeriver (nomeação de saídas)
    - failure      → FailureContextDeriver (relatório de falha)
    - cancellation → token de cancelamento cooperativo
    - processor    → contrato de processador e registry de processadores
    - resources    → recurso compartilhado de inicialização preguiçosa
    - engine       → execução sequencial coordenada

Invariantes:
    - Nodes só são executados após seus predecessores
    - Cada node é executado no máximo uma vez por run
    - O resultado da run reflete explicitamente o estado terminal

Limites explícitos:
    - Não interpreta o que cada processador faz
    - Não persiste resultados automaticamente
"""

from .cancellation import CancellationToken
from .engine import ExecutionEngine, RunResult
from .failure import FailureContext, UNKNOWN_ERROR_MESSAGE, derive_failure_context
from .items import (
    InputItem,
    MultiplePayloads,
    NamedFile,
    NamedOutput,
    NoPayload,
    ProcessResult,
    RawPayload,
    SinglePayload,
    as_input_item,
    classify_payload,
    load_input_files,
)
from .outputs import NamingPolicy, derive_outputs, sanitize_label
from .planner import CycleDetectedError, UnknownNodeError, plan_execution
from .processor import FunctionProcessor, Processor, ProcessorRegistry
from .resources import LazyResource
from .state import ExecutionState, ExecutionStatus

__all__ = [
    "CancellationToken",
    "ExecutionEngine",
    "RunResult",
    "FailureContext",
    "UNKNOWN_ERROR_MESSAGE",
    "derive_failure_context",
    "InputItem",
    "MultiplePayloads",
    "NamedFile",
    "NamedOutput",
    "NoPayload",
    "ProcessResult",
    "RawPayload",
    "SinglePayload",
    "as_input_item",
    "classify_payload",
    "load_input_files",
    "NamingPolicy",
    "derive_outputs",
    "sanitize_label",
    "CycleDetectedError",
    "UnknownNodeError",
    "plan_execution",
    "FunctionProcessor",
    "Processor",
    "ProcessorRegistry",
    "LazyResource",
    "ExecutionState",
    "ExecutionStatus",
]
