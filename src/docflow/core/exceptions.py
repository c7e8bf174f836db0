"""
docflow — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do docflow.

Objetivo:
- Permitir que processadores e Engine levantem exceções semânticas tipadas
- Carregar contexto de falha (`node_id`, `code`) de forma estruturada
- Facilitar a derivação determinística de FailureContext
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Não contém lógica de processamento de documentos.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import (
    ENGINE_BUSY,
    ENGINE_CONFIGURATION_ERROR,
    PROCESSING_FAILED,
    RUN_CANCELLED,
    VALIDATION_FAILED,
)


# Mensagem canônica de cancelamento (reconhecida pelo FailureContextDeriver).
CANCELLED_BY_USER_MESSAGE = "Execution cancelled by user"


@dataclass(frozen=True)
class DocflowException(Exception):
    """Base class para exceções internas do docflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - `node_id` e `code` são lidos pelo FailureContextDeriver quando presentes
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    node_id: Optional[str] = None
    code: Optional[str] = None
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Execução
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProcessingFailedError(DocflowException):
    """Processador de um node rejeitou ou reportou `success=False`."""

    code: Optional[str] = PROCESSING_FAILED


@dataclass(frozen=True)
class RunCancelledError(DocflowException):
    """Run interrompida por pedido explícito do usuário."""

    message: str = CANCELLED_BY_USER_MESSAGE
    code: Optional[str] = RUN_CANCELLED


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationFailedError(DocflowException):
    """Grafo reprovado pelo Validator; a run nunca inicia.

    O relatório original do Validator é preservado sem alterações em
    `report`, para que a camada de apresentação renderize os diagnósticos.
    """

    report: Any = None
    code: Optional[str] = VALIDATION_FAILED


@dataclass(frozen=True)
class EngineBusyError(DocflowException):
    """Tentativa de iniciar uma run enquanto outra está em andamento."""

    code: Optional[str] = ENGINE_BUSY


@dataclass(frozen=True)
class EngineConfigurationError(DocflowException):
    """Configuração inválida ou inconsistente para execução."""

    code: Optional[str] = ENGINE_CONFIGURATION_ERROR


@dataclass(frozen=True)
class UnsupportedInputError(DocflowException):
    """Arquivo de entrada com extensão fora da lista aceita."""
