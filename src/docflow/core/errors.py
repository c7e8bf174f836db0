"""
docflow — Canonical Error Structures (v1)

Este módulo define o catálogo canônico de códigos de erro do docflow e o
payload serializável usado por manifest e relatórios.

Erros são considerados artefatos de domínio e fazem parte do contrato
operacional do sistema, devendo ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Catálogo canônico de códigos de erro (v1)
# ---------------------------------------------------------------------------

# Execução de nodes
PROCESSING_FAILED = "PROCESSING_FAILED"
RUN_CANCELLED = "RUN_CANCELLED"

# Pré-execução
VALIDATION_FAILED = "VALIDATION_FAILED"

# Engine
ENGINE_BUSY = "ENGINE_BUSY"
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do docflow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - node_id: node associado à falha, quando conhecido
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    node_id: Optional[str] = None
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


def error_payload_from_exception(exc: BaseException, *, node_id: Optional[str] = None) -> ErrorPayload:
    """Converte uma exceção em ErrorPayload sem expor stack trace.

    Regras:
    - exceções com `code` próprio preservam o código
    - demais exceções são encapsuladas como ENGINE_EXECUTION_ERROR
    """
    code = getattr(exc, "code", None)
    carried_node = getattr(exc, "node_id", None)
    details = dict(getattr(exc, "details", {}) or {})
    details.setdefault("exception_class", exc.__class__.__name__)

    return ErrorPayload(
        type=code if isinstance(code, str) and code else ENGINE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details=details,
        node_id=carried_node or node_id,
        hint=getattr(exc, "hint", None),
    )

