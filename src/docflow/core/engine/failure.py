# src/docflow/core/engine/failure.py
"""
FailureContextDeriver — relatório estruturado de falha de uma run.

Transforma um erro arbitrário (qualquer objeto levantado por um processador
ou pelo próprio Engine) em um `FailureContext` apresentável ao usuário.

Regras:
    - error_message: mensagem do erro quando é uma exceção reconhecida;
      caso contrário, `Unknown error occurred`
    - failed_node_id: `node_id` carregado pelo erro, senão o node corrente,
      senão string vazia
    - error_code: `code` carregado pelo erro, quando presente
    - successful_count: quantidade de nodes já executados
    - is_cancelled: mensagem contém "cancelled by user" (case-insensitive)

Invariantes:
    - Função pura: sem efeitos colaterais
    - Nunca levanta exceção
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence


UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

_CANCELLED_BY_USER = re.compile(r"cancelled by user", re.IGNORECASE)


@dataclass(frozen=True)
class FailureContext:
    """Relatório imutável de onde e por que uma run parou."""

    failed_node_id: str
    successful_count: int
    error_message: str
    error_code: Optional[str] = None
    is_cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _safe_attr(obj: Any, name: str) -> Any:
    try:
        return getattr(obj, name, None)
    except Exception:
        return None


def _error_message(error: Any) -> str:
    if not isinstance(error, BaseException):
        return UNKNOWN_ERROR_MESSAGE
    message = _safe_attr(error, "message")
    if isinstance(message, str):
        return message
    try:
        return str(error)
    except Exception:
        return UNKNOWN_ERROR_MESSAGE


def derive_failure_context(
    error: Any,
    current_node_id: Optional[str],
    executed_node_ids: Sequence[str],
) -> FailureContext:
    message = _error_message(error)

    carried_node = _safe_attr(error, "node_id")
    if isinstance(carried_node, str) and carried_node:
        failed_node_id = carried_node
    else:
        failed_node_id = current_node_id or ""

    code = _safe_attr(error, "code")

    return FailureContext(
        failed_node_id=failed_node_id,
        successful_count=len(executed_node_ids),
        error_message=message,
        error_code=None if code is None else str(code),
        is_cancelled=bool(_CANCELLED_BY_USER.search(message)),
    )
