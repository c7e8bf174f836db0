# src/docflow/core/engine/state.py
"""
Estado de execução de uma run (snapshots imutáveis).

Máquina de estados:

    idle → running → {completed | error | cancelled}

O Engine é o único dono do estado; observadores externos (UI de progresso,
testes) recebem apenas snapshots `ExecutionState`, que nunca mudam após
emitidos.

Invariantes:
    - `running` sempre possui `current_node_id` definido após o primeiro node
    - estados terminais sempre possuem `current_node_id` limpo
    - `executed_nodes` não contém duplicatas e só cresce durante a run
    - `progress = len(executed_nodes) / total`
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple


class ExecutionStatus(str, Enum):
    """
    Estados possíveis de uma run.

    Os valores são strings para facilitar serialização em manifest e
    snapshots enviados à camada de apresentação.
    """
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.CANCELLED, ExecutionStatus.COMPLETED, ExecutionStatus.ERROR)


@dataclass(frozen=True)
class ExecutionState:
    """Snapshot imutável do estado de uma run."""

    status: ExecutionStatus = ExecutionStatus.IDLE
    current_node_id: Optional[str] = None
    executed_nodes: Tuple[str, ...] = ()
    pending_nodes: Tuple[str, ...] = ()
    progress: float = 0.0

    @classmethod
    def idle(cls, node_ids: Sequence[str] = ()) -> "ExecutionState":
        return cls(status=ExecutionStatus.IDLE, pending_nodes=tuple(node_ids))

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "current_node_id": self.current_node_id,
            "executed_nodes": list(self.executed_nodes),
            "pending_nodes": list(self.pending_nodes),
            "progress": self.progress,
        }


def compute_progress(executed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return executed / total
