# src/docflow/core/run_context.py
"""
RunContext — Contexto canônico de execução do docflow.

Este módulo define o **RunContext**, a estrutura que acompanha uma run do
workflow do início ao estado terminal.

O RunContext é o **único meio permitido** de:
- registro de logs estruturados de execução (event log em memória)
- coleta de warnings não fatais associados a nodes
- acesso à configuração efetiva e aos metadados da run

Princípios fundamentais:
- Isolamento por execução (cada run possui seu próprio contexto)
- Logs não são strings livres, mas eventos estruturados
- O contexto não decide políticas de execução
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


RUN_SCOPE = "run"


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run do workflow.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (defaults + local deep-merge)
    - meta: metadados de execução (ex.: origem, paths de entrada)
    - warnings: warnings por node_id
    - events: log estruturado de eventos
    """

    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def create(cls, *, config: Optional[Dict[str, Any]] = None, **meta: Any) -> "RunContext":
        """Cria um contexto novo com `run_id` aleatório e timestamp UTC atual."""
        return cls(
            run_id=f"run-{uuid.uuid4().hex[:12]}",
            created_at=datetime.now(timezone.utc),
            config=dict(config or {}),
            meta=dict(meta),
        )

    def renew(self) -> "RunContext":
        """Contexto da próxima run: mesma config e meta, novo `run_id`, log e warnings vazios."""
        return RunContext.create(config=self.config, **self.meta)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, node_id: Optional[str], level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "node_id": node_id if node_id is not None else RUN_SCOPE,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, node_id: str, message: str) -> None:
        if node_id not in self.warnings:
            self.warnings[node_id] = []
        self.warnings[node_id].append(message)

    def events_for(self, node_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("node_id") == node_id]
