# src/docflow/core/traceability/__init__.py
"""
Pacote de rastreabilidade (traceability) do docflow — Manifest v1.

API pública exposta:
    - RunManifest     → estrutura canônica do Manifest
    - create_manifest → criação explícita do Manifest
    - add_event       → registro explícito de eventos no Event Log
    - node_started    → marca início de execução de um node
    - node_finished   → registra conclusão de um node (com nomes das saídas)
    - node_failed     → registra falha de um node
    - run_finished    → registra o estado terminal da run
    - save_manifest   → persistência do Manifest em JSON
    - load_manifest   → restauração determinística do Manifest

Invariantes:
    - O Manifest inicia com `nodes` e `events` vazios
    - Eventos nunca são reordenados automaticamente
"""

from .manifest import (
    RunManifest,
    create_manifest,
    add_event,
    node_started,
    node_finished,
    node_failed,
    run_finished,
    save_manifest,
    load_manifest,
)

__all__ = [
    "RunManifest",
    "create_manifest",
    "add_event",
    "node_started",
    "node_finished",
    "node_failed",
    "run_finished",
    "save_manifest",
    "load_manifest",
]
