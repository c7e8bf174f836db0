# src/docflow/core/traceability/manifest.py
"""
Manifest v1: registro auditável de uma run de workflow no docflow.

O Manifest responde, depois do fato, a quatro perguntas:
    - qual run foi (run_id, timestamps, versão do docflow)
    - com quais entradas declarativas (hash da config e do grafo)
    - o que aconteceu com cada node (status, duração, nomes das saídas, erro)
    - em que ordem (Event Log)

Regras:
    - Só entra no Event Log o que for registrado por chamada explícita
    - Payloads binários nunca entram no Manifest, apenas nomes de arquivo
    - Toda função de escrita aceita o `RunManifest` ou a sua forma dict;
      um dict recebido é atualizado in-place
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union


def _utc(moment: datetime) -> datetime:
    # timestamps naive são tratados como UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _stamp(moment: datetime) -> str:
    return _utc(moment).isoformat()


def _elapsed_ms(since: Optional[str], until: datetime) -> int:
    """Milissegundos entre um timestamp ISO registrado e `until` (0 se ilegível)."""
    if not since:
        return 0
    try:
        start = _utc(datetime.fromisoformat(since))
    except ValueError:
        return 0
    return max(0, round((_utc(until) - start).total_seconds() * 1000))


@dataclass
class RunManifest:
    """
    Forma canônica do Manifest.

    Seções:
        - run: run_id, started_at, docflow_version e, ao final, status/finished_at/failure
        - inputs: config_hash e graph_hash
        - nodes: estado incremental por node_id
        - events: Event Log ordenado
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    nodes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy({"run": self.run, "inputs": self.inputs, "nodes": self.nodes, "events": self.events})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunManifest":
        return cls(
            run=dict(data.get("run") or {}),
            inputs=dict(data.get("inputs") or {}),
            nodes={node_id: dict(entry) for node_id, entry in (data.get("nodes") or {}).items()},
            events=[dict(event) for event in (data.get("events") or [])],
        )


ManifestLike = Union[RunManifest, Dict[str, Any]]


@contextmanager
def _editing(manifest: ManifestLike) -> Iterator[RunManifest]:
    """Entrega um RunManifest editável e devolve as mudanças a um dict de origem."""
    if isinstance(manifest, RunManifest):
        yield manifest
        return
    working = RunManifest.from_dict(manifest)
    yield working
    manifest.clear()
    manifest.update(working.to_dict())


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    docflow_version: str,
    config_hash: str,
    graph_hash: str,
) -> RunManifest:
    """Manifest inicial de uma run, com Event Log vazio."""
    return RunManifest(
        run={"run_id": run_id, "started_at": _stamp(started_at), "docflow_version": docflow_version},
        inputs={"config_hash": config_hash, "graph_hash": graph_hash},
    )


def _append_event(
    m: RunManifest,
    event_type: str,
    ts: datetime,
    node_id: Optional[str],
    payload: Optional[Dict[str, Any]],
) -> None:
    event: Dict[str, Any] = {"event_type": event_type, "timestamp": _stamp(ts)}
    if node_id is not None:
        event["node_id"] = node_id
    if payload is not None:
        event["payload"] = payload
    m.events.append(event)


def add_event(
    manifest: ManifestLike,
    *,
    event_type: str,
    ts: datetime,
    node_id: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Acrescenta um evento ao final do Event Log."""
    with _editing(manifest) as m:
        _append_event(m, event_type, ts, node_id, payload)


def node_started(manifest: ManifestLike, *, node_id: str, label: str, ts: datetime) -> None:
    with _editing(manifest) as m:
        entry = m.nodes.setdefault(node_id, {})
        entry.update(node_id=node_id, label=label, status="running", started_at=_stamp(ts))
        _append_event(m, "node_started", ts, node_id, {"label": label})


def node_finished(
    manifest: ManifestLike,
    *,
    node_id: str,
    ts: datetime,
    output_filenames: Sequence[str],
) -> None:
    """
    Marca um node como concluído.

    Args:
        manifest: Manifest a ser atualizado.
        node_id (str): Identificador do node.
        ts (datetime): Momento da conclusão.
        output_filenames (Sequence[str]): Nomes das saídas produzidas, na ordem.
    """
    names = list(output_filenames)
    with _editing(manifest) as m:
        entry = m.nodes.setdefault(node_id, {"node_id": node_id})
        duration = _elapsed_ms(entry.get("started_at"), ts)
        entry.update(status="completed", finished_at=_stamp(ts), duration_ms=duration, outputs=names)
        _append_event(m, "node_finished", ts, node_id, {"outputs": list(names), "duration_ms": duration})


def node_failed(
    manifest: ManifestLike,
    *,
    node_id: str,
    ts: datetime,
    error: Dict[str, Any],
) -> None:
    """Marca um node como falho; `error` já vem serializado como ErrorPayload."""
    with _editing(manifest) as m:
        entry = m.nodes.setdefault(node_id, {"node_id": node_id})
        entry.update(status="failed", finished_at=_stamp(ts), error=dict(error))
        _append_event(m, "node_failed", ts, node_id, {"error": dict(error)})


def run_finished(
    manifest: ManifestLike,
    *,
    status: str,
    ts: datetime,
    failure: Optional[Dict[str, Any]] = None,
) -> None:
    """Fecha a run com o status terminal (completed, error ou cancelled)."""
    with _editing(manifest) as m:
        m.run.update(status=status, finished_at=_stamp(ts))
        payload: Dict[str, Any] = {"status": status}
        if failure is not None:
            m.run["failure"] = dict(failure)
            payload["failure"] = dict(failure)
        _append_event(m, "run_finished", ts, None, payload)


def save_manifest(manifest: ManifestLike, path: Path) -> None:
    """
    Grava o Manifest como JSON indentado e com chaves ordenadas.

    Diretórios intermediários são criados quando necessário.

    Raises:
        OSError: Falha de filesystem.
        TypeError: Conteúdo não serializável (ex.: bytes em um payload de evento).
    """
    data = manifest.to_dict() if isinstance(manifest, RunManifest) else manifest
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)


def load_manifest(path: Path) -> RunManifest:
    with Path(path).open("r", encoding="utf-8") as handle:
        return RunManifest.from_dict(json.load(handle))
