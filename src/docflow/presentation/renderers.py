# src/docflow/presentation/renderers.py
"""
Renderizadores de apresentação (v1)

Objetivo:
- Renderizar snapshots de execução, relatórios de validação, falhas e
  saídas nomeadas para HTML e texto legível.
- NÃO altera os objetos recebidos.
- NÃO infere semântica além do que os campos já dizem.
- NÃO importa o core (Engine/Validator/Manifest): trabalha com qualquer
  objeto que exponha `to_dict()` ou com Mappings equivalentes.

Saídas:
- HTML (string) quando possível
- fallback seguro em string (texto puro ou JSON pretty)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence
import copy
import html
import json


@dataclass(frozen=True)
class RenderResult:
    """Resultado de renderização (apenas apresentação)."""
    html: Optional[str]  # HTML string (quando aplicável)
    text: str            # fallback textual (sempre preenchido)


def _escape(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def _as_pretty_json(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
    except TypeError:
        return repr(payload)


def _as_mapping(obj: Any) -> Dict[str, Any]:
    if isinstance(obj, Mapping):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    raise TypeError(f"Cannot render object of type {type(obj).__name__}")


def render_payload(payload: Any) -> RenderResult:
    """
    Renderizador genérico v1:
    - dict -> tabela key/value
    - list -> tabela de uma coluna
    - caso contrário -> JSON pretty (fallback)

    Garantia de pureza:
    - Verificada explicitamente apenas para tipos mutáveis suportados (dict, list).
    """
    before = copy.deepcopy(payload) if isinstance(payload, (dict, list)) else None

    html_out: Optional[str] = None
    if isinstance(payload, Mapping):
        html_out = render_kv_table_html(payload)
    elif isinstance(payload, Sequence) and not isinstance(payload, (str, bytes, bytearray)):
        html_out = _render_list_html(payload)
    text_out = _as_pretty_json(payload)

    after = copy.deepcopy(payload) if isinstance(payload, (dict, list)) else None
    if before is not None and before != after:
        raise AssertionError("Renderer mutated the input payload")

    return RenderResult(html=html_out, text=text_out)


def render_kv_table_html(payload: Mapping[str, Any], title: Optional[str] = None) -> str:
    """Renderiza dict como tabela key/value (HTML puro)."""
    rows = [
        f"<tr><td><code>{_escape(k)}</code></td><td>{_escape(v)}</td></tr>"
        for k, v in payload.items()
    ]
    heading = f"<h4>{_escape(title)}</h4>" if title else ""
    return (
        f"{heading}"
        "<table>"
        "<thead><tr><th>key</th><th>value</th></tr></thead>"
        "<tbody>" + "".join(rows) + "</tbody>"
        "</table>"
    )


def _render_list_html(items: Sequence[Any], title: Optional[str] = None) -> str:
    heading = f"<h4>{_escape(title)}</h4>" if title else ""
    if not items:
        return f"{heading}<div><em>(empty)</em></div>"
    lis = "".join(f"<li>{_escape(x)}</li>" for x in items)
    return f"{heading}<ul>{lis}</ul>"


def render_validation_report(report: Any) -> RenderResult:
    """
    Renderiza um ValidationReport como lista de marcadores.

    Cada diagnóstico vira uma linha `- {message}`, agrupada em
    "Errors" e "Warnings". Seções vazias são omitidas.
    """
    data = _as_mapping(report)
    errors = [e["message"] for e in data.get("errors", [])]
    warnings = [w["message"] for w in data.get("warnings", [])]

    lines = []
    parts = []
    for title, messages in (("Errors", errors), ("Warnings", warnings)):
        if not messages:
            continue
        lines.append(f"{title}:")
        lines.extend(f"- {m}" for m in messages)
        parts.append(_render_list_html(messages, title=title))

    if not lines:
        lines.append("Workflow is valid")
        parts.append("<div>Workflow is valid</div>")

    return RenderResult(html="".join(parts), text="\n".join(lines))


def render_state(snapshot: Any) -> RenderResult:
    """Renderiza um snapshot de ExecutionState (status, progresso, node corrente)."""
    data = _as_mapping(snapshot)
    status = str(data.get("status", ""))
    percent = int(round(float(data.get("progress", 0.0)) * 100))
    current = data.get("current_node_id")

    text = f"{status} {percent}%"
    if current:
        text += f" (running {current})"

    table = {
        "status": status,
        "progress": f"{percent}%",
        "current_node_id": current or "-",
        "executed_nodes": ", ".join(data.get("executed_nodes", [])) or "-",
        "pending_nodes": ", ".join(data.get("pending_nodes", [])) or "-",
    }
    return RenderResult(html=render_kv_table_html(table, title="Execution"), text=text)


def render_failure(context: Any) -> RenderResult:
    """
    Renderiza um FailureContext.

    Cancelamentos usam texto neutro (não é uma falha real); falhas de
    processamento identificam o node e quantos nodes concluíram antes.
    """
    data = _as_mapping(context)
    count = int(data.get("successful_count", 0))
    noun = "node" if count == 1 else "nodes"

    if data.get("is_cancelled"):
        text = f"Execution stopped. {count} {noun} completed before cancellation."
        return RenderResult(html=f"<div class='docflow-cancelled'>{_escape(text)}</div>", text=text)

    failed = data.get("failed_node_id") or "unknown node"
    text = f"Execution failed at {failed} after {count} successful {noun}: {data.get('error_message', '')}"
    code = data.get("error_code")
    if code:
        text += f" [{code}]"
    return RenderResult(html=f"<div class='docflow-error'>{_escape(text)}</div>", text=text)


def render_outputs(outputs: Mapping[str, Sequence[Any]]) -> RenderResult:
    """Renderiza as saídas por node como `node_id: nome1, nome2`."""
    lines = []
    table: Dict[str, str] = {}
    for node_id, items in outputs.items():
        names = ", ".join(getattr(i, "filename", str(i)) for i in items)
        table[node_id] = names or "(none)"
        lines.append(f"{node_id}: {table[node_id]}")
    return RenderResult(html=render_kv_table_html(table, title="Outputs"), text="\n".join(lines))
