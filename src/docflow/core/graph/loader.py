# src/docflow/core/graph/loader.py
"""
Leitura e escrita do grafo de workflow em YAML/JSON.

Formato (v1):

    nodes:
      - id: split
        label: Split PDF
        processor: pdf.split
    edges:
      - source: load
        target: split

Decisões arquiteturais:
    - Processadores são referenciados por chave (string) no arquivo;
      a resolução para objetos acontece no início da run
    - Edges aceitam também as chaves `from`/`to`
    - O documento é lido com o mesmo leitor da camada de configuração

Limites explícitos:
    - Não valida ciclos nem conectividade (responsabilidade do Validator)
    - Não resolve processadores
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # PyYAML

from docflow.core.config.errors import ConfigError, UnsupportedConfigFormatError
from docflow.core.config.hashing import canonical_hash
from docflow.core.config.loader import load_mapping_file

from .model import Edge, GraphModel, Node


class GraphFileNotFoundError(ConfigError):
    """Arquivo de definição do grafo não encontrado."""


class InvalidGraphDocumentError(ConfigError):
    """Documento de grafo com estrutura inválida (nodes/edges malformados)."""


def _require_str(entry: Dict[str, Any], key: str, *, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidGraphDocumentError(f"{where}: campo '{key}' deve ser string não vazia")
    return value


def graph_from_dict(data: Dict[str, Any]) -> GraphModel:
    raw_nodes = data.get("nodes", []) or []
    raw_edges = data.get("edges", []) or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise InvalidGraphDocumentError("'nodes' e 'edges' devem ser listas")

    nodes: List[Node] = []
    for i, entry in enumerate(raw_nodes):
        if not isinstance(entry, dict):
            raise InvalidGraphDocumentError(f"nodes[{i}] deve ser um mapa")
        processor = entry.get("processor")
        if processor is not None and not isinstance(processor, str):
            raise InvalidGraphDocumentError(f"nodes[{i}]: 'processor' deve ser uma chave (string)")
        nodes.append(
            Node(
                id=_require_str(entry, "id", where=f"nodes[{i}]"),
                label=str(entry.get("label") or ""),
                processor=processor,
            )
        )

    edges: List[Edge] = []
    for i, entry in enumerate(raw_edges):
        if not isinstance(entry, dict):
            raise InvalidGraphDocumentError(f"edges[{i}] deve ser um mapa")
        normalized = {
            "source": entry.get("source", entry.get("from")),
            "target": entry.get("target", entry.get("to")),
        }
        edges.append(
            Edge(
                source=_require_str(normalized, "source", where=f"edges[{i}]"),
                target=_require_str(normalized, "target", where=f"edges[{i}]"),
            )
        )

    return GraphModel.build(nodes, edges)


def load_graph(path: Union[str, Path]) -> GraphModel:
    """Carrega um GraphModel a partir de um arquivo YAML/JSON."""
    data = load_mapping_file(path, missing_error=GraphFileNotFoundError)
    return graph_from_dict(data)


def _processor_key(processor: Any) -> Any:
    if processor is None or isinstance(processor, str):
        return processor
    return getattr(processor, "key", None)


def graph_to_dict(graph: GraphModel) -> Dict[str, Any]:
    return {
        "nodes": [
            {"id": n.id, "label": n.label, "processor": _processor_key(n.processor)}
            for n in graph.nodes
        ],
        "edges": [{"source": e.source, "target": e.target} for e in graph.edges],
    }


def dump_graph(graph: GraphModel, path: Union[str, Path]) -> None:
    path = Path(path)
    data = graph_to_dict(graph)
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")
    elif suffix == ".json":
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")


def compute_graph_hash(graph: GraphModel) -> str:
    """Hash estrutural do grafo (nodes, labels, chaves de processador e edges)."""
    return canonical_hash(graph_to_dict(graph))
