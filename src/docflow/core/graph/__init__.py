# src/docflow/core/graph/__init__.py
"""
# Graph Core — docflow

Este pacote define a descrição **imutável** de um workflow: nodes,
edges direcionadas e consultas de travessia.

## Componentes

- **model**: `Node`, `Edge`, `GraphModel`
- **registry**: `NodeRegistry` (unicidade de `node.id`, ordem de declaração)
- **toposort**: ordenação topológica determinística (Kahn, desempate por declaração)
- **loader**: leitura/escrita do grafo em YAML/JSON e hash estrutural

## Limites Explícitos

- Não planeja execução (ver `docflow.core.engine.planner`)
- Não decide o que fazer com ciclos (Validator reporta, planner recusa)
- Não interpreta o que cada processador faz
"""

from .model import Edge, GraphModel, Node
from .registry import DuplicateNodeIdError, NodeRegistry
from .toposort import CycleDetectedError, topological_order
from .loader import (
    GraphFileNotFoundError,
    InvalidGraphDocumentError,
    compute_graph_hash,
    dump_graph,
    graph_from_dict,
    graph_to_dict,
    load_graph,
)

__all__ = [
    "Edge",
    "GraphModel",
    "Node",
    "DuplicateNodeIdError",
    "NodeRegistry",
    "CycleDetectedError",
    "topological_order",
    "GraphFileNotFoundError",
    "InvalidGraphDocumentError",
    "compute_graph_hash",
    "dump_graph",
    "graph_from_dict",
    "graph_to_dict",
    "load_graph",
]
