# src/docflow/core/graph/registry.py
"""
Registro estrutural de nodes do workflow.

O `NodeRegistry` valida identificadores e preserva a ordem de declaração,
que é o critério de desempate da ordenação topológica.

Invariantes:
    - Cada node registrado possui um `node.id` único e não vazio
    - A lista de nodes reflete exatamente a ordem de registro
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .model import Node


class DuplicateNodeIdError(ValueError):
    """
    Exceção levantada quando dois nodes são declarados com o mesmo `id`.

    A duplicidade é tratada como erro fatal de definição do grafo e é
    detectada no momento do registro, antes de qualquer validação ou run.
    """


@dataclass
class NodeRegistry:
    """Registro canônico de nodes para construção do GraphModel."""

    _nodes: Dict[str, Node] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, node: Node) -> None:
        node_id = getattr(node, "id", None)
        if not isinstance(node_id, str) or not node_id.strip():
            raise ValueError("node.id must be a non-empty string")

        if node_id in self._nodes:
            raise DuplicateNodeIdError(f"Duplicate node id: {node_id}")

        self._nodes[node_id] = node
        self._order.append(node_id)

    def get(self, node_id: str) -> Node:
        return self._nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def list(self) -> List[Node]:
        return [self._nodes[nid] for nid in self._order]
