# src/docflow/core/graph/model.py
"""
Modelo imutável do grafo de workflow.

Este módulo define as estruturas que descrevem *o que* deve ser executado,
sem qualquer comportamento além de consultas de travessia:

    - Node      → unidade de trabalho (id, label, referência de processador)
    - Edge      → dependência direcionada (source → target)
    - GraphModel → nodes em ordem de declaração + edges em ordem de declaração

Decisões arquiteturais:
    - `Node.inputs` é derivado das edges (ordem de declaração das edges)
      no momento da construção do GraphModel
    - Edges que referenciam nodes inexistentes são preservadas em `edges`
      para que o Validator possa reportá-las, mas não entram em `inputs`
    - A referência de processador é opaca: um objeto processador ou uma
      chave resolvida por um `ProcessorRegistry`

Invariantes:
    - Um GraphModel nunca é alterado após construído
    - A ordem de declaração dos nodes é preservada
    - `predecessors` nunca contém duplicatas

Limites explícitos:
    - Não executa nodes
    - Não detecta ciclos
    - Não valida processadores
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Node:
    """Unidade de trabalho do workflow."""

    id: str
    label: str = ""
    processor: Any = field(default=None, compare=False)
    inputs: Tuple[str, ...] = ()

    @property
    def display_label(self) -> str:
        return self.label if self.label else self.id


@dataclass(frozen=True)
class Edge:
    """Dependência direcionada: `target` consome as saídas de `source`."""

    source: str
    target: str


@dataclass(frozen=True)
class GraphModel:
    """
    Descrição imutável de um workflow (nodes + edges).

    Use `GraphModel.build(nodes, edges)` para construir a partir de
    declarações soltas; o construtor direto assume que `Node.inputs`
    já está consistente com `edges`.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    _by_id: Dict[str, Node] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {n.id: n for n in self.nodes})

    @classmethod
    def build(cls, nodes: Iterable[Node], edges: Iterable[Edge] = ()) -> "GraphModel":
        # import local: registry depende de model
        from .registry import NodeRegistry

        registry = NodeRegistry()
        for node in nodes:
            registry.add(node)

        edge_list = tuple(edges)
        inputs: Dict[str, List[str]] = {n.id: [] for n in registry.list()}
        for edge in edge_list:
            if edge.source not in registry or edge.target not in registry:
                continue
            if edge.source == edge.target:
                continue
            if edge.source not in inputs[edge.target]:
                inputs[edge.target].append(edge.source)

        materialized = tuple(replace(n, inputs=tuple(inputs[n.id])) for n in registry.list())
        return cls(nodes=materialized, edges=edge_list)

    # -----------------------------
    # Consultas
    # -----------------------------
    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def get(self, node_id: str) -> Node:
        if node_id not in self._by_id:
            raise KeyError(node_id)
        return self._by_id[node_id]

    def predecessors(self, node_id: str) -> List[str]:
        return list(self.get(node_id).inputs)

    def successors(self, node_id: str) -> List[str]:
        self.get(node_id)
        return [n.id for n in self.nodes if node_id in n.inputs]

    def roots(self) -> List[str]:
        return [n.id for n in self.nodes if not n.inputs]

    def sinks(self) -> List[str]:
        fed = {src for n in self.nodes for src in n.inputs}
        return [n.id for n in self.nodes if n.id not in fed]
