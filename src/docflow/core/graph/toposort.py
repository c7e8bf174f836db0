# src/docflow/core/graph/toposort.py
"""
Ordenação topológica determinística (Kahn modificado).

Empates são resolvidos pela ordem de declaração dos nodes: entre os nodes
sem dependências pendentes, o declarado primeiro vem primeiro. Apenas
`Node.inputs` é considerado (edges inválidas já foram descartadas na
construção do GraphModel).

Compartilhado pelo planner do Engine e pelo Validator.
"""

from __future__ import annotations

from typing import Dict, List

from .model import GraphModel


class CycleDetectedError(ValueError):
    """
    Exceção levantada quando o grafo de dependências contém um ciclo
    (incluindo edges de um node para ele mesmo).
    """


def topological_order(graph: GraphModel) -> List[str]:
    """
    Ordena os ids do grafo considerando apenas `Node.inputs`.

    Raises:
        CycleDetectedError: Se nenhuma ordem completa existir.
    """
    position: Dict[str, int] = {nid: i for i, nid in enumerate(graph.node_ids())}
    incoming_count: Dict[str, int] = {n.id: len(n.inputs) for n in graph.nodes}
    outgoing: Dict[str, List[str]] = {n.id: [] for n in graph.nodes}
    for node in graph.nodes:
        for src in node.inputs:
            outgoing[src].append(node.id)

    ready: List[str] = [nid for nid in graph.node_ids() if incoming_count[nid] == 0]
    order: List[str] = []

    while ready:
        nid = ready.pop(0)  # declarado primeiro
        order.append(nid)
        for child in outgoing[nid]:
            incoming_count[child] -= 1
            if incoming_count[child] == 0:
                ready.append(child)
                ready.sort(key=position.__getitem__)

    if len(order) != len(graph):
        raise CycleDetectedError("Cycle detected in workflow graph")

    return order
