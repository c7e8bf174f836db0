# src/docflow/core/engine/planner.py
"""
Planejador de execução do workflow (DAG).

Este módulo valida a estrutura mínima do grafo e produz uma sequência
linear de nodes pronta para execução pelo Engine.

Decisões arquiteturais:
    - Utiliza ordenação topológica determinística (Kahn modificado)
    - Empates são resolvidos pela **ordem de declaração** dos nodes
    - Erros estruturais são tratados como falhas fatais, antes de qualquer node

Invariantes:
    - Nenhum node aparece antes de seus predecessores
    - Todos os nodes aparecem exatamente uma vez
    - O mesmo grafo produz sempre a mesma ordem

Limites explícitos:
    - Não executa nodes
    - Não é o portão de validação (o Validator detecta ciclos antes da run;
      o planner apenas se recusa a produzir uma ordem inválida)
"""

from __future__ import annotations

from typing import List

from docflow.core.graph.model import GraphModel, Node
from docflow.core.graph.toposort import CycleDetectedError, topological_order


class UnknownNodeError(ValueError):
    """
    Exceção levantada quando uma edge referencia um node inexistente.

    Limites explícitos:
        - Não tenta inferir ou criar nodes ausentes
    """


def plan_execution(graph: GraphModel) -> List[Node]:
    """
    Valida e produz a ordem de execução dos nodes.

    Args:
        graph (GraphModel): Grafo do workflow.

    Returns:
        List[Node]: Nodes em ordem topológica determinística.

    Raises:
        UnknownNodeError: Se uma edge referenciar node inexistente.
        CycleDetectedError: Se houver ciclo (ou self-loop).
    """
    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in graph:
                raise UnknownNodeError(
                    f"Edge '{edge.source}' -> '{edge.target}' references unknown node '{endpoint}'"
                )
        if edge.source == edge.target:
            raise CycleDetectedError(f"Node '{edge.source}' depends on itself")

    return [graph.get(nid) for nid in topological_order(graph)]


__all__ = ["CycleDetectedError", "UnknownNodeError", "plan_execution", "topological_order"]
