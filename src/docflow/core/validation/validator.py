# src/docflow/core/validation/validator.py
"""
Contrato de Validator e validação estrutural padrão.

Contrato:

    validate(graph) -> ValidationReport(is_valid, errors, warnings)

Regras do `GraphValidator` (v1):
    - erro `empty`: grafo sem nodes
    - erro `format`: edge referenciando node inexistente, ou self-loop
    - erro `cycle`: grafo com ciclo
    - erro `processor`: node sem referência de processador, ou chave
      desconhecida quando um ProcessorRegistry é informado
    - warning: node sem nenhuma edge em grafo com mais de um node

Decisões arquiteturais:
    - Diagnósticos são estruturados; a renderização (ex.: "- {message}")
      é responsabilidade da camada de apresentação
    - A ordem dos diagnósticos segue a ordem de declaração do grafo

Limites explícitos:
    - Não executa nodes
    - Não levanta exceção para grafos inválidos: reporta
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from docflow.core.graph.toposort import CycleDetectedError, topological_order
from docflow.core.graph.model import GraphModel


@dataclass(frozen=True)
class ValidationIssue:
    type: str
    message: str


@dataclass(frozen=True)
class ValidationWarning:
    message: str


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationWarning, ...] = ()

    @classmethod
    def from_issues(
        cls, errors: List[ValidationIssue], warnings: List[ValidationWarning]
    ) -> "ValidationReport":
        return cls(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [{"type": e.type, "message": e.message} for e in self.errors],
            "warnings": [{"message": w.message} for w in self.warnings],
        }


@runtime_checkable
class Validator(Protocol):
    def validate(self, graph: GraphModel) -> ValidationReport:
        ...


class GraphValidator:
    """Validator estrutural padrão."""

    def __init__(self, processors: Optional[Any] = None):
        self.processors = processors

    def validate(self, graph: GraphModel) -> ValidationReport:
        errors: List[ValidationIssue] = []
        warnings: List[ValidationWarning] = []

        if len(graph) == 0:
            errors.append(ValidationIssue(type="empty", message="Workflow has no nodes"))
            return ValidationReport.from_issues(errors, warnings)

        for edge in graph.edges:
            missing = [e for e in (edge.source, edge.target) if e not in graph]
            if missing:
                errors.append(
                    ValidationIssue(
                        type="format",
                        message=f"Bad edge format: {edge.source} -> {edge.target} (unknown node {missing[0]})",
                    )
                )
            elif edge.source == edge.target:
                errors.append(
                    ValidationIssue(type="format", message=f"Bad edge format: {edge.source} connects to itself")
                )

        try:
            topological_order(graph)
        except CycleDetectedError:
            errors.append(ValidationIssue(type="cycle", message="Workflow contains a cycle"))

        for node in graph.nodes:
            ref = node.processor
            if ref is None:
                errors.append(
                    ValidationIssue(type="processor", message=f"Node {node.display_label} has no processor")
                )
            elif isinstance(ref, str) and self.processors is not None and ref not in self.processors:
                errors.append(
                    ValidationIssue(
                        type="processor",
                        message=f"Node {node.display_label} references unknown processor {ref}",
                    )
                )

        if len(graph) > 1:
            connected = {e.source for e in graph.edges} | {e.target for e in graph.edges}
            for node in graph.nodes:
                if node.id not in connected:
                    warnings.append(ValidationWarning(message=f"Disconnected node: {node.display_label}"))

        return ValidationReport.from_issues(errors, warnings)
