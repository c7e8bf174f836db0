# src/docflow/core/validation/__init__.py
"""
Validação pré-execução de grafos de workflow.

O Validator é um colaborador externo do Engine: o Engine consome apenas
`is_valid` como portão para iniciar uma run. Este pacote define o contrato
e uma implementação estrutural padrão.
"""

from .validator import (
    GraphValidator,
    ValidationIssue,
    ValidationReport,
    ValidationWarning,
    Validator,
)

__all__ = [
    "GraphValidator",
    "ValidationIssue",
    "ValidationReport",
    "ValidationWarning",
    "Validator",
]
