# src/docflow/__init__.py
"""
docflow — engine de workflows para processamento de documentos.

Um workflow é um grafo direcionado de nodes; cada node delega o trabalho a
um processador externo e assíncrono. O docflow executa os nodes em ordem
topológica, alimenta cada node com as saídas dos anteriores, acompanha o
progresso e transforma falhas em relatórios estruturados.

Arquitetura em alto nível:
    - core.graph        → GraphModel (nodes + edges)
    - core.engine       → ExecutionEngine, OutputDeriver, FailureContextDeriver
    - core.validation   → portão de validação pré-run
    - core.config       → configuração (defaults + local)
    - core.traceability → Manifest e Event Log
    - presentation      → renderização pura de snapshots, falhas e diagnósticos
"""

__version__ = "0.1.0"

from .presentation import RenderResult, render_payload  # noqa: E402

__all__ = ["__version__", "RenderResult", "render_payload", "presentation"]
