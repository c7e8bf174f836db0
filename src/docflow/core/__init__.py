# src/docflow/core/__init__.py
"""
Core do docflow.

Este pacote contém a implementação canônica do engine de workflows de
documentos, independente de editores visuais, UI ou processadores
concretos.

Componentes principais:
    - graph        → modelo imutável do grafo, registry de nodes e loader
    - engine       → planner, máquina de estados da run, derivação de saídas e falhas
    - validation   → contrato de Validator e validação estrutural padrão
    - config       → resolução de configuração (merge, hashing, settings)
    - traceability → Manifest e Event Log da run

Princípios fundamentais:
    - O engine sequencia operações assíncronas opacas; não interpreta o que fazem
    - Estado observável é sempre um snapshot imutável
    - Falhas são relatórios estruturados, nunca stack traces crus

Limites explícitos:
    - Não renderiza o grafo
    - Não implementa operadores de documentos (conversão, divisão, renderização)
"""
