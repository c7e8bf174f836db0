# tests/conftest.py
"""
Fixtures compartilhados para testes do docflow.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas
- contexto de execução controlado (RunContext)
- fábricas de processadores dummy (assíncronos, duck-typed)
- fábricas de grafos pequenos para testes estruturais

O objetivo destas fixtures é permitir testes do core
(config, graph, engine, validation e traceability) sem depender de:
- processadores reais de documentos
- editores visuais ou adapters de UI
- rede ou runtimes externos

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados
    - Processadores dummy utilizam duck typing em vez de herança
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa um workflow real
    - Nenhuma fixture realiza I/O
    - Todas as fixtures são seguras para execução em paralelo

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Config Loader fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """
    Fixture que fornece um YAML de configuração padrão (defaults) semelhante ao uso real do projeto.

    Este fixture representa o conteúdo típico de um arquivo `config.defaults.yaml`,
    servindo como base canônica sobre a qual configurações locais são aplicadas
    via deep-merge.

    Invariantes:
        - YAML sintaticamente válido
        - Contém configuração base suficiente para o engine

    Returns:
        str: Conteúdo YAML representando configuração padrão (defaults).
    """

    return """\
engine:
  validate_before_run: true
outputs:
  default_extension: pdf
  fallback_label: workflow_node
  passthrough_prefix: passthrough
inputs:
  accept: [".pdf", ".png", ".txt"]
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """
    Fixture que fornece um YAML de configuração local (override).

    Simula o conteúdo típico de um arquivo `config.local.yaml`: apenas as
    chaves que o operador quer sobrescrever.

    Returns:
        str: Conteúdo YAML representando configuração local de override.
    """

    return """\
outputs:
  default_extension: txt
inputs:
  accept: [".txt"]
"""


# =====================================================
# Engine fixtures (RunContext + processadores)
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """
    Fixture que fornece uma configuração mínima e válida para testes.

    Decisões arquiteturais:
        - Config é representada como dicionário já resolvido
        - Apenas chaves efetivamente utilizadas pelo core são incluídas

    Returns:
        dict: Configuração mínima e válida para execução de testes.
    """
    return {
        "engine": {"validate_before_run": True},
        "outputs": {"default_extension": "pdf"},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """
    Fixture que fornece um RunContext determinístico para testes.

    Decisões arquiteturais:
        - O import de RunContext é feito de forma lazy para melhorar
          a legibilidade dos erros quando o core não está disponível
        - `run_id` e `created_at` são fixos para garantir determinismo

    Invariantes:
        - O timestamp é timezone-aware (UTC)
        - O RunContext inicia sem eventos nem warnings

    Returns:
        RunContext: Contexto de execução isolado e previsível para testes.
    """
    from docflow.core.run_context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def make_processor():
    """
    Fixture factory de processadores dummy assíncronos.

    A fábrica retornada aceita:
        - result: valor de `ProcessResult.result` (ou um callable que recebe
          as entradas e devolve o valor)
        - filename / metadata / success: campos do ProcessResult
        - error: exceção a ser levantada em vez de resolver
        - calls: lista opcional onde cada chamada registra suas entradas

    Invariantes:
        - Sempre resolve para um ProcessResult (ou levanta `error`)
        - Não realiza I/O

    Returns:
        Callable[..., FunctionProcessor]
    """
    from docflow.core.engine.items import ProcessResult
    from docflow.core.engine.processor import FunctionProcessor

    def _factory(result=None, *, filename=None, metadata=None, success=True, error=None, calls=None, key=None):
        async def _fn(inputs):
            if calls is not None:
                calls.append(list(inputs))
            if error is not None:
                raise error
            value = result(inputs) if callable(result) else result
            return ProcessResult(success=success, result=value, filename=filename, metadata=metadata or {})

        return FunctionProcessor(fn=_fn, key=key)

    return _factory


@pytest.fixture
def linear_graph():
    """
    Fixture factory que constrói um grafo linear `n1 → n2 → ... → nk`.

    Cada node recebe o processador correspondente (por posição) e um label
    `"Node {i}"`.

    Returns:
        Callable[[list], GraphModel]
    """
    from docflow.core.graph.model import Edge, GraphModel, Node

    def _build(processors):
        nodes = [
            Node(id=f"n{i + 1}", label=f"Node {i + 1}", processor=p)
            for i, p in enumerate(processors)
        ]
        edges = [Edge(source=f"n{i}", target=f"n{i + 1}") for i in range(1, len(nodes))]
        return GraphModel.build(nodes, edges)

    return _build
