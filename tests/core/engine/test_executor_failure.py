# tests/core/engine/test_executor_failure.py
"""
Testes do comportamento do ExecutionEngine em falhas de processamento.

Este módulo valida que a primeira falha de um node:
- interrompe a run imediatamente (nenhum node posterior é invocado)
- preserva as saídas de todos os nodes concluídos antes da falha
- produz um FailureContext com node falho, contagem e código de erro
- é registrada no Manifest como ErrorPayload serializável

Decisões arquiteturais:
    - `success=False` reportado pelo processador é uma falha de processamento
    - Resultados malformados viram falha do node, nunca crash do loop
    - Sem retry automático: uma nova run recomeça de `idle`

Limites explícitos:
    - Não valida cancelamento (ver test_executor_cancellation.py)
"""

import pytest

try:
    from docflow.core.engine.engine import ExecutionEngine
    from docflow.core.engine.processor import FunctionProcessor
    from docflow.core.engine.state import ExecutionStatus
except Exception as e:
    ExecutionEngine = FunctionProcessor = ExecutionStatus = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing ExecutionEngine. Import error: {_IMPORT_ERR}")


class ConversionError(Exception):
    """Erro de processador com contexto (`node_id` e `code`) anexado."""

    def __init__(self, message, node_id=None, code=None):
        super().__init__(message)
        self.node_id = node_id
        self.code = code


@pytest.mark.asyncio
async def test_failure_stops_run_and_preserves_prior_outputs(dummy_ctx, make_processor, linear_graph):
    """
    Verifica que a falha de n2 encerra a run sem tocar n3.

    Invariantes:
        - status ERROR, current_node_id limpo
        - executed_nodes contém apenas n1; saídas de n1 preservadas
        - FailureContext aponta n2, com successful_count=1 e o código do erro
        - progress permanece na fração concluída
    """
    _require_imports()
    calls3 = []
    graph = linear_graph(
        [
            make_processor(b"1", filename="one.pdf"),
            make_processor(error=ConversionError("Conversion failed", code="E_CONVERT")),
            make_processor(b"3", calls=calls3),
        ]
    )
    engine = ExecutionEngine(graph=graph, ctx=dummy_ctx)

    result = await engine.run()

    assert result.succeeded is False
    assert result.state.status is ExecutionStatus.ERROR
    assert result.state.current_node_id is None
    assert result.state.executed_nodes == ("n1",)
    assert result.state.progress == pytest.approx(1 / 3)
    assert list(result.outputs) == ["n1"]
    assert calls3 == []

    failure = result.failure
    assert failure.failed_node_id == "n2"
    assert failure.successful_count == 1
    assert failure.error_message == "Conversion failed"
    assert failure.error_code == "E_CONVERT"
    assert failure.is_cancelled is False
    assert engine.failure == failure


@pytest.mark.asyncio
async def test_error_node_id_overrides_current_node(dummy_ctx, make_processor, linear_graph):
    _require_imports()
    graph = linear_graph([make_processor(error=ConversionError("boom", node_id="upstream-worker"))])
    result = await ExecutionEngine(graph=graph, ctx=dummy_ctx).run()
    assert result.failure.failed_node_id == "upstream-worker"


@pytest.mark.asyncio
async def test_failure_is_recorded_in_manifest(dummy_ctx, make_processor, linear_graph):
    _require_imports()
    graph = linear_graph([make_processor(b"1"), make_processor(error=RuntimeError("disk full"))])
    result = await ExecutionEngine(graph=graph, ctx=dummy_ctx).run()

    manifest = result.manifest
    assert manifest.run["status"] == "error"
    assert manifest.run["failure"]["failed_node_id"] == "n2"
    node = manifest.nodes["n2"]
    assert node["status"] == "failed"
    assert node["error"]["type"] == "ENGINE_EXECUTION_ERROR"
    assert node["error"]["message"] == "disk full"
    assert node["error"]["details"]["exception_class"] == "RuntimeError"
    assert manifest.events[-2]["event_type"] == "node_failed"

    errors = [e for e in dummy_ctx.events if e["level"] == "error"]
    assert errors[-1]["node_id"] == "n2"
    assert errors[-1]["message"] == "disk full"


@pytest.mark.asyncio
async def test_unsuccessful_result_is_processing_failure(dummy_ctx, make_processor, linear_graph):
    """`success=False` usa `metadata.error` como mensagem quando disponível."""
    _require_imports()
    graph = linear_graph([make_processor(b"x", success=False, metadata={"error": "Password required"})])
    result = await ExecutionEngine(graph=graph, ctx=dummy_ctx).run()

    assert result.state.status is ExecutionStatus.ERROR
    assert result.failure.error_message == "Password required"
    assert result.failure.error_code == "PROCESSING_FAILED"
    assert result.failure.failed_node_id == "n1"
    assert result.outputs == {}


@pytest.mark.asyncio
async def test_unsuccessful_result_without_detail_uses_generic_message(dummy_ctx, make_processor, linear_graph):
    _require_imports()
    graph = linear_graph([make_processor(None, success=False)])
    result = await ExecutionEngine(graph=graph, ctx=dummy_ctx).run()
    assert result.failure.error_message == "Processing failed"


@pytest.mark.asyncio
async def test_malformed_result_fails_the_node(dummy_ctx, linear_graph):
    _require_imports()

    async def _bad(inputs):
        return "not a result"

    result = await ExecutionEngine(graph=linear_graph([FunctionProcessor(fn=_bad)]), ctx=dummy_ctx).run()
    assert result.state.status is ExecutionStatus.ERROR
    assert result.failure.failed_node_id == "n1"
    assert "ProcessResult" in result.failure.error_message


@pytest.mark.asyncio
async def test_reset_and_restart_after_failure(dummy_ctx, make_processor, linear_graph):
    """
    Verifica que uma run falha só é retomada explicitamente, do zero.

    Invariantes:
        - reset() volta a idle, sem saídas nem FailureContext
        - uma nova run executa novamente todos os nodes
    """
    _require_imports()
    attempts = []

    async def _flaky(inputs):
        attempts.append(len(attempts))
        if len(attempts) == 1:
            raise RuntimeError("transient")
        return {"result": b"ok", "filename": "ok.pdf"}

    graph = linear_graph([FunctionProcessor(fn=_flaky)])
    engine = ExecutionEngine(graph=graph, ctx=dummy_ctx)

    first = await engine.run()
    assert first.state.status is ExecutionStatus.ERROR

    engine.reset()
    assert engine.state.status is ExecutionStatus.IDLE
    assert engine.state.pending_nodes == ("n1",)
    assert engine.outputs == {}
    assert engine.failure is None

    second = await engine.run()
    assert second.state.status is ExecutionStatus.COMPLETED
    assert second.failure is None
    assert attempts == [0, 1]


@pytest.mark.asyncio
async def test_failing_observer_ends_run_in_error(dummy_ctx, make_processor, linear_graph):
    """
    Verifica que uma exceção levantada por um observador de snapshots não
    deixa o Engine preso em `running`.

    Invariantes:
        - A exceção do observador é propagada por run()
        - O estado termina em ERROR, com current_node_id limpo
        - O FailureContext aponta o node corrente e as conclusões anteriores
        - O Engine pode executar novamente a partir de idle
    """
    _require_imports()
    raised = []

    def _observer(snapshot):
        if snapshot.current_node_id == "n2" and not raised:
            raised.append(snapshot)
            raise RuntimeError("observer broke")

    graph = linear_graph([make_processor(b"1"), make_processor(b"2")])
    engine = ExecutionEngine(graph=graph, ctx=dummy_ctx, on_snapshot=_observer)

    with pytest.raises(RuntimeError, match="observer broke"):
        await engine.run()

    assert engine.state.status is ExecutionStatus.ERROR
    assert engine.state.current_node_id is None
    assert engine.state.executed_nodes == ("n1",)
    assert engine.failure.failed_node_id == "n2"
    assert engine.failure.successful_count == 1
    assert engine.failure.error_message == "observer broke"
    assert dummy_ctx.events[-1]["message"] == "run aborted"

    second = await engine.run()
    assert second.state.status is ExecutionStatus.COMPLETED
    assert second.state.executed_nodes == ("n1", "n2")
