# src/docflow/core/engine/engine.py
"""
Engine de execução de workflows do docflow.

O Engine orquestra uma única run por vez:

    1. consulta o Validator (portão: `is_valid=False` impede a run)
    2. planeja a ordem topológica determinística dos nodes
    3. para cada node, em ordem:
         - define `current_node_id`
         - honra um pedido de parada pendente (cancelamento cooperativo)
         - reúne as entradas (saídas dos predecessores ou entradas externas)
         - invoca o processador e aguarda sua conclusão
         - normaliza o resultado via OutputDeriver e registra as saídas
    4. em falha, deriva o FailureContext e interrompe a run

Decisões arquiteturais:
    - Execução estritamente sequencial: nunca dois nodes ao mesmo tempo
    - A chamada ao processador é o único ponto de suspensão do loop
    - Um pedido de parada nunca interrompe uma chamada em andamento; o
      resultado que chegar depois do pedido é descartado (não registrado)
    - Saídas de nodes já concluídos nunca são revertidas após uma falha
    - Sem retry automático: uma run falha ou cancelada recomeça de `idle`

Invariantes:
    - Cada node é executado no máximo uma vez por run
    - `executed_nodes` reflete a ordem real de conclusão
    - Observadores recebem snapshots imutáveis após cada transição

Limites explícitos:
    - Não interpreta o que um node faz
    - Não valida o grafo além do portão do Validator e do planner
    - Não persiste o Manifest automaticamente
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from docflow import __version__
from docflow.core.config.hashing import compute_config_hash
from docflow.core.config.settings import EngineSettings
from docflow.core.errors import error_payload_from_exception
from docflow.core.exceptions import (
    EngineBusyError,
    ProcessingFailedError,
    RunCancelledError,
    ValidationFailedError,
)
from docflow.core.graph.loader import compute_graph_hash
from docflow.core.graph.model import GraphModel, Node
from docflow.core.run_context import RUN_SCOPE, RunContext
from docflow.core.traceability import manifest as mf
from docflow.core.validation.validator import GraphValidator, Validator

from .cancellation import CancellationToken
from .failure import FailureContext, derive_failure_context
from .items import InputItem, NamedOutput, ProcessResult, as_input_item
from .outputs import NamingPolicy, derive_outputs
from .planner import plan_execution
from .processor import Processor, ProcessorRegistry
from .state import ExecutionState, ExecutionStatus, compute_progress


SnapshotListener = Callable[[ExecutionState], None]


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma run de workflow."""

    state: ExecutionState
    outputs: Dict[str, Tuple[NamedOutput, ...]] = field(default_factory=dict)
    failure: Optional[FailureContext] = None
    final_outputs: Tuple[NamedOutput, ...] = ()
    manifest: Optional[mf.RunManifest] = None
    run_id: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state.status is ExecutionStatus.COMPLETED


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExecutionEngine:
    """Engine canônico do docflow (validator + planner + executor)."""

    def __init__(
        self,
        *,
        graph: GraphModel,
        processors: Optional[ProcessorRegistry] = None,
        validator: Optional[Validator] = None,
        ctx: Optional[RunContext] = None,
        settings: Optional[EngineSettings] = None,
        on_snapshot: Optional[SnapshotListener] = None,
    ):
        self.graph = graph
        self.processors = processors if processors is not None else ProcessorRegistry()
        self.validator = validator if validator is not None else GraphValidator(self.processors)
        self.ctx = ctx if ctx is not None else RunContext.create()
        self.settings = settings if settings is not None else EngineSettings.from_config(self.ctx.config)
        self.naming = NamingPolicy.from_settings(self.settings)

        self._listeners: List[SnapshotListener] = [on_snapshot] if on_snapshot else []
        self._state = ExecutionState.idle(graph.node_ids())
        self._outputs: Dict[str, Tuple[NamedOutput, ...]] = {}
        self._failure: Optional[FailureContext] = None
        self._token: Optional[CancellationToken] = None
        self._order: List[str] = []
        self._manifest: Optional[mf.RunManifest] = None
        self._ctx_claimed = False

    # ------------------------------------------------------------------
    # Observação
    # ------------------------------------------------------------------
    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def outputs(self) -> Dict[str, Tuple[NamedOutput, ...]]:
        return dict(self._outputs)

    @property
    def failure(self) -> Optional[FailureContext]:
        return self._failure

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def _emit(self, state: ExecutionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _settle(self, **changes: Any) -> ExecutionState:
        state = replace(self._state, **changes)
        executed = set(state.executed_nodes)
        pending = tuple(
            nid for nid in self._order
            if nid not in executed and nid != state.current_node_id
        )
        return replace(state, pending_nodes=pending)

    def _transition(self, **changes: Any) -> None:
        self._emit(self._settle(**changes))

    # ------------------------------------------------------------------
    # Controle
    # ------------------------------------------------------------------
    def stop(self) -> None:
        """Pede parada cooperativa; honrada na próxima fronteira de node."""
        if self._state.status is ExecutionStatus.RUNNING and self._token is not None:
            self.ctx.log(
                node_id=self._state.current_node_id,
                level="info",
                message="stop requested",
            )
            self._token.request()

    def reset(self) -> None:
        """Volta a um `idle` novo, descartando saídas e falha da run anterior."""
        if self._state.status is ExecutionStatus.RUNNING:
            raise EngineBusyError(message="Cannot reset a running workflow")
        self._outputs = {}
        self._failure = None
        self._token = None
        self._order = []
        self._manifest = None
        self._emit(ExecutionState.idle(self.graph.node_ids()))

    # ------------------------------------------------------------------
    # Preparação
    # ------------------------------------------------------------------
    def _check_valid(self) -> None:
        report = self.validator.validate(self.graph)
        for warning in report.warnings:
            self.ctx.add_warning(node_id=RUN_SCOPE, message=warning.message)
        if report.is_valid:
            return
        self.ctx.log(
            node_id=None,
            level="error",
            message="validation failed",
            errors=[e.message for e in report.errors],
        )
        raise ValidationFailedError(
            message="Workflow validation failed",
            details={"errors": [{"type": e.type, "message": e.message} for e in report.errors]},
            report=report,
        )

    def _start_manifest(self) -> mf.RunManifest:
        return mf.create_manifest(
            run_id=self.ctx.run_id,
            started_at=_now(),
            docflow_version=__version__,
            config_hash=compute_config_hash(dict(self.ctx.config or {})),
            graph_hash=compute_graph_hash(self.graph),
        )

    def _gather_inputs(self, node: Node, external: Sequence[InputItem]) -> List[InputItem]:
        if not node.inputs:
            return list(external)
        gathered: List[InputItem] = []
        for source in node.inputs:
            gathered.extend(self._outputs.get(source, ()))
        return gathered

    # ------------------------------------------------------------------
    # Estados terminais
    # ------------------------------------------------------------------
    def _finish(
        self, status: ExecutionStatus, failure: Optional[FailureContext] = None
    ) -> RunResult:
        self._failure = failure
        self._token = None
        if self._manifest is not None:
            mf.run_finished(
                self._manifest,
                status=status.value,
                ts=_now(),
                failure=failure.to_dict() if failure is not None else None,
            )

        progress = self._state.progress
        if status is ExecutionStatus.COMPLETED:
            progress = 1.0
        self._transition(status=status, current_node_id=None, progress=progress)
        return RunResult(
            state=self._state,
            outputs=dict(self._outputs),
            failure=failure,
            final_outputs=self._final_outputs(),
            manifest=self._manifest,
            run_id=self.ctx.run_id,
        )

    def _final_outputs(self) -> Tuple[NamedOutput, ...]:
        sinks = set(self.graph.sinks())
        final: List[NamedOutput] = []
        for nid in self._state.executed_nodes:
            if nid in sinks:
                final.extend(self._outputs.get(nid, ()))
        return tuple(final)

    def _cancelled(self, node_id: Optional[str]) -> RunResult:
        failure = derive_failure_context(
            RunCancelledError(node_id=node_id), node_id, self._state.executed_nodes
        )
        self.ctx.log(
            node_id=node_id,
            level="warning",
            message="run cancelled",
            successful_count=failure.successful_count,
        )
        return self._finish(ExecutionStatus.CANCELLED, failure)

    def _failed(self, exc: BaseException, node: Node) -> RunResult:
        failure = derive_failure_context(exc, node.id, self._state.executed_nodes)
        error = error_payload_from_exception(exc, node_id=node.id)
        self.ctx.log(
            node_id=node.id,
            level="error",
            message=failure.error_message,
            error_code=error.type,
        )
        if self._manifest is not None:
            mf.node_failed(self._manifest, node_id=node.id, ts=_now(), error=error.to_dict())
        return self._finish(ExecutionStatus.ERROR, failure)

    def _abort(self, exc: Exception) -> None:
        """Leva a run a `error` quando uma exceção escapa do loop (ex.: observador com falha)."""
        node_id = self._state.current_node_id
        failure = derive_failure_context(exc, node_id, self._state.executed_nodes)
        self.ctx.log(node_id=node_id, level="error", message="run aborted", error=failure.error_message)
        self._failure = failure
        self._token = None
        if self._manifest is not None:
            mf.run_finished(
                self._manifest, status=ExecutionStatus.ERROR.value, ts=_now(), failure=failure.to_dict()
            )
        # observadores não são notificados: a exceção pode ter vindo de um deles
        self._state = self._settle(status=ExecutionStatus.ERROR, current_node_id=None)

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    async def _invoke(
        self, node: Node, processor: Processor, inputs: Sequence[InputItem], token: CancellationToken
    ) -> ProcessResult:
        raw = await processor.invoke(inputs, cancel_token=token)
        result = ProcessResult.coerce(raw)
        if not result.success:
            message = result.metadata.get("error") if isinstance(result.metadata, Mapping) else None
            raise ProcessingFailedError(
                message=message if isinstance(message, str) and message else "Processing failed",
                details={"node_id": node.id},
                node_id=node.id,
            )
        return result

    async def run(self, inputs: Iterable[Any] = ()) -> RunResult:
        """
        Executa o workflow uma vez.

        Args:
            inputs: Entradas externas entregues aos nodes sem predecessores
                (InputItem, bytes, Path ou file handles binários).

        Returns:
            RunResult: Snapshot final, saídas por node e FailureContext (se houver).

        Raises:
            EngineBusyError: Se uma run já está em andamento.
            ValidationFailedError: Se o Validator reprovar o grafo (estado permanece idle).
            EngineConfigurationError: Se um processador não puder ser resolvido.
            Exception: O que um observador de snapshots levantar; a run termina
                em `error` antes de a exceção ser propagada.
        """
        if self._state.status is ExecutionStatus.RUNNING:
            raise EngineBusyError(message="Workflow is already running")
        if self._state.is_terminal:
            self.reset()

        # cada run tem o seu próprio contexto (run_id, event log e warnings)
        if self._ctx_claimed:
            self.ctx = self.ctx.renew()
        self._ctx_claimed = True

        external = [as_input_item(item) for item in inputs]

        if self.settings.validate_before_run:
            self._check_valid()

        ordered = plan_execution(self.graph)
        resolved = {node.id: self.processors.resolve(node) for node in ordered}

        token = CancellationToken()
        self._token = token
        self._order = [node.id for node in ordered]
        self._manifest = self._start_manifest()
        mf.add_event(self._manifest, event_type="run_started", ts=_now(), payload={"nodes": list(self._order)})
        self.ctx.log(node_id=None, level="info", message="run started", nodes=list(self._order))

        try:
            return await self._execute(ordered, resolved, external, token)
        except Exception as exc:
            if self._state.status is ExecutionStatus.RUNNING:
                self._abort(exc)
            raise

    async def _execute(
        self,
        ordered: Sequence[Node],
        resolved: Mapping[str, Processor],
        external: Sequence[InputItem],
        token: CancellationToken,
    ) -> RunResult:
        if not ordered:
            self.ctx.log(node_id=None, level="info", message="run completed", executed=0)
            return self._finish(ExecutionStatus.COMPLETED)

        self._transition(
            status=ExecutionStatus.RUNNING, current_node_id=ordered[0].id, executed_nodes=(), progress=0.0
        )
        total = len(ordered)

        for node in ordered:
            if self._state.current_node_id != node.id:
                self._transition(current_node_id=node.id)

            if token.is_requested:
                return self._cancelled(node.id)

            node_inputs = self._gather_inputs(node, external)
            mf.node_started(self._manifest, node_id=node.id, label=node.label, ts=_now())
            self.ctx.log(node_id=node.id, level="info", message="node started", inputs=len(node_inputs))

            try:
                result = await self._invoke(node, resolved[node.id], node_inputs, token)
                produced = tuple(derive_outputs(result, node.label, node_inputs, self.naming))
            except asyncio.CancelledError:
                # task cancelada externamente: a run termina cancelada
                self._cancelled(node.id)
                raise
            except Exception as exc:
                if token.is_requested or isinstance(exc, RunCancelledError):
                    return self._cancelled(node.id)
                return self._failed(exc, node)

            if token.is_requested:
                self.ctx.log(
                    node_id=node.id,
                    level="warning",
                    message="late result discarded",
                    outputs=len(produced),
                )
                mf.add_event(self._manifest, event_type="result_discarded", ts=_now(), node_id=node.id)
                return self._cancelled(node.id)

            self._outputs[node.id] = produced
            executed = self._state.executed_nodes + (node.id,)
            self._transition(executed_nodes=executed, progress=compute_progress(len(executed), total))

            filenames = [o.filename for o in produced]
            mf.node_finished(self._manifest, node_id=node.id, ts=_now(), output_filenames=filenames)
            self.ctx.log(node_id=node.id, level="info", message="node finished", outputs=filenames)

        self.ctx.log(node_id=None, level="info", message="run completed", executed=len(self._order))
        return self._finish(ExecutionStatus.COMPLETED)
