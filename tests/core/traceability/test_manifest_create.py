# tests/core/traceability/test_manifest_create.py
"""
Testes de criação do Manifest v1.

Invariantes:
    - O Manifest nasce com identidade da run e hashes de entrada
    - `nodes` e `events` iniciam vazios (nenhum evento implícito)
    - Timestamps são serializados em ISO-8601 UTC
"""

from datetime import datetime

import pytest

try:
    from docflow.core.traceability.manifest import create_manifest
except Exception as e:  # noqa: BLE001
    create_manifest = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing manifest. Implement:
- src/docflow/core/traceability/manifest.py (create_manifest)
Import error: {_IMPORT_ERR}
""")


def test_create_manifest_has_minimum_fields():
    """
    Verifica os campos mínimos do Manifest recém-criado.

    Decisões arquiteturais:
        - A criação não emite eventos
        - Timestamps naive são interpretados como UTC
    """
    _require_imports()
    m = create_manifest(
        run_id="run-001",
        started_at=datetime(2026, 1, 16, 12, 0, 0),
        docflow_version="0.1.0",
        config_hash="c" * 64,
        graph_hash="g" * 64,
    )
    data = m.to_dict()

    assert data["run"]["run_id"] == "run-001"
    assert data["run"]["started_at"] == "2026-01-16T12:00:00+00:00"
    assert data["run"]["docflow_version"] == "0.1.0"
    assert data["inputs"] == {"config_hash": "c" * 64, "graph_hash": "g" * 64}
    assert data["nodes"] == {}
    assert data["events"] == []
