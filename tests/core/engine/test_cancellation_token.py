# tests/core/engine/test_cancellation_token.py
"""
Testes do token de cancelamento cooperativo.

Invariantes:
    - Um pedido de parada é irreversível durante a run
    - `wait()` libera aguardadores mesmo quando o pedido ocorreu antes da espera
    - `raise_if_requested` levanta RunCancelledError com a mensagem canônica
"""

import asyncio

import pytest

try:
    from docflow.core.engine.cancellation import CancellationToken
    from docflow.core.exceptions import CANCELLED_BY_USER_MESSAGE, RunCancelledError
except Exception as e:  # noqa: BLE001
    CancellationToken = CANCELLED_BY_USER_MESSAGE = RunCancelledError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing cancellation token. Import error: {_IMPORT_ERR}")


def test_request_is_sticky():
    _require_imports()
    token = CancellationToken()
    assert token.is_requested is False
    token.raise_if_requested("n1")

    token.request()
    token.request()
    assert token.is_requested is True
    with pytest.raises(RunCancelledError) as excinfo:
        token.raise_if_requested("n1")
    assert excinfo.value.node_id == "n1"
    assert str(excinfo.value) == CANCELLED_BY_USER_MESSAGE


@pytest.mark.asyncio
async def test_wait_released_by_request():
    _require_imports()
    token = CancellationToken()
    waiter = asyncio.ensure_future(token.wait())
    await asyncio.sleep(0)
    assert not waiter.done()

    token.request()
    await asyncio.wait_for(waiter, timeout=1)


@pytest.mark.asyncio
async def test_wait_after_request_returns_immediately():
    _require_imports()
    token = CancellationToken()
    token.request()
    await asyncio.wait_for(token.wait(), timeout=1)
