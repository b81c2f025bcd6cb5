from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

Answer = Callable[[dict[str, Any]], httpx.Response]


def _compose_result(kind: str = "entry") -> dict[str, Any]:
    return {
        "commit": {
            "jsonrpc": "2.0",
            "id": 0,
            "method": f"commit-{kind}",
            "params": {"message": "00016b8e1d4f9c"},
        },
        "reveal": {
            "jsonrpc": "2.0",
            "id": 0,
            "method": f"reveal-{kind}",
            "params": {"entry": "009dec48601fba"},
        },
    }


def _ok(result: Any) -> Answer:
    def answer(body: dict[str, Any]) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    return answer


def _rpc_error(code: int, message: str) -> Answer:
    def answer(body: dict[str, Any]) -> httpx.Response:
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": code, "message": message}},
        )

    return answer


class FakeWalletd:
    """Records JSON-RPC requests and answers them from a handler."""

    def __init__(self, answer: Answer) -> None:
        self.answer = answer
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        return self.answer(body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture()
def compose_reply() -> Callable[..., dict[str, Any]]:
    """Builder for a commit/reveal result; takes the kind ("chain" or "entry")."""
    return _compose_result


@pytest.fixture()
def compose_tx_reply() -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": 0,
        "method": "factoid-submit",
        "params": {"transaction": "0201565d109233010100b0a0e100"},
    }


@pytest.fixture()
def make_walletd() -> Callable[..., FakeWalletd]:
    """
    Build a fake walletd answering every request the same way.

    Pass exactly one of ``result`` (a JSON-RPC result), ``error`` (a
    ``(code, message)`` pair) or ``answer`` (a raw response handler).
    """

    def make(
        result: Any = None,
        error: Optional[tuple[int, str]] = None,
        answer: Optional[Answer] = None,
    ) -> FakeWalletd:
        if answer is None:
            answer = _rpc_error(*error) if error is not None else _ok(result)
        return FakeWalletd(answer)

    return make


@pytest.fixture()
def walletd(make_walletd: Callable[..., FakeWalletd]) -> FakeWalletd:
    return make_walletd(result=_compose_result())
