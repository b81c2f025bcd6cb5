"""Tests for walletd reply decoding."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from factom_walletd.wire.models import (
    ComposeResult,
    ComposeTxResult,
    RpcError,
    RpcResponse,
    WalletdError,
)
from factom_walletd.wire.schemas import ResponseFormatError, SchemaRegistry


class TestRpcResponse:
    """Tests for the JSON-RPC envelope."""

    def test_success(self) -> None:
        response = RpcResponse.from_dict({"jsonrpc": "2.0", "id": 3, "result": {"x": 1}})
        assert response.success
        assert response.id == 3
        assert response.result == {"x": 1}

    def test_error_is_not_raised(self) -> None:
        payload = {
            "jsonrpc": "2.0",
            "id": 3,
            "error": {"code": -32602, "message": "Invalid params", "data": "bad key"},
        }
        response = RpcResponse.from_dict(payload)
        assert not response.success
        assert response.error == RpcError(code=-32602, message="Invalid params", data="bad key")
        assert response.to_dict() == payload

    def test_null_result_is_success(self) -> None:
        response = RpcResponse.from_dict({"jsonrpc": "2.0", "id": None, "result": None})
        assert response.success

    @pytest.mark.parametrize(
        "payload",
        [
            {"id": 1, "result": {}},
            {"jsonrpc": "1.0", "id": 1, "result": {}},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "result": {}, "error": {"code": 1, "message": "m"}},
            {"jsonrpc": "2.0", "id": 1, "error": {"message": "no code"}},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_envelope(self, payload: object) -> None:
        with pytest.raises(ResponseFormatError) as excinfo:
            RpcResponse.from_dict(payload)
        assert excinfo.value.errors

    def test_compose_result_from_error_raises(self) -> None:
        response = RpcResponse(jsonrpc="2.0", id=1, error=RpcError(code=-32603, message="Internal error"))
        with pytest.raises(WalletdError) as excinfo:
            response.compose_result()
        assert excinfo.value.error.code == -32603


class TestComposeResult:
    """Tests for commit/reveal decoding."""

    def test_decode(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        result = ComposeResult.from_dict(compose_reply("chain"))
        assert result.commit.method == "commit-chain"
        assert result.reveal.method == "reveal-chain"
        assert result.message == "00016b8e1d4f9c"
        assert result.entry == "009dec48601fba"

    def test_to_dict_round_trip(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        payload = compose_reply()
        assert ComposeResult.from_dict(payload).to_dict() == payload

    def test_via_response(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        response = RpcResponse.from_dict({"jsonrpc": "2.0", "id": 1, "result": compose_reply()})
        assert response.compose_result().commit.params == {"message": "00016b8e1d4f9c"}

    def test_missing_reveal(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        payload = compose_reply()
        del payload["reveal"]
        with pytest.raises(ResponseFormatError):
            ComposeResult.from_dict(payload)

    def test_non_hex_message(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        payload = compose_reply()
        payload["commit"]["params"]["message"] = "not hex"
        with pytest.raises(ResponseFormatError) as excinfo:
            ComposeResult.from_dict(payload)
        assert any(e.startswith("commit/params/message") for e in excinfo.value.errors)

    def test_explicit_registry(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        registry = SchemaRegistry.default()
        assert ComposeResult.from_dict(compose_reply(), registry=registry).entry == "009dec48601fba"


class TestComposeTxResult:
    def test_decode(self, compose_tx_reply: dict[str, Any]) -> None:
        result = ComposeTxResult.from_dict(compose_tx_reply)
        assert result.envelope.method == "factoid-submit"
        assert result.transaction == "0201565d109233010100b0a0e100"
        assert result.to_dict() == compose_tx_reply

    def test_compose_result_shape_is_rejected(self, compose_reply: Callable[..., dict[str, Any]]) -> None:
        with pytest.raises(ResponseFormatError):
            ComposeTxResult.from_dict(compose_reply())


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""

    def test_validator_compiled_once(self) -> None:
        registry = SchemaRegistry.default()
        first = registry.validator_for("rpc.response.schema.json")
        assert registry.validator_for("rpc.response.schema.json") is first
        assert registry.validator_for("compose.result.schema.json") is not first

    def test_decoding_does_not_reread_schema(
        self, compose_reply: Callable[..., dict[str, Any]], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        registry = SchemaRegistry.default()
        registry.validator_for("compose.result.schema.json")

        def fail_open(*args: Any, **kwargs: Any) -> None:
            raise AssertionError("schema file reopened")

        monkeypatch.setattr("pathlib.Path.open", fail_open)
        assert ComposeResult.from_dict(compose_reply(), registry=registry).entry == "009dec48601fba"

    def test_missing_schema(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaRegistry(schema_root=tmp_path).validator_for("rpc.response.schema.json")
