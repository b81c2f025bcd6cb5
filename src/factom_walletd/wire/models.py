"""
Deserialised walletd replies.

compose-chain, compose-entry and the compose-identity-* methods answer
with a pair of ready-made JSON-RPC requests for factomd: a commit carrying
the hex-encoded commit message, and a reveal carrying the hex-encoded
entry. compose-transaction answers with a single factoid-submit request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schemas import (
    COMPOSE_RESULT,
    COMPOSE_TX_RESULT,
    RPC_RESPONSE,
    ResponseFormatError,
    SchemaRegistry,
)


class WalletdError(RuntimeError):
    """Raised when a result is requested from an error response."""

    def __init__(self, error: "RpcError") -> None:
        super().__init__(f"walletd error {error.code}: {error.message}")
        self.error = error


@dataclass(frozen=True)
class Envelope:
    """A JSON-RPC request prepared by walletd for the caller to send on."""

    jsonrpc: str
    id: int
    method: str
    params: dict[str, Any]

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Envelope":
        return cls(
            jsonrpc=payload["jsonrpc"],
            id=payload["id"],
            method=payload["method"],
            params=dict(payload["params"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class ComposeResult:
    commit: Envelope
    reveal: Envelope

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "ComposeResult":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, COMPOSE_RESULT)
        return cls(
            commit=Envelope.from_dict(payload["commit"]),
            reveal=Envelope.from_dict(payload["reveal"]),
        )

    @property
    def message(self) -> str:
        """Hex-encoded commit message."""
        return self.commit.params["message"]

    @property
    def entry(self) -> str:
        """Hex-encoded reveal entry."""
        return self.reveal.params["entry"]

    def to_dict(self) -> dict[str, Any]:
        return {"commit": self.commit.to_dict(), "reveal": self.reveal.to_dict()}


@dataclass(frozen=True)
class ComposeTxResult:
    envelope: Envelope

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "ComposeTxResult":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, COMPOSE_TX_RESULT)
        return cls(Envelope.from_dict(payload))

    @property
    def transaction(self) -> str:
        return self.envelope.params["transaction"]

    def to_dict(self) -> dict[str, Any]:
        return self.envelope.to_dict()


@dataclass(frozen=True)
class RpcError:
    code: int
    message: str
    data: Any = None


@dataclass(frozen=True)
class RpcResponse:
    jsonrpc: str
    id: Any
    result: Any = None
    error: RpcError | None = None

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "RpcResponse":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, RPC_RESPONSE)
        error = None
        if "error" in payload:
            raw = payload["error"]
            error = RpcError(code=raw["code"], message=raw["message"], data=raw.get("data"))
        return cls(
            jsonrpc=payload["jsonrpc"],
            id=payload["id"],
            result=payload.get("result"),
            error=error,
        )

    @property
    def success(self) -> bool:
        return self.error is None

    def compose_result(self, registry: SchemaRegistry | None = None) -> ComposeResult:
        """Decode ``result`` as a commit/reveal pair."""
        if self.error is not None:
            raise WalletdError(self.error)
        return ComposeResult.from_dict(self.result, registry=registry)

    def compose_tx_result(self, registry: SchemaRegistry | None = None) -> ComposeTxResult:
        """Decode ``result`` as a composed factoid transaction."""
        if self.error is not None:
            raise WalletdError(self.error)
        return ComposeTxResult.from_dict(self.result, registry=registry)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            error: dict[str, Any] = {"code": self.error.code, "message": self.error.message}
            if self.error.data is not None:
                error["data"] = self.error.data
            payload["error"] = error
        else:
            payload["result"] = self.result
        return payload


__all__ = [
    "ComposeResult",
    "ComposeTxResult",
    "Envelope",
    "ResponseFormatError",
    "RpcError",
    "RpcResponse",
    "WalletdError",
]
