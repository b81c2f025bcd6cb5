__all__ = [
    # Composition
    "compose_chain",
    "compose_entry",
    "compose_transaction",
    "compose_identity_chain",
    "compose_identity_attribute",
    "compose_identity_attribute_endorsement",
    "compose_identity_key_replacement",
    "build_params",
    "Composer",
    # Requests
    "ComposeRequest",
    "ChainCreate",
    "EntryCreate",
    "TransactionCompose",
    "IdentityChainCreate",
    "IdentityAttribute",
    "IdentityAttributeEndorsement",
    "IdentityKeyReplacement",
    # Transport
    "Transport",
    "WalletdClient",
    # Replies
    "ComposeResult",
    "ComposeTxResult",
    "Envelope",
    "RpcError",
    "RpcResponse",
    # Errors
    "ResponseFormatError",
    "WalletdError",
    # Hex
    "str_to_hex",
    "hex_to_str",
]

from .compose import (
    ChainCreate,
    ComposeRequest,
    Composer,
    EntryCreate,
    IdentityAttribute,
    IdentityAttributeEndorsement,
    IdentityChainCreate,
    IdentityKeyReplacement,
    TransactionCompose,
    build_params,
    compose_chain,
    compose_entry,
    compose_identity_attribute,
    compose_identity_attribute_endorsement,
    compose_identity_chain,
    compose_identity_key_replacement,
    compose_transaction,
)
from .rpc import Transport, WalletdClient
from .utils import hex_to_str, str_to_hex
from .wire.models import (
    ComposeResult,
    ComposeTxResult,
    Envelope,
    RpcError,
    RpcResponse,
    WalletdError,
)
from .wire.schemas import ResponseFormatError
