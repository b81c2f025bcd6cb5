"""
Compose - build walletd compose-* requests.

Every compose-* call returns the factomd API calls needed to write
something on chain: the caller must first send the commit, then the
reveal. To be safe, wait a few seconds after the commit before sending the
reveal. If the wallet is encrypted it must be unlocked beforehand.

Free text (content and external IDs) is hex-encoded here; chain IDs,
entry hashes and keys are already string identifiers and go through
untouched. No input is validated locally: walletd rejects malformed keys,
unknown chains and insufficient signer priority in its reply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Sequence, Union

from .rpc import Transport
from .utils import hex_all, str_to_hex
from .wire.models import RpcResponse

logger = logging.getLogger("factom_walletd.compose")

COMPOSE_CHAIN = "compose-chain"
COMPOSE_ENTRY = "compose-entry"
COMPOSE_TRANSACTION = "compose-transaction"
COMPOSE_IDENTITY_CHAIN = "compose-identity-chain"
COMPOSE_IDENTITY_ATTRIBUTE = "compose-identity-attribute"
COMPOSE_IDENTITY_ATTRIBUTE_ENDORSEMENT = "compose-identity-attribute-endorsement"
COMPOSE_IDENTITY_KEY_REPLACEMENT = "compose-identity-key-replacement"

Params = dict[str, Any]


# ============ Composers ============


def compose_chain(ext_ids: Sequence[str], content: str, ec_address: str) -> tuple[str, Params]:
    """
    Compose a new chain. ``ext_ids`` and ``content`` form the first entry.

    Walletd answers with commit-chain and reveal-chain requests.
    """
    params: Params = {
        "chain": {
            "firstentry": {
                "extids": hex_all(ext_ids),
                "content": str_to_hex(content),
            }
        },
        "ecpub": ec_address,
    }
    logger.debug("%s params: %s", COMPOSE_CHAIN, params)
    return COMPOSE_CHAIN, params


def compose_entry(
    chain_id: str, ext_ids: Sequence[str], content: str, ec_address: str
) -> tuple[str, Params]:
    """
    Compose an entry on an existing chain.

    Walletd answers with commit-entry and reveal-entry requests.
    """
    params: Params = {
        "entry": {
            "chainid": chain_id,
            "extids": hex_all(ext_ids),
            "content": str_to_hex(content),
        },
        "ecpub": ec_address,
    }
    logger.debug("%s params: %s", COMPOSE_ENTRY, params)
    return COMPOSE_ENTRY, params


def compose_transaction(tx_name: str) -> tuple[str, Params]:
    """Marshal a wallet transaction into a factoid-submit request."""
    params: Params = {"tx-name": tx_name}
    logger.debug("%s params: %s", COMPOSE_TRANSACTION, params)
    return COMPOSE_TRANSACTION, params


def compose_identity_chain(
    name: Sequence[str], pubkeys: Sequence[str], ec_address: str, force: bool
) -> tuple[str, Params]:
    """
    Compose an identity chain.

    ``name`` becomes the ExtIDs of the first entry (walletd hex-encodes
    it). ``pubkeys`` are listed in order of decreasing priority; the first
    is the master key.
    """
    params: Params = {
        "name": list(name),
        "pubkeys": list(pubkeys),
        "ecpub": ec_address,
        "force": force,
    }
    logger.debug("%s params: %s", COMPOSE_IDENTITY_CHAIN, params)
    return COMPOSE_IDENTITY_CHAIN, params


def compose_identity_attribute(
    receiver_chain: str,
    destination_chain: str,
    attributes: Sequence[tuple[Any, Any]],
    signer_key: str,
    signer_chain_id: str,
    ec_address: str,
    force: bool,
) -> tuple[str, Params]:
    """
    Compose an entry stating attributes about an identity.

    Args:
        receiver_chain: Chain ID of the identity being assigned the attributes
        destination_chain: Chain ID the attribute entry is written to
        attributes: (key, value) pairs; values may be any JSON value
        signer_key: Public identity key signing the entry, held by the wallet
        signer_chain_id: Identity chain of the signing party
        ec_address: Entry credit address paying for the entry
        force: Skip walletd's sanity checks
    """
    params: Params = {
        "receiver-chainid": receiver_chain,
        "destination-chainid": destination_chain,
        "attributes": [{"key": key, "value": value} for key, value in attributes],
        "signerkey": signer_key,
        "signer-chainid": signer_chain_id,
        "ecpub": ec_address,
        "force": force,
    }
    logger.debug("%s params: %s", COMPOSE_IDENTITY_ATTRIBUTE, params)
    return COMPOSE_IDENTITY_ATTRIBUTE, params


def compose_identity_attribute_endorsement(
    destination_chain: str,
    entry_hash: str,
    signer_key: str,
    signer_chain_id: str,
    ec_address: str,
    force: bool,
) -> tuple[str, Params]:
    """Compose an endorsement of the attribute entry at ``entry_hash``."""
    params: Params = {
        "destination-chainid": destination_chain,
        "entry-hash": entry_hash,
        "signerkey": signer_key,
        "signer-chainid": signer_chain_id,
        "ecpub": ec_address,
        "force": force,
    }
    logger.debug("%s params: %s", COMPOSE_IDENTITY_ATTRIBUTE_ENDORSEMENT, params)
    return COMPOSE_IDENTITY_ATTRIBUTE_ENDORSEMENT, params


def compose_identity_key_replacement(
    chain_id: str,
    old_key: str,
    new_key: str,
    signer_key: str,
    ec_address: str,
    force: bool,
) -> tuple[str, Params]:
    """
    Compose a key replacement on an identity chain.

    ``signer_key`` must be of the same or higher priority than ``old_key``;
    walletd enforces this.
    """
    params: Params = {
        "chainid": chain_id,
        "oldkey": old_key,
        "newkey": new_key,
        "signerkey": signer_key,
        "ecpub": ec_address,
        "force": force,
    }
    logger.debug("%s params: %s", COMPOSE_IDENTITY_KEY_REPLACEMENT, params)
    return COMPOSE_IDENTITY_KEY_REPLACEMENT, params


# ============ Requests ============


@dataclass(frozen=True)
class ChainCreate:
    method: ClassVar[str] = COMPOSE_CHAIN

    ext_ids: tuple[str, ...]
    content: str
    ec_address: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ext_ids", tuple(self.ext_ids))

    def build_params(self) -> tuple[str, Params]:
        return compose_chain(self.ext_ids, self.content, self.ec_address)


@dataclass(frozen=True)
class EntryCreate:
    method: ClassVar[str] = COMPOSE_ENTRY

    chain_id: str
    ext_ids: tuple[str, ...]
    content: str
    ec_address: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ext_ids", tuple(self.ext_ids))

    def build_params(self) -> tuple[str, Params]:
        return compose_entry(self.chain_id, self.ext_ids, self.content, self.ec_address)


@dataclass(frozen=True)
class TransactionCompose:
    method: ClassVar[str] = COMPOSE_TRANSACTION

    tx_name: str

    def build_params(self) -> tuple[str, Params]:
        return compose_transaction(self.tx_name)


@dataclass(frozen=True)
class IdentityChainCreate:
    method: ClassVar[str] = COMPOSE_IDENTITY_CHAIN

    name: tuple[str, ...]
    pubkeys: tuple[str, ...]
    ec_address: str
    force: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", tuple(self.name))
        object.__setattr__(self, "pubkeys", tuple(self.pubkeys))

    def build_params(self) -> tuple[str, Params]:
        return compose_identity_chain(self.name, self.pubkeys, self.ec_address, self.force)


@dataclass(frozen=True)
class IdentityAttribute:
    method: ClassVar[str] = COMPOSE_IDENTITY_ATTRIBUTE

    receiver_chain: str
    destination_chain: str
    attributes: tuple[tuple[Any, Any], ...]
    signer_key: str
    signer_chain_id: str
    ec_address: str
    force: bool

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "attributes", tuple((key, value) for key, value in self.attributes)
        )

    def build_params(self) -> tuple[str, Params]:
        return compose_identity_attribute(
            self.receiver_chain,
            self.destination_chain,
            self.attributes,
            self.signer_key,
            self.signer_chain_id,
            self.ec_address,
            self.force,
        )


@dataclass(frozen=True)
class IdentityAttributeEndorsement:
    method: ClassVar[str] = COMPOSE_IDENTITY_ATTRIBUTE_ENDORSEMENT

    destination_chain: str
    entry_hash: str
    signer_key: str
    signer_chain_id: str
    ec_address: str
    force: bool

    def build_params(self) -> tuple[str, Params]:
        return compose_identity_attribute_endorsement(
            self.destination_chain,
            self.entry_hash,
            self.signer_key,
            self.signer_chain_id,
            self.ec_address,
            self.force,
        )


@dataclass(frozen=True)
class IdentityKeyReplacement:
    method: ClassVar[str] = COMPOSE_IDENTITY_KEY_REPLACEMENT

    chain_id: str
    old_key: str
    new_key: str
    signer_key: str
    ec_address: str
    force: bool

    def build_params(self) -> tuple[str, Params]:
        return compose_identity_key_replacement(
            self.chain_id,
            self.old_key,
            self.new_key,
            self.signer_key,
            self.ec_address,
            self.force,
        )


ComposeRequest = Union[
    ChainCreate,
    EntryCreate,
    TransactionCompose,
    IdentityChainCreate,
    IdentityAttribute,
    IdentityAttributeEndorsement,
    IdentityKeyReplacement,
]


def build_params(request: ComposeRequest) -> tuple[str, Params]:
    return request.build_params()


# ============ Dispatch ============


class Composer:
    """
    Sends compose-* requests through a transport.

    Holds no state besides the transport; calls may run concurrently.
    Transport errors propagate unchanged, daemon errors come back inside
    the returned RpcResponse.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    async def submit(self, request: ComposeRequest) -> RpcResponse:
        method, params = build_params(request)
        return await self.transport.call(method, params)

    async def compose_chain(
        self, ext_ids: Sequence[str], content: str, ec_address: str
    ) -> RpcResponse:
        return await self.transport.call(*compose_chain(ext_ids, content, ec_address))

    async def compose_entry(
        self, chain_id: str, ext_ids: Sequence[str], content: str, ec_address: str
    ) -> RpcResponse:
        return await self.transport.call(*compose_entry(chain_id, ext_ids, content, ec_address))

    async def compose_transaction(self, tx_name: str) -> RpcResponse:
        return await self.transport.call(*compose_transaction(tx_name))

    async def compose_identity_chain(
        self, name: Sequence[str], pubkeys: Sequence[str], ec_address: str, force: bool
    ) -> RpcResponse:
        return await self.transport.call(
            *compose_identity_chain(name, pubkeys, ec_address, force)
        )

    async def compose_identity_attribute(
        self,
        receiver_chain: str,
        destination_chain: str,
        attributes: Sequence[tuple[Any, Any]],
        signer_key: str,
        signer_chain_id: str,
        ec_address: str,
        force: bool,
    ) -> RpcResponse:
        return await self.transport.call(
            *compose_identity_attribute(
                receiver_chain,
                destination_chain,
                attributes,
                signer_key,
                signer_chain_id,
                ec_address,
                force,
            )
        )

    async def compose_identity_attribute_endorsement(
        self,
        destination_chain: str,
        entry_hash: str,
        signer_key: str,
        signer_chain_id: str,
        ec_address: str,
        force: bool,
    ) -> RpcResponse:
        return await self.transport.call(
            *compose_identity_attribute_endorsement(
                destination_chain, entry_hash, signer_key, signer_chain_id, ec_address, force
            )
        )

    async def compose_identity_key_replacement(
        self,
        chain_id: str,
        old_key: str,
        new_key: str,
        signer_key: str,
        ec_address: str,
        force: bool,
    ) -> RpcResponse:
        return await self.transport.call(
            *compose_identity_key_replacement(
                chain_id, old_key, new_key, signer_key, ec_address, force
            )
        )
