"""
factom-walletd CLI

Command-line access to the walletd compose-* methods. Each command prints
the daemon reply as JSON: a commit/reveal pair for chains, entries and
identity operations, or a factoid-submit request for transactions.

Commands:
  compose-chain                           - Compose a new chain
  compose-entry                           - Compose an entry on a chain
  compose-transaction                     - Marshal a wallet transaction
  compose-identity-chain                  - Compose an identity chain
  compose-identity-attribute              - Assign attributes to an identity
  compose-identity-attribute-endorsement  - Endorse an attribute entry
  compose-identity-key-replacement        - Replace an identity key
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import sys
from dataclasses import dataclass
from typing import Any, Optional

import click
import httpx

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
)
from .rpc import DEFAULT_TIMEOUT, DEFAULT_WALLETD_URL, WalletdClient
from .wire.schemas import ResponseFormatError


# ============ Constants ============

VERSION = "0.1.0"
_VERBOSE_HANDLER = "factom_walletd.cli.verbose"


@dataclass(frozen=True)
class Settings:
    url: str
    timeout: float
    user: Optional[str]
    password: Optional[str]

    def auth(self) -> Optional[httpx.BasicAuth]:
        if not self.user:
            return None
        return httpx.BasicAuth(self.user, self.password or "")


# ============ Dispatch ============


async def _submit(settings: Settings, request: ComposeRequest) -> dict[str, Any]:
    async with WalletdClient(
        url=settings.url, timeout=settings.timeout, auth=settings.auth()
    ) as client:
        response = await Composer(client).submit(request)
    return response.to_dict()


def _run(ctx: click.Context, request: ComposeRequest) -> None:
    settings: Settings = ctx.obj
    try:
        reply = asyncio.run(_submit(settings, request))
    except httpx.HTTPError as exc:
        click.secho(f"ERROR: walletd request failed: {exc}", fg="red", err=True)
        sys.exit(1)
    except ResponseFormatError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        for line in exc.errors:
            click.echo(f"  {line}", err=True)
        sys.exit(1)

    click.echo(json.dumps(reply, indent=2))
    if "error" in reply:
        click.secho(f"ERROR: {reply['error']['message']}", fg="red", err=True)
        sys.exit(1)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"{text} is out of range")
    return number


def _parse_attribute(value: str) -> tuple[str, Any]:
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}")
    # Values may be any JSON value; anything that does not parse, NaN and
    # out-of-range floats included, is a string.
    try:
        return key, json.loads(
            raw, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except ValueError:
        return key, raw


def _log_to_stderr() -> None:
    package_logger = logging.getLogger("factom_walletd")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _VERBOSE_HANDLER:
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_VERBOSE_HANDLER)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="factom-walletd")
@click.option(
    "--url",
    envvar="WALLETD_URL",
    default=DEFAULT_WALLETD_URL,
    show_default=True,
    help="walletd JSON-RPC endpoint",
)
@click.option(
    "--timeout",
    envvar="WALLETD_TIMEOUT",
    default=DEFAULT_TIMEOUT,
    type=float,
    show_default=True,
    help="Request timeout in seconds",
)
@click.option("--user", envvar="WALLETD_USER", default=None, help="walletd RPC user")
@click.option("--password", envvar="WALLETD_PASSWORD", default=None, help="walletd RPC password")
@click.option("--verbose", "-v", is_flag=True, help="Log requests to stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    url: str,
    timeout: float,
    user: Optional[str],
    password: Optional[str],
    verbose: bool,
) -> None:
    """Compose Factom chains, entries and identities through walletd."""
    if verbose:
        _log_to_stderr()
    ctx.obj = Settings(url=url, timeout=timeout, user=user, password=password)


# ============ Chains & Entries ============


@cli.command("compose-chain")
@click.option("--ext-id", "ext_ids", multiple=True, help="External ID (repeatable)")
@click.option("--content", required=True, help="First entry content")
@click.option("--ecpub", required=True, help="Entry credit address paying for the chain")
@click.pass_context
def compose_chain_cmd(ctx: click.Context, ext_ids: tuple[str, ...], content: str, ecpub: str) -> None:
    """Compose a new chain; send the commit, then the reveal."""
    _run(ctx, ChainCreate(ext_ids=ext_ids, content=content, ec_address=ecpub))


@cli.command("compose-entry")
@click.option("--chain-id", required=True, help="Chain to write the entry to")
@click.option("--ext-id", "ext_ids", multiple=True, help="External ID (repeatable)")
@click.option("--content", required=True, help="Entry content")
@click.option("--ecpub", required=True, help="Entry credit address paying for the entry")
@click.pass_context
def compose_entry_cmd(
    ctx: click.Context, chain_id: str, ext_ids: tuple[str, ...], content: str, ecpub: str
) -> None:
    """Compose an entry; send the commit, then the reveal."""
    _run(
        ctx,
        EntryCreate(chain_id=chain_id, ext_ids=ext_ids, content=content, ec_address=ecpub),
    )


@cli.command("compose-transaction")
@click.argument("tx_name")
@click.pass_context
def compose_transaction_cmd(ctx: click.Context, tx_name: str) -> None:
    """Marshal wallet transaction TX_NAME for factoid-submit."""
    _run(ctx, TransactionCompose(tx_name=tx_name))


# ============ Identity ============


@cli.command("compose-identity-chain")
@click.option("--name", "name", multiple=True, required=True, help="Name segment (repeatable)")
@click.option(
    "--pubkey",
    "pubkeys",
    multiple=True,
    required=True,
    help="Identity key, highest priority first (repeatable)",
)
@click.option("--ecpub", required=True, help="Entry credit address")
@click.option("--force", is_flag=True, help="Skip walletd sanity checks")
@click.pass_context
def compose_identity_chain_cmd(
    ctx: click.Context,
    name: tuple[str, ...],
    pubkeys: tuple[str, ...],
    ecpub: str,
    force: bool,
) -> None:
    """Compose an identity chain."""
    _run(ctx, IdentityChainCreate(name=name, pubkeys=pubkeys, ec_address=ecpub, force=force))


@cli.command("compose-identity-attribute")
@click.option("--receiver-chain", required=True, help="Identity chain receiving the attributes")
@click.option("--destination-chain", required=True, help="Chain the entry is written to")
@click.option(
    "--attribute",
    "attributes",
    multiple=True,
    required=True,
    help="KEY=VALUE, VALUE parsed as JSON when possible (repeatable)",
)
@click.option("--signer-key", required=True, help="Signing identity key held by the wallet")
@click.option("--signer-chain", required=True, help="Identity chain of the signer")
@click.option("--ecpub", required=True, help="Entry credit address")
@click.option("--force", is_flag=True, help="Skip walletd sanity checks")
@click.pass_context
def compose_identity_attribute_cmd(
    ctx: click.Context,
    receiver_chain: str,
    destination_chain: str,
    attributes: tuple[str, ...],
    signer_key: str,
    signer_chain: str,
    ecpub: str,
    force: bool,
) -> None:
    """Assign attributes to an identity."""
    pairs = tuple(_parse_attribute(a) for a in attributes)
    _run(
        ctx,
        IdentityAttribute(
            receiver_chain=receiver_chain,
            destination_chain=destination_chain,
            attributes=pairs,
            signer_key=signer_key,
            signer_chain_id=signer_chain,
            ec_address=ecpub,
            force=force,
        ),
    )


@cli.command("compose-identity-attribute-endorsement")
@click.option("--destination-chain", required=True, help="Chain the entry is written to")
@click.option("--entry-hash", required=True, help="Entry hash of the attribute to endorse")
@click.option("--signer-key", required=True, help="Signing identity key held by the wallet")
@click.option("--signer-chain", required=True, help="Identity chain of the signer")
@click.option("--ecpub", required=True, help="Entry credit address")
@click.option("--force", is_flag=True, help="Skip walletd sanity checks")
@click.pass_context
def compose_identity_attribute_endorsement_cmd(
    ctx: click.Context,
    destination_chain: str,
    entry_hash: str,
    signer_key: str,
    signer_chain: str,
    ecpub: str,
    force: bool,
) -> None:
    """Endorse an attribute already on chain."""
    _run(
        ctx,
        IdentityAttributeEndorsement(
            destination_chain=destination_chain,
            entry_hash=entry_hash,
            signer_key=signer_key,
            signer_chain_id=signer_chain,
            ec_address=ecpub,
            force=force,
        ),
    )


@cli.command("compose-identity-key-replacement")
@click.option("--chain-id", required=True, help="Identity chain")
@click.option("--old-key", required=True, help="Key being replaced")
@click.option("--new-key", required=True, help="Replacement key")
@click.option("--signer-key", required=True, help="Key of same or higher priority than --old-key")
@click.option("--ecpub", required=True, help="Entry credit address")
@click.option("--force", is_flag=True, help="Skip walletd sanity checks")
@click.pass_context
def compose_identity_key_replacement_cmd(
    ctx: click.Context,
    chain_id: str,
    old_key: str,
    new_key: str,
    signer_key: str,
    ecpub: str,
    force: bool,
) -> None:
    """Replace one of an identity's keys."""
    _run(
        ctx,
        IdentityKeyReplacement(
            chain_id=chain_id,
            old_key=old_key,
            new_key=new_key,
            signer_key=signer_key,
            ec_address=ecpub,
            force=force,
        ),
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
