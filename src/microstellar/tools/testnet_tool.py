#!/usr/bin/env python3
"""Stellar Testnet Tool — generate keys, fund via friendbot, inspect accounts.

A standalone CLI utility for interacting with the Stellar testnet:

    # Generate a random keypair
    python -m microstellar.tools.testnet_tool generate

    # Fund a new testnet account with friendbot
    python -m microstellar.tools.testnet_tool fund <address>

    # Show balances, signers and thresholds of an account
    python -m microstellar.tools.testnet_tool account <address>

    # Resolve a federation address
    python -m microstellar.tools.testnet_tool resolve <name*domain>
"""

from __future__ import annotations

import logging
import sys

import httpx

from microstellar.client import StellarClient
from microstellar.errors.stellar_errors import StellarError

_FRIENDBOT_URL = "https://friendbot.stellar.org"


def _cmd_generate() -> None:
    """Generate a new random keypair."""
    with StellarClient("simulated") as client:
        pair = client.create_key_pair()

    print("=" * 60)
    print("STELLAR KEYPAIR")
    print("=" * 60)
    print()
    print(f"Address: {pair.address}")
    print(f"Seed:    {pair.seed}")
    print()
    print("To fund it on testnet, run:")
    print(f"  python -m microstellar.tools.testnet_tool fund {pair.address}")


def _cmd_fund(address: str, *, transport: httpx.BaseTransport | None = None) -> None:
    """Ask friendbot to create and fund *address* on testnet."""
    with httpx.Client(timeout=60.0, transport=transport) as client:
        response = client.get(_FRIENDBOT_URL, params={"addr": address})
    if response.status_code != 200:
        print(f"Friendbot failed ({response.status_code}): {response.text}")
        sys.exit(1)
    print(f"Funded {address}: tx {response.json().get('hash', '?')}")


def _cmd_account(address: str) -> None:
    """Print balances, signers and thresholds for *address*."""
    with StellarClient("test") as client:
        account = client.load_account(address)

    print(f"Account:  {account.address}")
    print(f"Sequence: {account.sequence}")
    print("Balances:")
    for balance in account.balances:
        limit = f" (limit {balance.limit})" if balance.limit else ""
        print(f"  {balance.asset}: {balance.amount}{limit}")
    print("Signers:")
    for signer in account.signers:
        print(f"  {signer.public_key}: {signer.weight}")
    t = account.thresholds
    print(f"Thresholds: low={t.low} medium={t.medium} high={t.high}")
    if account.home_domain:
        print(f"Home domain: {account.home_domain}")


def _cmd_resolve(address: str) -> None:
    with StellarClient("public") as client:
        print(client.resolve(address))


def main(argv: list[str] | None = None) -> None:
    """Dispatch a testnet tool subcommand."""
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.WARNING)

    if not args:
        print(__doc__)
        sys.exit(1)

    cmd, rest = args[0], args[1:]
    try:
        if cmd == "generate":
            _cmd_generate()
        elif cmd == "fund" and len(rest) == 1:
            _cmd_fund(rest[0])
        elif cmd == "account" and len(rest) == 1:
            _cmd_account(rest[0])
        elif cmd == "resolve" and len(rest) == 1:
            _cmd_resolve(rest[0])
        else:
            print(f"Unknown command or bad arguments: {' '.join(args)}")
            print(__doc__)
            sys.exit(1)
    except StellarError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
