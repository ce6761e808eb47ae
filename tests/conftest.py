"""
Shared fixtures: real mainnet transactions with known identifiers.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

# Genesis block coinbase: version 1, one input, one P2PK output, locktime 0
GENESIS_TX_HEX = (
    "01000000010000000000000000000000000000000000000000000000000000000000000000ffffffff"
    "4d04ffff001d0104455468652054696d65732030332f4a616e2f32303039204368616e63656c6c6f72"
    "206f6e206272696e6b206f66207365636f6e64206261696c6f757420666f722062616e6b73ffffffff"
    "0100f2052a01000000434104678afdb0fe5548271967f1a67130b7105cd6a828e03909a67962e0ea1f"
    "61deb649f6bc3f4cef38c4f35504e51ec112de5c384df7ba0b8d578a4c702b6bf11d5fac00000000"
)
GENESIS_TXID = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
GENESIS_PUBKEY = (
    "04678afdb0fe5548271967f1a67130b7105cd6a828e03909a67962e0ea1f61deb649f6bc3f4cef38c4f3"
    "5504e51ec112de5c384df7ba0b8d578a4c702b6bf11d5f"
)

# Version 2 P2WPKH spend with two P2WPKH outputs and locktime 650412
SEGWIT_TX_HEX = (
    "020000000001018b0795ef60c78761001f5544e7d3910d63f9db2e0d6ed5f83b308e7f8d8f0fae000000"
    "0000fdffffff02734ef40100000000160014ad57609ab92acbd3c1b5b0e2aae15ba6da7eabec102016"
    "00000000001600140e7b71cb408a98f9ccd7402a557763178950954e0247304402204efc5ed1e980f5f1"
    "a3078c5a6c19c3e85f5bd7dbddd5d6c4a13ea7ccc0fab42f022043d00773037129c6e15b87ecd7d70e42"
    "9b9df7a2906e16c50241131941b3bfdc012102d58aca4317df9be3801285859bfcaf768d0a91260432c1"
    "05d6b25d457d553520acec0900"
)
SEGWIT_TXID = "2b9d7e609110f3c7657e4ff9df4cbac2194942aaa56a28b8ac21a47d4d4048a1"
SEGWIT_WTXID = "f65da39b5e0f92c8afdec3d8e09838eabd351db995bcf7104121a3c0babe3ea0"
SEGWIT_PREV_TXID = "ae0f8f8d7f8e303bf8d56e0d2edbf9630d91d3e744551f006187c760ef95078b"


@pytest.fixture
def genesis_tx_hex() -> str:
    return GENESIS_TX_HEX


@pytest.fixture
def segwit_tx_hex() -> str:
    return SEGWIT_TX_HEX


@pytest.fixture
def explorer_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """
    Build a mock Esplora transport.

    Returns a factory taking (body, status_code) that yields the transport
    and the list of requests it received.
    """

    def factory(
        body: str, status_code: int = 200
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status_code, text=body)

        return httpx.MockTransport(handler), requests

    return factory
