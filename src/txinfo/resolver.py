"""
Resolve user input to raw transaction hex.

Input of exactly 64 characters is treated as a txid and looked up on an
Esplora block explorer (`GET /tx/<txid>/hex`). Anything else is taken to be
raw transaction hex already and passed through.
"""

from __future__ import annotations

import re

import httpx
from loguru import logger

from txinfo.constants import EXPLORER_API_URLS, TXID_HEX_LENGTH

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


class InputResolutionError(Exception):
    """Raised when a txid cannot be resolved to raw transaction hex."""

    pass


def is_txid(value: str) -> bool:
    """Check whether value is a 64-character hex txid."""
    return len(value) == TXID_HEX_LENGTH and _HEX_RE.fullmatch(value) is not None


class InputResolver:
    """
    Turns a txid or raw hex string into raw transaction hex.

    Each lookup opens its own HTTP client, so one resolver can serve several
    independent inputs without sharing connection state between them.
    """

    def __init__(
        self,
        explorer_api_url: str = EXPLORER_API_URLS["mainnet"],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize resolver.

        Args:
            explorer_api_url: Esplora API base URL (e.g. https://blockstream.info/api)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests to stub the explorer)
        """
        self.explorer_api_url = explorer_api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, raw: str) -> str:
        """
        Resolve input to raw transaction hex.

        Surrounding whitespace is stripped before the input is classified, so
        a value that is 64 characters only after stripping is treated as a
        txid. Anything else is returned stripped and left for the decoder.

        Args:
            raw: Raw transaction hex or 64-character txid

        Returns:
            Raw transaction hex

        Raises:
            InputResolutionError: If the input looks like a txid but is not hex,
                or the explorer lookup fails
        """
        value = raw.strip()
        if len(value) != TXID_HEX_LENGTH:
            return value

        if not is_txid(value):
            raise InputResolutionError(f"Invalid txid (expected {TXID_HEX_LENGTH} hex characters)")

        return await self.fetch_tx_hex(value)

    async def fetch_tx_hex(self, txid: str) -> str:
        """Fetch raw transaction hex for txid from the explorer."""
        url = f"{self.explorer_api_url}/tx/{txid}/hex"
        logger.info(f"Fetching transaction {txid} from {self.explorer_api_url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise InputResolutionError(
                f"Explorer returned HTTP {e.response.status_code} for {txid}"
            ) from e
        except httpx.HTTPError as e:
            raise InputResolutionError(f"Failed to fetch transaction {txid}: {e}") from e

        tx_hex = response.text.strip()
        if not tx_hex or len(tx_hex) % 2 != 0 or not _HEX_RE.fullmatch(tx_hex):
            raise InputResolutionError(f"Explorer response for {txid} is not transaction hex")

        logger.debug(f"Fetched {len(tx_hex) // 2} bytes for {txid}")
        return tx_hex
