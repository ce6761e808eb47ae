"""
End-to-end pipeline: resolve input, decode, annotate, render.
"""

from __future__ import annotations

from loguru import logger

from txinfo.annotate import annotate, render_json
from txinfo.models import TransactionResponse
from txinfo.resolver import InputResolver
from txinfo.transaction import deserialize_transaction


async def explain_transaction(raw: str, resolver: InputResolver) -> TransactionResponse:
    """
    Build the annotated transaction for a txid or raw hex input.

    Raises:
        InputResolutionError: If a txid cannot be fetched
        DecodeError: If the hex is not a valid transaction
    """
    tx_hex = await resolver.resolve(raw)
    tx = deserialize_transaction(tx_hex)
    logger.debug(f"Annotating transaction {tx.txid}")
    return annotate(tx)


async def get_tx_info(raw: str, resolver: InputResolver) -> str:
    """
    Return the pretty-printed JSON document for a txid or raw hex input.

    Nothing is returned unless every stage succeeds.
    """
    response = await explain_transaction(raw, resolver)
    return render_json(response)
