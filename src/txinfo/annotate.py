"""
Build the annotated view of a decoded transaction.

`annotate` is pure: the same Transaction always yields the same
TransactionResponse, and inputs/outputs keep their order and count.
"""

from __future__ import annotations

from pydantic import ValidationError

from txinfo import constants
from txinfo.models import (
    SizeInfo,
    TransactionResponse,
    TxIdInfo,
    TxInExplainer,
    TxInput,
    TxInResponse,
    TxOutExplainer,
    TxOutput,
    TxOutResponse,
)
from txinfo.script import classify_script, disassemble
from txinfo.transaction import Transaction, TxIn, TxOut


class SerializationError(Exception):
    """Raised when the annotated transaction cannot be rendered as JSON."""

    pass


def format_btc(sats: int) -> str:
    """
    Format a satoshi amount in BTC without trailing zeros.

    Examples: 5000000000 -> "50", 1450000 -> "0.0145", 1 -> "0.00000001"
    """
    whole, frac = divmod(sats, constants.SATS_PER_BTC)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:08d}".rstrip("0")


def vsize_explanation(weight: int) -> str:
    vsize = -(-weight // constants.WITNESS_SCALE_FACTOR)
    return f"Transaction weight / 4 (rounded up) ---> {weight} / 4 = {vsize}"


def weight_explanation(base_size: int, total_size: int) -> str:
    weight = base_size * 3 + total_size
    return (
        "Base transaction size * 3 + total transaction size ---> "
        f"{base_size} * 3 + {total_size} = {weight}"
    )


def annotate_input(txin: TxIn) -> TxInResponse:
    return TxInResponse(
        txid=txin.previous_output.txid,
        vout=txin.previous_output.vout,
        script_sig=txin.script_sig.hex(),
        sequence=txin.sequence,
        witness=[item.hex() for item in txin.witness],
    )


def annotate_output(txout: TxOut) -> TxOutResponse:
    """Classify an output and render its value and script."""
    return TxOutResponse(
        sats_value=txout.value,
        btc_value=format_btc(txout.value),
        script_pubkey=txout.script_pubkey.hex(),
        script=disassemble(txout.script_pubkey),
        script_type=classify_script(txout.script_pubkey).value,
    )


def annotate(tx: Transaction) -> TransactionResponse:
    """
    Derive the explanatory document for a transaction.

    Args:
        tx: Decoded transaction

    Returns:
        TransactionResponse with identifiers, sizes, locktime, inputs and
        outputs, each accompanied by its explanation
    """
    base_size = tx.base_size
    total_size = tx.total_size
    weight = tx.weight

    return TransactionResponse(
        txid=TxIdInfo(
            txid=tx.txid,
            what_is_txid=constants.WHAT_IS_TXID,
            witnesstxid=tx.wtxid,
            what_is_witnesstxid=constants.WHAT_IS_WITNESS_TXID,
        ),
        version=tx.version,
        size=SizeInfo(
            base_size=base_size,
            what_is_base_size=constants.WHAT_IS_BASE_SIZE,
            size=total_size,
            what_is_size=constants.WHAT_IS_SIZE,
            vsize=tx.vsize,
            what_is_vsize=vsize_explanation(weight),
            weight=weight,
            what_is_weight=weight_explanation(base_size, total_size),
            block_weight=constants.BLOCK_WEIGHT_NOTE,
        ),
        locktime=tx.locktime,
        what_is_locktime=constants.WHAT_IS_LOCKTIME,
        input=TxInput(
            explainer=TxInExplainer(
                txid=constants.INPUT_TXID,
                vout=constants.INPUT_VOUT,
                script_sig=constants.INPUT_SCRIPT_SIG,
                sequence=constants.INPUT_SEQUENCE,
                witness=constants.INPUT_WITNESS,
            ),
            inputs=[annotate_input(txin) for txin in tx.inputs],
        ),
        output=TxOutput(
            explainer=TxOutExplainer(
                value=constants.OUTPUT_VALUE,
                script_pubkey=constants.OUTPUT_SCRIPT_PUBKEY,
                script=constants.OUTPUT_SCRIPT,
            ),
            output=[annotate_output(txout) for txout in tx.outputs],
        ),
    )


def render_json(response: TransactionResponse, indent: int = 2) -> str:
    """
    Serialize the annotated transaction as pretty-printed JSON.

    Raises:
        SerializationError: If the model cannot be serialized
    """
    try:
        return response.model_dump_json(indent=indent)
    except (ValidationError, ValueError, TypeError) as e:
        raise SerializationError(f"Failed to serialize transaction document: {e}") from e
