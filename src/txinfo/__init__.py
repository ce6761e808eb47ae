"""
txinfo - Decode Bitcoin transactions and explain their fields

Provides consensus decoding, output script classification and the annotated
JSON document printed by the `txinfo` command.
"""

__version__ = "0.1.0"

from txinfo.annotate import SerializationError, annotate, format_btc, render_json
from txinfo.models import TransactionResponse
from txinfo.pipeline import explain_transaction, get_tx_info
from txinfo.resolver import InputResolutionError, InputResolver, is_txid
from txinfo.script import ScriptType, classify_script, disassemble
from txinfo.transaction import (
    DecodeError,
    OutPoint,
    Transaction,
    TxIn,
    TxOut,
    deserialize_transaction,
)

__all__ = [
    "DecodeError",
    "InputResolutionError",
    "InputResolver",
    "OutPoint",
    "ScriptType",
    "SerializationError",
    "Transaction",
    "TransactionResponse",
    "TxIn",
    "TxOut",
    "annotate",
    "classify_script",
    "deserialize_transaction",
    "disassemble",
    "explain_transaction",
    "format_btc",
    "get_tx_info",
    "is_txid",
    "render_json",
]
