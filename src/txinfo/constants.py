"""
Bitcoin consensus constants and the explanatory texts attached to each field.
"""

from __future__ import annotations

# Consensus accounting
WITNESS_SCALE_FACTOR = 4
MAX_BLOCK_WEIGHT = 4_000_000
SATS_PER_BTC = 100_000_000

# A txid is a 32-byte hash rendered as hex
TXID_HEX_LENGTH = 64

# Public Esplora endpoints used to look up raw transactions by txid
EXPLORER_API_URLS: dict[str, str] = {
    "mainnet": "https://blockstream.info/api",
    "testnet": "https://blockstream.info/testnet/api",
    "signet": "https://blockstream.info/signet/api",
}

WHAT_IS_TXID = "Hash of the transaction. Does not include witness data if any"
WHAT_IS_WITNESS_TXID = (
    "Hash of transaction including witness data. Should be equal to txid if legacy "
    "transaction. This is the 'hash' field in the 'decoderawtransaction' in bitcoin core"
)

WHAT_IS_BASE_SIZE = "Transaction size in bytes with witness data stripped"
WHAT_IS_SIZE = "Transaction size in bytes including witness data"
BLOCK_WEIGHT_NOTE = "after segwit upgrade, consensus rule is that block_weight <= 4,000,000"

WHAT_IS_LOCKTIME = (
    "Condition to prevent transaction from being mined until specified block height or "
    "time is reached i.e if locktime is set to 620,000 then that transaction cannot be "
    "mined until that height is reached. If locktime is 0, then the transaction can be "
    "included in any block"
)

INPUT_TXID = "id of the transaction being spent. The txid + vout is called the 'outpoint'"
INPUT_VOUT = "index of the specific output from the previous transaction being referenced"
INPUT_SCRIPT_SIG = (
    "script satisfying the conditions specified in the script_pubkey field from the "
    "previous outpoint referenced. This is filled for inputs spending from legacy "
    "transactions (i.e before segwit upgrade). Inputs spending from segwit outputs are "
    "empty because data will be in the witness"
)
INPUT_SEQUENCE = (
    "Can have multiple purposes: 0xffffffff marks the input as final, lower values "
    "enable locktime, values below 0xfffffffe signal replace-by-fee (BIP125) and, with "
    "version 2 transactions, encode a relative timelock (BIP68)"
)
INPUT_WITNESS = (
    "only for transactions after segwit upgrade. Basically same as script_sig in that it "
    "will have the script to make the transaction valid. Difference is that data here "
    "it's not used to compute the txid"
)

OUTPUT_VALUE = "amount of sats being sent"
OUTPUT_SCRIPT_PUBKEY = "script specifying the conditions that must be met to spend this output"
OUTPUT_SCRIPT = "script in human readable form"
