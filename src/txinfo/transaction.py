"""
Bitcoin transaction consensus encoding.

Decodes raw transactions (legacy and BIP144 segwit layout) into immutable
objects and derives the consensus values the explainer reports on:
txid, wtxid, base size, total size, weight and virtual size.

Layout:
    version | [marker 0x00, flag 0x01] | inputs | outputs | [witnesses] | locktime
"""

from __future__ import annotations

import hashlib
import re
import struct
from dataclasses import dataclass
from functools import cached_property

from loguru import logger

from txinfo.constants import WITNESS_SCALE_FACTOR

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class DecodeError(Exception):
    """Raised when a transaction cannot be decoded from its hex/byte encoding."""

    pass


def double_sha256(data: bytes) -> bytes:
    """SHA256(SHA256(data))."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def varint(n: int) -> bytes:
    """Encode integer as Bitcoin varint (CompactSize)."""
    if n < 0xFD:
        return bytes([n])
    elif n <= 0xFFFF:
        return bytes([0xFD]) + struct.pack("<H", n)
    elif n <= 0xFFFFFFFF:
        return bytes([0xFE]) + struct.pack("<I", n)
    else:
        return bytes([0xFF]) + struct.pack("<Q", n)


def read_bytes(data: bytes, offset: int, length: int) -> tuple[bytes, int]:
    """Read exactly `length` bytes at `offset`. Returns (bytes, new_offset)."""
    end = offset + length
    if end > len(data):
        raise DecodeError(
            f"Unexpected end of data: need {length} bytes at offset {offset}, "
            f"only {len(data) - offset} available"
        )
    return data[offset:end], end


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    """
    Read a canonical varint from bytes.

    Returns:
        (value, new_offset)

    Raises:
        DecodeError: If data is truncated or the encoding is not minimal
    """
    prefix, offset = read_bytes(data, offset, 1)
    first_byte = prefix[0]

    if first_byte < 0xFD:
        return first_byte, offset
    elif first_byte == 0xFD:
        raw, offset = read_bytes(data, offset, 2)
        value = struct.unpack("<H", raw)[0]
        minimum = 0xFD
    elif first_byte == 0xFE:
        raw, offset = read_bytes(data, offset, 4)
        value = struct.unpack("<I", raw)[0]
        minimum = 0x10000
    else:
        raw, offset = read_bytes(data, offset, 8)
        value = struct.unpack("<Q", raw)[0]
        minimum = 0x100000000

    if value < minimum:
        raise DecodeError(f"Non-minimal varint encoding at offset {offset - len(raw) - 1}")
    return value, offset


def read_var_bytes(data: bytes, offset: int) -> tuple[bytes, int]:
    """Read a varint length prefix followed by that many bytes."""
    length, offset = read_varint(data, offset)
    return read_bytes(data, offset, length)


@dataclass(frozen=True)
class OutPoint:
    """Reference to a previous transaction output."""

    txid: str  # RPC (big-endian) hex
    vout: int

    def serialize(self) -> bytes:
        return bytes.fromhex(self.txid)[::-1] + struct.pack("<I", self.vout)


@dataclass(frozen=True)
class TxIn:
    """Transaction input."""

    previous_output: OutPoint
    script_sig: bytes
    sequence: int
    witness: tuple[bytes, ...] = ()

    def serialize(self) -> bytes:
        """Serialize input without its witness."""
        return (
            self.previous_output.serialize()
            + varint(len(self.script_sig))
            + self.script_sig
            + struct.pack("<I", self.sequence)
        )

    def serialize_witness(self) -> bytes:
        result = varint(len(self.witness))
        for item in self.witness:
            result += varint(len(item)) + item
        return result


@dataclass(frozen=True)
class TxOut:
    """Transaction output."""

    value: int  # satoshis
    script_pubkey: bytes

    def serialize(self) -> bytes:
        return struct.pack("<Q", self.value) + varint(len(self.script_pubkey)) + self.script_pubkey


@dataclass(frozen=True)
class Transaction:
    """
    A decoded Bitcoin transaction.

    Immutable once decoded. Sizes and hashes are computed from the canonical
    re-serialization, so they match what Bitcoin Core reports.
    """

    version: int
    inputs: tuple[TxIn, ...]
    outputs: tuple[TxOut, ...]
    locktime: int

    @property
    def uses_segwit_serialization(self) -> bool:
        """
        Whether the full encoding carries the segwit marker and flag.

        A transaction without inputs is always written in the extended layout,
        otherwise its zero input count would be read back as the segwit marker.
        """
        if any(txin.witness for txin in self.inputs):
            return True
        return not self.inputs

    @property
    def is_segwit(self) -> bool:
        """True if any input carries witness data."""
        return any(txin.witness for txin in self.inputs)

    def serialize(self, include_witness: bool = True) -> bytes:
        """
        Serialize the transaction.

        Args:
            include_witness: Use the BIP144 layout when the transaction has
                witness data. False gives the legacy encoding used for the txid.
        """
        if include_witness:
            return self._full_serialization
        return self._base_serialization

    @cached_property
    def _full_serialization(self) -> bytes:
        return self._serialize(self.uses_segwit_serialization)

    @cached_property
    def _base_serialization(self) -> bytes:
        return self._serialize(False)

    def _serialize(self, with_witness: bool) -> bytes:
        result = struct.pack("<i", self.version)
        if with_witness:
            result += bytes([0x00, 0x01])  # SegWit marker and flag

        result += varint(len(self.inputs))
        for txin in self.inputs:
            result += txin.serialize()

        result += varint(len(self.outputs))
        for txout in self.outputs:
            result += txout.serialize()

        if with_witness:
            for txin in self.inputs:
                result += txin.serialize_witness()

        result += struct.pack("<I", self.locktime)
        return result

    @property
    def base_size(self) -> int:
        """Serialized size in bytes with witness data stripped."""
        return len(self.serialize(include_witness=False))

    @property
    def total_size(self) -> int:
        """Serialized size in bytes including witness data."""
        return len(self.serialize(include_witness=True))

    @property
    def weight(self) -> int:
        """BIP141 weight: base_size * 3 + total_size."""
        return self.base_size * (WITNESS_SCALE_FACTOR - 1) + self.total_size

    @property
    def vsize(self) -> int:
        """Virtual size: weight / 4, rounded up."""
        return -(-self.weight // WITNESS_SCALE_FACTOR)

    @cached_property
    def txid(self) -> str:
        """Double SHA256 of the non-witness serialization, in RPC byte order."""
        return double_sha256(self.serialize(include_witness=False))[::-1].hex()

    @cached_property
    def wtxid(self) -> str:
        """Double SHA256 of the full serialization, in RPC byte order."""
        return double_sha256(self.serialize(include_witness=True))[::-1].hex()


def _read_inputs(data: bytes, offset: int) -> tuple[list[TxIn], int]:
    count, offset = read_varint(data, offset)
    inputs = []
    for _ in range(count):
        prev_hash, offset = read_bytes(data, offset, 32)
        raw_vout, offset = read_bytes(data, offset, 4)
        script_sig, offset = read_var_bytes(data, offset)
        raw_sequence, offset = read_bytes(data, offset, 4)
        inputs.append(
            TxIn(
                previous_output=OutPoint(
                    txid=prev_hash[::-1].hex(), vout=struct.unpack("<I", raw_vout)[0]
                ),
                script_sig=script_sig,
                sequence=struct.unpack("<I", raw_sequence)[0],
            )
        )
    return inputs, offset


def _read_outputs(data: bytes, offset: int) -> tuple[list[TxOut], int]:
    count, offset = read_varint(data, offset)
    outputs = []
    for _ in range(count):
        raw_value, offset = read_bytes(data, offset, 8)
        script_pubkey, offset = read_var_bytes(data, offset)
        outputs.append(TxOut(value=struct.unpack("<Q", raw_value)[0], script_pubkey=script_pubkey))
    return outputs, offset


def _read_witness(data: bytes, offset: int) -> tuple[tuple[bytes, ...], int]:
    count, offset = read_varint(data, offset)
    items = []
    for _ in range(count):
        item, offset = read_var_bytes(data, offset)
        items.append(item)
    return tuple(items), offset


def deserialize_transaction_bytes(data: bytes) -> Transaction:
    """
    Decode a transaction from its consensus serialization.

    Raises:
        DecodeError: On truncated data, an unknown segwit flag, a segwit
            transaction without witnesses, or trailing bytes
    """
    raw_version, offset = read_bytes(data, 0, 4)
    version = struct.unpack("<i", raw_version)[0]

    inputs, offset = _read_inputs(data, offset)

    if inputs:
        outputs, offset = _read_outputs(data, offset)
    else:
        # Empty input vector: the zero byte was the segwit marker
        flag, offset = read_bytes(data, offset, 1)
        if flag[0] != 0x01:
            raise DecodeError(f"Unsupported segwit flag: {flag[0]}")

        inputs, offset = _read_inputs(data, offset)
        outputs, offset = _read_outputs(data, offset)

        for i, txin in enumerate(inputs):
            witness, offset = _read_witness(data, offset)
            inputs[i] = TxIn(
                previous_output=txin.previous_output,
                script_sig=txin.script_sig,
                sequence=txin.sequence,
                witness=witness,
            )

        if inputs and not any(txin.witness for txin in inputs):
            raise DecodeError("Witness flag set but no witnesses present")

    raw_locktime, offset = read_bytes(data, offset, 4)
    locktime = struct.unpack("<I", raw_locktime)[0]

    if offset != len(data):
        raise DecodeError(f"Data not consumed entirely: {len(data) - offset} trailing bytes")

    logger.debug(
        f"Decoded transaction v{version}: {len(inputs)} inputs, {len(outputs)} outputs, "
        f"locktime {locktime}"
    )
    return Transaction(
        version=version,
        inputs=tuple(inputs),
        outputs=tuple(outputs),
        locktime=locktime,
    )


def deserialize_transaction(tx_hex: str) -> Transaction:
    """
    Decode a transaction from hex.

    Args:
        tx_hex: Raw transaction hex (case-insensitive, no separators)

    Returns:
        The decoded Transaction

    Raises:
        DecodeError: If the hex or the consensus encoding is malformed
    """
    if len(tx_hex) % 2 != 0:
        raise DecodeError(f"Odd-length hex string ({len(tx_hex)} characters)")
    if not _HEX_RE.fullmatch(tx_hex):
        raise DecodeError("Transaction hex contains non-hexadecimal characters")

    return deserialize_transaction_bytes(bytes.fromhex(tx_hex))
