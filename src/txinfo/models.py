"""
Response models for the annotated transaction document.

Field names and nesting are the JSON contract of `txinfo gettxinfo`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TxIdInfo(BaseModel):
    txid: str = Field(..., min_length=64, max_length=64)
    what_is_txid: str
    witnesstxid: str = Field(..., min_length=64, max_length=64)
    what_is_witnesstxid: str

    model_config = {"frozen": True}


class SizeInfo(BaseModel):
    base_size: int = Field(..., ge=0)
    what_is_base_size: str
    size: int = Field(..., ge=0)
    what_is_size: str
    vsize: int = Field(..., ge=0)
    what_is_vsize: str
    weight: int = Field(..., ge=0)
    what_is_weight: str
    block_weight: str

    model_config = {"frozen": True}


class TxInExplainer(BaseModel):
    txid: str
    vout: str
    script_sig: str
    sequence: str
    witness: str

    model_config = {"frozen": True}


class TxInResponse(BaseModel):
    txid: str
    vout: int = Field(..., ge=0)
    script_sig: str  # hex
    sequence: int = Field(..., ge=0)
    witness: list[str] = Field(default_factory=list)  # hex stack items

    model_config = {"frozen": True}


class TxInput(BaseModel):
    explainer: TxInExplainer
    inputs: list[TxInResponse]

    model_config = {"frozen": True}


class TxOutExplainer(BaseModel):
    value: str
    script_pubkey: str
    script: str

    model_config = {"frozen": True}


class TxOutResponse(BaseModel):
    sats_value: int = Field(..., ge=0)
    btc_value: str
    script_pubkey: str  # hex
    script: str  # assembly
    script_type: str

    model_config = {"frozen": True}


class TxOutput(BaseModel):
    explainer: TxOutExplainer
    output: list[TxOutResponse]

    model_config = {"frozen": True}


class TransactionResponse(BaseModel):
    """Human-annotated breakdown of a single transaction."""

    txid: TxIdInfo
    version: int
    size: SizeInfo
    locktime: int = Field(..., ge=0)
    what_is_locktime: str
    input: TxInput
    output: TxOutput

    model_config = {"frozen": True}
