"""
Tests for the annotated transaction document.
"""

from __future__ import annotations

import json
import math

import pytest

from tests.conftest import (
    GENESIS_PUBKEY,
    GENESIS_TX_HEX,
    GENESIS_TXID,
    SEGWIT_PREV_TXID,
    SEGWIT_TX_HEX,
    SEGWIT_TXID,
    SEGWIT_WTXID,
)
from txinfo import constants
from txinfo.annotate import (
    SerializationError,
    annotate,
    format_btc,
    render_json,
    vsize_explanation,
    weight_explanation,
)
from txinfo.script import ScriptType
from txinfo.transaction import deserialize_transaction


def trailing_number(explanation: str) -> int:
    return int(explanation.rsplit("= ", 1)[1])


class TestFormatBtc:
    """Tests for BTC display formatting."""

    @pytest.mark.parametrize(
        "sats,expected",
        [
            (0, "0"),
            (1, "0.00000001"),
            (1_450_000, "0.0145"),
            (32_788_083, "0.32788083"),
            (100_000_000, "1"),
            (5_000_000_000, "50"),
            (2_100_000_000_000_000, "21000000"),
            (123_456_789, "1.23456789"),
        ],
    )
    def test_format(self, sats: int, expected: str) -> None:
        assert format_btc(sats) == expected


class TestExplanations:
    """Size and weight explanations embed the computed numbers."""

    def test_vsize_explanation_rounds_up(self) -> None:
        assert vsize_explanation(561) == "Transaction weight / 4 (rounded up) ---> 561 / 4 = 141"
        assert vsize_explanation(816) == "Transaction weight / 4 (rounded up) ---> 816 / 4 = 204"

    def test_weight_explanation(self) -> None:
        assert weight_explanation(113, 222) == (
            "Base transaction size * 3 + total transaction size ---> 113 * 3 + 222 = 561"
        )


class TestAnnotateLegacy:
    """Annotating the genesis coinbase transaction."""

    @pytest.fixture
    def response(self):
        return annotate(deserialize_transaction(GENESIS_TX_HEX))

    def test_identifiers(self, response) -> None:
        assert response.txid.txid == GENESIS_TXID
        assert response.txid.witnesstxid == GENESIS_TXID
        assert response.txid.what_is_txid == constants.WHAT_IS_TXID
        assert response.txid.what_is_witnesstxid == constants.WHAT_IS_WITNESS_TXID

    def test_version_and_locktime(self, response) -> None:
        assert response.version == 1
        assert response.locktime == 0
        assert response.what_is_locktime == constants.WHAT_IS_LOCKTIME

    def test_sizes(self, response) -> None:
        assert response.size.base_size == 204
        assert response.size.size == 204
        assert response.size.vsize == 204
        assert response.size.weight == 816
        assert response.size.block_weight == constants.BLOCK_WEIGHT_NOTE

    def test_input(self, response) -> None:
        assert len(response.input.inputs) == 1
        txin = response.input.inputs[0]
        assert txin.txid == "00" * 32
        assert txin.vout == 4294967295
        assert txin.sequence == 4294967295
        assert txin.witness == []
        assert txin.script_sig.startswith("04ffff001d0104455468652054696d6573")

    def test_output(self, response) -> None:
        assert len(response.output.output) == 1
        txout = response.output.output[0]
        assert txout.sats_value == 5_000_000_000
        assert txout.btc_value == "50"
        assert txout.script_pubkey == "41" + GENESIS_PUBKEY + "ac"
        assert txout.script == f"OP_PUSHBYTES_65 {GENESIS_PUBKEY} OP_CHECKSIG"
        assert txout.script_type == ScriptType.P2PK.value


class TestAnnotateSegwit:
    """Annotating a segwit transaction."""

    @pytest.fixture
    def tx(self):
        return deserialize_transaction(SEGWIT_TX_HEX)

    def test_identifiers_differ(self, tx) -> None:
        response = annotate(tx)
        assert response.txid.txid == SEGWIT_TXID
        assert response.txid.witnesstxid == SEGWIT_WTXID

    def test_size_explanations_use_own_numbers(self, tx) -> None:
        size = annotate(tx).size

        assert size.what_is_vsize == "Transaction weight / 4 (rounded up) ---> 561 / 4 = 141"
        assert size.what_is_weight == (
            "Base transaction size * 3 + total transaction size ---> 113 * 3 + 222 = 561"
        )
        assert trailing_number(size.what_is_vsize) == math.ceil(size.weight / 4)
        assert trailing_number(size.what_is_weight) == size.base_size * 3 + size.size

    def test_inputs_copied_verbatim(self, tx) -> None:
        txin = annotate(tx).input.inputs[0]
        assert txin.txid == SEGWIT_PREV_TXID
        assert txin.vout == 0
        assert txin.script_sig == ""
        assert txin.sequence == 0xFFFFFFFD
        assert txin.witness == [item.hex() for item in tx.inputs[0].witness]

    def test_outputs_order_and_classification(self, tx) -> None:
        outputs = annotate(tx).output.output
        assert [o.sats_value for o in outputs] == [out.value for out in tx.outputs]
        assert [o.btc_value for o in outputs] == ["0.32788083", "0.0145"]
        assert all(o.script_type == ScriptType.P2WPKH.value for o in outputs)
        assert outputs[0].script == "OP_0 OP_PUSHBYTES_20 ad57609ab92acbd3c1b5b0e2aae15ba6da7eabec"

    def test_explainers_attached_once(self, tx) -> None:
        response = annotate(tx)
        assert response.input.explainer.sequence == constants.INPUT_SEQUENCE
        assert response.input.explainer.witness == constants.INPUT_WITNESS
        assert response.output.explainer.value == constants.OUTPUT_VALUE
        assert response.output.explainer.script == constants.OUTPUT_SCRIPT

    def test_purity(self, tx) -> None:
        assert annotate(tx) == annotate(tx)
        assert render_json(annotate(tx)) == render_json(annotate(tx))

    def test_lengths_and_order_preserved(self, tx) -> None:
        response = annotate(tx)
        assert len(response.input.inputs) == len(tx.inputs)
        assert len(response.output.output) == len(tx.outputs)
        for annotated, source in zip(response.input.inputs, tx.inputs, strict=True):
            assert annotated.txid == source.previous_output.txid
            assert annotated.vout == source.previous_output.vout


class TestRenderJson:
    """Tests for the JSON document."""

    def test_document_schema(self) -> None:
        document = json.loads(render_json(annotate(deserialize_transaction(SEGWIT_TX_HEX))))

        assert list(document) == [
            "txid",
            "version",
            "size",
            "locktime",
            "what_is_locktime",
            "input",
            "output",
        ]
        assert list(document["txid"]) == [
            "txid",
            "what_is_txid",
            "witnesstxid",
            "what_is_witnesstxid",
        ]
        assert list(document["size"]) == [
            "base_size",
            "what_is_base_size",
            "size",
            "what_is_size",
            "vsize",
            "what_is_vsize",
            "weight",
            "what_is_weight",
            "block_weight",
        ]
        assert list(document["input"]) == ["explainer", "inputs"]
        assert list(document["input"]["explainer"]) == [
            "txid",
            "vout",
            "script_sig",
            "sequence",
            "witness",
        ]
        assert list(document["input"]["inputs"][0]) == [
            "txid",
            "vout",
            "script_sig",
            "sequence",
            "witness",
        ]
        assert list(document["output"]) == ["explainer", "output"]
        assert list(document["output"]["explainer"]) == ["value", "script_pubkey", "script"]
        assert list(document["output"]["output"][0]) == [
            "sats_value",
            "btc_value",
            "script_pubkey",
            "script",
            "script_type",
        ]
        assert document["locktime"] == 650412
        assert document["version"] == 2

    def test_pretty_printed(self) -> None:
        rendered = render_json(annotate(deserialize_transaction(GENESIS_TX_HEX)))
        assert rendered.startswith('{\n  "txid": {\n    "txid": ')

    def test_serialization_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        response = annotate(deserialize_transaction(GENESIS_TX_HEX))

        def broken_dump(*args, **kwargs):
            raise ValueError("cannot serialize")

        monkeypatch.setattr(type(response), "model_dump_json", broken_dump)
        with pytest.raises(SerializationError, match="cannot serialize"):
            render_json(response)
