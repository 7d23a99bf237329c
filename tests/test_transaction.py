import json

import pytest

from ethrpc_types.bytes import Bytes
from ethrpc_types.transaction import AccessListItem, RawTransaction, Receipt, Transaction
from ethrpc_types.uint import H160, H2048, H256, U256, U64

ZERO_BLOOM = "0x" + "00" * 256

RECEIPT_BLOCK_HASH = "0x83eaba432089a0bfe99e9fc9022d1cfcb78f95f407821be81737c84ae0b439c5"
RECEIPT_CONTRACT = "0x03d8c4566478a6e1bf75650248accce16a98509f"
SENDER = "0x407d73d8a49eeb85d32cf465507dd71d507100c1"
RECIPIENT = "0x853f43d8a49eeb85d32cf465507dd71d507100c1"
RECEIPT_TX_HASH = "0x422fb0d5953c0c48cbb42fb58e1c30f5e150441c68374d70ca7d4f191fd56f26"

PARITY_RAW = "0xd46e8dd67c5d32be8d46e8dd67c5d32be8058bb8eb970870f072445675058bb8eb970870f072445675"
PARITY_HASH = "0xc6ef2fc5426d6ad6fd9e2a26abeab0aa2411b7ab17f30a99d3cb96aed1d1055b"
PARITY_BLOCK_HASH = "0xbeab0aa2411b7ab17f30a99d3cb9c6ef2fc5426d6ad6fd9e2a26a6aed1d1055b"
PARITY_INPUT = "0x603880600c6000396000f300603880600c6000396000f3603880600c6000396000f360"

GETH_RAW = (
    "0xf85d01018094f3b3138e5eb1c75b43994d1bb760e2f9f735789680801ca06484d00575e961a7db35ebe5"
    "badaaca5cb7ee65d1f2f22f22da87c238b99d30da07a85d65797e4b555c1d3f64beebb2cb6f16a6fbd40c43"
    "cc48451eaf85305f66e"
)
GETH_HASH = "0x0a32fb4e18bc6f7266a164579237b1b5c74271d453c04eab70444ca367d38418"
GETH_TO = "0xf3b3138e5eb1c75b43994d1bb760e2f9f7357896"
GETH_R = "0x6484d00575e961a7db35ebe5badaaca5cb7ee65d1f2f22f22da87c238b99d30d"
GETH_S = "0x7a85d65797e4b555c1d3f64beebb2cb6f16a6fbd40c43cc48451eaf85305f66e"


def receipt_json(**overrides):
    base = dict(
        blockHash=RECEIPT_BLOCK_HASH, blockNumber="0x38", contractAddress=RECEIPT_CONTRACT,
        cumulativeGasUsed="0x927c0", gasUsed="0x927c0", logs=[], logsBloom=ZERO_BLOOM,
        root=None, transactionHash=RECEIPT_TX_HASH, transactionIndex="0x0",
        effectiveGasPrice="0x100",
    )
    base["from"] = SENDER
    base["to"] = RECIPIENT
    base.update(overrides)
    return base


def test_deserialize_receipt():
    receipt = Receipt.from_json(json.loads(json.dumps(receipt_json())))
    assert receipt.block_number == U64(0x38)
    assert receipt.from_ == H160.from_hex(SENDER)
    assert receipt.to == H160.from_hex(RECIPIENT)
    assert receipt.cumulative_gas_used == 0x927C0
    assert receipt.effective_gas_price == 0x100
    assert receipt.status is None
    assert receipt.root is None
    assert receipt.logs_bloom == H2048()


def test_deserialize_receipt_without_from_to():
    raw = receipt_json(status="0x1")
    del raw["from"]
    del raw["to"]
    receipt = Receipt.from_json(raw)
    assert receipt.from_ == H160()
    assert receipt.to is None
    assert receipt.status == U64(1)


def test_deserialize_receipt_with_status():
    receipt = Receipt.from_json(receipt_json(status="0x1"))
    assert receipt.status == 1


def test_deserialize_receipt_without_to():
    receipt = Receipt.from_json(receipt_json(to=None, status="0x1"))
    assert receipt.to is None
    assert receipt.from_ == H160.from_hex(SENDER)


def test_deserialize_receipt_without_gas():
    receipt = Receipt.from_json(receipt_json(gasUsed=None, status="0x1"))
    assert receipt.gas_used is None


def test_receipt_null_from_is_rejected():
    with pytest.raises(ValueError):
        Receipt.from_json(receipt_json(**{"from": None}))


def test_receipt_missing_logs_bloom_is_rejected():
    raw = receipt_json()
    del raw["logsBloom"]
    with pytest.raises(ValueError, match="logsBloom"):
        Receipt.from_json(raw)


def test_receipt_round_trip():
    receipt = Receipt.from_json(receipt_json(status="0x1", type="0x2"))
    dumped = receipt.to_json()
    assert dumped["type"] == "0x2"
    assert Receipt.from_json(dumped) == receipt


def test_receipt_omits_missing_type():
    assert "type" not in Receipt.from_json(receipt_json()).to_json()


def test_deserialize_signed_tx_parity():
    tx_body = dict(
        hash=PARITY_HASH, nonce="0x0", blockHash=PARITY_BLOCK_HASH, blockNumber="0x15df",
        transactionIndex="0x1", to=RECIPIENT, value="0x7f110", gas="0x7f110",
        gasPrice="0x09184e72a000", input=PARITY_INPUT, s="0x777",
    )
    tx_body["from"] = SENDER
    raw = {"raw": PARITY_RAW, "tx": tx_body}
    tx = RawTransaction.from_json(raw)
    assert tx.raw == Bytes.fromhex(PARITY_RAW[2:])
    assert tx.tx.s == U256(0x777)
    assert tx.tx.r is None
    assert tx.tx.block_number == U64(0x15DF)
    assert tx.tx.gas_price == 0x09184E72A000
    assert tx.tx.from_ == H160.from_hex(SENDER)


def test_deserialize_signed_tx_geth():
    tx_body = dict(
        gas="0x0", gasPrice="0x1", hash=GETH_HASH, input="0x", nonce="0x1",
        to=GETH_TO, r=GETH_R, s=GETH_S, v="0x1c", value="0x0",
    )
    raw = {"raw": GETH_RAW, "tx": tx_body}
    tx = RawTransaction.from_json(raw)
    assert tx.tx.v == U64(0x1C)
    assert tx.tx.from_ is None
    assert tx.tx.block_hash is None
    assert tx.tx.input == b""
    assert RawTransaction.from_json(tx.to_json()) == tx


def test_transaction_skips_unset_optional_fields():
    dumped = Transaction().to_json()
    for key in ("from", "v", "r", "s", "raw", "type", "accessList", "maxFeePerGas"):
        assert key not in dumped
    assert dumped["blockHash"] is None
    assert dumped["to"] is None


def test_transaction_with_access_list_round_trip():
    item = AccessListItem(H160.from_low_u64_be(5), [H256.from_low_u64_be(1)])
    tx = Transaction(
        hash=H256.from_low_u64_be(9),
        transaction_type=U64(1),
        access_list=[item],
        max_fee_per_gas=U256(10),
        max_priority_fee_per_gas=U256(2),
    )
    dumped = tx.to_json()
    assert dumped["type"] == "0x1"
    assert dumped["accessList"] == [
        {"address": item.address.to_hex(), "storageKeys": [item.storage_keys[0].to_hex()]}
    ]
    assert Transaction.from_json(dumped) == tx


def test_transaction_missing_hash_is_rejected():
    with pytest.raises(ValueError, match="hash"):
        Transaction.from_json({"nonce": "0x0", "value": "0x0", "gas": "0x0", "input": "0x"})