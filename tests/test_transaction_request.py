import json

import pytest

from ethrpc_types.bytes import Bytes
from ethrpc_types.transaction import AccessListItem
from ethrpc_types.transaction_request import (
    CallRequest,
    CallRequestBuilder,
    TransactionCondition,
    TransactionRequest,
    TransactionRequestBuilder,
)
from ethrpc_types.uint import H160, H256, U256

CALL_REQUEST_JSON = """{
  "to": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203"
}"""

TX_REQUEST_JSON = """{
  "from": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203",
  "condition": {
    "block": 5
  }
}"""


def _call_request():
    return CallRequest(
        to=H160.from_low_u64_be(5),
        gas=U256(21_000),
        value=U256(5_000_000),
        data=Bytes(bytes.fromhex("010203")),
    )


def _tx_request():
    return TransactionRequest(
        from_=H160.from_low_u64_be(5),
        gas=U256(21_000),
        value=U256(5_000_000),
        data=Bytes(bytes.fromhex("010203")),
        condition=TransactionCondition.block(5),
    )


def test_should_serialize_call_request():
    assert json.dumps(_call_request().to_json(), indent=2) == CALL_REQUEST_JSON


def test_should_deserialize_call_request():
    deserialized = CallRequest.from_json(json.loads(CALL_REQUEST_JSON))
    assert deserialized.from_ is None
    assert deserialized.to == H160.from_low_u64_be(5)
    assert deserialized.gas == 21_000
    assert deserialized.gas_price is None
    assert deserialized.value == 5_000_000
    assert deserialized.data == bytes.fromhex("010203")


def test_should_serialize_transaction_request():
    assert json.dumps(_tx_request().to_json(), indent=2) == TX_REQUEST_JSON


def test_should_deserialize_transaction_request():
    deserialized = TransactionRequest.from_json(json.loads(TX_REQUEST_JSON))
    assert deserialized.from_ == H160.from_low_u64_be(5)
    assert deserialized.to is None
    assert deserialized.gas == 21_000
    assert deserialized.gas_price is None
    assert deserialized.value == 5_000_000
    assert deserialized.data == bytes.fromhex("010203")
    assert deserialized.nonce is None
    assert deserialized.condition == TransactionCondition.block(5)


def test_should_build_default_call_request():
    assert CallRequestBuilder().build() == CallRequest()


def test_should_build_call_request():
    built = (
        CallRequestBuilder()
        .to(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(bytes.fromhex("010203"))
        .build()
    )
    assert built == _call_request()


def test_should_build_default_transaction_request():
    assert TransactionRequestBuilder().build() == TransactionRequest()


def test_should_build_transaction_request():
    builder = (
        TransactionRequestBuilder()
        .from_(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(bytes.fromhex("010203"))
        .condition(TransactionCondition.block(5))
    )
    assert builder.build() == _tx_request()


def test_builder_classmethods_return_fresh_builders():
    assert CallRequest.builder().build() == CallRequest()
    assert TransactionRequest.builder().build() == TransactionRequest()


def test_default_call_request_serializes_to_empty_object():
    assert CallRequest().to_json() == {}


def test_default_transaction_request_has_zero_sender():
    assert TransactionRequest().to_json() == {
        "from": "0x0000000000000000000000000000000000000000"
    }


def test_condition_round_trip():
    for condition in (TransactionCondition.block(7), TransactionCondition.timestamp(1_600_000_000)):
        assert TransactionCondition.from_json(condition.to_json()) == condition
    assert TransactionCondition.timestamp(9).to_json() == {"time": 9}


@pytest.mark.parametrize(
    "raw",
    [{"blocks": 5}, {"block": 5, "time": 6}, {}, {"block": -1}, {"block": "5"}, "block"],
)
def test_condition_rejects_invalid(raw):
    with pytest.raises(ValueError):
        TransactionCondition.from_json(raw)


def test_transaction_request_requires_from():
    with pytest.raises(ValueError, match="missing field `from`"):
        TransactionRequest.from_json({"gas": "0x1"})


def test_access_list_and_fees_round_trip():
    item = AccessListItem(address=H160.from_low_u64_be(9), storage_keys=[H256.from_low_u64_be(1)])
    request = (
        CallRequestBuilder()
        .from_(H160.from_low_u64_be(1))
        .gas_price(3)
        .transaction_type(1)
        .access_list([item])
        .build()
    )
    encoded = request.to_json()
    assert list(encoded) == ["from", "gasPrice", "type", "accessList"]
    assert encoded["type"] == "0x1"
    assert CallRequest.from_json(encoded) == request


def test_builder_rejects_non_address():
    with pytest.raises(TypeError):
        CallRequestBuilder().to("0x05")