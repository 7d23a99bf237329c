import pytest

from ethrpc_types.parity_pending_transaction import (
    Comparison,
    FilterCondition,
    ParityPendingTransactionFilter,
    ParityPendingTransactionFilterBuilder,
    ToFilter,
)
from ethrpc_types.uint import H160, U256, U64


def test_empty_filter_serializes_to_nothing():
    assert ParityPendingTransactionFilter.builder().build().to_json() == {}


def test_from_is_equality_on_address():
    address = H160.from_low_u64_be(5)
    out = ParityPendingTransactionFilterBuilder().from_(address).build().to_json()
    assert out == {"from": {"eq": address.to_hex()}}


def test_to_action_means_contract_creation():
    out = ParityPendingTransactionFilterBuilder().to(ToFilter.action()).build().to_json()
    assert out == {"to": {"action": "contract_creation"}}


def test_to_address():
    address = H160.from_low_u64_be(9)
    assert ToFilter.address(address).to_json() == {"eq": address.to_hex()}


def test_plain_value_becomes_equal_condition():
    built = ParityPendingTransactionFilterBuilder().gas(21000).nonce(3).build()
    assert built.gas == FilterCondition(Comparison.EQUAL, U64(21000))
    assert built.nonce == FilterCondition(Comparison.EQUAL, U256(3))


def test_explicit_conditions_and_key_names():
    built = (
        ParityPendingTransactionFilterBuilder()
        .gas_price(FilterCondition(Comparison.GREATER_THAN, 7))
        .value(FilterCondition(Comparison.LOWER_THAN, U256(8)))
        .build()
    )
    out = built.to_json()
    assert out == {
        "gas_price": {"gt": U64(7).to_json()},
        "value": {"lt": U256(8).to_json()},
    }


def test_gas_out_of_range_rejected():
    with pytest.raises(ValueError):
        ParityPendingTransactionFilterBuilder().gas(1 << 64)


def test_to_requires_to_filter():
    with pytest.raises(TypeError):
        ParityPendingTransactionFilterBuilder().to(H160())