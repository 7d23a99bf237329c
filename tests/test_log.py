import pytest

from ethrpc_types.block import BlockNumber
from ethrpc_types.bytes import Bytes
from ethrpc_types.log import Filter, FilterBuilder, Log, TopicFilter
from ethrpc_types.uint import H160, H256, U256, U64


def make_log(log_type=None, removed=None):
    return Log(
        address=H160.from_low_u64_be(1),
        topics=[],
        data=Bytes(b""),
        block_hash=H256.from_low_u64_be(2),
        block_number=U64(1),
        transaction_hash=H256.from_low_u64_be(3),
        transaction_index=U64(0),
        log_index=U256(0),
        transaction_log_index=U256(0),
        log_type=log_type,
        removed=removed,
    )


def test_is_removed_removed_true():
    assert make_log(removed=True).is_removed() is True


def test_is_removed_removed_false():
    assert make_log(removed=False).is_removed() is False


def test_is_removed_log_type_removed():
    assert make_log(log_type="removed").is_removed() is True


def test_is_removed_log_type_mined():
    assert make_log(log_type="mined").is_removed() is False


def test_is_removed_log_type_and_removed_none():
    assert make_log().is_removed() is False


def test_removed_flag_wins_over_log_type():
    assert make_log(log_type="removed", removed=False).is_removed() is False


def test_does_topic_filter_set_topics_correctly():
    topic_filter = TopicFilter(
        topic0=H256.from_low_u64_be(3),
        topic1=[H256.from_low_u64_be(n) for n in (5, 8)],
        topic2=H256.from_low_u64_be(13),
        topic3=None,
    )
    filter0 = FilterBuilder().topic_filter(topic_filter).build()
    filter1 = (
        FilterBuilder()
        .topics(
            [H256.from_low_u64_be(3)],
            [H256.from_low_u64_be(n) for n in (5, 8)],
            [H256.from_low_u64_be(13)],
            None,
        )
        .build()
    )
    assert filter0 == filter1
    assert len(filter0.topics) == 3


def test_log_round_trip():
    log = make_log(log_type="mined")
    assert Log.from_json(log.to_json()) == log


def test_log_missing_optional_fields():
    raw = {
        "address": H160.from_low_u64_be(1).to_hex(),
        "topics": [H256.from_low_u64_be(9).to_hex()],
        "data": "0x0102",
    }
    log = Log.from_json(raw)
    assert log.block_hash is None
    assert log.removed is None
    assert log.topics == [H256.from_low_u64_be(9)]
    assert log.data == b"\x01\x02"


def test_log_missing_required_field():
    with pytest.raises(ValueError, match="data"):
        Log.from_json({"address": H160().to_hex(), "topics": []})


def test_empty_filter_serializes_to_empty_object():
    assert FilterBuilder().build().to_json() == {}


def test_single_address_serializes_as_value():
    address = H160.from_low_u64_be(7)
    out = FilterBuilder().address([address]).build().to_json()
    assert out == {"address": address.to_hex()}


def test_many_addresses_serialize_as_array():
    a, b = H160.from_low_u64_be(7), H160.from_low_u64_be(8)
    out = FilterBuilder().address([a, b]).build().to_json()
    assert out == {"address": [a.to_hex(), b.to_hex()]}


def test_no_addresses_serialize_as_null():
    assert FilterBuilder().address([]).build().to_json() == {"address": None}


def test_topics_drop_trailing_none():
    topic = H256.from_low_u64_be(4)
    out = FilterBuilder().topics(None, [topic], None, None).build().to_json()
    assert out == {"topics": [None, topic.to_hex()]}


def test_block_hash_clears_range_and_back():
    block_hash = H256.from_low_u64_be(2)
    builder = FilterBuilder().from_block(BlockNumber.latest()).to_block(BlockNumber.of(5))
    built = builder.block_hash(block_hash).build()
    assert built == Filter(block_hash=block_hash)
    built = builder.from_block(BlockNumber.earliest()).build()
    assert built.block_hash is None
    assert built.to_json() == {"fromBlock": "earliest"}


def test_filter_range_and_limit():
    out = (
        FilterBuilder()
        .from_block(BlockNumber.earliest())
        .to_block(BlockNumber.latest())
        .limit(10)
        .build()
        .to_json()
    )
    assert out == {"fromBlock": "earliest", "toBlock": "latest", "limit": 10}


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        FilterBuilder().limit(-1)