import pytest

from ethrpc_types.block import Block, BlockHeader, BlockId, BlockNumber, BlockTag
from ethrpc_types.uint import H160, H256, U256, U64

BLOCK_HASH = "0x0e670ec64341771606e55d6b4ca35a1a6b75ee3d5145a99d05921026d1527331"
LOGS_BLOOM = "0x" + "0e670ec64341771606e55d6b4ca35a1a6b75ee3d5145a99d05921026d1527331" * 8


def _block_json():
    return {
        "miner": "0x0000000000000000000000000000000000000001",
        "number": "0x1b4",
        "hash": BLOCK_HASH,
        "parentHash": "0x9646252be9520f6e71339a8df9c55e4d7619deeb018d2a3f2d21fc165dde5eb5",
        "mixHash": "0x1010101010101010101010101010101010101010101010101010101010101010",
        "nonce": "0x0000000000000000",
        "sealFields": [
            "0xe04d296d2460cfb8472af2c5fd05b5a214109c25688d3704aed5484f9a7792f2",
            "0x00000000",
        ],
        "sha3Uncles": "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347",
        "logsBloom": LOGS_BLOOM,
        "transactionsRoot": "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421",
        "receiptsRoot": "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421",
        "stateRoot": "0xd5855eb08b3387c0af375e9cdb6acfc05eb8f519e419b874b6ff2ffda7ed1dff",
        "difficulty": "0x27f07",
        "totalDifficulty": "0x27f07",
        "extraData": "0x0000000000000000000000000000000000000000000000000000000000000000",
        "size": "0x27f07",
        "gasLimit": "0x9f759",
        "minGasPrice": "0x9f759",
        "gasUsed": "0x9f759",
        "timestamp": "0x54e34e8e",
        "transactions": [],
        "uncles": [],
    }


def test_block_miner():
    data = _block_json()
    block = Block.from_json(data)
    assert block.author == H160.from_low_u64_be(1)
    assert block.base_fee_per_gas is None

    data["miner"] = None
    block = Block.from_json(data)
    assert block.author == H160()

    del data["miner"]
    block = Block.from_json(data)
    assert block.author == H160()


def test_post_london_block():
    data = _block_json()
    data["baseFeePerGas"] = "0x7"
    block = Block.from_json(data)
    assert block.base_fee_per_gas == U256(7)
    assert block.to_json()["baseFeePerGas"] == "0x7"


def test_block_fields_parsed():
    block = Block.from_json(_block_json())
    assert block.number == U64(0x1B4)
    assert block.hash == H256.from_json(BLOCK_HASH)
    assert block.total_difficulty == U256(0x27F07)
    assert len(block.seal_fields) == 2
    assert block.logs_bloom.to_json() == LOGS_BLOOM


def test_block_round_trip():
    data = _block_json()
    data["baseFeePerGas"] = "0x7"
    block = Block.from_json(data)
    encoded = block.to_json()
    assert "minGasPrice" not in encoded
    assert Block.from_json(encoded) == block


def test_block_without_base_fee_omits_key():
    assert "baseFeePerGas" not in Block.from_json(_block_json()).to_json()


def test_block_seal_fields_default_to_empty():
    data = _block_json()
    del data["sealFields"]
    assert Block.from_json(data).seal_fields == []


def test_block_missing_required_field():
    data = _block_json()
    del data["uncles"]
    with pytest.raises(ValueError, match="uncles"):
        Block.from_json(data)


def test_block_transactions_parsed_and_dumped():
    data = _block_json()
    data["transactions"] = [BLOCK_HASH]
    block = Block.from_json(data, H256.from_json)
    assert block.transactions == [H256.from_json(BLOCK_HASH)]
    assert block.to_json(lambda tx: tx.to_json())["transactions"] == [BLOCK_HASH]


def _header_json():
    data = _block_json()
    for key in ("totalDifficulty", "sealFields", "uncles", "transactions", "size"):
        del data[key]
    return data


def test_block_header_parse_and_round_trip():
    header = BlockHeader.from_json(_header_json())
    assert header.author == H160.from_low_u64_be(1)
    assert header.gas_used == U256(0x9F759)
    assert BlockHeader.from_json(header.to_json()) == header


def test_block_header_requires_logs_bloom():
    data = _header_json()
    data["logsBloom"] = None
    with pytest.raises(ValueError):
        BlockHeader.from_json(data)


def test_serialize_deserialize_block_number():
    serialized = BlockNumber.latest().to_json()
    assert serialized == "latest"
    assert BlockNumber.from_json(serialized) == BlockNumber.latest()

    serialized = BlockNumber.earliest().to_json()
    assert serialized == "earliest"
    assert BlockNumber.from_json(serialized) == BlockNumber.earliest()

    serialized = BlockNumber.pending().to_json()
    assert serialized == "pending"
    assert BlockNumber.from_json(serialized) == BlockNumber.pending()

    serialized = BlockNumber.of(100).to_json()
    assert serialized == "0x64"
    assert BlockNumber.from_json(serialized) == BlockNumber.of(100)

    with pytest.raises(ValueError) as excinfo:
        BlockNumber.from_json("64")
    assert str(excinfo.value) == "invalid block number: missing 0x prefix"


def test_block_number_invalid_hex():
    with pytest.raises(ValueError, match="invalid block number"):
        BlockNumber.from_json("0xzz")
    with pytest.raises(ValueError, match="invalid block number"):
        BlockNumber.from_json("0x1" + "0" * 16)
    with pytest.raises(ValueError):
        BlockNumber.from_json(100)


def test_block_number_properties():
    assert BlockNumber.of(5).number == U64(5)
    assert BlockNumber.latest().number is None
    assert BlockNumber.latest().value is BlockTag.LATEST


def test_block_id_serialization():
    block_hash = H256.from_json(BLOCK_HASH)
    assert BlockId.from_hash(block_hash).to_json() == {"blockHash": BLOCK_HASH}
    assert BlockId.from_number(100).to_json() == "0x64"
    assert BlockId.from_number(BlockNumber.pending()).to_json() == "pending"


def test_block_id_rejects_other_types():
    with pytest.raises(TypeError):
        BlockId("latest")