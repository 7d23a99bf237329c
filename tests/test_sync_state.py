import pytest

from ethrpc_types.sync_state import SyncInfo, SyncState
from ethrpc_types.uint import U256

EXPECTED_INFO = SyncInfo(
    starting_block=U256(0x0), current_block=U256(0x42), highest_block=U256(0x9001)
)

RPC_INFO = {"currentBlock": "0x42", "highestBlock": "0x9001", "knownStates": "0x1337",
            "pulledStates": "0x13", "startingBlock": "0x0"}

SUBSCRIPTION_INFO = {"CurrentBlock": "0x42", "HighestBlock": "0x9001", "KnownStates": "0x1337",
                     "PulledStates": "0x13", "StartingBlock": "0x0"}


def test_should_deserialize_rpc_sync_info():
    value = SyncState.from_json(dict(RPC_INFO))
    assert value == SyncState.syncing(EXPECTED_INFO)
    assert value.is_syncing


def test_should_deserialize_subscription_sync_info():
    raw = {"syncing": True, "status": dict(SUBSCRIPTION_INFO)}
    assert SyncState.from_json(raw) == SyncState.syncing(EXPECTED_INFO)


def test_should_deserialize_boolean_not_syncing():
    value = SyncState.from_json(False)
    assert value == SyncState.not_syncing()
    assert not value.is_syncing


def test_should_deserialize_subscription_not_syncing():
    assert SyncState.from_json({"syncing": False}) == SyncState.not_syncing()


def test_should_not_deserialize_invalid_boolean_syncing():
    with pytest.raises(ValueError, match="got `true`"):
        SyncState.from_json(True)


def test_should_not_deserialize_invalid_subscription_syncing():
    with pytest.raises(ValueError, match="syncing = true"):
        SyncState.from_json({"syncing": True})


def test_should_not_deserialize_invalid_subscription_not_syncing():
    raw = {"syncing": False, "status": dict(SUBSCRIPTION_INFO)}
    with pytest.raises(ValueError):
        SyncState.from_json(raw)


def test_unmatched_value_is_rejected():
    with pytest.raises(ValueError, match="did not match any variant"):
        SyncState.from_json("syncing")


def test_serialize_not_syncing_is_false():
    assert SyncState.not_syncing().to_json() is False


def test_serialize_syncing_round_trip():
    state = SyncState.syncing(EXPECTED_INFO)
    dumped = state.to_json()
    assert dumped == {"startingBlock": "0x0", "currentBlock": "0x42", "highestBlock": "0x9001"}
    assert SyncState.from_json(dumped) == state


def test_sync_info_missing_field():
    with pytest.raises(ValueError, match="highestBlock"):
        SyncInfo.from_json({"startingBlock": "0x0", "currentBlock": "0x1"})