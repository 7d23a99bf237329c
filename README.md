# ethrpc_types

Typed Python models for the values exchanged with an Ethereum node over
JSON-RPC: blocks, transactions, receipts, logs and log filters, fee
history, sync state, account proofs, work packages, peer information,
pending-transaction filters and trace output.

Every model converts to and from the plain JSON values a node sends and
receives (`to_json()` and `from_json(...)`). Quantities are written as
`0x`-prefixed hexadecimal strings, hashes and addresses as fixed-width
`0x`-prefixed hexadecimal. Malformed input raises `ValueError`.

Fields whose JSON name is `from` are called `from_` in Python, and so are
the builder methods that set them.

## Installation

```
pip install ethrpc-types
```

Python 3.10 or later; no runtime dependencies.

## Quick look

Numbers and hashes:

```python
from ethrpc_types.uint import U256, H160

U256(256).to_json()               # "0x100"
U256.from_json("0x100")           # U256(256)
U256.from_json("1000")            # U256(1000), plain decimal strings are accepted
H160.from_low_u64_be(5).to_hex()  # "0x0000000000000000000000000000000000000005"
```

`U64`, `U128` and `U256` are `int` subclasses that reject values outside
their range. The hashes `H64`, `H128`, `H160`, `H256`, `H512`, `H520` and
`H2048` are immutable, ordered and hashable.

Block numbers and identifiers:

```python
from ethrpc_types.block import BlockNumber, BlockId

BlockNumber.latest().to_json()    # "latest"
BlockNumber.of(100).to_json()     # "0x64"
BlockNumber.from_json("0x64")     # BlockNumber.of(100)
BlockNumber.from_json("64")       # ValueError: invalid block number: missing 0x prefix
BlockId.from_number(100).to_json()  # "0x64"
```

A `BlockId` built from an `H256` encodes as `{"blockHash": "0x..."}`.
`Block.from_json(value, parse_transaction)` takes an optional function
applied to each entry of `transactions`, for example
`Transaction.from_json` when full transactions were requested;
`Block.to_json(dump_transaction)` is its counterpart.

Log filters:

```python
from ethrpc_types.block import BlockNumber
from ethrpc_types.log import FilterBuilder
from ethrpc_types.uint import H256

log_filter = (
    FilterBuilder()
    .from_block(BlockNumber.earliest())
    .topics([H256.from_low_u64_be(3)], None, None, None)
    .limit(10)
    .build()
)
log_filter.to_json()
# {"fromBlock": "earliest", "topics": ["0x00...03"], "limit": 10}
```

Setting a block hash clears the block range and the other way round.
Trailing unconstrained topic positions are dropped. `TopicFilter` can be
passed to `FilterBuilder.topic_filter` instead.

Call requests:

```python
from ethrpc_types.transaction_request import CallRequest
from ethrpc_types.uint import H160

request = (
    CallRequest.builder()
    .to(H160.from_low_u64_be(5))
    .gas(21_000)
    .value(5_000_000)
    .data(b"\x01\x02\x03")
    .build()
)
request.to_json()
# {"to": "0x00...05", "gas": "0x5208", "value": "0x4c4b40", "data": "0x010203"}
```

Sync state, as returned by `eth_syncing` or a sync subscription:

```python
from ethrpc_types.sync_state import SyncState

SyncState.from_json(False)        # SyncState.not_syncing()
SyncState.from_json(True)         # ValueError
```

Signature recovery data:

```python
from ethrpc_types.recovery import Recovery

raw_signature = bytes(range(64)) + bytes([28])
recovery = Recovery.from_raw_signature("Some data", raw_signature)
signature, recovery_id = recovery.as_signature()   # 64 bytes r || s, 1
```

`Recovery.from_raw_signature` raises `ParseSignatureError` (a
`ValueError`) when the signature is not exactly 65 bytes long.
`as_signature` returns `None` when `v` is not a valid recovery value.

## Modules

| Module | Contents |
| --- | --- |
| `uint` | `U64`, `U128`, `U256`, and the fixed hashes `H64` to `H2048` |
| `bytes` | `Bytes` (hex string), `BytesArray` (array of numbers) |
| `block` | `BlockTag`, `BlockNumber`, `BlockId`, `BlockHeader`, `Block` |
| `log` | `Log`, `Filter`, `FilterBuilder`, `TopicFilter` |
| `fee_history` | `FeeHistory` |
| `transaction_id` | `TransactionId` |
| `proof` | `Proof`, `StorageProof` |
| `parity_peers` | `ParityPeerType`, `ParityPeerInfo`, `PeerNetworkInfo`, `PeerProtocolsInfo`, `EthProtocolInfo`, `PipProtocolInfo` |
| `parity_pending_transaction` | `ParityPendingTransactionFilter` and its builder, `FilterCondition`, `Comparison`, `ToFilter` |
| `transaction` | `Transaction`, `Receipt`, `RawTransaction`, `AccessListItem` |
| `work` | `Work` |
| `sync_state` | `SyncInfo`, `SyncState` |
| `transaction_request` | `CallRequest`, `TransactionRequest`, their builders, `TransactionCondition` |
| `signed` | `SignedData`, `SignedTransaction`, `TransactionParameters` |
| `trace_filtering` | `TraceFilter` and its builder, `Trace`, the actions `Call`, `Create`, `Suicide`, `Reward`, their results, `parse_action`, `parse_result` |
| `traces` | `TraceType`, `BlockTrace`, `TransactionTrace`, `StateDiff`, `AccountDiff`, `Diff`, `VMTrace` and its parts |
| `recovery` | `Recovery`, `RecoveryMessage`, `ParseSignatureError` |

## What this package does not do

It only describes and converts data. It does not connect to a node or send
requests, does not hash, sign or RLP-encode transactions, and does not
recover addresses from signatures: `Recovery` holds and reshapes the
signature parts for a cryptography library to use.

## Running the tests

```
pip install -e ".[test]"
pytest
```