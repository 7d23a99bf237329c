"""Blocks, block headers and the ways a block is identified."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar, Union

from .bytes import Bytes
from .uint import H160, H2048, H256, H64, U256, U64

T = TypeVar("T")

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def _expect_object(value: Any, name: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"invalid type: expected {name} object, got {value!r}")
    return value


def _required(obj: dict, key: str, parse: Callable[[Any], T]) -> T:
    if key not in obj:
        raise ValueError(f"missing field `{key}`")
    return parse(obj[key])


def _optional(obj: dict, key: str, parse: Callable[[Any], T]) -> Optional[T]:
    raw = obj.get(key)
    return None if raw is None else parse(raw)


def _list_of(parse: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def parse_list(raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise ValueError(f"invalid type: expected an array, got {raw!r}")
        return [parse(item) for item in raw]

    return parse_list


def _dump(value: Any) -> Any:
    return None if value is None else value.to_json()


class BlockTag(str, enum.Enum):
    """A symbolic block position."""

    LATEST = "latest"
    EARLIEST = "earliest"
    PENDING = "pending"


@dataclass(frozen=True)
class BlockNumber:
    """A block named by tag or by its number on the canonical chain."""

    value: Union[BlockTag, U64]

    def __post_init__(self) -> None:
        if isinstance(self.value, BlockTag):
            return
        if isinstance(self.value, str):
            object.__setattr__(self, "value", BlockTag(self.value))
        else:
            object.__setattr__(self, "value", U64(self.value))

    @classmethod
    def latest(cls) -> BlockNumber:
        return cls(BlockTag.LATEST)

    @classmethod
    def earliest(cls) -> BlockNumber:
        return cls(BlockTag.EARLIEST)

    @classmethod
    def pending(cls) -> BlockNumber:
        return cls(BlockTag.PENDING)

    @classmethod
    def of(cls, number: int) -> BlockNumber:
        return cls(U64(number))

    @property
    def number(self) -> Optional[U64]:
        return None if isinstance(self.value, BlockTag) else self.value

    def to_json(self) -> str:
        if isinstance(self.value, BlockTag):
            return self.value.value
        return f"0x{int(self.value):x}"

    @classmethod
    def from_json(cls, value: Any) -> BlockNumber:
        if not isinstance(value, str):
            raise ValueError(f"invalid type: expected a string, got {value!r}")
        for tag in BlockTag:
            if value == tag.value:
                return cls(tag)
        if not value.startswith("0x"):
            raise ValueError("invalid block number: missing 0x prefix")
        digits = value[2:]
        if not _HEX_DIGITS.fullmatch(digits):
            raise ValueError(f"invalid block number: invalid hex digits in {value!r}")
        number = int(digits, 16)
        if number >= 1 << 64:
            raise ValueError("invalid block number: number too large to fit in 64 bits")
        return cls(U64(number))


@dataclass(frozen=True)
class BlockId:
    """A block named by hash or by number."""

    value: Union[H256, BlockNumber]

    def __post_init__(self) -> None:
        if not isinstance(self.value, (H256, BlockNumber)):
            raise TypeError(f"a block is identified by H256 or BlockNumber, not {self.value!r}")

    @classmethod
    def from_hash(cls, block_hash: H256) -> BlockId:
        return cls(block_hash)

    @classmethod
    def from_number(cls, number: Union[BlockNumber, int]) -> BlockId:
        if not isinstance(number, BlockNumber):
            number = BlockNumber.of(number)
        return cls(number)

    def to_json(self) -> Any:
        if isinstance(self.value, H256):
            return {"blockHash": self.value.to_hex()}
        return self.value.to_json()


@dataclass(kw_only=True)
class BlockHeader:
    """A block header as returned by the node."""

    hash: Optional[H256]
    parent_hash: H256
    uncles_hash: H256
    author: H160
    state_root: H256
    transactions_root: H256
    receipts_root: H256
    number: Optional[U64]
    gas_used: U256
    gas_limit: U256
    base_fee_per_gas: Optional[U256]
    extra_data: Bytes
    logs_bloom: H2048
    timestamp: U256
    difficulty: U256
    mix_hash: Optional[H256]
    nonce: Optional[H64]

    @classmethod
    def from_json(cls, value: Any) -> BlockHeader:
        obj = _expect_object(value, "a block header")
        return cls(
            hash=_optional(obj, "hash", H256.from_json),
            parent_hash=_required(obj, "parentHash", H256.from_json),
            uncles_hash=_required(obj, "sha3Uncles", H256.from_json),
            author=_optional(obj, "miner", H160.from_json) or H160(),
            state_root=_required(obj, "stateRoot", H256.from_json),
            transactions_root=_required(obj, "transactionsRoot", H256.from_json),
            receipts_root=_required(obj, "receiptsRoot", H256.from_json),
            number=_optional(obj, "number", U64.from_json),
            gas_used=_required(obj, "gasUsed", U256.from_json),
            gas_limit=_required(obj, "gasLimit", U256.from_json),
            base_fee_per_gas=_optional(obj, "baseFeePerGas", U256.from_json),
            extra_data=_required(obj, "extraData", Bytes.from_json),
            logs_bloom=_required(obj, "logsBloom", H2048.from_json),
            timestamp=_required(obj, "timestamp", U256.from_json),
            difficulty=_required(obj, "difficulty", U256.from_json),
            mix_hash=_optional(obj, "mixHash", H256.from_json),
            nonce=_optional(obj, "nonce", H64.from_json),
        )

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "hash": _dump(self.hash),
            "parentHash": self.parent_hash.to_json(),
            "sha3Uncles": self.uncles_hash.to_json(),
            "miner": self.author.to_json(),
            "stateRoot": self.state_root.to_json(),
            "transactionsRoot": self.transactions_root.to_json(),
            "receiptsRoot": self.receipts_root.to_json(),
            "number": _dump(self.number),
            "gasUsed": self.gas_used.to_json(),
            "gasLimit": self.gas_limit.to_json(),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = self.base_fee_per_gas.to_json()
        out.update(
            {
                "extraData": self.extra_data.to_json(),
                "logsBloom": self.logs_bloom.to_json(),
                "timestamp": self.timestamp.to_json(),
                "difficulty": self.difficulty.to_json(),
                "mixHash": _dump(self.mix_hash),
                "nonce": _dump(self.nonce),
            }
        )
        return out


@dataclass
class Block:
    """A block as returned by the node; transactions are hashes or full objects."""

    hash: Optional[H256] = None
    parent_hash: H256 = H256()
    uncles_hash: H256 = H256()
    author: H160 = H160()
    state_root: H256 = H256()
    transactions_root: H256 = H256()
    receipts_root: H256 = H256()
    number: Optional[U64] = None
    gas_used: U256 = U256(0)
    gas_limit: U256 = U256(0)
    base_fee_per_gas: Optional[U256] = None
    extra_data: Bytes = Bytes()
    logs_bloom: Optional[H2048] = None
    timestamp: U256 = U256(0)
    difficulty: U256 = U256(0)
    total_difficulty: Optional[U256] = None
    seal_fields: list[Bytes] = field(default_factory=list)
    uncles: list[H256] = field(default_factory=list)
    transactions: list[Any] = field(default_factory=list)
    size: Optional[U256] = None
    mix_hash: Optional[H256] = None
    nonce: Optional[H64] = None

    @classmethod
    def from_json(
        cls, value: Any, parse_transaction: Optional[Callable[[Any], Any]] = None
    ) -> Block:
        """Parse a block; each transaction goes through parse_transaction if given."""
        obj = _expect_object(value, "a block")
        parse_tx = parse_transaction if parse_transaction is not None else (lambda raw: raw)
        return cls(
            hash=_optional(obj, "hash", H256.from_json),
            parent_hash=_required(obj, "parentHash", H256.from_json),
            uncles_hash=_required(obj, "sha3Uncles", H256.from_json),
            author=_optional(obj, "miner", H160.from_json) or H160(),
            state_root=_required(obj, "stateRoot", H256.from_json),
            transactions_root=_required(obj, "transactionsRoot", H256.from_json),
            receipts_root=_required(obj, "receiptsRoot", H256.from_json),
            number=_optional(obj, "number", U64.from_json),
            gas_used=_required(obj, "gasUsed", U256.from_json),
            gas_limit=_required(obj, "gasLimit", U256.from_json),
            base_fee_per_gas=_optional(obj, "baseFeePerGas", U256.from_json),
            extra_data=_required(obj, "extraData", Bytes.from_json),
            logs_bloom=_optional(obj, "logsBloom", H2048.from_json),
            timestamp=_required(obj, "timestamp", U256.from_json),
            difficulty=_required(obj, "difficulty", U256.from_json),
            total_difficulty=_optional(obj, "totalDifficulty", U256.from_json),
            seal_fields=_optional(obj, "sealFields", _list_of(Bytes.from_json)) or [],
            uncles=_required(obj, "uncles", _list_of(H256.from_json)),
            transactions=_required(obj, "transactions", _list_of(parse_tx)),
            size=_optional(obj, "size", U256.from_json),
            mix_hash=_optional(obj, "mixHash", H256.from_json),
            nonce=_optional(obj, "nonce", H64.from_json),
        )

    def to_json(self, dump_transaction: Optional[Callable[[Any], Any]] = None) -> dict[str, Any]:
        """Encode the block; each transaction goes through dump_transaction if given."""
        dump_tx = dump_transaction if dump_transaction is not None else (lambda tx: tx)
        out: dict[str, Any] = {
            "hash": _dump(self.hash),
            "parentHash": self.parent_hash.to_json(),
            "sha3Uncles": self.uncles_hash.to_json(),
            "miner": self.author.to_json(),
            "stateRoot": self.state_root.to_json(),
            "transactionsRoot": self.transactions_root.to_json(),
            "receiptsRoot": self.receipts_root.to_json(),
            "number": _dump(self.number),
            "gasUsed": self.gas_used.to_json(),
            "gasLimit": self.gas_limit.to_json(),
        }
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = self.base_fee_per_gas.to_json()
        out.update(
            {
                "extraData": self.extra_data.to_json(),
                "logsBloom": _dump(self.logs_bloom),
                "timestamp": self.timestamp.to_json(),
                "difficulty": self.difficulty.to_json(),
                "totalDifficulty": _dump(self.total_difficulty),
                "sealFields": [seal.to_json() for seal in self.seal_fields],
                "uncles": [uncle.to_json() for uncle in self.uncles],
                "transactions": [dump_tx(tx) for tx in self.transactions],
                "size": _dump(self.size),
                "mixHash": _dump(self.mix_hash),
                "nonce": _dump(self.nonce),
            }
        )
        return out