"""Transactions, receipts and access lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from .bytes import Bytes
from .log import Log
from .uint import H160, H2048, H256, U256, U64

T = TypeVar("T")


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


@dataclass
class AccessListItem:
    """An address and the storage keys a transaction accesses in it."""

    address: H160 = H160()
    storage_keys: list[H256] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "storageKeys": [key.to_json() for key in self.storage_keys],
        }

    @classmethod
    def from_json(cls, value: Any) -> AccessListItem:
        obj = _expect_object(value, "an access list item")
        return cls(
            address=_required(obj, "address", H160.from_json),
            storage_keys=_required(obj, "storageKeys", _list_of(H256.from_json)),
        )


AccessList = list[AccessListItem]

_parse_access_list = _list_of(AccessListItem.from_json)


def _dump_access_list(access_list: AccessList) -> list[dict[str, Any]]:
    return [item.to_json() for item in access_list]


@dataclass
class Transaction:
    """A transaction, pending or included in a block."""

    hash: H256 = H256()
    nonce: U256 = U256(0)
    block_hash: Optional[H256] = None
    block_number: Optional[U64] = None
    transaction_index: Optional[U64] = None
    from_: Optional[H160] = None
    to: Optional[H160] = None
    value: U256 = U256(0)
    gas_price: Optional[U256] = None
    gas: U256 = U256(0)
    input: Bytes = Bytes()
    v: Optional[U64] = None
    r: Optional[U256] = None
    s: Optional[U256] = None
    raw: Optional[Bytes] = None
    transaction_type: Optional[U64] = None
    access_list: Optional[AccessList] = None
    max_fee_per_gas: Optional[U256] = None
    max_priority_fee_per_gas: Optional[U256] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "hash": self.hash.to_json(),
            "nonce": self.nonce.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "transactionIndex": _dump(self.transaction_index),
        }
        if self.from_ is not None:
            out["from"] = self.from_.to_json()
        out.update(
            {
                "to": _dump(self.to),
                "value": self.value.to_json(),
                "gasPrice": _dump(self.gas_price),
                "gas": self.gas.to_json(),
                "input": self.input.to_json(),
            }
        )
        optional = {
            "v": self.v,
            "r": self.r,
            "s": self.s,
            "raw": self.raw,
            "type": self.transaction_type,
            "maxFeePerGas": None,
            "maxPriorityFeePerGas": None,
        }
        for key in ("v", "r", "s", "raw", "type"):
            if optional[key] is not None:
                out[key] = optional[key].to_json()
        if self.access_list is not None:
            out["accessList"] = _dump_access_list(self.access_list)
        if self.max_fee_per_gas is not None:
            out["maxFeePerGas"] = self.max_fee_per_gas.to_json()
        if self.max_priority_fee_per_gas is not None:
            out["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas.to_json()
        return out

    @classmethod
    def from_json(cls, value: Any) -> Transaction:
        obj = _expect_object(value, "a transaction")
        return cls(
            hash=_required(obj, "hash", H256.from_json),
            nonce=_required(obj, "nonce", U256.from_json),
            block_hash=_optional(obj, "blockHash", H256.from_json),
            block_number=_optional(obj, "blockNumber", U64.from_json),
            transaction_index=_optional(obj, "transactionIndex", U64.from_json),
            from_=_optional(obj, "from", H160.from_json),
            to=_optional(obj, "to", H160.from_json),
            value=_required(obj, "value", U256.from_json),
            gas_price=_optional(obj, "gasPrice", U256.from_json),
            gas=_required(obj, "gas", U256.from_json),
            input=_required(obj, "input", Bytes.from_json),
            v=_optional(obj, "v", U64.from_json),
            r=_optional(obj, "r", U256.from_json),
            s=_optional(obj, "s", U256.from_json),
            raw=_optional(obj, "raw", Bytes.from_json),
            transaction_type=_optional(obj, "type", U64.from_json),
            access_list=_optional(obj, "accessList", _parse_access_list),
            max_fee_per_gas=_optional(obj, "maxFeePerGas", U256.from_json),
            max_priority_fee_per_gas=_optional(obj, "maxPriorityFeePerGas", U256.from_json),
        )


@dataclass
class Receipt:
    """The receipt of an executed transaction.

    A missing sender becomes the zero address and a missing recipient None,
    for nodes that do not report them."""

    transaction_hash: H256 = H256()
    transaction_index: U64 = U64(0)
    block_hash: Optional[H256] = None
    block_number: Optional[U64] = None
    from_: H160 = H160()
    to: Optional[H160] = None
    cumulative_gas_used: U256 = U256(0)
    gas_used: Optional[U256] = None
    contract_address: Optional[H160] = None
    logs: list[Log] = field(default_factory=list)
    status: Optional[U64] = None
    root: Optional[H256] = None
    logs_bloom: H2048 = H2048()
    transaction_type: Optional[U64] = None
    effective_gas_price: Optional[U256] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transactionHash": self.transaction_hash.to_json(),
            "transactionIndex": self.transaction_index.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "from": self.from_.to_json(),
            "to": _dump(self.to),
            "cumulativeGasUsed": self.cumulative_gas_used.to_json(),
            "gasUsed": _dump(self.gas_used),
            "contractAddress": _dump(self.contract_address),
            "logs": [log.to_json() for log in self.logs],
            "status": _dump(self.status),
            "root": _dump(self.root),
            "logsBloom": self.logs_bloom.to_json(),
        }
        if self.transaction_type is not None:
            out["type"] = self.transaction_type.to_json()
        out["effectiveGasPrice"] = _dump(self.effective_gas_price)
        return out

    @classmethod
    def from_json(cls, value: Any) -> Receipt:
        obj = _expect_object(value, "a receipt")
        return cls(
            transaction_hash=_required(obj, "transactionHash", H256.from_json),
            transaction_index=_required(obj, "transactionIndex", U64.from_json),
            block_hash=_optional(obj, "blockHash", H256.from_json),
            block_number=_optional(obj, "blockNumber", U64.from_json),
            from_=H160.from_json(obj["from"]) if "from" in obj else H160(),
            to=_optional(obj, "to", H160.from_json),
            cumulative_gas_used=_required(obj, "cumulativeGasUsed", U256.from_json),
            gas_used=_optional(obj, "gasUsed", U256.from_json),
            contract_address=_optional(obj, "contractAddress", H160.from_json),
            logs=_required(obj, "logs", _list_of(Log.from_json)),
            status=_optional(obj, "status", U64.from_json),
            root=_optional(obj, "root", H256.from_json),
            logs_bloom=_required(obj, "logsBloom", H2048.from_json),
            transaction_type=_optional(obj, "type", U64.from_json),
            effective_gas_price=_optional(obj, "effectiveGasPrice", U256.from_json),
        )


@dataclass
class RawTransaction:
    """A signed transaction not yet sent, as raw bytes and as details."""

    raw: Bytes = Bytes()
    tx: Transaction = field(default_factory=Transaction)

    def to_json(self) -> dict[str, Any]:
        return {"raw": self.raw.to_json(), "tx": self.tx.to_json()}

    @classmethod
    def from_json(cls, value: Any) -> RawTransaction:
        obj = _expect_object(value, "a raw transaction")
        return cls(
            raw=_required(obj, "raw", Bytes.from_json),
            tx=_required(obj, "tx", Transaction.from_json),
        )