"""Account and storage proofs returned by eth_getProof."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .bytes import Bytes
from .uint import H256, U256

T = TypeVar("T")


def _expect_object(value: Any, name: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"invalid type: expected {name} object, got {value!r}")
    return value


def _required(obj: dict, key: str, parse: Callable[[Any], T]) -> T:
    if key not in obj:
        raise ValueError(f"missing field `{key}`")
    return parse(obj[key])


def _list_of(parse: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def parse_list(raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise ValueError(f"invalid type: expected an array, got {raw!r}")
        return [parse(item) for item in raw]

    return parse_list


@dataclass
class StorageProof:
    """A storage key, its value and the Merkle proof of it."""

    key: U256 = U256(0)
    value: U256 = U256(0)
    proof: list[Bytes] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "key": self.key.to_json(),
            "value": self.value.to_json(),
            "proof": [node.to_json() for node in self.proof],
        }

    @classmethod
    def from_json(cls, value: Any) -> StorageProof:
        obj = _expect_object(value, "a storage proof")
        return cls(
            key=_required(obj, "key", U256.from_json),
            value=_required(obj, "value", U256.from_json),
            proof=_required(obj, "proof", _list_of(Bytes.from_json)),
        )


@dataclass
class Proof:
    """An account's state together with Merkle proofs of it and of requested storage."""

    balance: U256 = U256(0)
    code_hash: H256 = H256()
    nonce: U256 = U256(0)
    storage_hash: H256 = H256()
    account_proof: list[Bytes] = field(default_factory=list)
    storage_proof: list[StorageProof] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "balance": self.balance.to_json(),
            "codeHash": self.code_hash.to_json(),
            "nonce": self.nonce.to_json(),
            "storageHash": self.storage_hash.to_json(),
            "accountProof": [node.to_json() for node in self.account_proof],
            "storageProof": [entry.to_json() for entry in self.storage_proof],
        }

    @classmethod
    def from_json(cls, value: Any) -> Proof:
        obj = _expect_object(value, "a proof")
        return cls(
            balance=_required(obj, "balance", U256.from_json),
            code_hash=_required(obj, "codeHash", H256.from_json),
            nonce=_required(obj, "nonce", U256.from_json),
            storage_hash=_required(obj, "storageHash", H256.from_json),
            account_proof=_required(obj, "accountProof", _list_of(Bytes.from_json)),
            storage_proof=_required(obj, "storageProof", _list_of(StorageProof.from_json)),
        )