"""Requests for calling contracts and sending transactions."""

from __future__ import annotations

import operator
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional, TypeVar

from .bytes import Bytes
from .transaction import AccessList, AccessListItem
from .uint import H160, U256, U64

T = TypeVar("T")

_CONDITION_KINDS = ("block", "time")


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


def _parse_access_list(raw: Any) -> AccessList:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    return [AccessListItem.from_json(item) for item in raw]


def _copy_access_list(access_list: Optional[Iterable[AccessListItem]]) -> Optional[AccessList]:
    return None if access_list is None else list(access_list)


def _u64(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw < 1 << 64:
        raise ValueError(f"invalid type: expected u64, got {raw!r}")
    return raw


def _address(address: Any) -> H160:
    if not isinstance(address, H160):
        raise TypeError(f"address must be H160, not {address!r}")
    return address


def _dump_optional_fields(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, item in pairs:
        if item is None:
            continue
        if key == "accessList":
            out[key] = [entry.to_json() for entry in item]
        elif key == "condition":
            out[key] = item.to_json()
        else:
            out[key] = item.to_json()
    return out


@dataclass(frozen=True)
class TransactionCondition:
    """A minimum block number ("block") or unix time ("time") for inclusion."""

    kind: str
    value: int

    def __post_init__(self) -> None:
        if self.kind not in _CONDITION_KINDS:
            raise ValueError(f"unknown condition kind {self.kind!r}, expected block or time")
        object.__setattr__(self, "value", _u64(operator.index(self.value)))

    @classmethod
    def block(cls, number: int) -> TransactionCondition:
        return cls("block", number)

    @classmethod
    def timestamp(cls, seconds: int) -> TransactionCondition:
        return cls("time", seconds)

    def to_json(self) -> dict[str, int]:
        return {self.kind: self.value}

    @classmethod
    def from_json(cls, value: Any) -> TransactionCondition:
        obj = _expect_object(value, "a transaction condition")
        if len(obj) != 1:
            raise ValueError("invalid type: expected an object with exactly one key")
        ((kind, raw),) = obj.items()
        if kind not in _CONDITION_KINDS:
            raise ValueError(f"unknown variant `{kind}`, expected `block` or `time`")
        return cls(kind, _u64(raw))


@dataclass
class CallRequest:
    """A contract call for eth_call or eth_estimateGas; `to` is needed for eth_call."""

    from_: Optional[H160] = None
    to: Optional[H160] = None
    gas: Optional[U256] = None
    gas_price: Optional[U256] = None
    value: Optional[U256] = None
    data: Optional[Bytes] = None
    transaction_type: Optional[U64] = None
    access_list: Optional[AccessList] = None
    max_fee_per_gas: Optional[U256] = None
    max_priority_fee_per_gas: Optional[U256] = None

    @classmethod
    def builder(cls) -> CallRequestBuilder:
        return CallRequestBuilder()

    def to_json(self) -> dict[str, Any]:
        return _dump_optional_fields(
            [
                ("from", self.from_),
                ("to", self.to),
                ("gas", self.gas),
                ("gasPrice", self.gas_price),
                ("value", self.value),
                ("data", self.data),
                ("type", self.transaction_type),
                ("accessList", self.access_list),
                ("maxFeePerGas", self.max_fee_per_gas),
                ("maxPriorityFeePerGas", self.max_priority_fee_per_gas),
            ]
        )

    @classmethod
    def from_json(cls, value: Any) -> CallRequest:
        obj = _expect_object(value, "a call request")
        return cls(
            from_=_optional(obj, "from", H160.from_json),
            to=_optional(obj, "to", H160.from_json),
            gas=_optional(obj, "gas", U256.from_json),
            gas_price=_optional(obj, "gasPrice", U256.from_json),
            value=_optional(obj, "value", U256.from_json),
            data=_optional(obj, "data", Bytes.from_json),
            transaction_type=_optional(obj, "type", U64.from_json),
            access_list=_optional(obj, "accessList", _parse_access_list),
            max_fee_per_gas=_optional(obj, "maxFeePerGas", U256.from_json),
            max_priority_fee_per_gas=_optional(obj, "maxPriorityFeePerGas", U256.from_json),
        )


class CallRequestBuilder:
    """Builds a CallRequest step by step; each setter returns the builder."""

    def __init__(self) -> None:
        self._request = CallRequest()

    def _set(self, **changes: Any) -> CallRequestBuilder:
        self._request = replace(self._request, **changes)
        return self

    def from_(self, address: H160) -> CallRequestBuilder:
        return self._set(from_=_address(address))

    def to(self, address: H160) -> CallRequestBuilder:
        return self._set(to=_address(address))

    def gas(self, gas: int) -> CallRequestBuilder:
        return self._set(gas=U256(gas))

    def gas_price(self, gas_price: int) -> CallRequestBuilder:
        return self._set(gas_price=U256(gas_price))

    def value(self, value: int) -> CallRequestBuilder:
        return self._set(value=U256(value))

    def data(self, data: bytes) -> CallRequestBuilder:
        return self._set(data=Bytes(data))

    def transaction_type(self, transaction_type: int) -> CallRequestBuilder:
        return self._set(transaction_type=U64(transaction_type))

    def access_list(self, access_list: Iterable[AccessListItem]) -> CallRequestBuilder:
        return self._set(access_list=list(access_list))

    def build(self) -> CallRequest:
        return replace(self._request, access_list=_copy_access_list(self._request.access_list))


@dataclass
class TransactionRequest:
    """Parameters for sending a transaction from an account the node manages."""

    from_: H160 = H160()
    to: Optional[H160] = None
    gas: Optional[U256] = None
    gas_price: Optional[U256] = None
    value: Optional[U256] = None
    data: Optional[Bytes] = None
    nonce: Optional[U256] = None
    condition: Optional[TransactionCondition] = None
    transaction_type: Optional[U64] = None
    access_list: Optional[AccessList] = None
    max_fee_per_gas: Optional[U256] = None
    max_priority_fee_per_gas: Optional[U256] = None

    @classmethod
    def builder(cls) -> TransactionRequestBuilder:
        return TransactionRequestBuilder()

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"from": self.from_.to_json()}
        out.update(
            _dump_optional_fields(
                [
                    ("to", self.to),
                    ("gas", self.gas),
                    ("gasPrice", self.gas_price),
                    ("value", self.value),
                    ("data", self.data),
                    ("nonce", self.nonce),
                    ("condition", self.condition),
                    ("type", self.transaction_type),
                    ("accessList", self.access_list),
                    ("maxFeePerGas", self.max_fee_per_gas),
                    ("maxPriorityFeePerGas", self.max_priority_fee_per_gas),
                ]
            )
        )
        return out

    @classmethod
    def from_json(cls, value: Any) -> TransactionRequest:
        obj = _expect_object(value, "a transaction request")
        return cls(
            from_=_required(obj, "from", H160.from_json),
            to=_optional(obj, "to", H160.from_json),
            gas=_optional(obj, "gas", U256.from_json),
            gas_price=_optional(obj, "gasPrice", U256.from_json),
            value=_optional(obj, "value", U256.from_json),
            data=_optional(obj, "data", Bytes.from_json),
            nonce=_optional(obj, "nonce", U256.from_json),
            condition=_optional(obj, "condition", TransactionCondition.from_json),
            transaction_type=_optional(obj, "type", U64.from_json),
            access_list=_optional(obj, "accessList", _parse_access_list),
            max_fee_per_gas=_optional(obj, "maxFeePerGas", U256.from_json),
            max_priority_fee_per_gas=_optional(obj, "maxPriorityFeePerGas", U256.from_json),
        )


class TransactionRequestBuilder:
    """Builds a TransactionRequest step by step; each setter returns the builder."""

    def __init__(self) -> None:
        self._request = TransactionRequest()

    def _set(self, **changes: Any) -> TransactionRequestBuilder:
        self._request = replace(self._request, **changes)
        return self

    def from_(self, address: H160) -> TransactionRequestBuilder:
        return self._set(from_=_address(address))

    def to(self, address: H160) -> TransactionRequestBuilder:
        return self._set(to=_address(address))

    def gas(self, gas: int) -> TransactionRequestBuilder:
        return self._set(gas=U256(gas))

    def value(self, value: int) -> TransactionRequestBuilder:
        return self._set(value=U256(value))

    def data(self, data: bytes) -> TransactionRequestBuilder:
        return self._set(data=Bytes(data))

    def nonce(self, nonce: int) -> TransactionRequestBuilder:
        return self._set(nonce=U256(nonce))

    def condition(self, condition: TransactionCondition) -> TransactionRequestBuilder:
        if not isinstance(condition, TransactionCondition):
            raise TypeError(f"expected a TransactionCondition, not {condition!r}")
        return self._set(condition=condition)

    def transaction_type(self, transaction_type: int) -> TransactionRequestBuilder:
        return self._set(transaction_type=U64(transaction_type))

    def access_list(self, access_list: Iterable[AccessListItem]) -> TransactionRequestBuilder:
        return self._set(access_list=list(access_list))

    def build(self) -> TransactionRequest:
        return replace(self._request, access_list=_copy_access_list(self._request.access_list))