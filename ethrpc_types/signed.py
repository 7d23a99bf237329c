"""Signed data and the parameters and results of offline transaction signing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .bytes import Bytes
from .transaction import AccessList
from .transaction_request import CallRequest
from .uint import H160, H256, U256, U64

T = TypeVar("T")

TRANSACTION_DEFAULT_GAS = U256(100_000)


def _required(obj: dict, key: str, parse: Callable[[Any], T]) -> T:
    if key not in obj:
        raise ValueError(f"missing field `{key}`")
    return parse(obj[key])


def _byte(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw <= 255:
        raise ValueError(f"invalid value: {raw!r}, expected u8")
    return raw


def _byte_list(raw: Any) -> bytes:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    return bytes(_byte(item) for item in raw)


@dataclass
class SignedData:
    """A signed message with its hash and signature parts (v in Electrum notation)."""

    message: bytes
    message_hash: H256
    v: int
    r: H256
    s: H256
    signature: Bytes

    def __post_init__(self) -> None:
        _byte(self.v)

    def to_json(self) -> dict[str, Any]:
        return {
            "message": list(self.message),
            "messageHash": self.message_hash.to_json(),
            "v": self.v,
            "r": self.r.to_json(),
            "s": self.s.to_json(),
            "signature": self.signature.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> SignedData:
        if not isinstance(value, dict):
            raise ValueError(f"invalid type: expected a signed data object, got {value!r}")
        return cls(
            message=_required(value, "message", _byte_list),
            message_hash=_required(value, "messageHash", H256.from_json),
            v=_required(value, "v", _byte),
            r=_required(value, "r", H256.from_json),
            s=_required(value, "s", H256.from_json),
            signature=_required(value, "signature", Bytes.from_json),
        )


@dataclass
class TransactionParameters:
    """Transaction data for signing; unset nonce, gas price and chain id are
    filled in by the signer. Gas defaults to 100,000."""

    nonce: Optional[U256] = None
    to: Optional[H160] = None
    gas: U256 = TRANSACTION_DEFAULT_GAS
    gas_price: Optional[U256] = None
    value: U256 = U256(0)
    data: Bytes = Bytes()
    chain_id: Optional[int] = None
    transaction_type: Optional[U64] = None
    access_list: Optional[AccessList] = None
    max_fee_per_gas: Optional[U256] = None
    max_priority_fee_per_gas: Optional[U256] = None

    @classmethod
    def from_call_request(cls, call: CallRequest) -> TransactionParameters:
        return cls(
            to=call.to,
            gas=TRANSACTION_DEFAULT_GAS if call.gas is None else call.gas,
            gas_price=call.gas_price,
            value=U256(0) if call.value is None else call.value,
            data=Bytes() if call.data is None else call.data,
            transaction_type=call.transaction_type,
            access_list=call.access_list,
            max_fee_per_gas=call.max_fee_per_gas,
            max_priority_fee_per_gas=call.max_priority_fee_per_gas,
        )

    def to_call_request(self) -> CallRequest:
        return CallRequest(
            from_=None,
            to=self.to,
            gas=self.gas,
            gas_price=self.gas_price,
            value=self.value,
            data=self.data,
            transaction_type=self.transaction_type,
            access_list=self.access_list,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
        )


@dataclass
class SignedTransaction:
    """An offline-signed transaction ready for eth_sendRawTransaction."""

    message_hash: H256
    v: int
    r: H256
    s: H256
    raw_transaction: Bytes
    transaction_hash: H256