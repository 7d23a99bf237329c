"""Types for the transaction-trace filtering API (trace_filter)."""

from __future__ import annotations

import enum
import operator
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from .block import BlockNumber
from .bytes import Bytes
from .uint import H160, H256, U256

T = TypeVar("T")
E = TypeVar("E", bound=enum.Enum)

_U64_BITS = 64
_PARSE_ERRORS = (ValueError, TypeError)


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


def _unsigned(bits: Optional[int] = None) -> Callable[[Any], int]:
    def parse(raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            raise ValueError(f"invalid value: expected an unsigned integer, got {raw!r}")
        if bits is not None and raw.bit_length() > bits:
            raise ValueError(f"invalid value: {raw} does not fit in {bits} bits")
        return raw

    return parse


def _unsigned_list(raw: Any) -> list[int]:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    parse = _unsigned()
    return [parse(item) for item in raw]


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"invalid type: expected a string, got {raw!r}")
    return raw


def _variant(kind: type[E]) -> Callable[[Any], E]:
    def parse(raw: Any) -> E:
        for member in kind:
            if member.value == raw:
                return member
        expected = ", ".join(f"`{member.value}`" for member in kind)
        raise ValueError(f"unknown variant {raw!r}, expected one of {expected}")

    return parse


def _dump(value: Any) -> Any:
    return None if value is None else value.to_json()


def _non_negative(value: int, name: str) -> int:
    number = operator.index(value)
    if number < 0:
        raise ValueError(f"{name} must not be negative, got {number}")
    return number


@dataclass(frozen=True)
class TraceFilter:
    """A trace filter, as sent to the node; unset fields are left out."""

    from_block: Optional[BlockNumber] = None
    to_block: Optional[BlockNumber] = None
    from_address: Optional[tuple[H160, ...]] = None
    to_address: Optional[tuple[H160, ...]] = None
    after: Optional[int] = None
    count: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.from_address is not None:
            out["fromAddress"] = [address.to_json() for address in self.from_address]
        if self.to_address is not None:
            out["toAddress"] = [address.to_json() for address in self.to_address]
        if self.after is not None:
            out["after"] = self.after
        if self.count is not None:
            out["count"] = self.count
        return out


class TraceFilterBuilder:
    """Builds a TraceFilter step by step; each setter returns the builder."""

    def __init__(self) -> None:
        self._filter = TraceFilter()

    def _set(self, **changes: Any) -> TraceFilterBuilder:
        self._filter = replace(self._filter, **changes)
        return self

    def from_block(self, block: BlockNumber) -> TraceFilterBuilder:
        return self._set(from_block=block)

    def to_block(self, block: BlockNumber) -> TraceFilterBuilder:
        return self._set(to_block=block)

    def to_address(self, addresses: Iterable[H160]) -> TraceFilterBuilder:
        return self._set(to_address=tuple(addresses))

    def from_address(self, addresses: Iterable[H160]) -> TraceFilterBuilder:
        return self._set(from_address=tuple(addresses))

    def after(self, after: int) -> TraceFilterBuilder:
        """Skip this many traces of the output."""
        return self._set(after=_non_negative(after, "after"))

    def count(self, count: int) -> TraceFilterBuilder:
        """Return at most this many traces."""
        return self._set(count=_non_negative(count, "count"))

    def build(self) -> TraceFilter:
        return self._filter


class ActionType(str, enum.Enum):
    """The kind of an external action."""

    CALL = "call"
    CREATE = "create"
    SUICIDE = "suicide"
    REWARD = "reward"

    def to_json(self) -> str:
        return self.value


class CallType(str, enum.Enum):
    """The kind of a message call."""

    NONE = "none"
    CALL = "call"
    CALL_CODE = "callcode"
    DELEGATE_CALL = "delegatecall"
    STATIC_CALL = "staticcall"

    def to_json(self) -> str:
        return self.value


class RewardType(str, enum.Enum):
    """The kind of a reward."""

    BLOCK = "block"
    UNCLE = "uncle"
    EMPTY_STEP = "emptyStep"
    EXTERNAL = "external"

    def to_json(self) -> str:
        return self.value


@dataclass
class CallResult:
    """Gas used and output of a call."""

    gas_used: U256 = U256(0)
    output: Bytes = Bytes()

    def to_json(self) -> dict[str, Any]:
        return {"gasUsed": self.gas_used.to_json(), "output": self.output.to_json()}

    @classmethod
    def from_json(cls, value: Any) -> CallResult:
        obj = _expect_object(value, "a call result")
        return cls(
            gas_used=_required(obj, "gasUsed", U256.from_json),
            output=_required(obj, "output", Bytes.from_json),
        )


@dataclass
class CreateResult:
    """Gas used, deployed code and address of a contract creation."""

    gas_used: U256 = U256(0)
    code: Bytes = Bytes()
    address: H160 = H160()

    def to_json(self) -> dict[str, Any]:
        return {
            "gasUsed": self.gas_used.to_json(),
            "code": self.code.to_json(),
            "address": self.address.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> CreateResult:
        obj = _expect_object(value, "a create result")
        return cls(
            gas_used=_required(obj, "gasUsed", U256.from_json),
            code=_required(obj, "code", Bytes.from_json),
            address=_required(obj, "address", H160.from_json),
        )


@dataclass
class Call:
    """A message call action."""

    from_: H160 = H160()
    to: H160 = H160()
    value: U256 = U256(0)
    gas: U256 = U256(0)
    input: Bytes = Bytes()
    call_type: CallType = CallType.NONE

    def to_json(self) -> dict[str, Any]:
        return {
            "from": self.from_.to_json(),
            "to": self.to.to_json(),
            "value": self.value.to_json(),
            "gas": self.gas.to_json(),
            "input": self.input.to_json(),
            "callType": self.call_type.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> Call:
        obj = _expect_object(value, "a call")
        return cls(
            from_=_required(obj, "from", H160.from_json),
            to=_required(obj, "to", H160.from_json),
            value=_required(obj, "value", U256.from_json),
            gas=_required(obj, "gas", U256.from_json),
            input=_required(obj, "input", Bytes.from_json),
            call_type=_required(obj, "callType", _variant(CallType)),
        )


@dataclass
class Create:
    """A contract creation action."""

    from_: H160 = H160()
    value: U256 = U256(0)
    gas: U256 = U256(0)
    init: Bytes = Bytes()

    def to_json(self) -> dict[str, Any]:
        return {
            "from": self.from_.to_json(),
            "value": self.value.to_json(),
            "gas": self.gas.to_json(),
            "init": self.init.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> Create:
        obj = _expect_object(value, "a create")
        return cls(
            from_=_required(obj, "from", H160.from_json),
            value=_required(obj, "value", U256.from_json),
            gas=_required(obj, "gas", U256.from_json),
            init=_required(obj, "init", Bytes.from_json),
        )


@dataclass
class Suicide:
    """A self-destruct action with the address refunded."""

    address: H160 = H160()
    refund_address: H160 = H160()
    balance: U256 = U256(0)

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "refundAddress": self.refund_address.to_json(),
            "balance": self.balance.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> Suicide:
        obj = _expect_object(value, "a suicide")
        return cls(
            address=_required(obj, "address", H160.from_json),
            refund_address=_required(obj, "refundAddress", H160.from_json),
            balance=_required(obj, "balance", U256.from_json),
        )


@dataclass
class Reward:
    """A reward paid to an author."""

    author: H160
    value: U256
    reward_type: RewardType

    def to_json(self) -> dict[str, Any]:
        return {
            "author": self.author.to_json(),
            "value": self.value.to_json(),
            "rewardType": self.reward_type.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> Reward:
        obj = _expect_object(value, "a reward")
        return cls(
            author=_required(obj, "author", H160.from_json),
            value=_required(obj, "value", U256.from_json),
            reward_type=_required(obj, "rewardType", _variant(RewardType)),
        )


Action = Union[Call, Create, Suicide, Reward]
Res = Union[CallResult, CreateResult, None]


def parse_action(value: Any) -> Action:
    """Read an action, trying call, create, suicide and reward in that order."""
    for kind in (Call, Create, Suicide, Reward):
        try:
            return kind.from_json(value)
        except _PARSE_ERRORS:
            continue
    raise ValueError("data did not match any variant of untagged enum Action")


def parse_result(value: Any) -> Res:
    """Read a result: null, a call result or a create result, tried in that order."""
    if value is None:
        return None
    for kind in (CallResult, CreateResult):
        try:
            return kind.from_json(value)
        except _PARSE_ERRORS:
            continue
    raise ValueError("data did not match any variant of untagged enum Res")


@dataclass(kw_only=True)
class Trace:
    """A trace as returned by the trace-filtering API."""

    action: Action
    result: Res = None
    trace_address: list[int] = field(default_factory=list)
    subtraces: int = 0
    transaction_position: Optional[int] = None
    transaction_hash: Optional[H256] = None
    block_number: int
    block_hash: H256
    action_type: ActionType
    error: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "action": self.action.to_json(),
            "result": _dump(self.result),
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "transactionPosition": self.transaction_position,
            "transactionHash": _dump(self.transaction_hash),
            "blockNumber": self.block_number,
            "blockHash": self.block_hash.to_json(),
            "type": self.action_type.to_json(),
            "error": self.error,
        }

    @classmethod
    def from_json(cls, value: Any) -> Trace:
        obj = _expect_object(value, "a trace")
        return cls(
            action=_required(obj, "action", parse_action),
            result=parse_result(obj.get("result")),
            trace_address=_required(obj, "traceAddress", _unsigned_list),
            subtraces=_required(obj, "subtraces", _unsigned()),
            transaction_position=_optional(obj, "transactionPosition", _unsigned()),
            transaction_hash=_optional(obj, "transactionHash", H256.from_json),
            block_number=_required(obj, "blockNumber", _unsigned(_U64_BITS)),
            block_hash=_required(obj, "blockHash", H256.from_json),
            action_type=_required(obj, "type", _variant(ActionType)),
            error=_optional(obj, "error", _string),
        )