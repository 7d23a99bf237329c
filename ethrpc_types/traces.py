"""Types for the ad-hoc trace API (trace_replayTransaction and friends)."""

from __future__ import annotations

import enum
import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar, Union

from .bytes import Bytes
from .trace_filtering import Action, ActionType, Res, parse_action, parse_result
from .uint import H160, H256, U256

T = TypeVar("T")

_U64_BITS = 64
_to_json = operator.methodcaller("to_json")


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


def _unsigned(bits: Optional[int] = None) -> Callable[[Any], int]:
    def parse(raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            raise ValueError(f"invalid value: expected an unsigned integer, got {raw!r}")
        if bits is not None and raw.bit_length() > bits:
            raise ValueError(f"invalid value: {raw} does not fit in {bits} bits")
        return raw

    return parse


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"invalid type: expected a string, got {raw!r}")
    return raw


def _dump(value: Any) -> Any:
    return None if value is None else value.to_json()


class TraceType(str, enum.Enum):
    """A kind of trace to request."""

    TRACE = "trace"
    VM_TRACE = "vmTrace"
    STATE_DIFF = "stateDiff"

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChangedType(Generic[T]):
    """A value before and after a change."""

    from_: T
    to: T


class DiffKind(str, enum.Enum):
    """How a value changed."""

    SAME = "="
    BORN = "+"
    DIED = "-"
    CHANGED = "*"


@dataclass(frozen=True)
class Diff(Generic[T]):
    """A change to one value: unchanged, created, removed, or changed.

    value is None for SAME, the value for BORN and DIED, and a ChangedType
    for CHANGED."""

    kind: DiffKind
    value: Union[T, ChangedType[T], None] = None

    def __post_init__(self) -> None:
        kind = DiffKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is DiffKind.SAME:
            if self.value is not None:
                raise ValueError("an unchanged value carries no data")
        elif kind is DiffKind.CHANGED:
            if not isinstance(self.value, ChangedType):
                raise TypeError(f"a changed value needs a ChangedType, not {self.value!r}")
        elif self.value is None:
            raise ValueError(f"a {kind.name.lower()} value needs data")

    @classmethod
    def same(cls) -> Diff[T]:
        return cls(DiffKind.SAME)

    @classmethod
    def born(cls, value: T) -> Diff[T]:
        return cls(DiffKind.BORN, value)

    @classmethod
    def died(cls, value: T) -> Diff[T]:
        return cls(DiffKind.DIED, value)

    @classmethod
    def changed(cls, from_: T, to: T) -> Diff[T]:
        return cls(DiffKind.CHANGED, ChangedType(from_, to))

    def to_json(self, dump: Callable[[T], Any]) -> Any:
        """Encode with dump applied to the carried values."""
        if self.kind is DiffKind.SAME:
            return DiffKind.SAME.value
        if self.kind is DiffKind.CHANGED:
            change = self.value
            return {self.kind.value: {"from": dump(change.from_), "to": dump(change.to)}}
        return {self.kind.value: dump(self.value)}

    @classmethod
    def from_json(cls, value: Any, parse: Callable[[Any], T]) -> Diff[T]:
        """Decode, with parse applied to the carried values."""
        if value == DiffKind.SAME.value:
            return cls.same()
        if not isinstance(value, dict) or len(value) != 1:
            raise ValueError(f"invalid type: expected a diff, got {value!r}")
        ((tag, inner),) = value.items()
        if tag == DiffKind.SAME.value and inner is None:
            return cls.same()
        if tag == DiffKind.BORN.value:
            return cls.born(parse(inner))
        if tag == DiffKind.DIED.value:
            return cls.died(parse(inner))
        if tag == DiffKind.CHANGED.value:
            obj = _expect_object(inner, "a change")
            return cls.changed(
                _required(obj, "from", parse), _required(obj, "to", parse)
            )
        raise ValueError(f"unknown variant `{tag}`, expected one of `=`, `+`, `-`, `*`")


@dataclass
class AccountDiff:
    """Changes to one account's balance, nonce, code and storage."""

    balance: Diff[U256]
    nonce: Diff[U256]
    code: Diff[Bytes]
    storage: dict[H256, Diff[H256]] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {
            "balance": self.balance.to_json(_to_json),
            "nonce": self.nonce.to_json(_to_json),
            "code": self.code.to_json(_to_json),
            "storage": {
                key.to_json(): diff.to_json(_to_json)
                for key, diff in sorted(self.storage.items(), key=lambda item: item[0].to_json())
            },
        }

    @classmethod
    def from_json(cls, value: Any) -> AccountDiff:
        obj = _expect_object(value, "an account diff")

        def parse_storage(raw: Any) -> dict[H256, Diff[H256]]:
            entries = _expect_object(raw, "a storage diff")
            return {
                H256.from_json(key): Diff.from_json(diff, H256.from_json)
                for key, diff in entries.items()
            }

        return cls(
            balance=_required(obj, "balance", lambda raw: Diff.from_json(raw, U256.from_json)),
            nonce=_required(obj, "nonce", lambda raw: Diff.from_json(raw, U256.from_json)),
            code=_required(obj, "code", lambda raw: Diff.from_json(raw, Bytes.from_json)),
            storage=_required(obj, "storage", parse_storage),
        )


@dataclass
class StateDiff:
    """Account changes keyed by address."""

    accounts: dict[H160, AccountDiff] = field(default_factory=dict)

    def __getitem__(self, address: H160) -> AccountDiff:
        return self.accounts[address]

    def __iter__(self) -> Iterator[H160]:
        return iter(self.accounts)

    def __len__(self) -> int:
        return len(self.accounts)

    def to_json(self) -> dict[str, Any]:
        return {
            address.to_json(): diff.to_json()
            for address, diff in sorted(self.accounts.items(), key=lambda item: item[0].to_json())
        }

    @classmethod
    def from_json(cls, value: Any) -> StateDiff:
        obj = _expect_object(value, "a state diff")
        return cls(
            {H160.from_json(address): AccountDiff.from_json(diff) for address, diff in obj.items()}
        )


@dataclass(kw_only=True)
class TransactionTrace:
    """One call frame of a transaction trace."""

    trace_address: list[int] = field(default_factory=list)
    subtraces: int = 0
    action: Action
    action_type: ActionType
    result: Res = None
    error: Optional[str] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "action": self.action.to_json(),
            "type": self.action_type.to_json(),
            "result": _dump(self.result),
            "error": self.error,
        }

    @classmethod
    def from_json(cls, value: Any) -> TransactionTrace:
        obj = _expect_object(value, "a transaction trace")
        return cls(
            trace_address=_required(obj, "traceAddress", _list_of(_unsigned())),
            subtraces=_required(obj, "subtraces", _unsigned()),
            action=_required(obj, "action", parse_action),
            action_type=_required(obj, "type", ActionType),
            result=parse_result(obj.get("result")),
            error=_optional(obj, "error", _string),
        )


@dataclass
class MemoryDiff:
    """A chunk of memory written at an offset."""

    off: int = 0
    data: Bytes = Bytes()

    def to_json(self) -> dict[str, Any]:
        return {"off": self.off, "data": self.data.to_json()}

    @classmethod
    def from_json(cls, value: Any) -> MemoryDiff:
        obj = _expect_object(value, "a memory diff")
        return cls(
            off=_required(obj, "off", _unsigned()),
            data=_required(obj, "data", Bytes.from_json),
        )


@dataclass
class StorageDiff:
    """A storage slot and the value written to it."""

    key: U256 = U256(0)
    val: U256 = U256(0)

    def to_json(self) -> dict[str, Any]:
        return {"key": self.key.to_json(), "val": self.val.to_json()}

    @classmethod
    def from_json(cls, value: Any) -> StorageDiff:
        obj = _expect_object(value, "a storage diff")
        return cls(
            key=_required(obj, "key", U256.from_json),
            val=_required(obj, "val", U256.from_json),
        )


@dataclass
class VMExecutedOperation:
    """Effects of one executed operation: gas used so far, pushed stack items,
    and any memory or storage written."""

    used: int = 0
    push: list[U256] = field(default_factory=list)
    mem: Optional[MemoryDiff] = None
    store: Optional[StorageDiff] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "used": self.used,
            "push": [item.to_json() for item in self.push],
            "mem": _dump(self.mem),
            "store": _dump(self.store),
        }

    @classmethod
    def from_json(cls, value: Any) -> VMExecutedOperation:
        obj = _expect_object(value, "an executed operation")
        return cls(
            used=_required(obj, "used", _unsigned(_U64_BITS)),
            push=_required(obj, "push", _list_of(U256.from_json)),
            mem=_optional(obj, "mem", MemoryDiff.from_json),
            store=_optional(obj, "store", StorageDiff.from_json),
        )


@dataclass
class VMOperation:
    """One executed VM operation, with the sub-trace of a CALL or CREATE."""

    pc: int = 0
    cost: int = 0
    ex: Optional[VMExecutedOperation] = None
    sub: Optional[VMTrace] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "pc": self.pc,
            "cost": self.cost,
            "ex": _dump(self.ex),
            "sub": _dump(self.sub),
        }

    @classmethod
    def from_json(cls, value: Any) -> VMOperation:
        obj = _expect_object(value, "a VM operation")
        return cls(
            pc=_required(obj, "pc", _unsigned()),
            cost=_required(obj, "cost", _unsigned(_U64_BITS)),
            ex=_optional(obj, "ex", VMExecutedOperation.from_json),
            sub=_optional(obj, "sub", VMTrace.from_json),
        )


@dataclass
class VMTrace:
    """The full VM trace of a call or creation: its code and executed operations."""

    code: Bytes = Bytes()
    ops: list[VMOperation] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {"code": self.code.to_json(), "ops": [op.to_json() for op in self.ops]}

    @classmethod
    def from_json(cls, value: Any) -> VMTrace:
        obj = _expect_object(value, "a VM trace")
        return cls(
            code=_required(obj, "code", Bytes.from_json),
            ops=_required(obj, "ops", _list_of(VMOperation.from_json)),
        )


@dataclass
class BlockTrace:
    """Output and requested traces of one replayed transaction."""

    output: Bytes = Bytes()
    trace: Optional[list[TransactionTrace]] = None
    vm_trace: Optional[VMTrace] = None
    state_diff: Optional[StateDiff] = None
    transaction_hash: Optional[H256] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "output": self.output.to_json(),
            "trace": None if self.trace is None else [item.to_json() for item in self.trace],
            "vmTrace": _dump(self.vm_trace),
            "stateDiff": _dump(self.state_diff),
            "transactionHash": _dump(self.transaction_hash),
        }

    @classmethod
    def from_json(cls, value: Any) -> BlockTrace:
        obj = _expect_object(value, "a block trace")
        return cls(
            output=_required(obj, "output", Bytes.from_json),
            trace=_optional(obj, "trace", _list_of(TransactionTrace.from_json)),
            vm_trace=_optional(obj, "vmTrace", VMTrace.from_json),
            state_diff=_optional(obj, "stateDiff", StateDiff.from_json),
            transaction_hash=_optional(obj, "transactionHash", H256.from_json),
        )