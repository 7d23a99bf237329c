"""Filters for pending transactions on Parity/OpenEthereum nodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Union

from .uint import H160, U256, U64


class Comparison(str, enum.Enum):
    """How a filter condition compares its value."""

    LOWER_THAN = "lt"
    EQUAL = "eq"
    GREATER_THAN = "gt"


@dataclass(frozen=True)
class FilterCondition:
    """A comparison against a single value."""

    comparison: Comparison
    value: Any

    def to_json(self) -> dict[str, Any]:
        return {self.comparison.value: self.value.to_json()}


@dataclass(frozen=True)
class ToFilter:
    """Match the recipient address, or contract creations when target is None."""

    target: Optional[H160] = None

    @classmethod
    def address(cls, address: H160) -> ToFilter:
        if not isinstance(address, H160):
            raise TypeError(f"address must be H160, not {address!r}")
        return cls(address)

    @classmethod
    def action(cls) -> ToFilter:
        return cls(None)

    def to_json(self) -> dict[str, Any]:
        if self.target is None:
            return {"action": "contract_creation"}
        return {"eq": self.target.to_json()}


@dataclass(frozen=True)
class ParityPendingTransactionFilter:
    """A pending-transaction filter; unset conditions are left out."""

    from_: Optional[FilterCondition] = None
    to: Optional[ToFilter] = None
    gas: Optional[FilterCondition] = None
    gas_price: Optional[FilterCondition] = None
    value: Optional[FilterCondition] = None
    nonce: Optional[FilterCondition] = None

    @classmethod
    def builder(cls) -> ParityPendingTransactionFilterBuilder:
        return ParityPendingTransactionFilterBuilder()

    def to_json(self) -> dict[str, Any]:
        entries = {
            "from": self.from_,
            "to": self.to,
            "gas": self.gas,
            "gas_price": self.gas_price,
            "value": self.value,
            "nonce": self.nonce,
        }
        return {key: item.to_json() for key, item in entries.items() if item is not None}


def _condition(value: Union[FilterCondition, int], kind: Callable[[int], Any]) -> FilterCondition:
    if isinstance(value, FilterCondition):
        return FilterCondition(value.comparison, kind(value.value))
    return FilterCondition(Comparison.EQUAL, kind(value))


class ParityPendingTransactionFilterBuilder:
    """Builds a pending-transaction filter; each setter returns the builder.

    Plain values passed to the numeric setters mean equality."""

    def __init__(self) -> None:
        self._filter = ParityPendingTransactionFilter()

    def from_(self, address: H160) -> ParityPendingTransactionFilterBuilder:
        if not isinstance(address, H160):
            raise TypeError(f"address must be H160, not {address!r}")
        self._filter = replace(self._filter, from_=FilterCondition(Comparison.EQUAL, address))
        return self

    def to(self, to_or_action: ToFilter) -> ParityPendingTransactionFilterBuilder:
        if not isinstance(to_or_action, ToFilter):
            raise TypeError(f"expected a ToFilter, not {to_or_action!r}")
        self._filter = replace(self._filter, to=to_or_action)
        return self

    def gas(self, gas: Union[FilterCondition, int]) -> ParityPendingTransactionFilterBuilder:
        self._filter = replace(self._filter, gas=_condition(gas, U64))
        return self

    def gas_price(
        self, gas_price: Union[FilterCondition, int]
    ) -> ParityPendingTransactionFilterBuilder:
        self._filter = replace(self._filter, gas_price=_condition(gas_price, U64))
        return self

    def value(self, value: Union[FilterCondition, int]) -> ParityPendingTransactionFilterBuilder:
        self._filter = replace(self._filter, value=_condition(value, U256))
        return self

    def nonce(self, nonce: Union[FilterCondition, int]) -> ParityPendingTransactionFilterBuilder:
        self._filter = replace(self._filter, nonce=_condition(nonce, U256))
        return self

    def build(self) -> ParityPendingTransactionFilter:
        return self._filter