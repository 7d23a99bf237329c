"""Fee history returned by eth_feeHistory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .block import BlockNumber
from .uint import U256


def _u256_list(raw: Any) -> list[U256]:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    return [U256.from_json(item) for item in raw]


def _float_list(raw: Any) -> list[float]:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    out = []
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise ValueError(f"invalid type: expected a number, got {item!r}")
        out.append(float(item))
    return out


@dataclass
class FeeHistory:
    """Base fees, gas usage ratios and optional reward percentiles over a block range."""

    oldest_block: BlockNumber
    base_fee_per_gas: list[U256]
    gas_used_ratio: list[float]
    reward: Optional[list[list[U256]]] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "oldestBlock": self.oldest_block.to_json(),
            "baseFeePerGas": [fee.to_json() for fee in self.base_fee_per_gas],
            "gasUsedRatio": list(self.gas_used_ratio),
            "reward": None
            if self.reward is None
            else [[value.to_json() for value in row] for row in self.reward],
        }

    @classmethod
    def from_json(cls, value: Any) -> FeeHistory:
        if not isinstance(value, dict):
            raise ValueError(f"invalid type: expected a fee history object, got {value!r}")
        for key in ("oldestBlock", "baseFeePerGas", "gasUsedRatio"):
            if key not in value:
                raise ValueError(f"missing field `{key}`")
        raw_reward = value.get("reward")
        if raw_reward is None:
            reward = None
        elif isinstance(raw_reward, list):
            reward = [_u256_list(row) for row in raw_reward]
        else:
            raise ValueError(f"invalid type: expected an array, got {raw_reward!r}")
        return cls(
            oldest_block=BlockNumber.from_json(value["oldestBlock"]),
            base_fee_per_gas=_u256_list(value["baseFeePerGas"]),
            gas_used_ratio=_float_list(value["gasUsedRatio"]),
            reward=reward,
        )