"""A miner's work package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .uint import H256, U256


def _parse_u64(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw < 1 << 64:
        raise ValueError(f"invalid type: expected u64, got {raw!r}")
    return raw


def _parse_hashes(items: list) -> tuple[H256, H256, H256]:
    pow_hash, seed_hash, target = (H256.from_json(item) for item in items)
    return pow_hash, seed_hash, target


@dataclass
class Work:
    """Proof-of-work hash, seed hash, target and, when known, the block number."""

    pow_hash: H256
    seed_hash: H256
    target: H256
    number: Optional[int] = None

    def to_json(self) -> list[str]:
        out = [self.pow_hash.to_json(), self.seed_hash.to_json(), self.target.to_json()]
        if self.number is not None:
            out.append(U256(self.number).to_json())
        return out

    @classmethod
    def from_json(cls, value: Any) -> Work:
        """Parse [pow, seed, target, number] with a numeric number, or [pow, seed, target]."""
        try:
            if not isinstance(value, list):
                raise ValueError(f"invalid type: expected an array, got {value!r}")
            if len(value) == 4:
                number = _parse_u64(value[3])
                return cls(*_parse_hashes(value[:3]), number=number)
            if len(value) == 3:
                return cls(*_parse_hashes(value))
            raise ValueError(f"invalid length {len(value)}, expected 3 or 4 elements")
        except ValueError as exc:
            raise ValueError(f"Cannot deserialize Work: {exc}") from None