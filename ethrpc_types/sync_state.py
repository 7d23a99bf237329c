"""The state of a node's blockchain synchronisation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .uint import U256

_NOT_MATCHED = "data did not match any variant of untagged enum SyncStateVariants"


@dataclass(frozen=True)
class SyncInfo:
    """Starting, current and highest block of an ongoing sync."""

    starting_block: U256
    current_block: U256
    highest_block: U256

    def to_json(self) -> dict[str, str]:
        return {
            "startingBlock": self.starting_block.to_json(),
            "currentBlock": self.current_block.to_json(),
            "highestBlock": self.highest_block.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> SyncInfo:
        return cls._from_keys(value, "startingBlock", "currentBlock", "highestBlock")

    @classmethod
    def _from_keys(cls, value: Any, starting: str, current: str, highest: str) -> SyncInfo:
        if not isinstance(value, dict):
            raise ValueError(f"invalid type: expected a sync info object, got {value!r}")
        for key in (starting, current, highest):
            if key not in value:
                raise ValueError(f"missing field `{key}`")
        return cls(
            starting_block=U256.from_json(value[starting]),
            current_block=U256.from_json(value[current]),
            highest_block=U256.from_json(value[highest]),
        )


def _parse_subscription(value: Any) -> Optional[tuple[bool, Optional[SyncInfo]]]:
    """Read the subscription form {"syncing": bool, "status": {...}}, or None if it is not one."""
    if not isinstance(value, dict) or not isinstance(value.get("syncing"), bool):
        return None
    raw_status = value.get("status")
    if raw_status is None:
        return value["syncing"], None
    try:
        status = SyncInfo._from_keys(raw_status, "StartingBlock", "CurrentBlock", "HighestBlock")
    except ValueError:
        return None
    return value["syncing"], status


@dataclass(frozen=True)
class SyncState:
    """Syncing with the given info, or not syncing when info is None."""

    info: Optional[SyncInfo] = None

    @classmethod
    def not_syncing(cls) -> SyncState:
        return cls(None)

    @classmethod
    def syncing(cls, info: SyncInfo) -> SyncState:
        if not isinstance(info, SyncInfo):
            raise TypeError(f"expected SyncInfo, not {info!r}")
        return cls(info)

    @property
    def is_syncing(self) -> bool:
        return self.info is not None

    def to_json(self) -> Any:
        return False if self.info is None else self.info.to_json()

    @classmethod
    def from_json(cls, value: Any) -> SyncState:
        """Accept a sync info object, the subscription form, or `false`."""
        try:
            return cls.syncing(SyncInfo.from_json(value))
        except ValueError:
            pass
        subscription = _parse_subscription(value)
        if subscription is not None:
            is_syncing, status = subscription
            if status is None and not is_syncing:
                return cls.not_syncing()
            if status is not None and is_syncing:
                return cls.syncing(status)
            raise ValueError("expected object or `syncing = false`, got `syncing = true`")
        if isinstance(value, bool):
            if not value:
                return cls.not_syncing()
            raise ValueError("expected object or `false`, got `true`")
        raise ValueError(_NOT_MATCHED)