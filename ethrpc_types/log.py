"""Logs produced by transactions and the filters that select them."""

from __future__ import annotations

import operator
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar, Union

from .block import BlockNumber
from .bytes import Bytes
from .uint import H160, H256, U256, U64

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


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"invalid type: expected a string, got {raw!r}")
    return raw


def _boolean(raw: Any) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"invalid type: expected a boolean, got {raw!r}")
    return raw


def _dump(value: Any) -> Any:
    return None if value is None else value.to_json()


@dataclass
class Log:
    """A log entry emitted by a transaction."""

    address: H160
    topics: list[H256] = field(default_factory=list)
    data: Bytes = Bytes()
    block_hash: Optional[H256] = None
    block_number: Optional[U64] = None
    transaction_hash: Optional[H256] = None
    transaction_index: Optional[U64] = None
    log_index: Optional[U256] = None
    transaction_log_index: Optional[U256] = None
    log_type: Optional[str] = None
    removed: Optional[bool] = None

    def is_removed(self) -> bool:
        """True if the log was removed by a chain reorganisation."""
        if self.removed is not None:
            return self.removed
        return self.log_type == "removed"

    @classmethod
    def from_json(cls, value: Any) -> Log:
        obj = _expect_object(value, "a log")
        return cls(
            address=_required(obj, "address", H160.from_json),
            topics=_required(obj, "topics", _list_of(H256.from_json)),
            data=_required(obj, "data", Bytes.from_json),
            block_hash=_optional(obj, "blockHash", H256.from_json),
            block_number=_optional(obj, "blockNumber", U64.from_json),
            transaction_hash=_optional(obj, "transactionHash", H256.from_json),
            transaction_index=_optional(obj, "transactionIndex", U64.from_json),
            log_index=_optional(obj, "logIndex", U256.from_json),
            transaction_log_index=_optional(obj, "transactionLogIndex", U256.from_json),
            log_type=_optional(obj, "logType", _string),
            removed=_optional(obj, "removed", _boolean),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "address": self.address.to_json(),
            "topics": [topic.to_json() for topic in self.topics],
            "data": self.data.to_json(),
            "blockHash": _dump(self.block_hash),
            "blockNumber": _dump(self.block_number),
            "transactionHash": _dump(self.transaction_hash),
            "transactionIndex": _dump(self.transaction_index),
            "logIndex": _dump(self.log_index),
            "transactionLogIndex": _dump(self.transaction_log_index),
            "logType": self.log_type,
            "removed": self.removed,
        }


Topic = Union[None, H256, Sequence[H256]]


@dataclass(frozen=True)
class TopicFilter:
    """Per-position topic constraints: None matches any, a hash matches that
    hash, a sequence of hashes matches any one of them."""

    topic0: Topic = None
    topic1: Topic = None
    topic2: Topic = None
    topic3: Topic = None


def _topic_to_option(topic: Topic) -> Optional[list[H256]]:
    if topic is None:
        return None
    if isinstance(topic, H256):
        return [topic]
    return list(topic)


def _value_or_array(items: Sequence[Any]) -> Any:
    if not items:
        return None
    if len(items) == 1:
        return items[0].to_json()
    return [item.to_json() for item in items]


@dataclass(frozen=True)
class Filter:
    """A log filter, as sent to the node."""

    from_block: Optional[BlockNumber] = None
    to_block: Optional[BlockNumber] = None
    block_hash: Optional[H256] = None
    address: Optional[tuple[H160, ...]] = None
    topics: Optional[tuple[Optional[tuple[H256, ...]], ...]] = None
    limit: Optional[int] = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.from_block is not None:
            out["fromBlock"] = self.from_block.to_json()
        if self.to_block is not None:
            out["toBlock"] = self.to_block.to_json()
        if self.block_hash is not None:
            out["blockHash"] = self.block_hash.to_json()
        if self.address is not None:
            out["address"] = _value_or_array(self.address)
        if self.topics is not None:
            out["topics"] = [
                None if topic is None else _value_or_array(topic) for topic in self.topics
            ]
        if self.limit is not None:
            out["limit"] = self.limit
        return out


class FilterBuilder:
    """Builds a Filter step by step; each setter returns the builder."""

    def __init__(self) -> None:
        self._filter = Filter()

    def from_block(self, block: BlockNumber) -> FilterBuilder:
        """Set the first block; clears any block hash."""
        self._filter = replace(self._filter, block_hash=None, from_block=block)
        return self

    def to_block(self, block: BlockNumber) -> FilterBuilder:
        """Set the last block; clears any block hash."""
        self._filter = replace(self._filter, block_hash=None, to_block=block)
        return self

    def block_hash(self, block_hash: H256) -> FilterBuilder:
        """Select a single block by hash; clears the block range."""
        self._filter = replace(
            self._filter, from_block=None, to_block=None, block_hash=block_hash
        )
        return self

    def address(self, addresses: Iterable[H160]) -> FilterBuilder:
        self._filter = replace(self._filter, address=tuple(addresses))
        return self

    def topics(
        self,
        topic1: Optional[Iterable[H256]],
        topic2: Optional[Iterable[H256]],
        topic3: Optional[Iterable[H256]],
        topic4: Optional[Iterable[H256]],
    ) -> FilterBuilder:
        """Set the four topic positions; trailing unconstrained ones are dropped."""
        positions = [topic1, topic2, topic3, topic4]
        while positions and positions[-1] is None:
            positions.pop()
        topics = tuple(None if topic is None else tuple(topic) for topic in positions)
        self._filter = replace(self._filter, topics=topics)
        return self

    def topic_filter(self, topic_filter: TopicFilter) -> FilterBuilder:
        return self.topics(
            _topic_to_option(topic_filter.topic0),
            _topic_to_option(topic_filter.topic1),
            _topic_to_option(topic_filter.topic2),
            _topic_to_option(topic_filter.topic3),
        )

    def limit(self, limit: int) -> FilterBuilder:
        number = operator.index(limit)
        if number < 0:
            raise ValueError(f"limit must not be negative, got {number}")
        self._filter = replace(self._filter, limit=number)
        return self

    def build(self) -> Filter:
        return self._filter