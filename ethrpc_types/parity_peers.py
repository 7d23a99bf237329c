"""Peer information reported by a Parity/OpenEthereum node."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from .uint import U256

T = TypeVar("T")

_U32_BITS = 32


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


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"invalid type: expected a string, got {raw!r}")
    return raw


def _strings(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        raise ValueError(f"invalid type: expected an array, got {raw!r}")
    return [_string(item) for item in raw]


@dataclass
class PeerNetworkInfo:
    """Remote and local address of a peer connection."""

    remote_address: str
    local_address: str

    def to_json(self) -> dict[str, Any]:
        return {"remoteAddress": self.remote_address, "localAddress": self.local_address}

    @classmethod
    def from_json(cls, value: Any) -> PeerNetworkInfo:
        obj = _expect_object(value, "a peer network")
        return cls(
            remote_address=_required(obj, "remoteAddress", _string),
            local_address=_required(obj, "localAddress", _string),
        )


@dataclass
class EthProtocolInfo:
    """Eth protocol version, difficulty and chain head of a peer."""

    version: int
    difficulty: Optional[U256]
    head: str

    def to_json(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "difficulty": None if self.difficulty is None else self.difficulty.to_json(),
            "head": self.head,
        }

    @classmethod
    def from_json(cls, value: Any) -> EthProtocolInfo:
        obj = _expect_object(value, "an eth protocol")
        return cls(
            version=_required(obj, "version", _unsigned(_U32_BITS)),
            difficulty=_optional(obj, "difficulty", U256.from_json),
            head=_required(obj, "head", _string),
        )


@dataclass
class PipProtocolInfo:
    """PIP protocol version, difficulty and chain head of a peer."""

    version: int
    difficulty: U256
    head: str

    def to_json(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "difficulty": self.difficulty.to_json(),
            "head": self.head,
        }

    @classmethod
    def from_json(cls, value: Any) -> PipProtocolInfo:
        obj = _expect_object(value, "a pip protocol")
        return cls(
            version=_required(obj, "version", _unsigned(_U32_BITS)),
            difficulty=_required(obj, "difficulty", U256.from_json),
            head=_required(obj, "head", _string),
        )


@dataclass
class PeerProtocolsInfo:
    """The chain protocols a peer speaks."""

    eth: Optional[EthProtocolInfo] = None
    pip: Optional[PipProtocolInfo] = None

    def to_json(self) -> dict[str, Any]:
        return {
            "eth": None if self.eth is None else self.eth.to_json(),
            "pip": None if self.pip is None else self.pip.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> PeerProtocolsInfo:
        obj = _expect_object(value, "a peer protocols")
        return cls(
            eth=_optional(obj, "eth", EthProtocolInfo.from_json),
            pip=_optional(obj, "pip", PipProtocolInfo.from_json),
        )


@dataclass
class ParityPeerInfo:
    """Details of one peer."""

    id: Optional[str]
    name: str
    caps: list[str]
    network: PeerNetworkInfo
    protocols: PeerProtocolsInfo

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "caps": list(self.caps),
            "network": self.network.to_json(),
            "protocols": self.protocols.to_json(),
        }

    @classmethod
    def from_json(cls, value: Any) -> ParityPeerInfo:
        obj = _expect_object(value, "a peer")
        return cls(
            id=_optional(obj, "id", _string),
            name=_required(obj, "name", _string),
            caps=_required(obj, "caps", _strings),
            network=_required(obj, "network", PeerNetworkInfo.from_json),
            protocols=_required(obj, "protocols", PeerProtocolsInfo.from_json),
        )


@dataclass
class ParityPeerType:
    """Peer counts and the list of connected peers."""

    active: int
    connected: int
    max: int
    peers: list[ParityPeerInfo] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "active": self.active,
            "connected": self.connected,
            "max": self.max,
            "peers": [peer.to_json() for peer in self.peers],
        }

    @classmethod
    def from_json(cls, value: Any) -> ParityPeerType:
        obj = _expect_object(value, "a peers")

        def parse_peers(raw: Any) -> list[ParityPeerInfo]:
            if not isinstance(raw, list):
                raise ValueError(f"invalid type: expected an array, got {raw!r}")
            return [ParityPeerInfo.from_json(item) for item in raw]

        return cls(
            active=_required(obj, "active", _unsigned()),
            connected=_required(obj, "connected", _unsigned()),
            max=_required(obj, "max", _unsigned(_U32_BITS)),
            peers=_required(obj, "peers", parse_peers),
        )