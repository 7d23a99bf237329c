"""Data for recovering the address that signed a message."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .signed import SignedData, SignedTransaction
from .uint import H256

_SIGNATURE_LENGTH = 65
_HASH_LENGTH = 32


def _hash_to_bytes(value: H256) -> bytes:
    return bytes.fromhex(value.to_json()[2:])


def _hash_from_bytes(data: bytes) -> H256:
    return H256.from_json("0x" + bytes(data).hex())


def _u64(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 1 << 64:
        raise ValueError(f"v must be an unsigned 64-bit integer, got {value!r}")
    return value


class ParseSignatureError(ValueError):
    """A raw signature did not have exactly 65 bytes."""

    def __init__(self) -> None:
        super().__init__("error parsing raw signature: wrong number of bytes, expected 65")


@dataclass(frozen=True)
class RecoveryMessage:
    """A message to recover: raw bytes (hashed per EIP-191 first) or a precomputed hash.

    Exactly one of data and hash is set."""

    data: Optional[bytes] = None
    hash: Optional[H256] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.hash is None):
            raise ValueError("a recovery message holds either data or a hash")
        if self.data is not None:
            object.__setattr__(self, "data", bytes(self.data))
        elif not isinstance(self.hash, H256):
            raise TypeError(f"message hash must be H256, not {self.hash!r}")

    @property
    def is_hash(self) -> bool:
        return self.hash is not None

    @classmethod
    def from_value(
        cls, value: Union[RecoveryMessage, H256, bytes, bytearray, memoryview, str]
    ) -> RecoveryMessage:
        """Wrap a hash as a hash, and bytes or text (UTF-8) as message data."""
        if isinstance(value, RecoveryMessage):
            return value
        if isinstance(value, H256):
            return cls(hash=value)
        if isinstance(value, str):
            return cls(data=value.encode("utf-8"))
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(data=bytes(value))
        raise TypeError(f"cannot make a recovery message from {value!r}")


@dataclass
class Recovery:
    """A message with its signature parts.

    v is in Electrum notation and may carry replay protection: 27, 28,
    35 + chain_id * 2 or 36 + chain_id * 2."""

    message: RecoveryMessage
    v: int
    r: H256
    s: H256

    def __post_init__(self) -> None:
        self.message = RecoveryMessage.from_value(self.message)
        self.v = _u64(self.v)
        for name in ("r", "s"):
            if not isinstance(getattr(self, name), H256):
                raise TypeError(f"{name} must be H256, not {getattr(self, name)!r}")

    @classmethod
    def from_raw_signature(cls, message: Any, raw_signature: bytes) -> Recovery:
        """Parse r (32 bytes), s (32 bytes) and v (1 byte) from a 65-byte signature."""
        data = bytes(raw_signature)
        if len(data) != _SIGNATURE_LENGTH:
            raise ParseSignatureError()
        return cls(
            message,
            data[64],
            _hash_from_bytes(data[:_HASH_LENGTH]),
            _hash_from_bytes(data[_HASH_LENGTH:64]),
        )

    @classmethod
    def from_signed_data(cls, signed: SignedData) -> Recovery:
        return cls(signed.message_hash, signed.v, signed.r, signed.s)

    @classmethod
    def from_signed_transaction(cls, tx: SignedTransaction) -> Recovery:
        return cls(tx.message_hash, tx.v, tx.r, tx.s)

    def recovery_id(self) -> Optional[int]:
        """The standard recovery id (0 or 1), or None if v is invalid."""
        if self.v == 27:
            return 0
        if self.v == 28:
            return 1
        if self.v >= 35:
            return (self.v - 1) % 2
        return None

    def as_signature(self) -> Optional[tuple[bytes, int]]:
        """The 64-byte compact signature r || s with its recovery id, or None if v is invalid."""
        recovery_id = self.recovery_id()
        if recovery_id is None:
            return None
        return _hash_to_bytes(self.r) + _hash_to_bytes(self.s), recovery_id