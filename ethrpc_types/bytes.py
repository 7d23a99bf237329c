"""Raw byte strings in their JSON-RPC encodings."""

from __future__ import annotations

import binascii
from typing import Any


class Bytes(bytes):
    """Raw bytes, encoded as a 0x-prefixed hex string."""

    def to_json(self) -> str:
        return "0x" + self.hex()

    @classmethod
    def from_json(cls, value: Any) -> Bytes:
        if not isinstance(value, str) or not value.startswith("0x"):
            raise ValueError(f"invalid value: string {value!r}, expected 0x prefix")
        try:
            data = binascii.unhexlify(value[2:])
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Invalid hex: {exc}") from None
        return cls(data)

    def __repr__(self) -> str:
        return f"Bytes('{self.to_json()}')"


class BytesArray(bytes):
    """Raw bytes, encoded as a JSON array of numbers."""

    def to_json(self) -> list[int]:
        return list(self)

    @classmethod
    def from_json(cls, value: Any) -> BytesArray:
        if not isinstance(value, list):
            raise ValueError(f"invalid type: expected an array of bytes, got {value!r}")
        for item in value:
            if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                raise ValueError(f"invalid value: {item!r}, expected a byte")
        return cls(value)

    def __repr__(self) -> str:
        return f"BytesArray({list(self)!r})"