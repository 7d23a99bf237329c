"""Fixed-size hashes and bounded unsigned integers with their JSON-RPC encodings."""

from __future__ import annotations

import operator
import re
import secrets
from functools import total_ordering
from typing import Any, ClassVar

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DEC_DIGITS = re.compile(r"[0-9]+")


@total_ordering
class FixedHash:
    """An immutable byte string of a fixed length, encoded as 0x-prefixed hex."""

    SIZE: ClassVar[int] = 0
    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        if isinstance(data, int):
            raise TypeError(f"{type(self).__name__} expects bytes, not an integer")
        raw = bytes(self.SIZE) if data is None else bytes(data)
        if len(raw) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} expects {self.SIZE} bytes, got {len(raw)}"
            )
        object.__setattr__(self, "_data", raw)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_low_u64_be(cls, value: int) -> FixedHash:
        """Place a 64-bit value, big-endian, in the lowest eight bytes."""
        number = operator.index(value)
        if not 0 <= number < 1 << 64:
            raise ValueError(f"{number} does not fit in 64 bits")
        return cls(bytes(cls.SIZE - 8) + number.to_bytes(8, "big"))

    @classmethod
    def from_uint(cls, value: int) -> FixedHash:
        """Build the hash holding an unsigned integer, big-endian."""
        number = operator.index(value)
        if number < 0 or number.bit_length() > cls.SIZE * 8:
            raise ValueError(f"{number} does not fit in {cls.__name__}")
        return cls(number.to_bytes(cls.SIZE, "big"))

    @classmethod
    def from_hex(cls, text: str) -> FixedHash:
        """Parse hex digits, with or without a 0x prefix."""
        digits = text[2:] if text.startswith("0x") else text
        if len(digits) != cls.SIZE * 2 or not _HEX_DIGITS.fullmatch(digits):
            raise ValueError(
                f"invalid {cls.__name__}: expected {cls.SIZE * 2} hex digits, got {text!r}"
            )
        return cls(bytes.fromhex(digits))

    @classmethod
    def zero(cls) -> FixedHash:
        return cls()

    @classmethod
    def random(cls) -> FixedHash:
        return cls(secrets.token_bytes(cls.SIZE))

    def to_uint(self) -> int:
        return int.from_bytes(self._data, "big")

    def to_hex(self) -> str:
        return "0x" + self._data.hex()

    def to_json(self) -> str:
        return self.to_hex()

    @classmethod
    def from_json(cls, value: Any) -> FixedHash:
        if not isinstance(value, str):
            raise ValueError(f"invalid type: expected a 0x-prefixed hex string, got {value!r}")
        if not value.startswith("0x"):
            raise ValueError(f"invalid {cls.__name__}: 0x prefix is missing")
        return cls.from_hex(value)

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return self.SIZE

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._data == other._data
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._data < other._data
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.to_hex()}')"

    def __str__(self) -> str:
        return f"0x{self._data[:2].hex()}\u2026{self._data[-2:].hex()}"

    def __format__(self, spec: str) -> str:
        if spec == "x":
            return self._data.hex()
        if spec == "#x":
            return self.to_hex()
        return format(str(self), spec)


class H64(FixedHash):
    """An 8-byte hash."""

    SIZE = 8
    __slots__ = ()


class H128(FixedHash):
    """A 16-byte hash."""

    SIZE = 16
    __slots__ = ()


class H160(FixedHash):
    """A 20-byte hash, the size of an account address."""

    SIZE = 20
    __slots__ = ()


class H256(FixedHash):
    """A 32-byte hash."""

    SIZE = 32
    __slots__ = ()


class H512(FixedHash):
    """A 64-byte hash."""

    SIZE = 64
    __slots__ = ()


class H520(FixedHash):
    """A 65-byte hash, the size of a recoverable signature."""

    SIZE = 65
    __slots__ = ()


class H2048(FixedHash):
    """A 256-byte logs bloom filter."""

    SIZE = 256
    __slots__ = ()


class Uint(int):
    """An unsigned integer bounded to BITS bits, encoded as 0x-prefixed hex."""

    BITS: ClassVar[int] = 0

    def __new__(cls, value: int = 0) -> Uint:
        number = operator.index(value)
        if number < 0 or number.bit_length() > cls.BITS:
            raise ValueError(f"{number} does not fit in {cls.__name__}")
        return super().__new__(cls, number)

    @classmethod
    def from_bytes_be(cls, data: bytes | bytearray | memoryview) -> Uint:
        """Read a big-endian integer of at most BITS / 8 bytes."""
        raw = bytes(data)
        if len(raw) > cls.BITS // 8:
            raise ValueError(f"{len(raw)} bytes do not fit in {cls.__name__}")
        return cls(int.from_bytes(raw, "big"))

    @classmethod
    def from_json(cls, value: Any) -> Uint:
        """Parse a 0x-prefixed hex string, or a plain decimal string."""
        if not isinstance(value, str):
            raise ValueError(f"invalid type: expected a string, got {value!r}")
        if value.startswith("0x"):
            digits = value[2:]
            if not _HEX_DIGITS.fullmatch(digits):
                raise ValueError(f"invalid hex value for {cls.__name__}: {value!r}")
            number = int(digits, 16)
        elif _DEC_DIGITS.fullmatch(value):
            number = int(value, 10)
        else:
            raise ValueError(f"invalid value for {cls.__name__}: {value!r}")
        return cls(number)

    def to_json(self) -> str:
        return f"0x{int(self):x}"

    def low_u64(self) -> int:
        return int(self) & 0xFFFF_FFFF_FFFF_FFFF

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)


class U64(Uint):
    BITS = 64


class U128(Uint):
    BITS = 128


class U256(Uint):
    BITS = 256


Address = H160
Index = U64