"""Ethernet hardware addresses."""

from __future__ import annotations

import string
from dataclasses import dataclass

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True, order=True)
class Mac:
    """A six-byte Ethernet address, ordered and hashed by its bytes."""

    octets: bytes

    SIZE = 6

    def __post_init__(self) -> None:
        octets = bytes(self.octets)
        if len(octets) != self.SIZE:
            raise ValueError(f"a MAC address needs {self.SIZE} bytes, got {len(octets)}")
        object.__setattr__(self, "octets", octets)

    @classmethod
    def parse(cls, text: str) -> Mac:
        """Read an address from text, ignoring every character that is not a hex digit."""
        digits = "".join(ch for ch in text if ch in _HEX_DIGITS)
        needed = cls.SIZE * 2
        if len(digits) < needed:
            raise ValueError(f"not a MAC address: {text!r}")
        return cls(bytes.fromhex(digits[:needed]))

    @classmethod
    def null(cls) -> Mac:
        """The all-zero address."""
        return cls(bytes(cls.SIZE))

    @classmethod
    def broadcast(cls) -> Mac:
        """The all-ones broadcast address."""
        return cls(b"\xff" * cls.SIZE)

    def is_null(self) -> bool:
        return self == self.null()

    def is_broadcast(self) -> bool:
        return self == self.broadcast()

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)

    def __bytes__(self) -> bytes:
        return self.octets