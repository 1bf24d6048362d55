"""IPv4 addresses held as host-order integers."""

from __future__ import annotations

import re
from dataclasses import dataclass

_DOTTED = re.compile(r"\s*(\d+)\.(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True, order=True)
class Ip:
    """An IPv4 address; the value is the 32-bit address in host order."""

    value: int = 0

    SIZE = 4

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"IPv4 address out of range: {self.value}")

    @classmethod
    def parse(cls, text: str) -> Ip:
        """Read a dotted-quad address such as ``192.0.2.1``."""
        match = _DOTTED.match(text)
        if match is None:
            raise ValueError(f"not an IPv4 address: {text!r}")
        value = 0
        for part in match.groups():
            octet = int(part)
            if octet > 0xFF:
                raise ValueError(f"not an IPv4 address: {text!r}")
            value = (value << 8) | octet
        return cls(value)

    def __str__(self) -> str:
        return ".".join(str(b) for b in self.value.to_bytes(self.SIZE, "big"))

    def __int__(self) -> int:
        return self.value