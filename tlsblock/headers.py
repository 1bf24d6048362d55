"""Ethernet, IPv4 and TCP header layouts."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import ClassVar

from .ip import Ip
from .mac import Mac

IPPROTO_TCP = 6


class EtherType(IntEnum):
    IP4 = 0x0800
    ARP = 0x0806
    IP6 = 0x86DD


class TcpFlag(IntFlag):
    FIN = 0x01
    SYN = 0x02
    RST = 0x04
    PSH = 0x08
    ACK = 0x10
    URG = 0x20


def _need(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


@dataclass(frozen=True)
class EthHdr:
    """An Ethernet II header."""

    dmac: Mac
    smac: Mac
    ether_type: int

    SIZE: ClassVar[int] = 14
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("!6s6sH")

    @classmethod
    def parse(cls, data: bytes) -> EthHdr:
        _need(data, cls.SIZE, "Ethernet header")
        dmac, smac, ether_type = cls._FORMAT.unpack_from(bytes(data[: cls.SIZE]))
        return cls(Mac(dmac), Mac(smac), ether_type)

    def __bytes__(self) -> bytes:
        return self._FORMAT.pack(bytes(self.dmac), bytes(self.smac), self.ether_type)


@dataclass(frozen=True)
class IpHdr:
    """An IPv4 header; addresses are host-order integers, options follow the fixed part."""

    version: int
    ihl: int
    dscp_ecn: int
    total_length: int
    identification: int
    flags_fragment: int
    ttl: int
    protocol: int
    checksum: int
    src_addr: int
    dst_addr: int
    options: bytes = b""

    TCP: ClassVar[int] = IPPROTO_TCP
    MIN_SIZE: ClassVar[int] = 20
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("!BBHHHBBHII")

    @classmethod
    def parse(cls, data: bytes) -> IpHdr:
        _need(data, cls.MIN_SIZE, "IPv4 header")
        (ver_ihl, dscp_ecn, total_length, identification, flags_fragment,
         ttl, protocol, checksum, src, dst) = cls._FORMAT.unpack_from(bytes(data[: cls.MIN_SIZE]))
        ihl = ver_ihl & 0x0F
        length = ihl * 4
        if length < cls.MIN_SIZE:
            raise ValueError(f"IPv4 header length {length} is below {cls.MIN_SIZE}")
        _need(data, length, "IPv4 header")
        return cls(
            version=ver_ihl >> 4,
            ihl=ihl,
            dscp_ecn=dscp_ecn,
            total_length=total_length,
            identification=identification,
            flags_fragment=flags_fragment,
            ttl=ttl,
            protocol=protocol,
            checksum=checksum,
            src_addr=src,
            dst_addr=dst,
            options=bytes(data[cls.MIN_SIZE:length]),
        )

    def header_len(self) -> int:
        return self.ihl * 4

    def sip(self) -> Ip:
        return Ip(self.src_addr)

    def dip(self) -> Ip:
        return Ip(self.dst_addr)

    def __bytes__(self) -> bytes:
        fixed = self._FORMAT.pack(
            ((self.version & 0x0F) << 4) | (self.ihl & 0x0F),
            self.dscp_ecn,
            self.total_length,
            self.identification,
            self.flags_fragment,
            self.ttl,
            self.protocol,
            self.checksum,
            self.src_addr,
            self.dst_addr,
        )
        return fixed + self.options


@dataclass(frozen=True)
class TcpHdr:
    """A TCP header; options follow the fixed part."""

    sport: int
    dport: int
    seq: int
    ack: int
    data_offset: int
    flags: int
    window: int
    checksum: int
    urgent: int
    reserved: int = 0
    options: bytes = b""

    MIN_SIZE: ClassVar[int] = 20
    _FORMAT: ClassVar[struct.Struct] = struct.Struct("!HHIIBBHHH")

    @classmethod
    def parse(cls, data: bytes) -> TcpHdr:
        _need(data, cls.MIN_SIZE, "TCP header")
        (sport, dport, seq, ack, offset_byte, flags,
         window, checksum, urgent) = cls._FORMAT.unpack_from(bytes(data[: cls.MIN_SIZE]))
        data_offset = offset_byte >> 4
        length = data_offset * 4
        if length < cls.MIN_SIZE:
            raise ValueError(f"TCP header length {length} is below {cls.MIN_SIZE}")
        _need(data, length, "TCP header")
        return cls(
            sport=sport,
            dport=dport,
            seq=seq,
            ack=ack,
            data_offset=data_offset,
            flags=flags,
            window=window,
            checksum=checksum,
            urgent=urgent,
            reserved=offset_byte & 0x0F,
            options=bytes(data[cls.MIN_SIZE:length]),
        )

    def header_len(self) -> int:
        return self.data_offset * 4

    def __bytes__(self) -> bytes:
        fixed = self._FORMAT.pack(
            self.sport,
            self.dport,
            self.seq,
            self.ack,
            ((self.data_offset & 0x0F) << 4) | (self.reserved & 0x0F),
            self.flags,
            self.window,
            self.checksum,
            self.urgent,
        )
        return fixed + self.options


@dataclass(frozen=True)
class PseudoHeader:
    """The IPv4 pseudo-header covered by the TCP checksum."""

    src_addr: int
    dst_addr: int
    protocol: int
    tcp_length: int

    _FORMAT: ClassVar[struct.Struct] = struct.Struct("!IIBBH")

    def __bytes__(self) -> bytes:
        return self._FORMAT.pack(self.src_addr, self.dst_addr, 0, self.protocol, self.tcp_length)