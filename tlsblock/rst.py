"""Building TCP reset packets that tear down an observed connection."""

from __future__ import annotations

import struct
from dataclasses import replace

from .headers import IPPROTO_TCP, EthHdr, IpHdr, PseudoHeader, TcpFlag, TcpHdr
from .mac import Mac

_RST_ACK = int(TcpFlag.RST | TcpFlag.ACK)


def checksum(data: bytes) -> int:
    """The Internet one's-complement checksum of the bytes, as a 16-bit value."""
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def _seal(ip_header: IpHdr, tcp_header: TcpHdr) -> bytes:
    """Fill in both checksums and return the IP and TCP headers as wire bytes."""
    ip_header = replace(ip_header, checksum=0)
    ip_header = replace(ip_header, checksum=checksum(bytes(ip_header)))
    tcp_len = tcp_header.header_len()
    tcp_header = replace(tcp_header, checksum=0)
    pseudo = PseudoHeader(ip_header.src_addr, ip_header.dst_addr, IPPROTO_TCP, tcp_len)
    tcp_header = replace(tcp_header, checksum=checksum(bytes(pseudo) + bytes(tcp_header)))
    return bytes(ip_header) + bytes(tcp_header)


def forward_rst(eth: EthHdr, ip_header: IpHdr, tcp_header: TcpHdr,
                payload_size: int, local_mac: Mac) -> bytes:
    """An Ethernet frame resetting the connection towards the original destination."""
    ip_new = replace(ip_header, total_length=ip_header.header_len() + tcp_header.header_len())
    tcp_new = replace(
        tcp_header,
        seq=(tcp_header.seq + payload_size) & 0xFFFFFFFF,
        flags=_RST_ACK,
        window=0,
    )
    return bytes(replace(eth, smac=local_mac)) + _seal(ip_new, tcp_new)


def backward_rst(ip_header: IpHdr, tcp_header: TcpHdr) -> bytes:
    """An IP packet resetting the connection towards the original sender."""
    ip_new = replace(
        ip_header,
        src_addr=ip_header.dst_addr,
        dst_addr=ip_header.src_addr,
        total_length=ip_header.header_len() + tcp_header.header_len(),
    )
    tcp_new = replace(
        tcp_header,
        sport=tcp_header.dport,
        dport=tcp_header.sport,
        seq=tcp_header.ack,
        ack=tcp_header.seq,
        flags=_RST_ACK,
        window=0,
    )
    return _seal(ip_new, tcp_new)