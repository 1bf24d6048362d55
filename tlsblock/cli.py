"""Watch an interface and reset TLS connections whose server name matches a target."""

from __future__ import annotations

import fcntl
import socket
import struct
import sys
from dataclasses import dataclass, field

from .headers import EthHdr, EtherType, IpHdr, TcpHdr
from .ip import Ip
from .mac import Mac
from .rst import backward_rst, forward_rst
from .sni import is_client_hello, parse_sni

USAGE = "Usage: tls-block <interface> <server name>"

_SIOCGIFHWADDR = 0x8927
_IFNAMSIZ = 16
_ETH_P_ALL = 0x0003
_SOL_PACKET = 263
_PACKET_ADD_MEMBERSHIP = 1
_PACKET_MR_PROMISC = 1
_SNAPLEN = 65535


@dataclass(frozen=True, order=True)
class FlowKey:
    """One direction of a TCP connection."""

    src_ip: int
    dst_ip: int
    src_port: int
    dst_port: int


@dataclass(frozen=True)
class _Verdict:
    sni: str
    forward: bytes | None = None
    backward: bytes | None = None

    @property
    def blocked(self) -> bool:
        return self.forward is not None


@dataclass
class Blocker:
    """Reassembles TCP payloads per flow and decides which connections to reset."""

    target_sni: str
    local_mac: Mac = field(default_factory=Mac.null)
    segments: dict[FlowKey, bytearray] = field(default_factory=dict)

    def __init__(self, target_sni: str) -> None:
        self.target_sni = target_sni
        self.local_mac = Mac.null()
        self.segments = {}

    def process(self, frame: bytes) -> _Verdict | None:
        """Feed one Ethernet frame; return a verdict once a server name is seen."""
        try:
            eth = EthHdr.parse(frame)
            if eth.ether_type != EtherType.IP4:
                return None
            ip_header = IpHdr.parse(frame[EthHdr.SIZE:])
            if ip_header.protocol != IpHdr.TCP:
                return None
            ip_len = ip_header.header_len()
            tcp_header = TcpHdr.parse(frame[EthHdr.SIZE + ip_len:])
        except ValueError:
            return None

        tcp_len = tcp_header.header_len()
        payload_size = ip_header.total_length - ip_len - tcp_len
        if payload_size <= 0:
            return None
        start = EthHdr.SIZE + ip_len + tcp_len
        payload = frame[start:start + payload_size]

        key = FlowKey(ip_header.src_addr, ip_header.dst_addr, tcp_header.sport, tcp_header.dport)
        buffer = self.segments.setdefault(key, bytearray())
        buffer += payload

        if not is_client_hello(buffer):
            return None
        sni = parse_sni(buffer)
        if not sni:
            return None
        if self.target_sni not in sni:
            return _Verdict(sni)

        forward = forward_rst(eth, ip_header, tcp_header, payload_size, self.local_mac)
        backward = backward_rst(ip_header, tcp_header)
        del self.segments[key]
        return _Verdict(sni, forward, backward)


def get_local_mac(interface: str) -> Mac:
    """The hardware address of a network interface."""
    request = struct.pack("256s", interface.encode()[: _IFNAMSIZ - 1])
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        info = fcntl.ioctl(sock.fileno(), _SIOCGIFHWADDR, request)
    return Mac(info[18:24])


def _open_capture(interface: str) -> socket.socket:
    sock = socket.socket(socket.AF_PACKET, socket.SOCK_RAW, socket.htons(_ETH_P_ALL))
    try:
        sock.bind((interface, 0))
        mreq = struct.pack("iHH8s", socket.if_nametoindex(interface), _PACKET_MR_PROMISC, 0, b"")
        sock.setsockopt(_SOL_PACKET, _PACKET_ADD_MEMBERSHIP, mreq)
    except OSError:
        sock.close()
        raise
    return sock


def _send_raw_ip(packet: bytes) -> None:
    destination = str(IpHdr.parse(packet).dip())
    with socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_RAW) as sock:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_HDRINCL, 1)
        sock.sendto(packet, (destination, 0))


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print(USAGE)
        return -1

    interface, target_sni = args
    blocker = Blocker(target_sni)
    try:
        blocker.local_mac = get_local_mac(interface)
        capture = _open_capture(interface)
    except OSError as exc:
        print(f"cannot open {interface}: {exc}", file=sys.stderr)
        return -1

    with capture:
        try:
            while True:
                try:
                    frame = capture.recv(_SNAPLEN)
                except OSError:
                    continue
                verdict = blocker.process(frame)
                if verdict is None:
                    continue
                print(f"Captured SNI: {verdict.sni}", flush=True)
                if verdict.blocked:
                    print(f"Blocking connection targeting: {verdict.sni}", flush=True)
                    capture.send(verdict.forward)
                    _send_raw_ip(verdict.backward)
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())