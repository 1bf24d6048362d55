import pytest

from tlsblock.headers import EthHdr, EtherType, IpHdr, PseudoHeader, TcpFlag, TcpHdr
from tlsblock.mac import Mac
from tlsblock.rst import backward_rst, checksum, forward_rst

CLIENT = 0x0A000001
SERVER = 0x0A000002


def make_headers(seq=1000, ack=2000, ip_options=b"", payload=100):
    ihl = 5 + len(ip_options) // 4
    ip = IpHdr(version=4, ihl=ihl, dscp_ecn=0, total_length=ihl * 4 + 20 + payload,
               identification=7, flags_fragment=0x4000, ttl=64, protocol=6,
               checksum=0x1234, src_addr=CLIENT, dst_addr=SERVER, options=ip_options)
    tcp = TcpHdr(sport=40000, dport=443, seq=seq, ack=ack, data_offset=5,
                 flags=int(TcpFlag.PSH | TcpFlag.ACK), window=512, checksum=0x4321, urgent=0)
    eth = EthHdr(Mac.parse("02:00:00:00:00:01"), Mac.parse("02:00:00:00:00:02"), EtherType.IP4)
    return eth, ip, tcp


def tcp_sum_ok(ip: IpHdr, tcp_bytes: bytes) -> bool:
    pseudo = PseudoHeader(ip.src_addr, ip.dst_addr, 6, len(tcp_bytes))
    return checksum(bytes(pseudo) + tcp_bytes) == 0


def test_checksum_of_nothing():
    assert checksum(b"") == 0xFFFF


def test_checksum_known_header():
    header = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")
    assert checksum(header) == 0xB861


def test_checksum_odd_length_pads_with_zero():
    assert checksum(b"\x01\x02\x03") == checksum(b"\x01\x02\x03\x00")


def test_checksum_verifies_to_zero():
    header = bytearray.fromhex("450000730000400040110000c0a80001c0a800c7")
    header[10:12] = checksum(header).to_bytes(2, "big")
    assert checksum(header) == 0


def test_forward_rst_frame():
    eth, ip, tcp = make_headers()
    local = Mac.parse("02:00:00:00:00:99")
    frame = forward_rst(eth, ip, tcp, 100, local)
    assert len(frame) == 14 + 20 + 20
    new_eth = EthHdr.parse(frame)
    assert new_eth.smac == local
    assert new_eth.dmac == eth.dmac
    new_ip = IpHdr.parse(frame[14:])
    assert new_ip.total_length == 40
    assert (new_ip.src_addr, new_ip.dst_addr) == (CLIENT, SERVER)
    assert checksum(frame[14:34]) == 0
    new_tcp = TcpHdr.parse(frame[34:])
    assert new_tcp.seq == 1100
    assert new_tcp.ack == 2000
    assert (new_tcp.sport, new_tcp.dport) == (40000, 443)
    assert new_tcp.flags == TcpFlag.RST | TcpFlag.ACK
    assert new_tcp.window == 0
    assert tcp_sum_ok(new_ip, frame[34:])


def test_forward_rst_sequence_wraps():
    eth, ip, tcp = make_headers(seq=0xFFFFFFFF)
    frame = forward_rst(eth, ip, tcp, 1, Mac.null())
    assert TcpHdr.parse(frame[34:]).seq == 0


def test_backward_rst_packet():
    _, ip, tcp = make_headers()
    packet = backward_rst(ip, tcp)
    assert len(packet) == 40
    new_ip = IpHdr.parse(packet)
    assert (new_ip.src_addr, new_ip.dst_addr) == (SERVER, CLIENT)
    assert new_ip.total_length == 40
    assert checksum(packet[:20]) == 0
    new_tcp = TcpHdr.parse(packet[20:])
    assert (new_tcp.sport, new_tcp.dport) == (443, 40000)
    assert (new_tcp.seq, new_tcp.ack) == (2000, 1000)
    assert new_tcp.flags == TcpFlag.RST | TcpFlag.ACK
    assert new_tcp.window == 0
    assert tcp_sum_ok(new_ip, packet[20:])


@pytest.mark.parametrize("options", [b"\x01\x01\x01\x00", b"\x01" * 8])
def test_ip_options_are_kept(options):
    _, ip, tcp = make_headers(ip_options=options)
    packet = backward_rst(ip, tcp)
    new_ip = IpHdr.parse(packet)
    assert new_ip.options == options
    assert new_ip.total_length == 40 + len(options)
    assert checksum(packet[:new_ip.header_len()]) == 0