# tlsblock

`tlsblock` listens on a network interface for TLS handshakes. When a
ClientHello carries a Server Name Indication (SNI) that contains a target
string, it tears the TCP connection down by injecting RST+ACK packets in both
directions.

## Installation

```
pip install .
```

Linux only: capture uses an `AF_PACKET` socket and the interface address is
read with an `ioctl`. Capturing and injecting raw packets needs root or the
`CAP_NET_RAW` capability.

## Usage

```
tls-block <interface> <server name>
```

For example:

```
sudo tls-block eth0 example.com
```

With the wrong number of arguments the usage line is printed and the command
exits with status -1; the same status is returned, with a message on standard
error, if the interface cannot be opened. The command runs until interrupted
with Ctrl-C.

Each time a ClientHello with a server name is seen, the name is printed:

```
Captured SNI: www.example.com
Blocking connection targeting: www.example.com
```

A connection is blocked when the target appears anywhere in the server name,
so `example.com` also matches `www.example.com`.

How it works:

- The interface is put into promiscuous mode and every frame is read.
  Only IPv4 TCP segments that carry a payload are looked at.
- Payloads are appended per flow (source and destination address and port),
  so a ClientHello split over several segments is still recognised once the
  collected bytes hold the server name.
- On a match, a RST+ACK is sent toward the server on the capture interface:
  the observed frame's headers with the interface's own MAC address as the
  source, the sequence number advanced past the payload and the window set
  to zero.
- A second RST+ACK, with addresses and ports swapped and the sequence and
  acknowledgement numbers exchanged, is sent to the client through a raw IP
  socket. The flow's collected bytes are then dropped.

## Library use

- `tlsblock.sni.parse_sni(data)` returns the server name from a TLS record
  holding a ClientHello, or an empty string when there is none or the data
  is cut short.
- `tlsblock.sni.is_client_hello(data)` tells whether a buffer starts with a
  handshake record holding a ClientHello.
- `tlsblock.rst.checksum(data)` computes the 16-bit Internet checksum.
- `tlsblock.rst.forward_rst(eth, ip_header, tcp_header, payload_size, local_mac)`
  returns an Ethernet frame, and `tlsblock.rst.backward_rst(ip_header, tcp_header)`
  an IP packet, each with both checksums filled in.
- `tlsblock.cli.Blocker(target_sni)` keeps the per-flow buffers. Its
  `process(frame)` takes one Ethernet frame and returns `None`, or a verdict
  with the `sni` seen, `blocked`, and the `forward` and `backward` packets
  when the name matched. Set its `local_mac` before use; it starts as the
  all-zero address.
- `tlsblock.cli.get_local_mac(interface)` reads an interface's hardware
  address.
- `tlsblock.headers` has `EthHdr`, `IpHdr`, `TcpHdr` and `PseudoHeader`, each
  built with `parse(data)` (except `PseudoHeader`) and turned back into wire
  bytes with `bytes()`, plus the `EtherType` and `TcpFlag` enums.
- `tlsblock.mac.Mac` and `tlsblock.ip.Ip` hold MAC and IPv4 addresses;
  `Mac.parse(text)` and `Ip.parse(text)` read them from text and `str()`
  writes them back.

## Limits

Only IPv4 is handled; IPv6 traffic passes untouched. Flows whose payload
never forms a ClientHello keep their buffers for as long as the command runs.

## Tests

```
pip install .[test]
pytest
```