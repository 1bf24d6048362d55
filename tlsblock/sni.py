"""Server Name Indication extraction from a TLS ClientHello."""

from __future__ import annotations

TLS_HANDSHAKE = 0x16
CLIENT_HELLO = 0x01
SERVER_NAME_EXTENSION = 0x0000

# Record header (5) + handshake header (4) + client version and random (34).
_SESSION_ID_OFFSET = 5 + 4 + 34


def _u16(data: bytes, pos: int) -> int:
    return (data[pos] << 8) | data[pos + 1]


def is_client_hello(data: bytes) -> bool:
    """True when the bytes start a TLS handshake record carrying a ClientHello."""
    return len(data) >= 6 and data[0] == TLS_HANDSHAKE and data[5] == CLIENT_HELLO


def parse_sni(data: bytes) -> str:
    """Return the server name of a ClientHello record, or an empty string if there is none."""
    data = bytes(data)
    end = len(data)
    try:
        pos = _SESSION_ID_OFFSET
        if pos > end:
            return ""
        pos += 1 + data[pos]
        if pos > end:
            return ""
        pos += 2 + _u16(data, pos)
        if pos > end:
            return ""
        pos += 1 + data[pos]
        if pos > end:
            return ""
        extensions_len = _u16(data, pos)
        pos += 2
        extensions_end = pos + extensions_len
        if extensions_end > end:
            return ""

        while pos + 4 <= extensions_end:
            ext_type = _u16(data, pos)
            ext_size = _u16(data, pos + 2)
            pos += 4
            if ext_type == SERVER_NAME_EXTENSION:
                pos += 2  # server name list length
                pos += 1  # name type
                name_len = _u16(data, pos)
                pos += 2
                if pos + name_len > extensions_end:
                    return ""
                return data[pos:pos + name_len].decode("latin-1")
            pos += ext_size
    except IndexError:
        return ""
    return ""