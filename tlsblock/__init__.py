"""Reset TCP connections whose TLS ClientHello names a blocked server."""

__version__ = "0.1.0"
__all__ = ["cli", "headers", "ip", "mac", "rst", "sni"]