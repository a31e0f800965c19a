"""Client and server sides of the XOAUTH2 SASL mechanism."""

__version__ = "0.1.0"

__all__ = ["common", "client", "server"]