"""Shared types for the XOAUTH2 SASL mechanism."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MECHANISM_NAME = "XOAUTH2"
CLIENT_PLUG_VERSION = 4
SERVER_PLUG_VERSION = 4
BEARER_TOKENS_PROPERTY = "oauth2BearerTokens"
DEFAULT_TOKEN_TYPE = "Bearer"


class SaslError(Exception):
    """Base class for all mechanism failures."""


class BadProtocolError(SaslError):
    """The peer sent data that does not follow the protocol."""


class NoUserError(SaslError):
    """The user could not be authenticated."""


class TransitionRequiredError(SaslError):
    """Authentication failed and a password transition is needed."""


class VersionMismatchError(SaslError):
    """The host supports an older plug-in interface than required."""


class SecurityFlag(enum.IntFlag):
    """Security properties a mechanism may provide."""

    NOPLAINTEXT = 0x0001
    NOACTIVE = 0x0002
    NODICTIONARY = 0x0004
    FORWARD_SECRECY = 0x0008
    NOANONYMOUS = 0x0010
    PASS_CREDENTIALS = 0x0020
    MUTUAL_AUTH = 0x0040


class Feature(enum.IntFlag):
    """Features a mechanism advertises."""

    NEEDSERVERFQDN = 0x0001
    WANT_CLIENT_FIRST = 0x0002
    SERVER_FIRST = 0x0010
    ALLOWS_PROXY = 0x0020


class StepStatus(enum.Enum):
    """Outcome of a successful exchange step."""

    CONTINUE = "continue"
    OK = "ok"


@dataclass(frozen=True)
class StepResult:
    """What one exchange step produced: a status and bytes for the peer."""

    status: StepStatus
    output: bytes = b""


@dataclass(frozen=True)
class AuthResponse:
    """The client's initial XOAUTH2 message."""

    authid: str
    token: str
    token_type: str = DEFAULT_TOKEN_TYPE

    def encode(self) -> bytes:
        """Return the wire form: user=ID^Aauth=TYPE TOKEN^A^A."""
        return b"".join(
            (
                b"user=",
                self.authid.encode("utf-8"),
                b"\x01",
                b"auth=",
                self.token_type.encode("utf-8"),
                b" ",
                self.token.encode("utf-8"),
                b"\x01\x01",
            )
        )


@dataclass(frozen=True)
class MechanismInfo:
    """Static description of a mechanism offered to the host."""

    name: str = MECHANISM_NAME
    max_ssf: int = 0
    security_flags: SecurityFlag = field(
        default=SecurityFlag.NOANONYMOUS | SecurityFlag.PASS_CREDENTIALS
    )
    features: Feature = field(
        default=Feature.WANT_CLIENT_FIRST | Feature.ALLOWS_PROXY
    )


MECHANISM = MechanismInfo()