"""Server side of the XOAUTH2 SASL mechanism."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .common import (
    MECHANISM,
    MECHANISM_NAME,
    SERVER_PLUG_VERSION,
    AuthResponse,
    BadProtocolError,
    MechanismInfo,
    NoUserError,
    SaslError,
    StepResult,
    StepStatus,
    TransitionRequiredError,
    VersionMismatchError,
)

log = logging.getLogger(__name__)

_PARSE_ERROR = "Failed to parse authentication information"
_SCOPE_OPTION = "xoauth2_scope"

_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


@dataclass(frozen=True)
class ServerSettings:
    """Server-wide options for the mechanism."""

    scope: str = ""


def json_quote(value: str) -> str:
    """Quote a string as a JSON string literal, escaping the usual characters."""
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in value) + '"'


def build_json_response(status: str, token_type: str, scope: str) -> bytes:
    """Build the JSON error challenge sent when a token is rejected."""
    # The key is "scheme": the mechanism has always sent it that way.
    members = (
        (json_quote("status"), json_quote(status)),
        (json_quote("scheme"), json_quote(token_type)),
        (json_quote("scope"), json_quote(scope)),
    )
    body = ",".join(f"{key}:{value}" for key, value in members)
    return ("{" + body + "}").encode("utf-8")


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadProtocolError(_PARSE_ERROR) from exc


def parse_client_response(data: bytes | None) -> AuthResponse:
    """Parse the client's initial message: user=ID^Aauth=TYPE TOKEN^A^A."""
    if data is None:
        raise BadProtocolError("no client response")
    data = bytes(data)
    if len(data) < 5 or data[:5].lower() != b"user=":
        raise BadProtocolError(_PARSE_ERROR)
    authid, sep, rest = data[5:].partition(b"\x01")
    if not sep:
        raise BadProtocolError(_PARSE_ERROR)
    if len(rest) < 5 or rest[:5].lower() != b"auth=":
        raise BadProtocolError(_PARSE_ERROR)
    credentials, sep, tail = rest[5:].partition(b"\x01")
    if not sep or tail != b"\x01":
        raise BadProtocolError(_PARSE_ERROR)
    scheme, sep, credential = credentials.partition(b" ")
    if not sep:
        raise BadProtocolError(_PARSE_ERROR)
    credential = credential.lstrip(b" ")
    if not credential:
        raise BadProtocolError(_PARSE_ERROR)
    return AuthResponse(
        authid=_decode(authid),
        token=_decode(credential),
        token_type=_decode(scheme),
    )


class XOAuth2Server:
    """One server-side XOAUTH2 exchange."""

    def __init__(
        self,
        settings: ServerSettings | None = None,
        lookup_tokens: Callable[[str], Iterable[str] | None] | None = None,
        canon_user: Callable[[str], str | None] | None = None,
        transition: bool = False,
    ):
        self.settings = settings if settings is not None else ServerSettings()
        self._lookup_tokens = lookup_tokens
        self._canon_user = canon_user
        self.transition = transition
        self.state = 0
        self.user: str | None = None
        self.response: AuthResponse | None = None

    def step(self, client_in: bytes | None = None) -> StepResult:
        """Advance the exchange with the client's data."""
        if self.state == 0:
            return self._first_step(client_in)
        if self.state == 1:
            return self._second_step()
        raise BadProtocolError("exchange already finished")

    def _first_step(self, client_in: bytes | None) -> StepResult:
        log.debug("xoauth2: step1")
        resp = parse_client_response(client_in)
        if resp.token_type.lower() != "bearer":
            raise BadProtocolError(f"unsupported token type: {resp.token_type}")

        if self._token_is_valid(resp):
            self.state = 2
            return StepResult(StepStatus.OK, b"")

        output = build_json_response("401", resp.token_type, self.settings.scope)
        self.state = 1
        self.response = resp
        return StepResult(StepStatus.CONTINUE, output)

    def _token_is_valid(self, resp: AuthResponse) -> bool:
        try:
            canonical = (
                self._canon_user(resp.authid) if self._canon_user is not None else None
            )
        except SaslError:
            log.error(
                "failed to canonify user and get auxprops for user %s", resp.authid
            )
            return False
        user = canonical if canonical is not None else resp.authid
        self.user = user

        known = self._lookup_tokens(user) if self._lookup_tokens is not None else None
        if known is None:
            log.error("no bearer token found for user %s", resp.authid)
            return False
        return any(candidate == resp.token for candidate in known)

    def _second_step(self) -> StepResult:
        log.debug("xoauth2: step2")
        rejected = self.response.token if self.response is not None else None
        message = f"bearer token is not valid: {rejected or ''}"
        if self.transition:
            raise TransitionRequiredError(message)
        raise NoUserError(message)


def load_server_settings(
    getopt: Callable[[str, str], str | None] | None,
) -> ServerSettings:
    """Read the server options; an unset scope becomes empty."""
    scope = None
    if getopt is not None:
        try:
            scope = getopt(MECHANISM_NAME, _SCOPE_OPTION)
        except SaslError:
            scope = None
    if scope is None:
        log.info("%s is not set", _SCOPE_OPTION)
        scope = ""
    return ServerSettings(scope=scope)


def server_plug_init(
    max_version: int,
    getopt: Callable[[str, str], str | None] | None = None,
) -> tuple[int, list[MechanismInfo], ServerSettings]:
    """Return the plug-in version, the server mechanisms and their settings."""
    if max_version < SERVER_PLUG_VERSION:
        raise VersionMismatchError("xoauth2: version mismatch")
    settings = load_server_settings(getopt)
    return SERVER_PLUG_VERSION, [MECHANISM], settings