"""Client side of the XOAUTH2 SASL mechanism."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import ClassVar

from .common import (
    CLIENT_PLUG_VERSION,
    DEFAULT_TOKEN_TYPE,
    MECHANISM,
    AuthResponse,
    BadProtocolError,
    MechanismInfo,
    SaslError,
    StepResult,
    StepStatus,
    VersionMismatchError,
)

_MAX_SECRET_LEN = 2**32 - 1


@dataclass
class Prompt:
    """A value the client asks the user for, and the answer once given."""

    AUTHNAME: ClassVar[str] = "authname"
    PASSWORD: ClassVar[str] = "password"

    id: str
    challenge: str | None = None
    prompt: str | None = None
    default_result: str | None = None
    result: str | None = None


class InteractionRequired(SaslError):
    """Raised when values must be gathered from the user before continuing."""

    def __init__(self, prompts: list[Prompt]):
        super().__init__("interaction required: " + ", ".join(p.id for p in prompts))
        self.prompts = prompts


def build_client_response(authid: str, token_type: str, token: str) -> bytes:
    """Encode the client's initial response."""
    return AuthResponse(authid=authid, token=token, token_type=token_type).encode()


def _from_prompts(prompts: Iterable[Prompt] | None, prompt_id: str) -> str | None:
    if not prompts:
        return None
    for prompt in prompts:
        if prompt.id == prompt_id:
            return prompt.result
    return None


class XOAuth2Client:
    """One client-side XOAUTH2 exchange."""

    def __init__(
        self,
        authname_callback: Callable[[], str | None] | None = None,
        password_callback: Callable[[], str | None] | None = None,
        canon_user: Callable[[str], str | None] | None = None,
    ):
        self._authname_callback = authname_callback
        self._password_callback = password_callback
        self._canon_user = canon_user
        self.state = 0
        self.user: str | None = None

    def step(self, server_in: bytes = b"", prompts: Iterable[Prompt] | None = None) -> StepResult:
        """Advance the exchange with the server's data and any answered prompts."""
        if self.state == 0:
            return self._first_step(prompts)
        if self.state == 1:
            self.state = 2
            return StepResult(StepStatus.OK, b"")
        raise BadProtocolError("exchange already finished")

    def _first_step(self, prompts: Iterable[Prompt] | None) -> StepResult:
        prompts = list(prompts) if prompts is not None else None

        authid = _from_prompts(prompts, Prompt.AUTHNAME)
        if authid is None and self._authname_callback is not None:
            authid = self._authname_callback()

        token = _from_prompts(prompts, Prompt.PASSWORD)
        if token is None and self._password_callback is not None:
            token = self._password_callback()
            if token is not None and len(token.encode("utf-8")) >= _MAX_SECRET_LEN:
                raise BadProtocolError("secret is too long")

        if authid is None or token is None:
            wanted = []
            if authid is None:
                wanted.append(
                    Prompt(Prompt.AUTHNAME, "Authentication Name", "Authentication ID")
                )
            if token is None:
                wanted.append(Prompt(Prompt.PASSWORD, "Password", "Password"))
            raise InteractionRequired(wanted)

        canonical = self._canon_user(authid) if self._canon_user is not None else None
        self.user = canonical if canonical is not None else authid
        output = build_client_response(authid, DEFAULT_TOKEN_TYPE, token)
        self.state = 1
        return StepResult(StepStatus.CONTINUE, output)


def client_plug_init(max_version: int) -> tuple[int, list[MechanismInfo]]:
    """Return the plug-in version and the client mechanisms offered."""
    if max_version < CLIENT_PLUG_VERSION:
        raise VersionMismatchError("xoauth2: version mismatch")
    return CLIENT_PLUG_VERSION, [MECHANISM]