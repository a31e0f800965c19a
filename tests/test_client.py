import pytest

from xoauth2sasl.client import (
    InteractionRequired,
    Prompt,
    XOAuth2Client,
    build_client_response,
    client_plug_init,
)
from xoauth2sasl.common import (
    CLIENT_PLUG_VERSION,
    MECHANISM,
    AuthResponse,
    BadProtocolError,
    StepStatus,
    VersionMismatchError,
)

USER = "someone@example.com"


def test_build_client_response_matches_auth_response():
    expected = AuthResponse(authid=USER, token="token").encode()
    assert build_client_response(USER, "Bearer", "token") == expected


def test_full_exchange_with_callbacks():
    client = XOAuth2Client(lambda: USER, lambda: "token")
    first = client.step(b"")
    assert first.status is StepStatus.CONTINUE
    assert first.output == build_client_response(USER, "Bearer", "token")
    second = client.step(b'{"status":"401"}')
    assert second.status is StepStatus.OK
    assert second.output == b""
    with pytest.raises(BadProtocolError):
        client.step(b"")


def test_missing_both_requests_two_prompts():
    client = XOAuth2Client()
    with pytest.raises(InteractionRequired) as info:
        client.step(b"")
    prompts = info.value.prompts
    assert [p.id for p in prompts] == [Prompt.AUTHNAME, Prompt.PASSWORD]
    assert prompts[0].challenge == "Authentication Name"
    assert prompts[0].prompt == "Authentication ID"
    assert prompts[1].prompt == "Password"
    assert client.state == 0


def test_missing_password_only():
    client = XOAuth2Client(authname_callback=lambda: USER)
    with pytest.raises(InteractionRequired) as info:
        client.step(b"")
    assert [p.id for p in info.value.prompts] == [Prompt.PASSWORD]


def test_answered_prompts_complete_step():
    client = XOAuth2Client()
    with pytest.raises(InteractionRequired) as info:
        client.step(b"")
    answered = info.value.prompts
    answered[0].result = USER
    answered[1].result = "token"
    result = client.step(b"", answered)
    assert result.output == build_client_response(USER, "Bearer", "token")
    assert client.state == 1


def test_prompt_takes_precedence_over_callback():
    client = XOAuth2Client(lambda: "other@example.com", lambda: "secret")
    answers = [Prompt(Prompt.AUTHNAME, result=USER), Prompt(Prompt.PASSWORD, result="token")]
    result = client.step(b"", answers)
    assert result.output == build_client_response(USER, "Bearer", "token")


def test_canon_user_receives_authid():
    seen = []

    def canon(name):
        seen.append(name)
        return name.upper()

    client = XOAuth2Client(lambda: USER, lambda: "token", canon)
    client.step(b"")
    assert seen == [USER]
    assert client.user == USER.upper()


def test_callback_error_propagates():
    def failing():
        raise BadProtocolError("nope")

    client = XOAuth2Client(failing, lambda: "token")
    with pytest.raises(BadProtocolError):
        client.step(b"")


def test_plug_init():
    version, mechs = client_plug_init(CLIENT_PLUG_VERSION)
    assert version == CLIENT_PLUG_VERSION
    assert mechs == [MECHANISM]


def test_plug_init_version_mismatch():
    with pytest.raises(VersionMismatchError):
        client_plug_init(CLIENT_PLUG_VERSION - 1)