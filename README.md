# xoauth2sasl

The `XOAUTH2` SASL mechanism for Python, covering both sides of the exchange:

- a **client** (`xoauth2sasl.client`) that gathers an authentication id and
  an OAuth 2.0 bearer token and builds the initial response
  (`user=<authid>\x01auth=Bearer <token>\x01\x01`);
- a **server** (`xoauth2sasl.server`) that parses that response, checks the
  token against the bearer tokens known for the user, and answers a rejected
  token with a JSON error challenge
  (`{"status":"401","scheme":"<token type>","scope":"<scope>"}`).

Shared types live in `xoauth2sasl.common`. The package has no dependencies
outside the standard library.

## Installation

```
pip install xoauth2sasl
```

## The mechanism

Both sides describe themselves through `MechanismInfo`, which is what
`client_plug_init(max_version)` and `server_plug_init(max_version, getopt)`
return. The mechanism is named `XOAUTH2`, has a `max_ssf` of 0, carries the
security flags `SecurityFlag.NOANONYMOUS | SecurityFlag.PASS_CREDENTIALS`
and the features `Feature.WANT_CLIENT_FIRST | Feature.ALLOWS_PROXY`.

- `client_plug_init(max_version)` returns `(version, [MechanismInfo])`.
- `server_plug_init(max_version, getopt=None)` returns
  `(version, [MechanismInfo], ServerSettings)`.

Both raise `VersionMismatchError` when `max_version` is below the plug-in
version they implement (4).

Each step returns a `StepResult` with a `status` (`StepStatus.CONTINUE` or
`StepStatus.OK`) and the `output` bytes to send to the peer.

## Client side

`XOAuth2Client` takes three optional callables: one that returns the
authentication name, one that returns the token, and one that canonicalises
the user name (its result, when not `None`, is stored in `client.user`).

```python
from xoauth2sasl.client import XOAuth2Client

client = XOAuth2Client(
    authname_callback=lambda: "user@example.com",
    password_callback=lambda: "token",
    canon_user=lambda authid: authid,
)

first = client.step(b"", None)   # CONTINUE, carrying the initial response
final = client.step(b"", None)   # OK, empty output
```

A third call raises `BadProtocolError`.

When the name or the token is neither found among the given prompts nor
returned by its callback, `step` raises `InteractionRequired`. Its `prompts`
attribute lists the `Prompt` objects still to be answered (ids
`Prompt.AUTHNAME` and `Prompt.PASSWORD`). Fill in each prompt's `result`
and call `step` again with them:

```python
from xoauth2sasl.client import InteractionRequired, XOAuth2Client

client = XOAuth2Client()
try:
    client.step()
except InteractionRequired as exc:
    prompts = exc.prompts
for prompt in prompts:
    prompt.result = "user@example.com" if prompt.id == "authname" else "token"
result = client.step(b"", prompts)
```

A token from the callback whose UTF-8 form is 2**32 - 1 bytes or longer
raises `BadProtocolError`.

`build_client_response(authid, token_type, token)` builds the wire format
on its own; `AuthResponse(authid, token, token_type="Bearer").encode()`
does the same.

## Server side

```python
from xoauth2sasl.server import ServerSettings, XOAuth2Server

server = XOAuth2Server(
    settings=ServerSettings(scope="https://mail.example.com/"),
    lookup_tokens=lambda user: ["token"],
    canon_user=lambda authid: authid,
    transition=False,
)

result = server.step(b"user=user@example.com\x01auth=Bearer token\x01\x01")
```

- A token found among those `lookup_tokens` returns for the user completes
  the exchange with `StepStatus.OK`.
- An unknown token, a `lookup_tokens` result of `None`, or a `canon_user`
  that raises `SaslError` yields `StepStatus.CONTINUE` with the JSON
  challenge. The next step raises `NoUserError`, or
  `TransitionRequiredError` when the server was created with
  `transition=True`.
- A malformed response, or a token type other than `Bearer` (compared
  without regard to case), raises `BadProtocolError`.

All errors derive from `SaslError`. After the first step, `server.user`
holds the canonical user name and, on rejection, `server.response` holds the
parsed `AuthResponse`.

`load_server_settings(getopt)` reads the `xoauth2_scope` option by calling
`getopt("XOAUTH2", "xoauth2_scope")` and falls back to an empty scope when
the option is unset, `getopt` is `None`, or it raises `SaslError`.

Lower-level helpers:

- `parse_client_response(data)` returns an `AuthResponse`; the `user=` and
  `auth=` prefixes are matched without regard to case and spaces before the
  token are skipped.
- `json_quote(value)` quotes a string for JSON, escaping `\b \t \n \f \r "`
  and `\`.
- `build_json_response(status, token_type, scope)` builds the error
  challenge.

## What the package does not do

It implements the mechanism only. It does not fetch or refresh OAuth 2.0
tokens, store tokens for users, or speak IMAP, SMTP or any other protocol;
token lookup, user canonicalisation and option reading are left to the
callables you pass in.

## Running the tests

```
pip install -e ".[test]"
pytest
```