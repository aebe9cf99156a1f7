"""Parse otpauth://totp/ provisioning URLs into accounts.

The label and query values are taken verbatim: no percent-decoding and no
Base32 validation here. Secrets are checked when the account is added.
"""

from __future__ import annotations

from twofa.errors import MalformedURL
from twofa.models import DEFAULT_ISSUER, Account

SCHEME_PREFIX = "otpauth://totp/"


def parse_query(query: str) -> dict[str, str]:
    """Split ``a=1&b=2`` into a dict. Pairs without exactly one ``=`` are skipped."""
    params: dict[str, str] = {}
    for pair in query.split("&"):
        kv = pair.split("=")
        if len(kv) == 2:
            params[kv[0]] = kv[1]
    return params


def parse_auth_url(url: str) -> Account:
    if not url.startswith(SCHEME_PREFIX):
        raise MalformedURL("invalid otpauth URL format: expected otpauth://totp/")

    parts = url.split("?")
    if len(parts) != 2:
        raise MalformedURL("malformed otpauth URL: expected exactly one '?'")

    label = parts[0][len(SCHEME_PREFIX):]
    if not label:
        raise MalformedURL("missing account name in URL")

    params = parse_query(parts[1])
    if "secret" not in params:
        raise MalformedURL("missing secret parameter")

    return Account(
        name=label,
        secret=params["secret"],
        issuer=params.get("issuer") or DEFAULT_ISSUER,
    )
