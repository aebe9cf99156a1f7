"""TOTP (RFC 6238) code generation.

Secrets are validated with a strict RFC 4648 decode before being handed to
pyotp, which performs the HMAC-SHA1 and dynamic truncation steps.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
import time
from urllib.parse import quote, urlencode

import pyotp

from twofa.errors import InvalidSecret
from twofa.models import Account

TIME_STEP = 30
DIGITS = 6

_WHITESPACE = re.compile(r"\s+")


def normalize_secret(secret: str) -> str:
    """Uppercase and drop all whitespace, giving the canonical stored form."""
    return _WHITESPACE.sub("", secret).upper()


def decode_secret(secret: str) -> bytes:
    """Decode a Base32 secret (standard alphabet, padded) into key bytes."""
    try:
        key = base64.b32decode(secret.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        raise InvalidSecret(str(e)) from e
    if not key:
        raise InvalidSecret("empty key")
    return key


def counter_at(now: float, time_step: int = TIME_STEP) -> int:
    """Number of whole time steps since the Unix epoch."""
    return int(now // time_step)


def generate(secret: str, time_step: int = TIME_STEP, now: float | None = None) -> str:
    """Get the 6-digit TOTP code for a secret at ``now`` (default: current time)."""
    decode_secret(secret)
    if now is None:
        now = time.time()
    counter = counter_at(now, time_step)
    if counter < 0:
        raise ValueError("time before the Unix epoch")
    return pyotp.HOTP(secret, digits=DIGITS, digest=hashlib.sha1).at(counter)


def time_remaining(now: float | None = None, time_step: int = TIME_STEP) -> int:
    """Seconds until the current code rolls over, in [1, time_step]."""
    if now is None:
        now = time.time()
    return time_step - int(now) % time_step


def provisioning_uri(account: Account) -> str:
    """Get the otpauth:// URI for an account."""
    params = {"secret": account.secret}
    if account.issuer:
        params["issuer"] = account.issuer
    return f"otpauth://totp/{quote(account.name, safe='@:')}?{urlencode(params, quote_via=quote)}"
