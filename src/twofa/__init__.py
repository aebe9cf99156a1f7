"""twofa: local TOTP authenticator for multiple named accounts."""

__version__ = "0.1.0"
