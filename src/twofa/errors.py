"""Exception taxonomy shared by the engine, the store and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class TwofaError(Exception):
    """Base class for every error the CLI reports as a one-line message."""


class InvalidSecret(TwofaError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid secret: {detail}")
        self.detail = detail


class InvalidName(TwofaError):
    def __init__(self) -> None:
        super().__init__("account name must not be empty")


class DuplicateAccount(TwofaError):
    def __init__(self, name: str) -> None:
        super().__init__(f"account '{name}' already exists")
        self.name = name


class AccountNotFound(TwofaError):
    def __init__(self, name: str) -> None:
        super().__init__(f"account '{name}' not found")
        self.name = name


class MalformedURL(TwofaError):
    pass


class PersistFailure(TwofaError):
    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"failed to save accounts to {path}: {cause}")
        self.path = path
        self.cause = cause


class SelectorError(TwofaError):
    """The external selector is missing or returned something unusable."""


@dataclass(frozen=True)
class LoadWarning:
    """Non-fatal problem found while loading the accounts file."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"
