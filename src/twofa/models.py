"""Pydantic models for accounts and listing rows."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_ISSUER = "Unknown"
ERROR_MARKER = "ERROR"


class Account(BaseModel):
    """A named TOTP credential.

    On disk the fields are spelled ``Name``, ``Secret`` and ``Issuer``; those
    keys are part of the file format and must not change.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    secret: str = Field(alias="Secret")
    issuer: str = Field(default=DEFAULT_ISSUER, alias="Issuer")

    @property
    def label(self) -> str:
        """Menu text: ``name`` or ``name (issuer)``."""
        if self.issuer and self.issuer != DEFAULT_ISSUER:
            return f"{self.name} ({self.issuer})"
        return self.name


class CodeRow(NamedTuple):
    """One display row produced by ``AccountStore.list``."""

    name: str
    issuer: str
    code: str
    seconds_left: int | None

    @property
    def ok(self) -> bool:
        return self.code != ERROR_MARKER


AccountList = TypeAdapter(list[Account])
