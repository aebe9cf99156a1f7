"""Durable account store backed by a single JSON file.

Every mutation rewrites the whole file through a sibling ``.tmp`` file and an
atomic rename. That rename is the only write path and the only concurrency
guard: separate processes are not coordinated beyond last-writer-wins.
"""

from __future__ import annotations

import logging
import os
import stat
import time
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from twofa import totp
from twofa.config import Settings, ensure_data_dir
from twofa.errors import (
    AccountNotFound,
    DuplicateAccount,
    InvalidName,
    InvalidSecret,
    LoadWarning,
    PersistFailure,
)
from twofa.models import DEFAULT_ISSUER, ERROR_MARKER, Account, AccountList, CodeRow

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


@dataclass(frozen=True)
class StoreInfo:
    """Storage status shown by ``twofa info``."""

    path: Path
    account_count: int
    exists: bool
    size: int | None = None
    permissions: str | None = None
    modified_at: datetime | None = None


class AccountStore:
    """Ordered collection of accounts kept in step with one file on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._accounts: list[Account] = []
        self.load_warning: LoadWarning | None = None
        self.load()

    @classmethod
    def open(cls, settings: Settings) -> AccountStore:
        ensure_data_dir(settings)
        return cls(settings.data_file)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    @property
    def accounts(self) -> tuple[Account, ...]:
        return tuple(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(tuple(self._accounts))

    def __contains__(self, name: object) -> bool:
        return any(a.name == name for a in self._accounts)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace in-memory state with the file contents.

        A missing file is an empty store. An unreadable, empty or invalid
        file is reported through ``load_warning`` and also yields an empty
        store; loading never raises.
        """
        self._accounts = []
        self.load_warning = None

        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return
        except OSError as e:
            self._warn(f"Could not read accounts file: {e}")
            return

        if not data.strip():
            self._warn("Accounts file is empty")
            return

        try:
            self._accounts = AccountList.validate_json(data)
        except ValidationError as e:
            self._warn(f"Could not parse accounts file: {e.error_count()} error(s)")
            return

        logger.debug("Loaded %d accounts from %s", len(self._accounts), self.path)

    def _warn(self, message: str) -> None:
        self.load_warning = LoadWarning(path=self.path, message=message)
        logger.warning("%s", self.load_warning)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, name: str) -> Account:
        for account in self._accounts:
            if account.name == name:
                return account
        raise AccountNotFound(name)

    def list(self, now: float | None = None) -> list[CodeRow]:
        """Current code and seconds left for every account, in insertion order.

        A secret that fails to generate yields an error row; the remaining
        accounts are still listed.
        """
        if now is None:
            now = time.time()
        seconds_left = totp.time_remaining(now)
        rows = []
        for account in self._accounts:
            try:
                code = totp.generate(account.secret, totp.TIME_STEP, now)
            except (InvalidSecret, ValueError):
                rows.append(CodeRow(account.name, account.issuer, ERROR_MARKER, None))
                continue
            rows.append(CodeRow(account.name, account.issuer, code, seconds_left))
        return rows

    def info(self) -> StoreInfo:
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return StoreInfo(path=self.path, account_count=len(self), exists=False)
        return StoreInfo(
            path=self.path,
            account_count=len(self),
            exists=True,
            size=st.st_size,
            permissions=stat.filemode(st.st_mode),
            modified_at=datetime.fromtimestamp(st.st_mtime),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: str, secret: str, issuer: str = DEFAULT_ISSUER) -> Account:
        """Validate, append and persist a new account.

        If persisting fails the account is dropped again before
        ``PersistFailure`` propagates.
        """
        secret = totp.normalize_secret(secret)
        totp.decode_secret(secret)

        if not name:
            raise InvalidName()
        if name in self:
            raise DuplicateAccount(name)

        account = Account(name=name, secret=secret, issuer=issuer)
        self._accounts.append(account)
        try:
            self._persist()
        except PersistFailure:
            self._accounts.pop()
            raise
        logger.info("Added account %s", name)
        return account

    def remove(self, name: str) -> Account:
        """Delete and persist; on persist failure the account is restored."""
        for index, account in enumerate(self._accounts):
            if account.name == name:
                break
        else:
            raise AccountNotFound(name)

        del self._accounts[index]
        try:
            self._persist()
        except PersistFailure:
            self._accounts.insert(index, account)
            raise
        logger.info("Removed account %s", name)
        return account

    def _persist(self) -> None:
        """Write the full sequence to ``<file>.tmp`` and rename it into place."""
        tmp = self.tmp_path
        try:
            data = AccountList.dump_json(self._accounts, by_alias=True, indent=2)
            fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("Failed to save accounts to %s: %s", self.path, e)
            tmp.unlink(missing_ok=True)
            raise PersistFailure(self.path, e) from e
