"""Desktop collaborators: an external selector menu and the system clipboard.

Both are reached through small protocols so tests can swap in fakes. The
default implementations shell out to dmenu and to whichever clipboard
utility is installed.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from twofa import totp
from twofa.errors import SelectorError
from twofa.models import Account
from twofa.store import AccountStore

logger = logging.getLogger(__name__)


class Selector(Protocol):
    def present_options(self, options: Sequence[str]) -> str | None:
        """Return the chosen option, or None if the user cancelled."""


class ClipboardSink(Protocol):
    def write(self, text: str) -> bool:
        """Deliver text to the clipboard. False means it did not get there."""


class CommandSelector:
    """Feeds newline-separated options to a menu program such as dmenu."""

    def __init__(self, command: Sequence[str]) -> None:
        self.command = list(command)

    def present_options(self, options: Sequence[str]) -> str | None:
        if shutil.which(self.command[0]) is None:
            raise SelectorError(f"{self.command[0]} not found - please install {self.command[0]}")

        result = subprocess.run(
            self.command,
            input="\n".join(options),
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            logger.debug("%s exited with status %d", self.command[0], result.returncode)
            return None
        selected = result.stdout.strip()
        return selected or None


class CommandClipboard:
    """Pipes text into the first clipboard utility found on PATH."""

    def __init__(self, commands: Sequence[Sequence[str]]) -> None:
        self.commands = [list(c) for c in commands]

    def find_command(self) -> list[str] | None:
        for cmd in self.commands:
            if shutil.which(cmd[0]):
                return cmd
        return None

    def write(self, text: str) -> bool:
        cmd = self.find_command()
        if cmd is None:
            logger.warning("No clipboard utility found (install xclip, xsel, wl-copy, or pbcopy)")
            return False
        try:
            subprocess.run(cmd, input=text, text=True, check=True, timeout=5)
        except (OSError, subprocess.SubprocessError):
            logger.warning("Clipboard copy via %s failed", cmd[0], exc_info=True)
            return False
        return True


@dataclass(frozen=True)
class CopyResult:
    account: Account
    code: str
    copied: bool
    seconds_left: int


def select_account(store: AccountStore, selector: Selector) -> Account | None:
    """Ask the selector to pick an account. None means the user declined."""
    if not len(store):
        raise SelectorError("no accounts available")

    by_label = {account.label: account for account in store}
    selected = selector.present_options(list(by_label))
    if selected is None:
        return None
    selected = selected.strip()
    if not selected:
        return None

    account = by_label.get(selected)
    if account is None:
        raise SelectorError(f"selected account not found: {selected}")
    return account


def copy_code(
    store: AccountStore,
    selector: Selector,
    clipboard: ClipboardSink,
    now: float | None = None,
) -> CopyResult | None:
    """Pick an account, generate its code and push it to the clipboard."""
    account = select_account(store, selector)
    if account is None:
        return None

    if now is None:
        now = time.time()
    code = totp.generate(account.secret, totp.TIME_STEP, now)
    copied = clipboard.write(code)
    return CopyResult(
        account=account,
        code=code,
        copied=copied,
        seconds_left=totp.time_remaining(now),
    )
