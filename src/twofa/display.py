"""Terminal rendering of code listings and the continuous watch loop."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from datetime import datetime

from rich.console import Console
from rich.table import Table

from twofa.models import CodeRow
from twofa.store import AccountStore

logger = logging.getLogger(__name__)


def render_codes(rows: Sequence[CodeRow]) -> Table:
    table = Table(show_edge=False, header_style="bold")
    table.add_column("Account", min_width=20)
    table.add_column("Issuer", min_width=15)
    table.add_column("Code", min_width=8)
    table.add_column("Time Left", justify="right")
    for row in rows:
        if row.ok:
            table.add_row(row.name, row.issuer, row.code, f"{row.seconds_left}s")
        else:
            table.add_row(row.name, row.issuer, f"[red]{row.code}[/red]", "N/A")
    return table


def print_codes(store: AccountStore, console: Console, now: float | None = None) -> None:
    if not len(store):
        console.print("No accounts added yet.")
        return
    console.print(render_codes(store.list(now)))


def watch(
    store: AccountStore,
    console: Console,
    interval: float,
    stop: threading.Event,
    clock: Callable[[], float] = time.time,
) -> int:
    """Redraw all codes every ``interval`` seconds until ``stop`` is set.

    Returns the number of frames drawn.
    """
    frames = 0
    logger.debug("Watch loop started (interval %.1fs)", interval)
    while not stop.is_set():
        now = clock()
        console.clear()
        console.print(f"[bold]2FA Codes - {datetime.fromtimestamp(now):%H:%M:%S}[/bold]\n")
        print_codes(store, console, now)
        frames += 1
        stop.wait(interval)
    logger.debug("Watch loop stopped after %d frames", frames)
    return frames
