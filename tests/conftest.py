"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from twofa.store import AccountStore


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "accounts.json"


@pytest.fixture
def store(data_file: Path) -> AccountStore:
    return AccountStore(data_file)
