"""Tests for selector/clipboard integration."""

from __future__ import annotations

import subprocess

import pytest

from twofa.desktop import CommandClipboard, CommandSelector, copy_code, select_account
from twofa.errors import SelectorError

from fakes import FakeClipboard, FakeSelector, RFC_SECRET, SECRET


@pytest.fixture
def filled(store):
    store.add("Alice", RFC_SECRET, "Example")
    store.add("Bob", SECRET)
    return store


def test_select_account_labels(filled):
    selector = FakeSelector("Bob")
    assert select_account(filled, selector).name == "Bob"
    assert selector.seen == ["Alice (Example)", "Bob"]


def test_select_account_strips_trailing_newline(filled):
    assert select_account(filled, FakeSelector("Alice (Example)\n")).name == "Alice"


@pytest.mark.parametrize("choice", [None, "", "  \n"])
def test_select_account_cancelled(filled, choice):
    assert select_account(filled, FakeSelector(choice)) is None


def test_select_account_unknown_label(filled):
    with pytest.raises(SelectorError):
        select_account(filled, FakeSelector("Mallory"))


def test_select_account_empty_store(store):
    with pytest.raises(SelectorError, match="no accounts"):
        select_account(store, FakeSelector("Alice"))


def test_copy_code(filled):
    clipboard = FakeClipboard()
    result = copy_code(filled, FakeSelector("Alice (Example)"), clipboard, now=59)
    assert result.code == "287082"
    assert result.copied
    assert result.seconds_left == 1
    assert clipboard.written == ["287082"]


def test_copy_code_clipboard_failure(filled):
    result = copy_code(filled, FakeSelector("Alice (Example)"), FakeClipboard(ok=False), now=59)
    assert result.code == "287082"
    assert not result.copied


def test_copy_code_declined(filled):
    clipboard = FakeClipboard()
    assert copy_code(filled, FakeSelector(None), clipboard) is None
    assert clipboard.written == []


def test_command_selector_missing_binary(monkeypatch):
    monkeypatch.setattr("twofa.desktop.shutil.which", lambda name: None)
    with pytest.raises(SelectorError, match="not found"):
        CommandSelector(["dmenu"]).present_options(["a"])


def test_command_selector_runs_menu(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs["input"]))
        return subprocess.CompletedProcess(cmd, 0, stdout="b\n", stderr="")

    monkeypatch.setattr("twofa.desktop.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("twofa.desktop.subprocess.run", fake_run)
    assert CommandSelector(["dmenu", "-i"]).present_options(["a", "b"]) == "b"
    assert calls == [(["dmenu", "-i"], "a\nb")]


@pytest.mark.parametrize(("code", "out"), [(1, ""), (0, ""), (0, "\n")])
def test_command_selector_cancel(monkeypatch, code, out):
    monkeypatch.setattr("twofa.desktop.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(
        "twofa.desktop.subprocess.run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, code, stdout=out, stderr=""),
    )
    assert CommandSelector(["dmenu"]).present_options(["a"]) is None


def test_command_clipboard_picks_first_available(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "twofa.desktop.shutil.which",
        lambda name: "/usr/bin/xsel" if name == "xsel" else None,
    )
    monkeypatch.setattr(
        "twofa.desktop.subprocess.run",
        lambda cmd, **kw: calls.append((cmd, kw["input"])),
    )
    clip = CommandClipboard([["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]])
    assert clip.write("123456")
    assert calls == [(["xsel", "--clipboard", "--input"], "123456")]


def test_command_clipboard_none_available(monkeypatch):
    monkeypatch.setattr("twofa.desktop.shutil.which", lambda name: None)
    assert not CommandClipboard([["xclip"]]).write("123456")


def test_command_clipboard_command_fails(monkeypatch):
    def fail(cmd, **kw):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr("twofa.desktop.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("twofa.desktop.subprocess.run", fail)
    assert not CommandClipboard([["xclip"]]).write("123456")
