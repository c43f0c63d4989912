from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

import SplashOverride
from http_fakes import FakeResponse, FakeSession
from splash_menu import VANILLA_SPLASHES


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=100)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(SplashOverride, "configure_logging", lambda level: None)
    for name in ("SPLASHOVERRIDE_USE_REMOTE", "SPLASHOVERRIDE_LOCAL_SPLASHES", "SPLASHOVERRIDE_LOCAL_FILE"):
        monkeypatch.delenv(name, raising=False)


def _output(console: Console) -> str:
    return console.file.getvalue()


def test_normalize_command(console: Console):
    code = SplashOverride.main(["normalize", "https://github.com/acme/proj/blob/main/s.txt"], console=console)
    assert code == 0
    assert _output(console).strip() == "https://raw.githubusercontent.com/acme/proj/main/s.txt"


def test_resolve_command_local_only(console: Console):
    code = SplashOverride.main(["resolve", "--no-remote", "--local", "Hello [b]there", "# skip", "World"], console=console)
    out = _output(console)
    assert code == 0
    assert "Source: local" in out
    assert "Hello [b]there" in out
    assert "World" in out
    assert "skip" not in out


def test_resolve_command_missing_local_file(console: Console, tmp_path: Path):
    missing = tmp_path / "nope.txt"
    code = SplashOverride.main(["resolve", "--no-remote", "--local-file", str(missing)], console=console)
    assert code == 1
    assert "Input error" in _output(console)


def test_pick_command_falls_back_to_vanilla(console: Console, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SPLASHOVERRIDE_LOCAL_SPLASHES", "")
    code = SplashOverride.main(["pick", "--no-remote"], console=console)
    assert code == 0
    assert _output(console).strip() in VANILLA_SPLASHES


def test_pick_command_uses_local_file(console: Console, tmp_path: Path):
    path = tmp_path / "local.txt"
    path.write_text("only splash\n", encoding="utf-8")
    code = SplashOverride.main(["pick", "--no-remote", "--local-file", str(path)], console=console)
    assert code == 0
    assert _output(console).strip() == "only splash"


def test_resolve_command_remote_url_closes_session(console: Console, monkeypatch: pytest.MonkeyPatch):
    session = FakeSession(FakeResponse(text="# header\nFrom the web\n"))
    monkeypatch.setattr("splash_resolver.requests.Session", lambda: session)

    code = SplashOverride.main(
        ["resolve", "--url", "https://github.com/acme/proj/blob/main/s.txt", "--local", "unused"],
        console=console,
    )
    out = _output(console)
    assert code == 0
    assert "Source: remote" in out
    assert "From the web" in out
    assert "unused" not in out
    assert session.urls == ["https://raw.githubusercontent.com/acme/proj/main/s.txt"]
    assert session.closed is True
