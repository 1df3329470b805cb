from __future__ import annotations

import pytest

from gifboard import __main__ as cli
from gifboard.core.registry import RegistryStore


@pytest.fixture
def backing(monkeypatch: pytest.MonkeyPatch) -> RegistryStore:
    store = RegistryStore()
    # The CLI talks to a server; point it at an in-process store instead.
    monkeypatch.setattr(cli, "RemoteRegistryStore", lambda url, timeout_s: store)
    return store


def test_cli_flow(backing: RegistryStore, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["list", "--key", "gifs"]) == 0
    assert "not initialized" in capsys.readouterr().out

    assert cli.main(["init", "--key", "gifs", "--identity", "alice"]) == 0
    assert cli.main(["submit", "https://example.com/a.gif", "--key", "gifs", "--identity", "alice"]) == 0
    assert "added entry 0" in capsys.readouterr().out

    assert cli.main(["downvote", "0", "--key", "gifs"]) == 0
    out = capsys.readouterr().out
    assert "score -1" in out
    assert "[0] -1  https://example.com/a.gif  (alice)" in out

    assert backing.read("gifs").entries[0].score == -1


def test_cli_reports_error_kind(backing: RegistryStore, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["upvote", "0", "--key", "gifs"]) == 1
    assert "error: NotFound" in capsys.readouterr().err

    cli.main(["init", "--key", "gifs"])
    assert cli.main(["upvote", "3", "--key", "gifs"]) == 1
    assert "error: IndexOutOfRange" in capsys.readouterr().err


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    from gifboard.config import load_settings

    monkeypatch.setenv("GIFBOARD_URL", "127.0.0.1:9000/")
    monkeypatch.setenv("GIFBOARD_DEFAULT_KEY", "memes")
    monkeypatch.setenv("GIFBOARD_TIMEOUT_S", "2.5")
    monkeypatch.delenv("GIFBOARD_STATE_DIR", raising=False)

    s = load_settings()
    assert s.url == "http://127.0.0.1:9000"
    assert s.default_key == "memes"
    assert s.timeout_s == 2.5
    assert s.state_dir is None

    monkeypatch.setenv("GIFBOARD_TIMEOUT_S", "soon")
    with pytest.raises(ValueError):
        load_settings()


def test_log_level_is_restricted(backing: RegistryStore, monkeypatch: pytest.MonkeyPatch) -> None:
    from gifboard.config import load_settings

    with pytest.raises(SystemExit):
        cli.main(["--log-level", "trace", "list"])
    assert cli.main(["--log-level", "debug", "list"]) == 0

    monkeypatch.setenv("GIFBOARD_LOG_LEVEL", "trace")
    with pytest.raises(ValueError):
        load_settings()


def test_uvicorn_app_honors_state_dir(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:  # noqa: ANN001
    import importlib

    app_module = importlib.import_module("gifboard.runtime.app")

    monkeypatch.setenv("GIFBOARD_STATE_DIR", str(tmp_path))
    try:
        reloaded = importlib.reload(app_module)
        store = reloaded.app.state.store
        assert store.durable
        store.initialize("gifs", "alice")
        assert (tmp_path / "gifs.json").exists()
    finally:
        monkeypatch.delenv("GIFBOARD_STATE_DIR", raising=False)
        importlib.reload(app_module)
