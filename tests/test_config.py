from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from sigma_serve.config import load_config, make_config, parse_bind
from sigma_serve.main import main


def _clear_serve_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SIGMA_SERVE_BIND", "SIGMA_SERVE_SUFFIX", "SIGMA_SERVE_READ_TIMEOUT", "SIGMA_SERVE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_serve_env(monkeypatch)
    cfg = load_config([str(site)])

    assert cfg.root == site.resolve()
    assert cfg.host == "localhost"
    assert cfg.port == 8080
    assert cfg.bind == "localhost:8080"
    assert cfg.suffix == ".html"
    assert cfg.read_timeout == 30.0
    assert cfg.log_level == "INFO"


def test_command_line_options(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_serve_env(monkeypatch)
    cfg = load_config(
        [str(site), "--bind", "0.0.0.0:9000", "--suffix", ".htm", "--read-timeout", "0", "--log-level", "debug"]
    )

    assert (cfg.host, cfg.port) == ("0.0.0.0", 9000)
    assert cfg.suffix == ".htm"
    assert cfg.read_timeout is None
    assert cfg.log_level == "DEBUG"


def test_environment_supplies_defaults(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_serve_env(monkeypatch)
    monkeypatch.setenv("SIGMA_SERVE_BIND", "127.0.0.1:7000")
    monkeypatch.setenv("SIGMA_SERVE_SUFFIX", "")
    cfg = load_config([str(site)])

    assert cfg.port == 7000
    assert cfg.suffix == ""


def test_environment_supplies_read_timeout(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_serve_env(monkeypatch)
    monkeypatch.setenv("SIGMA_SERVE_READ_TIMEOUT", "2.5")
    assert load_config([str(site)]).read_timeout == 2.5

    monkeypatch.setenv("SIGMA_SERVE_READ_TIMEOUT", "0")
    assert load_config([str(site)]).read_timeout is None


def test_relative_root_is_made_absolute(site: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(site.parent)
    cfg = make_config("site/docs/..")

    assert cfg.root == site.resolve()
    assert cfg.root.is_absolute()


def test_missing_root_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        make_config(tmp_path / "nope")


def test_file_root_is_rejected(site: Path) -> None:
    with pytest.raises(ValueError, match="not a directory"):
        make_config(site / "index.html")


def test_negative_read_timeout_is_rejected(site: Path) -> None:
    with pytest.raises(ValueError):
        make_config(site, read_timeout=-1)


def test_config_is_immutable(site: Path) -> None:
    cfg = make_config(site)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.suffix = ".txt"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("localhost:8080", ("localhost", 8080)),
        ("0.0.0.0:0", ("0.0.0.0", 0)),
        ("[::1]:9000", ("::1", 9000)),
    ],
)
def test_parse_bind(raw: str, expected: tuple) -> None:
    assert parse_bind(raw) == expected


@pytest.mark.parametrize("raw", ["localhost", ":8080", "host:http", "host:70000", "[::1]9000", "[::1"])
def test_parse_bind_rejects_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_bind(raw)


def test_ipv6_bind_is_bracketed(site: Path) -> None:
    assert make_config(site, bind="[::1]:8080").bind == "[::1]:8080"


def test_main_exits_nonzero_on_bad_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "nope")])

    assert excinfo.value.code == 1
    assert "fatal error" in capsys.readouterr().err
