import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gistbak import cli
from gistbak import config as config_mod
from gistbak.archive import ArchiveFormat
from gistbak.errors import InvalidCloneUrl


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "setup_logging", lambda debug: None)
    monkeypatch.setattr(cli.signal, "signal", MagicMock())


@pytest.fixture
def backup(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(cli, "backup", mock)
    return mock


def test_missing_token_exits_1_without_backup(backup, monkeypatch, capsys):
    monkeypatch.setattr(config_mod, "read_git_config", lambda key: None)

    with pytest.raises(SystemExit) as exc:
        cli.main(["-d", "out"])

    assert exc.value.code == 1
    backup.assert_not_called()
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "github.token" in err


def test_missing_target_exits_1_without_backup(backup, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-t", "tok"])

    assert exc.value.code == 1
    backup.assert_not_called()
    assert "usage:" in capsys.readouterr().err


def test_no_workspace_created_on_missing_target(backup, tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["-t", "tok"])
    assert list(tmp_path.iterdir()) == []


def test_options_reach_backup(backup):
    cli.main(["--token", "tok", "-d", "gists", "-ab", "g.tar.bz2"])

    options, config = backup.call_args.args
    assert options.token == "tok"
    assert options.directory == Path("gists")
    assert options.archive.format is ArchiveFormat.BZIP2
    assert options.archive.path == Path("g.tar.bz2")


def test_gzip_archive_flag(backup):
    cli.main(["-t", "tok", "-ag", "g.tar.gz"])

    options, _ = backup.call_args.args
    assert options.directory is None
    assert options.archive.format is ArchiveFormat.GZIP


def test_unknown_arguments_are_ignored(backup):
    cli.main(["-x", "-t", "tok", "--bogus", "-d", "gists"])

    options, _ = backup.call_args.args
    assert options.token == "tok"
    assert options.directory == Path("gists")


def test_token_from_git_config(backup, monkeypatch):
    monkeypatch.setattr(config_mod, "read_git_config", lambda key: "stored")
    cli.main(["-d", "gists"])
    assert backup.call_args.args[0].token == "stored"


def test_archive_flags_are_exclusive(backup):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-t", "tok", "-ab", "a.tar.bz2", "-ag", "a.tar.gz"])
    assert exc.value.code == 2
    backup.assert_not_called()


@pytest.mark.parametrize(
    "error, code",
    [
        (subprocess.CalledProcessError(128, ["git", "clone"]), 128),
        (InvalidCloneUrl("x", "bad"), 1),
        (RuntimeError("network"), 1),
        (KeyboardInterrupt(), 130),
    ],
)
def test_failures_map_to_exit_codes(backup, error, code):
    backup.side_effect = error
    with pytest.raises(SystemExit) as exc:
        cli.main(["-t", "tok", "-d", "gists"])
    assert exc.value.code == code


def test_sigterm_handler_installed(backup):
    cli.main(["-t", "tok", "-d", "gists"])
    cli.signal.signal.assert_called_once_with(cli.signal.SIGTERM, cli._terminate)


def test_sigterm_becomes_system_exit():
    with pytest.raises(SystemExit) as exc:
        cli._terminate(15, None)
    assert exc.value.code == 143


def test_malformed_config_exits_1(backup, tmp_path):
    (tmp_path / "gistbak.toml").write_text("[api\nurl=", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["-t", "tok", "-d", "out"])

    assert exc.value.code == 1
    backup.assert_not_called()
