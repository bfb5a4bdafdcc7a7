"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from workdir.cli import cli
from workdir.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("WORKDIR__")}
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".workdir" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "text_file_size_limit" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["config", "set", "session.max_concurrency", "--value", "7"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0, result.output
    assert "Updated session.max_concurrency" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path), env={}).load()
    assert config.session.max_concurrency == 7


def test_config_set_rejects_invalid_values(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["config", "set", "session.max_concurrency", "--value", "zero"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_env_override_reaches_commands(tmp_path: Path) -> None:
    root = tmp_path / "work"
    root.mkdir()
    (root / "notes.txt").write_text("0123456789", encoding="utf-8")
    env = _env_with_home(tmp_path)
    env["WORKDIR__SESSION__TEXT_FILE_SIZE_LIMIT"] = "4"
    runner = CliRunner()

    result = runner.invoke(cli, ["ls", str(root), "--json"], env=env)

    assert result.exit_code == 0, result.output
    assert '"isText": true' in result.output
    assert "content" not in result.output


def test_config_set_rejects_unknown_log_level(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["config", "set", "logging.level", "--value", "LOUD"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output
    assert "LOUD" not in ConfigManager(config_path=_config_path(tmp_path), env={}).read_text()
