"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from workdir.config import (
    ConfigError,
    ConfigManager,
    WorkdirConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env={})


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".workdir" / "config.yaml"
    assert "workdir configuration file" in path.read_text(encoding="utf-8")
    assert isinstance(manager.load(include_env=False), WorkdirConfig)


def test_load_without_file_uses_defaults(tmp_path: Path) -> None:
    manager = ConfigManager(config_path=tmp_path / "missing.yaml", env={})

    config = manager.load()

    assert config.session.text_file_size_limit == 1_048_576
    assert config.session.max_concurrency == 32
    assert not manager.config_path.exists()


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"session": {"text_file_size_limit": 10, "max_concurrency": 4}})

    env = {
        "WORKDIR__SESSION__TEXT_FILE_SIZE_LIMIT": "20",
        "WORKDIR__LOGGING__LEVEL": "DEBUG",
        "UNRELATED": "ignored",
    }
    cli = {"session.text_file_size_limit": 30}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.session.max_concurrency == 4
    assert config.logging.level == "DEBUG"
    # CLI overrides take precedence over environment
    assert config.session.text_file_size_limit == 30


def test_env_overrides_parse_yaml_mappings(tmp_path: Path) -> None:
    manager = ConfigManager(
        config_path=tmp_path / "config.yaml",
        env={"WORKDIR__MIME__EXTRA_TYPES": "{ipynb: text/x-notebook}"},
    )

    config = manager.load()

    assert config.mime.extra_types == {"ipynb": "text/x-notebook"}


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=WorkdirConfig(), file_overrides={"session": {"bogus": 1}})


def test_negative_limits_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=WorkdirConfig(),
            cli_overrides={"session.max_concurrency": 0},
        )


def test_flatten_for_env_renders_defaults() -> None:
    flat = flatten_for_env(WorkdirConfig())

    assert flat["WORKDIR__SESSION__TEXT_FILE_SIZE_LIMIT"] == "1048576"
    assert flat["WORKDIR__MIME__TYPES_FILE"] == "null"
    assert flat["WORKDIR__MIME__EXTRA_TYPES"] == "{}"
    assert flat["WORKDIR__LOGGING__LEVEL"] == "WARNING"


def test_logging_level_is_normalized() -> None:
    config = resolve_with_precedence(
        defaults=WorkdirConfig(), cli_overrides={"logging.level": " info "}
    )

    assert config.logging.level == "INFO"


@pytest.mark.parametrize("level", ["LOUD", "", "10"])
def test_unknown_logging_level_raises_config_error(level: str) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=WorkdirConfig(), cli_overrides={"logging.level": level})
