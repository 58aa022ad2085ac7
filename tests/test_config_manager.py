"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from mindstash.config import (
    ConfigError,
    ConfigManager,
    MindstashConfig,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".mindstash" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "mindstash configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert config == MindstashConfig()
    assert config.ingestion.chunk_size == 5


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.save({"ingestion": {"chunk_size": 8}, "query": {"sort_key": "name"}})

    env = {
        "MINDSTASH__INGESTION__CHUNK_SIZE": "12",
        "MINDSTASH__TRAVERSAL__INCLUDE_HIDDEN": "true",
        "UNRELATED": "ignored",
    }
    cli = {"ingestion.chunk_size": 3}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.query.sort_key == "name"
    assert config.traversal.include_hidden is True
    # CLI overrides take precedence over environment
    assert config.ingestion.chunk_size == 3


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"logging": {"level": "INFO"}})
    monkeypatch.setenv("MINDSTASH__LOGGING__LEVEL", "DEBUG")

    assert manager.load().logging.level == "DEBUG"
    assert manager.load(include_env=False).logging.level == "INFO"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


@pytest.mark.parametrize(
    "overrides",
    [
        {"ingestion": {"chunk_size": 0}},
        {"ingestion": {"chunk_size": "not-an-int"}},
        {"query": {"sort_key": "colour"}},
        {"unknown_section": {"value": 1}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=MindstashConfig(), file_overrides=overrides)
