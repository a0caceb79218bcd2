from __future__ import annotations

from pathlib import Path

import pytest

from config import ConfigError, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "autolens.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert ".ts" in config.extensions
    assert config.store_path is None
    assert config.poll_interval == 5.0


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "toml_content",
    [
        'extensions = ["ts"]',
        "poll_interval = 0",
        'log_level = "LOUD"',
        "nested_gitignore = 3",
    ],
)
def test_invalid_values_rejected(tmp_path: Path, toml_content: str) -> None:
    _write_config(tmp_path, toml_content)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
extensions = [".ts"]
exclude = ["dist/*"]
store_path = "build/.functions/cache.json"
poll_interval = 0.5
log_level = "debug"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.extensions == [".ts"]
    assert config.exclude == ["dist/*"]
    assert config.poll_interval == 0.5
    assert config.log_level == "DEBUG"
    assert config.resolve_store_path(tmp_path) == (
        tmp_path / "build" / ".functions" / "cache.json"
    ).resolve()


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert config.include == []
    assert "node_modules/*" in config.exclude
