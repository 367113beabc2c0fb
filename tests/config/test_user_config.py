"""
Tests for config.yaml loading and saving.
"""

import pytest
import yaml

from binarius.config import UserConfig, default_config, load_config, save_config
from binarius.core.exceptions import ConfigError


class TestLoadConfig:
    """Test load_config."""

    def test_missing_file_gives_defaults(self, isolated_home, tmp_path):
        config = load_config(isolated_home / "config.yaml")

        assert config.defaults == {}
        assert config.paths.binarius_home == str(isolated_home)
        assert config.paths.bin_dir == str(tmp_path / "bin")
        assert config.paths.cache_dir == str(isolated_home / "cache")

    def test_parse(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "defaults:\n"
            "  terraform: v1.6.0\n"
            "  tofu: ''\n"
            "paths:\n"
            "  binarius_home: /opt/binarius\n"
            "  bin_dir: ~/.local/bin\n"
        )

        config = load_config(path)

        assert config.defaults == {"terraform": "v1.6.0"}
        assert config.paths.binarius_home == "/opt/binarius"
        assert config.paths.bin_dir == "~/.local/bin"
        assert config.paths.cache_dir == ""

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path).defaults == {}

    @pytest.mark.parametrize(
        "content",
        ["defaults: [unclosed", "- a list\n", "defaults: [terraform]\n", "paths: 5\n"],
    )
    def test_malformed(self, tmp_path, content):
        """Test malformed files raise ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError, match="Failed to load configuration"):
            load_config(path)


class TestSaveConfig:
    """Test save_config."""

    def test_round_trip(self, isolated_home):
        path = isolated_home / "config.yaml"
        config = default_config(isolated_home)
        config.set_default("terraform", "v1.6.0")

        save_config(config, path)

        assert load_config(path) == config
        data = yaml.safe_load(path.read_text())
        assert list(data) == ["defaults", "paths"]

    def test_unwritable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(ConfigError, match="Failed to save configuration"):
            save_config(UserConfig(), blocker / "config.yaml")


class TestDefaults:
    """Test UserConfig default helpers."""

    def test_set_get_clear(self):
        config = UserConfig()

        config.set_default("terraform", "v1.6.0")
        assert config.get_default("terraform") == "v1.6.0"

        config.set_default("terraform", "")
        assert config.get_default("terraform") is None
        assert config.defaults == {}
