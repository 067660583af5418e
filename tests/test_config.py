"""
Tests for configuration loading.
"""

import pytest

from lzjd.config import LZJDConfig, load_config
from lzjd.core.errors import ConfigurationError, WorkerPoolError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("THRESHOLD", "WORKERS", "HASHER", "STRATEGY",
                 "USE_PROCESSES", "CHUNK_SIZE", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv("LZJD_" + name, raising=False)


class TestLZJDConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = LZJDConfig()
        config.validate()
        assert config.threshold == 1
        assert config.workers is None
        assert config.hasher == "murmur3"
        assert config.strategy == "streaming"

    @pytest.mark.parametrize("data", [
        {"threshold": 101},
        {"threshold": -1},
        {"hasher": "md5"},
        {"strategy": "lz77"},
        {"chunk_size": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigurationError):
            LZJDConfig.from_dict(data)

    def test_invalid_workers(self):
        with pytest.raises(WorkerPoolError):
            LZJDConfig.from_dict({"workers": 0})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration keys: colour"):
            LZJDConfig.from_dict({"colour": "red"})

    def test_merge_ignores_none(self):
        config = LZJDConfig(threshold=40).merge(threshold=None, workers=3)
        assert config.threshold == 40
        assert config.workers == 3


class TestConfigFiles:
    """Test YAML loading and discovery."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "conf.yml"
        path.write_text("threshold: 30\nhasher: crc32\nuse_processes: false\n")
        config = LZJDConfig.from_file(path)
        assert config.threshold == 30
        assert config.hasher == "crc32"
        assert config.use_processes is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "conf.yml"
        path.write_text("")
        assert LZJDConfig.from_file(path) == LZJDConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "conf.yml"
        path.write_text("threshold: [1, 2\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            LZJDConfig.from_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "conf.yml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            LZJDConfig.from_file(path)

    def test_find_and_load_walks_up(self, tmp_path):
        (tmp_path / ".lzjd.yml").write_text("threshold: 55\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert LZJDConfig.find_and_load(nested).threshold == 55


class TestEnvironment:
    """Test LZJD_* overrides."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LZJD_THRESHOLD", "60")
        monkeypatch.setenv("LZJD_WORKERS", "2")
        monkeypatch.setenv("LZJD_STRATEGY", "lz78")
        monkeypatch.setenv("LZJD_USE_PROCESSES", "false")
        config = LZJDConfig.from_env()
        assert config.threshold == 60
        assert config.workers == 2
        assert config.strategy == "lz78"
        assert config.use_processes is False

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("TRUE", True), ("on", True),
        ("0", False), ("no", False), (" off ", False),
    ])
    def test_env_booleans(self, monkeypatch, value, expected):
        monkeypatch.setenv("LZJD_USE_PROCESSES", value)
        assert LZJDConfig.from_env().use_processes is expected

    def test_env_not_a_boolean(self, monkeypatch):
        monkeypatch.setenv("LZJD_USE_PROCESSES", "ture")
        with pytest.raises(ConfigurationError, match="LZJD_USE_PROCESSES must be a boolean"):
            LZJDConfig.from_env()

    def test_env_not_an_integer(self, monkeypatch):
        monkeypatch.setenv("LZJD_THRESHOLD", "high")
        with pytest.raises(ConfigurationError, match="LZJD_THRESHOLD must be an integer"):
            LZJDConfig.from_env()

    def test_load_config_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "conf.yml"
        path.write_text("threshold: 30\nworkers: 4\n")
        monkeypatch.setenv("LZJD_THRESHOLD", "90")
        config = load_config(path)
        assert config.threshold == 90
        assert config.workers == 4
