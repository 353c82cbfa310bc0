"""Unit tests for configuration loading"""

import logging

import pytest
from pydantic import ValidationError

from thread_focus import ThreadFocusConfig, load_config
from thread_focus.config import CONFIG_FILENAME


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Run with an empty cwd and HOME so no real config is picked up"""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return home, work


class TestThreadFocusConfig:
    """Test settings validation"""

    def test_defaults(self):
        config = ThreadFocusConfig()

        assert config.debounce_seconds == 0.3
        assert config.tombstone_suffix == "-tombstone"
        assert config.pending_prefix == "末pending-"
        assert config.assembler_cache_size == 32
        assert config.placeholder_limit == 20
        assert config.slack_page_size == 200
        assert config.log_level == "INFO"

    def test_log_level_normalized(self):
        assert ThreadFocusConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ThreadFocusConfig(log_level="chatty")

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            ThreadFocusConfig(slack_page_size=0)
        with pytest.raises(ValidationError):
            ThreadFocusConfig(slack_page_size=5000)

    def test_negative_debounce_rejected(self):
        with pytest.raises(ValidationError):
            ThreadFocusConfig(debounce_seconds=-1)


class TestLoadConfig:
    """Test config file discovery"""

    def test_no_files_gives_defaults(self, isolated_home):
        assert load_config() == ThreadFocusConfig()

    def test_cwd_file_wins_over_home(self, isolated_home):
        home, work = isolated_home
        (work / CONFIG_FILENAME).write_text("placeholder_limit: 5\n", encoding="utf-8")
        (home / CONFIG_FILENAME).write_text("placeholder_limit: 9\n", encoding="utf-8")

        assert load_config().placeholder_limit == 5

    def test_home_file_used_as_fallback(self, isolated_home):
        home, _ = isolated_home
        (home / CONFIG_FILENAME).write_text("debounce_seconds: 1.0\n", encoding="utf-8")

        assert load_config().debounce_seconds == 1.0

    def test_thread_focus_section(self, isolated_home):
        """Test settings nested under thread_focus: are read"""
        _, work = isolated_home
        (work / CONFIG_FILENAME).write_text(
            "thread_focus:\n  tombstone_suffix: ':deleted'\n  log_level: warning\n",
            encoding="utf-8",
        )

        config = load_config()

        assert config.tombstone_suffix == ":deleted"
        assert config.log_level == "WARNING"

    def test_broken_file_falls_back(self, isolated_home, caplog):
        """Test an invalid discovered file is skipped with a warning"""
        home, work = isolated_home
        (work / CONFIG_FILENAME).write_text("slack_page_size: -3\n", encoding="utf-8")
        (home / CONFIG_FILENAME).write_text("slack_page_size: 50\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            config = load_config()

        assert config.slack_page_size == 50
        assert "Failed to load" in caplog.text

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("assembler_cache_size: 0\n", encoding="utf-8")

        assert load_config(path).assembler_cache_size == 0

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_explicit_path_must_be_mapping(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)
