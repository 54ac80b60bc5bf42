"""Tests for environment configuration."""

from pathlib import Path

import pytest

from todokern.config import KernelConfig
from todokern.utils import get_todokern_home


class TestKernelConfig:
    """Tests for KernelConfig.from_env."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TODOKERN_HOME", str(tmp_path))

        config = KernelConfig.from_env({})

        assert config.db_path == get_todokern_home() / "store.db"
        assert config.namespace == "todo"
        assert config.max_message_size is None
        assert config.log_level == "WARNING"

    def test_home_from_env_mapping(self):
        config = KernelConfig.from_env({"TODOKERN_HOME": "/data/kern"})

        assert config.db_path == Path("/data/kern/store.db")

    def test_explicit_db_path_wins(self):
        config = KernelConfig.from_env(
            {"TODOKERN_HOME": "/data/kern", "TODOKERN_DB_PATH": "/srv/todo.db"}
        )

        assert config.db_path == Path("/srv/todo.db")

    def test_overrides(self):
        config = KernelConfig.from_env(
            {
                "TODOKERN_DB_PATH": "/srv/todo.db",
                "TODOKERN_NAMESPACE": "tasks",
                "TODOKERN_MAX_MESSAGE_SIZE": "4096",
                "TODOKERN_LOG_LEVEL": "debug",
            }
        )

        assert config.namespace == "tasks"
        assert config.max_message_size == 4096
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {"TODOKERN_MAX_MESSAGE_SIZE": "lots"},
            {"TODOKERN_MAX_MESSAGE_SIZE": "0"},
            {"TODOKERN_NAMESPACE": "a/b"},
            {"TODOKERN_LOG_LEVEL": "LOUD"},
        ],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ValueError):
            KernelConfig.from_env(env)

    def test_get_home_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TODOKERN_HOME", str(tmp_path))

        assert get_todokern_home() == tmp_path
