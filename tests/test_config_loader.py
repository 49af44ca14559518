import json
import os
import tempfile

import pytest

from ecsrun.config_loader import ConfigLoader
from ecsrun.exceptions import ConfigError


class TestConfigLoader:
    @pytest.fixture
    def temp_config_file(self):
        """Create a temporary config file."""
        config = {
            "profile": "ops",
            "region": "eu-west-1",
            "ssh_user": "ec2-user",
            "sudo": True,
            "instance": 2,
            "ssh_options": ["-A"],
        }
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(config, f)
            temp_path = f.name
        yield temp_path
        os.unlink(temp_path)

    def test_load_config_valid(self, temp_config_file):
        config = ConfigLoader(temp_config_file, environ={}).load_config()
        assert config["profile"] == "ops"
        assert config["sudo"] is True
        assert config["instance"] == "2"
        assert config["ssh_options"] == ["-A"]

    def test_path_from_environment(self, temp_config_file):
        loader = ConfigLoader(environ={"ECS_RUN_CONFIG": temp_config_file})
        assert loader.load_config()["region"] == "eu-west-1"

    def test_default_file_missing_is_empty(self):
        loader = ConfigLoader(environ={})
        loader.config_path = "nonexistent.json"
        assert loader.load_config() == {}

    def test_explicit_file_missing(self):
        loader = ConfigLoader("nonexistent.json", environ={})
        with pytest.raises(ConfigError, match="Configuration file not found"):
            loader.load_config()

    def test_load_config_invalid_json(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            f.write("{ invalid json")
            temp_path = f.name
        try:
            loader = ConfigLoader(temp_path, environ={})
            with pytest.raises(ConfigError, match="Failed to parse JSON config"):
                loader.load_config()
        finally:
            os.unlink(temp_path)

    def test_validate_schema_invalid(self):
        loader = ConfigLoader(environ={})
        with pytest.raises(ConfigError, match="Configuration validation failed"):
            loader.validate_schema({"sudo": "sometimes"})

    def test_validate_schema_unknown_key(self):
        loader = ConfigLoader(environ={})
        with pytest.raises(ConfigError, match="Configuration validation failed"):
            loader.validate_schema({"jump_instance": "i-123"})

    def test_environment_overrides_file(self, temp_config_file):
        environ = {
            "ECS_RUN_SSH_USER": "admin",
            "ECS_RUN_SUDO": "no",
            "ECS_RUN_CLUSTER": "web-qa1",
            "ECS_RUN_DEBUG": "1",
            "ECS_RUN_TASK": "",
        }
        config = ConfigLoader(temp_config_file, environ=environ).load_config()
        assert config["ssh_user"] == "admin"
        assert config["sudo"] is False
        assert config["cluster"] == "web-qa1"
        assert config["debug"] is True
        assert "task" not in config

    def test_load_config_invalid_utf8(self):
        with tempfile.NamedTemporaryFile(mode="wb", suffix=".json", delete=False) as f:
            f.write(b'{"ssh_user": "\xff\xfe"}')
            temp_path = f.name
        try:
            loader = ConfigLoader(temp_path, environ={})
            with pytest.raises(ConfigError, match="Failed to read config"):
                loader.load_config()
        finally:
            os.unlink(temp_path)

    def test_load_config_unreadable_path(self):
        with tempfile.TemporaryDirectory() as directory:
            loader = ConfigLoader(directory, environ={})
            with pytest.raises(ConfigError, match="Failed to read config"):
                loader.load_config()
