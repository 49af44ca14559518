import json
import os

import jsonschema

from .exceptions import ConfigError


DEFAULT_CONFIG_PATH = "~/.ecs-run.json"

TRUTHY = ("1", "true", "yes", "on")

# Environment variable -> configuration key
ENVIRONMENT_OVERRIDES = {
    "ECS_RUN_CLUSTER": "cluster",
    "ECS_RUN_TASK": "task",
    "ECS_RUN_CONTAINER": "container",
    "ECS_RUN_INSTANCE": "instance",
    "ECS_RUN_SSH_USER": "ssh_user",
    "ECS_RUN_SUDO": "sudo",
    "ECS_RUN_DEBUG": "debug",
}


class ConfigLoader:
    SCHEMA = {
        "type": "object",
        "properties": {
            "profile": {"type": "string"},
            "region": {"type": "string"},
            "cluster": {"type": "string"},
            "task": {"type": "string"},
            "container": {"type": ["string", "integer"]},
            "instance": {"type": ["string", "integer"]},
            "ssh_user": {"type": "string"},
            "sudo": {"type": "boolean"},
            "debug": {"type": "boolean"},
            "ssh_options": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    }

    def __init__(self, config_path=None, environ=None):
        self.environ = os.environ if environ is None else environ
        self.explicit = bool(config_path or self.environ.get("ECS_RUN_CONFIG"))
        self.config_path = os.path.expanduser(
            config_path or self.environ.get("ECS_RUN_CONFIG") or DEFAULT_CONFIG_PATH
        )

    def validate_schema(self, config):
        try:
            jsonschema.validate(instance=config, schema=self.SCHEMA)
        except jsonschema.exceptions.ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e.message}")

    def read_file(self):
        if not os.path.exists(self.config_path):
            if self.explicit:
                raise ConfigError(f"Configuration file not found: {self.config_path}")
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse JSON config: {e}")
        except (UnicodeDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read config {self.config_path}: {e}")

        self.validate_schema(config)
        for key in ("container", "instance"):
            if key in config:
                config[key] = str(config[key])
        return config

    def read_environment(self):
        config = {}
        for variable, key in ENVIRONMENT_OVERRIDES.items():
            value = self.environ.get(variable)
            if value is None or value == "":
                continue
            if key in ("sudo", "debug"):
                config[key] = value.strip().lower() in TRUTHY
            else:
                config[key] = value
        return config

    def load_config(self):
        """Configuration file values overridden by environment variables."""
        config = self.read_file()
        config.update(self.read_environment())
        return config
