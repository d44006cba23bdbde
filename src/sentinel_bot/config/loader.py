"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from .schema import BotConfig

# ${VAR} or ${VAR:-default}
_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    ``${VAR_NAME:-default}`` falls back to ``default`` when the variable
    is unset, which is how optional settings such as the GitHub token
    are written in the YAML file.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable without a default is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        value = os.environ.get(var_name)
        if value is None:
            if default is None:
                raise ValueError(f"Environment variable {var_name} not found")
            return default
        return value

    return _ENV_PATTERN.sub(replacer, text)


def load_config(path: Path | None = None) -> BotConfig:
    """
    Load configuration from a YAML file, or from the environment.

    Args:
        path: Path to YAML configuration file. When None, settings are
            read from the process environment (and ``.env``).

    Returns:
        Validated BotConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
        ValidationError: If config doesn't match schema
    """
    if path is None:
        return BotConfig()  # type: ignore[call-arg]

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)
    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    return BotConfig.model_validate(config_dict)
