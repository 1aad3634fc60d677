"""Configuration management for pine"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
CONFIG_FILE_NAME = "config.yaml"
SYSTEM_PROMPT_PATH = Path("prompts") / "AGENT.md"


def get_config_dir(override: str | None = None) -> Path:
    """Get the pine configuration directory

    Priority (highest to lowest):
    1. override parameter
    2. PINE_CONFIG_DIR environment variable
    3. Default: ~/.config/pine

    Args:
        override: Optional path to override config directory

    Returns:
        Path to configuration directory (created if it doesn't exist)
    """
    if override:
        config_dir = Path(os.path.expanduser(override))
    else:
        config_dir_str = os.getenv("PINE_CONFIG_DIR")
        if config_dir_str:
            config_dir = Path(os.path.expanduser(config_dir_str))
        else:
            config_dir = Path.home() / ".config" / "pine"

    config_dir.mkdir(parents=True, exist_ok=True)

    return config_dir


class ModelParameters(BaseModel):
    """Sampling parameters passed to the model"""

    temperature: float | None = None
    max_tokens: int | None = None


class PineConfig(BaseModel):
    """Main pine configuration"""

    anthropic_api_key: str = Field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""))
    model: str = Field(default_factory=lambda: os.getenv("PINE_MODEL", DEFAULT_MODEL))

    # Directory new sessions start in when nothing has been recorded yet
    working_directory: str | None = None

    enabled_tools: list[str] = Field(default_factory=lambda: ["bashShell", "changeDirectory"])
    model_parameters: ModelParameters = Field(default_factory=ModelParameters)

    # Seconds before a shell command is killed
    shell_timeout: int = Field(default=60, gt=0)

    @field_validator("working_directory")
    @classmethod
    def _expand_working_directory(cls, value: str | None) -> str | None:
        if not value:
            return None
        return os.path.abspath(os.path.expanduser(value))

    @classmethod
    def load(cls, config_file: Path | None = None, config_dir: Path | None = None) -> "PineConfig":
        """Load configuration from the YAML file and environment

        Args:
            config_file: Optional path to the config file
            config_dir: Optional config directory (defaults to get_config_dir())

        Returns:
            The loaded configuration, or defaults if the file is missing or invalid
        """
        if config_file is None:
            if config_dir is None:
                config_dir = get_config_dir()
            config_file = config_dir / CONFIG_FILE_NAME

        data = load_config_file(config_file)

        try:
            return cls(**data)
        except ValidationError as e:
            logger.warning("Invalid configuration in %s, using defaults: %s", config_file, e)
            return cls()


def load_config_file(path: Path) -> dict:
    """Read the YAML config file into a dict

    Args:
        path: Path to config.yaml

    Returns:
        Parsed settings, or an empty dict if the file is missing or unreadable
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Error parsing config YAML %s: %s", path, e)
        return {}
    except OSError as e:
        logger.warning("Error reading config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        return {}

    return data


def load_system_prompt(config_dir: Path | None = None) -> str | None:
    """Load the system prompt from prompts/AGENT.md if it exists"""
    if config_dir is None:
        config_dir = get_config_dir()

    prompt_file = config_dir / SYSTEM_PROMPT_PATH
    if not prompt_file.exists():
        return None

    try:
        return prompt_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read system prompt %s: %s", prompt_file, e)
        return None


def get_config() -> PineConfig:
    """Get the current configuration"""
    return PineConfig.load()
