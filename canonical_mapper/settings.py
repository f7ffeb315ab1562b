import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .storage import STORAGE_KEY

ENV_PREFIX = "CANONICAL_MAPPER_"
DEFAULT_STORAGE_PATH = Path.home() / ".canonical_mapper" / f"{STORAGE_KEY}.json"


class Settings(BaseModel):
    """
    Application settings with Pydantic validation.
    """

    storage_path: Path = Field(default=DEFAULT_STORAGE_PATH)

    # Logging
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    log_file: Optional[str] = None

    # Gradio server
    server_name: str = Field(default="127.0.0.1", min_length=1)
    server_port: int = Field(default=7860, ge=1, le=65535)

    model_config = {
        'validate_assignment': True,
    }

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate logging level name"""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Settings':
        """
        Load settings from CANONICAL_MAPPER_* environment variables.

        Args:
            env_file: Optional path to .env file

        Raises:
            ValueError: If a setting is invalid
        """
        if env_file and env_file.exists():
            load_dotenv(dotenv_path=env_file)
        else:
            default_env = Path.cwd() / ".env"
            if default_env.exists():
                load_dotenv(dotenv_path=default_env)

        def env(name: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(f"{ENV_PREFIX}{name}", default)

        return cls(
            storage_path=Path(env("STORAGE_PATH", str(DEFAULT_STORAGE_PATH))).expanduser(),
            log_level=env("LOG_LEVEL", "INFO"),
            json_logs=env("JSON_LOGS", "0").lower() in ("1", "true", "yes"),
            log_file=env("LOG_FILE"),
            server_name=env("SERVER_NAME", "127.0.0.1"),
            server_port=int(env("SERVER_PORT", "7860")),
        )


_settings_instance: Optional[Settings] = None


def get_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Get settings instance (singleton pattern).
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings.from_env(env_file=env_file)
    return _settings_instance
