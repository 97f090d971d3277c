"""
Configuration Management

Provides the client configuration class and file/environment loading.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlsplit

from .constants import (
    ALLOWED_ENDPOINT_SCHEMES,
    CHAT_ID,
    CLOSE_CODE_NORMAL,
    CURRENT_USER_ID,
    DEFAULT_ENDPOINT_URL,
    DEFAULT_OPEN_TIMEOUT,
    REMOTE_USER_ID,
)
from .exceptions import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .logging_config import LogLevel

LOG_LEVELS = tuple(level.value for level in LogLevel)


@dataclass
class ClientConfig:
    """Clinic chat client configuration settings."""

    endpoint_url: str = DEFAULT_ENDPOINT_URL
    chat_id: str = CHAT_ID
    current_user_id: str = CURRENT_USER_ID
    remote_user_id: str = REMOTE_USER_ID
    close_code: int = CLOSE_CODE_NORMAL
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    appointments_path: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> None:
        """Validate configuration values."""
        errors: List[str] = []

        if not isinstance(self.endpoint_url, str) or not self.endpoint_url.strip():
            errors.append("endpoint_url must be a non-empty string")
        elif urlsplit(self.endpoint_url).scheme not in ALLOWED_ENDPOINT_SCHEMES:
            errors.append("endpoint_url must use the ws:// or wss:// scheme")

        for name in ("chat_id", "current_user_id", "remote_user_id"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{name} must be a non-empty string")

        if self.current_user_id == self.remote_user_id:
            errors.append("current_user_id and remote_user_id cannot be the same")

        # 1000 and the application range are the only codes a client may send
        if not isinstance(self.close_code, int) or not (
            self.close_code == 1000 or 3000 <= self.close_code <= 4999
        ):
            errors.append("close_code must be 1000 or between 3000 and 4999")

        if not isinstance(self.open_timeout, (int, float)) or self.open_timeout <= 0:
            errors.append("open_timeout must be a positive number")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

        if errors:
            raise InvalidConfigurationError(f"Client configuration validation failed: {'; '.join(errors)}")

    def to_transport_config(self) -> "TransportConfig":
        """Build the transport configuration for this client."""
        from clinic_chat.client.network.transport import TransportConfig

        return TransportConfig(
            endpoint_url=self.endpoint_url,
            close_code=self.close_code,
            open_timeout=self.open_timeout,
        )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        try:
            config = cls(
                endpoint_url=os.getenv("CLINIC_CHAT_ENDPOINT_URL", cls.endpoint_url),
                close_code=int(os.getenv("CLINIC_CHAT_CLOSE_CODE", str(cls.close_code))),
                open_timeout=float(os.getenv("CLINIC_CHAT_OPEN_TIMEOUT", str(cls.open_timeout))),
                appointments_path=os.getenv("CLINIC_CHAT_APPOINTMENTS_PATH", cls.appointments_path),
                log_level=os.getenv("CLINIC_CHAT_LOG_LEVEL", cls.log_level),
                log_file=os.getenv("CLINIC_CHAT_LOG_FILE", cls.log_file),
            )
            config.validate()
            return config
        except ValueError as e:
            raise ConfigurationError(f"Failed to load client configuration from environment: {e}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """Create configuration from dictionary."""
        try:
            # Filter only known fields
            field_names = {f.name for f in fields(cls)}
            filtered_data = {k: v for k, v in data.items() if k in field_names}
            config = cls(**filtered_data)
            config.validate()
            return config
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Failed to create client configuration from dictionary: {e}")


class ConfigurationLoader:
    """Configuration loader with support for multiple sources."""

    DEFAULT_CONFIG_PATHS = [
        "clinic_chat.json",
        ".clinic_chat.json",
        "clinic_chat.yaml",
        ".clinic_chat.yaml",
        "clinic_chat.yml",
        ".clinic_chat.yml",
    ]

    @staticmethod
    def find_default_config() -> Optional[str]:
        """Return the first default configuration file that exists."""
        for path in ConfigurationLoader.DEFAULT_CONFIG_PATHS:
            if os.path.exists(path):
                return path
        return None

    @staticmethod
    def load_from_file(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """
        Load configuration from a JSON or YAML file.

        Args:
            config_path: Path to configuration file. If None, looks for default locations.

        Returns:
            Dictionary containing configuration values.

        Raises:
            ConfigurationError: If file cannot be loaded or parsed.
        """
        if config_path is None:
            config_path = ConfigurationLoader.find_default_config()

        if config_path is None:
            return {}

        config_path = Path(config_path)

        if not config_path.exists():
            raise MissingConfigurationError(f"Configuration file not found: {config_path}")

        if config_path.suffix not in ('.json', '.yml', '.yaml'):
            raise ConfigurationError(f"Unsupported configuration file format: {config_path.suffix}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.suffix == '.json':
                    data = json.load(f)
                else:
                    try:
                        import yaml
                    except ImportError:
                        raise ConfigurationError(
                            "PyYAML is required for YAML configuration files. "
                            "Install with: pip install clinic-chat[yaml]"
                        )
                    data = yaml.safe_load(f) or {}
        except ConfigurationError:
            raise
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}")
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
        return data

    @staticmethod
    def load_client_config(
        config_path: Optional[Union[str, Path]] = None,
        use_env: bool = True
    ) -> ClientConfig:
        """
        Load client configuration from file and/or environment.

        Args:
            config_path: Path to configuration file.
            use_env: Whether to load from environment variables.

        Returns:
            ClientConfig instance.
        """
        file_config = ConfigurationLoader.load_from_file(config_path)
        config_data = file_config.get('client', {})
        if not isinstance(config_data, dict):
            raise InvalidConfigurationError(
                f"The 'client' section must be a mapping, got {type(config_data).__name__}",
                details={"client": config_data}
            )

        # Create base config from file data
        if config_data:
            config = ClientConfig.from_dict(config_data)
        else:
            config = ClientConfig()

        # Override with environment variables if requested
        if use_env:
            env_config = ClientConfig.from_env()
            # Only override non-default values from environment
            default_config = ClientConfig()
            for field in fields(ClientConfig):
                env_value = getattr(env_config, field.name)
                default_value = getattr(default_config, field.name)
                if env_value != default_value:
                    setattr(config, field.name, env_value)

        config.validate()
        return config
