"""
Unit tests for clinic_chat.shared.config module.
"""

import json
import os
from unittest.mock import patch

import pytest

from clinic_chat.client.network.transport import TransportConfig
from clinic_chat.shared.config import ClientConfig, ConfigurationLoader
from clinic_chat.shared.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)


class TestClientConfig:
    """Test ClientConfig class."""

    def test_default_values(self):
        """Test default configuration values."""
        config = ClientConfig()

        assert config.endpoint_url == "ws://127.0.0.1:8000/ws"
        assert config.chat_id == "chat123"
        assert config.current_user_id == "currentUser"
        assert config.remote_user_id == "remoteUser"
        assert config.close_code == 1000
        assert config.open_timeout == 10.0
        assert config.appointments_path is None
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_defaults_are_valid(self):
        """Test that the default configuration passes validation."""
        ClientConfig().validate()

    def test_secure_endpoint_is_valid(self):
        """Test that wss:// endpoints are accepted."""
        ClientConfig(endpoint_url="wss://chat.example.org/ws").validate()

    def test_validate_invalid_scheme(self):
        """Test validation with a non-WebSocket URL."""
        config = ClientConfig(endpoint_url="http://127.0.0.1:8000/ws")

        with pytest.raises(InvalidConfigurationError, match="ws:// or wss://"):
            config.validate()

    def test_validate_empty_endpoint(self):
        """Test validation with an empty endpoint."""
        config = ClientConfig(endpoint_url="  ")

        with pytest.raises(InvalidConfigurationError, match="non-empty"):
            config.validate()

    def test_validate_same_participants(self):
        """Test that both participants must differ."""
        config = ClientConfig(current_user_id="doctor", remote_user_id="doctor")

        with pytest.raises(InvalidConfigurationError, match="cannot be the same"):
            config.validate()

    @pytest.mark.parametrize("close_code", [999, 1001, 1005, 2999, 5000])
    def test_validate_reserved_close_code(self, close_code):
        """Test that reserved close codes are rejected."""
        config = ClientConfig(close_code=close_code)

        with pytest.raises(InvalidConfigurationError, match="close_code"):
            config.validate()

    @pytest.mark.parametrize("close_code", [1000, 3000, 4000, 4999])
    def test_validate_allowed_close_code(self, close_code):
        """Test the close codes a client may send."""
        ClientConfig(close_code=close_code).validate()

    def test_validate_timeout(self):
        """Test that the open timeout must be positive."""
        config = ClientConfig(open_timeout=0)

        with pytest.raises(InvalidConfigurationError, match="open_timeout"):
            config.validate()

    def test_validate_log_level(self):
        """Test that unknown log levels are rejected."""
        config = ClientConfig(log_level="VERBOSE")

        with pytest.raises(InvalidConfigurationError, match="log_level"):
            config.validate()

    def test_validate_collects_all_errors(self):
        """Test that every problem is reported at once."""
        config = ClientConfig(endpoint_url="ftp://host", open_timeout=-1)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "endpoint_url" in message
        assert "open_timeout" in message

    def test_to_transport_config(self):
        """Test building the transport configuration."""
        config = ClientConfig(endpoint_url="ws://10.0.0.5:9000/ws", close_code=4000, open_timeout=3.0)

        transport_config = config.to_transport_config()

        assert isinstance(transport_config, TransportConfig)
        assert transport_config.endpoint_url == "ws://10.0.0.5:9000/ws"
        assert transport_config.close_code == 4000
        assert transport_config.open_timeout == 3.0

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_defaults(self):
        """Test loading from environment with defaults."""
        config = ClientConfig.from_env()

        assert config == ClientConfig()

    @patch.dict(os.environ, {
        'CLINIC_CHAT_ENDPOINT_URL': 'wss://clinic.example.org/ws',
        'CLINIC_CHAT_CLOSE_CODE': '4000',
        'CLINIC_CHAT_OPEN_TIMEOUT': '2.5',
        'CLINIC_CHAT_APPOINTMENTS_PATH': '/data/appointments.json',
        'CLINIC_CHAT_LOG_LEVEL': 'DEBUG',
        'CLINIC_CHAT_LOG_FILE': '/tmp/clinic.log',
    }, clear=True)
    def test_from_env_custom(self):
        """Test loading from environment with custom values."""
        config = ClientConfig.from_env()

        assert config.endpoint_url == 'wss://clinic.example.org/ws'
        assert config.close_code == 4000
        assert config.open_timeout == 2.5
        assert config.appointments_path == '/data/appointments.json'
        assert config.log_level == 'DEBUG'
        assert config.log_file == '/tmp/clinic.log'

    @patch.dict(os.environ, {'CLINIC_CHAT_CLOSE_CODE': 'normal'}, clear=True)
    def test_from_env_invalid_number(self):
        """Test loading from environment with a non-numeric value."""
        with pytest.raises(ConfigurationError, match="environment"):
            ClientConfig.from_env()

    @patch.dict(os.environ, {'CLINIC_CHAT_ENDPOINT_URL': 'http://wrong'}, clear=True)
    def test_from_env_invalid_value(self):
        """Test that environment values are validated."""
        with pytest.raises(InvalidConfigurationError):
            ClientConfig.from_env()

    def test_from_dict(self):
        """Test creating configuration from dictionary."""
        config = ClientConfig.from_dict({
            'endpoint_url': 'ws://10.1.1.1:8000/ws',
            'open_timeout': 5.0,
            'unknown_key': 'ignored'
        })

        assert config.endpoint_url == 'ws://10.1.1.1:8000/ws'
        assert config.open_timeout == 5.0
        assert config.close_code == 1000

    def test_from_dict_invalid(self):
        """Test creating configuration from invalid dictionary."""
        with pytest.raises(InvalidConfigurationError):
            ClientConfig.from_dict({'close_code': 1006})


class TestConfigurationLoader:
    """Test ConfigurationLoader class."""

    def test_load_from_json_file(self, tmp_path):
        """Test loading configuration from JSON file."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({'client': {'endpoint_url': 'ws://10.0.0.1:8000/ws'}}))

        data = ConfigurationLoader.load_from_file(config_file)

        assert data == {'client': {'endpoint_url': 'ws://10.0.0.1:8000/ws'}}

    def test_load_nonexistent_file(self, tmp_path):
        """Test loading from nonexistent file."""
        with pytest.raises(MissingConfigurationError):
            ConfigurationLoader.load_from_file(tmp_path / "missing.json")

    def test_load_unsupported_format(self, tmp_path):
        """Test loading unsupported file format."""
        config_file = tmp_path / "config.ini"
        config_file.write_text("[client]")

        with pytest.raises(ConfigurationError, match="Unsupported"):
            ConfigurationLoader.load_from_file(config_file)

    def test_load_invalid_json(self, tmp_path):
        """Test loading a malformed JSON file."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            ConfigurationLoader.load_from_file(config_file)

    def test_load_non_mapping(self, tmp_path):
        """Test that the top level must be a mapping."""
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2, 3]")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigurationLoader.load_from_file(config_file)

    def test_load_yaml_file(self, tmp_path):
        """Test loading configuration from YAML file."""
        pytest.importorskip("yaml")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("client:\n  endpoint_url: ws://10.0.0.2:8000/ws\n  open_timeout: 4\n")

        data = ConfigurationLoader.load_from_file(config_file)

        assert data['client']['endpoint_url'] == 'ws://10.0.0.2:8000/ws'
        assert data['client']['open_timeout'] == 4

    def test_no_default_config(self, tmp_path, monkeypatch):
        """Test that no file and no default yields empty configuration."""
        monkeypatch.chdir(tmp_path)

        assert ConfigurationLoader.find_default_config() is None
        assert ConfigurationLoader.load_from_file() == {}

    def test_default_config_discovered(self, tmp_path, monkeypatch):
        """Test that a default configuration file in the working directory is used."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".clinic_chat.json").write_text(json.dumps({'client': {'close_code': 4001}}))

        assert ConfigurationLoader.find_default_config() == ".clinic_chat.json"
        assert ConfigurationLoader.load_from_file() == {'client': {'close_code': 4001}}

    @patch.dict(os.environ, {}, clear=True)
    def test_load_client_config_from_file(self, tmp_path):
        """Test loading client configuration from a file section."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            'client': {'endpoint_url': 'ws://10.0.0.3:8000/ws', 'close_code': 4000}
        }))

        config = ConfigurationLoader.load_client_config(config_file)

        assert config.endpoint_url == 'ws://10.0.0.3:8000/ws'
        assert config.close_code == 4000

    @patch.dict(os.environ, {}, clear=True)
    def test_load_client_section_not_mapping(self, tmp_path):
        """Test that a non-mapping client section is a configuration error."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({'client': ['ws://10.0.0.3:8000/ws']}))

        with pytest.raises(InvalidConfigurationError, match="must be a mapping"):
            ConfigurationLoader.load_client_config(config_file)

    @patch.dict(os.environ, {'CLINIC_CHAT_ENDPOINT_URL': 'ws://env-host:8000/ws'}, clear=True)
    def test_environment_overrides_file(self, tmp_path):
        """Test that non-default environment values override the file."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            'client': {'endpoint_url': 'ws://file-host:8000/ws', 'close_code': 4000}
        }))

        config = ConfigurationLoader.load_client_config(config_file)

        assert config.endpoint_url == 'ws://env-host:8000/ws'
        assert config.close_code == 4000

    @patch.dict(os.environ, {'CLINIC_CHAT_ENDPOINT_URL': 'ws://env-host:8000/ws'}, clear=True)
    def test_environment_ignored_when_disabled(self, tmp_path, monkeypatch):
        """Test loading without environment overrides."""
        monkeypatch.chdir(tmp_path)

        config = ConfigurationLoader.load_client_config(use_env=False)

        assert config == ClientConfig()
