"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from elerostick.config import DispatcherConfig, StickSettings


class TestDispatcherConfig:
    """Tests for DispatcherConfig."""

    def test_defaults(self):
        config = DispatcherConfig()
        assert config.response_timeout == 5.0
        assert config.command_delay == 0.5

    def test_zero_delay_allowed(self):
        assert DispatcherConfig(command_delay=0).command_delay == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"response_timeout": 0},
            {"response_timeout": -1},
            {"command_delay": -0.1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            DispatcherConfig(**kwargs)

    def test_frozen(self):
        config = DispatcherConfig()
        with pytest.raises(ValidationError):
            config.command_delay = 1.0


class TestStickSettings:
    """Tests for StickSettings."""

    def test_from_env_defaults(self):
        settings = StickSettings.from_env({"SERIAL_PORT": "/dev/ttyUSB0"})
        assert settings.serial_port == "/dev/ttyUSB0"
        assert settings.baudrate == 38400
        assert settings.command_delay_ms == 500

    def test_from_env_values(self):
        settings = StickSettings.from_env(
            {
                "SERIAL_PORT": "COM3",
                "SERIAL_BAUD_RATE": "9600",
                "COMMAND_DELAY_MS": "250",
            }
        )
        assert settings.baudrate == 9600
        assert settings.command_delay_ms == 250

    def test_empty_values_use_defaults(self):
        settings = StickSettings.from_env(
            {"SERIAL_PORT": "/dev/ttyUSB0", "SERIAL_BAUD_RATE": "", "COMMAND_DELAY_MS": ""}
        )
        assert settings.baudrate == 38400

    def test_missing_port(self):
        with pytest.raises(ValidationError):
            StickSettings.from_env({})

    def test_empty_port(self):
        with pytest.raises(ValidationError):
            StickSettings.from_env({"SERIAL_PORT": ""})

    def test_bad_number(self):
        with pytest.raises(ValidationError):
            StickSettings.from_env({"SERIAL_PORT": "/dev/ttyUSB0", "COMMAND_DELAY_MS": "soon"})

    def test_from_os_environ(self, monkeypatch):
        monkeypatch.setenv("SERIAL_PORT", "/dev/ttyACM0")
        monkeypatch.delenv("SERIAL_BAUD_RATE", raising=False)
        monkeypatch.delenv("COMMAND_DELAY_MS", raising=False)
        assert StickSettings.from_env().serial_port == "/dev/ttyACM0"

    def test_to_dispatcher_config(self):
        settings = StickSettings(serial_port="/dev/ttyUSB0", command_delay_ms=250)
        config = settings.to_dispatcher_config()
        assert config.command_delay == 0.25
        assert config.response_timeout == 5.0
