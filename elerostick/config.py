"""
Configuration models.

DispatcherConfig holds the two timing knobs of the command dispatcher.
StickSettings describes a whole stick connection and can be read from
the environment:

    SERIAL_PORT        serial device path (required), e.g. /dev/ttyUSB0
    SERIAL_BAUD_RATE   baud rate, default 38400
    COMMAND_DELAY_MS   pause between commands in milliseconds, default 500
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from elerostick.protocol.constants import ProtocolConstants


class DispatcherConfig(BaseModel):
    """
    Timing configuration for CommandDispatcher.

    Attributes:
        response_timeout: Seconds an in-flight request waits for its
            response before it is rejected.
        command_delay: Seconds to pause after every settled request before
            the next one is transmitted.
    """

    model_config = ConfigDict(frozen=True)

    response_timeout: float = Field(
        default=ProtocolConstants.DEFAULT_RESPONSE_TIMEOUT,
        gt=0,
    )
    command_delay: float = Field(
        default=ProtocolConstants.DEFAULT_COMMAND_DELAY,
        ge=0,
    )


class StickSettings(BaseModel):
    """Serial connection and pacing settings for one stick."""

    model_config = ConfigDict(frozen=True)

    serial_port: str = Field(min_length=1)
    baudrate: int = Field(default=ProtocolConstants.DEFAULT_BAUD_RATE, gt=0)
    command_delay_ms: int = Field(
        default=int(ProtocolConstants.DEFAULT_COMMAND_DELAY * 1000),
        ge=0,
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StickSettings:
        """
        Read settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ).

        Raises:
            pydantic.ValidationError: If SERIAL_PORT is missing or a value
                does not parse.
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        if "SERIAL_PORT" in env:
            values["serial_port"] = env["SERIAL_PORT"]
        if env.get("SERIAL_BAUD_RATE"):
            values["baudrate"] = env["SERIAL_BAUD_RATE"]
        if env.get("COMMAND_DELAY_MS"):
            values["command_delay_ms"] = env["COMMAND_DELAY_MS"]
        return cls.model_validate(values)

    def to_dispatcher_config(self) -> DispatcherConfig:
        return DispatcherConfig(command_delay=self.command_delay_ms / 1000)
