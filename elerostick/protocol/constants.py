"""
Elero Transmitter Stick protocol command codes and constants.

Based on the reverse-engineered easy-protocol reference for the Elero
USB Transmitter Stick.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from elerostick.exceptions import InvalidActionError


class CommandCode(IntEnum):
    """
    Command bytes sent from the host to the stick.

    Each request frame carries exactly one command byte at offset 2.
    """

    EASY_CHECK = 0x4A
    """Ask the stick which channels have a learned receiver."""

    EASY_SEND = 0x4C
    """Transmit an action to one channel."""

    EASY_INFO = 0x4E
    """Ask one channel for its current status."""


class ResponseCode(IntEnum):
    """Response type bytes sent from the stick to the host."""

    EASY_CONFIRM = 0x4B
    """Learned-channel bitmap, reply to EASY_CHECK."""

    EASY_ACK = 0x4D
    """Channel status, reply to EASY_INFO / EASY_SEND or an unsolicited push."""


class Action(IntEnum):
    """
    Action payload bytes for EASY_SEND.

    Values apply to blind/drive receivers. Switch receivers interpret
    TOP as on and BOTTOM as off.
    """

    STOP = 0x10
    TOP = 0x20
    TILT = 0x24
    BOTTOM = 0x40
    INTERMEDIATE = 0x44

    @classmethod
    def parse(cls, value: Action | int | str) -> Action:
        """
        Coerce an action name or payload byte to an Action.

        Args:
            value: Action member, payload byte, or case-insensitive name
                such as "top".

        Returns:
            The matching Action.

        Raises:
            InvalidActionError: If the value names no known action.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidActionError(value) from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise InvalidActionError(value) from None
        raise InvalidActionError(value)


class DeviceType(IntEnum):
    """Receiver families; each has its own status byte table."""

    DRIVE = 0
    """Blind, shutter or awning motor."""

    SWITCH = 1
    """On/off or dimming switch actor."""


class ProtocolConstants:
    """
    Protocol constants.

    Frame markers, channel limits, timing defaults and serial line settings.
    """

    # ===== Framing =====

    HEADER: Final[int] = 0xAA
    """First byte of every frame."""

    MIN_FRAME_SIZE: Final[int] = 4
    """Header + length + command + checksum."""

    MIN_LENGTH: Final[int] = 2
    """Smallest valid length field (command + checksum)."""

    # ===== Channels =====

    MIN_CHANNEL: Final[int] = 1
    MAX_CHANNEL: Final[int] = 15

    # ===== Timing (seconds) =====

    DEFAULT_RESPONSE_TIMEOUT: Final[float] = 5.0
    """How long an in-flight request waits for its response."""

    DEFAULT_COMMAND_DELAY: Final[float] = 0.5
    """Pause after every settled request before the next is transmitted."""

    # ===== Serial Port Configuration =====

    DEFAULT_BAUD_RATE: Final[int] = 38400
    DEFAULT_DATA_BITS: Final[int] = 8
    DEFAULT_STOP_BITS: Final[int] = 1

    READ_CHUNK_SIZE: Final[int] = 64
    """Maximum bytes handed to data callbacks per read."""


CONFIRM_PAYLOAD_SIZE: Final[int] = 2
"""Bitmap high + low."""

ACK_PAYLOAD_SIZE: Final[int] = 3
"""Bitmap high + low + status byte."""
