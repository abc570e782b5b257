"""
Status byte decoding for easy_ack frames.

The status byte means different things for drive receivers (blinds,
shutters, awnings) and switch receivers. The tables come from the
reverse-engineered protocol reference; unseen bytes are expected, so
every lookup falls back to UNKNOWN instead of failing.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from elerostick.protocol.constants import DeviceType


class DriveStatus(str, Enum):
    """Status reported by drive receivers."""

    NO_INFORMATION = "no_information"
    TOP_POSITION = "top_position"
    BOTTOM_POSITION = "bottom_position"
    INTERMEDIATE_POSITION = "intermediate_position"
    TILT_POSITION = "tilt_position"
    BLOCKING = "blocking"
    OVERHEATED = "overheated"
    TIMEOUT = "timeout"
    MOVE_UP_STARTED = "move_up_started"
    MOVE_DOWN_STARTED = "move_down_started"
    MOVING_UP = "moving_up"
    MOVING_DOWN = "moving_down"
    STOPPED_IN_UNDEFINED_POSITION = "stopped_in_undefined_position"
    TOP_TILT_STOP = "top_tilt_stop"
    BOTTOM_INTERMEDIATE_STOP = "bottom_intermediate_stop"
    SWITCHING_DEVICE_OFF = "switching_device_off"
    SWITCHING_DEVICE_ON = "switching_device_on"
    UNKNOWN = "unknown"


class SwitchStatus(str, Enum):
    """Status reported by switch receivers."""

    NO_INFORMATION = "no_information"
    OFF = "off"
    ON = "on"
    DIM1 = "dim1"
    DIM2 = "dim2"
    UNKNOWN = "unknown"


DRIVE_STATUS_BYTES: Final[dict[int, DriveStatus]] = {
    0x00: DriveStatus.NO_INFORMATION,
    0x01: DriveStatus.TOP_POSITION,
    0x02: DriveStatus.BOTTOM_POSITION,
    0x03: DriveStatus.INTERMEDIATE_POSITION,
    0x04: DriveStatus.TILT_POSITION,
    0x05: DriveStatus.BLOCKING,
    0x06: DriveStatus.OVERHEATED,
    0x07: DriveStatus.TIMEOUT,
    0x08: DriveStatus.MOVE_UP_STARTED,
    0x09: DriveStatus.MOVE_DOWN_STARTED,
    0x0A: DriveStatus.MOVING_UP,
    0x0B: DriveStatus.MOVING_DOWN,
    # 0x0C is not assigned
    0x0D: DriveStatus.STOPPED_IN_UNDEFINED_POSITION,
    0x0E: DriveStatus.TOP_TILT_STOP,
    0x0F: DriveStatus.BOTTOM_INTERMEDIATE_STOP,
    0x10: DriveStatus.SWITCHING_DEVICE_OFF,
    0x11: DriveStatus.SWITCHING_DEVICE_ON,
}

SWITCH_STATUS_BYTES: Final[dict[int, SwitchStatus]] = {
    0x00: SwitchStatus.NO_INFORMATION,
    0x01: SwitchStatus.OFF,
    0x02: SwitchStatus.ON,
    0x03: SwitchStatus.DIM1,
    0x04: SwitchStatus.DIM2,
    0x10: SwitchStatus.OFF,
    0x11: SwitchStatus.ON,
}


def drive_status(status_byte: int) -> DriveStatus:
    """Decode a drive status byte; unmapped values give UNKNOWN."""
    return DRIVE_STATUS_BYTES.get(status_byte, DriveStatus.UNKNOWN)


def switch_status(status_byte: int) -> SwitchStatus:
    """Decode a switch status byte; unmapped values give UNKNOWN."""
    return SWITCH_STATUS_BYTES.get(status_byte, SwitchStatus.UNKNOWN)


def decode_status(
    status_byte: int,
    device_type: DeviceType = DeviceType.DRIVE,
) -> DriveStatus | SwitchStatus:
    """
    Decode a status byte using the table for the given receiver type.

    Example:
        >>> decode_status(0x01).value
        'top_position'
        >>> decode_status(0x01, DeviceType.SWITCH).value
        'off'
    """
    if device_type == DeviceType.SWITCH:
        return switch_status(status_byte)
    return drive_status(status_byte)
