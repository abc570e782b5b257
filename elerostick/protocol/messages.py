"""
Typed easy-protocol messages.

Builders for the three host requests (easy_check, easy_info, easy_send)
and a decoder turning parsed frames into the two stick responses
(easy_confirm, easy_ack).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from elerostick.protocol.channels import bitmap_to_channels, bytes_to_channel, channel_to_bytes
from elerostick.protocol.constants import (
    ACK_PAYLOAD_SIZE,
    CONFIRM_PAYLOAD_SIZE,
    Action,
    CommandCode,
    DeviceType,
    ResponseCode,
)
from elerostick.protocol.frame_reader import ParsedFrame, build_frame
from elerostick.protocol.status import DriveStatus, SwitchStatus, decode_status

logger = logging.getLogger(__name__)


def build_easy_check() -> bytes:
    """Build an easy_check request (no payload)."""
    return build_frame(CommandCode.EASY_CHECK)


def build_easy_info(channel: int) -> bytes:
    """
    Build an easy_info request for one channel.

    Raises:
        InvalidChannelError: If channel is outside 1..15.
    """
    return build_frame(CommandCode.EASY_INFO, channel_to_bytes(channel))


def build_easy_send(channel: int, action: Action | int | str) -> bytes:
    """
    Build an easy_send request for one channel.

    Raises:
        InvalidChannelError: If channel is outside 1..15.
        InvalidActionError: If action is not a known action.
    """
    high, low = channel_to_bytes(channel)
    return build_frame(CommandCode.EASY_SEND, [high, low, Action.parse(action)])


@dataclass(frozen=True)
class ConfirmResponse:
    """easy_confirm: the channels the stick has learned, ascending."""

    channels: tuple[int, ...]

    code = ResponseCode.EASY_CONFIRM


@dataclass(frozen=True)
class AckResponse:
    """
    easy_ack: status of one channel.

    channel is 0 when the bitmap does not name exactly one channel.
    """

    channel: int
    status_byte: int

    code = ResponseCode.EASY_ACK

    @property
    def has_channel(self) -> bool:
        return self.channel != 0

    def status(self, device_type: DeviceType = DeviceType.DRIVE) -> DriveStatus | SwitchStatus:
        """Decode status_byte for the given receiver type."""
        return decode_status(self.status_byte, device_type)


Response = ConfirmResponse | AckResponse


def decode_response(frame: ParsedFrame) -> Response | None:
    """
    Interpret a parsed frame as a stick response.

    Returns:
        ConfirmResponse or AckResponse, or None for frames that are not a
        recognised response or whose payload is too short.
    """
    payload = frame.payload

    if frame.command_byte == ResponseCode.EASY_CONFIRM:
        if len(payload) < CONFIRM_PAYLOAD_SIZE:
            logger.debug("Short easy_confirm payload: %s", payload.hex())
            return None
        return ConfirmResponse(channels=tuple(bitmap_to_channels(payload[0], payload[1])))

    if frame.command_byte == ResponseCode.EASY_ACK:
        if len(payload) < ACK_PAYLOAD_SIZE:
            logger.debug("Short easy_ack payload: %s", payload.hex())
            return None
        return AckResponse(
            channel=bytes_to_channel(payload[0], payload[1]),
            status_byte=payload[2],
        )

    logger.debug("Ignoring frame with command 0x%02X", frame.command_byte)
    return None
