"""
Channel bitmap encoding.

The stick addresses its 15 channels through a 16-bit bitmap sent as two
bytes, high byte first:

    channel  1..8   ->  bit (channel - 1) of the low byte
    channel  9..15  ->  bit (channel - 9) of the high byte

Bit 15 is never used. Requests always carry exactly one bit; the
easy_confirm reply to easy_check carries one bit per learned channel.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from elerostick.exceptions import InvalidChannelError
from elerostick.protocol.constants import ProtocolConstants

_CHANNEL_MASK: Final[int] = 0x7FFF
"""Bits 0-14; bit 15 carries no channel."""


def validate_channel(channel: object) -> int:
    """
    Check that a value is a usable channel number.

    Args:
        channel: Candidate channel.

    Returns:
        The channel as int.

    Raises:
        InvalidChannelError: If not an integer in 1..15.
    """
    if isinstance(channel, bool) or not isinstance(channel, int):
        raise InvalidChannelError(channel)
    if not ProtocolConstants.MIN_CHANNEL <= channel <= ProtocolConstants.MAX_CHANNEL:
        raise InvalidChannelError(channel)
    return channel


def channel_to_bytes(channel: int) -> tuple[int, int]:
    """
    Encode one channel as a single-bit (high, low) bitmap.

    Example:
        >>> channel_to_bytes(1)
        (0, 1)
        >>> channel_to_bytes(9)
        (1, 0)

    Raises:
        InvalidChannelError: If channel is outside 1..15.
    """
    channel = validate_channel(channel)
    if channel <= 8:
        return 0x00, 1 << (channel - 1)
    return 1 << (channel - 9), 0x00


def bytes_to_channel(high: int, low: int) -> int:
    """
    Decode a single-channel bitmap.

    Returns:
        The channel number if exactly one of bits 0-14 is set, otherwise 0.
    """
    word = ((high << 8) | low) & _CHANNEL_MASK
    if word == 0 or word & (word - 1):
        return 0
    return word.bit_length()


def bitmap_to_channels(high: int, low: int) -> list[int]:
    """
    Decode a multi-channel bitmap into ascending channel numbers.

    Example:
        >>> bitmap_to_channels(0x00, 0x05)
        [1, 3]
    """
    word = ((high << 8) | low) & _CHANNEL_MASK
    return [bit + 1 for bit in range(ProtocolConstants.MAX_CHANNEL) if word & (1 << bit)]


def channels_to_bitmap(channels: Iterable[int]) -> tuple[int, int]:
    """
    Encode a set of channels as a (high, low) bitmap.

    Raises:
        InvalidChannelError: If any channel is outside 1..15.
    """
    word = 0
    for channel in channels:
        word |= 1 << (validate_channel(channel) - 1)
    return (word >> 8) & 0xFF, word & 0xFF
