"""
8-bit two's-complement checksum calculation and validation.

The stick protocol appends one checksum byte to every frame:
- Sum all preceding bytes (header included)
- Keep the lower 8 bits
- The checksum is the value that brings the total back to 0 mod 256
"""

from __future__ import annotations


def calculate_checksum(data: bytes | bytearray | memoryview) -> int:
    """
    Calculate the checksum byte for the given data.

    Algorithm: (256 - sum % 256) % 256.

    Args:
        data: Frame bytes preceding the checksum.

    Returns:
        Checksum value (0-255).

    Example:
        >>> calculate_checksum(b"\\xaa\\x02\\x4a")
        10
    """
    return (256 - sum(data) % 256) % 256


def validate_checksum(frame: bytes | bytearray | memoryview) -> bool:
    """
    Check a complete frame, trailing checksum byte included.

    Args:
        frame: Frame bytes ending with the checksum.

    Returns:
        True if the bytes sum to 0 mod 256, False otherwise or if empty.
    """
    if not frame:
        return False
    return sum(frame) % 256 == 0


def append_checksum(data: bytes | bytearray) -> bytes:
    """
    Return data with its checksum byte appended.

    Example:
        >>> append_checksum(b"\\xaa\\x02\\x4a").hex()
        'aa024a0a'
    """
    return bytes(data) + bytes([calculate_checksum(data)])
