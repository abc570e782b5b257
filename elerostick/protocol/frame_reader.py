"""
Stick protocol frame building and parsing.

Every frame, in both directions, has the same layout:

    [0xAA][LEN][CMD][PAYLOAD...][CS]

- 0xAA: constant header
- LEN: number of bytes from CMD through CS inclusive, so the whole frame
  is LEN + 2 bytes long
- CMD: command (host -> stick) or response type (stick -> host)
- PAYLOAD: 0, 2 or 3 bytes depending on CMD
- CS: checksum making the sum of all frame bytes 0 mod 256

There are no delimiters besides the length byte. The serial layer may
deliver a frame in several chunks or several frames in one chunk, so
inbound bytes go through a FrameBuffer which only hands out complete
frames.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

from elerostick.exceptions import ChecksumError, FrameError, ProtocolError
from elerostick.protocol.checksums import calculate_checksum
from elerostick.protocol.constants import CommandCode, ProtocolConstants, ResponseCode

logger = logging.getLogger(__name__)


class FrameParseResult(Enum):
    """Outcome of attempting to parse a frame from a byte buffer."""

    SUCCESS = auto()
    """Frame was successfully parsed and validated."""

    EMPTY_BUFFER = auto()
    """Buffer is empty, no data to parse."""

    INCOMPLETE_FRAME = auto()
    """Buffer holds part of a frame; wait for more bytes."""

    INVALID_CHECKSUM = auto()
    """Checksum byte does not match (data corruption)."""

    INVALID_FORMAT = auto()
    """Wrong header or impossible length field."""


@dataclass(frozen=True)
class ParsedFrame:
    """
    A successfully parsed and checksum-verified frame.

    Attributes:
        command_byte: Command or response type byte.
        payload: Bytes between the command byte and the checksum.
        raw_frame: Complete frame as received.
        bytes_consumed: Number of bytes the frame occupied in the input.
    """

    command_byte: int
    payload: bytes
    raw_frame: bytes
    bytes_consumed: int

    @property
    def command(self) -> ResponseCode | CommandCode | int:
        """Get the command as an enum member if recognised, else raw int."""
        for enum_cls in (ResponseCode, CommandCode):
            try:
                return enum_cls(self.command_byte)
            except ValueError:
                continue
        return self.command_byte

    def __repr__(self) -> str:
        command = self.command
        name = command.name if isinstance(command, Enum) else f"0x{self.command_byte:02X}"
        return f"ParsedFrame({name}, payload={self.payload.hex()})"


@dataclass(frozen=True)
class FrameParseError:
    """Diagnostic details about a frame parsing failure."""

    result: FrameParseResult
    message: str
    position: int = 0
    partial_data: bytes = b""
    expected: int | None = None
    received: int | None = None

    @property
    def exception(self) -> ProtocolError | None:
        """
        The protocol error describing this failure.

        None for EMPTY_BUFFER and INCOMPLETE_FRAME, which only mean more
        bytes are needed.
        """
        if self.result == FrameParseResult.INVALID_CHECKSUM:
            return ChecksumError(expected=self.expected, received=self.received)
        if self.result == FrameParseResult.INVALID_FORMAT:
            return FrameError(self.message)
        return None


def build_frame(command: int, payload: bytes | bytearray | Sequence[int] = b"") -> bytes:
    """
    Build a complete frame.

    Args:
        command: Command byte.
        payload: Payload bytes following the command.

    Returns:
        Header, length, command, payload and checksum.

    Example:
        >>> build_frame(0x4A).hex(" ")
        'aa 02 4a 0a'
    """
    body = bytes([command]) + bytes(payload)
    # +1 for the checksum byte
    head = bytes([ProtocolConstants.HEADER, len(body) + 1]) + body
    return head + bytes([calculate_checksum(head)])


class FrameReader:
    """
    Stateless frame parser.

    Parses a single frame starting at offset 0 of the given buffer.
    Trailing bytes beyond the declared length are left alone; the
    caller uses ParsedFrame.bytes_consumed to advance.

    Example:
        >>> reader = FrameReader()
        >>> result, frame = reader.parse(bytes.fromhex("aa054d00010102"))
        >>> assert result == FrameParseResult.SUCCESS
        >>> assert frame.payload == b"\\x00\\x01\\x01"
    """

    def parse(
        self,
        buffer: bytes | bytearray | memoryview,
    ) -> tuple[FrameParseResult, ParsedFrame | FrameParseError]:
        """
        Parse a frame from the start of the buffer.

        Returns:
            Tuple of (result, frame_or_error):
            - On success: (SUCCESS, ParsedFrame)
            - On failure: (error_code, FrameParseError)
        """
        if not buffer:
            return FrameParseResult.EMPTY_BUFFER, FrameParseError(
                result=FrameParseResult.EMPTY_BUFFER,
                message="Buffer is empty",
            )

        # Header, length and command must be present before anything else
        if len(buffer) < 3:
            return FrameParseResult.INCOMPLETE_FRAME, FrameParseError(
                result=FrameParseResult.INCOMPLETE_FRAME,
                message=f"Buffer too small to read length (have {len(buffer)})",
                partial_data=bytes(buffer),
            )

        if buffer[0] != ProtocolConstants.HEADER:
            return FrameParseResult.INVALID_FORMAT, FrameParseError(
                result=FrameParseResult.INVALID_FORMAT,
                message=f"Invalid header 0x{buffer[0]:02X}",
            )

        length = buffer[1]
        if length < ProtocolConstants.MIN_LENGTH:
            return FrameParseResult.INVALID_FORMAT, FrameParseError(
                result=FrameParseResult.INVALID_FORMAT,
                message=f"Length {length} cannot hold command and checksum",
                position=1,
            )

        total = 2 + length
        if len(buffer) < total:
            return FrameParseResult.INCOMPLETE_FRAME, FrameParseError(
                result=FrameParseResult.INCOMPLETE_FRAME,
                message=f"Incomplete frame (need {total}, have {len(buffer)})",
                partial_data=bytes(buffer),
            )

        expected = calculate_checksum(buffer[: total - 1])
        received = buffer[total - 1]
        if expected != received:
            return FrameParseResult.INVALID_CHECKSUM, FrameParseError(
                result=FrameParseResult.INVALID_CHECKSUM,
                message=f"Checksum mismatch: expected 0x{expected:02X}, got 0x{received:02X}",
                position=total - 1,
                expected=expected,
                received=received,
            )

        frame = ParsedFrame(
            command_byte=buffer[2],
            payload=bytes(buffer[3 : total - 1]),
            raw_frame=bytes(buffer[:total]),
            bytes_consumed=total,
        )
        return FrameParseResult.SUCCESS, frame


# Module-level convenience instance
DEFAULT_FRAME_READER: FrameReader = FrameReader()
"""Default FrameReader instance for convenience."""


def parse_frame(
    buffer: bytes | bytearray | memoryview,
) -> tuple[FrameParseResult, ParsedFrame | FrameParseError]:
    """Parse a frame using the default frame reader."""
    return DEFAULT_FRAME_READER.parse(buffer)


class FrameBuffer:
    """
    Reassembles frames from an arbitrarily chunked byte stream.

    Bytes are accumulated until a frame is complete according to its
    length byte. Each complete frame is removed from the buffer and
    parsed; frames failing validation are dropped and the buffer carries
    on from the next length-prefixed position. No attempt is made to
    rescan for a header after a lost byte.

    Example:
        >>> buf = FrameBuffer()
        >>> buf.feed(bytes.fromhex("aa054d"))
        []
        >>> buf.feed(bytes.fromhex("00010102"))
        [ParsedFrame(EASY_ACK, payload=000101)]
    """

    def __init__(self, reader: FrameReader | None = None) -> None:
        self._reader = reader or DEFAULT_FRAME_READER
        self._buffer = bytearray()
        self._dropped = 0

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def dropped_count(self) -> int:
        """Number of complete frames discarded as corrupt or malformed."""
        return self._dropped

    def feed(self, data: bytes | bytearray | memoryview) -> list[ParsedFrame]:
        """
        Append received bytes and return every frame now complete.

        Args:
            data: Bytes as delivered by the transport.

        Returns:
            Valid frames in arrival order.
        """
        self._buffer.extend(data)
        frames: list[ParsedFrame] = []

        while len(self._buffer) >= 2:
            total = 2 + self._buffer[1]
            if len(self._buffer) < total:
                break

            chunk = bytes(self._buffer[:total])
            del self._buffer[:total]

            result, parsed = self._reader.parse(chunk)
            if result == FrameParseResult.SUCCESS:
                frames.append(parsed)
            else:
                self._dropped += 1
                logger.debug("Dropping frame %s: %s", chunk.hex(" "), parsed.exception)

        return frames

    def clear(self) -> None:
        """Discard any buffered partial frame."""
        self._buffer.clear()
