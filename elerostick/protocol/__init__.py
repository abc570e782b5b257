"""
Protocol layer for Elero Transmitter Stick communication.

This package contains the stateless codec:
- Command, response and action codes
- Checksum calculation and validation
- Channel bitmap encoding
- Frame building, parsing and stream reassembly
- Typed request builders and response decoding
- Status byte tables
"""

from elerostick.protocol.channels import (
    bitmap_to_channels,
    bytes_to_channel,
    channel_to_bytes,
    channels_to_bitmap,
    validate_channel,
)
from elerostick.protocol.checksums import append_checksum, calculate_checksum, validate_checksum
from elerostick.protocol.constants import (
    Action,
    CommandCode,
    DeviceType,
    ProtocolConstants,
    ResponseCode,
)
from elerostick.protocol.frame_reader import (
    DEFAULT_FRAME_READER,
    FrameBuffer,
    FrameParseError,
    FrameParseResult,
    FrameReader,
    ParsedFrame,
    build_frame,
    parse_frame,
)
from elerostick.protocol.messages import (
    AckResponse,
    ConfirmResponse,
    Response,
    build_easy_check,
    build_easy_info,
    build_easy_send,
    decode_response,
)
from elerostick.protocol.status import (
    DriveStatus,
    SwitchStatus,
    decode_status,
    drive_status,
    switch_status,
)

__all__ = [
    # Constants
    "Action",
    "CommandCode",
    "DeviceType",
    "ProtocolConstants",
    "ResponseCode",
    # Checksums
    "calculate_checksum",
    "validate_checksum",
    "append_checksum",
    # Channels
    "channel_to_bytes",
    "bytes_to_channel",
    "bitmap_to_channels",
    "channels_to_bitmap",
    "validate_channel",
    # Frame Parsing
    "FrameReader",
    "FrameBuffer",
    "FrameParseResult",
    "ParsedFrame",
    "FrameParseError",
    "build_frame",
    "parse_frame",
    "DEFAULT_FRAME_READER",
    # Messages
    "AckResponse",
    "ConfirmResponse",
    "Response",
    "build_easy_check",
    "build_easy_info",
    "build_easy_send",
    "decode_response",
    # Status
    "DriveStatus",
    "SwitchStatus",
    "decode_status",
    "drive_status",
    "switch_status",
]
