"""
Transport layer for stick communication.

Available transports:
- AsyncSerialTransport: Async serial port using pyserial-asyncio
- MockTransport: Mock transport for testing without hardware

Example:
    >>> from elerostick.transport import AsyncSerialTransport
    >>> async with AsyncSerialTransport("/dev/ttyUSB0") as transport:
    ...     transport.on_data(handle_bytes)
    ...     await transport.write(frame_data)

Testing Example:
    >>> from elerostick.transport import MockTransport
    >>> mock = MockTransport()
    >>> mock.add_response(bytes.fromhex("aa054d00010102"))  # channel 1 at top
"""

from elerostick.transport.abc import AbstractTransport, DataCallback
from elerostick.transport.mock import MockTransport, ScriptedMockTransport
from elerostick.transport.serial_async import AsyncSerialTransport

__all__ = [
    "AbstractTransport",
    "AsyncSerialTransport",
    "DataCallback",
    "MockTransport",
    "ScriptedMockTransport",
]
