"""
elerostick - Python library for the Elero Transmitter Stick.

This library provides async communication with the Elero USB Transmitter
Stick over its serial easy-protocol, for driving blinds, shutters, awnings
and switch receivers on up to 15 learned channels.

Example:
    >>> from elerostick import CommandDispatcher
    >>> from elerostick.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyUSB0")
    ...     async with CommandDispatcher(transport) as dispatcher:
    ...         for channel in await dispatcher.check_learned_channels():
    ...             await dispatcher.request_status(channel)
    ...         print(dispatcher.store.snapshot().to_dict())
"""

from elerostick.config import DispatcherConfig, StickSettings
from elerostick.dispatcher import CommandDispatcher, DispatcherState, RequestKind
from elerostick.exceptions import (
    ChecksumError,
    DispatcherStoppedError,
    EleroStickError,
    FrameError,
    InvalidActionError,
    InvalidChannelError,
    LifecycleError,
    ProtocolError,
    TimeoutError,
    TransportError,
    TransportWriteError,
    ValidationError,
)
from elerostick.models.records import ChannelStatus, StateSnapshot
from elerostick.protocol.constants import Action, DeviceType
from elerostick.protocol.status import DriveStatus, SwitchStatus
from elerostick.state import StatusStore
from elerostick.transport import AbstractTransport, AsyncSerialTransport

__version__ = "0.1.0"
__all__ = [
    # Dispatcher
    "CommandDispatcher",
    "DispatcherState",
    "RequestKind",
    # Configuration
    "DispatcherConfig",
    "StickSettings",
    # State
    "StatusStore",
    "ChannelStatus",
    "StateSnapshot",
    # Protocol
    "Action",
    "DeviceType",
    "DriveStatus",
    "SwitchStatus",
    # Exceptions
    "EleroStickError",
    "ValidationError",
    "InvalidChannelError",
    "InvalidActionError",
    "ProtocolError",
    "FrameError",
    "ChecksumError",
    "TransportError",
    "TransportWriteError",
    "TimeoutError",
    "LifecycleError",
    "DispatcherStoppedError",
    # Transport
    "AbstractTransport",
    "AsyncSerialTransport",
    # Version
    "__version__",
]
