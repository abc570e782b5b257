"""
Abstract transport interface for stick communication.

A transport is a byte-oriented duplex connection to the stick. Writes are
awaited; inbound bytes are pushed to registered callbacks as they arrive,
in whatever chunks the underlying port delivers them. Callbacks run on the
event loop and must not block.

Implementations:
- AsyncSerialTransport: pyserial-asyncio based serial port
- MockTransport: in-memory stand-in for tests
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

DataCallback = Callable[[bytes], None]
"""Receives each chunk of inbound bytes."""


class AbstractTransport(ABC):
    """
    Abstract base class for stick transports.

    Transports support the async context manager protocol:

        async with AsyncSerialTransport("/dev/ttyUSB0") as transport:
            transport.on_data(handle_bytes)
            await transport.write(frame)

    Attributes:
        is_open: Whether the transport connection is currently open.
        port_name: Identifier for the transport (e.g., serial port name).
    """

    def __init__(self) -> None:
        self._data_callbacks: list[DataCallback] = []

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Port name or identifier string (e.g., "/dev/ttyUSB0", "COM3").
        """
        ...

    @abstractmethod
    async def open(self) -> None:
        """
        Open the transport connection.

        Raises:
            TransportError: If the connection cannot be established or is
                already open.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Close the transport connection.

        Safe to call multiple times. Registered data callbacks are kept, so
        a reopened transport keeps delivering to them.
        """
        ...

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Write a complete frame to the stick.

        Args:
            data: Bytes to send.

        Raises:
            TransportError: If the transport is not open or write fails.
        """
        ...

    def on_data(self, callback: DataCallback) -> None:
        """
        Register a callback for inbound bytes.

        Registering the same callback twice has no effect, so a listener
        never sees a chunk more than once.
        """
        if callback not in self._data_callbacks:
            self._data_callbacks.append(callback)

    def remove_data_listener(self, callback: DataCallback) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        if callback in self._data_callbacks:
            self._data_callbacks.remove(callback)

    def remove_data_listeners(self) -> None:
        """Unregister all data callbacks."""
        self._data_callbacks.clear()

    @property
    def listener_count(self) -> int:
        return len(self._data_callbacks)

    def _deliver(self, data: bytes) -> None:
        """Hand a chunk of inbound bytes to every registered callback."""
        for callback in list(self._data_callbacks):
            try:
                callback(data)
            except Exception:
                logger.exception("Data callback %r failed", callback)

    async def __aenter__(self) -> AbstractTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
