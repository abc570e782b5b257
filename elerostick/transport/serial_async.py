"""
Async serial transport using pyserial-asyncio.

Serial configuration of the Elero Transmitter Stick:
- Baud rate: 38400 (default)
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None

The stick's read path is independent of the write path: status frames can
arrive at any time, so a background task reads the port continuously and
pushes each chunk to the registered data callbacks.

Example:
    >>> transport = AsyncSerialTransport("/dev/ttyUSB0")
    >>> async with transport:
    ...     transport.on_data(lambda chunk: print(chunk.hex()))
    ...     await transport.write(frame)
"""

from __future__ import annotations

import asyncio
import logging

import serial
import serial_asyncio

from elerostick.exceptions import TransportError
from elerostick.protocol.constants import ProtocolConstants
from elerostick.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class AsyncSerialTransport(AbstractTransport):
    """
    Async serial transport using pyserial-asyncio.

    Provides non-blocking serial communication on the running asyncio
    event loop. This is the transport for real hardware.

    Attributes:
        port_name: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
        is_open: Whether the port is currently open.
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        read_chunk_size: int = ProtocolConstants.READ_CHUNK_SIZE,
    ) -> None:
        """
        Initialize the async serial transport.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
            baudrate: Baud rate (default: 38400).
            read_chunk_size: Maximum bytes per delivered chunk.
        """
        super().__init__()
        self._port = port
        self._baudrate = baudrate
        self._read_chunk_size = read_chunk_size
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._read_task: asyncio.Task[None] | None = None

    @property
    def is_open(self) -> bool:
        """Check if the serial port is currently open."""
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
        )

    @property
    def port_name(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._baudrate

    async def open(self) -> None:
        """
        Open the serial port and start reading.

        Raises:
            TransportError: If the port is already open or cannot be opened.
        """
        if self.is_open:
            raise TransportError(f"Serial port {self._port} already open")

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self._port,
                baudrate=self._baudrate,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                bytesize=serial.EIGHTBITS,
                # No flow control
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self._port}: {e}") from e
        except OSError as e:
            raise TransportError(f"OS error opening {self._port}: {e}") from e

        self._read_task = asyncio.create_task(self._read_loop())
        logger.info("Opened %s at %d baud", self._port, self._baudrate)

    async def close(self) -> None:
        """
        Stop reading and close the serial port.

        Raises:
            TransportError: If the port fails to close cleanly.
        """
        if self._read_task is not None:
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass
            self._read_task = None

        writer = self._writer
        self._reader = None
        self._writer = None

        if writer is not None:
            try:
                writer.close()
                await writer.wait_closed()
            except (serial.SerialException, OSError) as e:
                raise TransportError(f"Failed to close {self._port}: {e}") from e
            logger.info("Closed %s", self._port)

    async def write(self, data: bytes) -> None:
        """
        Write data to the serial port.

        Raises:
            TransportError: If the port is not open or write fails.
        """
        if not self.is_open:
            raise TransportError("Serial port is not open")

        try:
            self._writer.write(data)
            await self._writer.drain()
        except Exception as e:
            raise TransportError(f"Write failed: {e}") from e

        logger.debug("TX %s", data.hex(" "))

    async def _read_loop(self) -> None:
        """
        Read chunks until EOF and deliver them to data callbacks.

        When the port goes away the transport reports itself closed, so
        later writes fail with TransportError. close() still releases the
        writer.
        """
        reader = self._reader
        while reader is not None:
            try:
                data = await reader.read(self._read_chunk_size)
            except (serial.SerialException, OSError):
                logger.exception("Read from %s failed", self._port)
                break
            if not data:
                logger.warning("Serial port %s reached EOF", self._port)
                break
            logger.debug("RX %s", data.hex(" "))
            self._deliver(data)

        if self._reader is reader:
            self._reader = None

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncSerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
