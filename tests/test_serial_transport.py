"""Tests for AsyncSerialTransport that need no hardware."""

import asyncio

import pytest

from elerostick.exceptions import TransportError
from elerostick.transport.serial_async import AsyncSerialTransport


class TestAsyncSerialTransport:
    """Tests for AsyncSerialTransport class."""

    @pytest.fixture
    def transport(self):
        return AsyncSerialTransport("/dev/does-not-exist-elerostick")

    def test_defaults(self, transport):
        assert transport.port_name == "/dev/does-not-exist-elerostick"
        assert transport.baudrate == 38400
        assert transport.is_open is False
        assert "closed" in repr(transport)

    @pytest.mark.asyncio
    async def test_write_when_closed_raises(self, transport):
        with pytest.raises(TransportError):
            await transport.write(b"\xaa\x02\x4a\x0a")

    @pytest.mark.asyncio
    async def test_open_missing_port_raises(self, transport):
        with pytest.raises(TransportError):
            await transport.open()
        assert transport.is_open is False

    @pytest.mark.asyncio
    async def test_close_when_closed_is_noop(self, transport):
        await transport.close()
        assert transport.is_open is False


class _IdleWriter:
    """Stands in for the asyncio StreamWriter of an open port."""

    def is_closing(self):
        return False


class TestReadLoop:
    """Tests for the background read loop."""

    @pytest.mark.asyncio
    async def test_eof_marks_transport_closed(self):
        """Test a vanished port delivers what it read, then reports closed."""
        transport = AsyncSerialTransport("/dev/ttyUSB0")
        reader = asyncio.StreamReader()
        reader.feed_data(bytes.fromhex("aa054d00010102"))
        reader.feed_eof()
        transport._reader = reader
        transport._writer = _IdleWriter()
        received = []
        transport.on_data(received.append)
        assert transport.is_open

        await asyncio.wait_for(transport._read_loop(), 1.0)

        assert b"".join(received) == bytes.fromhex("aa054d00010102")
        assert transport.is_open is False
        with pytest.raises(TransportError):
            await transport.write(b"\xaa\x02\x4a\x0a")
