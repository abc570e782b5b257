"""Tests for MockTransport."""

import asyncio

import pytest

from elerostick.exceptions import TransportError
from elerostick.protocol.messages import build_easy_check, build_easy_info
from elerostick.transport.mock import MockTransport, ScriptedMockTransport

CONFIRM_CHANNELS_1_3 = bytes.fromhex("aa044b000502")


class TestMockTransport:
    """Tests for MockTransport class."""

    @pytest.fixture
    def transport(self):
        """Create a MockTransport instance."""
        return MockTransport()

    @pytest.mark.asyncio
    async def test_open_close(self, transport):
        """Test opening and closing transport."""
        assert not transport.is_open
        await transport.open()
        assert transport.is_open
        await transport.close()
        assert not transport.is_open

    @pytest.mark.asyncio
    async def test_double_open_raises(self, transport):
        """Test that opening twice raises error."""
        await transport.open()
        with pytest.raises(TransportError):
            await transport.open()

    @pytest.mark.asyncio
    async def test_write_records_data(self, transport):
        """Test that write records data."""
        await transport.open()
        await transport.write(b"hello")
        await transport.write(b"world")
        assert transport.written_data == [b"hello", b"world"]
        assert transport.last_written == b"world"

    @pytest.mark.asyncio
    async def test_write_when_closed_raises(self, transport):
        """Test that writing to closed transport raises."""
        with pytest.raises(TransportError):
            await transport.write(b"test")

    @pytest.mark.asyncio
    async def test_write_error(self, transport):
        """Test a configured write error is raised and not recorded."""
        await transport.open()
        transport.set_write_error(OSError("unplugged"))
        with pytest.raises(OSError):
            await transport.write(b"x")
        transport.set_write_error(None)
        await transport.write(b"y")
        assert transport.written_data == [b"y"]

    @pytest.mark.asyncio
    async def test_receive_delivers_to_callbacks(self, transport):
        """Test receive pushes bytes to every callback."""
        first, second = [], []
        await transport.open()
        transport.on_data(first.append)
        transport.on_data(second.append)
        transport.receive(b"\xaa\x02")
        assert first == [b"\xaa\x02"]
        assert second == [b"\xaa\x02"]

    @pytest.mark.asyncio
    async def test_receive_when_closed_raises(self, transport):
        with pytest.raises(TransportError):
            transport.receive(b"\xaa")

    @pytest.mark.asyncio
    async def test_duplicate_registration_ignored(self, transport):
        """Test the same callback is registered once."""
        received = []
        await transport.open()
        transport.on_data(received.append)
        transport.on_data(received.append)
        assert transport.listener_count == 1
        transport.receive(b"\x01")
        assert received == [b"\x01"]

    @pytest.mark.asyncio
    async def test_remove_data_listener(self, transport):
        received = []
        await transport.open()
        transport.on_data(received.append)
        transport.remove_data_listener(received.append)
        transport.remove_data_listener(received.append)
        transport.receive(b"\x01")
        assert received == []

    @pytest.mark.asyncio
    async def test_failing_callback_isolated(self, transport):
        """Test a raising callback does not stop delivery to others."""
        received = []

        def broken(data):
            raise RuntimeError("bug")

        await transport.open()
        transport.on_data(broken)
        transport.on_data(received.append)
        transport.receive(b"\x01")
        assert received == [b"\x01"]

    @pytest.mark.asyncio
    async def test_queued_response_delivered_after_write(self, transport):
        """Test replies arrive on the next loop iteration, not inside write."""
        received = []
        await transport.open()
        transport.on_data(received.append)
        transport.add_response(CONFIRM_CHANNELS_1_3)

        await transport.write(build_easy_check())
        assert received == []

        await asyncio.sleep(0)
        assert received == [CONFIRM_CHANNELS_1_3]

    @pytest.mark.asyncio
    async def test_empty_response_means_no_reply(self, transport):
        received = []
        await transport.open()
        transport.on_data(received.append)
        transport.add_responses(b"", CONFIRM_CHANNELS_1_3)

        await transport.write(b"first")
        await asyncio.sleep(0)
        assert received == []

        await transport.write(b"second")
        await asyncio.sleep(0)
        assert received == [CONFIRM_CHANNELS_1_3]

    @pytest.mark.asyncio
    async def test_response_callback(self, transport):
        """Test dynamic replies take precedence over the queue."""
        received = []
        await transport.open()
        transport.on_data(received.append)
        transport.add_response(b"queued")
        transport.set_response_callback(lambda data: b"echo:" + data if data == b"a" else None)

        await transport.write(b"a")
        await transport.write(b"b")
        await asyncio.sleep(0)

        assert received == [b"echo:a", b"queued"]

    @pytest.mark.asyncio
    async def test_clear(self, transport):
        await transport.open()
        transport.add_response(b"x")
        await transport.write(b"data")
        transport.clear()
        assert transport.written_data == []

    @pytest.mark.asyncio
    async def test_assert_helpers(self, transport):
        await transport.open()
        await transport.write(b"one")
        transport.assert_written(b"one")
        transport.assert_write_count(1)
        with pytest.raises(AssertionError):
            transport.assert_written(b"two")
        with pytest.raises(AssertionError):
            transport.assert_write_count(2)


class TestScriptedMockTransport:
    """Tests for ScriptedMockTransport class."""

    @pytest.mark.asyncio
    async def test_scripted_exchange(self):
        """Test scripted request/reply pairs."""
        received = []
        transport = ScriptedMockTransport()
        transport.expect(request=build_easy_check(), response=CONFIRM_CHANNELS_1_3)
        transport.expect(request=None, response=b"")

        await transport.open()
        transport.on_data(received.append)

        await transport.write(build_easy_check())
        await transport.write(build_easy_info(3))
        await asyncio.sleep(0)

        assert received == [CONFIRM_CHANNELS_1_3]
        assert transport.remaining_steps == 0

    @pytest.mark.asyncio
    async def test_script_mismatch(self):
        transport = ScriptedMockTransport()
        transport.expect(request=build_easy_check(), response=b"")
        await transport.open()
        with pytest.raises(AssertionError):
            await transport.write(build_easy_info(1))

    @pytest.mark.asyncio
    async def test_reset_script(self):
        transport = ScriptedMockTransport()
        transport.expect(response=b"")
        await transport.open()
        await transport.write(b"x")
        assert transport.remaining_steps == 0
        transport.reset_script()
        assert transport.remaining_steps == 1
        transport.clear_script()
        assert transport.remaining_steps == 0
