"""
In-memory stand-in for the stick.

MockTransport lets the dispatcher run without hardware. Inbound bytes are
either pushed by the test with receive(), or produced in reply to a write
from a queue of canned replies or a reply callback.

Example:
    >>> from elerostick.transport import MockTransport
    >>> from elerostick import CommandDispatcher
    >>>
    >>> stick = MockTransport()
    >>> stick.add_response(bytes.fromhex("aa044b000502"))  # channels 1 and 3
    >>>
    >>> async with CommandDispatcher(stick) as dispatcher:
    ...     assert await dispatcher.check_learned_channels() == [1, 3]
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable

from elerostick.exceptions import TransportError
from elerostick.transport.abc import AbstractTransport

ReplyCallback = Callable[[bytes], bytes | None]
"""Turns a written frame into reply bytes, or None to use the queue."""


class MockTransport(AbstractTransport):
    """
    Fake stick connection that records frames and plays back replies.

    The reply to a write comes from the reply callback when it returns
    bytes, otherwise from the reply queue. Replies reach the data
    callbacks on the next event loop iteration, after write() returned,
    like bytes read back from a real port.

    Attributes:
        written_data: Every frame written so far, oldest first.

    Example:
        >>> stick = MockTransport()
        >>> async with stick:
        ...     stick.on_data(chunks.append)
        ...     stick.receive(bytes.fromhex("aa054d00010102"))
        ...     await stick.write(build_easy_check())
        ...     assert stick.written_data == [build_easy_check()]
    """

    def __init__(self, port_name: str = "mock://stick") -> None:
        super().__init__()
        self._port_name = port_name
        self._is_open = False
        self._replies: deque[bytes] = deque()
        self._writes: list[bytes] = []
        self._reply_callback: ReplyCallback | None = None
        self._write_error: Exception | None = None

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def port_name(self) -> str:
        return self._port_name

    @property
    def written_data(self) -> list[bytes]:
        """Copy of the frames written so far."""
        return list(self._writes)

    @property
    def last_written(self) -> bytes | None:
        return self._writes[-1] if self._writes else None

    def add_response(self, response: bytes) -> None:
        """
        Queue the reply for a future write.

        Queued replies are consumed one per write, in order. An empty
        reply leaves that write unanswered.
        """
        self._replies.append(response)

    def add_responses(self, *responses: bytes) -> None:
        """Queue several replies at once."""
        self._replies.extend(responses)

    def set_response_callback(self, callback: ReplyCallback | None) -> None:
        """
        Compute replies from the written frame.

        A callback result of None falls through to the reply queue;
        b"" means no reply at all.
        """
        self._reply_callback = callback

    def set_write_error(self, error: Exception | None) -> None:
        """
        Make writes raise the given exception until reset with None.

        The exception is raised as is, so tests can simulate driver
        errors that are not TransportError.
        """
        self._write_error = error

    def clear(self) -> None:
        """Forget recorded writes and queued replies."""
        self._writes.clear()
        self._replies.clear()

    async def open(self) -> None:
        if self._is_open:
            raise TransportError(f"{self._port_name} already open")
        self._is_open = True

    async def close(self) -> None:
        self._is_open = False

    async def write(self, data: bytes) -> None:
        """
        Record a frame and schedule its reply.

        Raises:
            TransportError: If the transport is closed.
        """
        self._record(data)

        reply = self._reply_callback(bytes(data)) if self._reply_callback else None
        if reply is None and self._replies:
            reply = self._replies.popleft()
        self._schedule(reply)

    def receive(self, data: bytes) -> None:
        """
        Push inbound bytes to the data callbacks right now.

        Raises:
            TransportError: If the transport is closed.
        """
        if not self._is_open:
            raise TransportError(f"{self._port_name} is closed")
        self._deliver(bytes(data))

    def _record(self, data: bytes) -> None:
        if not self._is_open:
            raise TransportError(f"{self._port_name} is closed")
        if self._write_error is not None:
            raise self._write_error
        self._writes.append(bytes(data))

    def _schedule(self, reply: bytes | None) -> None:
        if reply:
            asyncio.get_running_loop().call_soon(self._deliver_if_open, reply)

    def _deliver_if_open(self, data: bytes) -> None:
        if self._is_open:
            self._deliver(data)

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Check the frame written at index (default: the last one).

        Raises:
            AssertionError: If nothing was written or the frame differs.
        """
        if not self._writes:
            raise AssertionError(f"Nothing written to {self._port_name}")
        actual = self._writes[index]
        if actual != expected:
            raise AssertionError(f"Expected {expected.hex(' ')}, wrote {actual.hex(' ')}")

    def assert_write_count(self, expected: int) -> None:
        """
        Check how many frames were written.

        Raises:
            AssertionError: If the count differs.
        """
        if len(self._writes) != expected:
            raise AssertionError(f"Expected {expected} write(s), got {len(self._writes)}")


class ScriptedMockTransport(MockTransport):
    """
    MockTransport that follows a script of request/reply steps.

    Each write is checked against the next step's request (None accepts
    any frame) and answered with that step's reply. Writes past the end
    of the script are recorded and left unanswered.

    Example:
        >>> stick = ScriptedMockTransport()
        >>> stick.expect(request=build_easy_check(), response=bytes.fromhex("aa044b000502"))
        >>> stick.expect(request=build_easy_info(1), response=b"")  # no answer
    """

    def __init__(self, port_name: str = "mock://scripted") -> None:
        super().__init__(port_name)
        self._steps: list[tuple[bytes | None, bytes]] = []
        self._position = 0

    @property
    def remaining_steps(self) -> int:
        return len(self._steps) - self._position

    def expect(self, response: bytes, request: bytes | None = None) -> None:
        """
        Append a step to the script.

        Args:
            response: Reply to deliver, b"" for none.
            request: Frame the write must match, None for any.
        """
        self._steps.append((request, response))

    async def write(self, data: bytes) -> None:
        """Record a frame, check it against the script and reply."""
        self._record(data)

        if self._position >= len(self._steps):
            return

        expected, reply = self._steps[self._position]
        if expected is not None and bytes(data) != expected:
            raise AssertionError(
                f"Step {self._position}: expected {expected.hex(' ')}, "
                f"wrote {bytes(data).hex(' ')}"
            )
        self._position += 1
        self._schedule(reply)

    def reset_script(self) -> None:
        """Replay the script from its first step."""
        self._position = 0

    def clear_script(self) -> None:
        """Drop every step."""
        self._steps.clear()
        self._position = 0
