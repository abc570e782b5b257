"""
Command dispatcher for the Elero Transmitter Stick.

The stick has a single half-duplex radio channel and cannot tell
overlapping requests apart, so every request goes through one FIFO queue
with at most one request in flight:

    QUEUED -> IN_FLIGHT -> RESOLVED | TIMED_OUT | FAILED

A worker task transmits the head of the queue and waits for the matching
response (easy_confirm for easy_check, easy_ack for easy_info/easy_send)
or for the response timeout. After every outcome it pauses for the
inter-command delay before the next request goes out.

Inbound bytes arrive independently through the transport's data callback.
Every decoded response updates the status store; only a response of the
kind the in-flight request expects settles that request. Everything else
is an unsolicited status push.

Example:
    >>> from elerostick import CommandDispatcher
    >>> from elerostick.transport import AsyncSerialTransport
    >>>
    >>> async def main():
    ...     transport = AsyncSerialTransport("/dev/ttyUSB0")
    ...     async with CommandDispatcher(transport) as dispatcher:
    ...         channels = await dispatcher.check_learned_channels()
    ...         await dispatcher.send_command(channels[0], "top")
    ...         print(dispatcher.store.get_channel_status(channels[0]))
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from elerostick.config import DispatcherConfig
from elerostick.exceptions import (
    DispatcherStoppedError,
    TimeoutError,
    TransportWriteError,
    ValidationError,
)
from elerostick.protocol.channels import validate_channel
from elerostick.protocol.constants import Action, ResponseCode
from elerostick.protocol.frame_reader import FrameBuffer
from elerostick.protocol.messages import (
    ConfirmResponse,
    Response,
    build_easy_check,
    build_easy_info,
    build_easy_send,
    decode_response,
)
from elerostick.state import StatusStore

if TYPE_CHECKING:
    from elerostick.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)


class DispatcherState(Enum):
    """Dispatcher lifecycle states."""

    IDLE = auto()
    """Created; requests may be queued but nothing is transmitted yet."""

    RUNNING = auto()
    """Attached to the transport and transmitting queued requests."""

    STOPPED = auto()
    """Stopped; every request is rejected until start() is called again."""


class RequestKind(Enum):
    """The three host requests and the response each one waits for."""

    CHECK = "easy_check"
    INFO = "easy_info"
    SEND = "easy_send"

    @property
    def expected_response(self) -> ResponseCode:
        if self is RequestKind.CHECK:
            return ResponseCode.EASY_CONFIRM
        return ResponseCode.EASY_ACK


class RequestState(Enum):
    """Lifecycle of a single request."""

    QUEUED = auto()
    IN_FLIGHT = auto()
    RESOLVED = auto()
    TIMED_OUT = auto()
    FAILED = auto()


@dataclass(eq=False)
class PendingRequest:
    """
    A request owned by the dispatcher until it settles.

    Attributes:
        kind: Which easy-protocol request this is.
        future: Settled with the result or the error for the caller.
        channel: Target channel (INFO and SEND only).
        action: Action to transmit (SEND only).
        state: Current lifecycle state.
    """

    kind: RequestKind
    future: asyncio.Future[Any]
    channel: int | None = None
    action: Action | None = None
    state: RequestState = RequestState.QUEUED

    def build_frame(self) -> bytes:
        """Encode this request as a wire frame."""
        if self.kind is RequestKind.CHECK:
            return build_easy_check()
        if self.kind is RequestKind.INFO:
            return build_easy_info(self.channel)
        return build_easy_send(self.channel, self.action)

    def matches(self, response: Response) -> bool:
        """Check whether a response is of the kind this request waits for."""
        return response.code == self.kind.expected_response

    def __repr__(self) -> str:
        if self.kind is RequestKind.CHECK:
            return "easy_check()"
        if self.kind is RequestKind.INFO:
            return f"easy_info(channel={self.channel})"
        return f"easy_send(channel={self.channel}, action={self.action.name})"


class CommandDispatcher:
    """
    Serializes requests to the stick and correlates its responses.

    Guarantees:
    - at most one request is in flight, always the head of the queue
    - requests settle in the order they were made
    - every request settles exactly once: resolved, timed out or failed
    - nothing is retried; retry policy belongs to the caller

    Attributes:
        state: Current lifecycle state.
        store: Status store receiving every decoded response.
        transport: The underlying transport.

    Example:
        >>> dispatcher = CommandDispatcher(transport, DispatcherConfig(command_delay=0.2))
        >>> dispatcher.start()
        >>> await dispatcher.request_status(3)
        >>> dispatcher.store.get_channel_status(3).semantic
        'bottom_position'
        >>> await dispatcher.stop()
    """

    def __init__(
        self,
        transport: AbstractTransport,
        config: DispatcherConfig | None = None,
        store: StatusStore | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            transport: Transport connected to the stick.
            config: Timing configuration (default: 5 s timeout, 0.5 s delay).
            store: Status store to update (default: a new StatusStore).
        """
        config = config or DispatcherConfig()
        self._transport = transport
        self._response_timeout = config.response_timeout
        self._command_delay = config.command_delay
        self._store = store if store is not None else StatusStore()
        self._state = DispatcherState.IDLE
        self._queue: deque[PendingRequest] = deque()
        self._buffer = FrameBuffer()
        self._in_flight: PendingRequest | None = None
        self._answered: asyncio.Future[RequestState] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._wakeup = asyncio.Event()
        self._worker: asyncio.Task[None] | None = None

    @property
    def state(self) -> DispatcherState:
        """Get the current lifecycle state."""
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == DispatcherState.RUNNING

    @property
    def store(self) -> StatusStore:
        """Get the status store updated by inbound responses."""
        return self._store

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def pending_count(self) -> int:
        """Number of requests not yet settled, in-flight one included."""
        return len(self._queue)

    @property
    def in_flight(self) -> PendingRequest | None:
        """The request currently awaiting its response, if any."""
        return self._in_flight

    @property
    def response_timeout(self) -> float:
        return self._response_timeout

    @property
    def command_delay(self) -> float:
        """Seconds paused after each settled request."""
        return self._command_delay

    @command_delay.setter
    def command_delay(self, seconds: float) -> None:
        if seconds < 0:
            raise ValidationError(f"Command delay must be >= 0, got {seconds}")
        self._command_delay = seconds

    def start(self) -> None:
        """
        Attach to the transport and begin transmitting queued requests.

        Must be called from a running event loop. Calling start() on a
        running dispatcher does nothing; after stop() it begins a fresh
        session with an empty queue.
        """
        if self._state == DispatcherState.RUNNING:
            return

        self._transport.on_data(self._on_data)
        self._state = DispatcherState.RUNNING
        self._worker = asyncio.create_task(self._run())
        if self._queue:
            self._wakeup.set()
        logger.info("Dispatcher started on %s", self._transport.port_name)

    async def stop(self) -> None:
        """
        Detach from the transport and reject everything outstanding.

        Cancels the worker and any running response timer, rejects every
        queued and in-flight request with DispatcherStoppedError, and
        clears the queue and the read buffer. Requests made afterwards
        are rejected immediately.
        """
        previous = self._state
        self._state = DispatcherState.STOPPED
        self._transport.remove_data_listener(self._on_data)
        self._cancel_timer()

        rejected = 0
        while self._queue:
            request = self._queue.popleft()
            request.state = RequestState.FAILED
            if not request.future.done():
                request.future.set_exception(DispatcherStoppedError())
                rejected += 1

        self._in_flight = None
        if self._answered is not None and not self._answered.done():
            self._answered.cancel()
        self._answered = None
        self._buffer.clear()
        self._wakeup.clear()

        if previous != DispatcherState.STOPPED:
            logger.info("Dispatcher stopped, %d pending request(s) rejected", rejected)

        worker = self._worker
        self._worker = None
        if worker is not None and not worker.done():
            worker.cancel()
            # wait() leaves a cancellation of stop() itself to propagate
            await asyncio.wait({worker})
        if worker is not None and not worker.cancelled() and worker.exception() is not None:
            logger.error("Dispatcher worker failed", exc_info=worker.exception())

    async def check_learned_channels(self) -> list[int]:
        """
        Send easy_check and return the learned channels.

        The learned-channel set in the status store is updated as well.

        Returns:
            Learned channel numbers, ascending.

        Raises:
            TimeoutError: If the stick does not answer in time.
            TransportWriteError: If the request could not be written.
            DispatcherStoppedError: If the dispatcher is or gets stopped.
        """
        return await self._enqueue(RequestKind.CHECK)

    async def request_status(self, channel: int) -> None:
        """
        Send easy_info for one channel.

        The reported status is delivered through the status store.

        Raises:
            InvalidChannelError: If channel is outside 1..15.
            TimeoutError: If the stick does not answer in time.
            TransportWriteError: If the request could not be written.
            DispatcherStoppedError: If the dispatcher is or gets stopped.
        """
        channel = validate_channel(channel)
        await self._enqueue(RequestKind.INFO, channel=channel)

    async def send_command(self, channel: int, action: Action | int | str) -> None:
        """
        Send easy_send with an action to one channel.

        The acknowledged status is delivered through the status store.

        Args:
            channel: Target channel 1..15.
            action: Action member, payload byte or name ("top", "stop", ...).

        Raises:
            InvalidChannelError: If channel is outside 1..15.
            InvalidActionError: If action is unknown.
            TimeoutError: If the stick does not answer in time.
            TransportWriteError: If the request could not be written.
            DispatcherStoppedError: If the dispatcher is or gets stopped.
        """
        channel = validate_channel(channel)
        action = Action.parse(action)
        await self._enqueue(RequestKind.SEND, channel=channel, action=action)

    def _enqueue(
        self,
        kind: RequestKind,
        channel: int | None = None,
        action: Action | None = None,
    ) -> asyncio.Future[Any]:
        """Queue a validated request and return the future it settles."""
        if self._state == DispatcherState.STOPPED:
            raise DispatcherStoppedError()

        future = asyncio.get_running_loop().create_future()
        request = PendingRequest(kind=kind, future=future, channel=channel, action=action)
        self._queue.append(request)
        self._wakeup.set()
        logger.debug("Queued %r (%d pending)", request, len(self._queue))
        return future

    async def _run(self) -> None:
        """Worker: transmit queue heads one at a time, pacing the stick."""
        while self._state is DispatcherState.RUNNING:
            if not self._queue:
                self._wakeup.clear()
                await self._wakeup.wait()
                continue

            request = self._queue[0]
            if request.future.done():
                # Caller gave up before transmission
                self._queue.popleft()
                logger.debug("Skipping abandoned %r", request)
                continue

            await self._dispatch(request)
            await asyncio.sleep(self._command_delay)

    async def _dispatch(self, request: PendingRequest) -> None:
        """Transmit one request and wait for its response or the timeout."""
        frame = request.build_frame()
        loop = asyncio.get_running_loop()

        answered: asyncio.Future[RequestState] = loop.create_future()
        self._answered = answered
        self._in_flight = request
        request.state = RequestState.IN_FLIGHT

        try:
            await self._transport.write(frame)
        except Exception as e:
            logger.warning("Write of %r failed: %s", request, e)
            error = TransportWriteError(f"Failed to write {request!r}: {e}")
            error.__cause__ = e
            self._settle(request, RequestState.FAILED, error=error)
            return

        logger.debug("Sent %r: %s", request, frame.hex(" "))

        # The response may already have arrived while the write drained
        if answered.done():
            return

        self._timer = loop.call_later(self._response_timeout, self._expire, request)
        try:
            await answered
        finally:
            self._cancel_timer()

    def _expire(self, request: PendingRequest) -> None:
        """Timer callback: reject the in-flight request with a timeout."""
        self._timer = None
        if self._in_flight is not request:
            return
        logger.warning("No response to %r within %.1fs", request, self._response_timeout)
        self._settle(
            request,
            RequestState.TIMED_OUT,
            error=TimeoutError(
                f"No response to {request.kind.value}",
                timeout_seconds=self._response_timeout,
            ),
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _settle(
        self,
        request: PendingRequest,
        state: RequestState,
        result: Any = None,
        error: Exception | None = None,
    ) -> None:
        """Remove a request from the queue and settle its future once."""
        if self._queue and self._queue[0] is request:
            self._queue.popleft()
        if self._in_flight is request:
            self._in_flight = None
            if self._answered is not None and not self._answered.done():
                self._answered.set_result(state)
        request.state = state

        if request.future.done():
            return
        if error is not None:
            request.future.set_exception(error)
        else:
            request.future.set_result(result)

    def _on_data(self, data: bytes) -> None:
        """Transport callback: reassemble frames and handle each response."""
        for frame in self._buffer.feed(data):
            response = decode_response(frame)
            if response is not None:
                self._handle_response(response)

    def _handle_response(self, response: Response) -> None:
        """Update the store, then settle the in-flight request if it matches."""
        if isinstance(response, ConfirmResponse):
            self._store.set_learned_channels(response.channels)
            result: Any = list(response.channels)
        else:
            if response.has_channel:
                self._store.set_channel_status(response.channel, response.status_byte)
            else:
                logger.debug("easy_ack without a single channel: 0x%02X", response.status_byte)
            result = None

        request = self._in_flight
        if request is None or not request.matches(response):
            logger.debug("Unsolicited %r", response)
            return

        logger.debug("%r answered by %r", request, response)
        self._settle(request, RequestState.RESOLVED, result=result)

    async def __aenter__(self) -> CommandDispatcher:
        """Async context manager entry - open the transport and start."""
        if not self._transport.is_open:
            await self._transport.open()
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - stop and close the transport."""
        try:
            await self.stop()
        finally:
            if self._transport.is_open:
                await self._transport.close()

    def __repr__(self) -> str:
        return (
            f"CommandDispatcher(state={self._state.name}, "
            f"port={self._transport.port_name}, pending={len(self._queue)})"
        )
