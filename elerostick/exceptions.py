"""
Exception hierarchy for elerostick.

All exceptions inherit from EleroStickError. The split mirrors where an error
is detected and who gets to see it:

1. Validation errors are raised before a request is queued and never reach
   the serial port
2. Protocol errors (framing, checksum) are recovered at the framing layer and
   only surface as diagnostics
3. Transport, timeout and lifecycle errors reject the request of the caller
   that issued it
"""

from __future__ import annotations


class EleroStickError(Exception):
    """
    Base exception for all elerostick errors.

    Allows callers to catch every library-specific error with a single
    except clause.
    """

    pass


class ValidationError(EleroStickError, ValueError):
    """
    Invalid request argument.

    Raised before a request is enqueued, so the transport is never touched.
    """

    pass


class InvalidChannelError(ValidationError):
    """Channel number outside the stick's 1-15 range."""

    def __init__(self, channel: object, message: str | None = None) -> None:
        self.channel = channel
        super().__init__(message or f"Channel must be an integer in 1..15, got {channel!r}")


class InvalidActionError(ValidationError):
    """Unknown easy_send action name or payload byte."""

    def __init__(self, action: object, message: str | None = None) -> None:
        self.action = action
        super().__init__(message or f"Unknown action: {action!r}")


class ProtocolError(EleroStickError):
    """
    Protocol-level error.

    Covers frames that cannot be interpreted: bad header, impossible length,
    unexpected command byte or truncated payload.
    """

    pass


class FrameError(ProtocolError):
    """Frame structure is invalid (header or length field)."""

    pass


class ChecksumError(ProtocolError):
    """
    Checksum validation failure.

    The stick re-sends status spontaneously, so corrupted frames are dropped
    rather than reported to a caller.
    """

    def __init__(
        self,
        message: str = "Checksum validation failed",
        *,
        expected: int | None = None,
        received: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.received is not None:
            return f"{base} (expected 0x{self.expected:02X}, got 0x{self.received:02X})"
        return base


class TransportError(EleroStickError):
    """
    Transport-level error.

    Raised when the serial port cannot be opened, written or closed.
    """

    pass


class TransportWriteError(TransportError):
    """Writing a request frame to the stick failed."""

    pass


class TimeoutError(EleroStickError):  # noqa: A001 - intentionally shadows builtin
    """
    No matching response arrived within the response timeout.

    The request is rejected and the queue moves on after the
    inter-command delay.
    """

    def __init__(
        self,
        message: str = "Response timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class LifecycleError(EleroStickError):
    """Operation not allowed in the dispatcher's current lifecycle state."""

    pass


class DispatcherStoppedError(LifecycleError):
    """The dispatcher was stopped; outstanding and new requests are rejected."""

    def __init__(self, message: str = "Dispatcher stopped") -> None:
        super().__init__(message)
