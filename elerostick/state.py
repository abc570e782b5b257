"""
In-memory channel state with change notification.

The dispatcher pushes every decoded easy_confirm and easy_ack into a
StatusStore. Listeners (a WebSocket broadcaster, a UI, a logger) subscribe
to be told about each status update. The dispatcher never reads the store
back for its own decisions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from elerostick.models.records import ChannelStatus, StateSnapshot
from elerostick.protocol.channels import validate_channel
from elerostick.protocol.constants import DeviceType

logger = logging.getLogger(__name__)

StatusCallback = Callable[[int, ChannelStatus], None]
"""Subscriber signature: (channel, status)."""


class StatusStore:
    """
    Learned-channel set and last status per channel.

    Status bytes are decoded with the drive table unless the channel has
    been registered as a switch with set_device_type().

    Example:
        >>> store = StatusStore()
        >>> unsubscribe = store.subscribe(lambda ch, st: print(ch, st.semantic))
        >>> status = store.set_channel_status(1, 0x01)
        1 top_position
        >>> unsubscribe()
    """

    def __init__(self) -> None:
        self._learned: list[int] = []
        self._status: dict[int, ChannelStatus] = {}
        self._device_types: dict[int, DeviceType] = {}
        self._subscribers: list[StatusCallback] = []

    @property
    def learned_channels(self) -> list[int]:
        """Get a copy of the learned channels, ascending."""
        return list(self._learned)

    def set_learned_channels(self, channels: Iterable[int]) -> None:
        """Replace the learned-channel set."""
        self._learned = sorted({validate_channel(c) for c in channels})
        logger.debug("Learned channels: %s", self._learned)

    def is_learned(self, channel: int) -> bool:
        return channel in self._learned

    def set_device_type(self, channel: int, device_type: DeviceType) -> None:
        """Choose which status table decodes this channel's status bytes."""
        self._device_types[validate_channel(channel)] = DeviceType(device_type)

    def device_type(self, channel: int) -> DeviceType:
        return self._device_types.get(channel, DeviceType.DRIVE)

    def set_channel_status(self, channel: int, status_byte: int) -> ChannelStatus:
        """
        Record a channel's status and notify subscribers.

        Args:
            channel: Channel 1-15.
            status_byte: Raw status byte from easy_ack.

        Returns:
            The stored ChannelStatus.
        """
        status = ChannelStatus.from_status_byte(
            channel,
            status_byte,
            self.device_type(channel),
        )
        self._status[channel] = status
        logger.debug("Status update: %s", status)

        for callback in list(self._subscribers):
            try:
                callback(channel, status)
            except Exception:
                logger.exception("Status subscriber %r failed", callback)

        return status

    def get_channel_status(self, channel: int) -> ChannelStatus | None:
        """Get the last known status of a channel, if any."""
        return self._status.get(channel)

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """
        Register a status listener.

        Returns:
            A function that removes the listener again.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def snapshot(self) -> StateSnapshot:
        """Learned channels plus the status of those that reported one."""
        return StateSnapshot(
            channels=self._learned,
            status={ch: self._status[ch] for ch in self._learned if ch in self._status},
        )

    def clear(self) -> None:
        """Forget learned channels and statuses; subscribers stay registered."""
        self._learned = []
        self._status.clear()
