"""
Pydantic models for channel state.

Design principles:
- All models are frozen (immutable)
- Channel numbers are validated against the stick's 1-15 range
- The raw status byte is always kept next to its decoded semantic, since
  the status tables are reverse-engineered and incomplete
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from elerostick.protocol.constants import DeviceType, ProtocolConstants
from elerostick.protocol.status import decode_status

Channel = Annotated[
    int,
    Field(ge=ProtocolConstants.MIN_CHANNEL, le=ProtocolConstants.MAX_CHANNEL),
]
"""Channel number 1-15."""


class ChannelStatus(BaseModel):
    """
    Last reported status of one channel.

    Example:
        >>> status = ChannelStatus.from_status_byte(1, 0x01)
        >>> status.semantic
        'top_position'
        >>> status.is_known
        True
    """

    model_config = ConfigDict(frozen=True)

    channel: Channel
    status_byte: int = Field(ge=0, le=255, description="Raw easy_ack status byte")
    semantic: str = Field(description="Decoded status name, 'unknown' if unmapped")
    device_type: DeviceType = DeviceType.DRIVE

    @property
    def is_known(self) -> bool:
        """Check whether the status byte was found in the status table."""
        return self.semantic != "unknown"

    @classmethod
    def from_status_byte(
        cls,
        channel: int,
        status_byte: int,
        device_type: DeviceType = DeviceType.DRIVE,
    ) -> ChannelStatus:
        """
        Build a status by decoding the raw byte with the device's table.

        Raises:
            ValueError: If channel or status byte is out of range.
        """
        return cls(
            channel=channel,
            status_byte=status_byte,
            semantic=decode_status(status_byte, device_type).value,
            device_type=device_type,
        )

    def __str__(self) -> str:
        return f"channel {self.channel}: {self.semantic} (0x{self.status_byte:02X})"


class StateSnapshot(BaseModel):
    """
    Learned channels plus the last known status of each of them.

    This is what a newly connected listener receives before incremental
    status updates.
    """

    model_config = ConfigDict(frozen=True)

    channels: list[Channel] = Field(default_factory=list)
    status: dict[int, ChannelStatus] = Field(default_factory=dict)

    @field_validator("channels")
    @classmethod
    def validate_sorted(cls, v: list[int]) -> list[int]:
        """Keep channels unique and ascending."""
        return sorted(set(v))

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form: status keyed by channel, without device type."""
        return {
            "channels": list(self.channels),
            "status": {
                str(channel): {"status_byte": s.status_byte, "semantic": s.semantic}
                for channel, s in self.status.items()
            },
        }
