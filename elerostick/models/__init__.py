"""
Data models for stick state.

Pydantic models shared by the status store and its listeners:

- ChannelStatus: last reported status of one channel
- StateSnapshot: learned channels plus their last status
"""

from elerostick.models.records import Channel, ChannelStatus, StateSnapshot

__all__ = [
    "Channel",
    "ChannelStatus",
    "StateSnapshot",
]
