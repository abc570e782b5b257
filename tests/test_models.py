"""Tests for data models."""

import pytest
from pydantic import ValidationError

from elerostick.models.records import ChannelStatus, StateSnapshot
from elerostick.protocol.constants import DeviceType


class TestChannelStatus:
    """Tests for ChannelStatus model."""

    def test_from_status_byte_drive(self):
        """Test decoding with the drive table."""
        status = ChannelStatus.from_status_byte(1, 0x01)
        assert status.channel == 1
        assert status.status_byte == 0x01
        assert status.semantic == "top_position"
        assert status.device_type == DeviceType.DRIVE
        assert status.is_known is True

    def test_from_status_byte_switch(self):
        """Test decoding with the switch table."""
        status = ChannelStatus.from_status_byte(4, 0x11, DeviceType.SWITCH)
        assert status.semantic == "on"

    def test_unknown_status_keeps_raw_byte(self):
        """Test unmapped bytes are kept alongside 'unknown'."""
        status = ChannelStatus.from_status_byte(2, 0x7E)
        assert status.semantic == "unknown"
        assert status.status_byte == 0x7E
        assert status.is_known is False

    @pytest.mark.parametrize("channel", [0, 16])
    def test_channel_range(self, channel):
        """Test channels outside 1..15 are rejected."""
        with pytest.raises(ValidationError):
            ChannelStatus.from_status_byte(channel, 0x01)

    def test_status_byte_range(self):
        """Test status bytes outside 0..255 are rejected."""
        with pytest.raises(ValidationError):
            ChannelStatus.from_status_byte(1, 256)

    def test_frozen(self):
        """Test the model is immutable."""
        status = ChannelStatus.from_status_byte(1, 0x01)
        with pytest.raises(ValidationError):
            status.status_byte = 0x02

    def test_str(self):
        """Test string representation."""
        status = ChannelStatus.from_status_byte(3, 0x02)
        assert str(status) == "channel 3: bottom_position (0x02)"

    def test_equality(self):
        """Test status equality."""
        assert ChannelStatus.from_status_byte(1, 0x01) == ChannelStatus.from_status_byte(1, 0x01)
        assert ChannelStatus.from_status_byte(1, 0x01) != ChannelStatus.from_status_byte(1, 0x02)


class TestStateSnapshot:
    """Tests for StateSnapshot model."""

    def test_empty(self):
        snapshot = StateSnapshot()
        assert snapshot.channels == []
        assert snapshot.status == {}

    def test_channels_sorted_unique(self):
        """Test channels are normalized to ascending unique values."""
        snapshot = StateSnapshot(channels=[3, 1, 3])
        assert snapshot.channels == [1, 3]

    def test_invalid_channel(self):
        with pytest.raises(ValidationError):
            StateSnapshot(channels=[0])

    def test_to_dict(self):
        """Test JSON-ready output."""
        snapshot = StateSnapshot(
            channels=[1, 3],
            status={1: ChannelStatus.from_status_byte(1, 0x01)},
        )
        assert snapshot.to_dict() == {
            "channels": [1, 3],
            "status": {"1": {"status_byte": 1, "semantic": "top_position"}},
        }
