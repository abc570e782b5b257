"""Tests for channel bitmap encoding."""

import pytest

from elerostick.exceptions import InvalidChannelError, ValidationError
from elerostick.protocol.channels import (
    bitmap_to_channels,
    bytes_to_channel,
    channel_to_bytes,
    channels_to_bitmap,
    validate_channel,
)


class TestChannelToBytes:
    """Tests for single-channel encoding."""

    @pytest.mark.parametrize(
        "channel,expected",
        [
            (1, (0x00, 0x01)),
            (3, (0x00, 0x04)),
            (8, (0x00, 0x80)),
            (9, (0x01, 0x00)),
            (15, (0x40, 0x00)),
        ],
    )
    def test_encoding(self, channel, expected):
        """Test low byte for 1-8 and high byte for 9-15."""
        assert channel_to_bytes(channel) == expected

    def test_all_channels_round_trip(self):
        """Test that every channel decodes back to itself."""
        for channel in range(1, 16):
            assert bytes_to_channel(*channel_to_bytes(channel)) == channel

    @pytest.mark.parametrize("channel", [0, 16, -1, 255])
    def test_out_of_range_raises(self, channel):
        """Test channels outside 1..15 are rejected."""
        with pytest.raises(InvalidChannelError) as exc_info:
            channel_to_bytes(channel)
        assert exc_info.value.channel == channel

    def test_invalid_channel_is_validation_error(self):
        """Test InvalidChannelError belongs to the validation family."""
        with pytest.raises(ValidationError):
            channel_to_bytes(0)
        with pytest.raises(ValueError):
            channel_to_bytes(0)

    @pytest.mark.parametrize("channel", [1.0, "1", None, True])
    def test_non_integer_raises(self, channel):
        """Test non-integer channels are rejected."""
        with pytest.raises(InvalidChannelError):
            validate_channel(channel)


class TestBytesToChannel:
    """Tests for single-channel decoding."""

    def test_no_bit_set(self):
        """Test empty bitmap gives 0."""
        assert bytes_to_channel(0x00, 0x00) == 0

    def test_multiple_bits_set(self):
        """Test several bits give 0."""
        assert bytes_to_channel(0x00, 0x05) == 0
        assert bytes_to_channel(0x01, 0x01) == 0

    def test_bit_15_ignored(self):
        """Test bit 15 carries no channel."""
        assert bytes_to_channel(0x80, 0x00) == 0
        assert bytes_to_channel(0x80, 0x01) == 1


class TestBitmapToChannels:
    """Tests for multi-channel decoding."""

    def test_channels_one_and_three(self):
        """Test the easy_confirm example bitmap."""
        assert bitmap_to_channels(0x00, 0x05) == [1, 3]

    def test_empty(self):
        """Test empty bitmap gives no channels."""
        assert bitmap_to_channels(0x00, 0x00) == []

    def test_all_channels(self):
        """Test a full bitmap gives 1..15 ascending, bit 15 ignored."""
        assert bitmap_to_channels(0xFF, 0xFF) == list(range(1, 16))

    def test_spans_both_bytes(self):
        """Test channels from both bytes come out ascending."""
        assert bitmap_to_channels(0x41, 0x80) == [8, 9, 15]

    def test_channels_to_bitmap_inverse(self):
        """Test encoding a channel set reverses decoding."""
        assert channels_to_bitmap([9, 1, 3]) == (0x01, 0x05)
        assert bitmap_to_channels(*channels_to_bitmap([2, 15])) == [2, 15]

    def test_channels_to_bitmap_rejects_invalid(self):
        """Test an invalid channel in the set is rejected."""
        with pytest.raises(InvalidChannelError):
            channels_to_bitmap([1, 16])
