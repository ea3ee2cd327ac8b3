"""
Tests for 10-bit waveform sample unpacking and spike normalization.
"""

import pytest

from dinamap.analysis.waveform_unpacker import (
    WaveformUnpacker,
    normalize_spikes,
    unpack_samples,
)
from dinamap.parsers.field_decoder import FieldDecoder
from tests.helpers.synthetic_blocks import make_record, pack_samples

pytestmark = pytest.mark.business_logic


class TestUnpackSamples:
    def test_all_zero_bytes(self):
        assert unpack_samples([0x00] * 5) == [0, 0, 0, 0]

    def test_all_ones_bytes(self):
        assert unpack_samples([0xFF] * 5) == [1023, 1023, 1023, 1023]

    def test_bit_boundaries(self):
        # s0 = 0b1000000001, remaining samples zero
        assert unpack_samples([0x80, 0x40, 0x00, 0x00, 0x00]) == [513, 0, 0, 0]
        # only the last byte set lands in s3
        assert unpack_samples([0x00, 0x00, 0x00, 0x00, 0x7F]) == [0, 0, 0, 0x7F]
        # low 2 bits of b3 are the top of s3
        assert unpack_samples([0x00, 0x00, 0x00, 0x03, 0x00]) == [0, 0, 0, 0x300]

    def test_known_samples(self):
        samples = [1, 512, 1000, 300]
        assert unpack_samples(pack_samples(samples)) == samples

    def test_signed_bytes_masked(self):
        # -1 as a signed byte is 0xFF
        assert unpack_samples([-1, -1, -1, -1, -1]) == [1023] * 4
        assert unpack_samples([-128, 0, 0, 0, 0]) == [512, 0, 0, 0]

    @pytest.mark.parametrize("count", [0, 4, 6])
    def test_wrong_byte_count(self, count):
        with pytest.raises(ValueError):
            unpack_samples([0] * count)


class TestNormalizeSpikes:
    def test_halves_values_above_threshold(self):
        assert normalize_spikes([1023, 1023, 1023, 1023]) == [511, 511, 511, 511]

    def test_threshold_is_exclusive(self):
        assert normalize_spikes([1000, 1001, 999, 0]) == [1000, 500, 999, 0]

    def test_custom_threshold(self):
        assert normalize_spikes([600, 400], threshold=500) == [300, 400]


class TestWaveformUnpacker:
    def test_uses_channel_two_by_default(self):
        block = FieldDecoder().decode(
            make_record(channel1=[0xFF] * 5, channel2=pack_samples([10, 20, 30, 40]))
        )

        assert WaveformUnpacker().unpack(block) == [10, 20, 30, 40]

    def test_channel_one(self):
        block = FieldDecoder().decode(
            make_record(channel1=pack_samples([4, 3, 2, 1]), channel2=[0xFF] * 5)
        )

        assert WaveformUnpacker(channel=1).unpack(block) == [4, 3, 2, 1]

    def test_applies_spike_normalization(self):
        block = FieldDecoder().decode(make_record(channel2=[0xFF] * 5))

        assert WaveformUnpacker().unpack(block) == [511, 511, 511, 511]

    def test_invalid_channel(self):
        block = FieldDecoder().decode(make_record())

        with pytest.raises(ValueError):
            WaveformUnpacker(channel=3).unpack(block)
