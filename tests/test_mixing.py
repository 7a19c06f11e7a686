import struct

import pytest

from wav_segment.audio import append, fade, overlay
from wav_segment.audio.errors import (
    CrossfadeExceedsAppended,
    CrossfadeExceedsSource,
    IncompatibleFormat,
    SegmentLengthMismatch,
    SegmentOperationError,
)
from wav_segment.audio.mixing import FadeDirection, linear_ramp
from wav_segment.audio.segment import AudioSegment


def _constant(value: int, frame_count: int, frame_rate: int = 8000, channels: int = 1) -> AudioSegment:
    samples = struct.pack(f"<{frame_count * channels}h", *([value] * frame_count * channels))
    return AudioSegment(samples=samples, channels=channels, frame_rate=frame_rate, sample_width=2)


def _values(segment: AudioSegment) -> list[int]:
    return list(struct.unpack(f"<{len(segment.samples) // 2}h", segment.samples))


def test_linear_ramp_shapes() -> None:
    assert linear_ramp(5, FadeDirection.IN) == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert linear_ramp(5, FadeDirection.OUT) == [1.0, 0.75, 0.5, 0.25, 0.0]
    assert linear_ramp(1, "in") == [1.0]
    assert linear_ramp(1, "out") == [0.0]
    assert linear_ramp(0, FadeDirection.IN) == []


def test_fade_in_scales_mono_samples() -> None:
    faded = _constant(1000, 5).fade(FadeDirection.IN)

    assert _values(faded) == [0, 250, 500, 750, 1000]
    assert faded.frame_count() == 5


def test_fade_out_applies_one_gain_per_frame() -> None:
    segment = AudioSegment(
        samples=struct.pack("<6h", 1000, -1000, 1000, -1000, 1000, -1000),
        channels=2,
        frame_rate=8000,
        sample_width=2,
    )

    assert _values(segment.fade("out")) == [1000, -1000, 500, -500, 0, 0]


def test_fade_handles_unsigned_8_bit_samples() -> None:
    segment = AudioSegment(samples=bytes([255, 255, 255]), channels=1, frame_rate=8000, sample_width=1)

    assert segment.fade(FadeDirection.IN).samples == bytes([128, 192, 255])


def test_overlay_saturates_16_bit() -> None:
    loud = AudioSegment(samples=struct.pack("<2h", 30000, -30000), channels=1, frame_rate=8000, sample_width=2)

    assert _values(loud.overlay(loud)) == [32767, -32768]


def test_overlay_saturates_8_bit_and_32_bit() -> None:
    eight = AudioSegment(samples=bytes([200, 20]), channels=1, frame_rate=8000, sample_width=1)
    assert eight.overlay(eight).samples == bytes([255, 0])

    big = AudioSegment(samples=struct.pack("<i", 2_000_000_000), channels=1, frame_rate=8000, sample_width=4)
    assert struct.unpack("<i", big.overlay(big).samples) == (2_147_483_647,)


def test_overlay_sums_samples() -> None:
    mixed = overlay(_constant(100, 4), _constant(-30, 4))
    assert _values(mixed) == [70, 70, 70, 70]


def test_overlay_rejects_length_mismatch() -> None:
    with pytest.raises(SegmentLengthMismatch):
        _constant(1, 10).overlay(_constant(1, 11))


def test_overlay_rejects_incompatible_formats() -> None:
    with pytest.raises(IncompatibleFormat):
        _constant(1, 10).overlay(_constant(1, 10, frame_rate=16000))
    with pytest.raises(IncompatibleFormat):
        _constant(1, 10).overlay(_constant(1, 5, channels=2))


def test_append_without_crossfade_concatenates_bytes() -> None:
    first = _constant(1000, 8000)
    second = _constant(2000, 4000)

    combined = first.append(second)
    assert combined.samples == first.samples + second.samples
    assert combined.duration_ms() == first.duration_ms() + second.duration_ms() == 1500
    assert first + second == combined
    assert append(first, second, 0) == combined


def test_append_with_crossfade_mixes_overlap() -> None:
    first = _constant(1000, 8000)
    second = _constant(2000, 4000)

    combined = first.append(second, crossfade_ms=100)
    values = _values(combined)

    assert combined.duration_ms() == 1000 + 500 - 100
    assert combined.frame_count() == 8000 + 4000 - 800
    assert combined.samples[: 7200 * 2] == first.samples[: 7200 * 2]
    assert combined.samples[8000 * 2 :] == second.samples[800 * 2 :]

    overlap = values[7200:8000]
    assert overlap[0] == 1000
    assert overlap[-1] == 2000
    assert overlap == sorted(overlap)
    expected_mid = round(1000 * (1 - 400 / 799)) + round(2000 * 400 / 799)
    assert overlap[400] == expected_mid


def test_crossfade_matches_fade_and_overlay_of_edges() -> None:
    first = _constant(5000, 800)
    second = _constant(-5000, 800)

    combined = first.append(second, crossfade_ms=50)
    expected_mix = first.slice(-50, 100).fade("out").overlay(second.slice(0, 50).fade("in"))

    assert combined.samples == first.slice(0, 50).samples + expected_mix.samples + second.slice(50, 100).samples


def test_crossfade_over_entire_source() -> None:
    first = _constant(1000, 800)
    second = _constant(2000, 4000)

    combined = first.append(second, crossfade_ms=100)
    assert combined.duration_ms() == 500


def test_crossfade_at_fractional_frames_per_ms() -> None:
    first = _constant(1000, 44100, frame_rate=44100)
    second = _constant(2000, 22050, frame_rate=44100)

    combined = first.append(second, crossfade_ms=33)
    assert combined.frame_count() == 44100 + 22050 - round(33 * 44.1)
    assert combined.duration_ms() == 1000 + 500 - 33


def test_crossfade_longer_than_source() -> None:
    with pytest.raises(CrossfadeExceedsSource) as excinfo:
        _constant(1, 800).append(_constant(1, 8000), crossfade_ms=101)
    assert "101ms > 100ms" in str(excinfo.value)


def test_crossfade_longer_than_appended() -> None:
    with pytest.raises(CrossfadeExceedsAppended):
        _constant(1, 8000).append(_constant(1, 4000), crossfade_ms=600)


def test_crossfade_longer_than_both_reports_source() -> None:
    with pytest.raises(CrossfadeExceedsSource):
        _constant(1, 800).append(_constant(1, 400), crossfade_ms=200)


def test_append_rejects_incompatible_formats() -> None:
    with pytest.raises(IncompatibleFormat):
        _constant(1, 800).append(_constant(1, 800, frame_rate=16000))


def test_append_rejects_negative_crossfade() -> None:
    with pytest.raises(SegmentOperationError):
        _constant(1, 800).append(_constant(1, 800), crossfade_ms=-10)


def test_module_level_fade() -> None:
    assert _values(fade(_constant(1000, 3), FadeDirection.OUT)) == [1000, 500, 0]


@pytest.mark.parametrize("crossfade_ms", [float("nan"), float("inf")])
def test_append_rejects_non_finite_crossfade(crossfade_ms: float) -> None:
    with pytest.raises(SegmentOperationError):
        _constant(1, 800).append(_constant(1, 800), crossfade_ms=crossfade_ms)
