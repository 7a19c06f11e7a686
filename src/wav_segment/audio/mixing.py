"""Sample-level fade and overlay arithmetic on raw PCM bytes."""

from __future__ import annotations

from enum import Enum

from wav_segment.audio.pcm import decode_samples, encode_samples


class FadeDirection(str, Enum):
    IN = "in"
    OUT = "out"


def linear_ramp(frame_count: int, direction: FadeDirection) -> list[float]:
    """Per-frame gains from 0.0 to 1.0 (fade-in) or 1.0 to 0.0 (fade-out)."""
    normalized = FadeDirection(direction)
    if frame_count <= 0:
        return []
    if frame_count == 1:
        positions = [1.0]
    else:
        last = frame_count - 1
        positions = [index / last for index in range(frame_count)]
    if normalized is FadeDirection.IN:
        return positions
    return [1.0 - position for position in positions]


def apply_fade(raw: bytes, channels: int, sample_width: int, direction: FadeDirection) -> bytes:
    samples = decode_samples(raw, sample_width)
    frame_count = len(samples) // channels
    gains = linear_ramp(frame_count, direction)

    scaled: list[int] = []
    for frame_index, gain in enumerate(gains):
        start = frame_index * channels
        for value in samples[start : start + channels]:
            scaled.append(round(value * gain))

    tail = raw[len(scaled) * sample_width :]
    return encode_samples(scaled, sample_width) + tail


def mix_samples(first: bytes, second: bytes, sample_width: int) -> bytes:
    """Sum two equally sized sample buffers, saturating at the width's range."""
    left = decode_samples(first, sample_width)
    right = decode_samples(second, sample_width)
    if len(left) != len(right):
        raise ValueError("sample buffers must have the same length")
    return encode_samples([a + b for a, b in zip(left, right)], sample_width)
