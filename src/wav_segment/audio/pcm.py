"""Integer PCM sample packing for 8/16/32-bit little-endian data."""

from __future__ import annotations

import struct

SUPPORTED_SAMPLE_WIDTHS = (1, 2, 4)

_STRUCT_CODES = {1: "B", 2: "h", 4: "i"}
_UNSIGNED_BIAS = 128


def sample_range(sample_width: int) -> tuple[int, int]:
    """Signed (minimum, maximum) for a sample width, 8-bit included."""
    bits = sample_width * 8
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def clamp_sample(value: int, sample_width: int) -> int:
    minimum, maximum = sample_range(sample_width)
    if value > maximum:
        return maximum
    if value < minimum:
        return minimum
    return value


def decode_samples(raw: bytes, sample_width: int) -> list[int]:
    """Unpack whole samples as signed integers; trailing partial bytes are ignored."""
    code = _struct_code(sample_width)
    usable = len(raw) - (len(raw) % sample_width)
    values = list(struct.unpack(f"<{usable // sample_width}{code}", raw[:usable]))
    if sample_width == 1:
        return [value - _UNSIGNED_BIAS for value in values]
    return values


def encode_samples(values: list[int], sample_width: int) -> bytes:
    code = _struct_code(sample_width)
    clamped = [clamp_sample(value, sample_width) for value in values]
    if sample_width == 1:
        clamped = [value + _UNSIGNED_BIAS for value in clamped]
    return struct.pack(f"<{len(clamped)}{code}", *clamped)


def _struct_code(sample_width: int) -> str:
    code = _STRUCT_CODES.get(sample_width)
    if code is None:
        raise ValueError(f"unsupported sample width: {sample_width}")
    return code
