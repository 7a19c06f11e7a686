"""RIFF/WAVE container decoding into PCM descriptions, and PCM encoding back."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from wav_segment.audio.chunks import (
    CHUNK_HEADER_SIZE,
    DATA_TAG,
    FORMAT_TAG,
    RIFF_HEADER_SIZE,
    ChunkDescriptor,
    scan_chunks,
)
from wav_segment.audio.errors import (
    InvalidContainerHeader,
    InvalidFormatChunk,
    MissingDataChunk,
    MissingFormatChunk,
    TruncatedDataChunk,
    TruncatedFormatChunk,
    UnsupportedBitDepth,
    UnsupportedFormatCode,
)

logger = logging.getLogger(__name__)

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_EXTENSIBLE = 0xFFFE
SUPPORTED_FORMAT_CODES = frozenset({WAVE_FORMAT_PCM, WAVE_FORMAT_EXTENSIBLE})

_FORMAT_BODY_SIZE = 16


@dataclass(frozen=True, slots=True)
class DecodedFormat:
    format_code: int
    channel_count: int
    sample_rate: int
    bits_per_sample: int
    sample_bytes: bytes

    @property
    def sample_width(self) -> int:
        return self.bits_per_sample // 8


def decode_wav(buffer: bytes) -> DecodedFormat:
    """Validate a full RIFF/WAVE buffer and extract its PCM description.

    The ``fmt `` chunk is the first one scanned with that tag; the ``data``
    chunk must be the last scanned descriptor. No partial result is returned:
    every validation failure raises a ``WavDecodeError`` subclass.
    """
    if len(buffer) < RIFF_HEADER_SIZE or buffer[0:4] != b"RIFF" or buffer[8:12] != b"WAVE":
        raise InvalidContainerHeader("buffer does not start with a RIFF/WAVE header")

    chunks = scan_chunks(buffer)
    logger.debug("scanned chunks: %s", [chunk.tag for chunk in chunks])

    format_chunk = _find_format_chunk(chunks)
    format_code, channel_count, sample_rate, bits_per_sample = _read_format_body(buffer, format_chunk)

    if format_code not in SUPPORTED_FORMAT_CODES:
        raise UnsupportedFormatCode(format_code)

    data_chunk = chunks[-1]
    if data_chunk.tag != DATA_TAG:
        raise MissingDataChunk("couldn't find data header in wav data")
    if data_chunk.body_end > len(buffer):
        raise TruncatedDataChunk(
            f"data chunk declares {data_chunk.declared_size} bytes but only "
            f"{max(len(buffer) - data_chunk.body_start, 0)} are present"
        )

    if bits_per_sample == 24:
        raise UnsupportedBitDepth(bits_per_sample)
    if channel_count == 0:
        raise InvalidFormatChunk("channel count must be at least 1")
    if sample_rate == 0:
        raise InvalidFormatChunk("sample rate must be positive")
    if bits_per_sample == 0 or bits_per_sample % 8:
        raise InvalidFormatChunk(f"bits per sample must be a multiple of 8, got {bits_per_sample}")

    decoded = DecodedFormat(
        format_code=format_code,
        channel_count=channel_count,
        sample_rate=sample_rate,
        bits_per_sample=bits_per_sample,
        sample_bytes=bytes(buffer[data_chunk.body_start : data_chunk.body_end]),
    )
    logger.debug(
        "decoded wav: format=0x%X channels=%d rate=%d bits=%d bytes=%d",
        format_code,
        channel_count,
        sample_rate,
        bits_per_sample,
        len(decoded.sample_bytes),
    )
    return decoded


def encode_wav(samples: bytes, channels: int, frame_rate: int, sample_width: int) -> bytes:
    """Serialize PCM bytes as a minimal RIFF/WAVE container (fmt + data)."""
    frame_width = channels * sample_width
    pad = b"\x00" if len(samples) % 2 else b""
    fmt_body = struct.pack(
        "<HHIIHH",
        WAVE_FORMAT_PCM,
        channels,
        frame_rate,
        frame_rate * frame_width,
        frame_width,
        sample_width * 8,
    )
    riff_size = 4 + (CHUNK_HEADER_SIZE + len(fmt_body)) + (CHUNK_HEADER_SIZE + len(samples) + len(pad))
    return b"".join(
        [
            struct.pack("<4sI4s", b"RIFF", riff_size, b"WAVE"),
            struct.pack("<4sI", FORMAT_TAG, len(fmt_body)),
            fmt_body,
            struct.pack("<4sI", DATA_TAG, len(samples)),
            samples,
            pad,
        ]
    )


def _find_format_chunk(chunks: list[ChunkDescriptor]) -> ChunkDescriptor:
    for chunk in chunks:
        if chunk.tag == FORMAT_TAG:
            if chunk.declared_size < _FORMAT_BODY_SIZE:
                raise TruncatedFormatChunk(
                    f"fmt chunk declares {chunk.declared_size} bytes, at least {_FORMAT_BODY_SIZE} are required"
                )
            return chunk
    raise MissingFormatChunk("couldn't find fmt header in wav data")


def _read_format_body(buffer: bytes, chunk: ChunkDescriptor) -> tuple[int, int, int, int]:
    start = chunk.body_start
    if start + _FORMAT_BODY_SIZE > len(buffer):
        raise TruncatedFormatChunk("fmt chunk body extends past the end of the buffer")
    format_code, channel_count, sample_rate = struct.unpack_from("<HHI", buffer, start)
    (bits_per_sample,) = struct.unpack_from("<H", buffer, start + 14)
    return format_code, channel_count, sample_rate, bits_per_sample
