"""Immutable PCM audio segment with millisecond slicing and crossfading."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction

from wav_segment.audio.errors import (
    CrossfadeExceedsAppended,
    CrossfadeExceedsSource,
    IncompatibleFormat,
    InvalidSegmentParameters,
    SegmentLengthMismatch,
    SegmentOperationError,
    SliceOutOfRange,
    UnsupportedBitDepth,
    UnsupportedOutputFormat,
)
from wav_segment.audio.mixing import FadeDirection, apply_fade, mix_samples
from wav_segment.audio.pcm import SUPPORTED_SAMPLE_WIDTHS
from wav_segment.audio.sources import (
    ByteSink,
    ByteSource,
    create_temp_path,
    read_source_bytes,
    write_sink_bytes,
)
from wav_segment.audio.wav_codec import DecodedFormat, decode_wav, encode_wav

SUPPORTED_FORMATS = frozenset({"wav"})


@dataclass(frozen=True, slots=True)
class AudioSegment:
    """PCM bytes plus the metadata needed to interpret them.

    Segments never change after construction. Every operation returns a new
    segment that owns its own ``bytes``; slices are copies, never views into
    the parent buffer.
    """

    samples: bytes = field(repr=False)
    channels: int
    frame_rate: int
    sample_width: int

    def __post_init__(self) -> None:
        if not isinstance(self.samples, bytes):
            object.__setattr__(self, "samples", bytes(self.samples))
        if self.sample_width not in SUPPORTED_SAMPLE_WIDTHS:
            raise UnsupportedBitDepth(self.sample_width * 8)
        if self.channels < 1:
            raise InvalidSegmentParameters("channel count must be at least 1")
        if self.frame_rate <= 0:
            raise InvalidSegmentParameters("frame rate must be positive")

    @classmethod
    def from_decoded(cls, decoded: DecodedFormat) -> AudioSegment:
        return cls(
            samples=decoded.sample_bytes,
            channels=decoded.channel_count,
            frame_rate=decoded.sample_rate,
            sample_width=decoded.sample_width,
        )

    @classmethod
    def from_wav_bytes(cls, data: bytes) -> AudioSegment:
        return cls.from_decoded(decode_wav(data))

    @classmethod
    def from_file(cls, source: ByteSource, format: str = "wav") -> AudioSegment:
        require_supported_format(format)
        return cls.from_wav_bytes(read_source_bytes(source))

    @classmethod
    def empty(cls, channels: int = 1, frame_rate: int = 44_100, sample_width: int = 2) -> AudioSegment:
        return cls(samples=b"", channels=channels, frame_rate=frame_rate, sample_width=sample_width)

    @property
    def frame_width(self) -> int:
        return self.channels * self.sample_width

    def frame_count(self) -> int:
        return len(self.samples) // self.frame_width

    def duration_ms(self) -> int:
        return round(Fraction(1000 * self.frame_count(), self.frame_rate))

    def frames_for_ms(self, ms: int | float) -> int:
        # The segment's own duration always maps to its last whole frame so
        # slice(0, duration_ms()) keeps every frame regardless of rounding.
        if ms == self.duration_ms():
            return self.frame_count()
        return _ms_to_frames(ms, self.frame_rate)

    def slice(self, start_ms: int | float = 0, end_ms: int | float | None = None) -> AudioSegment:
        """Copy the half-open range ``[start_ms, end_ms)``.

        Negative endpoints count back from ``duration_ms()``. Raises
        ``SliceOutOfRange`` when the resolved range falls outside the sample
        buffer or ends before it starts.
        """
        duration = self.duration_ms()
        if end_ms is None:
            end_ms = duration
        if not (math.isfinite(start_ms) and math.isfinite(end_ms)):
            raise SliceOutOfRange(f"slice endpoints must be finite, got [{start_ms}ms, {end_ms}ms)")
        if start_ms < 0:
            start_ms = duration + start_ms
        if end_ms < 0:
            end_ms = duration + end_ms

        start = self.frames_for_ms(start_ms) * self.frame_width
        end = self.frames_for_ms(end_ms) * self.frame_width
        if start < 0 or end > len(self.samples) or start > end:
            raise SliceOutOfRange(
                f"slice [{start_ms}ms, {end_ms}ms) resolves to bytes [{start}, {end}) "
                f"outside [0, {len(self.samples)}]"
            )
        return self._spawn(self.samples[start:end])

    def fade(self, direction: FadeDirection | str) -> AudioSegment:
        return self._spawn(apply_fade(self.samples, self.channels, self.sample_width, FadeDirection(direction)))

    def overlay(self, other: AudioSegment) -> AudioSegment:
        self._require_compatible(other)
        if self.frame_count() != other.frame_count():
            raise SegmentLengthMismatch(
                f"cannot overlay {other.frame_count()} frames onto {self.frame_count()} frames"
            )
        whole = self.frame_count() * self.frame_width
        return self._spawn(mix_samples(self.samples[:whole], other.samples[:whole], self.sample_width))

    def append(self, other: AudioSegment, crossfade_ms: int | float = 0) -> AudioSegment:
        self._require_compatible(other)
        if not math.isfinite(crossfade_ms):
            raise SegmentOperationError(f"crossfade must be finite ({crossfade_ms}ms)")
        if crossfade_ms < 0:
            raise SegmentOperationError(f"crossfade must not be negative ({crossfade_ms}ms)")
        if crossfade_ms == 0:
            return self._spawn(self.samples + other.samples)

        if crossfade_ms > self.duration_ms():
            raise CrossfadeExceedsSource(
                f"Crossfade is longer than the original AudioSegment "
                f"({crossfade_ms}ms > {self.duration_ms()}ms)"
            )
        if crossfade_ms > other.duration_ms():
            raise CrossfadeExceedsAppended(
                f"Crossfade is longer than the appended AudioSegment "
                f"({crossfade_ms}ms > {other.duration_ms()}ms)"
            )

        # One overlap length in frames for both sides keeps the faded tail and
        # head the same size for overlay.
        overlap = min(_ms_to_frames(crossfade_ms, self.frame_rate), self.frame_count(), other.frame_count())
        split = self.frame_count() - overlap
        tail = self._slice_frames(split, self.frame_count()).fade(FadeDirection.OUT)
        head = other._slice_frames(0, overlap).fade(FadeDirection.IN)
        mixed = tail.overlay(head)
        return self._spawn(
            self._slice_frames(0, split).samples
            + mixed.samples
            + other._slice_frames(overlap, other.frame_count()).samples
        )

    def to_wav_bytes(self) -> bytes:
        return encode_wav(self.samples, self.channels, self.frame_rate, self.sample_width)

    def export(self, target: ByteSink | None = None, format: str = "wav") -> ByteSink:
        """Write the encoded container to ``target``, or to a new temp file when omitted."""
        require_supported_format(format)
        payload = self.to_wav_bytes()
        destination: ByteSink = target if target is not None else create_temp_path(suffix=".wav")
        write_sink_bytes(destination, payload)
        return destination

    def __len__(self) -> int:
        return self.duration_ms()

    def __getitem__(self, key: slice) -> AudioSegment:
        if not isinstance(key, slice):
            raise TypeError("AudioSegment indices must be millisecond slices")
        if key.step is not None:
            raise TypeError("AudioSegment slices do not support a step")
        start = 0 if key.start is None else key.start
        return self.slice(start, key.stop)

    def __add__(self, other: object) -> AudioSegment:
        if not isinstance(other, AudioSegment):
            return NotImplemented
        return self.append(other)

    def _slice_frames(self, start_frame: int, end_frame: int) -> AudioSegment:
        return self._spawn(self.samples[start_frame * self.frame_width : end_frame * self.frame_width])

    def _spawn(self, samples: bytes) -> AudioSegment:
        return AudioSegment(
            samples=samples,
            channels=self.channels,
            frame_rate=self.frame_rate,
            sample_width=self.sample_width,
        )

    def _require_compatible(self, other: AudioSegment) -> None:
        if (self.channels, self.frame_rate, self.sample_width) != (
            other.channels,
            other.frame_rate,
            other.sample_width,
        ):
            raise IncompatibleFormat(
                f"segment formats differ: {self.channels}ch/{self.frame_rate}Hz/{self.sample_width}B "
                f"vs {other.channels}ch/{other.frame_rate}Hz/{other.sample_width}B"
            )


def append(first: AudioSegment, second: AudioSegment, crossfade_ms: int | float = 0) -> AudioSegment:
    return first.append(second, crossfade_ms=crossfade_ms)


def overlay(first: AudioSegment, second: AudioSegment) -> AudioSegment:
    return first.overlay(second)


def fade(segment: AudioSegment, direction: FadeDirection | str) -> AudioSegment:
    return segment.fade(direction)


def _ms_to_frames(ms: int | float, frame_rate: int) -> int:
    return round(Fraction(ms) * frame_rate / 1000)


def require_supported_format(format: str) -> None:
    if format.strip().lower() not in SUPPORTED_FORMATS:
        raise UnsupportedOutputFormat(format)
