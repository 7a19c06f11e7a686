"""Error taxonomy for container decoding, segment operations, and I/O."""

from __future__ import annotations


class WavSegmentError(Exception):
    """Base class for every error raised by wav_segment."""


class WavDecodeError(WavSegmentError, ValueError):
    """Raised when a RIFF/WAVE buffer cannot be decoded into a segment."""


class InvalidContainerHeader(WavDecodeError):
    pass


class MissingFormatChunk(WavDecodeError):
    pass


class TruncatedFormatChunk(WavDecodeError):
    pass


class InvalidFormatChunk(WavDecodeError):
    pass


class UnsupportedFormatCode(WavDecodeError):
    def __init__(self, code: int) -> None:
        super().__init__(f"Unknown audio format 0x{code:X} in wav data")
        self.code = code


class MissingDataChunk(WavDecodeError):
    pass


class TruncatedDataChunk(WavDecodeError):
    pass


class UnsupportedBitDepth(WavDecodeError):
    def __init__(self, bits_per_sample: int) -> None:
        super().__init__(f"unsupported bit depth: {bits_per_sample}")
        self.bits_per_sample = bits_per_sample


class SegmentOperationError(WavSegmentError, ValueError):
    """Raised when slicing, mixing, or appending segments cannot proceed."""


class InvalidSegmentParameters(SegmentOperationError):
    pass


class SliceOutOfRange(SegmentOperationError):
    pass


class SegmentLengthMismatch(SegmentOperationError):
    pass


class IncompatibleFormat(SegmentOperationError):
    pass


class CrossfadeExceedsSource(SegmentOperationError):
    pass


class CrossfadeExceedsAppended(SegmentOperationError):
    pass


class UnsupportedOutputFormat(WavSegmentError, ValueError):
    def __init__(self, format: str) -> None:
        super().__init__(f"unsupported audio format '{format}', only 'wav' is implemented")
        self.format = format


class IOFailure(WavSegmentError, OSError):
    """Raised when a byte source or sink fails; the OSError is chained."""
