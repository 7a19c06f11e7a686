"""WAV container codec and the AudioSegment value type."""

from wav_segment.audio.chunks import ChunkDescriptor, scan_chunks
from wav_segment.audio.mixing import FadeDirection
from wav_segment.audio.repository import SegmentRepository
from wav_segment.audio.segment import AudioSegment, append, fade, overlay
from wav_segment.audio.wav_codec import DecodedFormat, decode_wav, encode_wav

__all__ = [
    "AudioSegment",
    "ChunkDescriptor",
    "DecodedFormat",
    "FadeDirection",
    "SegmentRepository",
    "append",
    "decode_wav",
    "encode_wav",
    "fade",
    "overlay",
    "scan_chunks",
]
