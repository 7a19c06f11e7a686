"""Keyed in-memory store of decoded segments."""

from __future__ import annotations

import logging
from uuid import uuid4

from wav_segment.audio.errors import WavDecodeError
from wav_segment.audio.segment import AudioSegment
from wav_segment.audio.sources import ByteSource

logger = logging.getLogger(__name__)


class SegmentRepository:
    def __init__(self) -> None:
        self._items: dict[str, AudioSegment] = {}

    def load_file(self, path: ByteSource, segment_id: str | None = None) -> tuple[str, AudioSegment]:
        try:
            segment = AudioSegment.from_file(path)
        except WavDecodeError as exc:
            logger.warning("rejected wav source %r: %s", path, exc)
            raise
        return self.put(segment, segment_id), segment

    def load_bytes(self, data: bytes, segment_id: str | None = None) -> tuple[str, AudioSegment]:
        try:
            segment = AudioSegment.from_wav_bytes(data)
        except WavDecodeError as exc:
            logger.warning("rejected wav payload (%d bytes): %s", len(data), exc)
            raise
        return self.put(segment, segment_id), segment

    def put(self, segment: AudioSegment, segment_id: str | None = None) -> str:
        key = segment_id or str(uuid4())
        self._items[key] = segment
        logger.debug("stored segment %s (%d ms)", key, segment.duration_ms())
        return key

    def get(self, segment_id: str) -> AudioSegment:
        segment = self._items.get(segment_id)
        if segment is None:
            raise KeyError(f"Segment '{segment_id}' not found")
        return segment

    def remove(self, segment_id: str) -> None:
        if self._items.pop(segment_id, None) is None:
            raise KeyError(f"Segment '{segment_id}' not found")

    def ids(self) -> list[str]:
        return list(self._items)
