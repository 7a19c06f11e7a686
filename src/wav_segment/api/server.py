"""HTTP endpoints for loading, slicing, appending, and exporting segments."""

from __future__ import annotations

import base64
import binascii
import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from wav_segment.api.schemas import (
    AppendSegmentsRequest,
    SegmentInfo,
    SliceSegmentRequest,
    UploadSegmentRequest,
)
from wav_segment.audio.errors import WavSegmentError
from wav_segment.audio.repository import SegmentRepository
from wav_segment.audio.segment import AudioSegment, require_supported_format

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 64 * 1024 * 1024


def create_app(
    repository: SegmentRepository | None = None,
    max_upload_bytes: int | None = None,
) -> FastAPI:
    app = FastAPI(title="wav-segment API", version="0.1.0")
    segments = repository or SegmentRepository()
    upload_limit = max_upload_bytes or _max_upload_bytes_from_env()

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "service": "wav-segment API",
            "status": "ok",
            "docs": "/docs",
        }

    @app.post("/v1/segments", response_model=SegmentInfo)
    def upload_segment(payload: UploadSegmentRequest) -> SegmentInfo:
        if _decoded_size(payload.wav_base64) > upload_limit:
            raise HTTPException(status_code=413, detail=f"payload exceeds {upload_limit} bytes")
        try:
            data = base64.b64decode(payload.wav_base64, validate=True)
        except binascii.Error as exc:
            raise HTTPException(status_code=400, detail=f"invalid base64 payload: {exc}") from exc
        if len(data) > upload_limit:
            raise HTTPException(status_code=413, detail=f"payload exceeds {upload_limit} bytes")
        try:
            segment_id, segment = segments.load_bytes(data, segment_id=payload.segment_id)
        except WavSegmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _segment_info(segment_id, segment)

    @app.get("/v1/segments/{segment_id}", response_model=SegmentInfo)
    def get_segment(segment_id: str) -> SegmentInfo:
        return _segment_info(segment_id, _lookup(segments, segment_id))

    @app.delete("/v1/segments/{segment_id}", status_code=204)
    def delete_segment(segment_id: str) -> Response:
        try:
            segments.remove(segment_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=exc.args[0]) from exc
        return Response(status_code=204)

    @app.post("/v1/segments/{segment_id}/slice", response_model=SegmentInfo)
    def slice_segment(segment_id: str, payload: SliceSegmentRequest) -> SegmentInfo:
        source = _lookup(segments, segment_id)
        try:
            derived = source.slice(_whole(payload.start_ms), _whole(payload.end_ms))
        except WavSegmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        target_id = segments.put(derived, payload.target_id)
        return _segment_info(target_id, derived)

    @app.post("/v1/segments/append", response_model=SegmentInfo)
    def append_segments(payload: AppendSegmentsRequest) -> SegmentInfo:
        first = _lookup(segments, payload.first_id)
        second = _lookup(segments, payload.second_id)
        try:
            combined = first.append(second, crossfade_ms=_whole(payload.crossfade_ms))
        except WavSegmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        target_id = segments.put(combined, payload.target_id)
        return _segment_info(target_id, combined)

    @app.get("/v1/segments/{segment_id}/export")
    def export_segment(segment_id: str, format: str = "wav") -> Response:
        segment = _lookup(segments, segment_id)
        try:
            require_supported_format(format)
            payload = segment.to_wav_bytes()
        except WavSegmentError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.debug("exporting segment %s (%d bytes)", segment_id, len(payload))
        return Response(content=payload, media_type="audio/wav")

    return app


def _lookup(segments: SegmentRepository, segment_id: str) -> AudioSegment:
    try:
        return segments.get(segment_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc


def _segment_info(segment_id: str, segment: AudioSegment) -> SegmentInfo:
    return SegmentInfo(
        segment_id=segment_id,
        channels=segment.channels,
        frame_rate=segment.frame_rate,
        sample_width=segment.sample_width,
        frame_width=segment.frame_width,
        frame_count=segment.frame_count(),
        duration_ms=segment.duration_ms(),
        byte_length=len(segment.samples),
    )


def _decoded_size(encoded: str) -> int:
    padding = len(encoded) - len(encoded.rstrip("="))
    return len(encoded) * 3 // 4 - padding


def _whole(value: float | None) -> int | float | None:
    if value is not None and float(value).is_integer():
        return int(value)
    return value


def _max_upload_bytes_from_env() -> int:
    raw = os.getenv("WAV_SEGMENT_MAX_UPLOAD_BYTES", "").strip()
    if not raw:
        return DEFAULT_MAX_UPLOAD_BYTES
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring invalid WAV_SEGMENT_MAX_UPLOAD_BYTES=%r", raw)
        return DEFAULT_MAX_UPLOAD_BYTES
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


app = create_app()
