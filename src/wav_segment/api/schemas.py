"""FastAPI request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UploadSegmentRequest(BaseModel):
    segment_id: str | None = None
    wav_base64: str = Field(min_length=1)


class SliceSegmentRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    start_ms: float = 0
    end_ms: float | None = None
    target_id: str | None = None


class AppendSegmentsRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    first_id: str
    second_id: str
    crossfade_ms: float = Field(default=0, ge=0)
    target_id: str | None = None


class SegmentInfo(BaseModel):
    segment_id: str
    channels: int
    frame_rate: int
    sample_width: int
    frame_width: int
    frame_count: int
    duration_ms: int
    byte_length: int
