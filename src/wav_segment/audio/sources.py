"""Byte-source and byte-sink collaborators for file-backed segments."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from wav_segment.audio.errors import IOFailure

logger = logging.getLogger(__name__)

ByteSource = str | Path | BinaryIO
ByteSink = str | Path | BinaryIO


def read_source_bytes(source: ByteSource) -> bytes:
    """Return the full contents of a path or an already-open binary handle."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise IOFailure(f"failed to read '{path}': {exc}") from exc
        logger.debug("read %d bytes from %s", len(data), path)
        return data

    try:
        if source.seekable():
            source.seek(0)
        data = source.read()
    except OSError as exc:
        raise IOFailure(f"failed to read from handle: {exc}") from exc
    return bytes(data)


def write_sink_bytes(target: ByteSink, data: bytes) -> None:
    if isinstance(target, (str, Path)):
        path = Path(target)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise IOFailure(f"failed to write '{path}': {exc}") from exc
        logger.debug("wrote %d bytes to %s", len(data), path)
        return

    try:
        target.write(data)
        target.flush()
    except OSError as exc:
        raise IOFailure(f"failed to write to handle: {exc}") from exc


def create_temp_path(suffix: str = ".wav", temp_dir: str | Path | None = None) -> Path:
    """Create an empty named temp file and return its path; the caller owns it."""
    directory = temp_dir or os.getenv("WAV_SEGMENT_TEMP_DIR") or None
    try:
        handle, name = tempfile.mkstemp(prefix="wav_segment_", suffix=suffix, dir=directory)
        os.close(handle)
    except OSError as exc:
        raise IOFailure(f"failed to create temp file: {exc}") from exc
    return Path(name)
