"""RIFF top-level chunk scanner."""

from __future__ import annotations

import struct
from dataclasses import dataclass

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
MAX_SCANNED_CHUNKS = 10

DATA_TAG = b"data"
FORMAT_TAG = b"fmt "


@dataclass(frozen=True, slots=True)
class ChunkDescriptor:
    tag: bytes
    offset: int
    declared_size: int

    @property
    def body_start(self) -> int:
        return self.offset + CHUNK_HEADER_SIZE

    @property
    def body_end(self) -> int:
        return self.body_start + self.declared_size


def scan_chunks(buffer: bytes) -> list[ChunkDescriptor]:
    """Walk the chunk list that follows the 12-byte RIFF/WAVE header.

    Scanning stops after the ``data`` chunk (which is included), when fewer
    than 8 bytes remain, or once ``MAX_SCANNED_CHUNKS`` descriptors have been
    produced. Declared sizes are not checked against the buffer length.
    """
    chunks: list[ChunkDescriptor] = []
    pos = RIFF_HEADER_SIZE
    while pos + CHUNK_HEADER_SIZE <= len(buffer) and len(chunks) < MAX_SCANNED_CHUNKS:
        tag = bytes(buffer[pos : pos + 4])
        (size,) = struct.unpack_from("<I", buffer, pos + 4)
        chunks.append(ChunkDescriptor(tag=tag, offset=pos, declared_size=size))
        if tag == DATA_TAG:
            break
        pos += CHUNK_HEADER_SIZE + size
    return chunks
