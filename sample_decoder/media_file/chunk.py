from dataclasses import dataclass
import os
from typing import BinaryIO, Self

HEADER_LENGTH = 8


@dataclass
class ChunkHeader:
    """IFF / RIFF Chunk Header"""

    id: bytes
    size: int
    offset: int

    @classmethod
    def read(cls, stream: BinaryIO, byteorder: str) -> Self | None:
        """Read

        Args:
            stream (BinaryIO): Input stream
            byteorder (str): Byte order of the size field, "big" or "little"

        Returns:
            Self | None: Instance of this class, None at End of File
        """

        buffer = stream.read(HEADER_LENGTH)
        if len(buffer) < HEADER_LENGTH:
            return
        id = buffer[0:4]
        size = int.from_bytes(buffer[4:8], byteorder)
        return cls(id, size, stream.tell())

    @property
    def padded_size(self) -> int:
        return self.size + (self.size & 1)

    def read_payload(self, stream: BinaryIO) -> bytes:
        """Read Payload

        Args:
            stream (BinaryIO): Input stream

        Raises:
            ValueError: Too less read bytes.

        Returns:
            bytes: Payload
        """

        stream.seek(self.offset)
        payload = stream.read(self.size)
        if len(payload) < self.size:
            raise ValueError("Too less read bytes.")
        return payload


def index_chunks(stream: BinaryIO, byteorder: str) -> dict[bytes, ChunkHeader]:
    """Index Chunks

    Scans chunk headers from the current position to End of File. Only the
    first chunk of each ID is kept.

    Args:
        stream (BinaryIO): Input stream
        byteorder (str): Byte order of the size fields

    Returns:
        dict[bytes, ChunkHeader]: Chunk headers by ID
    """

    index: dict[bytes, ChunkHeader] = {}
    while True:
        header = ChunkHeader.read(stream, byteorder)
        if header is None:
            break
        index.setdefault(header.id, header)
        stream.seek(header.offset + header.padded_size, os.SEEK_SET)
    return index
