"""
cptdecrypt Inflater
Streaming raw DEFLATE (RFC 1951, no zlib/gzip header) decompression.
Output is produced in chunks of at most `chunk_size` bytes.
"""
import zlib
from typing import Iterator
from ..errors import DecompressionError
from ..utils.logger import logger


class Inflater:
    def __init__(self, chunk_size: int = 65536):
        self.chunk_size = chunk_size
        self._dobj = zlib.decompressobj(-zlib.MAX_WBITS)
        self._trailing = 0

    @property
    def eof(self) -> bool:
        return self._dobj.eof

    def feed(self, data: bytes) -> Iterator[bytes]:
        """Decompress `data`, yielding plaintext chunks as they become available"""
        if self._dobj.eof:
            self._trailing += len(data)
            return

        buf = data
        while buf:
            try:
                out = self._dobj.decompress(buf, self.chunk_size)
            except zlib.error as e:
                raise DecompressionError(f"Malformed DEFLATE stream: {e}") from e
            if out:
                yield out
            if self._dobj.eof:
                self._trailing += len(self._dobj.unused_data)
                break
            buf = self._dobj.unconsumed_tail

    def finish(self) -> Iterator[bytes]:
        """Drain pending output and check the stream reached its final block"""
        try:
            tail = self._dobj.flush()
        except zlib.error as e:
            raise DecompressionError(f"Malformed DEFLATE stream: {e}") from e

        for i in range(0, len(tail), self.chunk_size):
            yield tail[i:i + self.chunk_size]

        if not self._dobj.eof:
            raise DecompressionError("DEFLATE stream ended before its final block")
        if self._trailing:
            logger.debug(f"   Ignored {self._trailing} bytes after end of DEFLATE stream")


__all__ = ["Inflater"]
