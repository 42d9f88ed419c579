"""
cptdecrypt Archive Reader
Read-only, named-entry view over a zip container.
"""
import lzma
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import Iterator, List, Optional
from ..errors import ArchiveFormatError
from ..utils.logger import logger


class ContainerEntry:
    """One file entry of the container, addressed by its full logical path"""

    def __init__(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo):
        self._archive = archive
        self._info = info

    @property
    def name(self) -> str:
        return self._info.filename

    @property
    def size(self) -> int:
        return self._info.file_size

    @property
    def compressed_size(self) -> int:
        return self._info.compress_size

    def parent_dirs(self) -> tuple:
        return PurePosixPath(self.name).parts[:-1]

    @contextmanager
    def open(self) -> Iterator:
        """Yield a readable byte stream; closed on every exit path"""
        try:
            stream = self._archive.open(self._info, 'r')
        except (zipfile.BadZipFile, NotImplementedError, RuntimeError) as e:
            raise ArchiveFormatError(f"Cannot open entry {self.name}: {e}") from e

        try:
            yield _GuardedStream(stream, self.name)
        finally:
            stream.close()

    def __repr__(self):
        return f"ContainerEntry({self.name!r}, size={self.size})"


class _GuardedStream:
    """Turns zip-layer read failures (bad CRC, truncation, corrupt
    compressed data) into ArchiveFormatError"""

    def __init__(self, stream, name: str):
        self._stream = stream
        self._name = name

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except (zipfile.BadZipFile, EOFError, OSError, zlib.error, lzma.LZMAError) as e:
            raise ArchiveFormatError(f"Corrupt entry {self._name}: {e}") from e


class Container:
    """Opened container. Use as a context manager so the handle is released."""

    def __init__(self, path: str, archive: zipfile.ZipFile):
        self.path = path
        self._archive = archive

    def get(self, name: str) -> Optional[ContainerEntry]:
        """Exact-name lookup. None when the entry does not exist."""
        try:
            info = self._archive.getinfo(name)
        except KeyError:
            return None
        if info.is_dir():
            return None
        return ContainerEntry(self._archive, info)

    def entries(self) -> List[ContainerEntry]:
        """All file entries in stored (central directory) order"""
        return [
            ContainerEntry(self._archive, info)
            for info in self._archive.infolist()
            if not info.is_dir()
        ]

    def payload_entries(self, subdir: str) -> List[ContainerEntry]:
        """
        Entries that live under a directory named `subdir`, in stored order.
        Matches whole path components, so 'aes/0.cpt' and 'x/aes/1.cpt'
        qualify but 'aes.cpt' or 'notaes/0.cpt' do not.
        """
        return [e for e in self.entries() if subdir in e.parent_dirs()]

    def close(self):
        self._archive.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ContainerReader:
    @staticmethod
    def open(path) -> Container:
        """
        Open a container read-only.

        Raises:
            ArchiveFormatError: path missing, unreadable, or not a zip archive
        """
        try:
            archive = zipfile.ZipFile(path, 'r')
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveFormatError(f"Cannot open container {path}: {e}") from e

        logger.debug(f"Opened container {path} ({len(archive.infolist())} entries)")
        return Container(str(path), archive)


__all__ = ["ContainerReader", "Container", "ContainerEntry"]
