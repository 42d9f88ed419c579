import io
import os
import struct
import sys
import unittest
import zipfile
import zlib
from pathlib import Path
from tempfile import TemporaryDirectory

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from container_factory import (
    EXT,
    build_container,
    deflate,
    encrypt_segment,
    rsa_key,
    wrap_text,
)
from cptdecrypt.archive.reader import ContainerReader
from cptdecrypt.config import DecryptConfig
from cptdecrypt.decryptor.inflater import Inflater
from cptdecrypt.decryptor.segment import SegmentDecryptor
from cptdecrypt.errors import (
    ArchiveFormatError,
    DecompressionError,
    EncodingError,
    SymmetricKeyError,
)
from cptdecrypt.keys.unwrapper import KeyUnwrapper, UnwrappedSecret


class ContainerReaderTests(unittest.TestCase):
    """Named lookup, stored-order enumeration and payload selection."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.archive = Path(self.tmpdir.name) / "reader.cpt"
        with zipfile.ZipFile(self.archive, "w") as z:
            z.writestr("key.cpt", b"k")
            z.writestr("iv.cpt", b"i")
            z.writestr("aes/", b"")
            z.writestr("aes/1.cpt", b"one")
            z.writestr("aes/0.cpt", b"zero")
            z.writestr("nested/aes/2.cpt", b"two")
            z.writestr("aesthetic/3.cpt", b"three")
            z.writestr("aes.cpt", b"four")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_get_by_exact_name(self):
        with ContainerReader.open(self.archive) as container:
            entry = container.get("key.cpt")
            self.assertIsNotNone(entry)
            with entry.open() as stream:
                self.assertEqual(stream.read(), b"k")
            self.assertIsNone(container.get("KEY.cpt"))
            self.assertIsNone(container.get("key"))
            self.assertIsNone(container.get("aes/"))

    def test_entries_in_stored_order_without_directories(self):
        with ContainerReader.open(self.archive) as container:
            names = [e.name for e in container.entries()]
        self.assertEqual(names, [
            "key.cpt", "iv.cpt", "aes/1.cpt", "aes/0.cpt",
            "nested/aes/2.cpt", "aesthetic/3.cpt", "aes.cpt",
        ])

    def test_payload_entries_match_whole_path_components(self):
        with ContainerReader.open(self.archive) as container:
            names = [e.name for e in container.payload_entries("aes")]
        self.assertEqual(names, ["aes/1.cpt", "aes/0.cpt", "nested/aes/2.cpt"])

    def test_close_releases_handle(self):
        container = ContainerReader.open(self.archive)
        container.close()
        self.assertIsNone(container._archive.fp)

    def test_bad_crc_surfaces_as_format_error(self):
        raw = bytearray(self.archive.read_bytes())
        # Stored entries keep their bytes verbatim; corrupt "zero"
        offset = raw.find(b"zero")
        raw[offset] ^= 0xFF
        self.archive.write_bytes(bytes(raw))
        with ContainerReader.open(self.archive) as container:
            with container.get("aes/0.cpt").open() as stream:
                with self.assertRaises(ArchiveFormatError):
                    stream.read()

    def test_corrupt_compressed_data_surfaces_as_format_error(self):
        archive = Path(self.tmpdir.name) / "deflated.cpt"
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as z:
            z.writestr("aes/0.cpt", b"zero" * 512)
            offset = z.getinfo("aes/0.cpt").header_offset
        raw = bytearray(archive.read_bytes())
        name_len, extra_len = struct.unpack("<HH", raw[offset + 26:offset + 30])
        start = offset + 30 + name_len + extra_len
        # 0xFF opens a block of the reserved type 11
        raw[start:start + 8] = b"\xff" * 8
        archive.write_bytes(bytes(raw))
        with ContainerReader.open(archive) as container:
            with container.get("aes/0.cpt").open() as stream:
                with self.assertRaises(ArchiveFormatError):
                    stream.read()


class KeyUnwrapperTests(unittest.TestCase):
    """RSA unwrap, text decoding and length validation of key material."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.archive = Path(self.tmpdir.name) / "keys.cpt"
        self.private_key = rsa_key()

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, key_text: bytes, iv_text: bytes) -> None:
        with zipfile.ZipFile(self.archive, "w") as z:
            z.writestr("key" + EXT, wrap_text(self.private_key, key_text))
            z.writestr("iv" + EXT, wrap_text(self.private_key, iv_text))

    def _unwrap(self, **kwargs) -> UnwrappedSecret:
        with ContainerReader.open(self.archive) as container:
            return KeyUnwrapper(self.private_key, **kwargs).unwrap(container)

    def test_unwraps_key_and_iv(self):
        key, iv = build_container(self.archive, self.private_key)
        secret = self._unwrap()
        self.assertEqual(bytes(secret.key), key)
        self.assertEqual(bytes(secret.iv), iv)

    def test_whitespace_in_base64_text_is_tolerated(self):
        self._write(b"AAECAwQFBgcI\r\nCQoLDA0ODw==\n", b" AAAAAAAAAAAAAAAAAAAAAA== ")
        secret = self._unwrap()
        self.assertEqual(bytes(secret.key), bytes(range(16)))
        self.assertEqual(bytes(secret.iv), bytes(16))

    def test_invalid_utf8(self):
        self._write(b"\xff\xfe\xfd", b"AAAAAAAAAAAAAAAAAAAAAA==")
        with self.assertRaises(EncodingError):
            self._unwrap()

    def test_invalid_base64(self):
        self._write(b"not base64 at all!", b"AAAAAAAAAAAAAAAAAAAAAA==")
        with self.assertRaises(EncodingError):
            self._unwrap()

    def test_explicit_rsa_block_size(self):
        key, iv = build_container(self.archive, self.private_key)
        secret = self._unwrap(block_size=256)
        self.assertEqual(bytes(secret.key), key)

    def test_repr_hides_key_material(self):
        secret = UnwrappedSecret(b"\x01" * 16, b"\x02" * 16)
        self.assertNotIn("\\x01", repr(secret))
        self.assertIn("16 bytes", repr(secret))

    def test_wipe_zeroes_buffers(self):
        secret = UnwrappedSecret(os.urandom(16), os.urandom(16))
        secret.wipe()
        self.assertEqual(bytes(secret.key), bytes(16))
        self.assertEqual(bytes(secret.iv), bytes(16))


class InflaterTests(unittest.TestCase):
    """Raw DEFLATE streaming with bounded output chunks."""

    def _inflate(self, compressed: bytes, feed_size: int, chunk_size: int):
        inflater = Inflater(chunk_size)
        chunks = []
        for i in range(0, len(compressed), feed_size):
            chunks.extend(inflater.feed(compressed[i:i + feed_size]))
        chunks.extend(inflater.finish())
        return chunks

    def test_chunks_never_exceed_chunk_size(self):
        data = os.urandom(5000) + bytes(20000)
        chunks = self._inflate(deflate(data), feed_size=7, chunk_size=64)
        self.assertEqual(b"".join(chunks), data)
        self.assertTrue(all(0 < len(c) <= 64 for c in chunks))

    def test_trailing_bytes_after_stream_are_ignored(self):
        data = b"payload" * 100
        chunks = self._inflate(deflate(data) + b"junk after end", feed_size=50, chunk_size=1024)
        self.assertEqual(b"".join(chunks), data)

    def test_zlib_wrapped_stream_is_rejected(self):
        with self.assertRaises(DecompressionError):
            self._inflate(zlib.compress(b"wrapped"), feed_size=1024, chunk_size=1024)

    def test_empty_input_is_an_unterminated_stream(self):
        with self.assertRaises(DecompressionError):
            self._inflate(b"", feed_size=1, chunk_size=1024)


class SegmentDecryptorTests(unittest.TestCase):
    """AES-CBC/PKCS#7 + inflate of a single entry."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.archive = Path(self.tmpdir.name) / "segment.cpt"
        self.key = os.urandom(16)
        self.iv = os.urandom(16)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_small_chunk_size_streams_whole_entry(self):
        data = os.urandom(3000) * 3
        with zipfile.ZipFile(self.archive, "w") as z:
            z.writestr("aes/0.cpt", encrypt_segment(self.key, self.iv, data))

        config = DecryptConfig(config_path=str(Path(self.tmpdir.name) / "none.json"))
        config.set("io", "chunk_size_kb", 1)
        decryptor = SegmentDecryptor(UnwrappedSecret(self.key, self.iv), config=config)

        out = io.BytesIO()
        with ContainerReader.open(self.archive) as container:
            written = decryptor.decrypt_entry(container.get("aes/0.cpt"), out)
        self.assertEqual(out.getvalue(), data)
        self.assertEqual(written, len(data))

    def test_rejects_wrong_key_length(self):
        with self.assertRaises(SymmetricKeyError):
            SegmentDecryptor(UnwrappedSecret(os.urandom(32), self.iv))

    def test_rejects_wrong_iv_length(self):
        with self.assertRaises(SymmetricKeyError):
            SegmentDecryptor(UnwrappedSecret(self.key, os.urandom(12)))


if __name__ == "__main__":
    unittest.main()
