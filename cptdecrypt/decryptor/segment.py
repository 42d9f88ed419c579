"""
cptdecrypt Segment Decryptor
AES-CBC / PKCS#7 streaming decryption of one payload entry, piped through
the inflater into the caller's sink.
"""
from typing import BinaryIO, Iterable
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from ..archive.reader import ContainerEntry
from ..config import config as default_config
from ..errors import CiphertextIntegrityError, SymmetricKeyError
from ..keys.unwrapper import UnwrappedSecret
from .inflater import Inflater


class SegmentDecryptor:
    def __init__(self, secret: UnwrappedSecret, config=None):
        self.config = config or default_config
        self.chunk_size = self.config.chunk_size

        if len(secret.key) != self.config.key_size:
            raise SymmetricKeyError(
                f"AES key must be {self.config.key_size} bytes, got {len(secret.key)}"
            )
        if len(secret.iv) != self.config.block_size:
            raise SymmetricKeyError(
                f"IV must be {self.config.block_size} bytes, got {len(secret.iv)}"
            )

        try:
            self._cipher = Cipher(algorithms.AES(bytes(secret.key)), modes.CBC(bytes(secret.iv)))
        except ValueError as e:
            raise SymmetricKeyError(f"Cannot build AES-CBC decryptor: {e}") from e

    def decrypt_entry(self, entry: ContainerEntry, output: BinaryIO) -> int:
        """
        Decrypt, unpad and inflate `entry`, appending plaintext to `output`.
        Returns the number of plaintext bytes written.

        Plaintext is written as it is produced, so a failure late in the
        entry leaves the earlier part of it in the sink.
        """
        decryptor = self._cipher.decryptor()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        inflater = Inflater(self.chunk_size)
        written = 0

        with entry.open() as stream:
            while chunk := stream.read(self.chunk_size):
                plain = unpadder.update(decryptor.update(chunk))
                written += self._write(inflater.feed(plain), output)

            try:
                final = decryptor.finalize()
                plain = unpadder.update(final) + unpadder.finalize()
            except ValueError as e:
                raise CiphertextIntegrityError(f"{entry.name}: {e}") from e

            written += self._write(inflater.feed(plain), output)
            written += self._write(inflater.finish(), output)

        return written

    @staticmethod
    def _write(chunks: Iterable[bytes], output: BinaryIO) -> int:
        n = 0
        for chunk in chunks:
            output.write(chunk)
            n += len(chunk)
        return n


__all__ = ["SegmentDecryptor"]
