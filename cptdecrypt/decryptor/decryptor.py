"""
cptdecrypt Decryptor
Opens a container, unwraps the AES key/IV with the caller's RSA private key,
then decrypts and inflates every payload entry into one output stream.

Payload entries are appended in the container's stored order. The format
carries no sequence numbers, so that order is the reconstruction order.
"""
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import BinaryIO, Dict
from ..archive.reader import ContainerReader
from ..config import config as default_config
from ..errors import DecryptError
from ..keys.unwrapper import KeyUnwrapper
from ..utils.checksum import calculate_file_checksum
from ..utils.logger import logger
from .segment import SegmentDecryptor


class Decryptor:
    def __init__(self, private_key, config=None):
        self.config = config or default_config
        self.private_key = private_key

    def decrypt_stream(self, archive_path, output: BinaryIO) -> Dict:
        """
        Decrypt `archive_path` into the already-open `output`.
        The sink is never closed here, and partial output is not rolled back.
        """
        start_time = time.time()
        secret = None

        try:
            logger.info(f"🔓 Decrypting: {archive_path}")

            with ContainerReader.open(archive_path) as container:
                unwrapper = KeyUnwrapper(self.private_key, config=self.config)
                secret = unwrapper.unwrap(container)

                segments = SegmentDecryptor(secret, config=self.config)
                entries = container.payload_entries(self.config.payload_dir)
                written = 0

                for entry in entries:
                    n = segments.decrypt_entry(entry, output)
                    logger.debug(f"   {entry.name}: {entry.size} → {n} bytes")
                    written += n

            if not entries:
                logger.warning(f"No payload entries under {self.config.payload_dir}/, output is empty")

            return {
                'success': True,
                'segments': len(entries),
                'bytes_written': written,
                'time': time.time() - start_time
            }

        except DecryptError as e:
            logger.error(f"Decrypt failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Decrypt failed: {e}", exc_info=True)
            raise
        finally:
            if secret is not None:
                secret.wipe()

    def output_path_for(self, archive_path, output_dir: str = None) -> Path:
        """<dir>/<stem><output extension>, next to the archive unless output_dir is given"""
        archive_path = Path(archive_path)
        out_dir = Path(output_dir) if output_dir else archive_path.parent
        return out_dir / f"{archive_path.stem}{self.config.output_extension}"

    def decrypt_file(self, archive_path, output_path: str = None) -> Dict:
        """
        Decrypt `archive_path` into a file. The plaintext goes to a temporary
        file first and only replaces `output_path` once every entry decrypted.
        """
        final_path = Path(output_path) if output_path else self.output_path_for(archive_path)
        final_path.parent.mkdir(parents=True, exist_ok=True)

        tmp_fd, tmp_path = tempfile.mkstemp(dir=final_path.parent, suffix='.tmp')
        try:
            with os.fdopen(tmp_fd, 'wb') as out_f:
                result = self.decrypt_stream(archive_path, out_f)

            shutil.move(tmp_path, final_path)
            tmp_path = None
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(f"✅ Restored: {final_path}")

        result['output_path'] = str(final_path)
        result['checksum'] = calculate_file_checksum(str(final_path))
        return result


def decrypt(archive_path, private_key, output: BinaryIO, *, config=None) -> None:
    """
    Decrypt a container into `output`.

    Args:
        archive_path: path of the zip container
        private_key: resolved RSA private key (see KeyContainerStore)
        output: open, writable binary stream owned by the caller

    Raises:
        DecryptError: one of its subclasses, see cptdecrypt.errors
    """
    Decryptor(private_key, config=config).decrypt_stream(archive_path, output)


__all__ = ["Decryptor", "decrypt"]
