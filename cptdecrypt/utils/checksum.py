"""
cptdecrypt Checksum Utility
SHA-256 digests for reporting. Not an integrity check of the container format.
"""
import hashlib

CHUNK_SIZE = 65536


def calculate_file_checksum(file_path: str) -> str:
    """
    Calculates the SHA-256 checksum of a file without loading it into RAM.

    Args:
        file_path: path of the file to hash

    Returns:
        str: The hexadecimal hash string
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(CHUNK_SIZE), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()

__all__ = ["calculate_file_checksum"]
