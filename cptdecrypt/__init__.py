"""
cptdecrypt
Decrypts .cpt containers: RSA-wrapped AES-128-CBC key/IV plus
DEFLATE-compressed payload segments, into one plaintext stream.
"""
from .errors import (
    DecryptError,
    ArchiveFormatError,
    MissingKeyMaterialError,
    AsymmetricDecryptError,
    KeyContainerError,
    EncodingError,
    SymmetricKeyError,
    CiphertextIntegrityError,
    DecompressionError,
)
from .decryptor import Decryptor, BatchDecryptor, decrypt
from .keys import KeyContainerStore

__version__ = "1.0.0"

__all__ = [
    "decrypt",
    "Decryptor",
    "BatchDecryptor",
    "KeyContainerStore",
    "DecryptError",
    "ArchiveFormatError",
    "MissingKeyMaterialError",
    "AsymmetricDecryptError",
    "KeyContainerError",
    "EncodingError",
    "SymmetricKeyError",
    "CiphertextIntegrityError",
    "DecompressionError",
]
