"""
cptdecrypt Errors
Every failure of a decrypt call is one of these. None of them is transient,
so nothing is retried.

Note: the container format has no MAC. PKCS#7 padding is the only implicit
integrity check, so a corrupted payload that still unpads cleanly comes out
as wrong plaintext without raising anything.
"""


class DecryptError(Exception):
    """Base class for all decrypt failures"""


class ArchiveFormatError(DecryptError):
    """Container cannot be opened, parsed or read"""


class MissingKeyMaterialError(DecryptError):
    """A required key-material entry (key or iv) is absent from the container"""

    def __init__(self, role: str, entry_name: str = None):
        self.role = role
        self.entry_name = entry_name or role
        super().__init__(f'"{self.entry_name}" does not exist.')


class AsymmetricDecryptError(DecryptError):
    """Private key unavailable, or wrapped key material rejected by it"""


class KeyContainerError(AsymmetricDecryptError):
    """Key container name could not be resolved to a usable RSA private key"""


class EncodingError(DecryptError):
    """Unwrapped key material is not valid UTF-8 / base64"""


class SymmetricKeyError(DecryptError):
    """Unwrapped key or IV has the wrong length for AES-CBC"""


class CiphertextIntegrityError(DecryptError):
    """Payload ciphertext is not block aligned or has invalid PKCS#7 padding"""


class DecompressionError(DecryptError):
    """Decrypted payload is not a well-formed DEFLATE stream"""


__all__ = [
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
