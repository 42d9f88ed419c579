"""
cptdecrypt Key Unwrapper
Recovers the AES key and IV from the RSA-wrapped entries of a container.

Each wrapped entry holds one RSA block (PKCS#1 v1.5). The plaintext of that
block is UTF-8 text containing the base64 of the raw key or IV.
"""
import base64
import binascii
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from ..archive.reader import Container
from ..config import config as default_config
from ..errors import (
    AsymmetricDecryptError,
    EncodingError,
    MissingKeyMaterialError,
    SymmetricKeyError,
)
from ..utils.logger import logger

ROLE_KEY = "key"
ROLE_IV = "iv"
ROLES = (ROLE_KEY, ROLE_IV)


class UnwrappedSecret:
    """AES key/IV pair for one decrypt call. Call wipe() when done."""

    def __init__(self, key: bytes, iv: bytes):
        self.key = bytearray(key)
        self.iv = bytearray(iv)

    def wipe(self):
        for buf in (self.key, self.iv):
            for i in range(len(buf)):
                buf[i] = 0

    def __repr__(self):
        # Never render key material
        return f"UnwrappedSecret(key=<{len(self.key)} bytes>, iv=<{len(self.iv)} bytes>)"


class KeyUnwrapper:
    def __init__(self, private_key, block_size: int = None, config=None):
        self.config = config or default_config
        self.private_key = private_key
        self.block_size = block_size or self.config.rsa_block_size

    def unwrap(self, container: Container) -> UnwrappedSecret:
        """
        Unwrap key then iv from `container`.

        Raises:
            MissingKeyMaterialError: key<ext> or iv<ext> entry absent
            AsymmetricDecryptError: no usable private key, or RSA rejects the block
            EncodingError: unwrapped text is not UTF-8 / base64
            SymmetricKeyError: decoded key or IV has the wrong length
        """
        if not isinstance(self.private_key, rsa.RSAPrivateKey):
            raise AsymmetricDecryptError("No usable RSA private key was supplied")

        secrets = {role: self._unwrap_role(container, role) for role in ROLES}

        key, iv = secrets[ROLE_KEY], secrets[ROLE_IV]
        if len(key) != self.config.key_size:
            raise SymmetricKeyError(
                f"Unwrapped key is {len(key)} bytes, expected {self.config.key_size}"
            )
        if len(iv) != self.config.block_size:
            raise SymmetricKeyError(
                f"Unwrapped IV is {len(iv)} bytes, expected {self.config.block_size}"
            )

        logger.debug("Key material unwrapped")
        return UnwrappedSecret(key, iv)

    def _unwrap_role(self, container: Container, role: str) -> bytes:
        entry_name = role + self.config.extension
        entry = container.get(entry_name)
        if entry is None:
            raise MissingKeyMaterialError(role, entry_name)

        # A short entry is passed through as read; RSA decides whether it is usable
        with entry.open() as stream:
            wrapped = stream.read(self._rsa_block_size())

        try:
            text = self.private_key.decrypt(wrapped, padding.PKCS1v15())
        except ValueError as e:
            raise AsymmetricDecryptError(f"RSA decryption of {entry_name} failed: {e}") from e

        return self._decode(text, entry_name)

    def _rsa_block_size(self) -> int:
        if self.block_size:
            return self.block_size
        return (self.private_key.key_size + 7) // 8

    @staticmethod
    def _decode(text: bytes, entry_name: str) -> bytes:
        try:
            b64 = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError(f"{entry_name} did not unwrap to UTF-8 text") from e

        # Whitespace is tolerated inside base64 text, any other stray character is not
        b64 = "".join(b64.split())
        try:
            return base64.b64decode(b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"{entry_name} did not unwrap to valid base64") from e


__all__ = ["KeyUnwrapper", "UnwrappedSecret", "ROLES"]
