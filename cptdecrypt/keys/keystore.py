"""
cptdecrypt Key Container Store
Resolves a key container name to an RSA private key.

A container is a PEM file `<name>.pem` in the key directory. The decrypt
core never calls this itself; callers resolve the key and inject it.
"""
from pathlib import Path
from typing import List
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from ..config import config as default_config
from ..errors import KeyContainerError
from ..utils.logger import logger


class KeyContainerStore:
    SUFFIX = '.pem'

    def __init__(self, key_dir: str = None, config=None):
        self.config = config or default_config
        self.key_dir = Path(key_dir).expanduser() if key_dir else self.config.key_dir

    def path_for(self, name: str) -> Path:
        name = (name or "").strip()
        if not name:
            raise KeyContainerError("Key container name is empty")
        if Path(name).name != name or name in ('.', '..'):
            raise KeyContainerError(f"Invalid key container name: {name!r}")
        return self.key_dir / f"{name}{self.SUFFIX}"

    def resolve(self, name: str, password: bytes = None) -> rsa.RSAPrivateKey:
        """
        Load the private key held by container `name`.

        Raises:
            KeyContainerError: unknown container, unreadable file, wrong
                password, or a key that is not RSA
        """
        path = self.path_for(name)
        if not path.is_file():
            raise KeyContainerError(f"Key container not found: {name} ({path})")

        try:
            pem = path.read_bytes()
        except OSError as e:
            raise KeyContainerError(f"Cannot read key container {name}: {e}") from e

        try:
            key = serialization.load_pem_private_key(pem, password=password)
        except (ValueError, TypeError) as e:
            raise KeyContainerError(f"Cannot load private key from container {name}: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyContainerError(f"Key container {name} does not hold an RSA key")

        logger.debug(f"Resolved key container {name} ({key.key_size}-bit RSA)")
        return key

    def list_containers(self) -> List[str]:
        if not self.key_dir.is_dir():
            return []
        return sorted(p.stem for p in self.key_dir.glob(f"*{self.SUFFIX}") if p.is_file())


__all__ = ["KeyContainerStore"]
