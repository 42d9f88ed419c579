"""
cptdecrypt CLI Commands
Contains the executable modules for decryption and inspection.
"""

from . import decrypt
from . import decrypt_batch
from . import inspect

__all__ = ["decrypt", "decrypt_batch", "inspect"]
