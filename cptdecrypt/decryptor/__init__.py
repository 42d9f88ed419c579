from .decryptor import Decryptor, decrypt
from .batch_decryptor import BatchDecryptor
from .segment import SegmentDecryptor
from .inflater import Inflater

__all__ = [
    "Decryptor",
    "decrypt",
    "BatchDecryptor",
    "SegmentDecryptor",
    "Inflater"
]
