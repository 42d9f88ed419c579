from .logger import logger
from .checksum import calculate_file_checksum

__all__ = [
    "logger",
    "calculate_file_checksum"
]
