"""
cptdecrypt Logger - Centralized Logging Utility
"""
import logging
import sys

def setup_logger():
    # Create a custom logger
    logger = logging.getLogger("cptdecrypt")
    logger.setLevel(logging.DEBUG)

    # Console handler
    c_handler = logging.StreamHandler(sys.stdout)
    c_handler.setLevel(logging.INFO)

    c_format = logging.Formatter('%(message)s') # Clean output for CLI
    c_handler.setFormatter(c_format)

    if not logger.handlers:
        logger.addHandler(c_handler)

    return logger

def set_verbose(enabled: bool = True):
    """Lower the console threshold to DEBUG (used by the CLI -v flag)"""
    level = logging.DEBUG if enabled else logging.INFO
    for handler in logger.handlers:
        handler.setLevel(level)

# Initialize singleton
logger = setup_logger()

__all__ = ["logger", "set_verbose"]
