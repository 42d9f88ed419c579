"""
cptdecrypt Configuration
Single source of truth for all settings.
Load once at startup, pass to all components.
"""
import copy
import json
import os
from pathlib import Path
from .utils.logger import logger


# Default config values
DEFAULTS = {
    "container": {
        "extension": ".cpt",
        "payload_dir": "aes"
    },
    "cipher": {
        "key_size_bits": 128,
        "block_size_bits": 128,
        "rsa_block_size": None  # None = modulus size of the private key
    },
    "io": {
        "chunk_size_kb": 64
    },
    "keys": {
        "container_dir": "~/.cptdecrypt/keys"
    },
    "output": {
        "extension": ".dat"
    },
    "batch": {
        "max_workers": None  # None = auto detect
    }
}

KEY_DIR_ENV = "CPTDECRYPT_KEY_DIR"


class DecryptConfig:
    def __init__(self, config_path: str = None):
        self._config = copy.deepcopy(DEFAULTS)

        if config_path:
            self.config_path = Path(config_path)
        else:
            # Look for config in project root
            self.config_path = Path(__file__).parent.parent / 'cptdecrypt.config.json'

        if self.config_path.exists():
            self._load()
        else:
            logger.debug(f"No config file found at {self.config_path} — using defaults")

    def _load(self):
        """Load and merge config file over defaults"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            self._deep_merge(self._config, user_config)
            logger.info(f"Loaded config from {self.config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e} — using defaults")
        except OSError as e:
            logger.error(f"Failed to load config: {e} — using defaults")

    def save(self, path: str = None):
        """Save current config to file"""
        out_path = Path(path) if path else self.config_path
        with open(out_path, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)
        logger.info(f"Config saved to {out_path}")

    def get(self, *keys, default=None):
        """
        Get a nested config value by key path.
        e.g. config.get('container', 'extension')
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """
        Set a nested config value.
        e.g. config.set('io', 'chunk_size_kb', 128)
        """
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    # ── Convenience properties ─────────────────────────────────────────────

    @property
    def extension(self) -> str:
        return self.get('container', 'extension', default='.cpt')

    @property
    def payload_dir(self) -> str:
        return self.get('container', 'payload_dir', default='aes')

    @property
    def key_size(self) -> int:
        """AES key length in bytes"""
        return self.get('cipher', 'key_size_bits', default=128) // 8

    @property
    def block_size(self) -> int:
        """AES block (and IV) length in bytes"""
        return self.get('cipher', 'block_size_bits', default=128) // 8

    @property
    def rsa_block_size(self):
        return self.get('cipher', 'rsa_block_size', default=None)

    @property
    def chunk_size(self) -> int:
        return self.get('io', 'chunk_size_kb', default=64) * 1024

    @property
    def key_dir(self) -> Path:
        override = os.environ.get(KEY_DIR_ENV)
        if override:
            return Path(override).expanduser()
        path = self.get('keys', 'container_dir', default='~/.cptdecrypt/keys')
        return Path(path).expanduser()

    @property
    def output_extension(self) -> str:
        return self.get('output', 'extension', default='.dat')

    @property
    def max_workers(self):
        return self.get('batch', 'max_workers', default=None)

    # ── Helpers ────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_merge(base: dict, override: dict):
        """Merge override into base recursively — modifies base in place"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                DecryptConfig._deep_merge(base[key], value)
            else:
                base[key] = value


# Singleton — import this everywhere
config = DecryptConfig()

__all__ = ["DecryptConfig", "config"]
