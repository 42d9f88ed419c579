"""
cptdecrypt Container Inspector
Peek inside a container without decrypting anything.
"""
from pathlib import Path
from ..archive.reader import ContainerReader
from ..config import config as default_config
from ..keys.unwrapper import ROLES
from ..utils.checksum import calculate_file_checksum


class Inspector:
    def __init__(self, config=None):
        self.config = config or default_config

    def inspect(self, package_path: str, show: bool = True) -> dict:
        """
        Read the container directory: key material, payload order, leftovers.
        """
        path = Path(package_path)
        if not path.exists():
            raise ValueError(f"Container not found: {package_path}")

        with ContainerReader.open(path) as container:
            key_material = {}
            for role in ROLES:
                entry = container.get(role + self.config.extension)
                key_material[role] = entry.size if entry is not None else None

            payload = container.payload_entries(self.config.payload_dir)
            payload_names = {e.name for e in payload}
            key_names = {role + self.config.extension for role in ROLES}
            ignored = [
                e.name for e in container.entries()
                if e.name not in payload_names and e.name not in key_names
            ]

        info = {
            'archive_path': str(path),
            'archive_size': path.stat().st_size,
            'checksum': calculate_file_checksum(str(path)),
            'key_material': key_material,
            'payload': [{'name': e.name, 'size': e.size} for e in payload],
            'payload_size': sum(e.size for e in payload),
            'ignored': ignored,
            'decryptable': all(size is not None for size in key_material.values()),
        }

        if show:
            self._print(info)
        return info

    def _print(self, info: dict):
        def fmt_size(b):
            if b is None:
                return 'missing'
            if b >= 1024 * 1024:
                return f"{b/1024/1024:.2f} MB"
            if b >= 1024:
                return f"{b/1024:.1f} KB"
            return f"{b} B"

        print(f"\n{'='*50}")
        print(f"  Container Inspection")
        print(f"{'='*50}")
        print(f"  File:        {info['archive_path']}")
        print(f"  Size:        {fmt_size(info['archive_size'])}")
        print(f"  SHA-256:     {info['checksum']}")
        print()
        for role, size in info['key_material'].items():
            print(f"  {role + self.config.extension:<12} {fmt_size(size)}")
        print()
        print(f"  Segments:    {len(info['payload'])} ({fmt_size(info['payload_size'])})")
        for i, seg in enumerate(info['payload']):
            print(f"    {i:>4}  {seg['name']}  {fmt_size(seg['size'])}")
        if info['ignored']:
            print(f"  Ignored:     {', '.join(info['ignored'])}")
        print()
        print(f"  Decryptable: {'yes' if info['decryptable'] else 'no (key material missing)'}")
        print(f"{'='*50}\n")


__all__ = ["Inspector"]
