"""
cptdecrypt CLI - Inspect Command
Usage: python -m cli.commands.inspect input.cpt
"""
import argparse
import sys
from pathlib import Path
from cptdecrypt.errors import ArchiveFormatError
from cptdecrypt.tools.inspector import Inspector
from cptdecrypt.utils.logger import logger


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Inspect a .cpt container without decrypting"
    )
    parser.add_argument("input", help="Path to the container")

    args = parser.parse_args(argv)

    path = Path(args.input)
    if not path.exists():
        logger.error(f"Container not found: {path}")
        sys.exit(1)

    try:
        info = Inspector().inspect(str(path))
    except (ValueError, ArchiveFormatError) as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Inspection failed: {e}")
        sys.exit(1)

    if not info['decryptable']:
        sys.exit(1)


if __name__ == "__main__":
    main()
