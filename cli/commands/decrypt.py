"""
cptdecrypt CLI - Decrypt Command
Usage: python -m cli.commands.decrypt input.cpt -k MyContainer [-o output.dat]
"""

import argparse
import sys
from pathlib import Path
from cptdecrypt.decryptor.decryptor import Decryptor
from cptdecrypt.errors import DecryptError
from cptdecrypt.utils.logger import logger, set_verbose
from .common import add_key_arguments, resolve_key


def main(argv=None):
    parser = argparse.ArgumentParser(description="Decrypt a .cpt container into its plaintext file")
    parser.add_argument("input", help="Path to the container")
    parser.add_argument("-o", "--output", help="Plaintext file to write (default: <input stem>.dat next to the input)")
    parser.add_argument("-f", "--force", action="store_true", help="Overwrite an existing output file")
    add_key_arguments(parser)

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error(f"Container not found: {input_path}")
        sys.exit(1)

    try:
        private_key = resolve_key(args)
        decryptor = Decryptor(private_key)

        out_path = Path(args.output) if args.output else decryptor.output_path_for(input_path)
        if out_path.exists() and not args.force:
            logger.error(f"Output file exists: {out_path}")
            print("Use -f or --force to overwrite.")
            sys.exit(1)

        result = decryptor.decrypt_file(input_path, out_path)
        print(f"\n✅ Success! {result['segments']} segment(s), "
              f"{result['bytes_written']} bytes → {result['output_path']}")

    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user.")
        sys.exit(130)
    except DecryptError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
