"""
cptdecrypt CLI - Batch Decrypt Command
Usage: python -m cli.commands.decrypt_batch input_dir/ -k MyContainer [-o output_dir/] [options]
"""
import argparse
import sys
from pathlib import Path
from cptdecrypt.decryptor.batch_decryptor import BatchDecryptor
from cptdecrypt.errors import DecryptError
from cptdecrypt.utils.logger import logger, set_verbose
from .common import add_key_arguments, resolve_key


def main(argv=None):
    parser = argparse.ArgumentParser(description="Batch decrypt .cpt containers")
    parser.add_argument("input", help="Input directory containing containers")
    parser.add_argument("-o", "--output", help="Output directory (default: next to each container)")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Recursively decrypt subdirectories")
    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="Number of parallel workers (default: auto)")
    parser.add_argument("-f", "--force", action="store_true",
                        help="Write into a non-empty output directory")
    add_key_arguments(parser)

    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    input_dir = Path(args.input)
    if not input_dir.is_dir():
        logger.error(f"Input directory not found: {input_dir}")
        sys.exit(1)

    output_dir = Path(args.output) if args.output else None
    if output_dir and output_dir.exists() and any(output_dir.iterdir()) and not args.force:
        logger.error(f"Output directory is not empty: {output_dir}")
        print("Use -f or --force to write into it.")
        sys.exit(1)

    try:
        private_key = resolve_key(args)
        batch = BatchDecryptor(private_key, max_workers=args.workers)

        summary = batch.decrypt_directory(
            input_dir=str(input_dir),
            output_dir=str(output_dir) if output_dir else None,
            recursive=args.recursive
        )

        if summary['failed'] > 0:
            print(f"\n{summary['failed']} file(s) failed:")
            for f in summary['failures']:
                print(f"   {f['file']}: {f['error_type']}: {f['error']}")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nBatch operation cancelled.")
        sys.exit(130)
    except DecryptError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
