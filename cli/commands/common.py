"""
Shared CLI helpers: key container options and key resolution.
"""
import getpass
from cptdecrypt.keys.keystore import KeyContainerStore


def add_key_arguments(parser):
    parser.add_argument("-k", "--key-container", required=True,
                        help="Name of the key container holding the RSA private key")
    parser.add_argument("--key-dir", default=None,
                        help="Directory of key containers (default: from config)")
    parser.add_argument("--ask-password", action="store_true",
                        help="Prompt for the key container password")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show per-segment details")


def resolve_key(args):
    """Raises KeyContainerError when the container cannot be resolved"""
    password = None
    if args.ask_password:
        password = getpass.getpass("Key container password: ").encode('utf-8')
    return KeyContainerStore(key_dir=args.key_dir).resolve(args.key_container, password=password)
