"""
Command-line interface for Keygen Verifier
Validates license keys and inspects the tamper-evident response cache
"""

import argparse
import logging
import os
import sys
from typing import Optional

from . import __version__
from .cache.storage import TamperEvidentCache
from .config import VerifierConfig, load_config_from_env, load_config_from_file
from .exceptions import CacheIntegrityError, KeygenVerifierError, PayloadError
from .payload import VerifiedPayload
from .validator import LicenseValidator, VALIDATE_CACHE_KEY
from .verification.verifier import ResponseSignatureVerifier

LOG_FORMAT = "[%(levelname)s] [%(name)s] %(message)s"
LICENSE_KEY_ENV = "KEYGEN_LICENSE_KEY"


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='keygen-verify',
        description='Validate license keys against a signing issuer with a tamper-evident cache'
    )
    
    parser.add_argument(
        '--version',
        action='version',
        version=f'Keygen Verifier {__version__}'
    )
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--account-id', help='Issuer account identifier')
    parser.add_argument('--public-key', help='Issuer Ed25519 public key (hex)')
    parser.add_argument('--host', help='Issuer host used in the signing string')
    parser.add_argument('--api-url', help='API base URL (default: https://HOST)')
    parser.add_argument('--cache-dir', help='Directory for cached responses')
    
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors')
    
    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    
    setup_validate_parser(subparsers)
    setup_cache_parser(subparsers)
    
    return parser


def setup_validate_parser(subparsers):
    """Setup license validation subcommand."""
    validate_parser = subparsers.add_parser('validate', help='Validate a license key')
    validate_parser.add_argument(
        'license_key',
        nargs='?',
        help=f'License key to validate (default: ${LICENSE_KEY_ENV})'
    )
    validate_parser.add_argument(
        '--no-cache',
        action='store_true',
        help='Skip the cache and always ask the server'
    )


def setup_cache_parser(subparsers):
    """Setup cache management subcommands."""
    cache_parser = subparsers.add_parser('cache', help='Response cache management')
    cache_subparsers = cache_parser.add_subparsers(dest='cache_command', help='Cache operations')
    
    verify_parser = cache_subparsers.add_parser('verify', help='Re-verify a cached response offline')
    verify_parser.add_argument('--key', default=VALIDATE_CACHE_KEY, help='Cache key (default: validate)')
    
    clear_parser = cache_subparsers.add_parser('clear', help='Delete cached responses')
    clear_parser.add_argument('--key', help='Cache key to delete (default: all)')


def configure_logging(args) -> None:
    """Configure root logging from verbosity flags."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def resolve_config(args) -> VerifierConfig:
    """
    Build configuration from file, environment and command-line flags,
    in increasing order of precedence.
    """
    base = load_config_from_file(args.config) if args.config else VerifierConfig()
    config = load_config_from_env(base=base)
    return config.with_overrides(
        account_id=args.account_id,
        public_key=args.public_key,
        host=args.host,
        base_url=args.api_url,
        cache_dir=args.cache_dir,
    )


def print_validation(payload: VerifiedPayload) -> None:
    """Print the license validity line for a verified payload."""
    if payload.is_valid:
        print(f"License is valid! detail={payload.detail} code={payload.code}")
    else:
        print(f"License invalid! detail={payload.detail} code={payload.code}")


def handle_validate_command(args, config: VerifierConfig) -> int:
    """Handle license validation command."""
    license_key = args.license_key or os.environ.get(LICENSE_KEY_ENV)
    if not license_key:
        print(f"Error: a license key argument or ${LICENSE_KEY_ENV} is required", file=sys.stderr)
        return 1
    
    validator = LicenseValidator(config)
    try:
        result = validator.validate(license_key, use_cache=not args.no_cache)
    finally:
        validator.close()
    
    if not result.ok:
        status = f" status={result.http_status}" if result.http_status else ""
        print(f"Error: {result.message} ({result.failure.value}{status})", file=sys.stderr)
        return 1
    
    print_validation(result.payload)
    return 0


def handle_cache_command(args, config: VerifierConfig) -> int:
    """Handle cache management commands."""
    verifier = ResponseSignatureVerifier(config.public_key, config.host)
    cache = TamperEvidentCache(verifier, config.cache_dir)
    
    if args.cache_command == 'verify':
        return handle_cache_verify_command(args, cache)
    elif args.cache_command == 'clear':
        return handle_cache_clear_command(args, cache)
    else:
        print("Error: No cache command specified", file=sys.stderr)
        return 1


def handle_cache_verify_command(args, cache: TamperEvidentCache) -> int:
    """Handle offline re-verification of a cached response."""
    try:
        payload = cache.get(args.key)
    except CacheIntegrityError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except PayloadError as e:
        print(f"Error: cached payload is malformed: {e}", file=sys.stderr)
        return 1
    
    if payload is None:
        print(f"No cached record for key '{args.key}'", file=sys.stderr)
        return 1
    
    print(f"Cached record '{args.key}' verified")
    print_validation(payload)
    return 0


def handle_cache_clear_command(args, cache: TamperEvidentCache) -> int:
    """Handle deleting cached responses."""
    if args.key:
        removed = 1 if cache.delete(args.key) else 0
    else:
        removed = cache.clear()
    
    print(f"Removed {removed} cached record(s)")
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI
    
    Args:
        argv: Command line arguments (None to use sys.argv)
        
    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]
    
    parser = create_parser()
    args = parser.parse_args(argv)
    
    configure_logging(args)
    
    try:
        config = resolve_config(args)
        
        if args.command == 'validate':
            return handle_validate_command(args, config)
        elif args.command == 'cache':
            return handle_cache_command(args, config)
        else:
            # No command specified, show help
            parser.print_help()
            return 1
        
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except KeygenVerifierError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
