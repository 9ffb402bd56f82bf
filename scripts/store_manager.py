#!/usr/bin/env python3
"""Command line access to a configured binary store.

Builds a StoreRegistry from BINARY_STORE_* environment variables (or a .env
file) and runs one store operation against the default provider, or against
the provider named with --provider.

USAGE:
    store_manager.py providers
    store_manager.py save <name> <file> [--content-type TYPE]
    store_manager.py load <name> [--output FILE]
    store_manager.py exists <name>
    store_manager.py delete <name>

EXIT CODES:
    0  Success (object saved, found, existed or deleted)
    1  Object not found / did not exist
    2  Configuration, validation or backend error

ENVIRONMENT (prefix selectable with --prefix):
    BINARY_STORE_PROVIDERS                  Comma-separated provider names
    BINARY_STORE_DEFAULT_PROVIDER           Default provider name
    BINARY_STORE_PROVIDER_<NAME>_TYPE       filesystem | blob
    BINARY_STORE_PROVIDER_<NAME>_<PARAM>    Provider parameter (FOLDER_NAME, ...)
    BINARY_STORE_CONNECTION_STRING_<NAME>   Named connection string
    BINARY_STORE_APP_ROOT                   Base for "~/" folder names
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from azure.core.exceptions import AzureError

from binary_store.config import DEFAULT_PREFIX, StoreSettings
from binary_store.exceptions import StoreError
from binary_store.logger import create_logger
from binary_store.storage import StoreProvider, StoreRegistry

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def create_registry(prefix: str, env_file: Optional[str], quiet: bool = True) -> StoreRegistry:
    """Build the registry from environment configuration.

    Every provider shares one "store-manager" logger. Quiet mode raises its
    level so that only critical entries reach stdout next to command output.

    Args:
        prefix: Environment variable prefix
        env_file: Optional .env file path
        quiet: If True, suppress provider logging output
    """
    logger = create_logger(name="store-manager", level=logging.CRITICAL if quiet else logging.DEBUG)
    settings = StoreSettings.from_env(prefix=prefix, env_file=env_file)
    return StoreRegistry.from_settings(settings, logger=logger)


def select_provider(registry: StoreRegistry, name: Optional[str]) -> StoreProvider:
    if name is None:
        return registry.default
    provider = registry.get(name)
    if provider is None:
        raise StoreError(
            "UNKNOWN_PROVIDER",
            f"Store provider '{name}' is not configured.",
            {"providers": list(registry)},
        )
    return provider


# ============================================================================
# COMMANDS
# ============================================================================


def cmd_providers(registry: StoreRegistry) -> int:
    """List configured providers."""
    print(f"\n{'Name':<20} {'Type':<28} {'Default':<8}")
    print("-" * 58)
    for name, provider in registry.providers.items():
        default = "yes" if provider is registry.default else ""
        print(f"{name:<20} {type(provider).__name__:<28} {default:<8}")
    print(f"\nTotal: {len(registry)} providers")
    return EXIT_OK


def cmd_save(provider: StoreProvider, name: str, source: str, content_type: Optional[str]) -> int:
    """Save a local file as an object."""
    with open(source, "rb") as f:
        provider.save(name, f, content_type)
    print(f"Saved {source} as '{name}' on provider '{provider.name}'")
    return EXIT_OK


def cmd_load(provider: StoreProvider, name: str, output: Optional[str]) -> int:
    """Load an object to a file or stdout."""
    result = provider.load(name)
    if not result.found or result.content is None:
        print(f"Object '{name}' not found", file=sys.stderr)
        return EXIT_NOT_FOUND

    if output:
        Path(output).write_bytes(result.content)
        print(f"Wrote {len(result.content)} bytes ({result.content_type}) to {output}")
    else:
        sys.stdout.buffer.write(result.content)
        sys.stdout.buffer.flush()
    return EXIT_OK


def cmd_exists(provider: StoreProvider, name: str) -> int:
    if provider.exists(name):
        print(f"Object '{name}' exists")
        return EXIT_OK
    print(f"Object '{name}' does not exist")
    return EXIT_NOT_FOUND


def cmd_delete(provider: StoreProvider, name: str) -> int:
    if provider.delete(name):
        print(f"Deleted '{name}'")
        return EXIT_OK
    print(f"Object '{name}' did not exist")
    return EXIT_NOT_FOUND


# ============================================================================
# MAIN
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Save, load, check and delete objects in a configured binary store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  Save a file with an explicit content type:
    %(prog)s save docs/readme.txt ./README.txt --content-type text/plain

  Load from a non-default provider:
    %(prog)s --provider archive load docs/readme.txt --output /tmp/readme.txt
        """,
    )
    parser.add_argument("--prefix", default=DEFAULT_PREFIX, help="Environment prefix. Default: %(default)s")
    parser.add_argument("--env-file", default=None, help="Optional .env file to read")
    parser.add_argument("--provider", default=None, help="Provider name (default provider if omitted)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show provider logging output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("providers", help="List configured providers")

    save = subparsers.add_parser("save", help="Save a local file as an object")
    save.add_argument("name", help="Object name (e.g., docs/readme.txt)")
    save.add_argument("file", help="Local file to upload")
    save.add_argument("--content-type", default=None, help="MIME type (provider default if omitted)")

    load = subparsers.add_parser("load", help="Load an object")
    load.add_argument("name", help="Object name")
    load.add_argument("--output", "-o", default=None, help="Write to file instead of stdout")

    exists = subparsers.add_parser("exists", help="Check whether an object exists")
    exists.add_argument("name", help="Object name")

    delete = subparsers.add_parser("delete", help="Delete an object")
    delete.add_argument("name", help="Object name")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        registry = create_registry(args.prefix, args.env_file, quiet=not args.verbose)

        if args.command == "providers":
            return cmd_providers(registry)

        provider = select_provider(registry, args.provider)
        if args.command == "save":
            return cmd_save(provider, args.name, args.file, args.content_type)
        elif args.command == "load":
            return cmd_load(provider, args.name, args.output)
        elif args.command == "exists":
            return cmd_exists(provider, args.name)
        elif args.command == "delete":
            return cmd_delete(provider, args.name)
    except (StoreError, OSError, AzureError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
