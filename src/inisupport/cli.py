"""Command line tool for inspecting an INI configuration."""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from .exceptions import ConfigLoadError
from .store import CONFIG_FILE_KEY, ConfigStore

DEFAULT_CONFIG_PATH = "/etc/inisupport.conf"


def _parse_command_line(args: List[str]) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(prog="inisupport-config", description="Inspect an INI configuration file")
    parser.add_argument(
        "overrides",
        nargs="*",
        metavar="KEY=VALUE",
        help="Override in format <section>:<name>=<value>, applied over the file.",
    )
    parser.add_argument("--config", dest="config_file", help=f"Configuration file (sets {CONFIG_FILE_KEY})")
    parser.add_argument(
        "--default-path",
        default=DEFAULT_CONFIG_PATH,
        help="File loaded when no --config is given (default: %(default)s)",
    )
    parser.add_argument("--get", dest="get_key", metavar="KEY", help="Print the value of one key")
    parser.add_argument("--section", help="List the entries of a section")
    parser.add_argument("--key", help="With --section, only list this entry")
    parser.add_argument("--print", dest="print_config", action="store_true", help="Print final configuration")
    return parser.parse_args(args)


def build_store(args: argparse.Namespace) -> ConfigStore:
    """Create, initialize and load a store from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Loaded store

    Raises:
        ConfigLoadError: If the configuration file cannot be loaded
    """
    store = ConfigStore()
    store.initialize()
    if args.config_file:
        store.set(CONFIG_FILE_KEY, args.config_file)
    for override in args.overrides:
        if "=" not in override:
            raise SystemExit(f"inisupport-config: invalid override '{override}', expected KEY=VALUE")
        key, value = override.split("=", 1)
        store.set(key, value)
    store.load(args.default_path)
    return store


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status
    """
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_command_line(argv)

    try:
        store = build_store(args)
    except ConfigLoadError as e:
        logger.error(str(e))
        return 1

    if args.get_key:
        value = store.get(args.get_key)
        if value is None:
            return 1
        print(value)

    if args.section:
        store.get_all(args.section, args.key, lambda key, value: print(f"{key}={'' if value is None else value}"))

    if args.print_config or not (args.get_key or args.section):
        store.dump(sys.stdout)

    return 0
