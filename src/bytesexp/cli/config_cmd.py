"""
Config command for the bytesexp CLI.

Usage:
    bytesexp config --show     Show effective configuration with sources
    bytesexp config --init     Create template config file
    bytesexp config --paths    Show config file paths
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from bytesexp import config as config_module
from bytesexp.config import CONFIG_FILENAMES, Config, generate_template, get_config_paths


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the config command's arguments."""
    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument(
        "--paths",
        action="store_true",
        help="Show config file paths",
    )
    parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/bytesexp/config.toml) for --init",
    )


def run(args: argparse.Namespace, config: Config) -> int:
    """Run the config command."""
    if args.init:
        return _init_config(args.user)
    if args.paths:
        return _show_paths()
    return _show_config(config)


def _show_config(config: Config) -> int:
    """Show effective configuration with sources."""
    print("# Effective bytesexp configuration")
    print()

    print("[defaults]")
    _print_value("verbose", config.defaults.verbose, config.get_source("defaults.verbose"))
    _print_value("quiet", config.defaults.quiet, config.get_source("defaults.quiet"))
    print()

    print("[parse]")
    _print_value("max_depth", config.parse.max_depth, config.get_source("parse.max_depth"))
    _print_value(
        "datum_comments", config.parse.datum_comments, config.get_source("parse.datum_comments")
    )
    print()

    print("[print]")
    _print_value("format", config.print.format, config.get_source("print.format"))

    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    else:
        formatted = str(value)

    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print(f"User config: {config_module.USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = config_module.USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    target.write_text(generate_template())
    print(f"Created config template: {target}")
    return 0
