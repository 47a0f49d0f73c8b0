"""
Configuration file support for bytesexp.

Provides hierarchical configuration loading from:
1. Project config: .bytesexp.toml or bytesexp.toml in the project root
2. User config: ~/.config/bytesexp/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bytesexp.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".bytesexp.toml", "bytesexp.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "bytesexp" / "config.toml"

PRINT_FORMATS = ("canonical", "mach")

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"verbose", "quiet"},
    "parse": {"max_depth", "datum_comments"},
    "print": {"format"},
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    verbose: bool = False
    quiet: bool = False


@dataclass
class ParseConfig:
    """Parser options."""

    max_depth: int = 0  # 0 means unlimited
    datum_comments: bool = False

    @property
    def depth_limit(self) -> int | None:
        """max_depth as the parser expects it (None for unlimited)."""
        return self.max_depth or None


@dataclass
class PrintConfig:
    """Printer options."""

    format: str = "canonical"


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)
    print: PrintConfig = field(default_factory=PrintConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If the file is unreadable or not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


def _check_type(value: Any, expected: type, key: str, source: str) -> Any:
    # bool is an int subclass, but true/false is never a valid depth
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(
            f"Config key '{key}' must be {expected.__name__}, got {type(value).__name__}",
            context={"file": source, "key": key, "value": value},
        )
    return value


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    if "defaults" in data:
        defaults_data = _section(data, "defaults", source)
        _warn_unknown_keys(defaults_data, KNOWN_KEYS["defaults"], "defaults", source)

        for key in ("verbose", "quiet"):
            if key in defaults_data:
                value = _check_type(defaults_data[key], bool, f"defaults.{key}", source)
                setattr(config.defaults, key, value)
                sources[f"defaults.{key}"] = source

    if "parse" in data:
        parse_data = _section(data, "parse", source)
        _warn_unknown_keys(parse_data, KNOWN_KEYS["parse"], "parse", source)

        if "max_depth" in parse_data:
            max_depth = _check_type(parse_data["max_depth"], int, "parse.max_depth", source)
            if max_depth < 0:
                raise ConfigError(
                    "Config key 'parse.max_depth' must not be negative",
                    context={"file": source, "value": max_depth},
                    suggestions=["Use 0 for no depth limit"],
                )
            config.parse.max_depth = max_depth
            sources["parse.max_depth"] = source
        if "datum_comments" in parse_data:
            config.parse.datum_comments = _check_type(
                parse_data["datum_comments"], bool, "parse.datum_comments", source
            )
            sources["parse.datum_comments"] = source

    if "print" in data:
        print_data = _section(data, "print", source)
        _warn_unknown_keys(print_data, KNOWN_KEYS["print"], "print", source)

        if "format" in print_data:
            fmt = print_data["format"]
            if fmt not in PRINT_FORMATS:
                raise ConfigError(
                    f"Unknown print format {fmt!r}",
                    context={"file": source, "key": "print.format"},
                    suggestions=[f"Use one of: {', '.join(PRINT_FORMATS)}"],
                )
            config.print.format = fmt
            sources["print.format"] = source


def _section(data: dict[str, Any], name: str, source: str) -> dict[str, Any]:
    """Return a config section, which must be a TOML table."""
    section = data[name]
    if not isinstance(section, dict):
        raise ConfigError(
            f"Config section '{name}' must be a table",
            context={"file": source, "value": section},
            suggestions=[f"Write the options under a [{name}] header"],
        )
    return section


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# bytesexp configuration file
# Place as .bytesexp.toml in project root or ~/.config/bytesexp/config.toml for user defaults

[defaults]
# Enable verbose (debug) logging by default
# verbose = false

# Only log warnings and errors by default
# quiet = false

[parse]
# Maximum list nesting depth, 0 for no limit
# max_depth = 0

# Treat "#;" as a comment covering the next datum
# datum_comments = false

[print]
# Output form: canonical (space separated) or mach (compact)
# format = "canonical"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
