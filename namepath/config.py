"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Project config (.namepath/config.yaml)
  2. User config (~/.namepath/config.yaml)
  3. Environment variables
  4. Defaults
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .core.dictionary import DEFAULT_DOCSPACE_KINDS, TagDictionary


DEFAULT_MAX_FILE_SIZE = 300_000  # 300KB
DEFAULT_EXTENSIONS = ['.js', '.jsx', '.mjs', '.cjs']

OUTPUT_FORMATS = ("table", "json")


def _split_list(value: str) -> List[str]:
    """Parse a comma separated setting into a clean list."""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class ResolverConfig:
    """Name resolution settings."""
    docspace_kinds: List[str] = field(default_factory=lambda: list(DEFAULT_DOCSPACE_KINDS))

    def build_dictionary(self) -> TagDictionary:
        return TagDictionary(self.docspace_kinds)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        for kind in self.docspace_kinds:
            if not kind or not kind.replace('-', '').replace('_', '').isalnum():
                return f"Invalid docspace kind '{kind}'. Use letters, digits, '-' or '_'"
        return None


@dataclass
class ParsingConfig:
    """Source parsing settings."""
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    def matches_extension(self, ext: str) -> bool:
        return ext.lower() in self.extensions

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.max_file_size <= 0:
            return f"max_file_size must be positive, got {self.max_file_size}"
        for ext in self.extensions:
            if not ext.startswith('.'):
                return f"Extension '{ext}' must start with '.'"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    format: str = "table"  # "table" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.format not in OUTPUT_FORMATS:
            return f"Unknown format '{self.format}'. Valid: {', '.join(OUTPUT_FORMATS)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "resolver": {
                "docspace_kinds": list(self.resolver.docspace_kinds)
            },
            "parsing": {
                "max_file_size": self.parsing.max_file_size,
                "extensions": list(self.parsing.extensions)
            },
            "display": {
                "format": self.display.format
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        resolver_data = data.get("resolver", {})
        parsing_data = data.get("parsing", {})
        display_data = data.get("display", {})

        return cls(
            resolver=ResolverConfig(
                docspace_kinds=list(resolver_data.get("docspace_kinds", DEFAULT_DOCSPACE_KINDS))
            ),
            parsing=ParsingConfig(
                max_file_size=int(parsing_data.get("max_file_size", DEFAULT_MAX_FILE_SIZE)),
                extensions=list(parsing_data.get("extensions", DEFAULT_EXTENSIONS))
            ),
            display=DisplayConfig(
                format=display_data.get("format", "table")
            )
        )

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.resolver, self.parsing, self.display):
            error = section.validate()
            if error:
                return error
        return None


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Project config (.namepath/config.yaml)
      2. User config (~/.namepath/config.yaml)
      3. Environment (NAMEPATH_DOCSPACE_KINDS, NAMEPATH_FORMAT)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".namepath"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".namepath"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: Environment
        if os.environ.get("NAMEPATH_DOCSPACE_KINDS"):
            config_data.setdefault("resolver", {})["docspace_kinds"] = _split_list(
                os.environ["NAMEPATH_DOCSPACE_KINDS"]
            )
        if os.environ.get("NAMEPATH_FORMAT"):
            config_data.setdefault("display", {})["format"] = os.environ["NAMEPATH_FORMAT"]

        # Layer 2: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 3: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError, AttributeError):
            config = Config()  # Ignore malformed values

        self._config = config
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        """Read a YAML mapping; missing or malformed files count as empty."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}
        return data if isinstance(data, dict) else {}

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "display.format")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.format')"

        section, setting = parts

        if section == "resolver":
            if setting == "docspace_kinds":
                config.resolver.docspace_kinds = _split_list(value)
            else:
                return f"Unknown resolver setting: {setting}. Valid: docspace_kinds"
            error = config.resolver.validate()
            if error:
                return error

        elif section == "parsing":
            if setting == "max_file_size":
                if not value.isdigit():
                    return f"max_file_size must be a number, got '{value}'"
                config.parsing.max_file_size = int(value)
            elif setting == "extensions":
                config.parsing.extensions = _split_list(value)
            else:
                return f"Unknown parsing setting: {setting}. Valid: max_file_size, extensions"
            error = config.parsing.validate()
            if error:
                return error

        elif section == "display":
            if setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: format"
            error = config.display.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: resolver, parsing, display"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "resolver":
            if setting == "docspace_kinds":
                return ",".join(config.resolver.docspace_kinds)
        elif section == "parsing":
            if setting == "max_file_size":
                return str(config.parsing.max_file_size)
            elif setting == "extensions":
                return ",".join(config.parsing.extensions)
        elif section == "display":
            if setting == "format":
                return config.display.format

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()

        lines = [
            "Configuration:",
            "",
            "Resolver:",
            f"  Docspace kinds: {', '.join(config.resolver.docspace_kinds) or '(none)'}",
            "",
            "Parsing:",
            f"  Max file size: {config.parsing.max_file_size}",
            f"  Extensions: {', '.join(config.parsing.extensions)}",
            "",
            "Display:",
            f"  Format: {config.display.format}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
