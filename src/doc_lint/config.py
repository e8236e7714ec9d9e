"""
Configuration for doc-lint.

Two layers:

* ``DocLintConfig`` - what to check in a corpus. Loaded from a
  ``.doclint.yaml`` at the corpus root (or ``--config``), otherwise the
  defaults match the standards corpus layout: a root ``README.md`` and one
  directory per topic with an ``Images/`` folder.
* ``DocLintSettings`` - process settings read from ``DOCLINT_*``
  environment variables (log level, JSON logs, default config file).
"""

from dataclasses import dataclass, field, fields
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from doc_lint.errors import ConfigError, InvalidConfigError

CONFIG_FILENAME = ".doclint.yaml"

SEVERITY_LEVELS = ("error", "warning", "info")
FAIL_ON_LEVELS = SEVERITY_LEVELS + ("never",)


@dataclass
class DocLintConfig:
    """Configuration for a lint run.

    Attributes:
        index_file: Name of the root index document
        images_dir: Name of the per-topic image folder
        markdown_extensions: Suffixes treated as Markdown documents
        image_extensions: Suffixes treated as images
        skip_patterns: Glob patterns matched against each path component
        disabled_rules: Rule codes or names to skip
        severity_overrides: Rule code or name -> severity
        check_anchors: Verify ``#fragment`` links against headings
        fail_on: Lowest severity that makes the run fail
    """

    index_file: str = "README.md"
    images_dir: str = "Images"

    markdown_extensions: list[str] = field(default_factory=lambda: [".md", ".markdown"])
    image_extensions: list[str] = field(default_factory=lambda: [
        ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp",
    ])

    # File scanning
    skip_patterns: list[str] = field(default_factory=lambda: [
        ".git", ".github", "node_modules", "Pods", "vendor", ".build", "build",
    ])

    # Rule selection
    disabled_rules: list[str] = field(default_factory=list)
    severity_overrides: dict[str, str] = field(default_factory=dict)

    check_anchors: bool = True
    fail_on: str = "error"

    def __post_init__(self):
        """Normalize and validate values."""
        for key in ("index_file", "images_dir"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value:
                raise InvalidConfigError(key, value, f"{key} must be a non-empty string")

        for key in ("markdown_extensions", "image_extensions", "skip_patterns", "disabled_rules"):
            value = getattr(self, key)
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise InvalidConfigError(key, value, f"{key} must be a list of strings")

        for key in ("markdown_extensions", "image_extensions"):
            if not getattr(self, key):
                raise InvalidConfigError(key, [], f"{key} must not be empty")

        if not isinstance(self.severity_overrides, dict):
            raise InvalidConfigError(
                "severity_overrides",
                self.severity_overrides,
                "severity_overrides must be a mapping of rule to severity",
            )

        if not isinstance(self.check_anchors, bool):
            raise InvalidConfigError(
                "check_anchors", self.check_anchors, "check_anchors must be true or false"
            )

        self.markdown_extensions = [self._dotted(ext) for ext in self.markdown_extensions]
        self.image_extensions = [self._dotted(ext) for ext in self.image_extensions]

        self.fail_on = str(self.fail_on).lower()
        if self.fail_on not in FAIL_ON_LEVELS:
            raise InvalidConfigError("fail_on", self.fail_on)

        normalized = {}
        for rule, severity in self.severity_overrides.items():
            severity = str(severity).lower()
            if severity not in SEVERITY_LEVELS:
                raise InvalidConfigError(f"severity_overrides.{rule}", severity)
            normalized[rule] = severity
        self.severity_overrides = normalized

    @staticmethod
    def _dotted(ext: str) -> str:
        ext = ext.lower()
        return ext if ext.startswith(".") else f".{ext}"

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "DocLintConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            DocLintConfig instance

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {yaml_path}: {e}", cause=e).with_context(
                path=str(yaml_path)
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {yaml_path}: {e}", cause=e).with_context(
                path=str(yaml_path)
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {yaml_path} must contain a mapping").with_context(
                path=str(yaml_path)
            )

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocLintConfig":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            DocLintConfig instance

        Raises:
            ConfigError: On unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def discover(cls, root: Path) -> "DocLintConfig":
        """Load ``.doclint.yaml`` from the corpus root, or return defaults."""
        candidate = Path(root) / CONFIG_FILENAME
        if candidate.is_file():
            return cls.from_yaml(candidate)
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Configuration as dictionary
        """
        return {
            "index_file": self.index_file,
            "images_dir": self.images_dir,
            "markdown_extensions": list(self.markdown_extensions),
            "image_extensions": list(self.image_extensions),
            "skip_patterns": list(self.skip_patterns),
            "disabled_rules": list(self.disabled_rules),
            "severity_overrides": dict(self.severity_overrides),
            "check_anchors": self.check_anchors,
            "fail_on": self.fail_on,
        }

    def should_skip(self, relative_path: Path) -> bool:
        """Check if a path inside the corpus should be skipped.

        Args:
            relative_path: Path relative to the corpus root

        Returns:
            True if any path component matches a skip pattern
        """
        return any(
            fnmatch(part, pattern)
            for part in Path(relative_path).parts
            for pattern in self.skip_patterns
        )

    def is_markdown(self, path: Path) -> bool:
        return Path(path).suffix.lower() in self.markdown_extensions

    def is_image(self, path: Path) -> bool:
        return Path(path).suffix.lower() in self.image_extensions

    def is_rule_enabled(self, code: str, name: str) -> bool:
        return code not in self.disabled_rules and name not in self.disabled_rules

    def severity_for(self, code: str, name: str, default: str) -> str:
        """Return the configured severity for a rule, by code first, then name."""
        return self.severity_overrides.get(code, self.severity_overrides.get(name, default))


class DocLintSettings(BaseSettings):
    """Process-level settings read from the environment.

    Fields
    ──────
    log_level    : Structlog log level
    log_json     : Force JSON (true) or console (false) logs; auto when unset
    config_file  : Config file used when ``--config`` is not given
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCLINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"
    log_json: bool | None = None
    config_file: Path | None = None
