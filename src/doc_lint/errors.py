"""
Structured error types for doc-lint.

Errors here are reserved for problems that stop a lint run before it can
produce a report: a corpus root that does not exist, a configuration file
that does not parse, a document the scanner was asked to read directly and
could not. Problems *inside* the corpus (broken links, unclosed fences) are
never exceptions; they become findings.

Manifesto:
    - **Typed hierarchy:** Config, corpus and parse failures are distinct
    - **Rich context:** Errors carry the path and key that caused them
    - **Error chaining:** The original OSError/YAMLError is kept as cause

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                    DocLintError                        │
        │          (category, context, cause)                    │
        ├──────────────────────────────────────────────────────┤
        │  ConfigError        CorpusError      DocumentReadError │
        │  (CONFIG)           (SOURCE)         (PARSE)           │
        │       │                                                │
        │  InvalidConfigError                                    │
        └──────────────────────────────────────────────────────┘

Examples:
    >>> error = CorpusError("Corpus root does not exist").with_context(path="docs/")
    >>> error.context.path
    'docs/'
    >>> error.to_dict()["category"]
    'SOURCE'

Guardrails:
    ❌ DON'T: Raise for a broken link inside the corpus
    ✅ DO: Yield a Finding from a rule

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, doc-lint

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"             # Bad config file, unknown keys, bad values
    SOURCE = "SOURCE"             # Corpus root missing or not a directory
    PARSE = "PARSE"               # Document could not be read or decoded
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        path: File or directory the error refers to
        key: Configuration key, when the error is about configuration
        rule: Rule code, when a rule triggered the error
        metadata: Anything else worth logging
    """

    path: str | None = None
    key: str | None = None
    rule: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize all non-None fields, flattening metadata."""
        result: dict[str, Any] = {}
        for name in ("path", "key", "rule"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        result.update(self.metadata)
        return result


class DocLintError(Exception):
    """
    Base class for all doc-lint errors.

    Subclasses set ``default_category``; callers may override it.

    Examples:
        >>> try:
        ...     open("missing.yaml")
        ... except OSError as e:
        ...     error = DocLintError("Could not open config", cause=e)
        >>> error.cause
        FileNotFoundError(...)
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DocLintError:
        """
        Attach path, key or rule context and return self.

        Usage:
            raise CorpusError("Not a directory").with_context(path=str(root))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flatten the error into fields for a structured log event."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DocLintError):
    """Configuration file could not be loaded or is malformed."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """A configuration value has the wrong type or is out of range."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")
        self.context.key = key


# =============================================================================
# CORPUS ERRORS
# =============================================================================


class CorpusError(DocLintError):
    """The documentation corpus cannot be loaded at all."""

    default_category = ErrorCategory.SOURCE


class DocumentReadError(DocLintError):
    """A single Markdown document could not be read or decoded."""

    default_category = ErrorCategory.PARSE


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DocLintError",
    "ConfigError",
    "InvalidConfigError",
    "CorpusError",
    "DocumentReadError",
]
