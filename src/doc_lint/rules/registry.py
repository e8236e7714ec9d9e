"""Rule registry for registering and discovering lint rules.

Manifesto:
    Rules register themselves by code. The orchestrator and the CLI look
    them up by code or name without importing each rule module by hand.

Tags:
    doc-lint, rules, registry, lookup
"""

import importlib

from doc_lint.config import DocLintConfig
from doc_lint.errors import InvalidConfigError
from doc_lint.logging import get_logger
from doc_lint.rules.base import Rule

logger = get_logger(__name__)

# Global rule registry, keyed by code
_registry: dict[str, type[Rule]] = {}
_loaded: bool = False

_RULE_MODULES = (
    "doc_lint.rules.links",
    "doc_lint.rules.images",
    "doc_lint.rules.structure",
    "doc_lint.rules.layout",
)


def register_rule(cls: type[Rule]) -> type[Rule]:
    """Class decorator registering a rule under its code."""
    if not cls.code or not cls.name:
        raise ValueError(f"Rule {cls.__name__} must define code and name")
    if cls.code in _registry and _registry[cls.code] is not cls:
        raise ValueError(f"Rule '{cls.code}' is already registered")
    _registry[cls.code] = cls
    logger.debug("rule_registered", code=cls.code, name=cls.name)
    return cls


def _ensure_loaded() -> None:
    """Import the built-in rule modules once (lazy initialization)."""
    global _loaded
    if not _loaded:
        for module in _RULE_MODULES:
            importlib.import_module(module)
        _loaded = True


def get_rule_class(code_or_name: str) -> type[Rule]:
    """Get a rule class by code (``DL001``) or name (``broken-link``)."""
    _ensure_loaded()
    if code_or_name in _registry:
        return _registry[code_or_name]
    for cls in _registry.values():
        if cls.name == code_or_name:
            return cls
    available = ", ".join(sorted(_registry))
    raise KeyError(f"Rule '{code_or_name}' not found. Available: {available}")


def list_rules() -> list[type[Rule]]:
    """All registered rule classes, ordered by code."""
    _ensure_loaded()
    return [_registry[code] for code in sorted(_registry)]


def _check_configured_rules(config: DocLintConfig) -> None:
    """Reject disabled or overridden rules that do not exist."""
    for key, names in (
        ("disabled_rules", config.disabled_rules),
        ("severity_overrides", list(config.severity_overrides)),
    ):
        for name in names:
            try:
                get_rule_class(name)
            except KeyError as e:
                raise InvalidConfigError(key, name, f"Unknown rule '{name}' in {key}") from e


def get_rules(
    config: DocLintConfig | None = None,
    only: list[str] | None = None,
) -> list[Rule]:
    """Instantiate the enabled rules.

    Args:
        config: Configuration supplying disabled rules and severity overrides
        only: Restrict to these codes or names

    Returns:
        Rule instances, ordered by code

    Raises:
        KeyError: If a rule in ``only`` is not registered
        InvalidConfigError: If the config names a rule that is not registered
    """
    config = config or DocLintConfig()
    _check_configured_rules(config)
    if only:
        classes = sorted({get_rule_class(key) for key in only}, key=lambda c: c.code)
    else:
        classes = list_rules()
    return [
        cls(config) for cls in classes
        if config.is_rule_enabled(cls.code, cls.name)
    ]

