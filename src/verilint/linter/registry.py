"""Rule registry for verilint.

A ``RuleRegistry`` is an explicit object: nothing registers itself on
import.  The host application builds one at startup, usually through
``default_registry()``, and may add its own rules or load third-party
rules declared as entry-points under the ``verilint.rules`` group.

Example
-------
Register a custom rule::

    from verilint.linter.registry import default_registry
    from verilint.linter.rule import TokenStreamLintRule

    registry = default_registry()

    @registry.register()
    class NoTabsRule(TokenStreamLintRule):
        ...

Load installed plugins via entry-points::

    registry.load_entrypoints("verilint.rules")

Declared in a plugin's ``pyproject.toml`` as::

    [project.entry-points."verilint.rules"]
    no-tabs = "my_package.rules:NoTabsRule"
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable, Iterator

from verilint.linter.rule import TokenStreamLintRule
from verilint.linter.status import LintRuleDescriptor

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "verilint.rules"

RuleClass = type[TokenStreamLintRule]


class RuleNotFoundError(KeyError):
    """Raised when a requested rule name is not in the registry."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.rule_name = name
        self.available = available
        super().__init__(
            f"Rule {name!r} is not registered. "
            f"Available rules: {', '.join(available) or 'none'}."
        )


class RuleAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str) -> None:
        self.rule_name = name
        super().__init__(
            f"Rule {name!r} is already registered. "
            "Use a unique name or explicitly deregister the existing entry first."
        )


class RuleRegistry:
    """Name -> rule class mapping.

    Rules are keyed by their descriptor name unless a name is given
    explicitly.
    """

    def __init__(self) -> None:
        self._rules: dict[str, RuleClass] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str | None = None) -> Callable[[RuleClass], RuleClass]:
        """Return a class decorator that registers the decorated rule.

        Parameters
        ----------
        name:
            Registry key; defaults to ``cls.get_descriptor().name``.

        Raises
        ------
        RuleAlreadyRegisteredError
            If the name is already in use.
        TypeError
            If the decorated class does not subclass ``TokenStreamLintRule``.
        """

        def decorator(cls: RuleClass) -> RuleClass:
            self.register_class(cls, name)
            return cls

        return decorator

    def register_class(self, cls: RuleClass, name: str | None = None) -> str:
        """Register ``cls`` directly and return the key it was stored under.

        Raises
        ------
        RuleAlreadyRegisteredError
            If the name is already registered.
        TypeError
            If ``cls`` is not a ``TokenStreamLintRule`` subclass.
        """
        if not (isinstance(cls, type) and issubclass(cls, TokenStreamLintRule)):
            raise TypeError(
                f"Cannot register {cls!r}: it must be a subclass of "
                f"{TokenStreamLintRule.__name__}."
            )
        key = name if name is not None else cls.get_descriptor().name
        if key in self._rules:
            raise RuleAlreadyRegisteredError(key)
        self._rules[key] = cls
        logger.debug("Registered rule %r -> %s", key, cls.__qualname__)
        return key

    def deregister(self, name: str) -> None:
        """Remove a rule from the registry.

        Raises
        ------
        RuleNotFoundError
            If ``name`` is not currently registered.
        """
        if name not in self._rules:
            raise RuleNotFoundError(name, self.list_rules())
        del self._rules[name]
        logger.debug("Deregistered rule %r", name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> RuleClass:
        """Return the rule class registered under ``name``.

        Raises
        ------
        RuleNotFoundError
            If no rule is registered under ``name``.
        """
        try:
            return self._rules[name]
        except KeyError:
            raise RuleNotFoundError(name, self.list_rules()) from None

    def list_rules(self) -> list[str]:
        """Return all registered rule names in alphabetical order."""
        return sorted(self._rules)

    def descriptors(self) -> list[LintRuleDescriptor]:
        """Return the descriptor of every registered rule, sorted by name."""
        return [self._rules[name].get_descriptor() for name in self.list_rules()]

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_rules())

    def __repr__(self) -> str:
        return f"RuleRegistry(rules={self.list_rules()})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register rules declared as package entry-points.

        Each entry-point is registered under its own name.  Names already
        present are skipped at debug level, so repeated calls are
        idempotent; entry-points that fail to import or are not rule
        classes are logged and skipped.
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._rules:
                logger.debug("Entry-point %r already registered; skipping.", ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(cls, ep.name)
            except (RuleAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered; skipping.",
                    ep.name,
                )


def default_registry(load_plugins: bool = False) -> RuleRegistry:
    """Return a new registry holding the built-in rules.

    Parameters
    ----------
    load_plugins:
        Also load third-party rules from the ``verilint.rules`` entry-point
        group.
    """
    from verilint.linter.rules import BUILTIN_RULES

    registry = RuleRegistry()
    for cls in BUILTIN_RULES:
        registry.register_class(cls)
    if load_plugins:
        registry.load_entrypoints(ENTRYPOINT_GROUP)
    return registry
