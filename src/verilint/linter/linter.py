"""Token-stream linter: runs a configured set of rules over one source.

The ``TokenStreamLinter`` resolves rule selection against a
``RuleRegistry`` and validates every rule configuration up front, so a bad
option fails before any file is scanned.  Each ``lint_*`` call then builds
fresh rule instances, feeds them the token stream and collects one
``LintRuleStatus`` per rule.

Usage
-----
::

    from verilint.linter import TokenStreamLinter
    from verilint.linter.config import parse_rules_flag

    linter = TokenStreamLinter(parse_rules_flag("explicit-begin=if_enable:false"))
    statuses = linter.lint_source(source)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from verilint.grammar.tokens import Token, TokenType
from verilint.lexer import tokenize
from verilint.linter.config import RuleSetting
from verilint.linter.registry import RuleClass, RuleRegistry, default_registry
from verilint.linter.rule import TokenStreamLintRule
from verilint.linter.status import LintRuleStatus

logger = logging.getLogger(__name__)


class TokenStreamLinter:
    """Configurable linter over a token stream.

    Parameters
    ----------
    settings:
        Per-rule selection and parameters.  Rules not mentioned run with
        their defaults; rules with ``enabled=False`` are skipped.
    registry:
        Where rule names are resolved.  Defaults to ``default_registry()``.

    Raises
    ------
    RuleNotFoundError
        If ``settings`` names a rule the registry does not know.
    ConfigurationError
        If a rule rejects its parameters.
    """

    def __init__(
        self,
        settings: Mapping[str, RuleSetting] | None = None,
        registry: RuleRegistry | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        settings = settings or {}
        for name in settings:
            self._registry.get(name)

        self._active: list[tuple[RuleClass, str]] = []
        for name in self._registry.list_rules():
            setting = settings.get(name, RuleSetting())
            if not setting.enabled:
                logger.debug("Rule %r disabled", name)
                continue
            cls = self._registry.get(name)
            # Configure a throwaway instance now so errors surface early.
            cls().configure(setting.configuration)
            self._active.append((cls, setting.configuration))

    @property
    def rule_names(self) -> list[str]:
        """Names of the rules that will run, in execution order."""
        return [cls.get_descriptor().name for cls, _ in self._active]

    def _instantiate(self) -> list[TokenStreamLintRule]:
        rules: list[TokenStreamLintRule] = []
        for cls, configuration in self._active:
            rule = cls()
            rule.configure(configuration)
            rules.append(rule)
        return rules

    def lint_tokens(self, tokens: Iterable[Token]) -> list[LintRuleStatus]:
        """Feed ``tokens`` to fresh instances of every active rule.

        The ``EOF`` marker is not passed on; a construct left open at the
        end of the stream is not reported.

        Returns
        -------
        list[LintRuleStatus]
            One status per active rule, in execution order.
        """
        rules = self._instantiate()
        count = 0
        for token in tokens:
            if token.type is TokenType.EOF:
                continue
            count += 1
            for rule in rules:
                rule.handle_token(token)
        statuses = [rule.report() for rule in rules]
        logger.debug(
            "Linted %d token(s) with %d rule(s): %d violation(s)",
            count,
            len(rules),
            sum(len(s.violations) for s in statuses),
        )
        return statuses

    def lint_source(self, source: str) -> list[LintRuleStatus]:
        """Tokenize ``source`` and lint it.

        Raises
        ------
        LexError
            If ``source`` cannot be tokenized.
        """
        return self.lint_tokens(tokenize(source))


def lint_source(
    source: str,
    settings: Mapping[str, RuleSetting] | None = None,
) -> list[LintRuleStatus]:
    """Convenience function: lint ``source`` with the built-in rules.

    Parameters
    ----------
    source:
        Verilog source text.
    settings:
        Optional per-rule selection and parameters.

    Returns
    -------
    list[LintRuleStatus]
        One status per active rule.
    """
    return TokenStreamLinter(settings).lint_source(source)
