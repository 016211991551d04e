"""verilint linter module.

Exports the ``TokenStreamLinter`` class, the ``lint_source`` convenience
function, the rule base class and the result types.
"""
from __future__ import annotations

from verilint.linter.config import ConfigurationError, RuleSetting
from verilint.linter.linter import TokenStreamLinter, lint_source
from verilint.linter.registry import RuleRegistry, default_registry
from verilint.linter.rule import TokenStreamLintRule
from verilint.linter.rules import BUILTIN_RULES, ExplicitBeginRule
from verilint.linter.status import LintRuleDescriptor, LintRuleStatus, LintViolation, RuleParam

__all__ = [
    "TokenStreamLinter",
    "lint_source",
    "TokenStreamLintRule",
    "RuleRegistry",
    "default_registry",
    "BUILTIN_RULES",
    "ExplicitBeginRule",
    "ConfigurationError",
    "RuleSetting",
    "LintRuleDescriptor",
    "LintRuleStatus",
    "LintViolation",
    "RuleParam",
]
