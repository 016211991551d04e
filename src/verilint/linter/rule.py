"""Base class for lint rules that consume a token stream.

A rule instance is single-use state: the driver constructs it, calls
``configure`` once, pushes every token of one file through
``handle_token`` in source order, then calls ``report``.  Instances never
share mutable state, so separate files can be linted in parallel with
separate instances.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from verilint.grammar.tokens import Token
from verilint.linter.config import ConfigurationError, RuleConfiguration, configuration_to_text
from verilint.linter.status import LintRuleDescriptor, LintRuleStatus


class TokenStreamLintRule(ABC):
    """A lint rule driven one token at a time."""

    @classmethod
    @abstractmethod
    def get_descriptor(cls) -> LintRuleDescriptor:
        """Return the rule's static descriptor."""

    def configure(self, configuration: RuleConfiguration) -> None:
        """Apply rule parameters.

        The default accepts only an empty configuration; rules with
        parameters override this.

        Raises
        ------
        ConfigurationError
            If any parameter is given.
        """
        text = configuration_to_text(configuration).strip(" ;")
        if text:
            raise ConfigurationError(
                f"rule takes no parameters, got {text!r}",
                rule_name=self.get_descriptor().name,
            )

    @abstractmethod
    def handle_token(self, token: Token) -> None:
        """Advance the rule's analysis by one token."""

    @abstractmethod
    def report(self) -> LintRuleStatus:
        """Return everything found so far without resetting state."""
