"""Result types shared by every token-stream lint rule.

A rule describes itself with a ``LintRuleDescriptor`` (pure data used for
help text and documentation) and, once a scan is finished, hands back a
``LintRuleStatus``: the set of ``LintViolation`` records it found paired
with that descriptor.  Formatting for humans or machines is left to the
consumer (see ``verilint.cli``).
"""
from __future__ import annotations

from dataclasses import dataclass, field

from verilint.grammar.tokens import Token


@dataclass(frozen=True)
class RuleParam:
    """One configurable option of a rule.

    Parameters
    ----------
    name:
        Option key as written in configuration, e.g. ``"if_enable"``.
    default:
        Default value, as configuration text.
    description:
        One-line help text.
    """

    name: str
    default: str
    description: str


@dataclass(frozen=True)
class LintRuleDescriptor:
    """Static description of a lint rule.

    Parameters
    ----------
    name:
        Unique rule name used on the command line, e.g. ``"explicit-begin"``.
    topic:
        Style-guide topic the rule enforces.
    desc:
        Prose description of what the rule checks.
    params:
        Every configurable option, in documentation order.
    """

    name: str
    topic: str
    desc: str
    params: tuple[RuleParam, ...] = field(default=())

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)

    def to_markdown(self) -> str:
        """Render the descriptor as a markdown help section."""
        lines = [f"### {self.name}", "", self.desc, ""]
        if self.params:
            lines.append("##### Parameters")
            for param in self.params:
                lines.append(
                    f"  * `{param.name}` Default: `{param.default}` {param.description}"
                )
        else:
            lines.append("##### Parameters")
            lines.append("  None.")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class LintViolation:
    """A single rule finding anchored at a token.

    Parameters
    ----------
    token:
        The token the finding is reported at.
    reason:
        Human-readable explanation.
    """

    token: Token
    reason: str

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def col(self) -> int:
        return self.token.col

    def format(self, path: str, descriptor: LintRuleDescriptor) -> str:
        """Return the one-line ``path:line:col: reason [Style: topic] [rule]`` form."""
        return (
            f"{path}:{self.line}:{self.col}: {self.reason} "
            f"[Style: {descriptor.topic}] [{descriptor.name}]"
        )


@dataclass(frozen=True)
class LintRuleStatus:
    """Violations found by one rule over one token stream.

    Parameters
    ----------
    violations:
        Every distinct finding; identical records collapse.
    descriptor:
        Descriptor of the rule that produced the findings.
    """

    violations: frozenset[LintViolation]
    descriptor: LintRuleDescriptor

    @property
    def is_ok(self) -> bool:
        """Return True if the rule found nothing."""
        return not self.violations

    @property
    def rule_name(self) -> str:
        return self.descriptor.name

    def sorted_violations(self) -> list[LintViolation]:
        """Return violations in source order."""
        return sorted(self.violations, key=lambda v: (v.token.offset, v.reason))
