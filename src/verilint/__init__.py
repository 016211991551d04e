"""verilint — token-stream style checks for Verilog and SystemVerilog.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import verilint

    tokens = verilint.tokenize("if (ready) start = 1;")

    statuses = verilint.lint('''
        always_ff @(posedge clk)
          if (rst) q <= 0;
    ''')
    for status in statuses:
        for violation in status.sorted_violations():
            print(violation.format("top.sv", status.descriptor))

    verilint.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from verilint.grammar.tokens import Token
    from verilint.linter.config import RuleSetting
    from verilint.linter.status import LintRuleStatus


def tokenize(source: str) -> list["Token"]:
    """Tokenize Verilog source, keeping whitespace and comments.

    Raises
    ------
    verilint.lexer.LexError
        If the source contains invalid characters or unterminated literals.
    """
    from verilint.lexer import tokenize as _tokenize

    return _tokenize(source)


def lint(
    source: str, settings: Mapping[str, "RuleSetting"] | None = None
) -> list["LintRuleStatus"]:
    """Lint Verilog source with the built-in rules.

    Parameters
    ----------
    source:
        Verilog or SystemVerilog source text.
    settings:
        Optional per-rule selection and parameters, e.g. from
        ``verilint.linter.config.parse_rules_flag``.

    Returns
    -------
    list[LintRuleStatus]
        One status per rule that ran.

    Raises
    ------
    verilint.lexer.LexError
        If the source cannot be tokenized.
    verilint.linter.ConfigurationError
        If a rule rejects its parameters.
    """
    from verilint.linter.linter import lint_source

    return lint_source(source, settings)


__all__ = [
    "__version__",
    "tokenize",
    "lint",
]
