"""Built-in lint rules.

``BUILTIN_RULES`` lists the rule classes that ``default_registry`` registers.
Importing this package registers nothing by itself.
"""
from __future__ import annotations

from verilint.linter.rules.explicit_begin import ExplicitBeginRule

BUILTIN_RULES = (ExplicitBeginRule,)

__all__ = ["BUILTIN_RULES", "ExplicitBeginRule"]
