"""Verilog token vocabulary.

Exports ``Token``, ``TokenType`` and the keyword / punctuation tables.
"""
from __future__ import annotations

from verilint.grammar.tokens import FORMATTING_TYPES, KEYWORDS, PUNCTUATION, Token, TokenType

__all__ = ["Token", "TokenType", "KEYWORDS", "PUNCTUATION", "FORMATTING_TYPES"]
