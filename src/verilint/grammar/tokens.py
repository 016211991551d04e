"""Token definitions for Verilog / SystemVerilog source.

Defines the token vocabulary produced by the verilint lexer.  Keywords the
lint rules care about, punctuation, literal kinds, and formatting tokens
(whitespace and comments) are all members of the ``TokenType`` enum.  Every
scanned token is a ``Token`` dataclass carrying its type, raw text, and
source position.

Keywords not listed in ``KEYWORDS`` are emitted as ``IDENT``; rules only
ever dispatch on the members below.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Closed enumeration of Verilog token kinds."""

    # -----------------------------------------------------------------
    # Keywords: procedural blocks
    # -----------------------------------------------------------------
    ALWAYS = auto()
    ALWAYS_COMB = auto()
    ALWAYS_LATCH = auto()
    ALWAYS_FF = auto()
    INITIAL = auto()
    FINAL = auto()

    # -----------------------------------------------------------------
    # Keywords: statements
    # -----------------------------------------------------------------
    IF = auto()
    ELSE = auto()
    FOR = auto()
    FOREACH = auto()
    WHILE = auto()
    FOREVER = auto()
    REPEAT = auto()
    DO = auto()
    CASE = auto()
    CASEX = auto()
    CASEZ = auto()
    ENDCASE = auto()

    # -----------------------------------------------------------------
    # Keywords: blocks
    # -----------------------------------------------------------------
    BEGIN = auto()
    END = auto()
    FORK = auto()
    JOIN = auto()
    JOIN_ANY = auto()
    JOIN_NONE = auto()

    # -----------------------------------------------------------------
    # Keywords: declarations
    # -----------------------------------------------------------------
    MODULE = auto()
    ENDMODULE = auto()
    FUNCTION = auto()
    ENDFUNCTION = auto()
    TASK = auto()
    ENDTASK = auto()
    ASSIGN = auto()

    # -----------------------------------------------------------------
    # Keywords: event control
    # -----------------------------------------------------------------
    POSEDGE = auto()
    NEGEDGE = auto()
    EDGE = auto()

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    AT = auto()
    STAR = auto()
    HASH = auto()
    SEMICOLON = auto()
    COLON = auto()
    COMMA = auto()
    DOT = auto()

    # Every other operator (``<=``, ``&&``, ``+`` ...), distinguished by text.
    OPERATOR = auto()

    # -----------------------------------------------------------------
    # Literals and names
    # -----------------------------------------------------------------
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()
    SYSTEM_IDENT = auto()   # $display, $finish
    DIRECTIVE = auto()      # `define, `ifdef

    # -----------------------------------------------------------------
    # Formatting
    # -----------------------------------------------------------------
    SPACE = auto()
    NEWLINE = auto()
    COMMENT_BLOCK = auto()
    EOL_COMMENT = auto()

    EOF = auto()


# Mapping from literal keyword text to its TokenType.
KEYWORDS: dict[str, TokenType] = {
    "always": TokenType.ALWAYS,
    "always_comb": TokenType.ALWAYS_COMB,
    "always_latch": TokenType.ALWAYS_LATCH,
    "always_ff": TokenType.ALWAYS_FF,
    "initial": TokenType.INITIAL,
    "final": TokenType.FINAL,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "foreach": TokenType.FOREACH,
    "while": TokenType.WHILE,
    "forever": TokenType.FOREVER,
    "repeat": TokenType.REPEAT,
    "do": TokenType.DO,
    "case": TokenType.CASE,
    "casex": TokenType.CASEX,
    "casez": TokenType.CASEZ,
    "endcase": TokenType.ENDCASE,
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "fork": TokenType.FORK,
    "join": TokenType.JOIN,
    "join_any": TokenType.JOIN_ANY,
    "join_none": TokenType.JOIN_NONE,
    "module": TokenType.MODULE,
    "endmodule": TokenType.ENDMODULE,
    "function": TokenType.FUNCTION,
    "endfunction": TokenType.ENDFUNCTION,
    "task": TokenType.TASK,
    "endtask": TokenType.ENDTASK,
    "assign": TokenType.ASSIGN,
    "posedge": TokenType.POSEDGE,
    "negedge": TokenType.NEGEDGE,
    "edge": TokenType.EDGE,
}

# Single-character punctuation with a dedicated TokenType.
PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "@": TokenType.AT,
    "*": TokenType.STAR,
    "#": TokenType.HASH,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}

FORMATTING_TYPES: frozenset[TokenType] = frozenset({
    TokenType.SPACE,
    TokenType.NEWLINE,
    TokenType.COMMENT_BLOCK,
    TokenType.EOL_COMMENT,
})


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    type:
        The ``TokenType`` variant for this token.
    value:
        The raw text as it appeared in the source.
    line:
        1-based line number in the source file.
    col:
        1-based column number of the first character of the token.
    offset:
        0-based character offset from the start of the source string.
    """

    type: TokenType
    value: str
    line: int
    col: int
    offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"

    @property
    def is_formatting(self) -> bool:
        """Return True for whitespace and comment tokens."""
        return self.type in FORMATTING_TYPES

    @property
    def is_keyword(self) -> bool:
        """Return True if this token is a reserved word from ``KEYWORDS``."""
        return KEYWORDS.get(self.value) is self.type
