"""Verilog lexer: converts raw source text into a flat list of tokens.

The lexer is a single-pass character scanner that produces a
``list[Token]`` from a Verilog / SystemVerilog source string.  Unlike a
compiler front end it keeps *everything*: runs of blanks become ``SPACE``
tokens, line breaks ``NEWLINE`` tokens and comments ``EOL_COMMENT`` or
``COMMENT_BLOCK`` tokens, so token-stream lint rules see the source
exactly as written and decide for themselves what to ignore.

Literal handling:
    - ``"..."`` strings keep their quotes and escapes verbatim
    - sized and based numbers (``4'b10x1``, ``'hFF``, ``'1``) and reals
      (``1.5e-3``) are single ``NUMBER`` tokens
    - ``\\escaped.ident`` runs to the next whitespace character
    - ``$name`` is a ``SYSTEM_IDENT`` and ``\\`name`` a ``DIRECTIVE``; a
      bare ``$`` (``q[$]``, ``[1:$]``) is an ``OPERATOR``
    - a backslash ending a line (a continued ``\\`define``) is a
      ``NEWLINE`` token whose text includes the backslash
    - the macro body quoting and pasting forms (backtick-quote,
      backtick-backslash-backtick-quote, double backtick) are ``OPERATOR``
      tokens

Operators are matched longest first; the ones a rule may need to dispatch
on (parentheses, ``@``, ``*`` ...) have their own ``TokenType``, all the
others are ``OPERATOR`` tokens distinguished by their text.
"""
from __future__ import annotations

import re
from typing import Final

from verilint.grammar.tokens import KEYWORDS, PUNCTUATION, Token, TokenType

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_IDENT_START: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]")
_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_$]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")
_BASED_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9a-fA-FxXzZ?_]")

_BASE_PREFIX: Final[re.Pattern[str]] = re.compile(r"'[sS]?[bBoOdDhH]")
_UNBASED_LITERAL: Final[re.Pattern[str]] = re.compile(r"'[01xXzZ]")
_BLANKS: Final[str] = " \t\r\f\v"

# Longest operators first so that ``<<<=`` wins over ``<<``.
_OPERATORS: Final[tuple[str, ...]] = (
    "<<<=", ">>>=", '`\\`"',
    "===", "!==", "==?", "!=?", "<<<", ">>>", "<<=", ">>=", "->>", "<->",
    "==", "!=", "<=", ">=", "&&", "||", "<<", ">>", "**", "->", "::",
    "++", "--", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
    "~&", "~|", "~^", "^~", "+:", "-:", "##", '`"', "``",
    "+", "-", "/", "%", "&", "|", "^", "~", "!", "<", ">", "=", "?", "'", "$",
)

# A backslash ending a line continues a macro definition onto the next one.
_LINE_CONTINUATION: Final[re.Pattern[str]] = re.compile(r"\\\r?\n")


class LexError(Exception):
    """Raised when the lexer encounters invalid input.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    line:
        1-based line number where the error occurred.
    col:
        1-based column number where the error occurred.
    offset:
        0-based character offset in the source where the error occurred.
    """

    def __init__(self, message: str, line: int, col: int, offset: int) -> None:
        super().__init__(f"LexError at {line}:{col}: {message}")
        self.lex_message = message
        self.line = line
        self.col = col
        self.offset = offset


class Lexer:
    """Single-pass Verilog lexer.

    Parameters
    ----------
    source:
        The complete source text to tokenize.
    """

    __slots__ = ("_source", "_pos", "_line", "_col", "_tokens", "_token_line", "_token_col")

    def __init__(self, source: str) -> None:
        self._source: str = source
        self._pos: int = 0
        self._line: int = 1
        self._col: int = 1
        self._tokens: list[Token] = []
        self._token_line: int = 1
        self._token_col: int = 1

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire source and return the complete token list.

        The list always ends with an ``EOF`` token.

        Returns
        -------
        list[Token]
            Ordered list of tokens, formatting tokens included.

        Raises
        ------
        LexError
            On any character that cannot begin a valid token, or on an
            unterminated string or block comment.
        """
        while self._pos < len(self._source):
            self._scan_one()
        self._token_line = self._line
        self._token_col = self._col
        self._emit(TokenType.EOF, "", self._pos)
        return self._tokens

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position without advancing."""
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character at ``pos + offset`` without advancing."""
        idx = self._pos + offset
        return self._source[idx] if idx < len(self._source) else ""

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, token_type: TokenType, value: str, start_offset: int) -> None:
        """Append a token using the recorded start position."""
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                line=self._token_line,
                col=self._token_col,
                offset=start_offset,
            )
        )

    def _text_from(self, start: int) -> str:
        return self._source[start : self._pos]

    def _error(self, message: str, start: int) -> LexError:
        return LexError(message, self._token_line, self._token_col, start)

    def _scan_one(self) -> None:
        """Scan exactly one token."""
        self._token_line = self._line
        self._token_col = self._col
        start = self._pos
        ch = self._current()

        if ch in _BLANKS:
            while self._current() and self._current() in _BLANKS:
                self._advance()
            self._emit(TokenType.SPACE, self._text_from(start), start)
            return

        if ch == "\n":
            self._advance()
            self._emit(TokenType.NEWLINE, "\n", start)
            return

        # Comments
        if ch == "/" and self._peek() == "/":
            self._scan_line_comment(start)
            return
        if ch == "/" and self._peek() == "*":
            self._scan_block_comment(start)
            return

        if ch == '"':
            self._scan_string(start)
            return

        if _DIGIT.match(ch):
            self._scan_number(start)
            return

        if _UNBASED_LITERAL.match(self._source, self._pos):
            self._consume(2)
            self._emit(TokenType.NUMBER, self._text_from(start), start)
            return

        if _BASE_PREFIX.match(self._source, self._pos):
            self._scan_based_literal(start)
            return

        if _IDENT_START.match(ch):
            self._scan_ident_or_keyword(start)
            return

        if ch == "$" and _IDENT_START.match(self._peek()):
            self._advance()
            self._consume_ident_chars()
            self._emit(TokenType.SYSTEM_IDENT, self._text_from(start), start)
            return

        if ch == "`" and _IDENT_START.match(self._peek()):
            self._advance()
            self._consume_ident_chars()
            self._emit(TokenType.DIRECTIVE, self._text_from(start), start)
            return

        continuation = _LINE_CONTINUATION.match(self._source, self._pos)
        if continuation is not None:
            self._consume(continuation.end() - start)
            self._emit(TokenType.NEWLINE, self._text_from(start), start)
            return

        if ch == "\\":
            self._scan_escaped_identifier(start)
            return

        # Operators: try the multi-character ones before punctuation so that
        # ``**`` or ``::`` are not split.
        for op in _OPERATORS:
            if len(op) > 1 and self._source.startswith(op, self._pos):
                self._consume(len(op))
                self._emit(TokenType.OPERATOR, op, start)
                return

        if ch in PUNCTUATION:
            self._advance()
            self._emit(PUNCTUATION[ch], ch, start)
            return

        if ch in _OPERATORS:
            self._advance()
            self._emit(TokenType.OPERATOR, ch, start)
            return

        raise self._error(f"Unexpected character {ch!r}", start)

    # ------------------------------------------------------------------
    # Token-specific scanners
    # ------------------------------------------------------------------

    def _consume(self, count: int) -> None:
        for _ in range(count):
            self._advance()

    def _consume_ident_chars(self) -> None:
        while self._pos < len(self._source) and _IDENT_CONT.match(self._current()):
            self._advance()

    def _scan_line_comment(self, start: int) -> None:
        """Consume a ``//`` comment up to, not including, the newline."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()
        self._emit(TokenType.EOL_COMMENT, self._text_from(start), start)

    def _scan_block_comment(self, start: int) -> None:
        """Consume a ``/* ... */`` block comment."""
        self._consume(2)
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._consume(2)
                self._emit(TokenType.COMMENT_BLOCK, self._text_from(start), start)
                return
            self._advance()
        raise self._error("Unterminated block comment", start)

    def _scan_string(self, start: int) -> None:
        """Consume a double-quoted string literal, keeping it verbatim."""
        self._advance()  # opening "
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()
                self._emit(TokenType.STRING, self._text_from(start), start)
                return
            if ch == "\\":
                # An escaped newline continues the string onto the next line.
                self._advance()
                if self._pos < len(self._source):
                    self._advance()
            elif ch == "\n":
                raise self._error("Unterminated string literal (newline in string)", start)
            else:
                self._advance()
        raise self._error("Unterminated string literal (EOF)", start)

    def _scan_number(self, start: int) -> None:
        """Consume a decimal, real, or sized based literal."""
        while self._current() and (_DIGIT.match(self._current()) or self._current() == "_"):
            self._advance()
        if _BASE_PREFIX.match(self._source, self._pos):
            self._scan_based_literal(start)
            return
        if self._current() == "." and _DIGIT.match(self._peek()):
            self._advance()
            while self._current() and (_DIGIT.match(self._current()) or self._current() == "_"):
                self._advance()
        if self._current() in ("e", "E") and (
            _DIGIT.match(self._peek())
            or (self._peek() in ("+", "-") and _DIGIT.match(self._peek(2)))
        ):
            self._advance()
            if self._current() in ("+", "-"):
                self._advance()
            while self._current() and _DIGIT.match(self._current()):
                self._advance()
        self._emit(TokenType.NUMBER, self._text_from(start), start)

    def _scan_based_literal(self, start: int) -> None:
        """Consume a ``'[s]<base><digits>`` literal; the prefix is already matched."""
        prefix = _BASE_PREFIX.match(self._source, self._pos)
        if prefix is None:
            raise self._error("Malformed based literal", start)
        self._consume(prefix.end() - prefix.start())
        while self._current() and _BASED_DIGIT.match(self._current()):
            self._advance()
        self._emit(TokenType.NUMBER, self._text_from(start), start)

    def _scan_escaped_identifier(self, start: int) -> None:
        """Consume ``\\name`` through the next whitespace character."""
        self._advance()  # backslash
        while self._pos < len(self._source) and not self._current().isspace():
            self._advance()
        if self._pos - start == 1:
            raise self._error("Empty escaped identifier", start)
        self._emit(TokenType.IDENT, self._text_from(start), start)

    def _scan_ident_or_keyword(self, start: int) -> None:
        """Consume an identifier, then classify it as keyword or IDENT."""
        self._consume_ident_chars()
        word = self._text_from(start)
        self._emit(KEYWORDS.get(word, TokenType.IDENT), word, start)


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(source: str) -> list[Token]:
    """Tokenize a Verilog source string and return the complete token list.

    Parameters
    ----------
    source:
        Verilog or SystemVerilog source text.

    Returns
    -------
    list[Token]
        All tokens including whitespace and comments, terminated by EOF.

    Raises
    ------
    LexError
        If the source contains invalid characters or unterminated literals.

    Example
    -------
    ::

        from verilint.lexer import tokenize
        tokens = tokenize("always_comb begin y = a; end")
    """
    return Lexer(source).tokenize()
