"""explicit-begin: procedural constructs must open a ``begin``/``end`` block.

Flags ``if``, ``else``, ``always``, ``always_comb``, ``always_latch``,
``always_ff``, ``forever``, ``initial``, ``for``, ``foreach`` and ``while``
statements whose body is a single bare statement instead of an explicit
``begin ... end`` block.  Adding a second statement to such a body without
adding the block silently moves it out of the conditional or loop.

The check is a small automaton over the token stream:

=============  ==========================================================
NORMAL         waiting for a monitored keyword
IN_ALWAYS      after ``always``: ``@`` and ``*`` are skipped, ``(`` opens
               the sensitivity list, ``begin`` closes the check
IN_ELSE        after ``else``: ``if`` chains into a new check, ``begin``
               closes it
IN_CONDITION   skipping to the end of the parenthesised condition; tokens
               before the first ``(`` (``@`` in ``always_ff``) are ignored
EXPECT_BEGIN   the next token must be ``begin``
=============  ==========================================================

Whitespace and comments never reach the automaton.  Any unexpected token
records one violation at the keyword that opened the check and returns to
NORMAL; that token is not looked at again, so a monitored keyword directly
following a bare statement start is not itself checked.

Parameters (all default to ``true``)::

    if_enable else_enable always_enable always_comb_enable
    always_latch_enable always_ff_enable forever_enable initial_enable
    for_enable foreach_enable while_enable
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

from verilint.grammar.tokens import Token, TokenType
from verilint.linter.config import (
    RuleConfiguration,
    ValueSetter,
    configuration_to_text,
    parse_bool,
    parse_name_values,
)
from verilint.linter.rule import TokenStreamLintRule
from verilint.linter.status import LintRuleDescriptor, LintRuleStatus, LintViolation, RuleParam

logger = logging.getLogger(__name__)

_MESSAGE = " block constructs shall explicitly use begin/end."


class _State(Enum):
    NORMAL = auto()
    IN_ALWAYS = auto()
    IN_ELSE = auto()
    IN_CONDITION = auto()
    EXPECT_BEGIN = auto()


# Option name -> monitored keyword, in documentation order.
_OPTIONS: dict[str, TokenType] = {
    "if_enable": TokenType.IF,
    "else_enable": TokenType.ELSE,
    "always_enable": TokenType.ALWAYS,
    "always_comb_enable": TokenType.ALWAYS_COMB,
    "always_latch_enable": TokenType.ALWAYS_LATCH,
    "always_ff_enable": TokenType.ALWAYS_FF,
    "forever_enable": TokenType.FOREVER,
    "initial_enable": TokenType.INITIAL,
    "for_enable": TokenType.FOR,
    "foreach_enable": TokenType.FOREACH,
    "while_enable": TokenType.WHILE,
}

# State entered when a monitored keyword is seen in NORMAL.
_ROUTES: dict[TokenType, _State] = {
    TokenType.ALWAYS_COMB: _State.EXPECT_BEGIN,
    TokenType.ALWAYS_LATCH: _State.EXPECT_BEGIN,
    TokenType.FOREVER: _State.EXPECT_BEGIN,
    TokenType.INITIAL: _State.EXPECT_BEGIN,
    TokenType.ALWAYS_FF: _State.IN_CONDITION,
    TokenType.FOREACH: _State.IN_CONDITION,
    TokenType.FOR: _State.IN_CONDITION,
    TokenType.IF: _State.IN_CONDITION,
    TokenType.WHILE: _State.IN_CONDITION,
    TokenType.ALWAYS: _State.IN_ALWAYS,
    TokenType.ELSE: _State.IN_ELSE,
}


@dataclass
class _ScanState:
    """Automaton position plus the working memory it needs."""

    state: _State = _State.NORMAL
    trigger: Token | None = None
    # Unclosed '(' inside the condition being skipped.
    condition_depth: int = 0

    def start(self, state: _State, trigger: Token) -> None:
        self.state = state
        self.trigger = trigger
        self.condition_depth = 0

    def reset(self) -> None:
        self.state = _State.NORMAL
        self.condition_depth = 0


class ExplicitBeginRule(TokenStreamLintRule):
    """Checks that ``begin`` follows every monitored statement keyword."""

    def __init__(self) -> None:
        self._enabled: dict[TokenType, bool] = {keyword: True for keyword in _OPTIONS.values()}
        self._scan = _ScanState()
        self._violations: set[LintViolation] = set()

    @classmethod
    @lru_cache(maxsize=None)
    def get_descriptor(cls) -> LintRuleDescriptor:
        params = tuple(
            RuleParam(
                name=option,
                default="true",
                description=(
                    f"All {option[: -len('_enable')]} statements require "
                    "an explicit begin-end block"
                ),
            )
            for option in _OPTIONS
        )
        return LintRuleDescriptor(
            name="explicit-begin",
            topic="explicit-begin",
            desc=(
                "Checks that a Verilog ``begin`` directive follows all "
                "if, else, always, always_comb, always_latch, always_ff, "
                "forever, initial, for, foreach and while statements."
            ),
            params=params,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, configuration: RuleConfiguration) -> None:
        """Apply ``<keyword>_enable`` options.

        Accepts ``"if_enable:false;else_enable:true"`` or a mapping such as
        ``{"if_enable": False}``.  Options not mentioned keep their value.

        Raises
        ------
        ConfigurationError
            On an unknown option or a value that is not a boolean.
        """
        setters: dict[str, ValueSetter] = {
            option: self._setter(keyword) for option, keyword in _OPTIONS.items()
        }
        parse_name_values(
            configuration_to_text(configuration),
            setters,
            rule_name=self.get_descriptor().name,
        )

    def _setter(self, keyword: TokenType) -> ValueSetter:
        def set_flag(value: str) -> None:
            self._enabled[keyword] = parse_bool(value)

        return set_flag

    def is_enabled(self, token_type: TokenType) -> bool:
        """Return True if statements starting with ``token_type`` are checked."""
        return self._enabled.get(token_type, False)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def handle_token(self, token: Token) -> None:
        if token.is_formatting:
            return

        scan = self._scan
        state = scan.state
        violated = False

        if state is _State.NORMAL:
            route = _ROUTES.get(token.type)
            if route is not None and self.is_enabled(token.type):
                scan.start(route, token)

        elif state is _State.IN_ALWAYS:
            # always may be followed directly by begin, or by "@", "*" and
            # a parenthesised sensitivity list.
            if token.type in (TokenType.AT, TokenType.STAR):
                pass
            elif token.type is TokenType.BEGIN:
                scan.state = _State.NORMAL
            elif token.type is TokenType.LPAREN:
                scan.condition_depth = 1
                scan.state = _State.IN_CONDITION
            else:
                violated = True

        elif state is _State.IN_ELSE:
            if token.type is TokenType.IF:
                if self.is_enabled(TokenType.IF):
                    scan.start(_State.IN_CONDITION, token)
                else:
                    scan.state = _State.NORMAL
            elif token.type is TokenType.BEGIN:
                scan.state = _State.NORMAL
            else:
                violated = True

        elif state is _State.IN_CONDITION:
            if token.type is TokenType.LPAREN:
                scan.condition_depth += 1
            elif token.type is TokenType.RPAREN:
                scan.condition_depth -= 1
                if scan.condition_depth == 0:
                    scan.state = _State.EXPECT_BEGIN

        elif state is _State.EXPECT_BEGIN:
            if token.type is TokenType.BEGIN:
                scan.state = _State.NORMAL
            else:
                violated = True

        if violated:
            self._raise_violation(token)

    def _raise_violation(self, offending: Token) -> None:
        trigger = self._scan.trigger
        if trigger is None:
            raise RuntimeError(
                f"explicit-begin violation at {offending.line}:{offending.col} "
                "raised outside of a pending check"
            )
        self._violations.add(
            LintViolation(
                token=trigger,
                reason=f"{trigger.value}{_MESSAGE} Expected begin, got {offending.value}",
            )
        )
        logger.debug(
            "explicit-begin violation at %d:%d (%s), got %r",
            trigger.line,
            trigger.col,
            trigger.value,
            offending.value,
        )
        self._scan.reset()

    def report(self) -> LintRuleStatus:
        return LintRuleStatus(
            violations=frozenset(self._violations),
            descriptor=self.get_descriptor(),
        )
