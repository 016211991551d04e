"""Unit tests for verilint.linter.rules.explicit_begin — the explicit-begin
automaton, its configuration and its descriptor.
"""
from __future__ import annotations

import logging

import pytest

from verilint.grammar.tokens import Token, TokenType
from verilint.lexer import tokenize
from verilint.linter.config import ConfigurationError
from verilint.linter.rules.explicit_begin import ExplicitBeginRule
from verilint.linter.status import LintViolation

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_OPTIONS = [
    "if_enable",
    "else_enable",
    "always_enable",
    "always_comb_enable",
    "always_latch_enable",
    "always_ff_enable",
    "forever_enable",
    "initial_enable",
    "for_enable",
    "foreach_enable",
    "while_enable",
]


def run(source: str, configuration: object = "") -> list[LintViolation]:
    """Scan ``source`` with a fresh rule and return violations in source order."""
    rule = ExplicitBeginRule()
    rule.configure(configuration)  # type: ignore[arg-type]
    for token in tokenize(source):
        if token.type is not TokenType.EOF:
            rule.handle_token(token)
    return rule.report().sorted_violations()


def reasons(source: str, configuration: object = "") -> list[str]:
    return [v.reason for v in run(source, configuration)]


def _tok(token_type: TokenType, value: str, offset: int = 0) -> Token:
    return Token(type=token_type, value=value, line=1, col=offset + 1, offset=offset)


# ---------------------------------------------------------------------------
# Constructs followed by begin
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source", [
    "if (a) begin b = 1; end",
    "if (a) begin b = 1; end else begin b = 2; end",
    "if (a) begin end else if (b) begin end else begin end",
    "always @(posedge clk) begin q <= d; end",
    "always @* begin y = a; end",
    "always @(*) begin y = a; end",
    "always begin #5 clk = ~clk; end",
    "always_comb begin y = a & b; end",
    "always_latch begin if (en) begin q = d; end end",
    "always_ff @(posedge clk or negedge rst_n) begin q <= d; end",
    "forever begin #1; end",
    "initial begin clk = 0; end",
    "for (i = 0; i < 4; i++) begin a[i] = 0; end",
    "foreach (arr[i]) begin arr[i] = 0; end",
    "while (busy) begin @(posedge clk); end",
])
def test_begin_guarded_constructs_pass(source: str) -> None:
    assert run(source) == []


# ---------------------------------------------------------------------------
# Missing begin
# ---------------------------------------------------------------------------


class TestMissingBegin:
    def test_if_without_begin(self) -> None:
        violations = run("if (x) y = 1;")
        assert len(violations) == 1
        violation = violations[0]
        assert violation.token.type is TokenType.IF
        assert violation.token.value == "if"
        assert violation.reason == (
            "if block constructs shall explicitly use begin/end. Expected begin, got y"
        )

    def test_violation_is_reported_at_trigger_position(self) -> None:
        violations = run("module m;\n  initial x = 0;\nendmodule\n")
        assert len(violations) == 1
        assert (violations[0].line, violations[0].col) == (2, 3)

    def test_always_with_sensitivity_list_without_begin(self) -> None:
        assert reasons("always @(posedge clk) y = 1;") == [
            "always block constructs shall explicitly use begin/end. Expected begin, got y"
        ]

    def test_always_with_bare_statement(self) -> None:
        assert reasons("always #5 clk = ~clk;") == [
            "always block constructs shall explicitly use begin/end. Expected begin, got #"
        ]

    def test_always_star_without_begin(self) -> None:
        assert len(run("always @* y = a;")) == 1

    def test_else_without_begin(self) -> None:
        assert reasons("if (a) begin end else b = 0;") == [
            "else block constructs shall explicitly use begin/end. Expected begin, got b"
        ]

    def test_else_if_without_begin_cites_the_if(self) -> None:
        violations = run("if (a) begin end else if (b) c = 0;")
        assert len(violations) == 1
        assert violations[0].token.value == "if"
        assert violations[0].token.offset == 22

    @pytest.mark.parametrize("keyword", ["always_comb", "always_latch", "forever", "initial"])
    def test_keywords_expecting_begin_directly(self, keyword: str) -> None:
        assert reasons(f"{keyword} y = a;") == [
            f"{keyword} block constructs shall explicitly use begin/end. Expected begin, got y"
        ]

    @pytest.mark.parametrize("source, keyword", [
        ("always_ff @(posedge clk) q <= d;", "always_ff"),
        ("for (i = 0; i < 4; i++) a[i] = 0;", "for"),
        ("foreach (arr[i]) arr[i] = 0;", "foreach"),
        ("while (busy) @(posedge clk);", "while"),
    ])
    def test_conditional_keywords_without_begin(self, source: str, keyword: str) -> None:
        violations = run(source)
        assert len(violations) == 1
        assert violations[0].token.value == keyword

    def test_each_construct_reports_once(self) -> None:
        source = "initial a = 1;\ninitial b = 2;\nalways_comb c = 3;\n"
        assert [v.line for v in run(source)] == [1, 2, 3]

    def test_got_text_is_literal_offending_token(self) -> None:
        assert reasons("if (a) $display(\"x\");")[0].endswith("got $display")


# ---------------------------------------------------------------------------
# Disabled keywords
# ---------------------------------------------------------------------------


class TestDisabledKeywords:
    @pytest.mark.parametrize("option, source", [
        ("if_enable", "if (x) y = 1;"),
        ("else_enable", "if (x) begin end else y = 1;"),
        ("always_enable", "always @(posedge clk) y = 1;"),
        ("always_comb_enable", "always_comb y = 1;"),
        ("always_latch_enable", "always_latch y = 1;"),
        ("always_ff_enable", "always_ff @(posedge clk) y <= 1;"),
        ("forever_enable", "forever #1 y = ~y;"),
        ("initial_enable", "initial y = 1;"),
        ("for_enable", "for (i = 0; i < 2; i++) y = i;"),
        ("foreach_enable", "foreach (a[i]) a[i] = 0;"),
        ("while_enable", "while (x) y = 1;"),
    ])
    def test_disabled_keyword_is_a_no_op(self, option: str, source: str) -> None:
        assert len(run(source)) == 1
        assert run(source, f"{option}:false") == []

    def test_else_if_with_if_disabled_returns_to_normal(self) -> None:
        assert run("if (a) begin end else if (b) c = 0;", "if_enable:false") == []

    def test_else_if_with_if_disabled_then_later_check_still_fires(self) -> None:
        source = "if (a) begin end else if (b) c = 0;\ninitial d = 1;"
        violations = run(source, "if_enable:false")
        assert [v.token.value for v in violations] == ["initial"]

    def test_disabling_else_keeps_if_checks(self) -> None:
        violations = run("if (a) begin end else if (b) c = 0;", "else_enable:false")
        assert [v.token.value for v in violations] == ["if"]

    def test_all_disabled(self) -> None:
        config = ";".join(f"{o}:false" for o in ALL_OPTIONS)
        source = "always y = 1; initial y = 1; if (a) b = 1; else c = 2;"
        assert run(source, config) == []


# ---------------------------------------------------------------------------
# Conditions and parenthesis depth
# ---------------------------------------------------------------------------


class TestConditionDepth:
    def test_nested_parentheses_do_not_close_early(self) -> None:
        assert run("if ((a && (b || c))) begin end") == []

    def test_nested_parentheses_without_begin(self) -> None:
        assert reasons("if ((a && (b || c))) d = 1;") == [
            "if block constructs shall explicitly use begin/end. Expected begin, got d"
        ]

    def test_always_ff_skips_tokens_before_condition(self) -> None:
        assert run("always_ff @(posedge clk) begin end") == []

    def test_always_nested_sensitivity_list(self) -> None:
        assert run("always @((a) or (b)) begin end") == []

    def test_function_call_in_condition(self) -> None:
        assert run("while (f(g(x), y)) begin end") == []

    def test_condition_split_over_lines(self) -> None:
        source = "if (a &&\n    (b ||\n     c)\n   )\nbegin\nend\n"
        assert run(source) == []

    def test_unbalanced_close_paren_leaves_check_pending(self) -> None:
        # A stray ')' drives the depth negative, so the condition never closes.
        assert run("for ) a = 1; (b) c = 2;") == []


# ---------------------------------------------------------------------------
# Formatting transparency
# ---------------------------------------------------------------------------


class TestFormattingTransparency:
    @pytest.mark.parametrize("plain, decorated", [
        ("if (a) b = 1;", "if /* c */ ( a // x\n ) \n\n b = 1;"),
        ("if ((a)) begin end", "if (/* ( */ (a) // )\n) begin end"),
        ("always @(posedge clk) q <= d;", "always // sensitivity\n @ /*(*/ (posedge clk)\n q <= d;"),
        ("else x = 1;", "else\n\t// nothing here\n  x = 1;"),
        ("initial begin end", "initial /* no-op */ begin end"),
    ])
    def test_comments_and_whitespace_do_not_change_outcome(
        self, plain: str, decorated: str
    ) -> None:
        assert reasons(plain) == reasons(decorated)

    def test_formatting_tokens_ignored_in_every_state(self) -> None:
        rule = ExplicitBeginRule()
        fillers = [
            _tok(TokenType.SPACE, " "),
            _tok(TokenType.NEWLINE, "\n"),
            _tok(TokenType.COMMENT_BLOCK, "/* ) */"),
            _tok(TokenType.EOL_COMMENT, "// ("),
        ]
        stream = [
            _tok(TokenType.IF, "if"),
            _tok(TokenType.LPAREN, "("),
            _tok(TokenType.IDENT, "a"),
            _tok(TokenType.RPAREN, ")"),
            _tok(TokenType.BEGIN, "begin"),
        ]
        for token in stream:
            for filler in fillers:
                rule.handle_token(filler)
            rule.handle_token(token)
        assert rule.report().is_ok


# ---------------------------------------------------------------------------
# Recovery after a violation
# ---------------------------------------------------------------------------


class TestRecovery:
    def test_offending_keyword_is_not_reprocessed(self) -> None:
        # 'initial' breaks the pending 'always_comb' check and is itself
        # swallowed, so its own missing begin goes unreported.
        violations = run("always_comb initial x = 1;")
        assert len(violations) == 1
        assert violations[0].token.value == "always_comb"
        assert violations[0].reason.endswith("got initial")

    def test_scanning_resumes_after_violation(self) -> None:
        violations = run("if (a) b = 1;\nif (c) d = 2;\nif (e) begin end\n")
        assert [v.line for v in violations] == [1, 2]

    def test_tokens_after_violation_are_scanned_from_normal(self) -> None:
        # The unbalanced '(' after the violation is ignored in NORMAL.
        violations = run("always x = (1;\nif ((a)) begin end")
        assert [v.token.value for v in violations] == ["always"]

    def test_violation_without_pending_check_raises(self) -> None:
        rule = ExplicitBeginRule()
        with pytest.raises(RuntimeError, match="outside of a pending check"):
            rule._raise_violation(_tok(TokenType.IDENT, "x"))


# ---------------------------------------------------------------------------
# Macros and queues
# ---------------------------------------------------------------------------


class TestRealWorldSource:
    def test_continued_define_then_bare_always_comb(self) -> None:
        source = "`define INC(x) \\\n  x = x + 1;\nalways_comb if (a) y = 1;\n"
        violations = run(source)
        assert len(violations) == 1
        assert violations[0].token.value == "always_comb"
        assert violations[0].line == 3

    def test_macro_quoting_forms_are_scanned(self) -> None:
        source = '`define MSG(x) `"x``_id`"\ninitial $display(`MSG(a));\n'
        assert reasons(source) == [
            "initial block constructs shall explicitly use begin/end. "
            "Expected begin, got $display"
        ]

    @pytest.mark.parametrize("source", [
        "always_comb begin\n  last = q[$];\nend\n",
        "always_comb begin\n  tail = q[1:$];\nend\n",
    ])
    def test_queue_dollar_does_not_stop_scanning(self, source: str) -> None:
        assert run(source) == []

    def test_queue_dollar_in_unguarded_block(self) -> None:
        violations = run("always_comb last = q[$];\n")
        assert [v.token.value for v in violations] == ["always_comb"]


# ---------------------------------------------------------------------------
# Report and idempotence
# ---------------------------------------------------------------------------


class TestReport:
    SOURCE = "always_ff @(posedge clk)\n  if (rst) q <= 0;\n  else q <= d;\n"

    def test_report_pairs_violations_with_descriptor(self) -> None:
        rule = ExplicitBeginRule()
        for token in tokenize(self.SOURCE):
            rule.handle_token(token)
        status = rule.report()
        assert status.descriptor is ExplicitBeginRule.get_descriptor()
        assert status.rule_name == "explicit-begin"
        assert len(status.violations) == 2

    def test_report_is_repeatable_and_does_not_reset(self) -> None:
        rule = ExplicitBeginRule()
        for token in tokenize(self.SOURCE):
            rule.handle_token(token)
        first = rule.report()
        second = rule.report()
        assert first == second
        assert first.violations == second.violations

    def test_fresh_instances_are_idempotent(self) -> None:
        assert run(self.SOURCE) == run(self.SOURCE)

    def test_always_ff_then_bare_if_else(self) -> None:
        violations = run(self.SOURCE)
        assert [v.token.value for v in violations] == ["always_ff", "else"]
        assert violations[0].reason.endswith("got if")
        assert violations[1].reason.endswith("got q")

    def test_empty_stream(self) -> None:
        assert run("") == []

    def test_violation_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="verilint.linter.rules.explicit_begin"):
            run("initial x = 1;")
        assert "explicit-begin violation" in caplog.text


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfigure:
    def test_defaults_enable_everything(self) -> None:
        rule = ExplicitBeginRule()
        for keyword in (TokenType.IF, TokenType.ELSE, TokenType.ALWAYS, TokenType.WHILE):
            assert rule.is_enabled(keyword)

    def test_unmonitored_token_is_not_enabled(self) -> None:
        assert not ExplicitBeginRule().is_enabled(TokenType.CASE)

    def test_empty_configuration_keeps_defaults(self) -> None:
        rule = ExplicitBeginRule()
        rule.configure("")
        assert rule.is_enabled(TokenType.IF)

    def test_string_configuration(self) -> None:
        rule = ExplicitBeginRule()
        rule.configure("if_enable:false; while_enable : 0")
        assert not rule.is_enabled(TokenType.IF)
        assert not rule.is_enabled(TokenType.WHILE)
        assert rule.is_enabled(TokenType.FOR)

    def test_mapping_configuration(self) -> None:
        rule = ExplicitBeginRule()
        rule.configure({"else_enable": False, "for_enable": "off"})
        assert not rule.is_enabled(TokenType.ELSE)
        assert not rule.is_enabled(TokenType.FOR)

    def test_bare_name_enables(self) -> None:
        rule = ExplicitBeginRule()
        rule.configure("if_enable:false")
        rule.configure("if_enable")
        assert rule.is_enabled(TokenType.IF)

    def test_unknown_option_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ExplicitBeginRule().configure("case_enable:false")
        assert exc_info.value.option == "case_enable"
        assert exc_info.value.rule_name == "explicit-begin"
        assert "unknown parameter" in str(exc_info.value)

    def test_bad_boolean_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ExplicitBeginRule().configure("if_enable:maybe")
        assert exc_info.value.value == "maybe"

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ExplicitBeginRule().configure({"if_enable": "perhaps"})


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class TestDescriptor:
    def test_name_and_topic(self) -> None:
        descriptor = ExplicitBeginRule.get_descriptor()
        assert descriptor.name == "explicit-begin"
        assert descriptor.topic == "explicit-begin"
        assert "begin" in descriptor.desc

    def test_all_options_documented_in_order(self) -> None:
        descriptor = ExplicitBeginRule.get_descriptor()
        assert list(descriptor.param_names) == ALL_OPTIONS
        assert all(p.default == "true" for p in descriptor.params)

    def test_param_help_text(self) -> None:
        params = {p.name: p for p in ExplicitBeginRule.get_descriptor().params}
        assert params["always_comb_enable"].description == (
            "All always_comb statements require an explicit begin-end block"
        )

    def test_descriptor_built_once(self) -> None:
        assert ExplicitBeginRule.get_descriptor() is ExplicitBeginRule.get_descriptor()
