"""Tests for vish.field -- field classification and substitution."""

from __future__ import annotations

import pytest

from vish.field import (
    Field,
    FieldKind,
    PlaceholderEvaluator,
    classify,
    substitute,
)

VARIABLES = {"HOME": "/home/gustav", "PATH": "/bin", "USER": "gustav"}


def get_var(name: str) -> str | None:
    return VARIABLES.get(name)


def field(text: str) -> Field:
    return classify(text, get_var)


class TestClassify:
    def test_plain(self) -> None:
        assert field("echo") == Field(FieldKind.PLAIN, "echo")
        assert field("") == Field(FieldKind.PLAIN, "")
        assert field("$") == Field(FieldKind.PLAIN, "$")

    def test_parameter(self) -> None:
        assert field("$HOME") == Field(FieldKind.PARAMETER, "HOME")

    def test_new_is_classify(self) -> None:
        assert Field.new("$HOME", get_var) == Field(FieldKind.PARAMETER, "HOME")

    def test_parameter_longest_defined_prefix(self) -> None:
        assert field("$PATH1") == Field(FieldKind.PARAMETER, "PATH", "1")

    def test_unknown_parameter_takes_whole_name(self) -> None:
        assert field("$NOPE") == Field(FieldKind.PARAMETER, "NOPE")

    def test_parameter_followed_by_text(self) -> None:
        assert field("$HOME/.config") == Field(FieldKind.PARAMETER, "HOME", "/.config")

    def test_braced_parameter(self) -> None:
        assert field("${USER}") == Field(FieldKind.PARAMETER, "USER")

    @pytest.mark.parametrize("char", list("@*#?-$!0"))
    def test_special_parameters(self, char: str) -> None:
        assert field("$" + char) == Field(FieldKind.SPECIAL, char)

    def test_positional(self) -> None:
        assert field("${1}") == Field(FieldKind.POSITION, "1")
        assert field("${007}") == Field(FieldKind.POSITION, "7")
        assert field("${00}") == Field(FieldKind.POSITION, "0")

    def test_command_substitution(self) -> None:
        assert field("$(cmd)") == Field(FieldKind.COMMAND, "cmd")
        assert field("`ls -l`") == Field(FieldKind.COMMAND, "ls -l")

    def test_arithmetic(self) -> None:
        assert field("$((1+1))") == Field(FieldKind.ARITHMETIC, "1+1")

    def test_quoted_literal(self) -> None:
        assert field("$'x'") == Field(FieldKind.QUOTED, "x")
        assert field("$'$HOME'") == Field(FieldKind.QUOTED, "$HOME")

    def test_unclosed_forms_are_plain(self) -> None:
        assert field("${HOME") == Field(FieldKind.PLAIN, "${HOME")
        assert field("$(cmd") == Field(FieldKind.PLAIN, "$(cmd")
        assert field("$'") == Field(FieldKind.PLAIN, "$'")
        assert field("`") == Field(FieldKind.PLAIN, "`")


class TestSubstitute:
    def test_plain_is_itself(self) -> None:
        assert substitute(field("hello"), get_var) == "hello"

    def test_parameter_value(self) -> None:
        assert substitute(field("$HOME"), get_var) == "/home/gustav"
        assert field("${HOME}").substitute(get_var) == "/home/gustav"

    def test_parameter_keeps_suffix(self) -> None:
        assert substitute(field("$PATH1"), get_var) == "/bin1"
        assert substitute(field("$HOME/x"), get_var) == "/home/gustav/x"

    def test_unset_parameter_is_empty(self) -> None:
        assert substitute(field("$NOPE"), get_var) == ""

    def test_placeholders(self) -> None:
        assert substitute(field("$(ls)"), get_var) == "command: ls"
        assert substitute(field("$((2*3))"), get_var) == "arithmetic: 2*3"
        assert substitute(field("$'x'"), get_var) == "quoted: x"
        assert substitute(field("${2}"), get_var) == "positional parameter: 2"
        assert substitute(field("$?"), get_var) == "special parameter: ?"

    def test_custom_evaluator(self) -> None:
        class Evaluator(PlaceholderEvaluator):
            def arithmetic(self, text: str) -> str:
                return "4"

        result = substitute(field("$((2+2))"), get_var, Evaluator())
        assert result == "4"
