"""Tests for vish.tokenizer -- parse_argv and split_argv."""

from __future__ import annotations

from vish.tokenizer import parse_argv, split_argv

HOME_DIRS = {"root": "/root", "john": "/home/john"}


def get_var(name: str) -> str | None:
    return {"HOME": "/home/kevin", "USER": "kevin"}.get(name)


def parse(text: str):
    return parse_argv(text, get_var, HOME_DIRS.get)


class TestParseArgv:
    def test_basic(self) -> None:
        assert parse("echo hello world") == (["echo", "hello", "world"], None)

    def test_tilde(self) -> None:
        assert parse("cd ~") == (["cd", "/home/kevin"], None)
        assert parse("cd ~/projects") == (["cd", "/home/kevin/projects"], None)

    def test_double_quoted_string(self) -> None:
        assert parse('echo "hello world"') == (["echo", "hello world"], None)

    def test_mixed_quotes(self) -> None:
        assert parse("echo 'a' \"b\"") == (["echo", "a", "b"], None)
        assert parse("echo \"hello world\" 'and universe'") == (
            ["echo", "hello world", "and universe"],
            None,
        )

    def test_quotes_do_not_close_each_other(self) -> None:
        assert parse("echo \"it's\"") == (["echo", "it's"], None)
        assert parse("echo 'say \"hi\"'") == (["echo", 'say "hi"'], None)

    def test_quoted_tokens_are_tilde_expanded(self) -> None:
        assert parse('cp "~john/file with spaces.txt" ~john/backup/') == (
            ["cp", "/home/john/file with spaces.txt", "/home/john/backup/"],
            None,
        )

    def test_whitespace_runs_collapse(self) -> None:
        assert parse("  ls \t -l   ") == (["ls", "-l"], None)

    def test_empty_and_blank_lines(self) -> None:
        assert parse("") == ([], None)
        assert parse("   \t ") == ([], None)

    def test_empty_quotes_produce_empty_token(self) -> None:
        assert parse("echo ''") == (["echo", ""], None)

    def test_quote_close_ends_token(self) -> None:
        assert parse("a'b c'd") == (["ab c", "d"], None)

    def test_unterminated_single_quote(self) -> None:
        assert parse("echo 'unterminated") == (["echo"], "'")

    def test_unterminated_double_quote(self) -> None:
        assert parse('"') == ([], '"')

    def test_continuation_closes_quote(self) -> None:
        assert parse("echo 'a\nb'") == (["echo", "a\nb"], None)

    def test_tokens_without_tilde_are_unchanged(self) -> None:
        assert parse("ls /usr/local a~b") == (["ls", "/usr/local", "a~b"], None)


class TestSplitArgv:
    def test_single_plain_field(self) -> None:
        assert split_argv("antedeguemon", get_var) == (["antedeguemon"], None)

    def test_parameter_field(self) -> None:
        assert split_argv("echo ${USER}", get_var) == (["echo", "kevin"], None)
        assert split_argv("echo $HOME", get_var) == (["echo", "/home/kevin"], None)

    def test_unknown_parameter_is_empty_argument(self) -> None:
        assert split_argv("echo $NOPE", get_var) == (["echo", ""], None)

    def test_classified_placeholders(self) -> None:
        argv, _ = split_argv("echo $(date) $((1+1)) $@", get_var)
        assert argv == [
            "echo",
            "command: date",
            "arithmetic: 1+1",
            "special parameter: @",
        ]

    def test_quoting_matches_parse_argv(self) -> None:
        assert split_argv("echo 'a b' \"c\"", get_var) == (["echo", "a b", "c"], None)
        assert split_argv("echo 'open", get_var) == (["echo"], "'")

    def test_no_tilde_expansion(self) -> None:
        assert split_argv("cd ~", get_var) == (["cd", "~"], None)
