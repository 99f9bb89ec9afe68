"""Quoting-aware splitting of a command line into argument tokens."""

from __future__ import annotations

from typing import Callable

from vish.expand import HomeLookup, VarLookup, expand_tilde
from vish.field import FieldEvaluator, classify, substitute

QUOTE_CHARS = ("'", '"')
BLANKS = (" ", "\t")


def _split(text: str, finish: Callable[[str], str]) -> tuple[list[str], str | None]:
    """Split *text* on unquoted blanks, passing each token through *finish*.

    A quote opens a quoted region only outside one, and only the same
    character closes it. Closing a quote ends the current token.
    """
    argv: list[str] = []
    current: list[str] = []
    quote_char: str | None = None

    for c in text:
        if quote_char is None and c in QUOTE_CHARS:
            quote_char = c
        elif quote_char is not None and c == quote_char:
            quote_char = None
            argv.append(finish("".join(current)))
            current.clear()
        elif quote_char is None and c in BLANKS:
            if current:
                argv.append(finish("".join(current)))
                current.clear()
        else:
            current.append(c)

    if current and quote_char is None:
        argv.append(finish("".join(current)))

    return argv, quote_char


def parse_argv(
    text: str,
    get_var: VarLookup | None = None,
    get_home: HomeLookup | None = None,
) -> tuple[list[str], str | None]:
    """Tokenize *text*, expanding a leading tilde in every token.

    Returns the completed tokens and the pending quote character, which is
    not None when the text ends inside a quoted region. The partial quoted
    token is not returned; the caller is expected to append a continuation
    line and tokenize again.
    """
    return _split(text, lambda token: expand_tilde(token, get_var, get_home))


def split_argv(
    text: str,
    get_var: VarLookup | None = None,
    evaluator: FieldEvaluator | None = None,
) -> tuple[list[str], str | None]:
    """Tokenize *text*, classifying and substituting every token as a field."""
    return _split(
        text,
        lambda token: substitute(classify(token, get_var), get_var, evaluator),
    )
