"""Field classification and substitution for delimited tokens.

A token is classified purely by its delimiters (``${...}``, ``$(...)``,
``$((...))``, backticks, ``$'...'``, ``$name`` or a special parameter)
and then substituted. Only plain text and parameters resolve to real
values; the other kinds are rendered by a ``FieldEvaluator``, whose
default implementation produces a descriptive placeholder.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol

from vish.expand import VarLookup, environ_lookup

SPECIAL_PARAMETERS = frozenset("@*#?-$!0")


class FieldKind(enum.Enum):
    PLAIN = "plain"
    PARAMETER = "parameter"
    COMMAND = "command"
    ARITHMETIC = "arithmetic"
    QUOTED = "quoted"
    POSITION = "position"
    SPECIAL = "special"


@dataclass(frozen=True)
class Field:
    """A classified token.

    ``suffix`` holds literal text that followed a ``$name`` or special
    parameter inside the same token.
    """

    kind: FieldKind
    value: str
    suffix: str = ""

    @classmethod
    def new(cls, text: str, get_var: VarLookup | None = None) -> Field:
        return classify(text, get_var)

    def substitute(
        self,
        get_var: VarLookup | None = None,
        evaluator: FieldEvaluator | None = None,
    ) -> str:
        return substitute(self, get_var, evaluator)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _is_name_char(c: str) -> bool:
    return (c.isascii() and c.isalnum()) or c == "_"


def _is_number(text: str) -> bool:
    return bool(text) and all(c in "0123456789" for c in text)


def _name_run(text: str) -> str:
    end = 0
    while end < len(text) and _is_name_char(text[end]):
        end += 1
    return text[:end]


def _longest_parameter(run: str, get_var: VarLookup) -> tuple[str, str]:
    """Split *run* into the longest defined variable name and the rest.

    When no prefix is defined, the whole run is the name.
    """
    longest = 0
    for end in range(1, len(run) + 1):
        if get_var(run[:end]) is not None:
            longest = end
    if longest == 0:
        return run, ""
    return run[:longest], run[longest:]


def classify(text: str, get_var: VarLookup | None = None) -> Field:
    """Classify *text*; the first matching rule wins."""
    if get_var is None:
        get_var = environ_lookup

    if len(text) > 1 and text.startswith("`") and text.endswith("`"):
        return Field(FieldKind.COMMAND, text[1:-1])

    if not text.startswith("$"):
        return Field(FieldKind.PLAIN, text)

    if len(text) > 1 and text[1] in SPECIAL_PARAMETERS:
        return Field(FieldKind.SPECIAL, text[1], text[2:])

    run = _name_run(text[1:])
    if run:
        name, rest = _longest_parameter(run, get_var)
        return Field(FieldKind.PARAMETER, name, rest + text[1 + len(run):])

    if len(text) >= 3 and text.startswith("${") and text.endswith("}"):
        interior = text[2:-1]
        if _is_number(interior):
            return Field(FieldKind.POSITION, interior.lstrip("0") or "0")
        return Field(FieldKind.PARAMETER, interior)

    if len(text) >= 5 and text.startswith("$((") and text.endswith("))"):
        return Field(FieldKind.ARITHMETIC, text[3:-2])

    if len(text) >= 3 and text.startswith("$(") and text.endswith(")"):
        return Field(FieldKind.COMMAND, text[2:-1])

    if len(text) >= 3 and text.startswith("$'") and text.endswith("'"):
        return Field(FieldKind.QUOTED, text[2:-1])

    return Field(FieldKind.PLAIN, text)


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


class FieldEvaluator(Protocol):
    """Renders the field kinds that are recognised but not resolved."""

    def command(self, text: str) -> str: ...

    def arithmetic(self, text: str) -> str: ...

    def quoted(self, text: str) -> str: ...

    def positional(self, text: str) -> str: ...

    def special(self, text: str) -> str: ...


class PlaceholderEvaluator:
    """Describes the field instead of evaluating it.

    Command substitution and arithmetic are not executed.
    """

    def command(self, text: str) -> str:
        return f"command: {text}"

    def arithmetic(self, text: str) -> str:
        return f"arithmetic: {text}"

    def quoted(self, text: str) -> str:
        return f"quoted: {text}"

    def positional(self, text: str) -> str:
        return f"positional parameter: {text}"

    def special(self, text: str) -> str:
        return f"special parameter: {text}"


DEFAULT_EVALUATOR = PlaceholderEvaluator()


def substitute(
    field: Field,
    get_var: VarLookup | None = None,
    evaluator: FieldEvaluator | None = None,
) -> str:
    """Produce the text a field stands for."""
    if evaluator is None:
        evaluator = DEFAULT_EVALUATOR

    kind = field.kind
    if kind is FieldKind.PLAIN:
        value = field.value
    elif kind is FieldKind.PARAMETER:
        if get_var is None:
            get_var = environ_lookup
        value = get_var(field.value) or ""
    elif kind is FieldKind.COMMAND:
        value = evaluator.command(field.value)
    elif kind is FieldKind.ARITHMETIC:
        value = evaluator.arithmetic(field.value)
    elif kind is FieldKind.QUOTED:
        value = evaluator.quoted(field.value)
    elif kind is FieldKind.POSITION:
        value = evaluator.positional(field.value)
    else:
        value = evaluator.special(field.value)
    return value + field.suffix
