"""Tilde and parameter expansion over plain strings."""

from __future__ import annotations

import os
from typing import Callable

from vish import passwd

VarLookup = Callable[[str], "str | None"]
HomeLookup = Callable[[str], "str | None"]


def environ_lookup(name: str) -> str | None:
    return os.environ.get(name)


def is_name_char(c: str) -> bool:
    return c.isalnum() or c == "_"


def expand_tilde(
    text: str,
    get_var: VarLookup | None = None,
    get_home: HomeLookup | None = None,
) -> str:
    """Expand a leading ``~`` or ``~user`` prefix.

    ``~`` and ``~/...`` use ``HOME``; ``~user`` and ``~user/...`` use the
    user's home directory, keeping everything from the first ``/`` on.
    The text is returned unchanged when the lookup fails or the tilde is
    not the first character.
    """
    if not text.startswith("~"):
        return text

    if get_var is None:
        get_var = environ_lookup
    if get_home is None:
        get_home = passwd.get_home

    if text == "~" or text.startswith("~/"):
        home = get_var("HOME")
        if home is None:
            return text
        return home + text[1:]

    slash = text.find("/")
    if slash == -1:
        user, rest = text[1:], ""
    else:
        user, rest = text[1:slash], text[slash:]

    home = get_home(user)
    if home is None:
        return text
    return home + rest


def expand_parameter(text: str, get_var: VarLookup | None = None) -> str:
    """Replace every ``$NAME`` and ``${NAME}`` in *text* with its value.

    Unset variables expand to the empty string. Scanning resumes after the
    inserted value, so substituted text is never expanded again.
    """
    start = text.find("$")
    if start == -1:
        return text
    if get_var is None:
        get_var = environ_lookup

    result = text
    i = start
    while i < len(result):
        if result[i] != "$":
            i += 1
            continue

        if result.startswith("${", i):
            close = result.find("}", i + 2)
            if close == -1:
                i += 1
                continue
            name = result[i + 2:close]
            end = close + 1
        else:
            end = i + 1
            while end < len(result) and is_name_char(result[end]):
                end += 1
            if end == i + 1:
                i += 1
                continue
            name = result[i + 1:end]

        value = get_var(name) or ""
        result = result[:i] + value + result[end:]
        i += len(value)

    return result
