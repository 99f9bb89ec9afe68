"""Shell variable storage."""

from __future__ import annotations

import os
from typing import Mapping

DEFAULT_PS1 = "$ "
DEFAULT_PS2 = "> "


class ShellEnvironment:
    """Shell variables layered over the process environment.

    ``PS1`` and ``PS2`` are always defined: they are taken from the
    environment when present and fall back to the defaults otherwise.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ
        self.shell_variables: dict[str, str] = {}
        self._init_par("PS1", DEFAULT_PS1)
        self._init_par("PS2", DEFAULT_PS2)

    def _init_par(self, key: str, default: str) -> None:
        self.shell_variables[key] = self._environ.get(key, default)

    def get_var(self, name: str) -> str | None:
        """Look up a shell variable, then an environment variable."""
        if name in self.shell_variables:
            return self.shell_variables[name]
        return self._environ.get(name)

    def set_var(self, name: str, value: str) -> None:
        self.shell_variables[name] = value

    def prompt(self, key: str) -> str:
        return self.shell_variables.get(key, "")
