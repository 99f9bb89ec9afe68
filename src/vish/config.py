"""Configuration for the vish shell."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

LOG_LEVELS = ("debug", "info", "warning", "error")

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class ShellConfig:
    """Shell configuration.

    ``field_substitution`` selects the tokenizer: ``split_argv`` (field
    classification) when set, ``parse_argv`` plus parameter expansion
    otherwise.
    """

    log_level: str = "warning"
    log_file: str | None = None
    field_substitution: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ShellConfig:
        env = os.environ if environ is None else environ
        config = cls()

        level = env.get("VISH_LOG_LEVEL", "").lower()
        if level in LOG_LEVELS:
            config.log_level = level

        log_file = env.get("VISH_LOG_FILE")
        if log_file:
            config.log_file = log_file

        field_substitution = env.get("VISH_FIELD_SUBSTITUTION")
        if field_substitution is not None:
            config.field_substitution = field_substitution.lower() in _TRUTHY

        return config
