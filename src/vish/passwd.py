"""Username to home-directory lookup through the system password database."""

from __future__ import annotations

import pwd


def get_home(user: str) -> str | None:
    """Return *user*'s home directory, or None if the user is unknown."""
    if not user or "\0" in user:
        return None
    try:
        return pwd.getpwnam(user).pw_dir
    except KeyError:
        return None
