"""Invariant markers for migration-check."""

from __future__ import annotations

from typing import NoReturn

from migration_check.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    Used as the fallthrough arm of matches over closed tagged variants. The
    optional env payload is carried on the exception for diagnostics only.
    """
    detail = reason or "never() marker reached"
    if env:
        rendered = ", ".join(f"{key}={value!r}" for key, value in env.items())
        detail = f"{detail} ({rendered})"
    raise NeverThrown(detail, env=env)

