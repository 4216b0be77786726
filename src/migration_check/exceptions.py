"""Error taxonomy for migration-check."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path


class MigrationCheckError(RuntimeError):
    """Base class for fatal, run-aborting failures."""


class BaselineDecodeError(MigrationCheckError):
    """The persisted baseline exists but cannot be decoded.

    A missing baseline is not an error; a present-but-malformed one aborts the
    run so that the previous acknowledged state is never silently discarded.
    """

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot decode baseline {path}: {reason}")
        self.path = path
        self.reason = reason


class DuplicateDeclarationError(MigrationCheckError):
    """A type name is declared twice with different shapes."""

    def __init__(self, name: str, first_path: Path, second_path: Path):
        super().__init__(
            f"type {name} is declared with different shapes in "
            f"{first_path} and {second_path}"
        )
        self.name = name
        self.first_path = first_path
        self.second_path = second_path


class NeverThrown(RuntimeError):
    """Raised by never() when a path proven unreachable is reached."""

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})
