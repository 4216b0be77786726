"""migration-check package root."""

from migration_check.exceptions import (
    BaselineDecodeError,
    DuplicateDeclarationError,
    MigrationCheckError,
    NeverThrown,
)
from migration_check.invariants import never

__all__ = [
    "__version__",
    "BaselineDecodeError",
    "DuplicateDeclarationError",
    "MigrationCheckError",
    "NeverThrown",
    "never",
]

__version__ = "0.1.0"
