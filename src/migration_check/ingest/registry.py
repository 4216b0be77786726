from __future__ import annotations

from pathlib import Path

from migration_check.ingest.adapter_contract import LanguageAdapter
from migration_check.ingest.rust_adapter import RustAdapter
from migration_check.order_contract import sort_once

DEFAULT_LANGUAGE_ID = "rust"

_ADAPTERS_BY_LANGUAGE: dict[str, LanguageAdapter] = {}
_ADAPTERS_BY_EXTENSION: dict[str, LanguageAdapter] = {}


def register_adapter(adapter: LanguageAdapter) -> None:
    _ADAPTERS_BY_LANGUAGE[adapter.language_id] = adapter
    for extension in adapter.file_extensions:
        _ADAPTERS_BY_EXTENSION[extension.lower()] = adapter


def registered_extensions() -> tuple[str, ...]:
    return tuple(
        sort_once(_ADAPTERS_BY_EXTENSION, source="registry.registered_extensions")
    )


def adapter_for_path(path: Path) -> LanguageAdapter:
    """Adapter registered for the path's suffix, else the default language's."""
    adapter = _ADAPTERS_BY_EXTENSION.get(path.suffix.lower())
    if adapter is not None:
        return adapter
    # Import-time registration guarantees a canonical fallback adapter.
    return _ADAPTERS_BY_LANGUAGE[DEFAULT_LANGUAGE_ID]


register_adapter(RustAdapter())
