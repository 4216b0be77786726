from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "migration-check.toml"
CONFIG_SECTION = "migration_check"

DEFAULT_MARKER_TYPE = "KeyValue"
DEFAULT_BASELINE_SUFFIX = ".store_digest.json"
DUPLICATE_POLICIES = ("error", "merge")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class CheckConfig:
    marker_type: str = DEFAULT_MARKER_TYPE
    wire_boundary_segments: tuple[str, ...] = ("rpc",)
    excluded_segments: tuple[str, ...] = ("gen", "generated", "migrations")
    skip_attribute: str = "serde"
    skip_markers: tuple[str, ...] = ("skip",)
    encoding_attribute: str = "serde_as"
    baseline_suffix: str = DEFAULT_BASELINE_SUFFIX
    duplicate_policy: str = "error"
    fail_on_removed: bool = False
    max_chains: int = 64
    extensions: tuple[str, ...] = field(default=(".rs",))


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def check_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get(CONFIG_SECTION, {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _as_str(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _as_positive_int(value: TomlValue, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value > 0 else default


def _names_or_default(value: TomlValue, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    return tuple(_normalize_name_list(value))


def check_config_from_section(section: TomlTable | None) -> CheckConfig:
    defaults = CheckConfig()
    if not isinstance(section, dict):
        return defaults
    duplicate_policy = _as_str(
        section.get("duplicate_policy"), defaults.duplicate_policy
    ).lower()
    if duplicate_policy not in DUPLICATE_POLICIES:
        duplicate_policy = defaults.duplicate_policy
    extensions = tuple(
        ext if ext.startswith(".") else f".{ext}"
        for ext in _names_or_default(section.get("extensions"), defaults.extensions)
    )
    return CheckConfig(
        marker_type=_as_str(section.get("marker_type"), defaults.marker_type),
        wire_boundary_segments=_names_or_default(
            section.get("wire_boundary_segments"), defaults.wire_boundary_segments
        ),
        excluded_segments=_names_or_default(
            section.get("excluded_segments"), defaults.excluded_segments
        ),
        skip_attribute=_as_str(section.get("skip_attribute"), defaults.skip_attribute),
        skip_markers=_names_or_default(section.get("skip_markers"), defaults.skip_markers),
        encoding_attribute=_as_str(
            section.get("encoding_attribute"), defaults.encoding_attribute
        ),
        baseline_suffix=_as_str(section.get("baseline_suffix"), defaults.baseline_suffix),
        duplicate_policy=duplicate_policy,
        fail_on_removed=_as_bool(section.get("fail_on_removed")),
        max_chains=_as_positive_int(section.get("max_chains"), defaults.max_chains),
        extensions=extensions,
    )


def resolve_check_config(
    root: Path | None = None, config_path: Path | None = None
) -> CheckConfig:
    return check_config_from_section(check_defaults(root=root, config_path=config_path))


def default_output_path(source_dir: Path | str, config: CheckConfig) -> Path:
    # Suffix is appended to the directory text, not placed inside it.
    text = str(source_dir).rstrip("/\\") or str(source_dir)
    return Path(f"{text}{config.baseline_suffix}")
