from __future__ import annotations

import json
from typing import Mapping

from migration_check.order_contract import sort_once


def canonicalize_json(value: object) -> object:
    if isinstance(value, Mapping):
        ordered_items = sort_once(
            [(str(key), canonicalize_json(item_value)) for key, item_value in value.items()],
            source="json_io.canonicalize_json.mapping_items",
            # Sort key is lexical mapping-key text for canonical JSON shape.
            key=lambda item: item[0],
        )
        return {key: item_value for key, item_value in ordered_items}
    if isinstance(value, (list, tuple)):
        return [canonicalize_json(item) for item in value]
    return value


def dump_json_pretty(payload: object) -> str:
    return json.dumps(canonicalize_json(payload), indent=2, sort_keys=False) + "\n"
