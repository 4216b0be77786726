from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar


T = TypeVar("T")


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    """Sort a carrier exactly once at the point where order becomes observable.

    `source` names the call site; it keeps ordering points greppable.
    """
    return sorted(values, key=key, reverse=reverse)
