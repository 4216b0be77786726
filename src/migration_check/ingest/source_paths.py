from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from migration_check.order_contract import sort_once


def path_has_segment(path: Path, segments: Iterable[str]) -> bool:
    wanted = set(segments)
    return any(part in wanted for part in path.parts)


def iter_source_paths(
    root: Path,
    *,
    extensions: Iterable[str],
    excluded_segments: Iterable[str] = (),
) -> list[Path]:
    """Expand a source root to candidate files.

    Symbolic links are followed, dotfiles and dot-directories are skipped, and
    directories named by an excluded segment are pruned before descent.
    """
    suffixes = {ext.lower() for ext in extensions}
    excluded = set(excluded_segments)
    if root.is_file():
        if root.suffix.lower() in suffixes and not path_has_segment(root, excluded):
            return [root]
        return []
    out: list[Path] = []
    seen_dirs: set[str] = set()
    for current, dirnames, filenames in os.walk(root, topdown=True, followlinks=True):
        real = os.path.realpath(current)
        if real in seen_dirs:
            # Already walked through another link (or a symlink cycle).
            dirnames[:] = []
            continue
        seen_dirs.add(real)
        dirnames[:] = sort_once(
            (
                name
                for name in dirnames
                if not name.startswith(".") and name not in excluded
            ),
            source="iter_source_paths.dirnames",
        )
        for filename in sort_once(filenames, source="iter_source_paths.filenames"):
            if filename.startswith("."):
                continue
            candidate = Path(current) / filename
            if candidate.suffix.lower() not in suffixes:
                continue
            if path_has_segment(candidate.relative_to(root), excluded):
                continue
            out.append(candidate)
    return sort_once(out, source="iter_source_paths.out")
