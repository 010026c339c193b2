"""Collision-versioned file naming for extracted archive entries.

A file that would land on an existing path is written under
``{base}_{n}{ext}`` instead, where ``n`` increments relative to the
name currently on disk.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import COLLISION_SUFFIX_SEPARATOR


def next_collision_name(path: Path) -> Path:
    """Return the next versioned sibling name for a colliding path.

    Args:
        path: Destination path that already exists.

    Returns:
        ``name_1.ext`` for an unversioned name, or the same name with its
        trailing ``_<n>`` incremented.
    """
    extension = path.suffix
    base = path.name[: len(path.name) - len(extension)] if extension else path.name
    head, separator, tail = base.rpartition(COLLISION_SUFFIX_SEPARATOR)
    if separator and tail.isascii() and tail.isdigit():
        versioned_base = f"{head}{separator}{int(tail) + 1}"
    else:
        versioned_base = f"{base}{COLLISION_SUFFIX_SEPARATOR}1"
    return path.with_name(f"{versioned_base}{extension}")


def resolve_free_path(path: Path) -> Path:
    """Walk the collision chain until a name that does not exist is found.

    Args:
        path: Desired destination path.

    Returns:
        ``path`` itself when free, otherwise the first free versioned name.
    """
    candidate = path
    while candidate.exists():
        candidate = next_collision_name(candidate)
    return candidate
