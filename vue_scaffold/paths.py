"""
paths.py

Responsibility: filesystem helpers used to prepare the target directory.

- `post_order_traverse`: visit children before their parent directory
- `empty_dir`: delete everything below a directory (the directory itself is kept)
- `ensure_dir`: create every missing segment of a directory path
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable


def post_order_traverse(
    root: str | Path,
    on_dir: Callable[[Path], None],
    on_file: Callable[[Path], None],
) -> None:
    """
    Walk every descendant of `root`, calling `on_dir` for a directory only after
    all of its children have been visited.
    """
    for child in sorted(Path(root).iterdir()):
        # Symlinked directories are treated as files so the walk never leaves the tree.
        if child.is_dir() and not child.is_symlink():
            post_order_traverse(child, on_dir, on_file)
            on_dir(child)
        else:
            on_file(child)


def empty_dir(root: str | Path) -> None:
    path = Path(root)
    if not path.exists():
        return
    post_order_traverse(path, on_dir=Path.rmdir, on_file=Path.unlink)


def is_dir_empty(path: str | Path) -> bool:
    return not any(Path(path).iterdir())


def ensure_dir(path: str | Path) -> Path:
    """
    Create each missing ancestor of `path` (root first), then `path` itself.
    """
    target = Path(path)
    for segment in [*reversed(target.parents), target]:
        if not segment.exists():
            segment.mkdir(exist_ok=True)
    return target
