"""
renderer.py

Responsibility: Turn a list of selected globs into files under the project directory.

Rules:
- Globs are evaluated in order relative to the asset directory; `!` patterns remove
  paths matched so far. Hidden files are matched.
- Files ending in `.j2` are rendered with Jinja2 and written under a rewritten name
  (`.js`/`.ts` extensions follow the chosen language).
- Every other file is copied byte-for-byte.
- All per-file writes are joined before `materialize` returns.

This module intentionally does NOT know about prompts, the registry, or CLI parsing.
"""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Iterable

from jinja2 import Environment, StrictUndefined

from vue_scaffold.paths import empty_dir, ensure_dir, is_dir_empty

log = logging.getLogger(__name__)

TEMPLATE_ROOT = "templates"
TEMPLATE_SUFFIX = ".j2"
SCRIPT_SUFFIXES = (".js", ".ts")


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class MaterializeResult:
    project_dir: Path
    rendered_files: int
    copied_files: int


def _flatten(globs: Iterable[Any]) -> list[str]:
    out: list[str] = []
    for item in globs:
        if isinstance(item, (list, tuple)):
            out.extend(_flatten(item))
        elif item:
            out.append(str(item))
    return out


def _match(pattern: str, cwd: Path) -> set[str]:
    """
    Files under `cwd` matched by one (positive) pattern, as POSIX relative paths.
    A matched directory contributes every file below it.
    """
    pattern = pattern.rstrip("/")
    if not pattern:
        return set()
    matched: set[str] = set()
    for path in cwd.glob(pattern):
        if path.is_dir():
            matched.update(p.relative_to(cwd).as_posix() for p in path.rglob("*") if p.is_file())
        elif path.is_file():
            matched.add(path.relative_to(cwd).as_posix())
    return matched


def expand_globs(globs: Iterable[Any], cwd: str | Path) -> list[str]:
    """
    Evaluate include/exclude patterns in order and return sorted relative paths.
    """
    root = Path(cwd)
    selected: set[str] = set()
    for pattern in _flatten(globs):
        if pattern.startswith("!"):
            selected -= _match(pattern[1:], root)
        else:
            selected |= _match(pattern, root)
    return sorted(selected)


def destination_name(name: str, suffix: str) -> str:
    """
    Output filename for a template file: drop `.j2`, then point a `.js`/`.ts`
    extension (or a missing one) at `suffix`. Other extensions are kept.
    """
    stem = name[: -len(TEMPLATE_SUFFIX)] if name.endswith(TEMPLATE_SUFFIX) else name
    ext = PurePosixPath(stem).suffix
    if ext in SCRIPT_SUFFIXES:
        return stem[: -len(ext)] + suffix
    if not ext:
        return stem + suffix
    return stem


def destination_path(rel: str, project_dir: Path, suffix: str) -> Path:
    parts = PurePosixPath(rel).parts
    if parts and parts[0] == TEMPLATE_ROOT:
        parts = parts[1:]
    dst = project_dir.joinpath(*parts)
    if rel.endswith(TEMPLATE_SUFFIX):
        dst = dst.with_name(destination_name(dst.name, suffix))
    return dst


def copy_path(src: Path, dst: Path) -> None:
    if src.is_dir():
        ensure_dir(dst)
        for child in sorted(src.iterdir()):
            copy_path(child, dst / child.name)
        return
    shutil.copy2(src, dst)


def _make_env() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _write_one(env: Environment, src: Path, dst: Path, rel: str, context: dict[str, Any]) -> bool:
    """Materialize a single file. Returns True if it was rendered, False if copied."""
    ensure_dir(dst.parent)
    if not rel.endswith(TEMPLATE_SUFFIX):
        copy_path(src, dst)
        return False
    try:
        template = env.from_string(src.read_text(encoding="utf-8"))
        out = template.render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering template file: {rel}") from e
    dst.write_text(out, encoding="utf-8", newline="\n")
    return True


def materialize(
    *,
    globs: Iterable[Any],
    asset_dir: str | Path,
    target_dir: str | Path,
    context: dict[str, Any],
    project_name: str,
    overwrite: bool = False,
    max_workers: int | None = None,
) -> MaterializeResult:
    """
    Expand `globs` against `asset_dir` and write the results to `target_dir/project_name`.

    - If `target_dir` is non-empty and `overwrite` is set, it is emptied first.
    - Raises the first write failure after all started writes have finished.
    """
    src_root = Path(asset_dir).resolve()
    dst_root = Path(target_dir).resolve()

    if not src_root.is_dir():
        raise RenderError(f"Asset directory not found: {src_root}")

    paths = expand_globs(globs, src_root)
    log.debug("Matched %d template paths", len(paths))

    if dst_root.exists() and not is_dir_empty(dst_root) and overwrite:
        log.debug("Emptying %s", dst_root)
        empty_dir(dst_root)

    project_dir = ensure_dir(dst_root / project_name) if project_name else ensure_dir(dst_root)
    suffix = ".ts" if context.get("needs_typescript") else ".js"
    env = _make_env()

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(_write_one, env, src_root / rel, destination_path(rel, project_dir, suffix), rel, context)
            for rel in paths
        ]
    # Leaving the executor waits for every write; result() re-raises the first failure.
    outcomes = [f.result() for f in futures]

    rendered = sum(1 for was_rendered in outcomes if was_rendered)
    return MaterializeResult(project_dir=project_dir, rendered_files=rendered, copied_files=len(outcomes) - rendered)
