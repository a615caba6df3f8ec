"""
catalog.py

Responsibility: Load the bundled feature catalog (`assets.yaml`) into a typed,
read-only model.

Each entry maps one feature to:
- the glob patterns selecting its template files (`!` prefix excludes)
- its package dependencies (True = runtime, False = dev)
- the package.json scripts it contributes
- optionally, further options that must also be set (`requires`)

The `base` entry has no enabling option and is applied to every project.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import yaml

BASE_KEY = "base"

DEFAULT_CATALOG_PATH = Path(__file__).with_name("assets.yaml")


class CatalogError(ValueError):
    pass


@dataclass(frozen=True)
class Script:
    name: str
    command: str


@dataclass(frozen=True)
class CatalogEntry:
    """One feature bundle of globs, dependencies and scripts."""

    key: str
    option: str | None = None
    requires: tuple[str, ...] = ()
    globs: tuple[str, ...] = ()
    dependencies: dict[str, bool] = field(default_factory=dict)
    scripts: tuple[Script, ...] = ()


@dataclass(frozen=True)
class Catalog:
    entries: tuple[CatalogEntry, ...]

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def base(self) -> CatalogEntry:
        return self[BASE_KEY]

    def __getitem__(self, key: str) -> CatalogEntry:
        for entry in self.entries:
            if entry.key == key:
                return entry
        raise KeyError(key)

    def for_option(self, option: str) -> list[CatalogEntry]:
        """Entries enabled by `option`, in declaration order."""
        return [entry for entry in self.entries if entry.option == option]


def _parse_scripts(key: str, raw: Any) -> tuple[Script, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise CatalogError(f"`{key}.scripts` must be a list when provided.")
    scripts: list[Script] = []
    for item in raw:
        if not isinstance(item, dict) or "name" not in item or "command" not in item:
            raise CatalogError(f"`{key}.scripts` items need `name` and `command`.")
        scripts.append(Script(name=str(item["name"]), command=str(item["command"])))
    return tuple(scripts)


def _parse_entry(key: str, raw: Any) -> CatalogEntry:
    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog entry `{key}` must be a mapping.")

    globs_raw = raw.get("glob") or []
    if not isinstance(globs_raw, list):
        raise CatalogError(f"`{key}.glob` must be a list.")

    deps_raw = raw.get("dependencies") or {}
    if not isinstance(deps_raw, dict):
        raise CatalogError(f"`{key}.dependencies` must be a mapping.")
    for name, is_runtime in deps_raw.items():
        if not isinstance(is_runtime, bool):
            raise CatalogError(f"`{key}.dependencies.{name}` must be true (runtime) or false (dev).")

    option = raw.get("option")
    if key == BASE_KEY:
        if option is not None:
            raise CatalogError("The `base` entry is always applied and cannot name an option.")
    elif not option:
        raise CatalogError(f"Catalog entry `{key}` must name the `option` that enables it.")

    requires_raw = raw.get("requires") or []
    if not isinstance(requires_raw, list):
        raise CatalogError(f"`{key}.requires` must be a list of option names.")
    if key == BASE_KEY and requires_raw:
        raise CatalogError("The `base` entry is always applied and cannot require options.")

    return CatalogEntry(
        key=key,
        option=str(option) if option else None,
        requires=tuple(str(r) for r in requires_raw),
        globs=tuple(str(g) for g in globs_raw),
        dependencies={str(name): flag for name, flag in deps_raw.items()},
        scripts=_parse_scripts(key, raw.get("scripts")),
    )


def parse_catalog(text: str) -> Catalog:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise CatalogError("Catalog must be a mapping of feature key -> entry.")
    if BASE_KEY not in data:
        raise CatalogError("Catalog must define a `base` entry.")
    return Catalog(entries=tuple(_parse_entry(str(key), raw) for key, raw in data.items()))


def load_catalog(path: str | Path | None = None) -> Catalog:
    """
    Load a catalog file (defaults to the bundled `assets.yaml`).
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file does not exist: {catalog_path}")
    return parse_catalog(catalog_path.read_text(encoding="utf-8"))
