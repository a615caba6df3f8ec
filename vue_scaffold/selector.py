"""
selector.py

Responsibility: Decide which template files, dependencies and scripts a project gets.

The `base` catalog entry is always applied first. Every truthy option then enables
the catalog entries that name it (and whose `requires` options are all set), in
option order and then catalog order.

Script names are unique in the result: when two features contribute the same
name, both are qualified with their feature key (`test:e2e` -> `test:e2e:cypress`,
`test:e2e:playwright`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vue_scaffold.catalog import Catalog, CatalogEntry, Script
from vue_scaffold.options import Options
from vue_scaffold.resolver import DependencyList, DependencyResolver

UNIT_TEST_EXAMPLES_EXCLUDE = "!templates/src/components/__tests__/"


@dataclass
class Selection:
    globs: list[str] = field(default_factory=list)
    dependencies: DependencyList = field(default_factory=DependencyList)
    scripts: list[Script] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    script_owners: list[str] = field(default_factory=list, repr=False)
    shared_script_names: set[str] = field(default_factory=set, repr=False)

    def add(self, entry: CatalogEntry, resolver: DependencyResolver) -> None:
        self.features.append(entry.key)
        self.globs.extend(entry.globs)
        self.dependencies.extend(resolver.resolve(entry.dependencies))
        for script in entry.scripts:
            self._add_script(entry.key, script)

    def _add_script(self, key: str, script: Script) -> None:
        for i, (owner, existing) in enumerate(zip(self.script_owners, self.scripts)):
            if existing.name == script.name and owner != key:
                self.scripts[i] = Script(f"{existing.name}:{owner}", existing.command)
                self.shared_script_names.add(script.name)
                break
        if script.name in self.shared_script_names:
            script = Script(f"{script.name}:{key}", script.command)
        self.scripts.append(script)
        self.script_owners.append(key)


def select_assets(options: Options, catalog: Catalog, resolver: DependencyResolver) -> Selection:
    selection = Selection()
    selection.add(catalog.base, resolver)

    values = options.as_dict()
    for option, value in values.items():
        if not value:
            continue
        for entry in catalog.for_option(option):
            if all(values.get(required) for required in entry.requires):
                selection.add(entry, resolver)

    if not options.needs_vitest:
        selection.globs.append(UNIT_TEST_EXAMPLES_EXCLUDE)
    return selection


def build_context(options: Options, selection: Selection) -> dict[str, Any]:
    # Deterministic keys; templates reference these.
    return {
        **options.as_dict(),
        "package": selection.dependencies.as_context(),
        "scripts": [{"name": s.name, "command": s.command} for s in selection.scripts],
    }
