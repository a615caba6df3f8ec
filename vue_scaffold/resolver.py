"""
resolver.py

Responsibility: Resolve a catalog dependency mapping (name -> is_runtime) into
ordered runtime and dev dependency lists with caret version ranges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol


class VersionLookup(Protocol):
    def latest_version(self, name: str) -> str: ...


@dataclass(frozen=True)
class Dependency:
    name: str
    version: str


@dataclass
class DependencyList:
    dependencies: list[Dependency] = field(default_factory=list)
    dev_dependencies: list[Dependency] = field(default_factory=list)

    def extend(self, other: DependencyList) -> None:
        # Names are not de-duplicated: a package declared by two features appears twice.
        self.dependencies.extend(other.dependencies)
        self.dev_dependencies.extend(other.dev_dependencies)

    def as_context(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "dependencies": [{"name": d.name, "version": d.version} for d in self.dependencies],
            "dev_dependencies": [{"name": d.name, "version": d.version} for d in self.dev_dependencies],
        }


def caret_range(version: str) -> str:
    return f"^{version}" if version else ""


class DependencyResolver:
    def __init__(self, lookup: VersionLookup) -> None:
        self._lookup = lookup

    def resolve(self, spec: Mapping[str, bool]) -> DependencyList:
        """
        Look up every package in `spec` and split the results into runtime and
        dev lists, preserving the input order within each list.
        """
        result = DependencyList()
        for name, is_runtime in spec.items():
            dep = Dependency(name=name, version=caret_range(self._lookup.latest_version(name)))
            if is_runtime:
                result.dependencies.append(dep)
            else:
                result.dev_dependencies.append(dep)
        return result
