"""
vue_scaffold package

This package implements a CLI that scaffolds a new Vue project from a bundled
template tree.

Key responsibilities are split across modules:
- `paths.py`: post-order directory emptying and directory creation
- `catalog.py`: load the feature -> globs/dependencies/scripts table (`assets.yaml`)
- `registry.py`: isolated package-registry HTTP lookups (latest versions)
- `resolver.py`: turn a catalog dependency mapping into runtime/dev lists
- `options.py`: collect the user's choices from flags and prompts
- `selector.py`: accumulate globs, dependencies and scripts for the chosen features
- `renderer.py`: glob expansion and rendering/copying into the target directory
- `reporter.py`: next-step instructions
- `cli.py`: CLI entrypoint and orchestration (options -> select -> materialize -> report)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
