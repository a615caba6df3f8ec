"""
cli.py

Responsibility: CLI entrypoint for vue-scaffold.

High-level flow (single command):
1) Collect options from flags and prompts -> `Options`
2) Select globs, dependencies and scripts from the catalog
3) Render/copy the selected template files into `<target>/<project name>`
4) Print the next commands to run

This module should orchestrate behavior but keep concerns isolated:
- Choices: `options.py`
- Catalog + selection: `catalog.py`, `selector.py`
- Registry lookups: `registry.py`, `resolver.py`
- Rendering: `renderer.py`
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Callable, Sequence

from rich.console import Console

from vue_scaffold import __version__
from vue_scaffold.catalog import load_catalog
from vue_scaffold.options import (
    ConsolePrompter,
    FeatureFlags,
    OperationCancelled,
    Prompter,
    collect_options,
    probe_package_managers,
)
from vue_scaffold.registry import DEFAULT_REGISTRY_URL, RegistryClient
from vue_scaffold.renderer import materialize
from vue_scaffold.reporter import print_next_steps
from vue_scaffold.resolver import DependencyResolver, VersionLookup
from vue_scaffold.selector import build_context, select_assets

log = logging.getLogger(__name__)

ASSET_DIR = Path(__file__).parent

REGISTRY_ENV_VAR = "VUE_SCAFFOLD_REGISTRY"


class CLIError(RuntimeError):
    pass


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")


def _flags_from_args(args: argparse.Namespace) -> FeatureFlags:
    # --with-tests is shorthand for --vitest --cypress; --eslint-with-prettier for --eslint --prettier.
    return FeatureFlags(
        name=args.name,
        default=bool(args.default),
        force=bool(args.force),
        typescript=bool(args.typescript),
        jsx=bool(args.jsx),
        router=bool(args.router),
        pinia=bool(args.pinia),
        vitest=bool(args.vitest or args.tests),
        cypress=bool(args.cypress or args.tests),
        playwright=bool(args.playwright),
        eslint=bool(args.eslint or args.eslint_with_prettier),
        prettier=bool(args.prettier or args.eslint_with_prettier),
    )


def _registry_url(args: argparse.Namespace) -> str:
    return args.registry_url or os.environ.get(REGISTRY_ENV_VAR) or DEFAULT_REGISTRY_URL


def _check_target(target_dir: Path) -> None:
    if target_dir.exists() and not target_dir.is_dir():
        raise CLIError(f"Target is not a directory: {target_dir}")


def scaffold_cmd(
    args: argparse.Namespace,
    *,
    console: Console,
    prompter: Prompter,
    lookup: VersionLookup | None = None,
    probe: Callable[[], list[str]] = probe_package_managers,
) -> int:
    cwd = Path.cwd()
    target_dir = (cwd / args.target).resolve()
    flags = _flags_from_args(args)

    try:
        _check_target(target_dir)
        options = collect_options(flags, target_dir, cwd=cwd, prompter=prompter, probe=probe)
    except (CLIError, OperationCancelled) as e:
        console.print(f"[red]✖[/] {e}")
        return 1

    catalog = load_catalog()
    resolver = DependencyResolver(lookup or RegistryClient(_registry_url(args)))
    selection = select_assets(options, catalog, resolver)
    log.debug("Enabled features: %s", ", ".join(selection.features))

    console.print(f"\nScaffolding project in {target_dir / options.project_name}...")
    result = materialize(
        globs=selection.globs,
        asset_dir=ASSET_DIR,
        target_dir=target_dir,
        context=build_context(options, selection),
        project_name=options.project_name,
        overwrite=options.should_overwrite,
    )
    log.debug("Rendered %d files, copied %d files", result.rendered_files, result.copied_files)

    print_next_steps(
        console,
        project_dir=result.project_dir,
        cwd=cwd,
        package_manager=options.package_manager,
        needs_prettier=options.needs_prettier,
    )
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vue-scaffold", description="Scaffold a new Vue project")
    p.add_argument("target", nargs="?", default=".", help="Directory to create the project in (default: .)")
    p.add_argument("--name", default=None, help="Project name (skips the project name prompt)")
    p.add_argument("--default", action="store_true", help="Skip feature prompts and use the defaults")
    p.add_argument("--force", action="store_true", help="Empty a non-empty target directory without asking")

    p.add_argument("--typescript", "--ts", dest="typescript", action="store_true", help="Add TypeScript")
    p.add_argument("--jsx", action="store_true", help="Add JSX support")
    p.add_argument("--router", "--vue-router", dest="router", action="store_true", help="Add Vue Router")
    p.add_argument("--pinia", action="store_true", help="Add Pinia for state management")
    p.add_argument("--with-tests", "--tests", dest="tests", action="store_true", help="Same as --vitest --cypress")
    p.add_argument("--vitest", action="store_true", help="Add Vitest for unit testing")
    p.add_argument("--cypress", action="store_true", help="Add Cypress for end-to-end testing")
    p.add_argument("--playwright", action="store_true", help="Add Playwright for end-to-end testing")
    p.add_argument("--eslint", action="store_true", help="Add ESLint for code quality")
    p.add_argument("--prettier", action="store_true", help="Add Prettier for code formatting")
    p.add_argument("--eslint-with-prettier", action="store_true", help="Same as --eslint --prettier")

    p.add_argument(
        "--registry-url",
        default=None,
        help=f"Package registry used for version lookups (or set env {REGISTRY_ENV_VAR})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    prompter: Prompter | None = None,
    lookup: VersionLookup | None = None,
    probe: Callable[[], list[str]] = probe_package_managers,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(bool(args.verbose))

    console = console or Console()
    return scaffold_cmd(
        args,
        console=console,
        prompter=prompter or ConsolePrompter(console),
        lookup=lookup,
        probe=probe,
    )


if __name__ == "__main__":
    raise SystemExit(main())
