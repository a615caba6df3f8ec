"""
reporter.py

Responsibility: Tell the user which commands to run next.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path

from rich.console import Console


def get_command(package_manager: str, script: str) -> str:
    if script == "install":
        return "yarn" if package_manager == "yarn" else f"{package_manager} install"
    return f"npm run {script}" if package_manager == "npm" else f"{package_manager} {script}"


def next_steps(
    *,
    project_dir: str | Path,
    cwd: str | Path,
    package_manager: str,
    needs_prettier: bool = False,
) -> list[str]:
    project = Path(project_dir).resolve()
    here = Path(cwd).resolve()

    commands: list[str] = []
    if project != here:
        commands.append(f"cd {shlex.quote(os.path.relpath(project, here))}")
    commands.append(get_command(package_manager, "install"))
    if needs_prettier:
        commands.append(get_command(package_manager, "format"))
    commands.append(get_command(package_manager, "dev"))
    return commands


def print_next_steps(
    console: Console,
    *,
    project_dir: str | Path,
    cwd: str | Path,
    package_manager: str,
    needs_prettier: bool = False,
) -> None:
    console.print()
    console.print("[bold]Done.[/] Now run:")
    console.print()
    for command in next_steps(
        project_dir=project_dir,
        cwd=cwd,
        package_manager=package_manager,
        needs_prettier=needs_prettier,
    ):
        console.print(f"  [bold green]{command}[/]", highlight=False)
    console.print()
