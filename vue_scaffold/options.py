"""
options.py

Responsibility: Resolve the user's choices into a single immutable `Options` record.

Precedence for every choice: explicit CLI flag > interactive answer > built-in default.
Derived flags (`needs_cypress`, `needs_cypress_ct`, `needs_playwright`) are computed
from the primary choices and cannot be passed in.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import InitVar, asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from vue_scaffold.paths import is_dir_empty

log = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "vue-project"
PACKAGE_MANAGERS = ("npm", "yarn", "pnpm")
E2E_CHOICES = (None, "cypress", "playwright")

_VALID_PACKAGE_NAME_RE = re.compile(r"^(?:@[a-z0-9-*~][a-z0-9-*._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")


class OperationCancelled(RuntimeError):
    pass


@dataclass(frozen=True)
class Options:
    """Everything the user chose for one scaffold run."""

    project_name: str = DEFAULT_PROJECT_NAME
    should_overwrite: bool = False
    package_name: str = DEFAULT_PROJECT_NAME
    package_manager: str = "npm"
    needs_typescript: bool = False
    needs_jsx: bool = False
    needs_router: bool = False
    needs_pinia: bool = False
    needs_vitest: bool = False
    needs_e2e_testing: str | None = None
    needs_eslint: bool = False
    needs_prettier: bool = False

    cypress_requested: InitVar[bool] = False
    playwright_requested: InitVar[bool] = False

    needs_cypress: bool = field(init=False, default=False)
    needs_cypress_ct: bool = field(init=False, default=False)
    needs_playwright: bool = field(init=False, default=False)

    def __post_init__(self, cypress_requested: bool, playwright_requested: bool) -> None:
        if self.needs_e2e_testing not in E2E_CHOICES:
            raise ValueError(f"Unknown end-to-end testing choice: {self.needs_e2e_testing!r}")
        needs_cypress = bool(cypress_requested) or self.needs_e2e_testing == "cypress"
        object.__setattr__(self, "needs_cypress", needs_cypress)
        object.__setattr__(self, "needs_cypress_ct", needs_cypress and not self.needs_vitest)
        object.__setattr__(
            self, "needs_playwright", bool(playwright_requested) or self.needs_e2e_testing == "playwright"
        )

    def as_dict(self) -> dict[str, Any]:
        """Field name -> value, in declaration order (derived flags last)."""
        return asdict(self)


@dataclass(frozen=True)
class FeatureFlags:
    """Choices supplied on the command line. False means "not supplied"."""

    name: str | None = None
    default: bool = False
    force: bool = False
    typescript: bool = False
    jsx: bool = False
    router: bool = False
    pinia: bool = False
    vitest: bool = False
    cypress: bool = False
    playwright: bool = False
    eslint: bool = False
    prettier: bool = False

    @property
    def any_feature(self) -> bool:
        return any(
            (
                self.typescript,
                self.jsx,
                self.router,
                self.pinia,
                self.vitest,
                self.cypress,
                self.playwright,
                self.eslint,
                self.prettier,
            )
        )

    @property
    def trusted(self) -> bool:
        """When set, feature prompts are skipped and unset flags mean "no"."""
        return self.default or self.any_feature


class Prompter(Protocol):
    def text(self, message: str, default: str) -> str: ...

    def confirm(self, message: str, default: bool = False) -> bool: ...

    def select(self, message: str, choices: Sequence[tuple[str, Any]], default: int = 0) -> Any: ...


class ConsolePrompter:
    """Interactive prompts on a rich console. Ctrl-C or EOF cancels the run."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _ask(self, ask: Callable[[], Any]) -> Any:
        try:
            return ask()
        except (KeyboardInterrupt, EOFError) as e:
            raise OperationCancelled("Operation cancelled") from e

    def text(self, message: str, default: str) -> str:
        return str(self._ask(lambda: Prompt.ask(message, default=default, console=self.console))).strip()

    def confirm(self, message: str, default: bool = False) -> bool:
        return bool(self._ask(lambda: Confirm.ask(message, default=default, console=self.console)))

    def select(self, message: str, choices: Sequence[tuple[str, Any]], default: int = 0) -> Any:
        self.console.print(message)
        for i, (title, _value) in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{i}[/] {title}")
        answer = self._ask(
            lambda: Prompt.ask(
                "Choice",
                choices=[str(i) for i in range(1, len(choices) + 1)],
                default=str(default + 1),
                console=self.console,
            )
        )
        return choices[int(answer) - 1][1]


def is_valid_package_name(name: str) -> bool:
    return bool(_VALID_PACKAGE_NAME_RE.match(name))


def to_valid_package_name(name: str) -> str:
    name = name.strip().lower()
    name = re.sub(r"\s+", "-", name)
    name = re.sub(r"^[._]", "", name)
    return re.sub(r"[^a-z0-9-~]+", "-", name)


def probe_package_managers(candidates: Sequence[str] = PACKAGE_MANAGERS) -> list[str]:
    """
    Return the package managers whose `--version` command succeeds.
    """
    available: list[str] = []
    for pm in candidates:
        executable = shutil.which(pm) or pm
        try:
            subprocess.run([executable, "--version"], check=True, capture_output=True, timeout=10)
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("Package manager %s unavailable: %s", pm, e)
            continue
        available.append(pm)
    return available


def _overwrite_message(target_dir: Path, cwd: Path) -> str:
    where = "Current directory" if target_dir.resolve() == cwd.resolve() else f'Target directory "{target_dir}"'
    return f"{where} is not empty. Remove existing files and continue?"


def collect_options(
    flags: FeatureFlags,
    target_dir: str | Path,
    *,
    cwd: str | Path,
    prompter: Prompter,
    probe: Callable[[], list[str]] = probe_package_managers,
) -> Options:
    """
    Build the `Options` for one run, prompting only for what the flags leave open.

    Raises `OperationCancelled` if the user cancels or declines to overwrite a
    non-empty target directory.
    """
    target = Path(target_dir)
    trusted = flags.trusted

    if flags.name:
        project_name = flags.name.strip()
    elif trusted:
        project_name = DEFAULT_PROJECT_NAME
    else:
        project_name = prompter.text("Project name:", DEFAULT_PROJECT_NAME) or DEFAULT_PROJECT_NAME

    should_overwrite = False
    if target.exists() and not is_dir_empty(target):
        if not flags.force and not prompter.confirm(_overwrite_message(target, Path(cwd)), default=False):
            raise OperationCancelled("Operation cancelled")
        should_overwrite = True

    if is_valid_package_name(project_name):
        package_name = project_name
    elif trusted:
        package_name = to_valid_package_name(project_name)
    else:
        package_name = prompter.text("Package name:", to_valid_package_name(project_name))

    def toggle(supplied: bool, message: str) -> bool:
        if supplied:
            return True
        if trusted:
            return False
        return prompter.confirm(message, default=False)

    needs_typescript = toggle(flags.typescript, "Add TypeScript?")
    needs_jsx = toggle(flags.jsx, "Add JSX Support?")
    needs_router = toggle(flags.router, "Add Vue Router for Single Page Application development?")
    needs_pinia = toggle(flags.pinia, "Add Pinia for state management?")
    needs_vitest = toggle(flags.vitest, "Add Vitest for Unit Testing?")

    needs_e2e_testing: str | None
    if flags.cypress or flags.playwright:
        needs_e2e_testing = "cypress" if flags.cypress else "playwright"
    elif trusted:
        needs_e2e_testing = None
    else:
        cypress_title = "Cypress" if needs_vitest else "Cypress (also supports unit testing with Cypress Component Testing)"
        needs_e2e_testing = prompter.select(
            "Add an End-to-End Testing Solution?",
            [("No", None), (cypress_title, "cypress"), ("Playwright", "playwright")],
            default=0,
        )

    needs_eslint = toggle(flags.eslint, "Add ESLint for code quality?")
    needs_prettier = toggle(flags.prettier, "Add Prettier for code formatting?") if needs_eslint else flags.prettier

    available = probe()
    if trusted or len(available) <= 1:
        package_manager = available[0] if available else "npm"
    else:
        package_manager = prompter.select(
            "Package manager:",
            [(pm, pm) for pm in available],
            default=0,
        )

    options = Options(
        project_name=project_name,
        should_overwrite=should_overwrite,
        package_name=package_name,
        package_manager=package_manager,
        needs_typescript=needs_typescript,
        needs_jsx=needs_jsx,
        needs_router=needs_router,
        needs_pinia=needs_pinia,
        needs_vitest=needs_vitest,
        needs_e2e_testing=needs_e2e_testing,
        needs_eslint=needs_eslint,
        needs_prettier=needs_prettier,
        cypress_requested=flags.cypress,
        playwright_requested=flags.playwright,
    )
    log.debug("Resolved options: %s", options)
    return options
