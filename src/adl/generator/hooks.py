"""Post-generation hook execution."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from adl.console import console

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HookResult:
    """Outcome of one post-generation command."""

    command: str
    returncode: int | None
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_hook(command: str, cwd: Path) -> HookResult:
    """Run a single shell command in cwd, capturing combined output.

    No timeout is applied. A command that cannot be launched is reported
    with a returncode of None. Output that is not valid UTF-8 is decoded
    with replacement characters.
    """
    logger.debug("Running post hook in %s: %s", cwd, command)
    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        return HookResult(command=command, returncode=None, output=str(e))
    return HookResult(
        command=command, returncode=result.returncode, output=result.stdout
    )


def run_post_hooks(
    commands: list[str] | tuple[str, ...], cwd: Path
) -> list[HookResult]:
    """Run hook commands in order. A failing hook never stops the next one."""
    results = []
    for command in commands:
        console.print(f"[dim]→ {escape(command)}[/dim]")
        result = run_hook(command, cwd)
        if result.ok:
            if result.output.strip():
                console.print(result.output.rstrip(), markup=False)
        else:
            status = (
                "could not be started"
                if result.returncode is None
                else f"exited with {result.returncode}"
            )
            logger.warning("Post hook '%s' %s", command, status)
            console.print(f"[yellow]⚠ Hook '{escape(command)}' {status}[/yellow]")
            if result.output.strip():
                console.print(result.output.rstrip(), markup=False, style="dim")
        results.append(result)
    return results
