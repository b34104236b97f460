"""Command-line interface for adl."""

import logging
from pathlib import Path

import click
from rich.logging import RichHandler
from rich.markup import escape

from adl import __version__
from adl.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    save_config,
)
from adl.config.schema import DEFAULT_CONFIG
from adl.console import console
from adl.errors import AdlError
from adl.generator import GenerationReport, Generator, GeneratorConfig
from adl.schema import ValidationError, load_document, validate
from adl.schema.validator import DEPLOYMENT_TYPES

logger = logging.getLogger(__name__)


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"adl [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _require_file(adl_file: Path) -> None:
    if not adl_file.exists():
        console.print(f"[red]ADL file '{adl_file}' does not exist[/red]")
        raise SystemExit(1)


def _print_summary(report: GenerationReport) -> None:
    console.print()
    console.print(
        f"[bold]{report.written}[/bold] written, "
        f"[bold]{report.count('skipped')}[/bold] skipped, "
        f"[bold]{report.count('ignored')}[/bold] ignored"
    )
    failed_hooks = [h for h in report.hooks if not h.ok]
    if failed_hooks:
        console.print(
            f"[yellow]{len(failed_hooks)} of {len(report.hooks)} "
            "post hooks failed[/yellow]"
        )


def _run(config: GeneratorConfig, adl_file: Path, output: Path) -> GenerationReport:
    try:
        return Generator(config).generate(adl_file, output)
    except ValidationError as e:
        console.print("[red]ADL validation failed:[/red]")
        for violation in e.violations:
            console.print(f"  [red]✗[/red] {escape(violation)}")
        raise SystemExit(1) from None
    except AdlError as e:
        logger.debug("Run failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1) from None


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """adl - generate A2A agent projects from ADL files."""
    configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]adl[/bold] - agent scaffolding from ADL files")
        console.print("\nRun [cyan]adl --help[/cyan] for available commands.")


@main.command()
@click.option(
    "--file",
    "-f",
    "adl_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default="agent.yaml",
    show_default=True,
    help="ADL file to generate from.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Output directory for the generated project.",
)
@click.option(
    "--template",
    "-t",
    default="minimal",
    show_default=True,
    help="Project template to use.",
)
@click.option(
    "--overwrite",
    is_flag=True,
    default=False,
    help="Replace existing files (paths in .adl-ignore are always kept).",
)
@click.option("--ci", is_flag=True, default=False, help="Generate a CI workflow.")
@click.option("--cd", is_flag=True, default=False, help="Generate a CD workflow.")
@click.option(
    "--deployment",
    type=click.Choice(DEPLOYMENT_TYPES),
    help="Deployment target (overrides spec.deployment.type).",
)
@click.option("--flox", is_flag=True, help="Enable the Flox environment.")
@click.option("--devcontainer", is_flag=True, help="Enable the devcontainer.")
@click.option(
    "--hooks/--no-hooks",
    default=True,
    help="Run spec.hooks.post commands after generation (default: run).",
)
@click.pass_context
def generate(
    ctx: click.Context,
    adl_file: Path,
    output: Path,
    template: str,
    overwrite: bool,
    ci: bool,
    cd: bool,
    deployment: str | None,
    flox: bool,
    devcontainer: bool,
    hooks: bool,
) -> None:
    """Generate a project from an ADL file."""
    config = load_config()

    def _from_cli(param_name: str) -> bool:
        """Check if a parameter was explicitly set on the command line."""
        source = ctx.get_parameter_source(param_name)
        return source == click.core.ParameterSource.COMMANDLINE

    if not _from_cli("template") and config.template:
        template = config.template
    if not _from_cli("overwrite") and config.overwrite is not None:
        overwrite = config.overwrite
    if not _from_cli("ci") and config.ci is not None:
        ci = config.ci
    if not _from_cli("cd") and config.cd is not None:
        cd = config.cd
    if not _from_cli("hooks") and config.hooks is not None:
        hooks = config.hooks

    _require_file(adl_file)
    console.print(
        f"Generating agent from [cyan]{adl_file}[/cyan] "
        f"into [cyan]{output}[/cyan] (template: {template})"
    )
    report = _run(
        GeneratorConfig(
            template=template,
            overwrite=overwrite,
            ci=ci,
            cd=cd,
            deployment=deployment,
            flox=flox,
            devcontainer=devcontainer,
            run_hooks=hooks,
        ),
        adl_file,
        output,
    )
    _print_summary(report)
    console.print("[green]Agent generated successfully[/green]")


@main.command()
@click.option(
    "--file",
    "-f",
    "adl_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default="agent.yaml",
    show_default=True,
    help="ADL file to sync from.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory to update.",
)
@click.option(
    "--hooks/--no-hooks",
    default=True,
    help="Run spec.hooks.post commands after syncing (default: run).",
)
@click.pass_context
def sync(ctx: click.Context, adl_file: Path, output: Path, hooks: bool) -> None:
    """Update generated code while preserving your implementations.

    Existing files are never overwritten; paths in .adl-ignore are never
    touched.
    """
    config = load_config()
    source = ctx.get_parameter_source("hooks")
    if source != click.core.ParameterSource.COMMANDLINE and config.hooks is not None:
        hooks = config.hooks

    _require_file(adl_file)
    console.print(
        f"Syncing agent from [cyan]{adl_file}[/cyan] into [cyan]{output}[/cyan]"
    )
    report = _run(GeneratorConfig.for_sync(run_hooks=hooks), adl_file, output)
    _print_summary(report)
    console.print("[green]Agent synced, your implementations were preserved[/green]")


@main.command(name="validate")
@click.argument(
    "adl_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default="agent.yaml",
    required=False,
)
def validate_command(adl_file: Path) -> None:
    """Validate an ADL file without generating anything."""
    _require_file(adl_file)
    try:
        doc = load_document(adl_file)
    except AdlError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1) from None

    violations = validate(doc)
    if violations:
        console.print(f"[red]{adl_file} is invalid:[/red]")
        for violation in violations:
            console.print(f"  [red]✗[/red] {escape(violation)}")
        raise SystemExit(1)

    console.print(
        f"[green]✓[/green] {adl_file} is valid "
        f"({doc.metadata.name} {doc.metadata.version}, {doc.language}, "
        f"{len(doc.spec.skills)} skills)"
    )


@main.command(name="config")
@click.option(
    "--init",
    "init_path",
    type=click.Choice(["global", "local"]),
    help="Write the built-in defaults to a new config file.",
)
def config_command(init_path: str | None) -> None:
    """Show the effective configuration, or create a config file."""
    if init_path is not None:
        path = (
            get_home_config_path()
            if init_path == "global"
            else get_local_config_path()
        )
        if path.exists():
            console.print(f"[yellow]Config already exists: {path}[/yellow]")
            raise SystemExit(1)
        save_config(DEFAULT_CONFIG, path)
        console.print(f"[green]Created {path}[/green]")
        return

    config = load_config()
    console.print("[bold]Current Effective Configuration:[/bold]")
    console.print(f"  [dim]Global: {get_home_config_path()}[/dim]")
    console.print(f"  [dim]Local: {get_local_config_path()}[/dim]")
    console.print()
    for key, value in config.to_dict().items():
        console.print(f"  {key}: {value}")
