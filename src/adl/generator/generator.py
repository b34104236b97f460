"""Project generation: turns an ADL file into a scaffolded project tree."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Literal

from adl import __version__
from adl.console import console
from adl.errors import AdlError
from adl.generator.ci import workflow_files
from adl.generator.hooks import HookResult, run_post_hooks
from adl.generator.ignore import (
    IGNORE_FILENAME,
    IgnoreChecker,
    default_patterns,
    write_ignore_file,
)
from adl.schema import Document, GeneratedMetadata, ensure_valid, load_document
from adl.templates.engine import TemplateEngine
from adl.templates.registry import (
    NAME_PLACEHOLDER,
    Registry,
    detect_language,
    is_tool_template,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "minimal"

FileAction = Literal["created", "overwritten", "skipped", "ignored"]

_MARKERS: dict[str, str] = {
    "created": "[green]✓ created[/green]",
    "overwritten": "[cyan]↻ overwritten[/cyan]",
    "skipped": "[yellow]⚠ skipped (exists)[/yellow]",
    "ignored": "[dim]⊘ ignored (.adl-ignore)[/dim]",
}


class SkillNotFoundError(AdlError):
    """Raised when a per-skill file maps to a skill the document lacks."""

    def __init__(self, path: str, skill_name: str) -> None:
        self.path = path
        self.skill_name = skill_name
        super().__init__(f"skill not found: {skill_name} (required by {path})")


class GenerationError(AdlError):
    """Raised when a generated file cannot be written."""


@dataclass(frozen=True)
class GeneratorConfig:
    """Options for one generation run."""

    template: str = DEFAULT_TEMPLATE
    overwrite: bool = False
    version: str = __version__
    ci: bool = False
    cd: bool = False
    deployment: str | None = None
    flox: bool = False
    devcontainer: bool = False
    run_hooks: bool = True
    sync_mode: bool = False

    @classmethod
    def for_sync(cls, *, run_hooks: bool = True) -> GeneratorConfig:
        """Config for `adl sync`: no template override, never overwrite."""
        return cls(template="", overwrite=False, run_hooks=run_hooks, sync_mode=True)


@dataclass(frozen=True)
class FileResult:
    path: str
    action: FileAction


@dataclass
class GenerationReport:
    """What a run did to the output directory."""

    files: list[FileResult] = field(default_factory=list)
    ignore_file_created: bool = False
    hooks: list[HookResult] = field(default_factory=list)

    def paths(self, action: FileAction) -> list[str]:
        return [f.path for f in self.files if f.action == action]

    def count(self, action: FileAction) -> int:
        return sum(1 for f in self.files if f.action == action)

    @property
    def written(self) -> int:
        return self.count("created") + self.count("overwritten")


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def substitute_placeholders(path: str, doc: Document) -> str:
    """Replace ``{name}`` in an output path with the agent name."""
    return path.replace(NAME_PLACEHOLDER, doc.metadata.name)


class Generator:
    """Runs the parse, validate, render and write pipeline.

    Each output file passes two gates before it is written: paths matched
    by .adl-ignore are skipped without rendering, and existing files are
    only replaced in overwrite mode.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        now: Callable[[], dt.datetime] | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self._now = now or _utc_now

    @property
    def template_name(self) -> str:
        # Sync runs never pick a template; the project keeps the default.
        return self.config.template or DEFAULT_TEMPLATE

    def generate(self, adl_file: Path, output_dir: Path) -> GenerationReport:
        """Generate a project from an ADL file into output_dir.

        Raises DocumentError or ValidationError before anything is written.
        Render, write and skill-resolution errors abort the remaining files.
        CI/CD and hook failures are reported but never raised.
        """
        doc = load_document(adl_file)
        ensure_valid(doc)
        doc = doc.with_overrides(
            deployment_type=self.config.deployment,
            flox=self.config.flox,
            devcontainer=self.config.devcontainer,
        )

        language = detect_language(doc)
        registry = Registry(language)
        files = registry.get_files(doc)
        ignore = IgnoreChecker.load(output_dir)
        generated_at = self._now()
        logger.debug(
            "Generating %d files for %s (%s, template %s)",
            len(files),
            doc.metadata.name,
            language,
            self.template_name,
        )

        report = GenerationReport()
        report.files.extend(
            self.render_files(
                doc,
                files,
                output_dir,
                registry=registry,
                ignore=ignore,
                generated_at=generated_at,
                adl_file=str(adl_file),
            )
        )

        report.ignore_file_created = write_ignore_file(
            output_dir, default_patterns(language, self.template_name)
        )
        if report.ignore_file_created:
            console.print(f"  {_MARKERS['created']} {IGNORE_FILENAME}")
            console.print(
                "[dim]Files with TODO implementations will be preserved "
                "on future generations[/dim]"
            )

        report.files.extend(
            self._generate_workflows(
                doc, output_dir, registry, ignore, generated_at, str(adl_file)
            )
        )

        hooks = doc.spec.hooks
        if self.config.run_hooks and hooks is not None and hooks.post:
            console.print("\n[bold]Running post-generation hooks[/bold]")
            report.hooks = run_post_hooks(hooks.post, output_dir)

        return report

    def render_files(
        self,
        doc: Document,
        files: dict[str, str],
        output_dir: Path,
        *,
        registry: Registry | None = None,
        ignore: IgnoreChecker | None = None,
        generated_at: dt.datetime | None = None,
        adl_file: str = "",
    ) -> list[FileResult]:
        """Render and write a file mapping (output path -> template key).

        Files are processed in sorted path order. The first error stops the
        loop; files already written stay on disk.
        """
        language = detect_language(doc)
        if registry is None:
            registry = Registry(language)
        if ignore is None:
            ignore = IgnoreChecker.load(output_dir)
        if generated_at is None:
            generated_at = self._now()

        engine = TemplateEngine(doc.spec.acronyms)
        context: dict[str, Any] = {
            "adl": doc,
            "metadata": GeneratedMetadata(
                generated_at=generated_at,
                cli_version=self.config.version,
                template=self.template_name,
                adl_file=adl_file,
            ),
            "language": language,
            "generate_ci": self.config.ci,
            "generate_cd": self.config.cd,
        }

        results = []
        for raw_path in sorted(files):
            path = substitute_placeholders(raw_path, doc)
            key = files[raw_path]

            if ignore.should_ignore(path):
                results.append(self._report(path, "ignored"))
                continue

            body = registry.get_template(key)
            if is_tool_template(key):
                skill_name = PurePosixPath(path).stem
                skill = doc.find_skill(skill_name)
                if skill is None:
                    raise SkillNotFoundError(path, skill_name)
                file_context: dict[str, Any] = {
                    "skill": skill,
                    "language": language,
                    "acronyms": engine.acronyms,
                }
            else:
                file_context = context

            content = engine.render_with_header(
                body,
                file_context,
                path,
                version=self.config.version,
                generated_at=generated_at,
            )
            results.append(self._write(output_dir, path, content))
        return results

    def _generate_workflows(
        self,
        doc: Document,
        output_dir: Path,
        registry: Registry,
        ignore: IgnoreChecker,
        generated_at: dt.datetime,
        adl_file: str,
    ) -> list[FileResult]:
        files = workflow_files(doc, ci=self.config.ci, cd=self.config.cd)
        if not files:
            return []
        try:
            return self.render_files(
                doc,
                files,
                output_dir,
                registry=registry,
                ignore=ignore,
                generated_at=generated_at,
                adl_file=adl_file,
            )
        except AdlError as e:
            logger.warning("CI/CD generation failed: %s", e)
            console.print(f"[yellow]⚠ CI/CD generation failed: {e}[/yellow]")
            return []

    def _write(self, output_dir: Path, path: str, content: str) -> FileResult:
        dest = output_dir / path
        existed = dest.exists()
        if existed and not self.config.overwrite:
            return self._report(path, "skipped")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(content, encoding="utf-8")
        except OSError as e:
            raise GenerationError(f"failed to write {dest}: {e}") from e
        return self._report(path, "overwritten" if existed else "created")

    def _report(self, path: str, action: FileAction) -> FileResult:
        console.print(f"  {_MARKERS[action]} {path}")
        return FileResult(path=path, action=action)


def generate(
    adl_file: Path,
    output_dir: Path,
    config: GeneratorConfig | None = None,
) -> GenerationReport:
    """Convenience wrapper around Generator(config).generate()."""
    return Generator(config).generate(adl_file, output_dir)
