"""Generation pipeline, ignore engine and post hooks."""

from adl.generator.generator import (
    FileResult,
    GenerationError,
    GenerationReport,
    Generator,
    GeneratorConfig,
    SkillNotFoundError,
    generate,
)
from adl.generator.hooks import HookResult, run_post_hooks
from adl.generator.ignore import IGNORE_FILENAME, IgnoreChecker, IgnoreFileError

__all__ = [
    "FileResult",
    "GenerationError",
    "GenerationReport",
    "Generator",
    "GeneratorConfig",
    "HookResult",
    "IGNORE_FILENAME",
    "IgnoreChecker",
    "IgnoreFileError",
    "SkillNotFoundError",
    "generate",
    "run_post_hooks",
]
