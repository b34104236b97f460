"""CI/CD workflow file selection by SCM provider."""

from __future__ import annotations

import logging

from adl.console import console
from adl.schema.types import Document

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "github"

# provider -> (ci files, cd files), each mapping output path -> template key
_WORKFLOW_FILES: dict[str, tuple[dict[str, str], dict[str, str]]] = {
    "github": (
        {".github/workflows/ci.yml": "ci/github-ci.yml"},
        {".github/workflows/cd.yml": "ci/github-cd.yml"},
    ),
    "gitlab": (
        {".gitlab-ci.yml": "ci/gitlab-ci.yml"},
        {".gitlab-ci.yml": "ci/gitlab-ci.yml"},
    ),
}


def resolve_provider(doc: Document) -> str:
    """Return the SCM provider to generate workflows for.

    Providers without workflow templates fall back to GitHub with a warning.
    """
    provider = doc.spec.scm.provider if doc.spec.scm is not None else ""
    if provider in _WORKFLOW_FILES:
        return provider
    if provider:
        logger.warning("No CI templates for SCM provider '%s'", provider)
        console.print(
            f"[yellow]⚠ CI/CD for '{provider}' is not supported yet, "
            f"generating {DEFAULT_PROVIDER} workflows instead[/yellow]"
        )
    return DEFAULT_PROVIDER


def workflow_files(doc: Document, *, ci: bool, cd: bool) -> dict[str, str]:
    """Map workflow output paths to template keys for the requested stages."""
    if not ci and not cd:
        return {}
    ci_files, cd_files = _WORKFLOW_FILES[resolve_provider(doc)]
    files: dict[str, str] = {}
    if ci:
        files.update(ci_files)
    if cd:
        files.update(cd_files)
    return files
