"""Template discovery, key resolution and per-run file mapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from adl.errors import AdlError
from adl.schema.types import SUPPORTED_LANGUAGES, Document

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".tmpl"

# Keys rendered once per skill, against that skill's record.
TOOL_TEMPLATES: frozenset[str] = frozenset({"tools.go", "tools.rs", "tools.ts"})

# Output paths may reference the agent name, e.g. "deploy/{name}.yaml".
NAME_PLACEHOLDER = "{name}"


class RegistryError(AdlError):
    """Raised when templates for a language cannot be loaded."""


class TemplateNotFoundError(RegistryError):
    """Raised when a template key does not resolve to any loaded template."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"template not found: {key}")


@dataclass(frozen=True)
class TemplateRoot:
    """A directory of templates and its precedence (lower rank wins)."""

    prefix: str
    rank: int


def get_package_templates_path() -> Path:
    """Get path to the template bodies bundled with the package."""
    return Path(__file__).parent / "files"


def template_roots(language: str) -> tuple[TemplateRoot, ...]:
    """Return the template roots for a language in precedence order.

    Resolution order (first found wins for a shared key):
    1. languages/<language>/
    2. common/
    3. sandbox/
    """
    return (
        TemplateRoot(f"languages/{language}", 0),
        TemplateRoot("common", 1),
        TemplateRoot("sandbox", 2),
    )


# Base file set per language: output path -> template key.
_BASE_FILES: dict[str, dict[str, str]] = {
    "go": {
        "main.go": "main.go",
        "go.mod": "go.mod",
        ".well-known/agent.json": "config/agent.json",
        "Taskfile.yml": "ci/taskfile.yml",
        "Dockerfile": "docker/dockerfile",
        ".gitignore": "config/gitignore",
        ".gitattributes": "config/gitattributes",
        ".editorconfig": "config/editorconfig",
        "README.md": "docs/README.md",
    },
    "rust": {
        "src/main.rs": "main.rs",
        "Cargo.toml": "Cargo.toml",
        ".well-known/agent.json": "config/agent.json",
        "Taskfile.yml": "ci/taskfile.yml",
        "Dockerfile": "docker/dockerfile",
        ".gitignore": "config/gitignore",
        ".gitattributes": "config/gitattributes",
        ".editorconfig": "config/editorconfig",
        "README.md": "docs/README.md",
    },
    "typescript": {
        "src/index.ts": "index.ts",
        "package.json": "package.json",
        "tsconfig.json": "tsconfig.json",
        ".well-known/agent.json": "config/agent.json",
        "Taskfile.yml": "ci/taskfile.yml",
        "Dockerfile": "docker/dockerfile",
        ".gitignore": "config/gitignore",
        ".gitattributes": "config/gitattributes",
        ".editorconfig": "config/editorconfig",
        "README.md": "docs/README.md",
    },
}

# Per-skill tool file: (path pattern, template key).
_TOOL_FILES: dict[str, tuple[str, str]] = {
    "go": ("tools/{skill}.go", "tools.go"),
    "rust": ("src/tools/{skill}.rs", "tools.rs"),
    "typescript": ("src/tools/{skill}.ts", "tools.ts"),
}

_DEPLOYMENT_FILES: dict[str, dict[str, str]] = {
    "kubernetes": {"k8s/deployment.yaml": "kubernetes/deployment.yaml"},
}

_FLOX_FILES: dict[str, str] = {
    ".flox/env/manifest.toml": "flox/manifest.toml",
    ".flox/env.json": "flox/env.json",
    ".flox/.gitignore": "flox/gitignore",
    ".flox/.gitattributes": "flox/gitattributes",
}

_DEVCONTAINER_FILES: dict[str, str] = {
    ".devcontainer/devcontainer.json": "devcontainer/devcontainer.json",
}


class Registry:
    """Loaded template bodies for one target language.

    Templates are keyed by their path relative to the root that holds them,
    without the .tmpl suffix. Roots are loaded in precedence order and the
    first root to provide a key keeps it.
    """

    def __init__(self, language: str, base_path: Path | None = None) -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise RegistryError(
                f"unsupported language: {language} "
                f"(expected one of: {', '.join(SUPPORTED_LANGUAGES)})"
            )
        self.language = language
        self._base_path = base_path or get_package_templates_path()
        self._templates: dict[str, str] = {}
        self._origins: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        roots = template_roots(self.language)
        if not (self._base_path / roots[0].prefix).is_dir():
            raise RegistryError(f"no templates found for language: {self.language}")

        for root in sorted(roots, key=lambda r: r.rank):
            root_path = self._base_path / root.prefix
            if not root_path.is_dir():
                logger.debug("Template root %s not present, skipping", root.prefix)
                continue
            for template_file in sorted(root_path.rglob(f"*{TEMPLATE_SUFFIX}")):
                if not template_file.is_file():
                    continue
                key = template_file.relative_to(root_path).as_posix()
                key = key[: -len(TEMPLATE_SUFFIX)]
                if key in self._templates:
                    logger.debug(
                        "Template %s from %s shadowed by %s",
                        key,
                        root.prefix,
                        self._origins[key],
                    )
                    continue
                try:
                    self._templates[key] = template_file.read_text(encoding="utf-8")
                except OSError as e:
                    raise RegistryError(
                        f"failed to read template {template_file}: {e}"
                    ) from e
                self._origins[key] = root.prefix

    def get_template(self, key: str) -> str:
        """Return the body for a key, falling back to ``<key>.<language>``."""
        if key in self._templates:
            return self._templates[key]
        language_key = f"{key}.{self.language}"
        if language_key in self._templates:
            return self._templates[language_key]
        raise TemplateNotFoundError(key)

    def origin(self, key: str) -> str | None:
        """Return the root prefix a key was loaded from, if loaded."""
        return self._origins.get(key)

    def list_templates(self) -> list[str]:
        """Return all loaded template keys, sorted."""
        return sorted(self._templates)

    def get_files(self, doc: Document) -> dict[str, str]:
        """Map every output path this run may produce to its template key.

        The result depends only on the document's language, skills,
        deployment and sandbox settings.
        """
        files = dict(_BASE_FILES[self.language])

        deployment = doc.spec.deployment
        if deployment is not None and deployment.type in _DEPLOYMENT_FILES:
            files.update(_DEPLOYMENT_FILES[deployment.type])

        path_pattern, tool_key = _TOOL_FILES[self.language]
        for skill in doc.spec.skills:
            files[path_pattern.format(skill=skill.name)] = tool_key
        if self.language == "rust" and doc.spec.skills:
            files["src/tools/mod.rs"] = "tools.mod.rs"

        sandbox = doc.spec.sandbox
        if sandbox is not None:
            if sandbox.flox_enabled:
                files.update(_FLOX_FILES)
            if sandbox.devcontainer_enabled:
                files.update(_DEVCONTAINER_FILES)

        return files


def is_tool_template(key: str) -> bool:
    """Return True if the key is rendered once per skill."""
    return key in TOOL_TEMPLATES


def detect_language(doc: Document) -> str:
    """Return the target language of a document (go when unspecified)."""
    return doc.language
