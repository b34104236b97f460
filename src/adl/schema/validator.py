"""Structural and semantic validation of ADL documents."""

from __future__ import annotations

import re

from adl.errors import AdlError
from adl.schema.types import API_VERSION, KIND, Document, Skill

NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
# Skill names become tool file names.
SKILL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")

AGENT_PROVIDERS = (
    "openai",
    "anthropic",
    "ollama",
    "deepseek",
    "google",
    "mistral",
    "groq",
)
DEPLOYMENT_TYPES = ("kubernetes",)
SCM_PROVIDERS = ("github", "gitlab", "bitbucket")
SCHEMA_TYPES = ("object", "array", "string", "number", "integer", "boolean", "null")

# Dependencies every generated agent provides without declaring them.
BUILTIN_DEPENDENCIES = frozenset({"logger"})


class ValidationError(AdlError):
    """Raised when an ADL document violates one or more constraints."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        message = violations[0] if violations else "invalid ADL document"
        if len(violations) > 1:
            message += f" (and {len(violations) - 1} more)"
        super().__init__(message)


def validate(doc: Document) -> list[str]:
    """Check a document and return its violations in precedence order.

    An empty list means the document is valid for code generation.
    """
    violations: list[str] = []
    violations.extend(_check_header(doc))
    violations.extend(_check_metadata(doc))
    violations.extend(_check_server(doc))
    if doc.spec.capabilities is None:
        violations.append("spec.capabilities is required")
    violations.extend(_check_language(doc))
    violations.extend(_check_agent(doc))
    violations.extend(_check_skills(doc))
    violations.extend(_check_options(doc))
    return violations


def ensure_valid(doc: Document) -> None:
    """Raise ValidationError unless the document is valid."""
    violations = validate(doc)
    if violations:
        raise ValidationError(violations)


def _check_header(doc: Document) -> list[str]:
    errors = []
    if doc.api_version != API_VERSION:
        errors.append(f"unsupported API version: {doc.api_version or '(empty)'}")
    if doc.kind != KIND:
        errors.append(f"unsupported kind: {doc.kind or '(empty)'}")
    return errors


def _check_metadata(doc: Document) -> list[str]:
    errors = []
    meta = doc.metadata
    if not meta.name:
        errors.append("metadata.name is required")
    elif not NAME_PATTERN.match(meta.name):
        errors.append(
            f"metadata.name '{meta.name}' must contain only lowercase letters, "
            "digits and dashes"
        )
    if not meta.description:
        errors.append("metadata.description is required")
    if not meta.version:
        errors.append("metadata.version is required")
    elif not SEMVER_PATTERN.match(meta.version):
        errors.append(
            f"metadata.version '{meta.version}' must be in MAJOR.MINOR.PATCH form"
        )
    return errors


def _check_server(doc: Document) -> list[str]:
    port = doc.spec.server.port
    if port == 0:
        return ["spec.server.port is required and must be greater than 0"]
    if port < 1 or port > 65535:
        return ["spec.server.port must be between 1 and 65535"]
    return []


def _check_language(doc: Document) -> list[str]:
    language = doc.spec.language
    if language is None:
        return ["spec.language is required for code generation"]

    configured = language.configured()
    if not configured:
        return ["at least one programming language must be defined in spec.language"]
    if len(configured) > 1:
        return [
            "exactly one programming language must be defined for code "
            f"generation, found {len(configured)} ({', '.join(configured)})"
        ]

    errors = []
    if language.go is not None:
        if not language.go.module:
            errors.append("spec.language.go.module is required")
        if not language.go.version:
            errors.append("spec.language.go.version is required")
    if language.typescript is not None:
        if not language.typescript.package_name:
            errors.append("spec.language.typescript.packageName is required")
        if not language.typescript.node_version:
            errors.append("spec.language.typescript.nodeVersion is required")
    if language.rust is not None:
        if not language.rust.package_name:
            errors.append("spec.language.rust.packageName is required")
        if not language.rust.version:
            errors.append("spec.language.rust.version is required")
        if not language.rust.edition:
            errors.append("spec.language.rust.edition is required")
    return errors


def _check_agent(doc: Document) -> list[str]:
    agent = doc.spec.agent
    if agent is None:
        return []
    errors = []
    if not agent.provider:
        errors.append(
            "spec.agent.provider is required when agent configuration is specified"
        )
    elif agent.provider not in AGENT_PROVIDERS:
        errors.append(
            f"spec.agent.provider '{agent.provider}' must be one of: "
            + ", ".join(AGENT_PROVIDERS)
        )
    if agent.max_tokens is not None and agent.max_tokens < 1:
        errors.append("spec.agent.maxTokens must be at least 1")
    if agent.temperature is not None and not 0 <= agent.temperature <= 2:
        errors.append("spec.agent.temperature must be between 0 and 2")
    return errors


def _check_skill(skill: Skill, index: int, defined_deps: set[str]) -> list[str]:
    path = f"spec.skills[{index}]"
    errors = []
    if not skill.id:
        errors.append(f"{path}.id is required")
    elif not IDENTIFIER_PATTERN.match(skill.id):
        errors.append(f"{path}.id '{skill.id}' must be a valid identifier")
    if not skill.name:
        errors.append(f"{path}.name is required")
    elif not SKILL_NAME_PATTERN.fullmatch(skill.name):
        errors.append(
            f"{path}.name '{skill.name}' must be usable as a file name "
            "(letters, digits, '_', '-' and '.', not starting with '.')"
        )
    if not skill.description:
        errors.append(f"{path}.description is required")
    if not skill.tags:
        errors.append(f"{path}.tags must contain at least one tag")
    if skill.schema is None:
        errors.append(f"{path}.schema is required")
    else:
        schema_type = skill.schema.get("type")
        if schema_type is not None and schema_type not in SCHEMA_TYPES:
            errors.append(f"{path}.schema.type '{schema_type}' is not a valid type")
    for dep in skill.inject:
        if dep not in defined_deps:
            errors.append(
                f"skill '{skill.id}' injects dependency '{dep}' that is not "
                "defined in spec.dependencies"
            )
    return errors


def _check_skills(doc: Document) -> list[str]:
    errors = []
    defined_deps = set(doc.spec.dependencies) | BUILTIN_DEPENDENCIES
    seen_ids: set[str] = set()
    seen_names: set[str] = set()
    for i, skill in enumerate(doc.spec.skills):
        errors.extend(_check_skill(skill, i, defined_deps))
        if skill.id:
            if skill.id in seen_ids:
                errors.append(f"spec.skills[{i}].id '{skill.id}' is duplicated")
            seen_ids.add(skill.id)
        if skill.name:
            if skill.name in seen_names:
                errors.append(f"spec.skills[{i}].name '{skill.name}' is duplicated")
            seen_names.add(skill.name)
    return errors


def _check_options(doc: Document) -> list[str]:
    errors = []
    deployment = doc.spec.deployment
    if deployment is not None and deployment.type:
        if deployment.type not in DEPLOYMENT_TYPES:
            errors.append(
                f"spec.deployment.type '{deployment.type}' must be one of: "
                + ", ".join(DEPLOYMENT_TYPES)
            )
    scm = doc.spec.scm
    if scm is not None and scm.provider and scm.provider not in SCM_PROVIDERS:
        errors.append(
            f"spec.scm.provider '{scm.provider}' must be one of: "
            + ", ".join(SCM_PROVIDERS)
        )
    return errors
