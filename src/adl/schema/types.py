"""Typed model of the Agent Definition Language (ADL) document."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from adl.errors import AdlError

API_VERSION = "adl.dev/v1"
KIND = "Agent"

SUPPORTED_LANGUAGES: tuple[str, ...] = ("go", "typescript", "rust")

JsonValue: TypeAlias = (
    str | int | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)


class DocumentError(AdlError):
    """Raised when an ADL file cannot be read or deserialized."""


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def to_json_value(value: Any, path: str) -> JsonValue:
    """Convert a YAML-loaded value into a plain JSON value.

    Dates become ISO strings and mapping keys are stringified. Anything else
    that JSON cannot represent raises DocumentError.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_json_value(v, f"{path}.{k}") for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v, f"{path}[{i}]") for i, v in enumerate(value)]
    raise DocumentError(f"{path}: unsupported value of type {type(value).__name__}")


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _int(value: Any, path: str, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise DocumentError(f"{path} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DocumentError(f"{path} must be an integer, got {value!r}") from None


def _float(value: Any, path: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise DocumentError(f"{path} must be a number, got {value!r}") from None


def _mapping(value: Any, path: str) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DocumentError(f"{path} must be a mapping")
    return value


def _str_tuple(value: Any, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise DocumentError(f"{path} must be a list")
    return tuple(str(v) for v in value)


# ---------------------------------------------------------------------------
# Metadata and capabilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Metadata:
    """Agent identity."""

    name: str = ""
    description: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metadata:
        return cls(
            name=_str(data.get("name")),
            description=_str(data.get("description")),
            version=_str(data.get("version")),
        )


@dataclass(frozen=True)
class Capabilities:
    streaming: bool = False
    push_notifications: bool = False
    state_transition_history: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "streaming": self.streaming,
            "pushNotifications": self.push_notifications,
            "stateTransitionHistory": self.state_transition_history,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Capabilities:
        return cls(
            streaming=bool(data.get("streaming", False)),
            push_notifications=bool(data.get("pushNotifications", False)),
            state_transition_history=bool(data.get("stateTransitionHistory", False)),
        )


@dataclass(frozen=True)
class Card:
    """Agent card overrides published under .well-known/agent.json."""

    protocol_version: str = ""
    url: str = ""
    preferred_transport: str = ""
    default_input_modes: tuple[str, ...] = ()
    default_output_modes: tuple[str, ...] = ()
    documentation_url: str = ""
    icon_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        return cls(
            protocol_version=_str(data.get("protocolVersion")),
            url=_str(data.get("url")),
            preferred_transport=_str(data.get("preferredTransport")),
            default_input_modes=_str_tuple(
                data.get("defaultInputModes"), "spec.card.defaultInputModes"
            ),
            default_output_modes=_str_tuple(
                data.get("defaultOutputModes"), "spec.card.defaultOutputModes"
            ),
            documentation_url=_str(data.get("documentationUrl")),
            icon_url=_str(data.get("iconUrl")),
        )


@dataclass(frozen=True)
class Agent:
    """Optional AI provider configuration."""

    provider: str = ""
    model: str = ""
    system_prompt: str = ""
    max_tokens: int | None = None
    temperature: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Agent:
        max_tokens_raw = data.get("maxTokens")
        return cls(
            provider=_str(data.get("provider")),
            model=_str(data.get("model")),
            system_prompt=_str(data.get("systemPrompt")),
            max_tokens=(
                _int(max_tokens_raw, "spec.agent.maxTokens")
                if max_tokens_raw is not None
                else None
            ),
            temperature=_float(data.get("temperature"), "spec.agent.temperature"),
        )


@dataclass(frozen=True)
class Dependency:
    """A service dependency that skills can have injected."""

    type: str = ""
    interface: str = ""
    factory: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(
            type=_str(data.get("type")),
            interface=_str(data.get("interface")),
            factory=_str(data.get("factory")),
            description=_str(data.get("description")),
        )


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Skill:
    """A capability of the agent; each skill produces one tool source file."""

    id: str = ""
    name: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    schema: dict[str, JsonValue] | None = None
    examples: tuple[str, ...] = ()
    input_modes: tuple[str, ...] = ()
    output_modes: tuple[str, ...] = ()
    implementation: str = ""
    inject: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ADL (camelCase) representation, omitting empty fields."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
        }
        if self.examples:
            result["examples"] = list(self.examples)
        if self.input_modes:
            result["inputModes"] = list(self.input_modes)
        if self.output_modes:
            result["outputModes"] = list(self.output_modes)
        if self.schema is not None:
            result["schema"] = self.schema
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int = 0) -> Skill:
        path = f"spec.skills[{index}]"
        schema_raw = _mapping(data.get("schema"), f"{path}.schema")
        schema = (
            to_json_value(schema_raw, f"{path}.schema")
            if schema_raw is not None
            else None
        )
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            description=_str(data.get("description")),
            tags=_str_tuple(data.get("tags"), f"{path}.tags"),
            schema=schema,  # type: ignore[arg-type]
            examples=_str_tuple(data.get("examples"), f"{path}.examples"),
            input_modes=_str_tuple(data.get("inputModes"), f"{path}.inputModes"),
            output_modes=_str_tuple(data.get("outputModes"), f"{path}.outputModes"),
            implementation=_str(data.get("implementation")),
            inject=_str_tuple(data.get("inject"), f"{path}.inject"),
        )


# ---------------------------------------------------------------------------
# Server and language
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthConfig:
    enabled: bool = False


@dataclass(frozen=True)
class Server:
    port: int = 0
    debug: bool = False
    auth: AuthConfig | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Server:
        auth_raw = _mapping(data.get("auth"), "spec.server.auth")
        return cls(
            port=_int(data.get("port"), "spec.server.port"),
            debug=bool(data.get("debug", False)),
            auth=(
                AuthConfig(enabled=bool(auth_raw.get("enabled", False)))
                if auth_raw is not None
                else None
            ),
        )


@dataclass(frozen=True)
class GoConfig:
    module: str = ""
    version: str = ""


@dataclass(frozen=True)
class TypeScriptConfig:
    package_name: str = ""
    node_version: str = ""


@dataclass(frozen=True)
class RustConfig:
    package_name: str = ""
    version: str = ""
    edition: str = ""


@dataclass(frozen=True)
class Language:
    """Target language block; exactly one member must be populated."""

    go: GoConfig | None = None
    typescript: TypeScriptConfig | None = None
    rust: RustConfig | None = None

    def configured(self) -> list[str]:
        """Return the names of the populated language blocks, in fixed order."""
        return [name for name in SUPPORTED_LANGUAGES if getattr(self, name) is not None]

    @property
    def name(self) -> str:
        """Name of the target language, defaulting to go when none is set."""
        configured = self.configured()
        return configured[0] if configured else "go"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Language:
        go_raw = _mapping(data.get("go"), "spec.language.go")
        ts_raw = _mapping(data.get("typescript"), "spec.language.typescript")
        rust_raw = _mapping(data.get("rust"), "spec.language.rust")
        return cls(
            go=(
                GoConfig(
                    module=_str(go_raw.get("module")),
                    version=_str(go_raw.get("version")),
                )
                if go_raw is not None
                else None
            ),
            typescript=(
                TypeScriptConfig(
                    package_name=_str(ts_raw.get("packageName")),
                    node_version=_str(ts_raw.get("nodeVersion")),
                )
                if ts_raw is not None
                else None
            ),
            rust=(
                RustConfig(
                    package_name=_str(rust_raw.get("packageName")),
                    version=_str(rust_raw.get("version")),
                    edition=_str(rust_raw.get("edition")),
                )
                if rust_raw is not None
                else None
            ),
        )


# ---------------------------------------------------------------------------
# SCM, sandbox, deployment, hooks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SCM:
    provider: str = ""
    url: str = ""
    github_app: bool = False
    issue_templates: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SCM:
        return cls(
            provider=_str(data.get("provider")),
            url=_str(data.get("url")),
            github_app=bool(data.get("github_app", False)),
            issue_templates=bool(data.get("issue_templates", False)),
        )


@dataclass(frozen=True)
class FloxConfig:
    enabled: bool = False


@dataclass(frozen=True)
class DevContainerConfig:
    enabled: bool = False


@dataclass(frozen=True)
class Sandbox:
    flox: FloxConfig | None = None
    devcontainer: DevContainerConfig | None = None

    @property
    def flox_enabled(self) -> bool:
        return self.flox is not None and self.flox.enabled

    @property
    def devcontainer_enabled(self) -> bool:
        return self.devcontainer is not None and self.devcontainer.enabled

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sandbox:
        flox_raw = _mapping(data.get("flox"), "spec.sandbox.flox")
        dc_raw = _mapping(data.get("devcontainer"), "spec.sandbox.devcontainer")
        return cls(
            flox=(
                FloxConfig(enabled=bool(flox_raw.get("enabled", False)))
                if flox_raw is not None
                else None
            ),
            devcontainer=(
                DevContainerConfig(enabled=bool(dc_raw.get("enabled", False)))
                if dc_raw is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Deployment:
    type: str = ""


@dataclass(frozen=True)
class Hooks:
    post: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Spec and document root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Spec:
    server: Server = field(default_factory=Server)
    capabilities: Capabilities | None = None
    card: Card | None = None
    agent: Agent | None = None
    config: dict[str, JsonValue] = field(default_factory=dict)
    dependencies: dict[str, Dependency] = field(default_factory=dict)
    skills: tuple[Skill, ...] = ()
    language: Language | None = None
    acronyms: tuple[str, ...] = ()
    scm: SCM | None = None
    sandbox: Sandbox | None = None
    deployment: Deployment | None = None
    hooks: Hooks | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Spec:
        capabilities_raw = _mapping(data.get("capabilities"), "spec.capabilities")
        card_raw = _mapping(data.get("card"), "spec.card")
        agent_raw = _mapping(data.get("agent"), "spec.agent")
        config_raw = _mapping(data.get("config"), "spec.config") or {}
        deps_raw = _mapping(data.get("dependencies"), "spec.dependencies") or {}
        server_raw = _mapping(data.get("server"), "spec.server") or {}
        language_raw = _mapping(data.get("language"), "spec.language")
        scm_raw = _mapping(data.get("scm"), "spec.scm")
        sandbox_raw = _mapping(data.get("sandbox"), "spec.sandbox")
        deployment_raw = _mapping(data.get("deployment"), "spec.deployment")
        hooks_raw = _mapping(data.get("hooks"), "spec.hooks")

        skills_raw = data.get("skills") or []
        if not isinstance(skills_raw, list):
            raise DocumentError("spec.skills must be a list")
        skills = []
        for i, item in enumerate(skills_raw):
            skill_raw = _mapping(item, f"spec.skills[{i}]")
            skills.append(Skill.from_dict(skill_raw or {}, index=i))

        dependencies = {}
        for dep_name, dep_raw in deps_raw.items():
            dep = _mapping(dep_raw, f"spec.dependencies.{dep_name}") or {}
            dependencies[str(dep_name)] = Dependency.from_dict(dep)

        return cls(
            server=Server.from_dict(server_raw),
            capabilities=(
                Capabilities.from_dict(capabilities_raw)
                if capabilities_raw is not None
                else None
            ),
            card=Card.from_dict(card_raw) if card_raw is not None else None,
            agent=Agent.from_dict(agent_raw) if agent_raw is not None else None,
            config=to_json_value(config_raw, "spec.config"),  # type: ignore[arg-type]
            dependencies=dependencies,
            skills=tuple(skills),
            language=(
                Language.from_dict(language_raw) if language_raw is not None else None
            ),
            acronyms=_str_tuple(data.get("acronyms"), "spec.acronyms"),
            scm=SCM.from_dict(scm_raw) if scm_raw is not None else None,
            sandbox=Sandbox.from_dict(sandbox_raw) if sandbox_raw is not None else None,
            deployment=(
                Deployment(type=_str(deployment_raw.get("type")))
                if deployment_raw is not None
                else None
            ),
            hooks=(
                Hooks(post=_str_tuple(hooks_raw.get("post"), "spec.hooks.post"))
                if hooks_raw is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Document:
    """Root of a parsed ADL file. Immutable once loaded."""

    api_version: str = ""
    kind: str = ""
    metadata: Metadata = field(default_factory=Metadata)
    spec: Spec = field(default_factory=Spec)

    @property
    def language(self) -> str:
        """Target language name (go when no language block is present)."""
        if self.spec.language is None:
            return "go"
        return self.spec.language.name

    def find_skill(self, name: str) -> Skill | None:
        """Return the skill with the given name, or None."""
        for skill in self.spec.skills:
            if skill.name == name:
                return skill
        return None

    def with_overrides(
        self,
        *,
        deployment_type: str | None = None,
        flox: bool = False,
        devcontainer: bool = False,
    ) -> Document:
        """Return a copy with command-line deployment and sandbox overrides applied.

        Flags only switch features on; an unset flag keeps the document value.
        """
        spec = self.spec
        if deployment_type:
            spec = replace(spec, deployment=Deployment(type=deployment_type))
        if flox or devcontainer:
            sandbox = spec.sandbox or Sandbox()
            if flox:
                sandbox = replace(sandbox, flox=FloxConfig(enabled=True))
            if devcontainer:
                sandbox = replace(
                    sandbox, devcontainer=DevContainerConfig(enabled=True)
                )
            spec = replace(spec, sandbox=sandbox)
        if spec is self.spec:
            return self
        return replace(self, spec=spec)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        """Create a Document from a parsed YAML mapping.

        Missing blocks stay None so the validator can report them.
        """
        metadata_raw = _mapping(data.get("metadata"), "metadata") or {}
        spec_raw = _mapping(data.get("spec"), "spec") or {}
        return cls(
            api_version=_str(data.get("apiVersion")),
            kind=_str(data.get("kind")),
            metadata=Metadata.from_dict(metadata_raw),
            spec=Spec.from_dict(spec_raw),
        )


@dataclass(frozen=True)
class GeneratedMetadata:
    """Information about a generation run, exposed to templates."""

    generated_at: dt.datetime
    cli_version: str
    template: str
    adl_file: str = ""
