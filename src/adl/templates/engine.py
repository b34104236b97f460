"""Jinja2 rendering for ADL scaffolding templates.

Provides the TemplateEngine class, which renders template bodies from the
Registry against a context dictionary, and the generated-file header that
marks files produced by the CLI.
"""

from __future__ import annotations

import datetime as dt
import json
import re
from collections.abc import Iterable
from functools import partial
from pathlib import PurePosixPath
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from adl.errors import AdlError

DEFAULT_ACRONYMS: dict[str, str] = {
    word: word.upper()
    for word in (
        "id", "api", "url", "uri", "http", "https", "json", "xml", "sql",
        "html", "css", "js", "ui", "uuid", "tcp", "udp", "ip", "dns", "tls",
        "ssl", "cpu", "gpu", "ram", "io", "os", "db", "mb", "gb", "kb",
    )
}  # fmt: skip

# Comment prefix per recognized file type.
HEADER_COMMENTS: dict[str, str] = {
    "go": "//",
    "rust": "//",
    "typescript": "//",
    "yaml": "#",
    "toml": "#",
    "dockerfile": "#",
    "taskfile": "#",
}

_EXTENSION_TYPES: dict[str, str] = {
    ".go": "go",
    ".rs": "rust",
    ".ts": "typescript",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}


class TemplateRenderError(AdlError):
    """Raised when a template fails to compile or render."""


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------


def build_acronyms(custom: Iterable[str] = ()) -> dict[str, str]:
    """Merge the default acronym table with document-provided acronyms."""
    acronyms = dict(DEFAULT_ACRONYMS)
    for acronym in custom:
        acronyms[acronym.lower()] = acronym.upper()
    return acronyms


def _camel_to_snake(value: str) -> str:
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def _split_words(value: str) -> list[str]:
    if "_" not in value and "-" not in value:
        value = _camel_to_snake(value)
    return [w for w in re.split(r"[-_\s]+", value) if w]


def pascal_case(value: str, acronyms: dict[str, str] | None = None) -> str:
    """Convert ``get_user_id`` or ``getUserId`` to ``GetUserID``."""
    table = DEFAULT_ACRONYMS if acronyms is None else acronyms
    parts = []
    for word in _split_words(value):
        lower = word.lower()
        parts.append(table.get(lower, lower.capitalize()))
    return "".join(parts)


def camel_case(value: str, acronyms: dict[str, str] | None = None) -> str:
    """Convert ``get_user_id`` to ``getUserID``."""
    pascal = pascal_case(value, acronyms)
    if not pascal:
        return ""
    return pascal[0].lower() + pascal[1:]


def snake_case(value: str) -> str:
    """Convert ``get-weather`` or ``getWeather`` to ``get_weather``."""
    return "_".join(w.lower() for w in _split_words(value))


def upper_snake_case(value: str, acronyms: dict[str, str] | None = None) -> str:
    """Convert ``apiKey`` or ``api-key`` to ``API_KEY``."""
    table = DEFAULT_ACRONYMS if acronyms is None else acronyms
    return "_".join(table.get(w.lower(), w.upper()) for w in _split_words(value))


# ---------------------------------------------------------------------------
# Value formatting
# ---------------------------------------------------------------------------


def to_json(value: Any, indent: int | None = None) -> str:
    """Serialize a JSON value, compact unless an indent is given."""
    if indent is None:
        return json.dumps(value, separators=(",", ":"))
    return json.dumps(value, indent=indent)


def to_go_map(value: Any) -> str:
    """Render a JSON value as a Go literal (``map[string]any{...}``)."""
    if isinstance(value, dict):
        if not value:
            return "map[string]any{}"
        items = ", ".join(
            f"{json.dumps(str(k))}: {to_go_map(v)}" for k, v in value.items()
        )
        return f"map[string]any{{{items}}}"
    if isinstance(value, list):
        if not value:
            return "[]string{}"
        if all(isinstance(item, str) for item in value):
            return "[]string{" + ", ".join(json.dumps(item) for item in value) + "}"
        return "[]any{" + ", ".join(to_go_map(item) for item in value) + "}"
    if value is None:
        return "nil"
    return json.dumps(value)


# ---------------------------------------------------------------------------
# Generated file header
# ---------------------------------------------------------------------------


def detect_file_type(path: str) -> str | None:
    """Return the header file type for an output path, or None."""
    name = PurePosixPath(path).name.lower()
    if name == "taskfile.yml":
        return "taskfile"
    if name == "dockerfile":
        return "dockerfile"
    return _EXTENSION_TYPES.get(PurePosixPath(name).suffix)


def generated_header(file_type: str, version: str, generated_at: dt.datetime) -> str:
    """Build the header comment naming the generator, version and timestamp."""
    prefix = HEADER_COMMENTS[file_type]
    timestamp = generated_at.isoformat(timespec="seconds")
    lines = [
        f"Code generated by ADL CLI {version}. DO NOT EDIT.",
        "This file was generated from an ADL (Agent Definition Language) file.",
        "Files matched by .adl-ignore are preserved on regeneration.",
        f"Generated at: {timestamp}",
    ]
    return "".join(f"{prefix} {line}\n" for line in lines) + "\n"


# ---------------------------------------------------------------------------
# TemplateEngine
# ---------------------------------------------------------------------------


class TemplateEngine:
    """Renders template bodies with Jinja2.

    Case-conversion filters honour the default acronym table plus any custom
    acronyms supplied by the document.
    """

    def __init__(self, acronyms: Iterable[str] = ()) -> None:
        self.acronyms = build_acronyms(acronyms)
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pascal_case"] = partial(pascal_case, acronyms=self.acronyms)
        self.env.filters["camel_case"] = partial(camel_case, acronyms=self.acronyms)
        self.env.filters["snake_case"] = snake_case
        self.env.filters["upper_snake_case"] = partial(
            upper_snake_case, acronyms=self.acronyms
        )
        self.env.filters["to_json"] = to_json
        self.env.filters["to_go_map"] = to_go_map

    def render(
        self, body: str, context: dict[str, Any], *, name: str = "<template>"
    ) -> str:
        """Render a template body; the result always ends with a newline."""
        try:
            result = self.env.from_string(body).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"failed to render {name}: {e}") from e
        if result and not result.endswith("\n"):
            result += "\n"
        return result

    def render_with_header(
        self,
        body: str,
        context: dict[str, Any],
        path: str,
        *,
        version: str,
        generated_at: dt.datetime,
    ) -> str:
        """Render a template and prepend the generated-file header if applicable."""
        content = self.render(body, context, name=path)
        file_type = detect_file_type(path)
        if file_type is None:
            return content
        return generated_header(file_type, version, generated_at) + content
