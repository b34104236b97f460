"""Template registry and rendering engine."""

from adl.templates.engine import TemplateEngine, TemplateRenderError
from adl.templates.registry import (
    Registry,
    RegistryError,
    TemplateNotFoundError,
    detect_language,
    get_package_templates_path,
)

__all__ = [
    "Registry",
    "RegistryError",
    "TemplateEngine",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "detect_language",
    "get_package_templates_path",
]
