"""ADL document model, loading and validation."""

from adl.schema.loader import load_document, parse_document
from adl.schema.types import (
    API_VERSION,
    KIND,
    SUPPORTED_LANGUAGES,
    Document,
    DocumentError,
    GeneratedMetadata,
    Skill,
)
from adl.schema.validator import ValidationError, ensure_valid, validate

__all__ = [
    "API_VERSION",
    "KIND",
    "SUPPORTED_LANGUAGES",
    "Document",
    "DocumentError",
    "GeneratedMetadata",
    "Skill",
    "ValidationError",
    "ensure_valid",
    "load_document",
    "parse_document",
    "validate",
]
