"""ADL file loading."""

from __future__ import annotations

from pathlib import Path

import yaml

from adl.schema.types import Document, DocumentError


def load_document(path: Path) -> Document:
    """Read and deserialize an ADL file.

    Raises DocumentError when the file is missing, unreadable, not valid YAML,
    or does not hold a mapping at its root.
    """
    if not path.exists():
        raise DocumentError(f"ADL file '{path}' does not exist")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"failed to read ADL file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise DocumentError(f"failed to parse ADL file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise DocumentError(f"ADL file '{path}' must contain a YAML mapping")

    return Document.from_dict(data)


def parse_document(text: str) -> Document:
    """Deserialize an ADL document from a YAML string."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentError(f"failed to parse ADL document: {e}") from e
    if not isinstance(data, dict):
        raise DocumentError("ADL document must contain a YAML mapping")
    return Document.from_dict(data)
