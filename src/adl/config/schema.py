"""User configuration schema for adl."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class AdlConfig:
    """Defaults for `adl generate` and `adl sync`.

    Every field mirrors a command-line option. None means "not set" and
    defers to the next layer down.
    """

    template: str | None = None
    overwrite: bool | None = None
    ci: bool | None = None
    cd: bool | None = None
    hooks: bool | None = None

    def merge(self, other: AdlConfig) -> AdlConfig:
        """Return a new config where values set in `other` win."""
        return AdlConfig(
            template=other.template if other.template is not None else self.template,
            overwrite=(
                other.overwrite if other.overwrite is not None else self.overwrite
            ),
            ci=other.ci if other.ci is not None else self.ci,
            cd=other.cd if other.cd is not None else self.cd,
            hooks=other.hooks if other.hooks is not None else self.hooks,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdlConfig:
        """Create from a dictionary. Unknown keys are ignored."""
        template = data.get("template")
        return cls(
            template=str(template) if template is not None else None,
            overwrite=_optional_bool(data.get("overwrite")),
            ci=_optional_bool(data.get("ci")),
            cd=_optional_bool(data.get("cd")),
            hooks=_optional_bool(data.get("hooks")),
        )


# Built-in defaults, used when a value is set nowhere else
DEFAULT_CONFIG = AdlConfig(
    template="minimal",
    overwrite=False,
    ci=False,
    cd=False,
    hooks=True,
)
