"""Shared fixtures for adl tests."""

import copy
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

VALID_ADL: dict[str, Any] = {
    "apiVersion": "adl.dev/v1",
    "kind": "Agent",
    "metadata": {
        "name": "weather-agent",
        "description": "Reports the current weather",
        "version": "0.1.0",
    },
    "spec": {
        "capabilities": {
            "streaming": True,
            "pushNotifications": False,
            "stateTransitionHistory": False,
        },
        "server": {"port": 8080, "debug": False},
        "language": {
            "go": {"module": "github.com/example/weather-agent", "version": "1.24"},
        },
        "skills": [
            {
                "id": "get_weather",
                "name": "get_weather",
                "description": "Get the current weather for a city",
                "tags": ["weather"],
                "schema": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}},
                    "required": ["city"],
                },
            }
        ],
    },
}


@pytest.fixture
def adl_data() -> dict[str, Any]:
    """A fresh, valid Go ADL document as a plain dict."""
    return copy.deepcopy(VALID_ADL)


@pytest.fixture
def write_adl(tmp_path: Path) -> Callable[..., Path]:
    """Write an ADL dict to a YAML file under tmp_path and return its path."""

    def _write(data: dict[str, Any], name: str = "agent.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False))
        return path

    return _write
