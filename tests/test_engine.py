"""Tests for template rendering and generated headers."""

import datetime as dt

import pytest

from adl.templates.engine import (
    TemplateEngine,
    TemplateRenderError,
    camel_case,
    detect_file_type,
    generated_header,
    pascal_case,
    snake_case,
    to_go_map,
    to_json,
    upper_snake_case,
)

GENERATED_AT = dt.datetime(2025, 1, 2, 3, 4, 5, tzinfo=dt.UTC)


class TestCaseFilters:
    """Tests for case conversion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("get_weather", "GetWeather"),
            ("get-user-id", "GetUserID"),
            ("getUserId", "GetUserID"),
            ("fetch_api_url", "FetchAPIURL"),
        ],
    )
    def test_pascal_case(self, value: str, expected: str) -> None:
        """Test PascalCase with the default acronyms."""
        assert pascal_case(value) == expected

    def test_camel_case(self) -> None:
        """Test camelCase keeps acronyms upper-cased after the first word."""
        assert camel_case("get_user_id") == "getUserID"

    def test_snake_case(self) -> None:
        """Test snake_case from dashes and camelCase."""
        assert snake_case("get-weather") == "get_weather"
        assert snake_case("getWeather") == "get_weather"

    def test_upper_snake_case(self) -> None:
        """Test UPPER_SNAKE_CASE."""
        assert upper_snake_case("apiKey") == "API_KEY"

    def test_custom_acronyms(self) -> None:
        """Test that document acronyms feed the filters."""
        engine = TemplateEngine(acronyms=["xkcd"])
        assert engine.render("{{ 'get_xkcd_comic' | pascal_case }}", {}) == (
            "GetXKCDComic\n"
        )


class TestValueFilters:
    """Tests for JSON and Go literal formatting."""

    def test_to_json_compact_by_default(self) -> None:
        """Test compact JSON output."""
        assert to_json({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_to_json_indented(self) -> None:
        """Test indented JSON output."""
        assert to_json({"a": 1}, 2) == '{\n  "a": 1\n}'

    def test_to_go_map(self) -> None:
        """Test Go literals for a typical skill schema."""
        schema = {"type": "object", "required": ["city"], "default": None}
        assert to_go_map(schema) == (
            'map[string]any{"type": "object", "required": []string{"city"}, '
            '"default": nil}'
        )

    def test_to_go_map_empty(self) -> None:
        """Test empty containers."""
        assert to_go_map({}) == "map[string]any{}"
        assert to_go_map([]) == "[]string{}"


class TestHeaders:
    """Tests for generated-file headers."""

    @pytest.mark.parametrize(
        ("path", "file_type"),
        [
            ("main.go", "go"),
            ("src/main.rs", "rust"),
            ("src/index.ts", "typescript"),
            ("k8s/deployment.yaml", "yaml"),
            (".github/workflows/ci.yml", "yaml"),
            ("Cargo.toml", "toml"),
            ("Dockerfile", "dockerfile"),
            ("Taskfile.yml", "taskfile"),
            ("package.json", None),
            ("README.md", None),
            ("go.mod", None),
        ],
    )
    def test_detect_file_type(self, path: str, file_type: str | None) -> None:
        """Test extension and filename detection."""
        assert detect_file_type(path) == file_type

    def test_header_comment_style(self) -> None:
        """Test that Go uses // and YAML uses #."""
        go_header = generated_header("go", "1.2.3", GENERATED_AT)
        yaml_header = generated_header("yaml", "1.2.3", GENERATED_AT)

        assert go_header.startswith(
            "// Code generated by ADL CLI 1.2.3. DO NOT EDIT.\n"
        )
        assert "// Generated at: 2025-01-02T03:04:05+00:00\n" in go_header
        assert yaml_header.startswith("# Code generated by ADL CLI 1.2.3.")
        assert go_header.endswith("\n\n")

    def test_render_with_header(self) -> None:
        """Test that recognized files get a header and others do not."""
        engine = TemplateEngine()
        go = engine.render_with_header(
            "package main", {}, "main.go", version="1.0.0", generated_at=GENERATED_AT
        )
        json_file = engine.render_with_header(
            "{}", {}, "package.json", version="1.0.0", generated_at=GENERATED_AT
        )

        assert go.startswith("// Code generated by ADL CLI 1.0.0")
        assert go.endswith("package main\n")
        assert json_file == "{}\n"


class TestTemplateEngine:
    """Tests for TemplateEngine.render."""

    def test_render_context(self) -> None:
        """Test simple variable rendering."""
        engine = TemplateEngine()
        assert engine.render("hello {{ name }}", {"name": "agent"}) == "hello agent\n"

    def test_undefined_variable_raises(self) -> None:
        """Test that undefined variables are errors, not empty strings."""
        engine = TemplateEngine()
        with pytest.raises(TemplateRenderError, match="main.go"):
            engine.render("{{ missing }}", {}, name="main.go")

    def test_syntax_error_raises(self) -> None:
        """Test that template syntax errors are wrapped."""
        engine = TemplateEngine()
        with pytest.raises(TemplateRenderError):
            engine.render("{% if %}", {})
