"""Tests for template discovery and file mapping."""

from pathlib import Path

import pytest

from adl.schema import Document
from adl.templates.registry import (
    Registry,
    RegistryError,
    TemplateNotFoundError,
    is_tool_template,
    template_roots,
)


def _write_template(base: Path, relative: str, body: str) -> None:
    path = base / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)


@pytest.fixture
def template_tree(tmp_path: Path) -> Path:
    """A minimal template tree with colliding keys across roots."""
    _write_template(tmp_path, "languages/go/main.go.tmpl", "go main")
    _write_template(tmp_path, "languages/go/config/gitignore.tmpl", "go ignore")
    _write_template(tmp_path, "common/config/gitignore.tmpl", "common ignore")
    _write_template(tmp_path, "common/docker/dockerfile.go.tmpl", "go docker")
    _write_template(tmp_path, "common/docker/dockerfile.rust.tmpl", "rust docker")
    _write_template(tmp_path, "sandbox/config/gitignore.tmpl", "sandbox ignore")
    _write_template(tmp_path, "sandbox/flox/env.json.tmpl", "flox env")
    return tmp_path


class TestRegistryLoading:
    """Tests for Registry key resolution."""

    def test_roots_in_precedence_order(self) -> None:
        """Test that language comes before common, then sandbox."""
        roots = template_roots("go")
        assert [r.prefix for r in roots] == ["languages/go", "common", "sandbox"]
        assert [r.rank for r in roots] == [0, 1, 2]

    def test_language_overrides_common(self, template_tree: Path) -> None:
        """Test that the first root to provide a key keeps it."""
        registry = Registry("go", base_path=template_tree)
        assert registry.get_template("config/gitignore") == "go ignore"
        assert registry.origin("config/gitignore") == "languages/go"

    def test_keys_strip_root_and_suffix(self, template_tree: Path) -> None:
        """Test that keys are relative to their root without .tmpl."""
        registry = Registry("go", base_path=template_tree)
        assert "main.go" in registry.list_templates()
        assert "flox/env.json" in registry.list_templates()

    def test_language_suffixed_fallback(self, template_tree: Path) -> None:
        """Test that docker/dockerfile resolves to docker/dockerfile.go."""
        registry = Registry("go", base_path=template_tree)
        assert registry.get_template("docker/dockerfile") == "go docker"

    def test_missing_key_raises(self, template_tree: Path) -> None:
        """Test that an unknown key raises TemplateNotFoundError."""
        registry = Registry("go", base_path=template_tree)
        with pytest.raises(TemplateNotFoundError, match="template not found: nope"):
            registry.get_template("nope")

    def test_unsupported_language(self) -> None:
        """Test that unknown languages are rejected."""
        with pytest.raises(RegistryError, match="unsupported language"):
            Registry("cobol")

    def test_language_without_templates(self, template_tree: Path) -> None:
        """Test that a supported language with no directory is an error."""
        with pytest.raises(RegistryError, match="no templates found"):
            Registry("rust", base_path=template_tree)

    @pytest.mark.parametrize("language", ["go", "rust", "typescript"])
    def test_bundled_templates_cover_base_files(self, adl_data, language) -> None:
        """Test that every key in the bundled file sets resolves."""
        adl_data["spec"]["language"] = {
            "go": {"go": {"module": "m", "version": "1.24"}},
            "rust": {"rust": {"packageName": "a", "version": "1", "edition": "2024"}},
            "typescript": {"typescript": {"packageName": "a", "nodeVersion": "22"}},
        }[language]
        adl_data["spec"]["deployment"] = {"type": "kubernetes"}
        adl_data["spec"]["sandbox"] = {
            "flox": {"enabled": True},
            "devcontainer": {"enabled": True},
        }
        doc = Document.from_dict(adl_data)
        registry = Registry(language)

        for key in registry.get_files(doc).values():
            assert registry.get_template(key)


class TestGetFiles:
    """Tests for Registry.get_files."""

    def test_go_file_set(self, adl_data) -> None:
        """Test the Go base files plus one tool file per skill."""
        files = Registry("go").get_files(Document.from_dict(adl_data))

        assert files["main.go"] == "main.go"
        assert files["go.mod"] == "go.mod"
        assert files[".well-known/agent.json"] == "config/agent.json"
        assert files["Taskfile.yml"] == "ci/taskfile.yml"
        assert files["Dockerfile"] == "docker/dockerfile"
        assert files["tools/get_weather.go"] == "tools.go"
        assert "k8s/deployment.yaml" not in files
        assert not any(path.startswith(".flox/") for path in files)

    def test_rust_tool_files(self, adl_data) -> None:
        """Test that Rust tools live under src/tools with a mod.rs."""
        adl_data["spec"]["language"] = {
            "rust": {"packageName": "a", "version": "1", "edition": "2024"}
        }
        files = Registry("rust").get_files(Document.from_dict(adl_data))
        assert files["src/tools/get_weather.rs"] == "tools.rs"
        assert files["src/tools/mod.rs"] == "tools.mod.rs"

    def test_conditional_files(self, adl_data) -> None:
        """Test deployment and sandbox entries."""
        adl_data["spec"]["deployment"] = {"type": "kubernetes"}
        adl_data["spec"]["sandbox"] = {
            "flox": {"enabled": True},
            "devcontainer": {"enabled": False},
        }
        files = Registry("go").get_files(Document.from_dict(adl_data))

        assert files["k8s/deployment.yaml"] == "kubernetes/deployment.yaml"
        assert files[".flox/env/manifest.toml"] == "flox/manifest.toml"
        assert ".devcontainer/devcontainer.json" not in files

    def test_file_set_is_deterministic(self, adl_data) -> None:
        """Test that the same document always yields the same mapping."""
        doc = Document.from_dict(adl_data)
        registry = Registry("go")
        first = registry.get_files(doc)
        first["extra"] = "mutated"

        again = Document.from_dict(adl_data)
        assert registry.get_files(doc) == registry.get_files(again)
        assert "extra" not in registry.get_files(doc)

    def test_tool_templates(self) -> None:
        """Test which keys are rendered per skill."""
        assert is_tool_template("tools.go")
        assert not is_tool_template("tools.mod.rs")
        assert not is_tool_template("main.go")
