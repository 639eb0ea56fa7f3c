from pathlib import Path

import pytest

from authoring_docs.context import ServerModule, StaticAppContext, load_root_package
from authoring_docs.errors import DocsBuildError
from authoring_docs.scanner.schemas import SchemaRegistry

FIXTURES = Path(__file__).parent / "fixtures"
APP = FIXTURES / "app"


class TestStaticAppContext:
    def test_init_populates_everything(self):
        app = StaticAppContext.init(APP)
        assert app.root_dir == APP.resolve()
        assert app.pkg["name"] == "adapt-authoring"
        assert "adapt-authoring-content" in app.dependencies
        assert app.config.get("adapt-authoring-content.maxItems") == 50
        assert list(app.errors) == ["CONTENT_NOT_FOUND", "INVALID_PARENT"]
        assert app.router_tree.path == "/api"
        assert app.permissions.find("post", "/api/content") == ["write:content"]

    def test_on_ready_returns_self(self):
        app = StaticAppContext.init(APP)
        assert app.on_ready() is app

    def test_wait_for_server(self):
        app = StaticAppContext.init(APP)
        server = app.wait_for_module("server")
        assert isinstance(server, ServerModule)
        assert server.api is app.router_tree

    def test_wait_for_jsonschema(self):
        app = StaticAppContext.init(APP)
        jsonschema = app.wait_for_module("jsonschema")
        assert isinstance(jsonschema, SchemaRegistry)
        assert jsonschema.schemas == {"content"}

    def test_wait_for_other_module(self):
        assert StaticAppContext.init(APP).wait_for_module("mongodb") == {}

    def test_contexts_are_independent(self):
        first = StaticAppContext.init(APP)
        second = StaticAppContext.init(APP)
        assert first.router_tree is not second.router_tree


class TestLoadRootPackage:
    def test_merges_metadata(self):
        pkg = load_root_package(APP)
        assert pkg["version"] == "1.0.0"
        assert pkg["module"] is False
        assert pkg["documentation"]["excludes"] == ["adapt-authoring-hidden"]
        assert pkg["rootDir"] == APP

    def test_missing_descriptor(self, tmp_path):
        (tmp_path / "package.json").write_text('{"name": "x"}')
        with pytest.raises(DocsBuildError, match="adapt-authoring.json"):
            load_root_package(tmp_path)

    def test_non_object_descriptor(self, tmp_path):
        (tmp_path / "package.json").write_text("[]")
        (tmp_path / "adapt-authoring.json").write_text("{}")
        with pytest.raises(DocsBuildError):
            load_root_package(tmp_path)
