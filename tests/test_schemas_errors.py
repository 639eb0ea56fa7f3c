import json
from pathlib import Path

from structlog.testing import capture_logs

from authoring_docs.scanner.base import ErrorDefinition
from authoring_docs.scanner.dependencies import load_dependencies
from authoring_docs.scanner.errors import load_errors
from authoring_docs.scanner.schemas import load_schemas

FIXTURES = Path(__file__).parent / "fixtures"


def _module(base: Path, name: str, files: dict[str, object]) -> None:
    module_dir = base / "node_modules" / name
    module_dir.mkdir(parents=True)
    (module_dir / "package.json").write_text(json.dumps({"name": name}))
    (module_dir / "adapt-authoring.json").write_text("{}")
    for rel, content in files.items():
        target = module_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content if isinstance(content, str) else json.dumps(content))


class TestLoadSchemas:
    def test_fixture_schema_keyed_by_anchor(self):
        registry = load_schemas(load_dependencies(FIXTURES / "app"))
        assert registry.schemas == {"content"}
        assert "content" in registry
        assert registry.get_schema("content")["built"]["properties"]["title"] == {"type": "string"}

    def test_falls_back_to_id(self, tmp_path):
        _module(tmp_path, "m", {"schema/user.schema.json": {"$id": "user", "type": "object"}})
        registry = load_schemas(load_dependencies(tmp_path))
        assert registry.schemas == {"user"}

    def test_without_anchor_or_id(self, tmp_path):
        _module(tmp_path, "m", {"schema/x.schema.json": {"type": "object"}})
        with capture_logs() as logs:
            registry = load_schemas(load_dependencies(tmp_path))
        assert "unknown" in registry
        assert any(log["event"] == "schema_without_anchor" for log in logs)

    def test_unknown_schema_is_empty(self, tmp_path):
        registry = load_schemas(load_dependencies(tmp_path))
        assert registry.get_schema("nope") == {"built": {}}

    def test_invalid_file_skipped(self, tmp_path):
        _module(tmp_path, "m", {"schema/bad.schema.json": "{", "schema/ok.schema.json": {"$anchor": "ok"}})
        registry = load_schemas(load_dependencies(tmp_path))
        assert registry.schemas == {"ok"}


class TestLoadErrors:
    def test_content_not_found_shape(self):
        errors = load_errors(load_dependencies(FIXTURES / "app"))
        assert errors["CONTENT_NOT_FOUND"].as_dict() == {
            "code": "CONTENT_NOT_FOUND",
            "statusCode": 404,
            "meta": {"description": "Content not found"},
        }

    def test_data_kept_when_present(self):
        errors = load_errors(load_dependencies(FIXTURES / "app"))
        assert errors["INVALID_PARENT"].as_dict()["meta"]["data"] == {"parentId": "ID of the parent"}

    def test_sorted_by_code(self, tmp_path):
        _module(tmp_path, "m", {"errors/errors.json": {"ZED": {"statusCode": 500}, "ALPHA": {"statusCode": 400}}})
        errors = load_errors(load_dependencies(tmp_path))
        assert list(errors) == ["ALPHA", "ZED"]
        assert all(isinstance(e, ErrorDefinition) for e in errors.values())

    def test_duplicate_code_last_wins_and_warns(self, tmp_path):
        _module(tmp_path, "a", {"errors/errors.json": {"DUP": {"statusCode": 400, "description": "first"}}})
        _module(tmp_path, "b", {"errors/errors.json": {"DUP": {"statusCode": 409, "description": "second"}}})
        with capture_logs() as logs:
            errors = load_errors(load_dependencies(tmp_path))
        assert errors["DUP"].status_code == 409
        assert errors["DUP"].meta.description == "second"
        redefined = [log for log in logs if log["event"] == "error_code_redefined"]
        assert redefined[0]["code"] == "DUP"

    def test_identical_redefinition_is_quiet(self, tmp_path):
        same = {"SAME": {"statusCode": 400, "description": "x"}}
        _module(tmp_path, "a", {"errors/errors.json": same})
        _module(tmp_path, "b", {"errors/errors.json": same})
        with capture_logs() as logs:
            load_errors(load_dependencies(tmp_path))
        assert not [log for log in logs if log["event"] == "error_code_redefined"]

    def test_falsy_data_kept(self, tmp_path):
        _module(tmp_path, "m", {"errors/errors.json": {"E": {"statusCode": 400, "description": "d", "data": {}}}})
        errors = load_errors(load_dependencies(tmp_path))
        assert errors["E"].as_dict() == {"code": "E", "statusCode": 400, "meta": {"description": "d", "data": {}}}

    def test_zero_and_false_data_kept(self, tmp_path):
        _module(tmp_path, "m", {"errors/errors.json": {"A": {"data": 0}, "B": {"data": False}}})
        errors = load_errors(load_dependencies(tmp_path))
        assert errors["A"].as_dict()["meta"]["data"] == 0
        assert errors["B"].as_dict()["meta"]["data"] is False

    def test_non_object_entries_skipped(self, tmp_path):
        _module(tmp_path, "m", {"errors/a.json": ["nope"], "errors/b.json": {"BAD": "text", "OK": {}}})
        errors = load_errors(load_dependencies(tmp_path))
        assert list(errors) == ["OK"]
        assert errors["OK"].as_dict() == {"code": "OK", "meta": {"description": ""}}
