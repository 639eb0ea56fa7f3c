"""OpenAPI document generator for the REST explorer.

Turns the static router tree, permission index and schema registry into an
OpenAPI 3.0.3 document, written as both JSON and YAML.
"""

import json
import re
from pathlib import Path

import yaml

from authoring_docs.routing.paths import path_params
from authoring_docs.routing.permissions import PermissionIndex, full_route
from authoring_docs.scanner.base import RouterNode

OPENAPI_VERSION = "3.0.3"
REST_DIR = "rest"
HIDDEN_PROPERTY_FLAGS = ("isInternal", "isReadOnly")
INTERNAL_NOTICE = "**ONLY ACCESSIBLE FROM LOCALHOST**"

_PARAM_SEGMENT = re.compile(r":(\w+)\??")


def generate_swagger(app, output_dir: Path) -> Path:
    """Write rest/api.json and rest/api.yaml; return the rest directory."""
    server = app.wait_for_module("server")
    jsonschema = app.wait_for_module("jsonschema")
    doc = build_openapi(
        title=app.pkg.get("name", "API"),
        version=app.pkg.get("version", "0.0.0"),
        schemas={name: jsonschema.get_schema(name)["built"] for name in sorted(jsonschema.schemas)},
        router=server.api,
        permissions=app.permissions,
    )

    rest_dir = output_dir / REST_DIR
    rest_dir.mkdir(parents=True, exist_ok=True)
    (rest_dir / "api.json").write_text(json.dumps(doc, indent=2), encoding="utf-8")
    (rest_dir / "api.yaml").write_text(yaml.safe_dump(doc, sort_keys=False, allow_unicode=True), encoding="utf-8")
    return rest_dir


def build_openapi(
    title: str, version: str, schemas: dict[str, dict], router: RouterNode, permissions: PermissionIndex
) -> dict:
    """Build the OpenAPI document as a plain dict."""
    paths: dict[str, dict] = {}
    _collect_paths(router, permissions, paths)
    return {
        "openapi": OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "components": {"schemas": {name: sanitise_schema(s) for name, s in schemas.items()}},
        "paths": {key: paths[key] for key in sorted(paths)},
    }


def sanitise_schema(schema: dict) -> dict:
    """Drop properties flagged internal or read-only, at any depth."""
    result = dict(schema)
    props = schema.get("properties")
    if isinstance(props, dict):
        result["properties"] = {
            name: sanitise_schema(prop) if isinstance(prop, dict) else prop
            for name, prop in props.items()
            if not (isinstance(prop, dict) and any(prop.get(flag) for flag in HIDDEN_PROPERTY_FLAGS))
        }
    items = schema.get("items")
    if isinstance(items, dict):
        result["items"] = sanitise_schema(items)
    return result


def to_openapi_path(route: str) -> str:
    """Rewrite `/api/x/:id` as `/api/x/{id}`."""
    return _PARAM_SEGMENT.sub(r"{\1}", route)


def _collect_paths(router: RouterNode, permissions: PermissionIndex, paths: dict[str, dict]) -> None:
    tag = " ".join(router.path.split("/")[2:]) or "api"
    for route_def in router.routes:
        route = full_route(router, route_def.route)
        operations = paths.setdefault(to_openapi_path(route), {})
        for method in route_def.handlers:
            meta = route_def.meta.get(method) or {}
            scopes = permissions.find(method, route)
            operation = {
                "tags": [tag],
                "summary": meta.get("description", ""),
                "description": _describe(scopes, route_def.internal),
                "parameters": _parameters(route) + list(meta.get("parameters") or []),
                "responses": meta.get("responses") or {"200": {"description": "Success"}},
            }
            if meta.get("requestBody"):
                operation["requestBody"] = meta["requestBody"]
            if scopes:
                operation["x-required-scopes"] = scopes
            operations[method.lower()] = operation

    for child in router.child_routers:
        _collect_paths(child, permissions, paths)


def _parameters(route: str) -> list[dict]:
    return [
        {"name": name, "in": "path", "required": required, "schema": {"type": "string"}}
        for name, required in path_params(route)
    ]


def _describe(scopes: list[str] | None, internal: bool) -> str:
    if scopes:
        text = "Required scopes: " + " ".join(f"`{s}`" for s in scopes)
    else:
        text = "Route requires no authentication"
    if internal:
        text = f"{INTERNAL_NOTICE}\n\n{text}"
    return text
