"""Router tree builder.

Rebuilds the live server's router tree from the static route descriptors
shipped with each module, without starting the server:

    /api                      root
    /api/auth                 the auth module's own routes
    /api/auth/{type}          auth strategy modules, merged with auth defaults
    /api/{root}               REST resource modules, merged with api defaults
"""

from typing import Any

from pydantic import ValidationError

from authoring_docs.errors import ModuleReadError
from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ModuleDescriptor, RouteDefinition, RouterNode
from authoring_docs.scanner.files import read_optional_json

logger = get_logger(__name__)

API_ROOT = "/api"
AUTH_ROOT = "/api/auth"

AUTH_MODULE = "adapt-authoring-auth"
API_MODULE = "adapt-authoring-api"

ROUTES_FILE = "routes.json"
AUTH_ROUTES_FILE = "lib/routes.json"
DEFAULT_ROUTES_FILE = "lib/default-routes.json"


def build_router_tree(dependencies: dict[str, ModuleDescriptor]) -> RouterNode:
    """Assemble the router tree rooted at /api."""
    api_router = RouterNode(path=API_ROOT)

    # Both templates are resolved before any module route is merged.
    api_defaults = _load_default_routes(dependencies.get(API_MODULE))
    auth_defaults = _load_default_routes(dependencies.get(AUTH_MODULE))
    auth_router = _build_auth_router(dependencies.get(AUTH_MODULE))
    if auth_router is not None:
        api_router.child_routers.append(auth_router)

    for name, dep in dependencies.items():
        if not dep.module:
            continue
        try:
            config = read_optional_json(dep.root_dir / ROUTES_FILE)
        except ModuleReadError as e:
            logger.warning("routes_skipped", module=name, path=str(e.path), reason=e.reason)
            continue
        if config is None:
            continue
        if not isinstance(config, dict):
            logger.warning("routes_not_an_object", module=name)
            continue

        try:
            if config.get("type") is not None:
                if auth_router is None:
                    logger.warning("auth_type_without_auth_router", module=name, type=config["type"])
                    continue
                _mount(auth_router, build_auth_type_router(config, auth_defaults), name)
            elif config.get("root"):
                _mount(api_router, build_api_router(config, api_defaults), name)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.warning("routes_invalid", module=name, error=str(e))

    return api_router


def build_api_router(config: dict, default_routes: list[dict]) -> RouterNode:
    """Build the router for a REST resource module mounted at /api/{root}."""
    root = config["root"]
    routes = config.get("routes") or []
    if config.get("useDefaultRoutes") is not False and default_routes:
        routes = merge_with_defaults(routes, default_routes)

    replacements = {
        "${scope}": config.get("permissionsScope") or root,
        "${schemaName}": _fallback(config.get("schemaName"), root),
        "${collectionName}": _fallback(config.get("collectionName"), root),
    }
    return RouterNode(
        path=f"{API_ROOT}/{root}",
        routes=[RouteDefinition.from_declaration(replace_placeholders(r, replacements)) for r in routes],
    )


def build_auth_type_router(config: dict, default_routes: list[dict]) -> RouterNode:
    """Build the router for an auth strategy module mounted at /api/auth/{type}."""
    routes = config.get("routes") or []
    if default_routes:
        routes = merge_with_defaults(routes, default_routes)
    return RouterNode(
        path=f"{AUTH_ROOT}/{config['type']}",
        routes=[RouteDefinition.from_declaration(r) for r in routes],
    )


def merge_with_defaults(custom_routes: list[dict], default_routes: list[dict]) -> list[dict]:
    """Merge a module's routes into an inherited default routes template.

    Default routes come first, in template order. A custom route flagged
    `override` is merged into the default with the same `route` value. The
    remaining custom routes follow in declaration order; this includes any
    override that found no default to merge into.
    """
    overrides = {r["route"]: r for r in custom_routes if r.get("override")}
    consumed: set[str] = set()

    merged = []
    for default in default_routes:
        override = overrides.get(default["route"])
        if override is None:
            merged.append(default)
            continue
        consumed.add(default["route"])
        merged.append(merge_route(default, override))

    for route in custom_routes:
        if route.get("override"):
            if route["route"] in consumed:
                continue
            logger.debug("unmatched_override_appended", route=route["route"])
            route = {k: v for k, v in route.items() if k != "override"}
        merged.append(route)
    return merged


def merge_route(default: dict, override: dict) -> dict:
    """Merge one override into its default route.

    Precedence, lowest first: default fields, then override fields (minus the
    `override` flag). `handlers` is merged per HTTP method instead of being
    replaced wholesale.
    """
    fields = {k: v for k, v in override.items() if k != "override"}
    result = {**default, **fields}
    result["handlers"] = {**(default.get("handlers") or {}), **(fields.get("handlers") or {})}
    return result


def replace_placeholders(value: Any, replacements: dict[str, str]) -> Any:
    """Replace placeholder tokens in every string nested inside `value`."""
    if isinstance(value, str):
        for token, replacement in replacements.items():
            if replacement is not None:
                value = value.replace(token, replacement)
        return value
    if isinstance(value, list):
        return [replace_placeholders(item, replacements) for item in value]
    if isinstance(value, dict):
        return {k: replace_placeholders(v, replacements) for k, v in value.items()}
    return value


def _load_default_routes(dep: ModuleDescriptor | None) -> list[dict]:
    if dep is None:
        return []
    try:
        template = read_optional_json(dep.root_dir / DEFAULT_ROUTES_FILE)
    except ModuleReadError as e:
        logger.warning("default_routes_skipped", module=dep.name, path=str(e.path), reason=e.reason)
        return []
    if not isinstance(template, dict):
        return []
    return template.get("routes") or []


def _build_auth_router(dep: ModuleDescriptor | None) -> RouterNode | None:
    if dep is None:
        return None
    try:
        config = read_optional_json(dep.root_dir / AUTH_ROUTES_FILE)
    except ModuleReadError as e:
        logger.warning("auth_routes_skipped", module=dep.name, path=str(e.path), reason=e.reason)
        return None
    if not isinstance(config, dict):
        return None
    try:
        routes = [RouteDefinition.from_declaration(r) for r in config.get("routes") or []]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.warning("auth_routes_invalid", module=dep.name, error=str(e))
        return None
    return RouterNode(path=AUTH_ROOT, routes=routes)


def _mount(parent: RouterNode, child: RouterNode, module_name: str) -> None:
    if parent.find_child(child.path) is not None:
        logger.warning("duplicate_mount_skipped", module=module_name, path=child.path)
        return
    parent.child_routers.append(child)


def _fallback(value: str | None, root: str) -> str:
    return root if value is None else value
