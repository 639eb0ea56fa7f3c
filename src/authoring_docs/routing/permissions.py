"""Permission index builder.

Walks the router tree and records, per HTTP method, which scopes each
secured route requires. Lookups scan a method's entries in order and take
the first matching pattern, so the traversal order below is part of the
contract: parent routes before child routers, routes in declaration order.
"""

import re
from typing import NamedTuple

from authoring_docs.errors import PathPatternError
from authoring_docs.log import get_logger
from authoring_docs.routing.paths import compile_path
from authoring_docs.scanner.base import RouterNode

logger = get_logger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")


class PermissionEntry(NamedTuple):
    pattern: re.Pattern
    scopes: list[str]
    route: str


class PermissionIndex:
    """Method-indexed lists of (pattern, scopes) for secured routes."""

    def __init__(self):
        self.routes: dict[str, list[PermissionEntry]] = {m: [] for m in HTTP_METHODS}

    def __getitem__(self, method: str) -> list[PermissionEntry]:
        return self.routes.get(method.lower(), [])

    def add(self, method: str, route: str, scopes: list[str]) -> None:
        self.routes[method].append(PermissionEntry(compile_path(route), scopes, route))

    def find(self, method: str, path: str) -> list[str] | None:
        """Return the scopes of the first entry matching `path`, or None."""
        for entry in self.routes.get(method.lower(), []):
            if entry.pattern.match(path):
                return entry.scopes
        return None


def full_route(router: RouterNode, route: str) -> str:
    """Absolute path of `route` mounted on `router`."""
    return router.path + ("" if route == "/" else route)


def build_permissions(router_tree: RouterNode) -> PermissionIndex:
    index = PermissionIndex()
    _walk(router_tree, index)
    return index


def _walk(router: RouterNode, index: PermissionIndex) -> None:
    for route_def in router.routes:
        path = full_route(router, route_def.route)
        for method, scopes in route_def.permissions.items():
            # None marks an explicitly unauthenticated route
            if scopes is None:
                continue
            m = method.lower()
            if m not in index.routes:
                logger.debug("permission_method_ignored", method=method, route=path)
                continue
            try:
                index.add(m, path, scopes)
            except PathPatternError as e:
                logger.warning("permission_pattern_skipped", route=path, error=str(e))

    for child in router.child_routers:
        _walk(child, index)
