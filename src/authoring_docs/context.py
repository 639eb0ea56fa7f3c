"""Static stand-in for the running application.

The generators were written against a live application handle. This
context answers the same questions from the files on disk, so the docs can
be built without booting the server.
"""

from pathlib import Path
from typing import Any

from authoring_docs.errors import DocsBuildError, ModuleReadError
from authoring_docs.log import get_logger
from authoring_docs.routing.permissions import PermissionIndex, build_permissions
from authoring_docs.routing.tree import build_router_tree
from authoring_docs.scanner.base import ErrorDefinition, ModuleDescriptor, RouterNode
from authoring_docs.scanner.config import ConfigDefaults, load_config_defaults
from authoring_docs.scanner.dependencies import METADATA_FILE, PACKAGE_FILE, load_dependencies, merge_descriptor
from authoring_docs.scanner.errors import load_errors
from authoring_docs.scanner.files import read_json
from authoring_docs.scanner.schemas import SchemaRegistry, load_schemas

logger = get_logger(__name__)


class ServerModule:
    """What generators expect from the `server` module: the api router."""

    def __init__(self, api: RouterNode):
        self.api = api


class StaticAppContext:
    """Drop-in replacement for the application instance during doc builds."""

    def __init__(
        self,
        root_dir: Path,
        pkg: dict,
        dependencies: dict[str, ModuleDescriptor],
        config: ConfigDefaults,
        errors: dict[str, ErrorDefinition],
        schemas: SchemaRegistry,
        router_tree: RouterNode,
        permissions: PermissionIndex,
    ):
        self.root_dir = root_dir
        self.pkg = pkg
        self.dependencies = dependencies
        self.config = config
        self.errors = errors
        self.schemas = schemas
        self.router_tree = router_tree
        self.permissions = permissions
        self._server = ServerModule(router_tree)

    @classmethod
    def init(cls, root_dir: Path) -> "StaticAppContext":
        """Scan `root_dir` and return a fully populated context."""
        root_dir = root_dir.resolve()
        pkg = load_root_package(root_dir)

        dependencies = load_dependencies(root_dir)
        router_tree = build_router_tree(dependencies)
        ctx = cls(
            root_dir=root_dir,
            pkg=pkg,
            dependencies=dependencies,
            config=load_config_defaults(dependencies),
            errors=load_errors(dependencies),
            schemas=load_schemas(dependencies),
            router_tree=router_tree,
            permissions=build_permissions(router_tree),
        )
        logger.info(
            "app_context_ready",
            app=pkg.get("name"),
            modules=len(dependencies),
            schemas=len(ctx.schemas.schemas),
            errors=len(ctx.errors),
        )
        return ctx

    def on_ready(self) -> "StaticAppContext":
        return self

    def wait_for_module(self, name: str) -> Any:
        """Return the mock module a generator asks for."""
        if name == "server":
            return self._server
        if name == "jsonschema":
            return self.schemas
        return {}


def load_root_package(root_dir: Path) -> dict:
    """Read the application's own package and metadata descriptors."""
    try:
        package = read_json(root_dir / PACKAGE_FILE)
        metadata = read_json(root_dir / METADATA_FILE)
    except ModuleReadError as e:
        raise DocsBuildError(f"Cannot load application descriptor {e.path}: {e.reason}") from e
    if not isinstance(package, dict) or not isinstance(metadata, dict):
        raise DocsBuildError(f"Application descriptors in {root_dir} must be JSON objects")
    return merge_descriptor(package, metadata, root_dir)
