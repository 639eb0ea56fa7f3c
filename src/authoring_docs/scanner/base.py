"""Data models for the statically reconstructed application.

The scanner, router builder and generators all exchange these models
instead of raw descriptor dicts.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Documentation(BaseModel):
    """The `documentation` block of a module's metadata descriptor."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    enable: bool = False
    manual_index: str | None = Field(default=None, alias="manualIndex")
    manual_cover: str | None = Field(default=None, alias="manualCover")
    source_index: str | None = Field(default=None, alias="sourceIndex")
    manual_plugins: list[str] = Field(default=[], alias="manualPlugins")
    manual_sections: dict = Field(default={}, alias="manualSections")
    manual_pages: dict[str, str] = Field(default={}, alias="manualPages")
    excludes: list[str] = []
    includes: dict = {}


class ModuleDescriptor(BaseModel):
    """A discovered module: package.json merged with its metadata file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    version: str = ""
    root_dir: Path = Field(alias="rootDir")
    module: bool = True  # false for plain libraries, which are never routed
    documentation: Documentation | None = None


def _noop_handler(*args: Any, **kwargs: Any) -> None:
    return None


class RouteDefinition(BaseModel):
    """A single route as mounted in the static router tree."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    route: str
    handlers: dict[str, Callable[..., Any]] = {}
    meta: dict = {}
    internal: bool = False
    permissions: dict[str, list[str] | None] = {}

    @classmethod
    def from_declaration(cls, declaration: dict) -> "RouteDefinition":
        """Build the static form of a declared route.

        Handler references become no-op callables under the same method keys;
        everything else is carried over verbatim.
        """
        handlers = {method: _noop_handler for method in (declaration.get("handlers") or {})}
        return cls(
            route=declaration["route"],
            handlers=handlers,
            meta=declaration.get("meta") or {},
            internal=declaration.get("internal") or False,
            permissions=declaration.get("permissions") or {},
        )


class RouterNode(BaseModel):
    """A router mounted at an absolute path, with its routes and sub-routers."""

    model_config = ConfigDict(populate_by_name=True)

    path: str
    routes: list[RouteDefinition] = []
    child_routers: list["RouterNode"] = Field(default=[], alias="childRouters")

    def find_child(self, path: str) -> "RouterNode | None":
        for child in self.child_routers:
            if child.path == path:
                return child
        return None


class ErrorMeta(BaseModel):
    description: str = ""
    data: Any = None


class ErrorDefinition(BaseModel):
    """One entry of the merged error table."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    status_code: int | None = Field(default=None, alias="statusCode")
    meta: ErrorMeta

    def as_dict(self) -> dict:
        """Dump in the `{code, statusCode?, meta: {description, data?}}` shape.

        Keys missing from the error file are left out; falsy values are kept.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)
