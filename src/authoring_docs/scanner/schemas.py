"""Schema loader: aggregates JSON schema fragments across modules."""

from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ModuleDescriptor
from authoring_docs.scanner.files import load_dependency_files

logger = get_logger(__name__)

SCHEMA_PATTERN = "schema/*.schema.json"
UNKNOWN_SCHEMA = "unknown"


class SchemaRegistry:
    """Schema fragments keyed by `$anchor`, falling back to `$id`."""

    def __init__(self, raw: dict[str, dict]):
        self.raw = raw
        self.schemas = set(raw)

    def get_schema(self, name: str) -> dict:
        """Return `{"built": fragment}`; unknown names give an empty fragment."""
        return {"built": self.raw.get(name, {})}

    def __contains__(self, name: str) -> bool:
        return name in self.schemas


def load_schemas(dependencies: dict[str, ModuleDescriptor]) -> SchemaRegistry:
    raw: dict[str, dict] = {}
    for module_name, fragments in load_dependency_files(dependencies, SCHEMA_PATTERN).items():
        for fragment in fragments:
            if not isinstance(fragment, dict):
                logger.warning("schema_not_an_object", module=module_name)
                continue
            name = fragment.get("$anchor") or fragment.get("$id")
            if not name:
                logger.warning("schema_without_anchor", module=module_name)
                name = UNKNOWN_SCHEMA
            raw[name] = fragment
    return SchemaRegistry(raw)
