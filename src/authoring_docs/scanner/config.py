"""Config default resolver built from each module's config schema."""

import tempfile
from typing import Any

from authoring_docs.errors import ModuleReadError
from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ModuleDescriptor
from authoring_docs.scanner.files import read_optional_json

logger = get_logger(__name__)

CONFIG_SCHEMA_PATH = "conf/config.schema.json"
TEMP_TOKEN = "$TEMP"


class ConfigDefaults:
    """Read-only view of the config defaults declared by every module."""

    def __init__(self, defaults: dict[str, dict[str, Any]]):
        self._defaults = defaults

    def get(self, key: str) -> Any:
        """Look up `module.property`, or a whole module's defaults for `module`.

        Unknown keys return None. `$TEMP` in string values is resolved against
        the current OS temp directory on every call.
        """
        module_name, dot, prop = key.partition(".")
        if not dot:
            return self._defaults.get(key)
        value = self._defaults.get(module_name, {}).get(prop)
        if isinstance(value, str):
            return value.replace(TEMP_TOKEN, tempfile.gettempdir(), 1)
        return value

    def modules(self) -> list[str]:
        return list(self._defaults)


def extract_defaults(schema: dict) -> dict[str, Any]:
    """Keep only the properties that declare an explicit default."""
    props = schema.get("properties") or {}
    return {key: prop["default"] for key, prop in props.items() if isinstance(prop, dict) and "default" in prop}


def load_config_defaults(dependencies: dict[str, ModuleDescriptor]) -> ConfigDefaults:
    """Collect config defaults for all modules."""
    defaults: dict[str, dict[str, Any]] = {}
    for name, dep in dependencies.items():
        try:
            schema = read_optional_json(dep.root_dir / CONFIG_SCHEMA_PATH)
        except ModuleReadError as e:
            logger.warning("config_schema_skipped", module=name, path=str(e.path), reason=e.reason)
            continue
        if not isinstance(schema, dict):
            continue
        module_defaults = extract_defaults(schema)
        if module_defaults:
            defaults[name] = module_defaults
    return ConfigDefaults(defaults)
