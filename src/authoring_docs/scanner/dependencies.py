"""Dependency scanner: finds installed modules and loads their descriptors."""

from pathlib import Path

from pydantic import ValidationError

from authoring_docs.errors import ModuleReadError
from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ModuleDescriptor
from authoring_docs.scanner.files import read_json

logger = get_logger(__name__)

METADATA_FILE = "adapt-authoring.json"
PACKAGE_FILE = "package.json"
INSTALL_DIR = "node_modules"


def load_dependencies(root_dir: Path) -> dict[str, ModuleDescriptor]:
    """Scan `root_dir` for installed modules carrying a metadata file.

    Candidates are processed shallowest-first, so when the same module is
    installed at several depths the least nested copy wins. Modules whose
    descriptors cannot be read are logged and skipped.
    """
    install_dir = root_dir / INSTALL_DIR
    candidates = sorted(install_dir.glob(f"**/{METADATA_FILE}"), key=lambda p: (len(str(p)), str(p)))

    deps: dict[str, ModuleDescriptor] = {}
    for meta_path in candidates:
        module_dir = meta_path.parent
        try:
            descriptor = _load_descriptor(module_dir, meta_path)
        except ModuleReadError as e:
            logger.warning("module_skipped", path=str(e.path), reason=e.reason)
            continue
        if descriptor.name in deps:
            logger.debug("duplicate_module_ignored", module=descriptor.name, path=str(module_dir))
            continue
        deps[descriptor.name] = descriptor

    logger.debug("dependencies_loaded", count=len(deps))
    return deps


def merge_descriptor(package: dict, metadata: dict, root_dir: Path) -> dict:
    """Merge package and metadata fields.

    Precedence, lowest first: package.json fields, metadata file fields,
    then the resolved install directory as `rootDir`.
    """
    merged = dict(package)
    merged.update(metadata)
    merged["rootDir"] = root_dir
    return merged


def _load_descriptor(module_dir: Path, meta_path: Path) -> ModuleDescriptor:
    package = read_json(module_dir / PACKAGE_FILE)
    metadata = read_json(meta_path)
    if not isinstance(package, dict) or not isinstance(metadata, dict):
        raise ModuleReadError(meta_path, "descriptor is not a JSON object")
    if not package.get("name"):
        raise ModuleReadError(module_dir / PACKAGE_FILE, "package has no name")

    try:
        return ModuleDescriptor.model_validate(merge_descriptor(package, metadata, module_dir))
    except ValidationError as e:
        raise ModuleReadError(meta_path, f"invalid descriptor ({e.error_count()} errors)") from e
