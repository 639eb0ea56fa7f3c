"""JSON descriptor loading shared by the scanners."""

import json
from pathlib import Path
from typing import Any

from authoring_docs.errors import ModuleReadError
from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ModuleDescriptor

logger = get_logger(__name__)


def read_json(file_path: Path) -> Any:
    """Read and parse a JSON file, raising ModuleReadError on any failure."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ModuleReadError(file_path, f"cannot read file ({e.strerror or e})") from e
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise ModuleReadError(file_path, f"invalid JSON ({e})") from e


def read_optional_json(file_path: Path) -> Any | None:
    """Like read_json, but a missing file is simply None."""
    if not file_path.is_file():
        return None
    return read_json(file_path)


def load_dependency_files(
    dependencies: dict[str, ModuleDescriptor], pattern: str
) -> dict[str, list[Any]]:
    """Glob `pattern` inside every module root and parse each match.

    Returns {module name: [parsed file, ...]} in module discovery order, with
    files in path order. Modules without matches are left out; unreadable
    files are logged and skipped.
    """
    result: dict[str, list[Any]] = {}
    for name, dep in dependencies.items():
        parsed = []
        for file_path in sorted(dep.root_dir.glob(pattern)):
            if not file_path.is_file():
                continue
            try:
                parsed.append(read_json(file_path))
            except ModuleReadError as e:
                logger.warning("dependency_file_skipped", module=name, path=str(e.path), reason=e.reason)
        if parsed:
            result[name] = parsed
    return result
