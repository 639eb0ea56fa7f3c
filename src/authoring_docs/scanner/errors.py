"""Error table loader: merges every module's error descriptors."""

from authoring_docs.log import get_logger
from authoring_docs.scanner.base import ErrorDefinition, ErrorMeta, ModuleDescriptor
from authoring_docs.scanner.files import load_dependency_files

logger = get_logger(__name__)

ERRORS_PATTERN = "errors/*.json"


def load_errors(dependencies: dict[str, ModuleDescriptor]) -> dict[str, ErrorDefinition]:
    """Merge all error descriptor files into one table sorted by code.

    Files are overlaid in module discovery order, so a code defined twice
    keeps the last definition. Redefinitions are logged.
    """
    merged: dict[str, dict] = {}
    for module_name, files in load_dependency_files(dependencies, ERRORS_PATTERN).items():
        for errors in files:
            if not isinstance(errors, dict):
                logger.warning("error_file_not_an_object", module=module_name)
                continue
            for code, definition in errors.items():
                if not isinstance(definition, dict):
                    logger.warning("error_definition_skipped", code=code, module=module_name)
                    continue
                if code in merged and merged[code] != definition:
                    logger.warning("error_code_redefined", code=code, module=module_name)
                merged[code] = definition

    return {code: _to_definition(code, merged[code]) for code in sorted(merged)}


def _to_definition(code: str, definition: dict) -> ErrorDefinition:
    meta = {"description": definition.get("description", "")}
    if "data" in definition:
        meta["data"] = definition["data"]
    fields = {"code": code, "meta": ErrorMeta(**meta)}
    if "statusCode" in definition:
        fields["statusCode"] = definition["statusCode"]
    return ErrorDefinition(**fields)
