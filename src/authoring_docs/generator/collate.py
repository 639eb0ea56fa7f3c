"""Collect the documentation settings of every documented module."""

from pathlib import Path

from pydantic import BaseModel

from authoring_docs.log import get_logger
from authoring_docs.scanner.base import Documentation

logger = get_logger(__name__)


class DocsConfig(BaseModel):
    """Documentation settings of one module, ready for the generators."""

    name: str
    version: str = ""
    module: bool = False
    root_dir: Path
    documentation: Documentation


class CollatedConfigs(BaseModel):
    configs: list[DocsConfig] = []
    manual_index: str | None = None
    manual_cover: str | None = None
    source_index: str | None = None


def collate_configs(app) -> CollatedConfigs:
    """Pick the modules to document and resolve the single index pages.

    The manual index, manual cover and source index may each be declared by
    one module only; the first declaration wins and later ones are logged
    and ignored.
    """
    root_docs = _root_documentation(app.pkg)
    result = CollatedConfigs()

    for dep in app.dependencies.values():
        docs = dep.documentation
        omit_reason = None
        if docs is None:
            omit_reason = "no documentation config defined"
        elif not docs.enable:
            omit_reason = "documentation.enable is set to false"
        elif dep.name in root_docs.excludes:
            omit_reason = "module has been excluded in documentation config"
        if omit_reason:
            logger.info("module_omitted", module=dep.name, reason=omit_reason)
            continue

        for field in ("manual_index", "manual_cover", "source_index"):
            declared = getattr(docs, field)
            if not declared:
                continue
            current = getattr(result, field)
            if current:
                logger.warning("index_page_conflict", module=dep.name, field=field, kept=current)
                continue
            setattr(result, field, (dep.root_dir / declared).as_posix())

        result.configs.append(
            DocsConfig(
                name=dep.name,
                version=dep.version,
                module=dep.module,
                root_dir=dep.root_dir,
                documentation=docs,
            )
        )

    result.configs.append(
        DocsConfig(
            name=app.pkg.get("name", "app"),
            version=app.pkg.get("version", ""),
            root_dir=app.root_dir,
            documentation=root_docs.model_copy(update={"enable": True, "includes": {}}),
        )
    )
    return result


def _root_documentation(pkg: dict) -> Documentation:
    return Documentation.model_validate(pkg.get("documentation") or {})
