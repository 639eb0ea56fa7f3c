"""Build settings resolved from CLI options and the application config."""

from pathlib import Path

from pydantic import BaseModel

from authoring_docs.errors import DocsBuildError

DOCS_MODULE = "adapt-authoring-docs"
DEFAULT_PORT = 9000


class BuildSettings(BaseModel):
    """Everything a single documentation build needs to know up front."""

    root_dir: Path
    output_dir: Path
    port: int = DEFAULT_PORT
    open_browser: bool = False
    verbose: bool = False


def resolve_output_dir(root_dir: Path, cli_value: Path | None, config) -> Path:
    """Pick the output dir: CLI option first, then the docs module config default."""
    if cli_value is not None:
        return cli_value.resolve()
    configured = config.get(f"{DOCS_MODULE}.outputDir")
    if not configured:
        raise DocsBuildError(
            f"No output directory given; pass --outputDir or set {DOCS_MODULE}.outputDir"
        )
    return (root_dir / configured).resolve()
