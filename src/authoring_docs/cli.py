"""CLI entry point for authoring-docs."""

import shutil
from pathlib import Path

import click

from authoring_docs.context import StaticAppContext
from authoring_docs.errors import DocsBuildError
from authoring_docs.generator.apiref import generate_apiref
from authoring_docs.generator.collate import collate_configs
from authoring_docs.generator.manual import generate_manual
from authoring_docs.generator.swagger import generate_swagger
from authoring_docs.log import configure_logging
from authoring_docs.scanner.config import load_config_defaults
from authoring_docs.scanner.dependencies import load_dependencies
from authoring_docs.serve import serve as serve_docs
from authoring_docs.settings import DEFAULT_PORT, BuildSettings, resolve_output_dir

root_dir_option = click.option(
    "--rootDir",
    "--root-dir",
    "root_dir",
    default=".",
    envvar="DOCS_ROOT_DIR",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Application root (where package.json lives).",
)
output_dir_option = click.option(
    "--outputDir",
    "--output-dir",
    "output_dir",
    default=None,
    envvar="DOCS_OUTPUT_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    help="Where the docs are written. Defaults to the docs module's outputDir config.",
)


def _prepare_output_dir(output_dir: Path, root_dir: Path) -> None:
    """Empty and recreate the output dir, refusing to delete the app itself."""
    if output_dir == root_dir or output_dir in root_dir.parents:
        raise DocsBuildError(f"Refusing to clear {output_dir}: it contains the application")
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise DocsBuildError(f"Cannot prepare output directory {output_dir}: {e}") from e


@click.group()
def main():
    """authoring-docs: build API, manual and REST docs for an installed app."""
    pass


@main.command()
@root_dir_option
@output_dir_option
@click.option("--verbose", is_flag=True, help="Show debug output.")
def build(root_dir: Path, output_dir: Path | None, verbose: bool):
    """Build all documentation: API reference -> manual -> REST explorer."""
    configure_logging(verbose)
    try:
        app = StaticAppContext.init(root_dir)
        app.on_ready()
        settings = BuildSettings(
            root_dir=app.root_dir,
            output_dir=resolve_output_dir(app.root_dir, output_dir, app.config),
            verbose=verbose,
        )
        click.echo(f"Generating documentation for {app.pkg.get('name')}@{app.pkg.get('version')}")
        collated = collate_configs(app)

        click.echo("\nThis might take a minute or two...\n")
        _prepare_output_dir(settings.output_dir, settings.root_dir)

        # Generators run in order; later ones may read earlier output
        click.echo("Generating API reference...")
        generate_apiref(app, collated, settings.output_dir)
        click.echo("Generating manual...")
        generate_manual(app, collated, settings.output_dir)
        click.echo("Generating REST explorer...")
        generate_swagger(app, settings.output_dir)
    except (DocsBuildError, OSError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Documentation build complete. Output in {settings.output_dir}")


@main.command()
@root_dir_option
@output_dir_option
@click.option("--port", default=DEFAULT_PORT, envvar="DOCS_PORT", type=int, help="Port to listen on.")
@click.option("--open", "open_browser", is_flag=True, help="Open the docs in a browser.")
@click.option("--verbose", is_flag=True, help="Show debug output.")
def serve(root_dir: Path, output_dir: Path | None, port: int, open_browser: bool, verbose: bool):
    """Serve a previously built copy of the documentation."""
    configure_logging(verbose)
    root_dir = root_dir.resolve()
    try:
        if output_dir is None:
            config = load_config_defaults(load_dependencies(root_dir))
        else:
            config = None
        settings = BuildSettings(
            root_dir=root_dir,
            output_dir=resolve_output_dir(root_dir, output_dir, config),
            port=port,
            open_browser=open_browser,
            verbose=verbose,
        )
        click.echo(f"Docs hosted at http://localhost:{settings.port}")
        serve_docs(settings.output_dir, settings.port, settings.open_browser)
    except DocsBuildError as e:
        raise click.ClickException(str(e)) from e
