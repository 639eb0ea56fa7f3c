"""API reference generator.

Writes a JSDoc configuration covering every documented module's source and
runs the external `jsdoc` tool against it.
"""

import json
import subprocess
from pathlib import Path

from authoring_docs.errors import GeneratorError
from authoring_docs.generator.collate import CollatedConfigs
from authoring_docs.log import get_logger

logger = get_logger(__name__)

BACKEND_DIR = "backend"
CONFIG_FILE = ".jsdoc.json"
SOURCE_GLOB = "lib/**/*.js"
JSDOC_COMMAND = ["npx", "jsdoc", "-c"]
PROJECT_WEBSITE = "https://www.adaptlearning.org/"
FORUM_URL = "https://community.adaptlearning.org/mod/forum/view.php?id=4"


def source_includes(collated: CollatedConfigs) -> list[str]:
    """Source files to document: the source index, each module's lib files and
    the entry point of bootable modules."""
    includes = [collated.source_index] if collated.source_index else []
    for config in collated.configs:
        includes.extend(p.as_posix() for p in sorted(config.root_dir.glob(SOURCE_GLOB)))
        index_js = config.root_dir / "index.js"
        if config.module and index_js.is_file():
            includes.append(index_js.as_posix())
    return includes


def build_config(app, collated: CollatedConfigs, output_dir: Path) -> dict:
    version = app.pkg.get("version", "")
    title = f"{app.pkg.get('name', 'API')} documentation"
    return {
        "source": {"include": source_includes(collated)},
        "docdash": {
            "collapse": True,
            "typedefs": True,
            "search": True,
            "static": True,
            "menu": {
                f'{title}<br><span class="version">v{version}</span>': {"class": "menu-title"},
                "Home": {"href": "index.html", "target": "_self", "class": "menu-item", "id": "home_link"},
                "Project Website": {
                    "href": PROJECT_WEBSITE,
                    "target": "_blank",
                    "class": "menu-item",
                    "id": "website_link",
                },
                "Technical Discussion Forum": {
                    "href": FORUM_URL,
                    "target": "_blank",
                    "class": "menu-item",
                    "id": "forum_link",
                },
            },
            "meta": {"title": title, "keyword": f"v{version}"},
        },
        "opts": {"destination": (output_dir / BACKEND_DIR).as_posix(), "template": "node_modules/docdash"},
    }


def write_config(app, collated: CollatedConfigs, output_dir: Path) -> Path:
    config_path = output_dir / CONFIG_FILE
    config_path.write_text(json.dumps(build_config(app, collated, output_dir), indent=2), encoding="utf-8")
    return config_path


def generate_apiref(app, collated: CollatedConfigs, output_dir: Path) -> Path:
    """Write the JSDoc config and run jsdoc; return the backend docs directory."""
    output_dir.mkdir(parents=True, exist_ok=True)
    config_path = write_config(app, collated, output_dir)

    try:
        result = subprocess.run(
            JSDOC_COMMAND + [str(config_path)],
            capture_output=True,
            text=True,
            cwd=app.root_dir,
        )
    except OSError as e:
        raise GeneratorError("jsdoc", f"could not start ({e})") from e
    if result.returncode != 0:
        output = (result.stderr + result.stdout).strip()
        raise GeneratorError("jsdoc", f"exited with code {result.returncode}\n{output[:2000]}")

    logger.info("apiref_written", path=str(output_dir / BACKEND_DIR))
    return output_dir / BACKEND_DIR
