"""Manual page plugins.

A plugin is a class registered under a name with `@register_plugin`. Modules
opt in by listing plugin names in `documentation.manualPlugins`. After
`run()` the plugin may set:

- `manual_file`  template (relative to the plugin's source dir) to fill in
- `contents`     quick-navigation entries, strings or `[text, anchor]` pairs
- `replace`      `{KEY: value}` substitutions for `{{{KEY}}}` markers
- `custom_files` extra markdown files to add to the manual
"""

import json
from pathlib import Path

from authoring_docs.errors import PluginError
from authoring_docs.log import get_logger

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
TOC_KEY = "TABLE_OF_CONTENTS"

_REGISTRY: dict[str, type] = {}


def register_plugin(name: str):
    """Class decorator adding a manual plugin to the registry."""

    def decorator(cls: type) -> type:
        _REGISTRY[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> type:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise PluginError(f"Unknown manual plugin '{name}'") from None


class ManualPlugin:
    """Base class with the attributes the runner reads back after run()."""

    src_dir: Path = TEMPLATES_DIR

    def __init__(self, app, config, output_dir: Path):
        self.app = app
        self.config = config
        self.output_dir = output_dir
        self.manual_file: str | None = None
        self.contents: list = []
        self.replace: dict[str, str] = {}
        self.custom_files: list[Path] = []


class PluginRunner:
    """Runs one plugin and writes its filled-in manual file."""

    def __init__(self, plugin):
        self.plugin = plugin

    @property
    def custom_files(self) -> list[Path]:
        return getattr(self.plugin, "custom_files", None) or []

    def run(self) -> list[Path]:
        run = getattr(self.plugin, "run", None)
        if not callable(run):
            raise PluginError("Documentation plugin must define a 'run' function")
        run()
        for attr, default in (("contents", []), ("custom_files", []), ("replace", {})):
            if getattr(self.plugin, attr, None) is None:
                setattr(self.plugin, attr, default)
        if getattr(self.plugin, "manual_file", None):
            self.write_file()
        return self.custom_files

    def generate_toc(self, items: list) -> str:
        """Render the quick-navigation list linking to anchors in the page."""
        manual_file = getattr(self.plugin, "manual_file", None) or ""
        page = Path(manual_file).stem if manual_file else ""
        lines = ["### Quick navigation", "", '<ul class="toc">']
        for item in items:
            text, link = (item[0], item[1]) if isinstance(item, (list, tuple)) else (item, item)
            lines.append(f'<li><a href="#/{page}?id={link}">{text}</a></li>')
        lines.append("</ul>")
        return "\n".join(lines) + "\n"

    def write_file(self) -> Path:
        if self.plugin.contents:
            self.plugin.replace[TOC_KEY] = self.generate_toc(self.plugin.contents)

        src_dir = getattr(self.plugin, "src_dir", TEMPLATES_DIR)
        template = Path(src_dir) / self.plugin.manual_file
        try:
            text = template.read_text(encoding="utf-8")
        except OSError as e:
            raise PluginError(f"Failed to load manual file at {template}") from e

        for key, value in self.plugin.replace.items():
            text = text.replace("{{{" + key + "}}}", str(value))

        output_path = Path(self.plugin.output_dir) / Path(self.plugin.manual_file).name
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        self.plugin.custom_files.append(output_path)
        return output_path


def run_plugins(app, config, output_dir: Path) -> list[Path]:
    """Run every plugin listed by a module; failures are logged and skipped."""
    files: list[Path] = []
    for name in config.documentation.manual_plugins:
        try:
            plugin = get_plugin(name)(app, config, output_dir)
            files.extend(PluginRunner(plugin).run())
        except PluginError as e:
            logger.warning("manual_plugin_failed", module=config.name, plugin=name, error=str(e))
    return files


@register_plugin("configuration")
class ConfigurationPlugin(ManualPlugin):
    """Reference table of every module's config defaults."""

    def run(self):
        self.manual_file = "configuration.md"
        rows = []
        for module_name in sorted(self.app.config.modules()):
            self.contents.append(module_name)
            rows.append(f"## {module_name}\n")
            rows.append("| Option | Default |")
            rows.append("| ------ | ------- |")
            for key, value in self.app.config.get(module_name).items():
                rows.append(f"| `{key}` | {_format_default(value)} |")
            rows.append("")
        self.replace["REPLACE_ME"] = "\n".join(rows)


@register_plugin("coreplugins")
class CorePluginsPlugin(ManualPlugin):
    """Table of installed modules with their versions."""

    def run(self):
        self.manual_file = "coreplugins.md"
        rows = []
        for name in sorted(self.app.dependencies):
            dep = self.app.dependencies[name]
            homepage = getattr(dep, "homepage", None)
            label = f"[{name}]({homepage})" if homepage else name
            description = getattr(dep, "description", "") or ""
            rows.append(f"| {label} | {dep.version} | {dep.module} | {description} |")
        self.replace["REPLACE_ME"] = "\n".join(rows)


def _format_default(value) -> str:
    if isinstance(value, str):
        return f'`"{value}"`'
    if isinstance(value, (list, dict, bool)) or value is None:
        return f"`{json.dumps(value)}`"
    return f"`{value}`"
