"""Manual site generator.

Collects markdown pages from every documented module (plus any pages made
by manual plugins), groups them into the configured sections and writes the
page files, sidebar and site options for the static site renderer.
"""

import json
import re
import shutil
from pathlib import Path

from pydantic import BaseModel

from authoring_docs.generator.collate import CollatedConfigs
from authoring_docs.generator.plugins import run_plugins
from authoring_docs.log import get_logger
from authoring_docs.settings import DOCS_MODULE

logger = get_logger(__name__)

MANUAL_DIR = "manual"
PAGES_GLOB = "docs/*.md"
FALLBACK_SECTION = "other-guides"
THEME_COLOR = "#36bde8"

_TITLE_RE = re.compile(r"^#(?!#)\s?(.*)", re.MULTILINE)


class ManualPage(BaseModel):
    title: str
    source: Path
    section: str

    @property
    def file_name(self) -> str:
        return self.source.name


def generate_manual(app, collated: CollatedConfigs, output_dir: Path) -> Path:
    """Write the manual into output_dir/manual; return that directory."""
    manual_dir = output_dir / MANUAL_DIR
    manual_dir.mkdir(parents=True, exist_ok=True)

    sections = app.config.get(f"{DOCS_MODULE}.manualSections") or {}
    pages = collect_pages(app, collated, manual_dir, default_section(sections))

    for page in pages:
        target = manual_dir / page.file_name
        if page.source.resolve() != target.resolve():
            shutil.copyfile(page.source, target)

    if collated.manual_index:
        shutil.copyfile(collated.manual_index, manual_dir / "README.md")
    if collated.manual_cover:
        shutil.copyfile(collated.manual_cover, manual_dir / "_coverpage.md")

    (manual_dir / "_sidebar.md").write_text(render_sidebar(pages, sections), encoding="utf-8")
    (manual_dir / "options.json").write_text(
        json.dumps(site_options(app, collated), indent=2), encoding="utf-8"
    )
    logger.info("manual_written", pages=len(pages), path=str(manual_dir))
    return manual_dir


def collect_pages(app, collated: CollatedConfigs, manual_dir: Path, fallback: str) -> list[ManualPage]:
    skipped = {p for p in (collated.source_index, collated.manual_index, collated.manual_cover) if p}
    by_name: dict[str, ManualPage] = {}

    for config in collated.configs:
        files = run_plugins(app, config, manual_dir)
        files += sorted(config.root_dir.glob(PAGES_GLOB))
        for file_path in files:
            if file_path.as_posix() in skipped:
                continue
            page = ManualPage(
                title=page_title(file_path),
                source=file_path,
                section=config.documentation.manual_pages.get(file_path.name, fallback),
            )
            if page.file_name in by_name:
                logger.warning("manual_page_replaced", file=page.file_name, module=config.name)
            by_name[page.file_name] = page

    return list(by_name.values())


def page_title(file_path: Path) -> str:
    """First level-one heading of the page, else its file name."""
    try:
        match = _TITLE_RE.search(file_path.read_text(encoding="utf-8"))
    except OSError:
        match = None
    if match and match.group(1).strip():
        return match.group(1).strip()
    return file_path.name


def default_section(sections: dict) -> str:
    for section_id, data in sections.items():
        if isinstance(data, dict) and data.get("default"):
            return section_id
    return FALLBACK_SECTION


def section_title(section_id: str, data: dict | None = None) -> str:
    """Configured title, else the id with dashes as spaces and a capital first letter."""
    if data and data.get("title"):
        return data["title"]
    text = section_id.replace("-", " ")
    return text[:1].upper() + text[1:]


def render_sidebar(pages: list[ManualPage], sections: dict) -> str:
    lines = ['<ul class="intro"><li><a href="#/">Introduction</a></li></ul>', ""]

    section_ids = list(sections)
    for page in pages:
        if page.section not in section_ids:
            section_ids.append(page.section)

    for section_id in section_ids:
        section_pages = sorted((p for p in pages if p.section == section_id), key=lambda p: p.title.lower())
        if not section_pages:
            continue
        lines.append(f'<ul class="header"><li>{section_title(section_id, sections.get(section_id))}</li></ul>')
        lines.append("")
        lines.extend(f"  - [{p.title}]({p.file_name})" for p in section_pages)
        lines.append("")
    return "\n".join(lines)


def site_options(app, collated: CollatedConfigs) -> dict:
    return {
        "name": app.pkg.get("name", ""),
        "coverpage": "_coverpage.md" if collated.manual_cover else False,
        "homepage": "README.md" if collated.manual_index else False,
        "loadSidebar": True,
        "themeColor": THEME_COLOR,
    }
