"""HTML rendering of a generated report, one section after another."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...models.report import MedicalReport
from ...utils.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_report_html(report: MedicalReport) -> str:
    """Render the report Jinja2 template to an HTML string."""

    template = _env.get_template("report.html.j2")
    html = template.render(report=report)
    logger.info("Rendered report HTML", extra={"extra_fields": {"size": len(html)}})
    return html
