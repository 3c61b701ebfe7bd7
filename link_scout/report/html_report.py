# File: link_scout/report/html_report.py
"""link_scout.report.html_report: HTML-отчёт по ранжированным ссылкам (Jinja2)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from link_scout.ranker import high_value

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"
PREVIEW_SIZE = 5


def report_context(report) -> dict[str, Any]:
    """Переменные шаблона для DiscoveryReport."""
    return {
        "seed": report.seed,
        "status": report.crawl_status.value,
        "opportunities": report.opportunities,
        "high_value": high_value(report.opportunities)[:PREVIEW_SIZE],
        "counts": report.count_by_type(),
        "warnings": report.warnings,
    }


def render_html(
    report,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит ``report.html.j2`` и пишет результат в *output_path*.

    *template_dir* = None берёт встроенный шаблон пакета; своя папка должна
    содержать файл с тем же именем. Переменные шаблона: см. :func:`report_context`.
    """
    loader = FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR))
    env = Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))

    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(env.get_template(TEMPLATE_NAME).render(**report_context(report)), encoding="utf-8")
    return target
