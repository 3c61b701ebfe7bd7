# File: link_scout/report/__init__.py
"""link_scout.report: Артефакты запуска: JSON ссылок, sitemap, анализ контента и HTML-отчёт."""

from __future__ import annotations

from .html_report import DEFAULT_TEMPLATE_DIR, render_html
from .json_report import (
    load_link_opportunities,
    load_sitemap,
    render_insights,
    render_json,
    render_sitemap,
)

__all__ = [
    "DEFAULT_TEMPLATE_DIR",
    "load_link_opportunities",
    "load_sitemap",
    "render_html",
    "render_insights",
    "render_json",
    "render_sitemap",
]
