# === FILE: link_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа LinkScout через командную строку.

Команды:
  scan      Обойти сайт, классифицировать страницы и сохранить артефакты
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --url URL           Seed URL (перекрывает base_url; без --config конфиг не нужен)
  --limit INT         Макс. число страниц (override max_pages)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  --json PATH         JSON-массив ссылок (порядок = важность)
  --sitemap PATH      Канонические URL по одному в строке
  --insights PATH     JSON анализа контента
  --html PATH         HTML-отчёт
  --template DIR      Папка с шаблоном report.html.j2
  --pretty            Отступ 2 при выводе JSON в stdout
  --deadline SEC      Лимит времени; по истечении частичный результат

Пример:
  link-scout --url https://example.com scan --json out/links.json --sitemap out/sitemap
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from link_scout import __version__
from link_scout.config import CrawlerConfig, load_config
from link_scout.engine import start_scan
from link_scout.errors import AggregationError
from link_scout.logger import init_logging
from link_scout.ranker import high_value
from link_scout.report.html_report import render_html
from link_scout.report.json_report import render_insights, render_json, render_sitemap

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
OUTPUT_FILE = click.Path(writable=True, dir_okay=False, path_type=Path)


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def build_config(config_path, url, limit) -> CrawlerConfig:
    overrides = {"base_url": url, "max_pages": limit}
    if config_path is None and url is not None:
        return CrawlerConfig(**{k: v for k, v in overrides.items() if v is not None})
    return load_config(config_path, **overrides)


def print_summary(report) -> None:
    counts = report.count_by_type()
    click.echo(f"Total pages: {len(report.opportunities)} ({report.crawl_status.value}, warnings: {report.warnings})")
    for page_type, count in counts.items():
        click.echo(f"  {page_type}: {count}")
    top = high_value(report.opportunities)[:5]
    if top:
        click.echo("High-priority links:")
    for opp in top:
        click.echo(f"  • {opp.title} ({opp.page_type.value}) {opp.url}")
        click.echo(f"    Anchor text: {', '.join(opp.suggested_anchor_text[:2])}")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON (default: configs/default.yaml).'
)
@click.option('--url', '-u', 'url', default=None, help='Seed URL сайта.')
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц для обхода (override max_pages)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=OUTPUT_FILE,
    help='Путь к файлу логов'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, url, limit, log_level, log_file, log_format):
    """Группа команд LinkScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = build_config(config_path, url, limit)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option('--json', '-j', 'json_output', default=None,
              type=OUTPUT_FILE,
              help='Сохранить JSON-массив ссылок')
@click.option('--sitemap', '-s', 'sitemap_output', default=None,
              type=OUTPUT_FILE,
              help='Сохранить список URL (по одному в строке)')
@click.option('--insights', '-i', 'insights_output', default=None,
              type=OUTPUT_FILE,
              help='Сохранить JSON анализа контента')
@click.option('--html', '-h', 'html_output', default=None,
              type=OUTPUT_FILE,
              help='Сохранить HTML-отчёт')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с шаблоном report.html.j2 (по умолчанию встроенный)')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--deadline', 'deadline', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Лимит времени (секунд); по истечении возвращается частичный результат')
@click.pass_context
def scan(ctx, json_output, sitemap_output, insights_output, html_output, template_dir, pretty, deadline):
    """Обойти сайт и сгенерировать артефакты."""
    cfg = ctx.obj['config']
    if deadline is not None:
        cfg = cfg.model_copy(update={'deadline': deadline})
    try:
        report = asyncio.run(start_scan(cfg))
    except AggregationError as e:
        print_error(f'Сайт недоступен: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    outputs = (json_output, sitemap_output, insights_output, html_output)
    # Без файлов: JSON в stdout
    if not any(outputs):
        records = [opp.to_record() for opp in report.opportunities]
        click.echo(json.dumps(records, ensure_ascii=False, indent=2 if pretty else None))
        return

    try:
        if json_output:
            click.echo(f'JSON report: {render_json(report.opportunities, json_output)}')
        if sitemap_output:
            click.echo(f'Sitemap: {render_sitemap(report.sitemap, sitemap_output)}')
        if insights_output:
            click.echo(f'Content analysis: {render_insights(report.content, insights_output)}')
        if html_output:
            click.echo(f'HTML report: {render_html(report, template_dir, html_output)}')
    except Exception as e:
        print_error(f'Ошибка при сохранении отчёта: {e}')
    print_summary(report)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
