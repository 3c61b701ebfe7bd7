# link_scout/report/json_report.py

"""
Файловые артефакты LinkScout.

* ``render_json``: упорядоченный JSON-массив LinkOpportunity (порядок = важность);
* ``render_sitemap``: канонические URL по одному в строке, в том же порядке;
* ``render_insights``: JSON анализа контента.
"""
import json
from pathlib import Path
from typing import Iterable, List, Sequence

from link_scout.insights import ContentAnalysis
from link_scout.linking import LinkOpportunity


def _prepare(output_path: Path | str) -> Path:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    return output


def render_json(opportunities: Sequence[LinkOpportunity], output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет ранжированный список ссылок в JSON, поля в camelCase.

    Пример:
    ```python
    from link_scout.report.json_report import render_json
    path = render_json(report.opportunities, 'out/acme-internal-links.json')
    ```
    """
    output = _prepare(output_path)
    records = [opp.to_record() for opp in opportunities]
    with output.open('w', encoding='utf-8') as f:
        json.dump(records, f, ensure_ascii=False, indent=2 if pretty else None)
    return output


def load_link_opportunities(path: Path | str) -> List[LinkOpportunity]:
    """Читает JSON-массив, записанный render_json; порядок сохраняется."""
    data = json.loads(Path(path).read_text(encoding='utf-8'))
    if not isinstance(data, list):
        raise TypeError(f"Ожидался JSON-массив, получено {type(data).__name__}")
    return [LinkOpportunity.model_validate(item) for item in data]


def render_sitemap(urls: Iterable[str], output_path: Path | str) -> Path:
    output = _prepare(output_path)
    output.write_text('\n'.join(urls), encoding='utf-8')
    return output


def load_sitemap(path: Path | str) -> List[str]:
    lines = Path(path).read_text(encoding='utf-8').splitlines()
    return [line.strip() for line in lines if line.strip()]


def render_insights(content: ContentAnalysis, output_path: Path | str) -> Path:
    output = _prepare(output_path)
    with output.open('w', encoding='utf-8') as f:
        json.dump(content.to_dict(), f, ensure_ascii=False, indent=2)
    return output
