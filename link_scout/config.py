# === FILE: link_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации LinkScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обнаружения страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl = Field(..., description="Корневой URL (seed) для обхода.")
    max_pages: int = Field(200, ge=1, description="Жесткий лимит по числу посещённых страниц.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; LinkScoutBot/1.0)", min_length=1, description="Заголовок User-Agent."
    )
    concurrency: int = Field(5, ge=1, le=10, description="Параллельные запросы для проб и проверки.")
    max_pagination_pages: int = Field(10, ge=0, description="Лимит страниц пагинации за весь обход.")
    probe_paths: Optional[List[str]] = Field(None, description="Свой каталог путей вместо встроенного.")
    enable_probe: bool = Field(True, description="Проверять типовые пути.")
    enable_sitemap: bool = Field(True, description="Читать sitemap.xml.")
    follow_sitemap_index: bool = Field(True, description="Разворачивать вложенные sitemap на один уровень.")
    deadline: Optional[float] = Field(None, gt=0, description="Общий лимит времени (секунд), затем частичный результат.")

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("probe_paths")
    def _leading_slash(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return ["/" + p.strip().lstrip("/") for p in v if p.strip()]


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML: {exc}") from exc


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON: {exc}") from exc


_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".json": _parse_json,
}


def _resolve(path: Union[str, Path, None]) -> Path:
    candidate = DEFAULT_CONFIG_PATH if path is None else Path(path).expanduser().resolve()
    if not candidate.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(candidate))
    return candidate


def read_config_file(path: Union[str, Path, None]) -> dict[str, Any]:
    """Сырые данные конфига: mapping из YAML/JSON (пустой файл даёт {})."""
    source = _resolve(path)
    parser = _PARSERS.get(source.suffix.lower())
    if parser is None:
        raise ValueError(f"Неподдерживаемый формат конфига: {source.suffix}")
    data = parser(source.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень {source.name} должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Ключи из *overrides* (не None) перекрывают значения файла.

    Ошибки: нет файла -> FileNotFoundError, битый YAML/JSON -> ValueError,
    не mapping -> TypeError, нарушение схемы -> ValidationError.
    """
    data = read_config_file(path)
    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "DEFAULT_CONFIG_PATH", "load_config", "read_config_file", "ValidationError"]
