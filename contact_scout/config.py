# === FILE: contact_scout/config.py ===
"""
Загрузка и валидация конфигурации ContactScout.

Схема описана через Pydantic; файл конфигурации может быть YAML или JSON.
Секреты (ключи LLM и поиска) в файл не пишутся — в конфиге хранятся только
имена переменных окружения.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contact_scout.logger import logger


class PhoneWeights(BaseModel):
    """Приоритеты уровней извлечения телефонов (суммируются при повторе номера)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tel_link: int = Field(10, ge=0, description="Ссылка tel:.")
    label_adjacent: int = Field(9, ge=0, description="Метка (Tel:, Phone:) сразу перед номером.")
    label_near: int = Field(8, ge=0, description="Метка в пределах короткого окна.")
    section: int = Field(8, ge=0, description="Номер внутри footer/header/contact-блока.")
    international_long: int = Field(7, ge=0, description="Номер с '+' и 10+ цифрами.")
    international_short: int = Field(5, ge=0, description="Номер с '+' и менее 10 цифр.")
    plain: int = Field(2, ge=0, description="Отформатированный локальный номер в тексте.")
    label_window: int = Field(24, ge=1, description="Окно (символов) между меткой и номером.")


class LLMConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(False, description="Использовать LLM как запасной классификатор.")
    model: str = Field("gpt-4o-mini", min_length=1)
    timeout: float = Field(8.0, gt=0, description="Таймаут одного вызова LLM (секунд).")
    api_key_env: str = Field("OPENAI_API_KEY", min_length=1)
    max_snippet_chars: int = Field(4000, ge=100)


class SearchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key_env: str = Field("GOOGLE_CSE_API_KEY", min_length=1)
    cx_env: str = Field("GOOGLE_CSE_CX", min_length=1)
    timeout: float = Field(5.0, gt=0)
    results: int = Field(5, ge=1, le=10)


class CrawlerConfig(BaseModel):
    """Конфигурация обхода сайтов и извлечения контактов."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(
        "Mozilla/5.0 (compatible; ContactScout/1.0)", min_length=1, description="Заголовок User-Agent."
    )
    page_timeout: float = Field(5.0, gt=0, description="Таймаут на одну страницу (секунд).")
    max_page_bytes: int = Field(800 * 1024, ge=1024, description="Лимит размера тела страницы.")
    site_timeout: float = Field(30.0, gt=0, description="Общий бюджет времени на один сайт.")
    max_pages_per_site: int = Field(7, ge=1, le=50, description="Страниц на сайт, включая главную.")
    max_sites: int = Field(10, ge=1, description="Сайтов в одном пакетном запросе.")
    max_concurrent_sites: Optional[int] = Field(None, ge=1, description="Параллельных сайтов (None — все).")
    retry_times: int = Field(0, ge=0, description="Повторы при 5xx/429.")
    max_phones: int = Field(10, ge=1, description="Телефонов на страницу после ранжирования.")
    use_sitemap: bool = Field(False, description="Добавлять ссылки из sitemap в очередь.")
    brands: List[str] = Field(default_factory=list, description="Словарь брендов тенанта.")
    phone_weights: PhoneWeights = Field(default_factory=PhoneWeights)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @field_validator("brands", mode="before")
    def _clean_brands(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [b.strip() for b in v if isinstance(b, str) and b.strip()]
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.

    Без пути используется configs/default.yaml, а если его нет — значения по
    умолчанию. Явно указанный, но отсутствующий файл — FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            logger.debug("No %s, using built-in defaults", _DEFAULT_CFG)
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise


__all__ = ["CrawlerConfig", "LLMConfig", "PhoneWeights", "SearchConfig", "load_config"]
