# contact_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта ContactScout.

Сериализация результатов обхода (CrawlResult) в файл и построчная запись
результатов в JSON Lines по мере завершения сайтов.
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Protocol, Union

from contact_scout.crawler.models import CrawlResult


class ResultSink(Protocol):
    """Куда сохраняются готовые результаты по сайтам."""

    async def save(self, result: CrawlResult) -> None:
        ...


def results_payload(results: Mapping[str, CrawlResult]) -> Dict[str, Any]:
    """Тело ответа пакетного обхода: ``{"results": {domain: {...}}}``."""
    return {"results": {domain: result.to_dict() for domain, result in results.items()}}


def render_json(results: Mapping[str, CrawlResult], output_path: Union[Path, str], pretty: bool = True) -> Path:
    """
    Сохраняет результаты обхода в формате JSON по указанному пути.

    :param results: словарь domain -> CrawlResult
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо однострочного JSON
    :return: Path сохранённого файла

    Пример:
    ```python
    from contact_scout.report.json_report import render_json
    report_path = render_json(results, 'reports/contacts.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(results_payload(results), f, ensure_ascii=False, indent=2 if pretty else None)

    return output


class JsonLinesSink:
    """Дописывает каждый результат отдельной строкой JSON в файл."""

    def __init__(self, path: Union[Path, str]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def save(self, result: CrawlResult) -> None:
        line = json.dumps(result.to_dict(), ensure_ascii=False)
        # сайты завершаются параллельно, строки не должны перемешиваться
        async with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('a', encoding='utf-8') as f:
                f.write(line + "\n")
