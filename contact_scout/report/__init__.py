"""contact_scout.report: Сохранение результатов обхода (JSON-файл и JSON Lines), используемое CLI и тестами."""

from __future__ import annotations

from contact_scout.report.json_report import JsonLinesSink, ResultSink, render_json, results_payload

__all__ = ["JsonLinesSink", "ResultSink", "render_json", "results_payload"]
