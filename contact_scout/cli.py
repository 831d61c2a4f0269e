# === FILE: contact_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа ContactScout для командной строки.

Команды:
  crawl SITE...   Обойти сайты и вывести/сохранить найденные контакты
  enrich          Найти сайт организации и предложить значения полей
  config          Показать текущую конфигурацию
  serve           Запустить HTTP API (POST /api/crawl, POST /api/enrich/org)

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-pages INT     Страниц на сайт, включая главную (override max_pages_per_site)
  --json PATH         Сохранить JSON-отчёт в файл
  --jsonl PATH        Дописывать результаты построчно (JSON Lines)
  --pretty            Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию ContactScout

Пример:
  contact-scout crawl acme.de https://example.org --max-pages 5 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from aiohttp import web

from contact_scout import __version__
from contact_scout.api import build_app
from contact_scout.batch import sites_from_args
from contact_scout.config import load_config
from contact_scout.engine import start_crawl, start_enrich
from contact_scout.enrich import parse_enrich_request
from contact_scout.errors import InputInvalid
from contact_scout.logger import init_logging
from contact_scout.report import JsonLinesSink, render_json, results_payload

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='ContactScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
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
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд ContactScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('sites', nargs=-1, required=True)
@click.option(
    '--max-pages', '-m', 'max_pages',
    type=click.IntRange(1, 50),
    default=None,
    help='Страниц на сайт, включая главную'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--jsonl', 'jsonl_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Дописывать результаты по сайтам в JSON Lines'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.pass_context
def crawl(ctx, sites, max_pages, json_output, jsonl_output, pretty):
    """Обойти сайты и извлечь email, телефоны, страну и бренды."""
    cfg = ctx.obj['config']
    try:
        requests = sites_from_args(sites)
    except InputInvalid as e:
        print_error(f'Неверный список сайтов: {e}')

    sink = JsonLinesSink(jsonl_output) if jsonl_output else None
    try:
        results = asyncio.run(start_crawl(cfg, requests, max_pages, sink))
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if not json_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(results_payload(results), ensure_ascii=False, indent=indent))
        return

    try:
        saved_json = render_json(results, json_output, pretty=pretty)
        click.echo(f'JSON report: {saved_json}')
    except Exception as e:
        print_error(f'Ошибка при сохранении JSON: {e}')


@cli.command('enrich', context_settings=CONTEXT_SETTINGS)
@click.option('--domain', '-d', default=None, help='Домен или адрес сайта')
@click.option('--name', '-n', default=None, help='Название компании')
@click.option('--email', '-e', default=None, help='Известный email')
@click.option('--phone', '-p', default=None, help='Известный телефон')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def enrich(ctx, domain, name, email, phone, pretty):
    """Найти сайт организации и предложить значения полей."""
    cfg = ctx.obj['config']
    try:
        request = parse_enrich_request({"domain": domain, "name": name, "email": email, "phone": phone})
    except InputInvalid as e:
        print_error(f'Неверный запрос: {e}')
    try:
        result = asyncio.run(start_enrich(cfg, request))
    except Exception as e:
        print_error(f'Ошибка при обогащении: {e}')
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='127.0.0.1', show_default=True, help='Адрес для HTTP API')
@click.option('--port', default=8080, show_default=True, type=click.IntRange(1, 65535), help='Порт для HTTP API')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP API."""
    cfg = ctx.obj['config']
    click.echo(f'Serving on http://{host}:{port}')
    run_app(build_app(cfg), host=host, port=port, print=None)


# module-level name so tests can replace the server loop
run_app = web.run_app

if __name__ == "__main__":
    cli()
