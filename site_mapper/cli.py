# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteMapper через командную строку.

Команды:
  crawl URL   Построить граф сайта и вывести/сохранить отчёты
  config      Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязательно)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --workers N         Число воркеров (по умолчанию 4)
  --timeout SEC       Таймаут одного запроса
  --user-agent UA     Заголовок User-Agent
  --listen HOST:PORT  Отдавать граф в JSON по адресу /json во время обхода
  --json PATH         Сохранить граф (узлы и рёбра) в JSON-файл
  --html PATH         Сохранить HTML-отчёт
  --template DIR      Папка с Jinja2-шаблонами
  --format text|json  Формат вывода в stdout, если файлы не заданы
  --pretty            Форматировать JSON с отступом 2

Пример:
  site-mapper crawl example.com --workers 8 --json sitemap.json
"""
import asyncio
import sys
from pathlib import Path

import click

from site_mapper import __version__
from site_mapper.config import load_config
from site_mapper.crawler.crawler import CrawlState
from site_mapper.engine import start_crawl
from site_mapper.errors import SiteMapperError
from site_mapper.logger import DEFAULT_FORMAT, init_logging, logger
from site_mapper.report.html_report import render_html
from site_mapper.report.json_report import dumps_graph, render_json
from site_mapper.report.text_report import render_text

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
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
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteMapper CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--workers', '-w', 'workers', type=int, default=None,
              help='Число одновременно работающих воркеров (по умолчанию 4)')
@click.option('--timeout', 'timeout', type=float, default=None,
              help='Таймаут одного запроса, секунд (по умолчанию 5)')
@click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent')
@click.option('--listen', '-l', 'listen_address', default=None,
              help='Адрес host:port для отдачи графа в JSON (/json)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить граф в JSON-файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option('--format', '-f', 'output_format', default='text', show_default=True,
              type=click.Choice(['text', 'json']), help='Формат вывода в stdout')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, workers, timeout, user_agent, listen_address,
          json_output, html_output, template_dir, output_format, pretty):
    """Построить граф сайта, начиная с URL (можно без схемы, по умолчанию http)."""
    try:
        cfg = load_config(
            ctx.obj['config_path'],
            start_url=url,
            workers=workers,
            timeout=timeout,
            user_agent=user_agent,
            listen_address=listen_address,
        )
    except (FileNotFoundError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    logger.info('Запуск обхода %s (%d воркеров)', cfg.start_url, cfg.workers)
    try:
        graph = asyncio.run(start_crawl(cfg))
    except SiteMapperError as e:
        print_error(f'Ошибка при обходе: {e}')

    if graph.state is CrawlState.CANCELLED:
        click.secho(
            f'Обход не завершён: посещено {graph.visited_count} из {len(graph.pages)} известных страниц',
            fg='yellow', err=True
        )

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        if output_format == 'json':
            click.echo(dumps_graph(graph, pretty=pretty))
        else:
            click.echo(render_text(graph))
        return

    if json_output:
        try:
            saved_json = render_json(graph, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(graph, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.pass_context
def show_config(ctx, url):
    """Показать итоговую конфигурацию в JSON."""
    try:
        cfg = load_config(ctx.obj['config_path'], start_url=url)
    except (FileNotFoundError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
