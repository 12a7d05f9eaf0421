#!/usr/bin/env python3
"""
Точка входа для запуска краулера HostCrawl через командную строку.

Опции:
  --root URL          Корневой URL обхода
  --config PATH       YAML/JSON-конфиг (значения CLI имеют приоритет)
  --user-agent NAME   User-Agent и группа robots.txt
  --enforce-robots    Не загружать страницы, запрещённые robots.txt
  --json PATH         Сохранить дерево в JSON-файл
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)

Пример:
  hostcrawl --root https://example.com --json tree.json
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from hostcrawl import __version__
from hostcrawl.config import load_config
from hostcrawl.engine import start_crawl
from hostcrawl.errors import CrawlError
from hostcrawl.logger import init_logging
from hostcrawl.report.json_report import render_json
from hostcrawl.report.text_report import render_text

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='HostCrawl, version %(version)s')
@click.option('--root', '-r', 'root', default=None, help='Корневой URL для обхода.')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent краулера.')
@click.option(
    '--enforce-robots', 'enforce_robots',
    is_flag=True, default=False,
    help='Пропускать страницы, запрещённые robots.txt.'
)
@click.option(
    '--robots-at-host-root', 'robots_at_host_root',
    is_flag=True, default=False,
    help='Загружать /robots.txt хоста вместо <root>/robots.txt.'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить дерево обхода в JSON-файл'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования (по умолчанию INFO)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
def cli(
    root, config_path, user_agent, enforce_robots, robots_at_host_root, json_output, log_level, log_file
):
    """Обойти все страницы хоста, достижимые из ROOT, и напечатать дерево."""
    try:
        cfg = load_config(
            config_path,
            root_url=root,
            user_agent=user_agent,
            enforce_robots=enforce_robots or None,
            robots_at_host_root=robots_at_host_root or None,
            log_level=log_level,
        )
    except (ValidationError, ValueError, TypeError, OSError) as e:
        print_error(f'Ошибка конфигурации: {e}')

    init_logging(level=cfg.log_level, log_file=str(log_file) if log_file else None)

    click.echo(f'starting crawl with root {cfg.root_url}')
    try:
        tree = asyncio.run(start_crawl(cfg))
    except CrawlError as e:
        print_error(f'Ошибка при обходе: {e}')

    click.echo(render_text(tree))

    if json_output:
        try:
            saved_json = render_json(tree, json_output)
            click.echo(f'JSON report: {saved_json}', err=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')


if __name__ == "__main__":
    cli()
