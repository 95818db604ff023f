# === FILE: url_counter/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of UrlCounter.

Commands:
  count     Read URLs (one per line), fetch each and count a substring in the body
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file in addition to stderr
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

`count` options:
  --input FILE        URL list, '-' for stdin (default)
  --concurrency K     Maximum number of URLs processed at once
  --pattern TEXT      Substring to count
  --timeout SEC       Per-fetch timeout
  --report-failures   Log dropped URLs as warnings

Additionally:
  --version, -v       Show the UrlCounter version

Example:
  printf 'https://go.dev\\nhttps://go.dev\\n' | url-counter count
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from url_counter import __version__
from url_counter.config import CounterConfig, load_config
from url_counter.engine import start_count
from url_counter.errors import InputReadError
from url_counter.logger import DEFAULT_FORMAT, init_logging
from url_counter.pipeline.models import UrlCount

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def format_result(result: UrlCount, pattern: str) -> str:
    return f'Url: {result.url} - "{pattern}" occurrence: {result.count}'


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='UrlCounter, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """UrlCounter command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('count', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--input', '-i', 'source',
    default='-',
    type=click.File('r', encoding='utf-8'),
    help="File with one URL per line ('-' for stdin)"
)
@click.option(
    '--concurrency', '-k', 'concurrency',
    type=int,
    default=None,
    help='Maximum number of URLs processed at once (overrides config)'
)
@click.option(
    '--pattern', '-p', 'pattern',
    default=None,
    help='Substring to count (overrides config)'
)
@click.option(
    '--timeout', '-t', 'timeout',
    type=float,
    default=None,
    help='Per-fetch timeout in seconds (overrides config)'
)
@click.option(
    '--report-failures', 'report_failures',
    is_flag=True,
    help='Log every dropped URL as a warning'
)
@click.pass_context
def count(ctx, source, concurrency, pattern, timeout, report_failures):
    """Fetch every URL from the input and count the pattern in each body."""
    try:
        cfg: CounterConfig = ctx.obj['config'].override(
            concurrency=concurrency,
            pattern=pattern,
            timeout=timeout,
            report_failures=report_failures or None,
        )
    except ValidationError as e:
        print_error(f'Invalid option: {e}')

    def emit(result: UrlCount) -> None:
        click.echo(format_result(result, cfg.pattern))

    try:
        summary = asyncio.run(start_count(cfg, source, emit))
    except InputReadError as e:
        print_error(f'Input error: {e}')

    click.echo(f'Total: {summary.total}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
