# === FILE: rag_navigator/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for RAG Navigator.

Commands:
  index     Crawl a sitemap and print/save the crawl result
  ask       Crawl a sitemap and answer a question about its pages
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --limit INT         Max. page URLs taken from the sitemap (overrides max_urls)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Example:
  rag-navigator index https://example.com/sitemap.xml --json crawl.json --pretty --limit 20
  rag-navigator ask https://example.com/sitemap.xml "What does the company sell?"
"""
import asyncio
import sys
import json
from pathlib import Path

import click

from rag_navigator import __version__
from rag_navigator.config import load_config
from rag_navigator.logger import DEFAULT_FORMAT, init_logging
from rag_navigator.engine import start_index, start_query
from rag_navigator.report.json_report import render_json
from rag_navigator.report.html_report import render_html

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _run(coro, timeout):
    if timeout:
        return asyncio.run(asyncio.wait_for(coro, timeout=timeout))
    return asyncio.run(coro)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='RAG Navigator, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Max. page URLs taken from the sitemap (overrides max_urls).'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only when omitted).'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records.'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """RAG Navigator: index a site through its sitemap and ask questions about it."""
    init_logging(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'max_urls': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('index', context_settings=CONTEXT_SETTINGS)
@click.argument('sitemap_url')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON result to a file.'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save an HTML report to a file.'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with report.html.j2 (bundled template when omitted).'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output by 2.'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for the whole crawl (seconds).'
)
@click.pass_context
def index(ctx, sitemap_url, json_output, html_output, template_dir, pretty, scan_timeout):
    """Crawl SITEMAP_URL and report indexed, skipped and failed pages."""
    cfg = ctx.obj['config']
    click.echo(f'Indexing {sitemap_url}', err=True)
    try:
        result = _run(start_index(cfg, sitemap_url), scan_timeout)
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {scan_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if not json_output and not html_output:
        click.echo(result.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(result, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(result, template_dir, html_output, sitemap_url=sitemap_url)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('ask', context_settings=CONTEXT_SETTINGS)
@click.argument('sitemap_url')
@click.argument('question')
@click.option(
    '--pretty', is_flag=True,
    help='Indent JSON output by 2.'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for crawl plus answer (seconds).'
)
@click.pass_context
def ask(ctx, sitemap_url, question, pretty, scan_timeout):
    """Crawl SITEMAP_URL, then answer QUESTION from the indexed pages."""
    cfg = ctx.obj['config']
    if not question.strip():
        print_error('Question must not be empty')
    click.echo(f'Indexing {sitemap_url}', err=True)
    try:
        result, answer = _run(start_query(cfg, sitemap_url, question), scan_timeout)
    except asyncio.TimeoutError:
        print_error(f'Did not finish within {scan_timeout} seconds')
    except Exception as e:
        print_error(f'Query failed: {e}')

    for message in result.errors:
        click.secho(message, fg='yellow', err=True)
    click.echo(json.dumps(answer.to_dict(), ensure_ascii=False, indent=2 if pretty else None))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
