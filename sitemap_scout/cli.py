# === FILE: sitemap_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for SitemapScout.

Commands:
  map       Map a sitemap (URL or local file) and print/save the result
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

map options:
  --file PATH         Read the root document from disk instead of fetching it
  --json PATH         Save the JSON result to a file
  --pretty            Indent JSON output (2 spaces)
  --unique            Drop duplicate URLs from the output
  --scan-timeout SEC  Timeout for the whole traversal (seconds)
  --max-depth, --retries, --timeout-ms, --user-agent, --proxy,
  --no-validate-content-type, --extractor
                      Per-run overrides of the configuration

Extra:
  --version, -v       Show the SitemapScout version

Example:
  sitemap-scout map https://example.com/sitemap_index.xml --max-depth 3 --pretty
"""
import sys
import asyncio
from pathlib import Path

import click
from pydantic import ValidationError

from sitemap_scout import __version__
from sitemap_scout.config import load_config
from sitemap_scout.logger import configure as configure_logging
from sitemap_scout.engine import map_buffer, map_site
from sitemap_scout.report.json_report import render_json
from sitemap_scout.utils import remove_duplicates

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
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
    help='Log file (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SitemapScout command group."""
    configure_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Could not load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('map', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option(
    '--file', '-f', 'file_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Local sitemap file (plain or gzip) used as the root document'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON result to a file'
)
@click.option('--pretty', is_flag=True, help='Indent JSON output (2 spaces)')
@click.option('--unique', is_flag=True, help='Drop duplicate URLs from the output')
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Timeout for the whole traversal (seconds)'
)
@click.option('--max-depth', type=int, default=None, help='Maximum number of index levels (1-10)')
@click.option('--retries', type=int, default=None, help='Extra attempts per fetch (1-10)')
@click.option('--timeout-ms', type=int, default=None, help='Per-request timeout (ms)')
@click.option('--user-agent', default=None, help='User-Agent header')
@click.option('--proxy', 'proxy_uri', default=None, help='Proxy URI for every request')
@click.option(
    '--no-validate-content-type', 'no_validate', is_flag=True,
    help='Accept any Content-Type'
)
@click.option(
    '--extractor', type=click.Choice(['lines', 'xml']), default=None,
    help='URL extraction strategy'
)
@click.pass_context
def map_command(ctx, url, file_path, json_output, pretty, unique, scan_timeout, max_depth,
                retries, timeout_ms, user_agent, proxy_uri, no_validate, extractor):
    """Map a sitemap tree and print or save the result."""
    if not url and not file_path:
        print_error('Give a sitemap URL or --file PATH')
    cfg = ctx.obj['config'].model_copy(deep=True)
    try:
        if max_depth is not None:
            cfg.max_depth = max_depth
        if extractor is not None:
            cfg.extractor = extractor
        if retries is not None:
            cfg.fetch.max_retries = retries
        if timeout_ms is not None:
            cfg.fetch.timeout_ms = timeout_ms
        if user_agent is not None:
            cfg.fetch.user_agent = user_agent
        if proxy_uri is not None:
            cfg.fetch.proxy_uri = proxy_uri
        if no_validate:
            cfg.fetch.validate_content_type = False
    except ValidationError as e:
        print_error(f'Invalid option: {e}')

    if file_path:
        coro = map_buffer(cfg, file_path.read_bytes(), str(file_path))
    else:
        coro = map_site(cfg, url)
    try:
        if scan_timeout:
            result = asyncio.run(asyncio.wait_for(coro, timeout=scan_timeout))
        else:
            result = asyncio.run(coro)
    except asyncio.TimeoutError:
        print_error(f'Mapping did not finish within {scan_timeout} seconds')

    if unique:
        result.urls = remove_duplicates(result.urls)

    if json_output:
        try:
            saved_json = render_json(result, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Could not save JSON: {e}')
        return

    click.echo(result.json(pretty=pretty))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
