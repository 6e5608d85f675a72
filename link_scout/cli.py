# === FILE: link_scout/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of the LinkScout crawler.

Commands:
  crawl     Crawl from the given seeds / search results and print the addresses found
  config    Show the effective configuration

Global options:
  --config PATH       YAML or JSON config file (optional)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

crawl options:
  --url URL               Seed address (repeatable)
  --input-file PATH       File with one seed address per line
  --filter-pattern TEXT   Follow links of addresses containing TEXT (repeatable, OR-ed)
  --search-site SITE      Feed results of a site: search into the crawl
  --search-limit N        Maximum number of search results (default 10)
  --output-path PATH      Write addresses to PATH instead of stdout
  --wget                  Download addresses passing the filter with wget -r
  --max-concurrency N     Cap on simultaneous fetches
  --fetch-timeout SEC     Timeout of a single fetch
  --crawl-timeout SEC     Stop the whole crawl after SEC seconds

Example:
  link_scout crawl -u https://example.com/docs/ -f example.com/docs -o found.txt
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from link_scout import __version__
from link_scout.config import CrawlConfig, load_config
from link_scout.engine import run_crawl
from link_scout.logger import DEFAULT_FORMAT, configure

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON configuration file.'
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
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """LinkScout command group."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _override(cfg: CrawlConfig, **options) -> CrawlConfig:
    """Return *cfg* with every option given on the command line applied on top."""
    update = {}
    for key, value in options.items():
        if value is None or value == ():
            continue
        update[key] = list(value) if isinstance(value, tuple) else value
    if not update:
        return cfg
    return CrawlConfig.model_validate({**cfg.model_dump(), **update})


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'urls', multiple=True, help='Seed address (repeatable)')
@click.option(
    '--input-file', '-i', 'input_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='File with one seed address per line'
)
@click.option(
    '--filter-pattern', '-f', 'filter_patterns',
    multiple=True,
    help="Follow the children of addresses containing this text (repeatable, OR-ed)"
)
@click.option('--search-site', 'search_site', default=None, help='Site to search and add result addresses from')
@click.option('--search-limit', 'search_limit', type=int, default=None, help='Maximum number of search results [10]')
@click.option(
    '--output-path', '-o', 'output_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Write addresses to this file instead of stdout'
)
@click.option('--wget/--no-wget', 'wget', default=None, help='Download addresses passing the filter with wget')
@click.option('--max-concurrency', 'max_concurrency', type=int, default=None, help='Cap on simultaneous fetches')
@click.option('--fetch-timeout', 'fetch_timeout', type=float, default=None, help='Timeout of one fetch (seconds)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None, help='Stop the crawl after this many seconds')
@click.pass_context
def crawl(ctx, urls, input_file, filter_patterns, search_site, search_limit, output_path, wget,
          max_concurrency, fetch_timeout, crawl_timeout):
    """Crawl and print every address found."""
    try:
        cfg = _override(
            ctx.obj['config'],
            urls=urls,
            input_file=input_file,
            filter_patterns=filter_patterns,
            search_site=search_site,
            search_limit=search_limit,
            output_path=output_path,
            wget=wget,
            max_concurrency=max_concurrency,
            fetch_timeout=fetch_timeout,
        )
    except ValidationError as e:
        print_error(f'Invalid options: {e}')

    try:
        if crawl_timeout:
            asyncio.run(asyncio.wait_for(run_crawl(cfg), timeout=crawl_timeout))
        else:
            asyncio.run(run_crawl(cfg))
    except asyncio.TimeoutError:
        click.secho(f'Crawl stopped after {crawl_timeout} seconds', fg='yellow', err=True)
    except KeyboardInterrupt:
        print_error('Crawl interrupted')
    except Exception as e:
        print_error(f'Crawl failed: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
