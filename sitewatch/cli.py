# === FILE: sitewatch/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for SiteWatch.

Commands:
  crawl       Crawl the configured site into a new run folder
  compare     Compare two run folders and report added/removed/changed files
  scheduled   Crawl, compare originalFolder with latestFolder and rotate them
  config      Show the current configuration

Common options:
  --config PATH       Path to the YAML/JSON config (default: configs/default.yaml)
  --limit INT         Maximum number of URLs to visit (overrides url_limit)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

Example:
  sitewatch --config configs/default.yaml crawl --step
  sitewatch compare originalFolder latestFolder --json diff.json --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from sitewatch import __version__
from sitewatch.config import load_config
from sitewatch.crawler.models import RoundSummary
from sitewatch.engine import Engine
from sitewatch.logger import DEFAULT_FORMAT, init_logging
from sitewatch.report.html_report import render_html
from sitewatch.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def confirm_next_round(summary: RoundSummary) -> bool:
    """Step-mode prompt shown between crawl rounds, read off the event loop."""
    click.echo(
        f'Currently parsed: {summary.visited_count} urls in {summary.elapsed:.2f} s. '
        f'{summary.pending_count} ready to be parsed'
    )
    return await asyncio.to_thread(click.confirm, 'Continue with the next round?', default=True)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteWatch, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=0),
    default=None,
    help='Maximum number of URLs to visit (overrides url_limit)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stdout only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, limit, log_level, log_file, log_format):
    """SiteWatch command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    if limit is not None:
        cfg = cfg.model_copy(update={'url_limit': limit})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--step/--no-step', 'step', default=None,
    help='Ask for confirmation between rounds (overrides iteration_break)'
)
@click.option(
    '--scheduled', is_flag=True,
    help='Use originalFolder/latestFolder instead of a timestamped folder'
)
@click.pass_context
def crawl(ctx, step, scheduled):
    """Crawl the configured site."""
    cfg = ctx.obj['config']
    updates = {}
    if step is not None:
        updates['iteration_break'] = step
    if scheduled:
        updates['run_scheduled'] = True
    if updates:
        cfg = cfg.model_copy(update=updates)

    click.echo(f'Starting crawl of {cfg.root_url}')
    try:
        result = Engine(cfg, confirm=confirm_next_round).run_crawl()
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if not result.success:
        print_error('Unable to complete web scrape successfully! No resource was saved.')
    click.echo(f'Web scrape completed successfully! {result.url_count} urls parsed ({result.reason.value})')
    click.echo(f'Output folder: {result.output_dir}')


@cli.command('compare', context_settings=CONTEXT_SETTINGS)
@click.argument('first')
@click.argument('second')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Folder with Jinja2 templates (bundled templates when omitted)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent the JSON output (2 spaces)'
)
@click.pass_context
def compare(ctx, first, second, json_output, html_output, template_dir, pretty):
    """Compare two run folders (paths or names under file_path)."""
    cfg = ctx.obj['config']
    try:
        report = Engine(cfg).run_compare(first, second)
    except FileNotFoundError as e:
        print_error(f'Comparison failed: {e}')

    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('scheduled', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def scheduled(ctx):
    """Scheduled run: crawl, compare originalFolder with latestFolder, rotate."""
    cfg = ctx.obj['config']
    try:
        result, report = Engine(cfg).run_scheduled()
    except Exception as e:
        print_error(f'Scheduled run failed: {e}')

    click.echo(f'{result.url_count} urls parsed into {result.output_dir}')
    if report is not None:
        click.echo(
            f'Comparison: {len(report.files_added)} added, {len(report.files_removed)} removed, '
            f'{len(report.files_changed)} changed'
        )


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2, exclude={'email': {'password'}}))


if __name__ == "__main__":
    cli()
