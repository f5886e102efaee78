# finance_tracker/cli.py
import logging
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from finance_tracker.cache import LocalCache
from finance_tracker.config import DEFAULT_CONFIG, load_config, save_config
from finance_tracker.email_parser import parse_email
from finance_tracker.errors import ValidationError
from finance_tracker.outputs import get_output
from finance_tracker.session import TrackerSession
from finance_tracker.stores import get_store
from finance_tracker.utils import format_currency


LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def _apply_env(cfg):
    google_cfg = cfg.setdefault('google', {})
    if os.getenv('FINANCE_TRACKER_SPREADSHEET_ID'):
        google_cfg['spreadsheet_id'] = os.environ['FINANCE_TRACKER_SPREADSHEET_ID']
    if os.getenv('GOOGLE_APPLICATION_CREDENTIALS'):
        google_cfg['service_account_file'] = os.environ['GOOGLE_APPLICATION_CREDENTIALS']
    return cfg


def _session(ctx):
    obj = ctx.obj
    if obj.get('session') is None:
        cfg = obj['config']
        store = None if obj['offline'] else get_store(cfg['store'], cfg)
        cache = LocalCache(Path(cfg['cache_dir']))
        session = TrackerSession(store, cache)
        session.load()
        if session.source == 'cache' and store is not None:
            click.echo("⚠️  Remote store unavailable, using local data.", err=True)
        obj['session'] = session
    return obj['session']


def _echo_submission(label, submission):
    tx = submission.transaction
    click.echo(f"✅ {label} added: {format_currency(tx.amount)} {tx.description} ({tx.category})")
    if not submission.synced:
        click.echo("⚠️  Saved locally only; the remote store was not updated.", err=True)
    click.echo(f"Balance: {format_currency(submission.metrics.current_balance)}")


def _echo_transactions(transactions):
    if not transactions:
        click.echo("No transactions yet.")
        return
    for tx in transactions:
        click.echo(
            f"{tx.date or '-':<10}  {format_currency(tx.amount):>12}  "
            f"{tx.description or 'No description'} • {tx.category} • {tx.type.value}"
        )


@click.group()
@click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used if it does not exist)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with FINANCE_TRACKER_SPREADSHEET_ID / GOOGLE_APPLICATION_CREDENTIALS'
)
@click.option(
    '--offline',
    is_flag=True,
    default=False,
    help='Skip the remote store and work from the local cache only'
)
@click.option(
    '--log-level', 'log_level',
    default=lambda: os.getenv('FINANCE_TRACKER_LOG_LEVEL', 'WARNING'),
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help='Logging verbosity'
)
@click.pass_context
def main(ctx, config_path, env_file, offline, log_level):
    """
    Track payments and income in a Google Sheet with a local fallback,
    and report balance, 30-day spending, goal progress and budget status.
    """
    if env_file:
        load_dotenv(env_file)
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['config'] = _apply_env(load_config(Path(config_path)))
    ctx.obj['offline'] = offline


@main.command()
@click.pass_context
def init(ctx):
    """Write a config.yaml with the default settings."""
    path = Path(ctx.obj['config_path'])
    if path.exists():
        raise click.ClickException(f"{path} already exists")
    save_config(DEFAULT_CONFIG, path)
    click.echo(f"Wrote default configuration to {path}")


@main.command()
@click.argument('amount')
@click.argument('description')
@click.option('--category', '-c', default=None, help='Spending category, e.g. groceries')
@click.pass_context
def pay(ctx, amount, description, category):
    """Record a payment of AMOUNT (always stored as an outflow)."""
    session = _session(ctx)
    try:
        submission = session.submit_payment(amount, description, category)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_submission("Payment", submission)


@main.command()
@click.argument('amount')
@click.argument('source')
@click.pass_context
def income(ctx, amount, source):
    """Record income of AMOUNT from SOURCE."""
    session = _session(ctx)
    try:
        submission = session.submit_income(amount, source)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_submission("Income", submission)


@main.command()
@click.pass_context
def dashboard(ctx):
    """Show balance, 30-day spending, goal progress and recent transactions."""
    session = _session(ctx)
    metrics = session.metrics()
    click.echo(f"Current balance:  {format_currency(metrics.current_balance)}")
    click.echo(f"Last 30 days:     {format_currency(metrics.monthly_spending)}")
    for goal in metrics.goal_progress:
        click.echo(
            f"{goal.name} progress: {format_currency(goal.paid)} / "
            f"{format_currency(goal.target)} ({goal.display_percent:.0f}%)"
        )
    click.echo("\nRecent transactions:")
    _echo_transactions(session.recent())


@main.command()
@click.pass_context
def budget(ctx):
    """Show spending against each discretionary budget."""
    session = _session(ctx)
    statuses = session.metrics().budget_status
    if not statuses:
        click.echo("No discretionary budgets configured.")
        return
    for status in statuses:
        label = 'OVER BUDGET' if status.is_over else 'On Track'
        click.echo(
            f"{status.category.upper():<12} {format_currency(status.spent)} / "
            f"{format_currency(status.budget)}  ({status.percent_used:.0f}%)  "
            f"Remaining: {format_currency(status.remaining)} | Status: {label}"
        )


@main.command()
@click.option('--limit', default=10, show_default=True, type=int, help='Number of transactions')
@click.pass_context
def recent(ctx, limit):
    """List the most recently entered transactions, newest first."""
    _echo_transactions(_session(ctx).recent(limit))


@main.command()
@click.option(
    '--format', 'output_format',
    default='json',
    type=click.Choice(['json', 'excel']),
    help='Export format'
)
@click.pass_context
def export(ctx, output_format):
    """Export the full financial state to a dated file."""
    session = _session(ctx)
    output = get_output(output_format, ctx.obj['config'])
    path = session.export(output)
    click.echo(f"Exported {len(session.state.transactions)} transaction(s) to {path}")


@main.command('parse-email')
@click.argument('email_file', type=click.File('r'), default='-')
@click.option('--dry-run', is_flag=True, default=False, help='Only show what would be recorded')
@click.pass_context
def parse_email_cmd(ctx, email_file, dry_run):
    """Record the charge described in a card alert email (stdin by default)."""
    cfg = ctx.obj['config']
    parsed = parse_email(
        email_file.read(),
        cfg.get('category_keywords', {}),
        default_category=cfg.get('default_category', 'flex'),
    )
    if parsed is None:
        raise click.ClickException("No transaction found in email")
    click.echo(f"Found {format_currency(parsed.amount)} at {parsed.description} ({parsed.category})")
    if dry_run:
        return
    session = _session(ctx)
    try:
        submission = session.submit_payment(parsed.amount, parsed.description, parsed.category)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_submission("Payment", submission)


@main.command('test-connection')
@click.pass_context
def test_connection(ctx):
    """Check that the remote store can be reached."""
    cfg = ctx.obj['config']
    store = get_store(cfg['store'], cfg)
    ok, message = store.test_connection()
    click.echo(f"{'✅' if ok else '❌'} {message}")
    if not ok:
        ctx.exit(1)


@main.command('clear-cache')
@click.confirmation_option(prompt='Clear all local data? The remote store is not affected.')
@click.pass_context
def clear_cache(ctx):
    """Delete the local snapshot."""
    cache = LocalCache(Path(ctx.obj['config']['cache_dir']))
    removed = cache.clear()
    click.echo(f"Removed {removed}" if removed else "No local data to clear.")
