# expense_tracker/cli.py
import logging
import os
from datetime import date
from functools import partial

import anyio
import click
from dotenv import load_dotenv

from expense_tracker.api import ExpenseTrackerAPI
from expense_tracker.api.errors import ApiError, NotAuthenticatedError
from expense_tracker.api.export import EXPORT_FILENAME
from expense_tracker.config import load_config
from expense_tracker.core.models import (
    EXPENSE,
    TRANSACTION_TYPES,
    DateRange,
    Transaction,
    TransactionFilters,
    User,
    split_categories,
)
from expense_tracker.session import Session

DATE = click.DateTime(formats=["%Y-%m-%d"])
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppContext:
    def __init__(self, api, session, username=None, password=None, user_id=None):
        self.api = api
        self.session = session
        self.username = username
        self.password = password
        self.user_id = user_id

    def run(self, fn, *args, **kwargs):
        try:
            return anyio.run(partial(fn, *args, **kwargs))
        except ApiError as e:
            raise click.ClickException(e.message) from e

    def current_user_id(self):
        """Log in with the stored credentials if needed and return the user id."""
        if self.user_id is not None:
            return self.user_id
        if not self.session.is_authenticated and self.username and self.password:
            result = self.run(self.api.auth.login, self.username, self.password)
            self.session.login(result.user)
        try:
            return self.session.require_user().user_id
        except NotAuthenticatedError:
            raise click.UsageError(
                "Not logged in: pass --user-id or --username/--password."
            ) from None


def _as_date(value):
    return value.date() if value else None


def _money(value):
    return "n/a" if value is None else f"{value:.2f}"


def _echo_user(user: User):
    click.echo(f"{user.user_id}\t{user.username}\t{user.email}")


def _echo_transaction(tx: Transaction):
    click.echo(
        f"{tx.transaction_id}\t{tx.date.isoformat()}\t{tx.type}\t"
        f"{tx.amount:.2f}\t{tx.category_name or tx.category_id}\t{tx.notes}"
    )


def _filters(category, tx_type, start_date, end_date):
    return TransactionFilters(
        category=category,
        type=tx_type,
        start_date=_as_date(start_date),
        end_date=_as_date(end_date),
    )


def filter_options(fn):
    fn = click.option('--end-date', type=DATE, default=None, help='Only include entries on or before this date')(fn)
    fn = click.option('--start-date', type=DATE, default=None, help='Only include entries on or after this date')(fn)
    fn = click.option('--type', 'tx_type', type=click.Choice(TRANSACTION_TYPES), default=None, help='Income or Expense')(fn)
    fn = click.option('--category', type=int, default=None, help='Category id')(fn)
    return fn


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with EXPENSE_TRACKER_* settings'
)
@click.option('--api-url', default=None, help='Backend base URL (overrides every other source)')
@click.option('--username', envvar='EXPENSE_TRACKER_USERNAME', default=None)
@click.option('--password', envvar='EXPENSE_TRACKER_PASSWORD', default=None)
@click.option('--user-id', envvar='EXPENSE_TRACKER_USER_ID', type=int, default=None)
@click.pass_context
def main(ctx, config_path, env_file, api_url, username, password, user_id):
    """
    Record income and expenses against the expense tracker backend,
    fetch the computed summary and download CSV exports.
    """
    if env_file:
        load_dotenv(env_file)
    log_level = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise click.UsageError(
            f"EXPENSE_TRACKER_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}."
        )
    logging.basicConfig(level=log_level)

    cfg = load_config(config_path)
    api = ExpenseTrackerAPI.from_config(cfg, base_url=api_url)
    ctx.obj = AppContext(api, Session(), username, password, user_id)


@main.command()
@click.argument('username')
@click.argument('email')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def register(app, username, email, password):
    """Create an account."""
    result = app.run(app.api.auth.register, username, email, password)
    app.session.login(result.user)
    _echo_user(result.user)


@main.command()
@click.pass_obj
def login(app):
    """Check the --username/--password credentials and show the user."""
    if not (app.username and app.password):
        raise click.UsageError("login needs --username and --password.")
    result = app.run(app.api.auth.login, app.username, app.password)
    app.session.login(result.user)
    _echo_user(result.user)


@main.group()
def transactions():
    """List and edit transactions."""


@transactions.command('list')
@filter_options
@click.pass_obj
def list_transactions(app, category, tx_type, start_date, end_date):
    user_id = app.current_user_id()
    rows = app.run(
        app.api.transactions.list, user_id, _filters(category, tx_type, start_date, end_date)
    )
    for tx in rows:
        _echo_transaction(tx)
    click.echo(f"{len(rows)} transaction(s).")


@transactions.command('add')
@click.option('--category', type=int, required=True, help='Category id')
@click.option('--amount', type=click.FloatRange(min=0), required=True)
@click.option('--type', 'tx_type', type=click.Choice(TRANSACTION_TYPES), default=EXPENSE)
@click.option('--date', 'tx_date', type=DATE, default=None, help='Defaults to today')
@click.option('--notes', default='')
@click.pass_obj
def add_transaction(app, category, amount, tx_type, tx_date, notes):
    user_id = app.current_user_id()
    tx = Transaction(
        user_id=user_id,
        category_id=category,
        date=_as_date(tx_date) or date.today(),
        amount=str(amount),
        type=tx_type,
        notes=notes,
    )
    created = app.run(app.api.transactions.create, tx)
    _echo_transaction(created)


@transactions.command('update')
@click.argument('transaction_id', type=int)
@click.option('--category', type=int, default=None)
@click.option('--amount', type=click.FloatRange(min=0), default=None)
@click.option('--type', 'tx_type', type=click.Choice(TRANSACTION_TYPES), default=None)
@click.option('--date', 'tx_date', type=DATE, default=None)
@click.option('--notes', default=None)
@click.pass_obj
def update_transaction(app, transaction_id, category, amount, tx_type, tx_date, notes):
    changes = {
        'category_id': category,
        'amount': None if amount is None else str(amount),
        'type': tx_type,
        'date': _as_date(tx_date),
        'notes': notes,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise click.UsageError("Nothing to update.")
    updated = app.run(app.api.transactions.update, transaction_id, changes)
    _echo_transaction(updated)


@transactions.command('delete')
@click.argument('transaction_id', type=int)
@click.pass_obj
def delete_transaction(app, transaction_id):
    app.run(app.api.transactions.delete, transaction_id)
    click.echo(f"Deleted transaction {transaction_id}.")


@main.group()
def categories():
    """List and edit categories."""


@categories.command('list')
@click.pass_obj
def list_categories(app):
    user_id = app.current_user_id()
    rows = app.run(app.api.categories.list, user_id)
    default, custom = split_categories(rows)
    click.echo("Default categories:")
    for cat in default:
        click.echo(f"  {cat.category_id}\t{cat.name}")
    click.echo("Custom categories:")
    for cat in custom:
        click.echo(f"  {cat.category_id}\t{cat.name}")


@categories.command('add')
@click.argument('name')
@click.pass_obj
def add_category(app, name):
    clean_name = name.strip()
    if not clean_name:
        raise click.UsageError("Category name is required.")
    user_id = app.current_user_id()
    cat = app.run(app.api.categories.create, user_id, clean_name)
    click.echo(f"{cat.category_id}\t{cat.name}")


@categories.command('rename')
@click.argument('category_id', type=int)
@click.argument('name')
@click.pass_obj
def rename_category(app, category_id, name):
    clean_name = name.strip()
    if not clean_name:
        raise click.UsageError("New name is required.")
    cat = app.run(app.api.categories.update, category_id, clean_name)
    click.echo(f"{cat.category_id}\t{cat.name}")


@categories.command('delete')
@click.argument('category_id', type=int)
@click.pass_obj
def delete_category(app, category_id):
    app.run(app.api.categories.delete, category_id)
    click.echo(f"Deleted category {category_id}.")


@main.command()
@click.option('--start-date', type=DATE, default=None)
@click.option('--end-date', type=DATE, default=None)
@click.pass_obj
def summary(app, start_date, end_date):
    """Show income, expense and balance totals computed by the backend."""
    user_id = app.current_user_id()
    result = app.run(
        app.api.summary.get,
        user_id,
        DateRange(start_date=_as_date(start_date), end_date=_as_date(end_date)),
    )
    click.echo(f"Income:       {_money(result.total_income)}")
    click.echo(f"Expense:      {_money(result.total_expense)}")
    click.echo(f"Net balance:  {_money(result.net_balance)}")
    click.echo(f"Transactions: {result.transaction_count}")
    for row in result.category_breakdown:
        click.echo(f"  {row.category_name}\t{row.total:.2f}\t{row.percentage:.1f}%")


@main.command('export')
@filter_options
@click.option(
    '--dir', 'out_dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory to write transactions.csv into (defaults to download_dir from config)'
)
@click.pass_obj
def export_csv(app, category, tx_type, start_date, end_date, out_dir):
    """Download the filtered transactions as transactions.csv."""
    user_id = app.current_user_id()
    if out_dir:
        app.api.export.download_dir = out_dir
    app.run(
        app.api.export.download, user_id, _filters(category, tx_type, start_date, end_date)
    )
    click.echo(f"Exported transactions to {os.path.join(app.api.export.download_dir, EXPORT_FILENAME)}.")
