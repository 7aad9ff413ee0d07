"""
Command line tools for the accounts database.

``create-db`` must be run once against a new database: the workflows look up
the ``user`` and ``guest`` roles but never create them.
"""

from typing import Optional

import click

from . import app_logging
from .domain import IdentityResult
from .factory import create_app
from .identity import accounts, util
from .identity.models import DBRole, DBUser


@click.group()
@click.option('--log-level', default=None,
              help='Overrides the LOGLEVEL configuration value.')
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Manage the MARO accounts database."""
    app = create_app()
    app_logging.setup_logger(log_level or app.config['LOGLEVEL'])
    ctx.obj = app


@cli.command('create-db')
@click.pass_obj
def create_db(app) -> None:
    """Create tables and provision roles."""
    with app.app_context():
        util.create_all()
    click.echo('Database ready')


@cli.command('drop-db')
@click.confirmation_option(prompt='Drop all accounts tables?')
@click.pass_obj
def drop_db(app) -> None:
    """Drop all tables."""
    with app.app_context():
        util.drop_all()
    click.echo('Dropped')


def _fail_on(result: IdentityResult) -> None:
    if not result.succeeded:
        raise click.ClickException(result.first_error or 'Failed')


@cli.command('create-user')
@click.option('--username', prompt='Username (email or phone number)')
@click.option('--password', prompt=True, hide_input=True,
              confirmation_prompt=True)
@click.option('--email', default=None)
@click.option('--phone-number', default=None)
@click.pass_obj
def create_user(app, username: str, password: str, email: Optional[str],
                phone_number: Optional[str]) -> None:
    """
    Create a confirmed user in the ``user`` role. For dev/test purposes only.

    .. warning: DO NOT USE THIS ON A PRODUCTION DATABASE.
    """
    with app.app_context():
        util.create_all()
        user = DBUser(
            username=username,
            email=email,
            phone_number=phone_number,
            email_confirmed=email is not None,
            phone_number_confirmed=phone_number is not None
        )
        _fail_on(accounts.create(user, password))
        _fail_on(accounts.add_to_role(user, DBRole.USER))
        click.echo(user.user_id)
