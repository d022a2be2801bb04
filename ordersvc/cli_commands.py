"""
Flask CLI commands for database setup and data management.

Commands:
- flask init-db: Create all tables
- flask create-user: Create a user
- flask seed: Insert sample users and products
"""

import click

from ordersvc.database import begin_transaction, create_all, get_session_factory
from ordersvc.domain.product import NewProduct
from ordersvc.domain.user import NewUser
from ordersvc.exceptions import OrderServiceError
from ordersvc.middleware import get_services
from ordersvc.services.coordinator import bind_to_transaction
from ordersvc.types.email import parse_email
from ordersvc.types.money import Money
from ordersvc.types.name import Name
from ordersvc.types.role import Role
from ordersvc.utils.request_context import RequestContext


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table that does not exist yet."""
        create_all(get_session_factory())
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-user')
    @click.option('--name', prompt=True, help='Display name')
    @click.option('--email', prompt=True, help='Email address')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
    @click.option('--role', 'roles', multiple=True, default=['USER'], show_default=True,
                  type=click.Choice([r.value for r in Role], case_sensitive=False))
    def create_user(name, email, password, roles):
        """Create a user."""
        try:
            new_user = NewUser(
                name=Name.parse(name),
                email=parse_email(email),
                roles=Role.parse_many(roles),
                password=password,
            )
            user = get_services().users.create(RequestContext.background(), new_user)
        except OrderServiceError as e:
            raise click.ClickException(e.message)

        click.echo(click.style('User created.', fg='green', bold=True))
        click.echo(f'   Email: {user.email}')
        click.echo(f'   ID: {user.id}')

    @app.cli.command('seed')
    @click.option('--users', 'user_count', default=2, show_default=True, type=click.IntRange(0))
    @click.option('--products', 'product_count', default=5, show_default=True, type=click.IntRange(0))
    def seed(user_count, product_count):
        """Insert sample users and products in one transaction."""
        ctx = RequestContext.background()
        tx = begin_transaction(get_session_factory())
        services = bind_to_transaction(get_services(), tx)
        try:
            for n in range(1, user_count + 1):
                services.users.create(ctx, NewUser(
                    name=Name.parse(f'Seed User {n}'),
                    email=parse_email(f'seed.user{n}@example.com'),
                    roles=(Role.USER,),
                    password=f'seed-password-{n}',
                ))
            for n in range(1, product_count + 1):
                services.products.create(ctx, NewProduct(
                    name=Name.parse(f'Seed Product {n}'),
                    price=Money.must_parse(f'{n * 2.5:.2f}'),
                ))
        except Exception:
            tx.rollback()
            raise
        tx.commit()

        click.echo(click.style(
            f'Seeded {user_count} user(s) and {product_count} product(s).', fg='green'
        ))
