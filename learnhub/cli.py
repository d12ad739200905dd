import click

from .extensions import db
from .seed import seed_demo_users


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('Database initialized.')

    @app.cli.command('seed')
    def seed():
        """Create the demo teacher and student accounts."""
        db.create_all()
        created = seed_demo_users()
        if created:
            click.echo(f'Created {created} demo users.')
        else:
            click.echo('Demo users already exist.')
