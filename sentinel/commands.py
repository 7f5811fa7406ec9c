import click

from sentinel.extensions import db
from sentinel.models.user import User, ROLES


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables (use `flask db upgrade` once migrations exist)."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("create-user")
    @click.option("--email", required=True)
    @click.option("--name", required=True)
    @click.option("--password", required=True)
    @click.option("--role", type=click.Choice(ROLES), default="mission_control", show_default=True)
    def create_user(email, name, password, role):
        """Create an account, e.g. a mission control operator."""
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            click.echo(f"User with email '{email}' already exists.")
            return

        user = User(email=email, name=name, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"{role} '{email}' created (id={user.id}).")
