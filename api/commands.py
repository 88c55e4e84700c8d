"""Flask CLI commands: `flask --app api purge-expired-tokens`."""
import click

from services import auth as auth_service


def register_commands(app):
    @app.cli.command("purge-expired-tokens")
    def purge_expired_tokens():
        """Delete refresh and reset tokens whose ledger expiry has passed."""
        refresh_count, reset_count = auth_service.purge_expired_tokens()
        click.echo(f"Removed {refresh_count} refresh tokens and {reset_count} reset tokens.")
