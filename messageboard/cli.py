import click
from flask.cli import with_appcontext
from messageboard.extensions import db
from messageboard.models.message import Message
from messageboard.services.messages import list_messages
from messageboard.services.schema import ensure_schema

@click.group()
def schema():
    """Database schema helpers."""

@schema.command("ensure")
@with_appcontext
def schema_ensure():
    created = ensure_schema(db.engine)
    state = "created" if created else "already present"
    click.echo(f"Table {Message.__tablename__}: {state}")

@click.group()
def messages():
    """Read-only message board ops."""

@messages.command("recent")
@click.option("--limit", type=click.IntRange(min=1), default=10, show_default=True)
@with_appcontext
def messages_recent(limit):
    ensure_schema(db.engine)
    page = list_messages(db.session, page=1, per_page=limit)
    if not page.items:
        click.echo("No messages yet.")
        return
    for m in page.items:
        click.echo(f"#{m.id} {m.created_at:%Y-%m-%d %H:%M} {m.name}: {m.topic}")
    click.echo(f"Showing {len(page.items)} of {page.total}")

def register_cli(app):
    app.cli.add_command(schema)
    app.cli.add_command(messages)
