"""CLI for the document store binding."""

import json

import typer

from docbench.binding import DocumentDBBinding, Status
from docbench.config import get_settings
from docbench.errors import ConfigurationError

app = typer.Typer(
    name="docbench",
    help="Document store binding for the load-generation harness",
    no_args_is_help=True,
)


def _load_settings():
    try:
        return get_settings()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(2)


@app.command("config")
def show_config():
    """Print the resolved settings (credential masked)."""
    settings = _load_settings()
    typer.echo(json.dumps(settings.public_dict(), indent=2))


@app.command("smoke")
def smoke(
    table: str = typer.Option("usertable", help="Table (collection) to use"),
    key: str = typer.Option("docbench-smoke", help="Record key to write and delete"),
):
    """Run insert, read, update, scan and delete once against the configured store."""
    settings = _load_settings()
    binding = DocumentDBBinding(settings)
    binding.init()

    failed = False
    try:
        steps = []

        steps.append(("insert", binding.insert(table, key, {"field0": "value0", "field1": "value1"})))

        record: dict[str, str] = {}
        steps.append(("read", binding.read(table, key, None, record)))

        steps.append(("update", binding.update(table, key, {"field1": "updated"})))

        records: list[dict[str, str]] = []
        steps.append(("scan", binding.scan(table, key, 1, None, records)))

        steps.append(("delete", binding.delete(table, key)))

        for name, status in steps:
            typer.echo(f"  {name:<8} {status.value}")
            if status is not Status.OK:
                failed = True

        if record:
            typer.echo(f"\nRead back: {json.dumps(record, sort_keys=True)}")
    finally:
        binding.cleanup()

    if failed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
