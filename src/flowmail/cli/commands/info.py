"""
Show the plugin descriptor the runner receives from Plugin.Info.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="info", help="Show the plugin descriptor")
console = Console()


@app.command()
def info(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
):
    """
    Print plugin name, version and the action parameters it accepts.
    """
    from flowmail.extensions.email.mail_plugin import MailPlugin

    descriptor = MailPlugin().info()

    if format == "json":
        typer.echo(json.dumps(descriptor.model_dump(mode="json"), indent=2))
        return
    if format != "table":
        typer.echo(f"❌ Unknown format '{format}'. Use 'table' or 'json'.", err=True)
        raise typer.Exit(1)

    console.print(
        f"[bold]{descriptor.name}[/bold] {descriptor.version} "
        f"({descriptor.type}, by {descriptor.author})"
    )
    console.print(descriptor.actions.description)

    table = Table(title="Parameters")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Required")
    table.add_column("Description")
    for spec in descriptor.actions.params:
        table.add_row(
            spec.key,
            spec.type,
            str(spec.default),
            "yes" if spec.required else "no",
            spec.description,
        )
    console.print(table)
