"""
CLI main entry point for flowmail
"""

import importlib
import sys
from pathlib import Path

import click
import typer.main

from flowmail.core.config_manager import get_config_manager
from flowmail.logger import configure_logging, get_logger, resolve_level

logger = get_logger(__name__)


def _load_env_file() -> None:
    """
    Load .env file from the working directory or next to the entry script.
    """
    possible_paths = [Path.cwd() / ".env"]
    if sys.argv:
        main_script = Path(sys.argv[0]).resolve()
        if main_script.is_file():
            possible_paths.append(main_script.parent / ".env")

    get_config_manager().load_env_files(possible_paths, override=False)
    # FLOWMAIL_LOG_LEVEL may come from the .env file
    configure_logging(resolve_level())


class LazyGroup(click.Group):
    """A Click Group that lazy-loads Typer command modules."""

    def __init__(
        self,
        name: str | None = None,
        commands: dict[str, click.Command] | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(name=name, commands=commands or {}, **kwargs)
        self._lazy_commands = {
            "serve": ("flowmail.cli.commands.serve", "app", "Run the plugin RPC server"),
            "info": ("flowmail.cli.commands.info", "app", "Show the plugin descriptor"),
            "send": ("flowmail.cli.commands.send", "app", "Send one email without the runner"),
        }

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(list(self.commands) + list(self._lazy_commands)))

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands for help without loading them."""
        commands = []
        for cmd_name in self.list_commands(ctx):
            if cmd_name in self._lazy_commands:
                _, _, help_text = self._lazy_commands[cmd_name]
                commands.append((cmd_name, help_text))
            elif cmd_name in self.commands:
                cmd = self.commands[cmd_name]
                commands.append((cmd_name, cmd.get_short_help_str(formatter.width)))

        if commands:
            with formatter.section("Commands"):
                formatter.write_dl(commands)

    def get_command(self, ctx: click.Context, name: str) -> click.Command | None:
        if name in self.commands:
            return self.commands[name]

        if name not in self._lazy_commands:
            return None

        module_path, attr_name, _ = self._lazy_commands[name]
        try:
            module = importlib.import_module(module_path)
            typer_app = getattr(module, attr_name)
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load command {name}: {e}")
            return None

        click_cmd = typer.main.get_command(typer_app)
        self.commands[name] = click_cmd
        return click_cmd


@click.group(
    cls=LazyGroup,
    name="flowmail",
    help="SMTP mail action plugin for workflow runners",
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Main CLI entry point."""
    _load_env_file()


@cli.command()
def version() -> None:
    """Show version information."""
    from flowmail import __version__

    click.echo(f"flowmail version {__version__}")


def main() -> None:
    """Entry point for console script."""
    cli()


app = cli

if __name__ == "__main__":
    app()
