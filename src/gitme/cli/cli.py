import logging
from pathlib import Path

import click

from gitme.cli.commands.config import config_group
from gitme.cli.commands.dash import dash_cmd
from gitme.cli.context import CliContext

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

LOG_FORMAT = "%(asctime)s %(name)s - %(levelname)s - %(message)s"


def _configure_debug_logging(log_path: Path) -> None:
    """Send debug logs to a file; the dashboard owns the terminal."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=log_path, level=logging.DEBUG, format=LOG_FORMAT)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(package_name="gitme")
@click.option("--debug", is_flag=True, help="Write debug logs to gitme.log next to the config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="GITME_CONFIG",
    default=None,
    help="Path to config.toml",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_path: Path | None) -> None:
    """Dashboard of the GitHub pull requests that need you."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = CliContext.for_production(config_path)

    if debug:
        _configure_debug_logging(ctx.obj.config_path.parent / "gitme.log")

    if ctx.invoked_subcommand is None:
        ctx.invoke(dash_cmd)


cli.add_command(config_group)
cli.add_command(dash_cmd)
