"""`gitme dash`: the interactive pull request dashboard."""

import click

from gitme.cli.commands.config import load_or_create_config
from gitme.cli.context import CliContext
from gitme.tui.app import GitmeDashApp


@click.command("dash")
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds between refreshes, 0 disables them (default: refresh_interval from config)",
)
@click.pass_obj
def dash_cmd(cli_ctx: CliContext, interval: float | None) -> None:
    """Show pull requests awaiting your review and your own pull requests.

    Examples:
        gitme
        gitme dash --interval 60
    """
    config = load_or_create_config(cli_ctx.config_path)
    try:
        dash_ctx = cli_ctx.dash_context_factory(config, cli_ctx.config_path)
    except (RuntimeError, ValueError) as e:
        raise click.ClickException(f"Could not get a GitHub token: {e}") from e

    app = GitmeDashApp(dash_ctx, refresh_interval=interval)
    dash_ctx.tui_runner.run(app)
